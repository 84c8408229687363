"""
Prometheus-compatible metrics for observability.

Tracks key operational counters:
- Bookings created (by service)
- Booking status transitions (by from/to status)
- Payment methods recorded (by method)
- Pricing lookup misses (by reason)

Usage:
    from laundry.lib.metrics import get_metrics_collector

    metrics = get_metrics_collector()
    metrics.increment_bookings_created(service_name="Mixed Wash Dry Fold")
    metrics.increment_status_transitions(from_status="pending", to_status="processing")

    # Export for Prometheus
    prometheus_output = metrics.export_prometheus()
"""

from typing import Dict, Tuple
from threading import Lock


class MetricsCollector:
    """
    Prometheus-style metrics collector for Laundry Desk.

    Counters:
    - bookings_created_total: Bookings accepted from the booking form (labels: service)
    - booking_status_transitions_total: Status changes (labels: from_status, to_status)
    - payment_methods_recorded_total: Payment method writes (labels: method)
    - pricing_lookup_misses_total: Quotes that fell back to 0 (labels: reason)

    Thread-safe for concurrent increments.
    """

    def __init__(self):
        self._lock = Lock()

        # Counters: key = (metric_name, labels_tuple), value = count
        self._counters: Dict[Tuple[str, Tuple[Tuple[str, str], ...]], int] = {}

    def _get_counter_key(self, metric_name: str, labels: Dict[str, str]) -> Tuple[str, Tuple[Tuple[str, str], ...]]:
        """Generate unique key for counter with sorted labels."""
        sorted_labels = tuple(sorted(labels.items()))
        return (metric_name, sorted_labels)

    def _increment(self, metric_name: str, labels: Dict[str, str], amount: int = 1):
        """Thread-safe increment of counter."""
        key = self._get_counter_key(metric_name, labels)
        with self._lock:
            self._counters[key] = self._counters.get(key, 0) + amount

    def _get_value(self, metric_name: str, labels: Dict[str, str]) -> int:
        """Get current value of counter."""
        key = self._get_counter_key(metric_name, labels)
        with self._lock:
            return self._counters.get(key, 0)

    # ===== Booking Metrics =====

    def increment_bookings_created(self, service_name: str, amount: int = 1):
        """Increment bookings created counter."""
        self._increment("bookings_created_total", {"service": service_name}, amount)

    def increment_status_transitions(self, from_status: str, to_status: str, amount: int = 1):
        """
        Increment status transition counter.

        Args:
            from_status: Status before the write
            to_status: Status after the write
            amount: Increment amount (default 1)
        """
        labels = {
            "from_status": from_status.lower(),
            "to_status": to_status.lower(),
        }
        self._increment("booking_status_transitions_total", labels, amount)

    def increment_payment_methods(self, method: str, amount: int = 1):
        """Increment payment method writes."""
        self._increment("payment_methods_recorded_total", {"method": method.lower()}, amount)

    # ===== Pricing Metrics =====

    def increment_pricing_misses(self, reason: str, amount: int = 1):
        """
        Increment pricing lookup misses.

        Args:
            reason: unknown_service or no_tier
            amount: Increment amount
        """
        self._increment("pricing_lookup_misses_total", {"reason": reason.lower()}, amount)

    # ===== Export =====

    def export_prometheus(self) -> str:
        """
        Export all metrics in Prometheus text format.

        Returns:
            Prometheus-compatible text output
        """
        output_lines = []

        # Group counters by metric name
        metrics_by_name: Dict[str, list] = {}
        with self._lock:
            for (metric_name, labels_tuple), value in self._counters.items():
                metrics_by_name.setdefault(metric_name, []).append((dict(labels_tuple), value))

        for metric_name in sorted(metrics_by_name.keys()):
            output_lines.append(f"# HELP {metric_name} {self._get_help_text(metric_name)}")
            output_lines.append(f"# TYPE {metric_name} counter")

            for labels_dict, value in sorted(metrics_by_name[metric_name], key=lambda x: str(x[0])):
                labels_str = ",".join([f'{k}="{v}"' for k, v in sorted(labels_dict.items())])
                output_lines.append(f"{metric_name}{{{labels_str}}} {value}")

            output_lines.append("")  # Blank line between metrics

        return "\n".join(output_lines)

    def _get_help_text(self, metric_name: str) -> str:
        """Get help text for metric."""
        help_texts = {
            "bookings_created_total": "Total number of bookings created",
            "booking_status_transitions_total": "Total number of booking status changes",
            "payment_methods_recorded_total": "Total number of payment method writes",
            "pricing_lookup_misses_total": "Total number of price quotes that matched no tier",
        }
        return help_texts.get(metric_name, "Counter metric")

    def get_counter_value(self, metric_name: str, labels: Dict[str, str]) -> int:
        """
        Get current value of a specific counter.

        Args:
            metric_name: Name of the metric
            labels: Label filters

        Returns:
            Current counter value
        """
        return self._get_value(metric_name, labels)

    def reset_all(self):
        """Reset all counters (for testing)."""
        with self._lock:
            self._counters.clear()


# Global singleton instance
_metrics_collector: MetricsCollector | None = None
_metrics_lock = Lock()


def get_metrics_collector() -> MetricsCollector:
    """
    Get global metrics collector singleton.

    Returns:
        MetricsCollector instance
    """
    global _metrics_collector
    if _metrics_collector is None:
        with _metrics_lock:
            if _metrics_collector is None:
                _metrics_collector = MetricsCollector()
    return _metrics_collector


def reset_metrics():
    """Reset global metrics collector (for testing)."""
    with _metrics_lock:
        if _metrics_collector is not None:
            _metrics_collector.reset_all()
