"""
In-process publish/subscribe channel for booking change notifications.

Writers publish after a successful store write; any view that keeps its own
booking cache subscribes and re-fetches. Delivery is synchronous, in
subscription order, and fire-and-forget: a failing listener is logged and
skipped.
"""
import uuid
from datetime import datetime, timezone
from threading import Lock
from typing import Any, Callable, Dict, List, Optional

from laundry.lib.logging import get_logger


logger = get_logger(__name__)

BOOKING_CREATED = "booking.created"
BOOKING_UPDATED = "booking.updated"

Listener = Callable[[Dict[str, Any]], None]


def build_event(event_type: str, data: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    return {
        "event_id": str(uuid.uuid4()),
        "event_type": event_type,
        "occurred_at": datetime.now(timezone.utc).isoformat(),
        "data": data or {},
    }


class BookingEventBus:
    """Subscribers are called with the event envelope built by build_event."""

    def __init__(self):
        self._lock = Lock()
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a listener.

        Returns:
            A callable that removes the listener again
        """
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            self.unsubscribe(listener)

        return unsubscribe

    def unsubscribe(self, listener: Listener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    @property
    def listener_count(self) -> int:
        with self._lock:
            return len(self._listeners)

    def publish(self, event_type: str, booking_id: Optional[str] = None) -> Dict[str, Any]:
        """
        Notify every listener that a booking was created or changed.

        Args:
            event_type: BOOKING_CREATED or BOOKING_UPDATED
            booking_id: Booking that changed, if known

        Returns:
            The published event
        """
        event = build_event(
            event_type,
            {"booking_id": booking_id} if booking_id else None,
        )

        with self._lock:
            listeners = list(self._listeners)

        for listener in listeners:
            try:
                listener(event)
            except Exception:
                logger.exception(
                    "Booking event listener failed",
                    extra={"event_type": event_type, "event_id": event["event_id"]},
                )

        logger.debug(
            "Booking event published",
            extra={"event_type": event_type, "listeners": len(listeners)},
        )
        return event


_event_bus: BookingEventBus | None = None
_event_bus_lock = Lock()


def get_event_bus() -> BookingEventBus:
    """
    Application-wide bus used by the API layer.

    Services receive it through their constructor; this accessor only wires
    the default instance for FastAPI dependencies.
    """
    global _event_bus
    if _event_bus is None:
        with _event_bus_lock:
            if _event_bus is None:
                _event_bus = BookingEventBus()
    return _event_bus
