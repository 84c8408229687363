"""
AnalyticsService - revenue and booking metrics for the admin dashboard.

Provides aggregated metrics for:
- Monthly revenue, order counts and average order value
- Status breakdown
- Per-service booking counts and revenue
- Day-of-month revenue histogram
- Dashboard summary (today's collections, pending and in-progress work)

All aggregates are one fold over the fetched bookings. Revenue uses the
booking's total price and falls back to the service's price label.
"""
from datetime import date
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy.orm import Session

from laundry.lib.dates import as_date
from laundry.lib.logging import get_logger
from laundry.models.bookings import BookingStatus
from laundry.services.booking_service import BookingService
from laundry.services.legacy_pricing import estimate_price_from_label


logger = get_logger(__name__)


DATE_FIELDS = ("created_at", "collection_date", "departure_date")

OPEN_STATUSES = frozenset({
    BookingStatus.PENDING,
    BookingStatus.CONFIRMED,
    BookingStatus.COLLECTED,
    BookingStatus.PROCESSING,
})


def booking_revenue(booking) -> float:
    """Total price when set, otherwise the estimate from the service's price label."""
    if booking.total_price is not None:
        return float(booking.total_price)
    if booking.service is not None:
        return estimate_price_from_label(booking.service.price)
    return 0.0


def compute_monthly_stats(
    bookings: Iterable,
    year: int,
    month: int,
    date_field: str = "collection_date",
) -> Dict[str, Any]:
    """
    Aggregate bookings whose `date_field` falls in the given month.

    Args:
        bookings: Bookings with their service resolved
        year: Calendar year
        month: Calendar month (1-12)
        date_field: collection_date (default), created_at or departure_date

    Returns:
        {
            'total_revenue': float,
            'total_bookings': int,
            'completed_bookings': int,
            'open_bookings': int,  # pending, confirmed, collected, processing
            'cancelled_bookings': int,
            'average_order_value': float,
            'status_breakdown': {status: count},
            'service_stats': {service_name: {'count': int, 'revenue': float}},
            'daily_revenue': {day_of_month: revenue},
        }
    """
    if date_field not in DATE_FIELDS:
        raise ValueError(f"date_field must be one of {', '.join(DATE_FIELDS)}")

    total_revenue = 0.0
    total_bookings = 0
    status_breakdown: Dict[str, int] = {}
    service_stats: Dict[str, Dict[str, float]] = {}
    daily_revenue: Dict[int, float] = {}

    for booking in bookings:
        day = as_date(getattr(booking, date_field))
        if day.year != year or day.month != month:
            continue

        revenue = booking_revenue(booking)
        total_revenue += revenue
        total_bookings += 1

        status = BookingStatus(booking.status).value
        status_breakdown[status] = status_breakdown.get(status, 0) + 1

        service_name = booking.service.name if booking.service is not None else "Unknown service"
        stats = service_stats.setdefault(service_name, {"count": 0, "revenue": 0.0})
        stats["count"] += 1
        stats["revenue"] += revenue

        daily_revenue[day.day] = daily_revenue.get(day.day, 0.0) + revenue

    open_bookings = sum(status_breakdown.get(s.value, 0) for s in OPEN_STATUSES)

    return {
        "total_revenue": total_revenue,
        "total_bookings": total_bookings,
        "completed_bookings": status_breakdown.get(BookingStatus.COMPLETED.value, 0),
        "open_bookings": open_bookings,
        "cancelled_bookings": status_breakdown.get(BookingStatus.CANCELLED.value, 0),
        "average_order_value": total_revenue / total_bookings if total_bookings else 0.0,
        "status_breakdown": status_breakdown,
        "service_stats": service_stats,
        "daily_revenue": dict(sorted(daily_revenue.items())),
    }


def dashboard_summary(bookings: Iterable, today: date) -> Dict[str, int]:
    """Counts shown on the dashboard landing page."""
    bookings = list(bookings)
    return {
        "total_bookings": len(bookings),
        "todays_collections": sum(1 for b in bookings if as_date(b.collection_date) == today),
        "pending_bookings": sum(1 for b in bookings if b.status == BookingStatus.PENDING),
        "processing_bookings": sum(1 for b in bookings if b.status == BookingStatus.PROCESSING),
    }


class AnalyticsService:
    """
    Service for calculating booking analytics.

    Loads the booking list once per call and folds over it in memory.
    """

    def __init__(self, db: Session, booking_service: Optional[BookingService] = None):
        """
        Initialize AnalyticsService.

        Args:
            db: Database session
            booking_service: Store used to load bookings (defaults to one on `db`)
        """
        self.db = db
        self.bookings = booking_service or BookingService(db)

    def _load(self) -> List:
        return self.bookings.list_bookings()

    def get_monthly_stats(self, year: int, month: int, date_field: str = "collection_date") -> Dict[str, Any]:
        logger.info(
            "Calculating monthly stats",
            extra={"year": year, "month": month, "date_field": date_field},
        )
        stats = compute_monthly_stats(self._load(), year, month, date_field)
        stats["period"] = {"year": year, "month": month, "date_field": date_field}
        return stats

    def get_dashboard_summary(self, today: date) -> Dict[str, int]:
        return dashboard_summary(self._load(), today)
