"""
Unit tests for AnalyticsService aggregates.
"""
from datetime import date, datetime, timezone
from types import SimpleNamespace

import pytest

from laundry.models.bookings import BookingStatus
from laundry.services.analytics_service import (
    AnalyticsService,
    booking_revenue,
    compute_monthly_stats,
    dashboard_summary,
)
from laundry.services.booking_service import BookingService


FOLD = SimpleNamespace(name="Mixed Wash Dry Fold", price="R170-R470")
IRON = SimpleNamespace(name="Mixed Wash Dry Iron", price="R230")


@pytest.mark.unit
def test_booking_revenue_prefers_total_price(make_booking):
    assert booking_revenue(make_booking(total_price=300, service=FOLD)) == 300
    assert booking_revenue(make_booking(total_price=0, service=FOLD)) == 0
    assert booking_revenue(make_booking(service=FOLD)) == 320
    assert booking_revenue(make_booking(service=IRON)) == 230
    assert booking_revenue(make_booking()) == 0


@pytest.mark.unit
def test_monthly_stats_totals(make_booking):
    bookings = [
        make_booking(status=BookingStatus.COMPLETED, total_price=300, service=FOLD,
                     created_at=datetime(2024, 3, 2, 8, tzinfo=timezone.utc)),
        make_booking(status=BookingStatus.PENDING, service=FOLD,
                     created_at=datetime(2024, 3, 2, 15, tzinfo=timezone.utc)),
        make_booking(status=BookingStatus.CANCELLED, total_price=170, service=IRON,
                     created_at=datetime(2024, 3, 20, 10, tzinfo=timezone.utc)),
        make_booking(status=BookingStatus.PROCESSING, total_price=600, service=IRON,
                     created_at=datetime(2024, 4, 1, 10, tzinfo=timezone.utc)),
    ]

    stats = compute_monthly_stats(bookings, 2024, 3, date_field="created_at")

    assert stats["total_bookings"] == 3
    assert stats["total_revenue"] == 300 + 320 + 170
    assert stats["average_order_value"] == pytest.approx(790 / 3)
    assert stats["completed_bookings"] == 1
    assert stats["open_bookings"] == 1
    assert stats["cancelled_bookings"] == 1
    assert stats["status_breakdown"] == {"completed": 1, "pending": 1, "cancelled": 1}
    assert stats["service_stats"] == {
        "Mixed Wash Dry Fold": {"count": 2, "revenue": 620},
        "Mixed Wash Dry Iron": {"count": 1, "revenue": 170},
    }
    assert stats["daily_revenue"] == {2: 620, 20: 170}


@pytest.mark.unit
def test_service_totals_add_up(make_booking):
    bookings = [
        make_booking(total_price=price, service=service)
        for price, service in [(100, FOLD), (200, IRON), (50, None), (75, FOLD)]
    ]

    stats = compute_monthly_stats(bookings, 2024, 3, date_field="collection_date")

    assert sum(s["count"] for s in stats["service_stats"].values()) == stats["total_bookings"]
    assert sum(s["revenue"] for s in stats["service_stats"].values()) == stats["total_revenue"]
    assert stats["service_stats"]["Unknown service"] == {"count": 1, "revenue": 50}


@pytest.mark.unit
def test_empty_month_has_zero_average(make_booking):
    stats = compute_monthly_stats([make_booking(collection_date=date(2024, 5, 1))], 2024, 3)

    assert stats["total_bookings"] == 0
    assert stats["total_revenue"] == 0
    assert stats["average_order_value"] == 0
    assert stats["daily_revenue"] == {}


@pytest.mark.unit
def test_date_field_selects_month_membership(make_booking):
    booking = make_booking(
        total_price=100,
        created_at=datetime(2024, 2, 28, 12, tzinfo=timezone.utc),
        collection_date=date(2024, 3, 4),
        departure_date=date(2024, 4, 2),
    )

    assert compute_monthly_stats([booking], 2024, 2, "created_at")["total_bookings"] == 1
    assert compute_monthly_stats([booking], 2024, 3, "collection_date")["daily_revenue"] == {4: 100}
    assert compute_monthly_stats([booking], 2024, 4, "departure_date")["total_bookings"] == 1


@pytest.mark.unit
def test_month_membership_defaults_to_collection_date(make_booking):
    booking = make_booking(
        total_price=100,
        created_at=datetime(2024, 2, 28, 12, tzinfo=timezone.utc),
        collection_date=date(2024, 3, 4),
    )

    assert compute_monthly_stats([booking], 2024, 3)["daily_revenue"] == {4: 100}
    assert compute_monthly_stats([booking], 2024, 2)["total_bookings"] == 0


@pytest.mark.unit
def test_created_at_uses_business_calendar(make_booking):
    """22:30 UTC on the last day of March is already April in Johannesburg."""
    booking = make_booking(total_price=100, created_at=datetime(2024, 3, 31, 22, 30, tzinfo=timezone.utc))

    assert compute_monthly_stats([booking], 2024, 3, "created_at")["total_bookings"] == 0
    assert compute_monthly_stats([booking], 2024, 4, "created_at")["daily_revenue"] == {1: 100}


@pytest.mark.unit
def test_unknown_date_field_is_rejected(make_booking):
    with pytest.raises(ValueError):
        compute_monthly_stats([make_booking()], 2024, 3, date_field="completed_at")


@pytest.mark.unit
def test_dashboard_summary(make_booking):
    today = date(2024, 3, 15)
    bookings = [
        make_booking(status=BookingStatus.PENDING, collection_date=today),
        make_booking(status=BookingStatus.PROCESSING, collection_date=today),
        make_booking(status=BookingStatus.PENDING, collection_date=date(2024, 3, 16)),
        make_booking(status=BookingStatus.COMPLETED, collection_date=date(2024, 3, 1)),
    ]

    assert dashboard_summary(bookings, today) == {
        "total_bookings": 4,
        "todays_collections": 2,
        "pending_bookings": 2,
        "processing_bookings": 1,
    }


@pytest.mark.unit
def test_analytics_service_reads_from_store(db_session, wash_fold):
    bookings = BookingService(db_session)
    booking = bookings.create_booking({
        "first_name": "Thandi",
        "last_name": "Nkosi",
        "phone": "0821234567",
        "service_id": wash_fold.id,
        "collection_date": date(2024, 3, 15),
        "departure_date": date(2024, 3, 18),
    })
    bookings.update_status(booking.id, BookingStatus.COMPLETED, total_price=450)

    stats = AnalyticsService(db_session).get_monthly_stats(2024, 3, "collection_date")

    assert stats["total_revenue"] == 450
    assert stats["completed_bookings"] == 1
    assert stats["period"] == {"year": 2024, "month": 3, "date_field": "collection_date"}
