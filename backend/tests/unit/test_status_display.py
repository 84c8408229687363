"""
Unit tests for the status presentation table.
"""
import pytest

from laundry.lib.status_display import STATUS_DISPLAY, status_display
from laundry.models.bookings import BookingStatus


@pytest.mark.unit
def test_every_status_has_a_display_entry():
    assert set(STATUS_DISPLAY) == set(BookingStatus)


@pytest.mark.unit
@pytest.mark.parametrize(
    "status,label,color",
    [
        (BookingStatus.PENDING, "Pending", "yellow"),
        (BookingStatus.CONFIRMED, "Confirmed", "blue"),
        (BookingStatus.COLLECTED, "Collected", "purple"),
        (BookingStatus.PROCESSING, "Processing", "orange"),
        (BookingStatus.COMPLETED, "Completed", "green"),
        (BookingStatus.CANCELLED, "Cancelled", "red"),
    ],
)
def test_status_display(status, label, color):
    display = status_display(status)
    assert display.label == label
    assert display.color == color


@pytest.mark.unit
def test_status_display_accepts_raw_values():
    assert status_display("processing") == STATUS_DISPLAY[BookingStatus.PROCESSING]
