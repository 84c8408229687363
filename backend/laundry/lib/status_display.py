"""
Single status → presentation mapping shared by every booking surface.
"""
from typing import Dict, NamedTuple

from laundry.models.bookings import BookingStatus


class StatusDisplay(NamedTuple):
    label: str
    color: str
    icon: str


STATUS_DISPLAY: Dict[BookingStatus, StatusDisplay] = {
    BookingStatus.PENDING: StatusDisplay("Pending", "yellow", "clock"),
    BookingStatus.CONFIRMED: StatusDisplay("Confirmed", "blue", "check-circle"),
    BookingStatus.COLLECTED: StatusDisplay("Collected", "purple", "package"),
    BookingStatus.PROCESSING: StatusDisplay("Processing", "orange", "clock"),
    BookingStatus.COMPLETED: StatusDisplay("Completed", "green", "check-circle"),
    BookingStatus.CANCELLED: StatusDisplay("Cancelled", "red", "x-circle"),
}

_missing = set(BookingStatus) - set(STATUS_DISPLAY)
if _missing:
    raise RuntimeError(
        "STATUS_DISPLAY has no entry for: " + ", ".join(sorted(s.value for s in _missing))
    )


def status_display(status: BookingStatus) -> StatusDisplay:
    return STATUS_DISPLAY[BookingStatus(status)]
