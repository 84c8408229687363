"""
Booking board view-model.

Derives the presentation structure for the bookings board from the fetched
booking list: month and name filters, grouping by collection date, and a
priority order inside each date that puts completed-but-unpaid bookings
first. build_booking_view is a pure function of its inputs; BookingBoardState
is the one place that holds the board's mutable UI state.
"""
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Callable, Dict, Iterable, List, Optional, Set

from laundry.lib.dates import as_date, business_today, month_start, shift_month
from laundry.lib.events import BookingEventBus
from laundry.lib.logging import get_logger
from laundry.models.bookings import BookingStatus
from laundry.services.booking_service import is_awaiting_payment, is_settled


logger = get_logger(__name__)


# ===== Filtering =====

def matches_month(booking, selected_month: date) -> bool:
    collection_date = as_date(booking.collection_date)
    return (
        collection_date.year == selected_month.year
        and collection_date.month == selected_month.month
    )


def matches_name(booking, search_query: str) -> bool:
    query = search_query.strip().lower()
    if not query:
        return True
    return query in f"{booking.first_name} {booking.last_name}".lower()


def filter_bookings(bookings: Iterable, selected_month: date, search_query: str = "") -> List:
    """Bookings collecting in the selected month whose name matches the search."""
    return [
        booking for booking in bookings
        if matches_month(booking, selected_month) and matches_name(booking, search_query)
    ]


def search_bookings(bookings: Iterable, search_query: str) -> List:
    """
    Dashboard-wide search over every booking.

    Unlike the board filter this also matches the phone number.
    """
    query = search_query.strip().lower()
    if not query:
        return list(bookings)
    return [
        booking for booking in bookings
        if query in f"{booking.first_name} {booking.last_name}".lower()
        or query in booking.phone.lower()
    ]


# ===== Ordering =====

def status_priority(booking) -> int:
    """Lower sorts first: bookings that need attention lead their date group."""
    if is_awaiting_payment(booking):
        return 1
    if is_settled(booking):
        return 2
    if booking.status == BookingStatus.PROCESSING:
        return 3
    if booking.status == BookingStatus.PENDING:
        return 4
    if booking.status == BookingStatus.CANCELLED:
        return 5
    return 6


def _within_group_key(booking):
    # Priority ascending, then collection date newest first
    return status_priority(booking), -as_date(booking.collection_date).toordinal()


def group_by_collection_date(bookings: Iterable) -> Dict[str, List]:
    """Partition bookings by ISO collection date, preserving input order."""
    groups: Dict[str, List] = {}
    for booking in bookings:
        groups.setdefault(as_date(booking.collection_date).isoformat(), []).append(booking)
    return groups


@dataclass
class DateGroup:
    date: str
    bookings: List[Any]

    @property
    def count(self) -> int:
        return len(self.bookings)


@dataclass
class BookingView:
    selected_month: date
    search_query: str
    groups: List[DateGroup] = field(default_factory=list)

    @property
    def total(self) -> int:
        return sum(group.count for group in self.groups)

    def bookings(self) -> List[Any]:
        return [booking for group in self.groups for booking in group.bookings]


def build_booking_view(bookings: Iterable, selected_month: date, search_query: str = "") -> BookingView:
    """
    Filter, group and sort bookings for the board.

    Args:
        bookings: Bookings with their service resolved
        selected_month: Any date inside the month to show
        search_query: Free text matched against "first last" name

    Returns:
        Date groups newest first, each sorted by status priority
    """
    selected_month = month_start(selected_month)
    filtered = filter_bookings(bookings, selected_month, search_query)
    grouped = group_by_collection_date(filtered)

    groups = [
        DateGroup(date=date_key, bookings=sorted(grouped[date_key], key=_within_group_key))
        for date_key in sorted(grouped, reverse=True)
    ]
    return BookingView(selected_month=selected_month, search_query=search_query, groups=groups)


# ===== State holder =====

class BookingBoardState:
    """
    UI state for the bookings board: selected month, search text, expanded
    dates and bookings, and the cached booking list.

    The cache is replaced only by a successful fetch. When an event bus is
    given, every booking event triggers a re-fetch.
    """

    def __init__(
        self,
        fetch_bookings: Callable[[], Iterable],
        event_bus: Optional[BookingEventBus] = None,
        today: Callable[[], date] = business_today,
    ):
        self._fetch_bookings = fetch_bookings
        self._today = today
        self.bookings: List[Any] = []
        self.search_query = ""
        self.selected_month = month_start(today())
        self.expanded_dates: Set[str] = {today().isoformat()}
        self.expanded_bookings: Set[str] = set()
        self._unsubscribe = event_bus.subscribe(self._on_booking_event) if event_bus else None

    @property
    def view(self) -> BookingView:
        return build_booking_view(self.bookings, self.selected_month, self.search_query)

    def refresh(self) -> BookingView:
        bookings = list(self._fetch_bookings())
        self.bookings = bookings
        return self.view

    def _on_booking_event(self, event: Dict[str, Any]) -> None:
        logger.debug("Refreshing booking board", extra={"event_type": event["event_type"]})
        self.refresh()

    def set_search_query(self, search_query: str) -> None:
        self.search_query = search_query

    def select_month(self, month: date) -> None:
        self.selected_month = month_start(month)
        today = self._today()
        if self.selected_month == month_start(today):
            self.expanded_dates.add(today.isoformat())

    def previous_month(self) -> None:
        self.select_month(shift_month(self.selected_month, -1))

    def next_month(self) -> None:
        self.select_month(shift_month(self.selected_month, 1))

    def toggle_date(self, date_key: str) -> None:
        self.expanded_dates ^= {date_key}

    def toggle_booking(self, booking_id: str) -> None:
        self.expanded_bookings ^= {str(booking_id)}

    def close(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
