"""
Booking store operations and the booking status state machine.

State machine:
    pending ─┬─> processing ─┬─> completed ──> completed (re-stamp)
             │               └─> cancelled
             ├─> completed
             └─> cancelled

confirmed and collected behave like pending: they can move to any of the
three administrator targets. cancelled is terminal; completed only accepts
a repeated completion, which re-stamps completed_at.

Side effects per target:
- processing: a positive weight reprices the booking from the tier table
- completed: completed_at is set to now, a supplied price becomes final
- cancelled: nothing besides the status
"""
from datetime import date, datetime, timedelta, timezone
from typing import Any, Callable, Dict, FrozenSet, List, Mapping, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from laundry.lib.events import BOOKING_CREATED, BOOKING_UPDATED, BookingEventBus
from laundry.lib.logging import get_logger
from laundry.lib.metrics import get_metrics_collector
from laundry.models.bookings import Booking, BookingStatus, PaymentMethod
from laundry.services.pricing import calculate_price


logger = get_logger(__name__)


ADMIN_STATUS_TARGETS: FrozenSet[BookingStatus] = frozenset({
    BookingStatus.PROCESSING,
    BookingStatus.COMPLETED,
    BookingStatus.CANCELLED,
})

_ALLOWED_TRANSITIONS: Dict[BookingStatus, FrozenSet[BookingStatus]] = {
    BookingStatus.PENDING: ADMIN_STATUS_TARGETS,
    BookingStatus.CONFIRMED: ADMIN_STATUS_TARGETS,
    BookingStatus.COLLECTED: ADMIN_STATUS_TARGETS,
    BookingStatus.PROCESSING: ADMIN_STATUS_TARGETS,
    BookingStatus.COMPLETED: frozenset({BookingStatus.COMPLETED}),
    BookingStatus.CANCELLED: frozenset(),
}

EDITABLE_FIELDS: FrozenSet[str] = frozenset({
    "first_name",
    "last_name",
    "phone",
    "service_id",
    "collection_date",
    "departure_date",
    "additional_details",
})


class BookingNotFoundError(LookupError):
    """Raised when a booking id does not exist."""

    def __init__(self, booking_id: UUID):
        super().__init__(f"Booking {booking_id} not found")
        self.booking_id = booking_id


class UnsupportedStatusTargetError(ValueError):
    """Raised when a status is not offered by the status-update workflow."""

    def __init__(self, target: BookingStatus):
        allowed = ", ".join(sorted(s.value for s in ADMIN_STATUS_TARGETS))
        super().__init__(f"Status '{target.value}' cannot be set directly (allowed: {allowed})")
        self.target = target


class BookingStatusTransitionError(ValueError):
    """Raised when an invalid booking status transition is requested."""

    def __init__(self, current: BookingStatus, target: BookingStatus):
        super().__init__(f"Invalid booking status transition: {current.value} -> {target.value}")
        self.current = current
        self.target = target


def validate_transition(current: BookingStatus, target: BookingStatus) -> None:
    """
    Validate that a transition from current -> target is allowed.

    Raises UnsupportedStatusTargetError for targets outside the
    administrator workflow and BookingStatusTransitionError for moves out of
    a terminal status.
    """
    if target not in ADMIN_STATUS_TARGETS:
        raise UnsupportedStatusTargetError(target)

    if target not in _ALLOWED_TRANSITIONS[current]:
        raise BookingStatusTransitionError(current=current, target=target)


def is_settled(booking) -> bool:
    return booking.status == BookingStatus.COMPLETED and booking.payment_method is not None


def is_awaiting_payment(booking) -> bool:
    return booking.status == BookingStatus.COMPLETED and booking.payment_method is None


def is_editable(booking) -> bool:
    """Core fields are only offered for editing while the booking is pending."""
    return booking.status == BookingStatus.PENDING


def apply_status_transition(
    booking: Booking,
    new_status: BookingStatus,
    total_price: Optional[float] = None,
    weight_kg: Optional[float] = None,
    now: Optional[datetime] = None,
) -> None:
    """
    Apply a validated transition and its derived fields to a booking in memory.

    Args:
        booking: Booking with its service resolved
        new_status: Target status
        total_price: Price supplied by the caller
        weight_kg: Weight supplied by the caller
        now: Completion timestamp; defaults to the current UTC time
    """
    has_weight = weight_kg is not None and weight_kg > 0

    if new_status == BookingStatus.PROCESSING:
        if has_weight:
            service_name = booking.service.name if booking.service else ""
            booking.weight_kg = weight_kg
            booking.total_price = calculate_price(service_name, weight_kg)
        elif total_price is not None:
            booking.total_price = total_price

    elif new_status == BookingStatus.COMPLETED:
        # Re-stamped on every completion write, not only the first
        booking.completed_at = now or datetime.now(timezone.utc)
        if total_price is not None:
            booking.total_price = total_price
        if has_weight:
            booking.weight_kg = weight_kg

    booking.status = new_status


class BookingService:
    """
    Booking reads and writes.

    Every successful write publishes on the event bus so that views holding
    their own booking cache can re-fetch.
    """

    def __init__(
        self,
        db: Session,
        event_bus: Optional[BookingEventBus] = None,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self.db = db
        self.event_bus = event_bus
        self.clock = clock
        self.metrics = get_metrics_collector()

    # ===== Reads =====

    def list_bookings(self) -> List[Booking]:
        """All bookings with their service, ordered by collection date."""
        stmt = select(Booking).order_by(Booking.collection_date, Booking.created_at)
        return list(self.db.execute(stmt).scalars().all())

    def list_bookings_by_collection_date(self, collection_date: date) -> List[Booking]:
        stmt = (
            select(Booking)
            .where(Booking.collection_date == collection_date)
            .order_by(Booking.created_at)
        )
        return list(self.db.execute(stmt).scalars().all())

    def list_upcoming_collections(self, today: date) -> Dict[str, List[Booking]]:
        """Bookings collecting today and tomorrow."""
        return {
            "today": self.list_bookings_by_collection_date(today),
            "tomorrow": self.list_bookings_by_collection_date(today + timedelta(days=1)),
        }

    def get_booking(self, booking_id: UUID) -> Booking:
        booking = self.db.get(Booking, booking_id, populate_existing=True)
        if booking is None:
            raise BookingNotFoundError(booking_id)
        return booking

    # ===== Writes =====

    def create_booking(self, fields: Mapping[str, Any]) -> Booking:
        """
        Insert a booking from the public booking form.

        The status is left to the column default (pending).
        """
        booking = Booking(**self._editable_subset(fields))
        self.db.add(booking)
        self._commit()
        booking = self.get_booking(booking.id)

        service_name = booking.service.name if booking.service else "unknown"
        self.metrics.increment_bookings_created(service_name)
        logger.info(
            "Booking created",
            extra={"booking_id": str(booking.id), "service": service_name},
        )
        self._publish(BOOKING_CREATED, booking.id)
        return booking

    def update_status(
        self,
        booking_id: UUID,
        new_status: BookingStatus,
        total_price: Optional[float] = None,
        weight_kg: Optional[float] = None,
    ) -> Booking:
        """
        Move a booking to a new status and persist the derived fields.

        Raises:
            BookingNotFoundError: unknown booking
            UnsupportedStatusTargetError: target not offered to administrators
            BookingStatusTransitionError: booking is in a terminal status
        """
        new_status = BookingStatus(new_status)
        booking = self.get_booking(booking_id)
        previous_status = booking.status

        validate_transition(previous_status, new_status)
        apply_status_transition(
            booking,
            new_status,
            total_price=total_price,
            weight_kg=weight_kg,
            now=self.clock(),
        )
        self._commit()
        booking = self.get_booking(booking_id)

        self.metrics.increment_status_transitions(previous_status.value, new_status.value)
        logger.info(
            "Booking status updated",
            extra={
                "booking_id": str(booking_id),
                "from_status": previous_status.value,
                "to_status": new_status.value,
                "total_price": booking.total_price,
                "weight_kg": booking.weight_kg,
            },
        )
        self._publish(BOOKING_UPDATED, booking_id)
        return booking

    def set_payment_method(self, booking_id: UUID, method: PaymentMethod) -> Booking:
        """
        Record how the booking was paid. Status and timestamps are untouched;
        writing the same method again is harmless.
        """
        method = PaymentMethod(method)
        booking = self.get_booking(booking_id)
        booking.payment_method = method
        self._commit()
        booking = self.get_booking(booking_id)

        self.metrics.increment_payment_methods(method.value)
        logger.info(
            "Booking payment method recorded",
            extra={"booking_id": str(booking_id), "payment_method": method.value},
        )
        self._publish(BOOKING_UPDATED, booking_id)
        return booking

    def update_booking(self, booking_id: UUID, fields: Mapping[str, Any]) -> Booking:
        """
        Free-form edit of the customer-facing fields.

        The pending-only editing rule is a presentation policy (see
        is_editable) and is not enforced here.
        """
        booking = self.get_booking(booking_id)
        for name, value in self._editable_subset(fields).items():
            setattr(booking, name, value)
        self._commit()
        booking = self.get_booking(booking_id)

        logger.info(
            "Booking updated",
            extra={"booking_id": str(booking_id), "fields": sorted(fields)},
        )
        self._publish(BOOKING_UPDATED, booking_id)
        return booking

    # ===== Helpers =====

    @staticmethod
    def _editable_subset(fields: Mapping[str, Any]) -> Dict[str, Any]:
        unknown = set(fields) - EDITABLE_FIELDS
        if unknown:
            raise ValueError(f"Fields cannot be edited: {', '.join(sorted(unknown))}")
        return dict(fields)

    def _commit(self) -> None:
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

    def _publish(self, event_type: str, booking_id: UUID) -> None:
        if self.event_bus is not None:
            self.event_bus.publish(event_type, str(booking_id))
