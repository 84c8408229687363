"""
Booking model - customer laundry bookings.
"""
from datetime import date, datetime, timezone
from typing import Optional
from uuid import uuid4, UUID
import enum

from sqlalchemy import String, Text, Numeric, Date, Uuid, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from laundry.lib.db import Base, UTCDateTime
from laundry.models.services import Service


class BookingStatus(str, enum.Enum):
    """
    Booking status state machine.
    pending → processing → completed, cancelled from any non-terminal state.
    confirmed and collected are legacy intermediate states.
    """
    PENDING = "pending"
    CONFIRMED = "confirmed"
    COLLECTED = "collected"
    PROCESSING = "processing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class PaymentMethod(str, enum.Enum):
    """How a completed booking was paid. Recorded for bookkeeping only."""
    CARD = "card"
    CASH = "cash"


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


class Booking(Base):
    """
    Booking entity - one customer drop-off for one service.

    `service_id` is a weak reference: deleting a service leaves its bookings
    in place with an unresolved `service`.
    """
    __tablename__ = "bookings"

    # Primary key
    id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid4,
    )

    # Customer
    first_name: Mapped[str] = mapped_column(String(255), nullable=False)
    last_name: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str] = mapped_column(String(50), nullable=False)

    # Service (no FK constraint, services are hard-deleted)
    service_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        nullable=False,
        index=True,
    )
    service: Mapped[Optional[Service]] = relationship(
        Service,
        primaryjoin="foreign(Booking.service_id) == Service.id",
        lazy="joined",
    )

    # Calendar dates, timezone-naive
    collection_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    departure_date: Mapped[date] = mapped_column(Date, nullable=False)

    # Status
    status: Mapped[BookingStatus] = mapped_column(
        SQLEnum(BookingStatus, name="booking_status", values_callable=_enum_values),
        nullable=False,
        default=BookingStatus.PENDING,
        index=True,
    )

    # Pricing
    total_price: Mapped[Optional[float]] = mapped_column(
        Numeric(10, 2, asdecimal=False),
        nullable=True,
    )
    weight_kg: Mapped[Optional[float]] = mapped_column(
        Numeric(6, 2, asdecimal=False),
        nullable=True,
    )
    payment_method: Mapped[Optional[PaymentMethod]] = mapped_column(
        SQLEnum(PaymentMethod, name="payment_method", values_callable=_enum_values),
        nullable=True,
    )

    additional_details: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    completed_at: Mapped[Optional[datetime]] = mapped_column(
        UTCDateTime(),
        nullable=True,
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def __repr__(self) -> str:
        return f"<Booking(id={self.id}, status={self.status}, collection_date={self.collection_date})>"
