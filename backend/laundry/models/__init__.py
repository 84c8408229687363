"""
SQLAlchemy models package.
Import all models here to ensure they're registered with Base.metadata.
"""
from laundry.models.services import Service
from laundry.models.bookings import Booking, BookingStatus, PaymentMethod

__all__ = [
    "Service",
    "Booking",
    "BookingStatus",
    "PaymentMethod",
]
