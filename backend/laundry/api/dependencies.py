"""
API dependencies for FastAPI dependency injection.

Provides database sessions, the booking event bus and the service objects
built on top of them.
"""
from fastapi import Depends
from sqlalchemy.orm import Session

from laundry.lib.db import get_db as get_db_session
from laundry.lib.events import BookingEventBus, get_event_bus
from laundry.services.analytics_service import AnalyticsService
from laundry.services.booking_service import BookingService
from laundry.services.catalog_service import CatalogService


# Re-export get_db for convenience
get_db = get_db_session


def get_catalog_service(db: Session = Depends(get_db)) -> CatalogService:
    return CatalogService(db)


def get_booking_service(
    db: Session = Depends(get_db),
    event_bus: BookingEventBus = Depends(get_event_bus),
) -> BookingService:
    return BookingService(db, event_bus=event_bus)


def get_analytics_service(
    db: Session = Depends(get_db),
    booking_service: BookingService = Depends(get_booking_service),
) -> AnalyticsService:
    return AnalyticsService(db, booking_service=booking_service)
