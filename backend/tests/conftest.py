"""
Shared fixtures.

Tests run against an in-memory SQLite database; the schema is rebuilt for
every test.
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JSON_LOGS", "false")

from datetime import date  # noqa: E402
from types import SimpleNamespace  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from laundry.api.app import app  # noqa: E402
from laundry.lib.db import SessionLocal, drop_db, init_db  # noqa: E402
from laundry.lib.events import BookingEventBus  # noqa: E402
from laundry.lib.metrics import reset_metrics  # noqa: E402
from laundry.models.bookings import BookingStatus  # noqa: E402
from laundry.models.services import Service  # noqa: E402


@pytest.fixture(autouse=True)
def fresh_database():
    drop_db()
    init_db()
    reset_metrics()
    yield
    reset_metrics()


@pytest.fixture
def db_session():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client():
    """Test client for FastAPI app."""
    return TestClient(app)


@pytest.fixture
def event_bus():
    return BookingEventBus()


@pytest.fixture
def wash_fold(db_session):
    """A service that exists in the weight-tier table."""
    service = Service(name="Mixed Wash Dry Fold", price="R170-R470")
    db_session.add(service)
    db_session.commit()
    return service


@pytest.fixture
def make_booking():
    """
    Factory for plain booking records used by the pure view-model and
    analytics functions.
    """
    def _make(
        first_name="Thandi",
        last_name="Nkosi",
        phone="0821234567",
        status=BookingStatus.PENDING,
        collection_date=date(2024, 3, 15),
        departure_date=None,
        created_at=None,
        total_price=None,
        payment_method=None,
        service=None,
        **extra,
    ):
        return SimpleNamespace(
            first_name=first_name,
            last_name=last_name,
            phone=phone,
            status=status,
            collection_date=collection_date,
            departure_date=departure_date or collection_date,
            created_at=created_at or collection_date,
            total_price=total_price,
            payment_method=payment_method,
            service=service,
            **extra,
        )

    return _make
