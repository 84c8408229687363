"""
Tests for error handler middleware and custom exceptions.
"""
from uuid import uuid4

import pytest
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient
from pydantic import BaseModel, Field

from laundry.api.middleware.error_handler import (
    BadRequestException,
    ConflictException,
    NotFoundException,
    ValidationException,
    register_exception_handlers,
    to_app_exception,
)
from laundry.models.bookings import BookingStatus
from laundry.services.booking_service import (
    BookingNotFoundError,
    BookingStatusTransitionError,
    UnsupportedStatusTargetError,
)
from laundry.services.catalog_service import ServiceNotFoundError


@pytest.fixture
def app() -> FastAPI:
    app = FastAPI()
    register_exception_handlers(app)
    return app


@pytest.mark.unit
def test_not_found_exception():
    exc = NotFoundException("Booking", "b-42")

    assert exc.message == "Booking with id 'b-42' not found"
    assert exc.status_code == 404
    assert exc.details == {"resource": "Booking", "resource_id": "b-42"}


@pytest.mark.unit
def test_not_found_exception_without_id():
    exc = NotFoundException("Service")

    assert exc.message == "Service not found"
    assert exc.status_code == 404


@pytest.mark.unit
def test_validation_exception():
    exc = ValidationException("Invalid month", errors={"month": "2024-13"})

    assert exc.status_code == 422
    assert exc.details["errors"] == {"month": "2024-13"}


# ===== Domain error translation =====

@pytest.mark.unit
def test_missing_booking_and_service_map_to_404():
    booking_id, service_id = uuid4(), uuid4()

    booking_exc = to_app_exception(BookingNotFoundError(booking_id))
    service_exc = to_app_exception(ServiceNotFoundError(service_id))

    assert isinstance(booking_exc, NotFoundException)
    assert booking_exc.details == {"resource": "Booking", "resource_id": str(booking_id)}
    assert service_exc.status_code == 404
    assert service_exc.details["resource"] == "Service"


@pytest.mark.unit
def test_unsupported_status_maps_to_400():
    exc = to_app_exception(UnsupportedStatusTargetError(BookingStatus.CONFIRMED))

    assert isinstance(exc, BadRequestException)
    assert exc.details == {"status": "confirmed"}


@pytest.mark.unit
def test_invalid_transition_maps_to_409_with_statuses():
    exc = to_app_exception(
        BookingStatusTransitionError(BookingStatus.CANCELLED, BookingStatus.PROCESSING)
    )

    assert isinstance(exc, ConflictException)
    assert exc.message == "Invalid booking status transition: cancelled -> processing"
    assert exc.details == {"current": "cancelled", "target": "processing"}


@pytest.mark.unit
def test_unmapped_error_is_not_translated():
    with pytest.raises(KeyError):
        to_app_exception(RuntimeError("boom"))


# ===== Handlers on an application =====

@pytest.mark.integration
def test_domain_error_raised_in_route_becomes_409(app):
    @app.patch("/bookings/{booking_id}/status")
    async def reject(booking_id: str, request: Request):
        request.state.correlation_id = "corr-123"
        raise BookingStatusTransitionError(BookingStatus.COMPLETED, BookingStatus.CANCELLED)

    response = TestClient(app).patch("/bookings/b-1/status")

    assert response.status_code == 409
    data = response.json()
    assert data["error"] == "Invalid booking status transition: completed -> cancelled"
    assert data["correlation_id"] == "corr-123"
    assert data["details"] == {"current": "completed", "target": "cancelled"}


@pytest.mark.integration
def test_domain_error_raised_in_route_becomes_404(app):
    service_id = uuid4()

    @app.delete("/services/{service_id}")
    async def delete(service_id: str):
        raise ServiceNotFoundError(service_id)

    response = TestClient(app).delete(f"/services/{service_id}")

    assert response.status_code == 404
    assert response.json()["details"] == {"resource": "Service", "resource_id": str(service_id)}
    assert response.json()["correlation_id"] == "unknown"


@pytest.mark.integration
def test_app_exception_raised_in_route(app):
    @app.get("/board")
    async def board():
        raise ValidationException("Invalid month 'March'", errors={"month": "March"})

    response = TestClient(app).get("/board")

    assert response.status_code == 422
    assert response.json()["details"] == {"errors": {"month": "March"}}


@pytest.mark.integration
def test_validation_error_handler(app):
    class WeightPayload(BaseModel):
        weight_kg: float = Field(..., gt=0)

    @app.post("/quote")
    async def quote(payload: WeightPayload):
        return {"ok": True}

    response = TestClient(app).post("/quote", json={"weight_kg": -1})

    assert response.status_code == 422
    data = response.json()
    assert data["error"] == "Validation error"
    assert data["details"]["errors"][0]["loc"] == ["body", "weight_kg"]


@pytest.mark.integration
def test_http_exception_handler(app):
    response = TestClient(app).get("/does-not-exist")

    assert response.status_code == 404
    data = response.json()
    assert data["error"] == "Not Found"
    assert "correlation_id" in data


@pytest.mark.integration
def test_unhandled_exception_handler(app):
    @app.get("/explode")
    async def explode():
        raise RuntimeError("Unexpected error")

    client = TestClient(app, raise_server_exceptions=False)
    response = client.get("/explode")

    assert response.status_code == 500
    assert response.json()["error"] == "Internal server error"
