"""
Bookings API routes.

Public booking creation plus the administrator operations: status
transitions, payment method, field edits, the grouped bookings board and the
upcoming collections banner.
"""
from datetime import date, datetime, timedelta
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, Field, field_validator, model_validator

from laundry.api.dependencies import get_booking_service
from laundry.api.middleware.error_handler import ValidationException
from laundry.lib.dates import business_today, parse_month
from laundry.lib.status_display import status_display
from laundry.models.bookings import Booking, BookingStatus, PaymentMethod
from laundry.services.booking_board import build_booking_view, search_bookings
from laundry.services.booking_service import (
    BookingService,
    is_awaiting_payment,
    is_editable,
    is_settled,
)


# Pydantic schemas
class BookingServiceSummary(BaseModel):
    id: UUID
    name: str
    price: str

    model_config = {"from_attributes": True}


class BookingResponse(BaseModel):
    """Booking with its resolved service and derived flags."""
    id: UUID
    first_name: str
    last_name: str
    phone: str
    service_id: UUID
    service: Optional[BookingServiceSummary] = None
    collection_date: date
    departure_date: date
    status: BookingStatus
    status_label: str
    status_color: str
    total_price: Optional[float] = None
    weight_kg: Optional[float] = None
    payment_method: Optional[PaymentMethod] = None
    additional_details: Optional[str] = None
    created_at: datetime
    completed_at: Optional[datetime] = None
    awaiting_payment: bool
    settled: bool
    editable: bool


class BookingCreateRequest(BaseModel):
    """Public booking form payload."""
    first_name: str = Field(min_length=2, max_length=255)
    last_name: str = Field(min_length=2, max_length=255)
    phone: str = Field(min_length=10, max_length=50)
    service_id: UUID
    collection_date: date
    departure_date: date
    additional_details: Optional[str] = Field(default=None, max_length=1000)

    @model_validator(mode="after")
    def collection_before_departure(self):
        if self.collection_date > self.departure_date:
            raise ValueError("Collection date must be on or before the departure date")
        return self


class BookingUpdateRequest(BaseModel):
    """Partial edit of the customer-facing fields."""
    first_name: Optional[str] = Field(default=None, min_length=2, max_length=255)
    last_name: Optional[str] = Field(default=None, min_length=2, max_length=255)
    phone: Optional[str] = Field(default=None, min_length=10, max_length=50)
    service_id: Optional[UUID] = None
    collection_date: Optional[date] = None
    departure_date: Optional[date] = None
    additional_details: Optional[str] = Field(default=None, max_length=1000)

    @field_validator(
        "first_name", "last_name", "phone", "service_id", "collection_date", "departure_date",
        mode="before",
    )
    @classmethod
    def required_fields_not_null(cls, value):
        # Omit a field to leave it unchanged; only additional_details can be cleared
        if value is None:
            raise ValueError("Field cannot be null")
        return value


class StatusUpdateRequest(BaseModel):
    status: BookingStatus
    total_price: Optional[float] = Field(default=None, ge=0)
    weight_kg: Optional[float] = Field(default=None, gt=0, description="Weight in kilograms")


class PaymentMethodRequest(BaseModel):
    payment_method: PaymentMethod


class DateGroupResponse(BaseModel):
    collection_date: date
    count: int
    bookings: List[BookingResponse]


class BookingBoardResponse(BaseModel):
    selected_month: str
    search_query: str
    total: int
    groups: List[DateGroupResponse]


class UpcomingCollectionsResponse(BaseModel):
    today: date
    tomorrow: date
    todays_collections: List[BookingResponse]
    tomorrows_collections: List[BookingResponse]


def to_booking_response(booking: Booking) -> BookingResponse:
    display = status_display(booking.status)
    return BookingResponse(
        id=booking.id,
        first_name=booking.first_name,
        last_name=booking.last_name,
        phone=booking.phone,
        service_id=booking.service_id,
        service=BookingServiceSummary.model_validate(booking.service) if booking.service else None,
        collection_date=booking.collection_date,
        departure_date=booking.departure_date,
        status=booking.status,
        status_label=display.label,
        status_color=display.color,
        total_price=booking.total_price,
        weight_kg=booking.weight_kg,
        payment_method=booking.payment_method,
        additional_details=booking.additional_details,
        created_at=booking.created_at,
        completed_at=booking.completed_at,
        awaiting_payment=is_awaiting_payment(booking),
        settled=is_settled(booking),
        editable=is_editable(booking),
    )


# Router
router = APIRouter(prefix="/bookings", tags=["bookings"])


@router.get("", response_model=List[BookingResponse])
def list_bookings(
    collection_date: Optional[date] = Query(None, description="Only bookings collecting on this date"),
    q: Optional[str] = Query(None, description="Match customer name or phone"),
    bookings: BookingService = Depends(get_booking_service),
) -> List[BookingResponse]:
    """
    List bookings with their service, ordered by collection date.
    """
    if collection_date is not None:
        results = bookings.list_bookings_by_collection_date(collection_date)
    else:
        results = bookings.list_bookings()

    if q:
        results = search_bookings(results, q)

    return [to_booking_response(b) for b in results]


@router.post("", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
def create_booking(
    payload: BookingCreateRequest,
    bookings: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    booking = bookings.create_booking(payload.model_dump(exclude_none=True))
    return to_booking_response(booking)


@router.get("/board", response_model=BookingBoardResponse)
def get_booking_board(
    month: Optional[str] = Query(None, description="Month to show as YYYY-MM (default: current month)"),
    q: str = Query("", description="Match customer first and last name"),
    bookings: BookingService = Depends(get_booking_service),
) -> BookingBoardResponse:
    """
    Bookings collecting in the month, grouped by collection date (newest
    first) and ordered inside each date by status priority.
    """
    try:
        selected_month = parse_month(month) if month else business_today()
    except ValueError as e:
        raise ValidationException(str(e), errors={"month": str(e)})

    view = build_booking_view(bookings.list_bookings(), selected_month, q)
    return BookingBoardResponse(
        selected_month=view.selected_month.strftime("%Y-%m"),
        search_query=view.search_query,
        total=view.total,
        groups=[
            DateGroupResponse(
                collection_date=date.fromisoformat(group.date),
                count=group.count,
                bookings=[to_booking_response(b) for b in group.bookings],
            )
            for group in view.groups
        ],
    )


@router.get("/upcoming-collections", response_model=UpcomingCollectionsResponse)
def get_upcoming_collections(
    bookings: BookingService = Depends(get_booking_service),
) -> UpcomingCollectionsResponse:
    today = business_today()
    upcoming = bookings.list_upcoming_collections(today)
    return UpcomingCollectionsResponse(
        today=today,
        tomorrow=today + timedelta(days=1),
        todays_collections=[to_booking_response(b) for b in upcoming["today"]],
        tomorrows_collections=[to_booking_response(b) for b in upcoming["tomorrow"]],
    )


@router.get("/{booking_id}", response_model=BookingResponse)
def get_booking(
    booking_id: UUID,
    bookings: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    return to_booking_response(bookings.get_booking(booking_id))


@router.patch("/{booking_id}", response_model=BookingResponse)
def update_booking(
    booking_id: UUID,
    payload: BookingUpdateRequest,
    bookings: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    """
    Edit customer-facing fields. The response's `editable` flag tells
    clients whether the booking is still pending.
    """
    fields = payload.model_dump(exclude_unset=True)
    current = bookings.get_booking(booking_id)

    collection_date = fields.get("collection_date", current.collection_date)
    departure_date = fields.get("departure_date", current.departure_date)
    if collection_date > departure_date:
        raise ValidationException(
            "Collection date must be on or before the departure date",
            errors={"collection_date": collection_date.isoformat(), "departure_date": departure_date.isoformat()},
        )

    return to_booking_response(bookings.update_booking(booking_id, fields))


@router.patch("/{booking_id}/status", response_model=BookingResponse)
def update_booking_status(
    booking_id: UUID,
    payload: StatusUpdateRequest,
    bookings: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    """
    Move a booking to processing, completed or cancelled.

    - processing with a weight reprices the booking from the tier table
    - completed stamps completed_at and stores the supplied final price

    An unknown booking is a 404, a status outside these three a 400 and a
    move out of cancelled or completed a 409.
    """
    booking = bookings.update_status(
        booking_id,
        payload.status,
        total_price=payload.total_price,
        weight_kg=payload.weight_kg,
    )
    return to_booking_response(booking)


@router.patch("/{booking_id}/payment-method", response_model=BookingResponse)
def update_booking_payment_method(
    booking_id: UUID,
    payload: PaymentMethodRequest,
    bookings: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    return to_booking_response(bookings.set_payment_method(booking_id, payload.payment_method))
