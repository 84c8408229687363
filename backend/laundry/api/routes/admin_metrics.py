"""
Admin Metrics Routes - analytics dashboard endpoints.

Provides read-only access to booking analytics:
- GET /admin/metrics/monthly: Revenue, counts and breakdowns for one month
- GET /admin/metrics/dashboard: Landing page counters
"""
from typing import Dict, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from laundry.api.dependencies import get_analytics_service
from laundry.api.middleware.error_handler import ValidationException
from laundry.lib.dates import business_today, parse_month
from laundry.lib.logging import get_logger
from laundry.services.analytics_service import AnalyticsService, DATE_FIELDS


logger = get_logger(__name__)
router = APIRouter(prefix="/admin/metrics", tags=["admin", "metrics"])


# Response models
class ServiceStats(BaseModel):
    """Bookings and revenue for one service."""
    count: int
    revenue: float


class MonthlyPeriod(BaseModel):
    year: int
    month: int
    date_field: str


class MonthlyStatsResponse(BaseModel):
    """Analytics for one calendar month."""
    total_revenue: float
    total_bookings: int
    completed_bookings: int
    open_bookings: int = Field(description="pending, confirmed, collected or processing")
    cancelled_bookings: int
    average_order_value: float
    status_breakdown: Dict[str, int]
    service_stats: Dict[str, ServiceStats]
    daily_revenue: Dict[int, float] = Field(description="Revenue per day of month")
    period: MonthlyPeriod


class DashboardSummaryResponse(BaseModel):
    total_bookings: int
    todays_collections: int
    pending_bookings: int
    processing_bookings: int


@router.get(
    "/monthly",
    response_model=MonthlyStatsResponse,
    summary="Get monthly analytics",
    description="Revenue, order value, status and service breakdowns for a month",
)
def get_monthly_stats(
    month: Optional[str] = Query(None, description="Month as YYYY-MM (default: current month)"),
    date_field: str = Query("collection_date", description="collection_date (default), created_at or departure_date"),
    analytics: AnalyticsService = Depends(get_analytics_service),
) -> MonthlyStatsResponse:
    """
    Get analytics for one month.

    Bookings without a total price are valued from their service's price
    label (midpoint of a range).
    """
    if date_field not in DATE_FIELDS:
        raise ValidationException(
            f"date_field must be one of {', '.join(DATE_FIELDS)}",
            errors={"date_field": date_field},
        )
    try:
        selected = parse_month(month) if month else business_today()
    except ValueError as e:
        raise ValidationException(str(e), errors={"month": month})

    logger.info(f"GET /admin/metrics/monthly (month={selected:%Y-%m}, date_field={date_field})")

    stats = analytics.get_monthly_stats(selected.year, selected.month, date_field)
    return MonthlyStatsResponse(**stats)


@router.get(
    "/dashboard",
    response_model=DashboardSummaryResponse,
    summary="Get dashboard counters",
)
def get_dashboard_summary(
    analytics: AnalyticsService = Depends(get_analytics_service),
) -> DashboardSummaryResponse:
    return DashboardSummaryResponse(**analytics.get_dashboard_summary(business_today()))
