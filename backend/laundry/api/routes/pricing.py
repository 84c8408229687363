"""
Pricing API routes - quotes from the weight tier table.
"""
from typing import List, Optional

from fastapi import APIRouter, Query
from pydantic import BaseModel

from laundry.services.pricing import (
    calculate_price,
    format_price,
    get_available_services,
    get_service_price_range,
    get_service_pricing_tiers,
)


class TierResponse(BaseModel):
    min_weight: float
    max_weight: float
    price: float


class ServicePricingResponse(BaseModel):
    service_name: str
    tiers: List[TierResponse]
    min_price: Optional[float] = None
    max_price: Optional[float] = None


class QuoteResponse(BaseModel):
    service_name: str
    weight_kg: float
    price: float
    formatted_price: str
    matched: bool


router = APIRouter(prefix="/pricing", tags=["pricing"])


@router.get("/services", response_model=List[ServicePricingResponse])
def list_priced_services() -> List[ServicePricingResponse]:
    """Every service known to the pricing engine with its tiers and price span."""
    response = []
    for name in get_available_services():
        price_range = get_service_price_range(name)
        response.append(ServicePricingResponse(
            service_name=name,
            tiers=[TierResponse(**tier.model_dump()) for tier in get_service_pricing_tiers(name)],
            min_price=price_range[0] if price_range else None,
            max_price=price_range[1] if price_range else None,
        ))
    return response


@router.get("/quote", response_model=QuoteResponse)
def quote(
    service_name: str = Query(..., min_length=1, description="Service name, case-insensitive"),
    weight_kg: float = Query(..., ge=0, description="Weight in kilograms"),
) -> QuoteResponse:
    """
    Quote a price for a weight; 0 kg falls in the first tier. A price of
    0 means no tier matched and `matched` is false.
    """
    price = calculate_price(service_name, weight_kg)
    return QuoteResponse(
        service_name=service_name,
        weight_kg=weight_kg,
        price=price,
        formatted_price=format_price(price),
        matched=price > 0,
    )
