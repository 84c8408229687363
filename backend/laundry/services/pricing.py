"""
Pricing engine for laundry services.

Maps (service name, weight in kg) to a flat tier price using a static rate
table. Lookups never raise: an unknown service or a weight outside every
tier prices to 0 and is logged, and the caller decides whether 0 is usable.
"""
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from laundry.lib.logging import get_logger
from laundry.lib.metrics import get_metrics_collector
from laundry.lib.settings import settings


logger = get_logger(__name__)


class PricingTier(BaseModel):
    """Inclusive weight range billed at one flat price."""

    model_config = ConfigDict(frozen=True)

    min_weight: float = Field(ge=0)
    max_weight: float = Field(ge=0)
    price: float = Field(ge=0)

    def contains(self, weight_kg: float) -> bool:
        return self.min_weight <= weight_kg <= self.max_weight


class ServicePricing(BaseModel):
    """Tiers for one service, scanned in table order."""

    model_config = ConfigDict(frozen=True)

    service_name: str
    tiers: Tuple[PricingTier, ...]


PRICING_STRUCTURE: Tuple[ServicePricing, ...] = (
    ServicePricing(
        service_name="Mixed Wash Dry Fold",
        tiers=(
            PricingTier(min_weight=0, max_weight=5, price=170),
            PricingTier(min_weight=6, max_weight=10, price=300),
            PricingTier(min_weight=11, max_weight=15, price=470),
        ),
    ),
    ServicePricing(
        service_name="Colour Separated Wash Dry Fold",
        tiers=(
            PricingTier(min_weight=0, max_weight=5, price=230),
            PricingTier(min_weight=6, max_weight=10, price=360),
            PricingTier(min_weight=11, max_weight=15, price=530),
        ),
    ),
    ServicePricing(
        service_name="Mixed Wash Dry Iron",
        tiers=(
            PricingTier(min_weight=0, max_weight=5, price=230),
            PricingTier(min_weight=6, max_weight=10, price=380),
            PricingTier(min_weight=11, max_weight=15, price=600),
        ),
    ),
    ServicePricing(
        service_name="Colour Separated Wash Dry Iron",
        tiers=(
            PricingTier(min_weight=0, max_weight=5, price=280),
            PricingTier(min_weight=6, max_weight=10, price=440),
            PricingTier(min_weight=11, max_weight=15, price=660),
        ),
    ),
)


def find_service_pricing(service_name: str) -> Optional[ServicePricing]:
    """Case-insensitive exact match against the rate table."""
    wanted = service_name.lower()
    for service in PRICING_STRUCTURE:
        if service.service_name.lower() == wanted:
            return service
    return None


def calculate_price(service_name: str, weight_kg: float) -> float:
    """
    Calculate price based on service name and weight.

    Args:
        service_name: Name of the service, matched case-insensitively
        weight_kg: Weight in kilograms

    Returns:
        The flat price of the first tier containing the weight, or 0 if the
        service or a matching tier cannot be found
    """
    service = find_service_pricing(service_name)
    if service is None:
        logger.warning(f'Service "{service_name}" not found in pricing structure')
        get_metrics_collector().increment_pricing_misses("unknown_service")
        return 0.0

    for tier in service.tiers:
        if tier.contains(weight_kg):
            return tier.price

    logger.warning(
        f'No pricing tier found for weight {weight_kg}kg in service "{service_name}"'
    )
    get_metrics_collector().increment_pricing_misses("no_tier")
    return 0.0


def get_available_services() -> List[str]:
    return [service.service_name for service in PRICING_STRUCTURE]


def get_service_pricing_tiers(service_name: str) -> List[PricingTier]:
    service = find_service_pricing(service_name)
    return list(service.tiers) if service else []


def get_service_price_range(service_name: str) -> Optional[Tuple[float, float]]:
    """
    Get the (min, max) price span across a service's tiers.

    Returns:
        Tuple of prices, or None if the service is unknown
    """
    tiers = get_service_pricing_tiers(service_name)
    if not tiers:
        return None

    prices = [tier.price for tier in tiers]
    return min(prices), max(prices)


def format_price(price: float) -> str:
    """Format a price for display, e.g. 170 -> 'R170.00'."""
    return f"{settings.currency_symbol}{price:.2f}"
