"""
Revenue estimate from a service's free-text price label.

Older services carry only a label such as "R170-R470" instead of tiered
pricing. Analytics falls back to this estimate for bookings that never got a
total price. Remove this module once every service is priced by tiers.
"""
import re

from laundry.lib.settings import settings


def _patterns():
    symbol = re.escape(settings.currency_symbol)
    return (
        re.compile(rf"{symbol}(\d+)-{symbol}(\d+)"),
        re.compile(rf"{symbol}(\d+)"),
    )


def estimate_price_from_label(label: str | None) -> float:
    """
    Estimate a price from a label.

    "R170-R470" -> 320.0 (midpoint), "R170" -> 170.0, anything else -> 0.0.
    """
    if not label:
        return 0.0

    range_pattern, single_pattern = _patterns()

    match = range_pattern.search(label)
    if match:
        low, high = int(match.group(1)), int(match.group(2))
        return (low + high) / 2

    match = single_pattern.search(label)
    if match:
        return float(match.group(1))

    return 0.0


def is_valid_price_label(label: str) -> bool:
    """Whether a label is a single amount or an amount range with the currency prefix."""
    symbol = re.escape(settings.currency_symbol)
    amount = r"\d+(?:\.\d{1,2})?"
    return re.fullmatch(rf"{symbol}{amount}(?:-{symbol}{amount})?", label.strip()) is not None
