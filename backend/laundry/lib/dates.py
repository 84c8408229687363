"""
Calendar helpers.

Collection and departure dates are timezone-naive calendar dates. The only
timezone-aware decision is what "today" is, which follows the configured
business timezone rather than the server clock.
"""
import re
from datetime import date, datetime
from zoneinfo import ZoneInfo

from laundry.lib.settings import settings


MONTH_PATTERN = re.compile(r"^(\d{4})-(0[1-9]|1[0-2])$")


def business_today() -> date:
    return datetime.now(ZoneInfo(settings.business_timezone)).date()


def as_date(value) -> date:
    """
    Accept a date, a datetime or an ISO string and return the calendar date.

    Aware timestamps are placed on the business calendar first.
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(ZoneInfo(settings.business_timezone))
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def month_start(value: date) -> date:
    return value.replace(day=1)


def shift_month(month: date, delta: int) -> date:
    """First day of the month `delta` months away from `month`."""
    index = month.year * 12 + (month.month - 1) + delta
    return date(index // 12, index % 12 + 1, 1)


def parse_month(value: str) -> date:
    """
    Parse 'YYYY-MM' into the first day of that month.

    Raises:
        ValueError: if the value is not a valid month
    """
    match = MONTH_PATTERN.match(value.strip())
    if not match:
        raise ValueError(f"Invalid month '{value}', expected YYYY-MM")
    return date(int(match.group(1)), int(match.group(2)), 1)
