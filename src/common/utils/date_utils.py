"""Utility functions for date manipulation."""

from datetime import date, datetime

import pytz

from src.common.config.settings import settings


def parse_sale_date(value: date | str | None) -> date:
    """
    Normalizes a sale date given as a date, a datetime or an ISO 'YYYY-MM-DD' string.
    A missing value means today in the configured timezone.
    Raises ValueError for anything else.
    """
    if value is None or value == "":
        return today()
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return date.fromisoformat(value.strip())
    raise ValueError(f"Unsupported sale date value: {value!r}")


def today() -> date:
    """Current date in settings.TIMEZONE."""
    return datetime.now(pytz.timezone(settings.TIMEZONE)).date()


def format_date_for_db(value: date | str | None) -> str | None:
    """Formats a date or ISO date string for MySQL DATE."""
    if not value:
        return None
    try:
        date_obj = value if isinstance(value, date) else date.fromisoformat(value)
        return date_obj.strftime("%Y-%m-%d")
    except (ValueError, TypeError):
        return None
