from datetime import datetime

from babel.dates import format_date
from babel.numbers import format_compact_decimal

from .config import DISPLAY_LOCALE


def format_count(value: int, locale: str = DISPLAY_LOCALE) -> str:
    """Compact, locale-aware count, e.g. ``1.2K`` in en_US."""
    return format_compact_decimal(value, format_type="short", locale=locale, fraction_digits=1)


def format_created_at(value: datetime, locale: str = DISPLAY_LOCALE) -> str:
    return format_date(value, format="short", locale=locale)
