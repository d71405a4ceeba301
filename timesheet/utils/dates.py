"""Date and time formatting, parsing, and week boundaries."""

from datetime import datetime, date, time, timedelta
from typing import Any, Optional

from timesheet.config import (
    DISPLAY_DATE_FORMAT,
    EMPTY_CELL,
    IMPORT_DATE_FORMATS,
    STORAGE_DATE_FORMAT,
    TIME_FORMAT,
)


def format_date(value: date, fmt: str = DISPLAY_DATE_FORMAT) -> str:
    return value.strftime(fmt)


def format_time(value: time, fmt: str = TIME_FORMAT) -> str:
    return value.strftime(fmt)


def parse_date(value: Any, formats: tuple[str, ...] = IMPORT_DATE_FORMATS) -> Optional[date]:
    """Parse a date cell.

    Native ``date``/``datetime`` values (as openpyxl returns them for
    date-formatted cells) are accepted directly. Text is tried against
    each format in order.

    Returns:
        The parsed date, or None if no format matches.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if value is None:
        return None

    stripped = str(value).strip()
    for fmt in formats:
        try:
            return datetime.strptime(stripped, fmt).date()
        except ValueError:
            continue
    return None


def parse_time_string(value: Any) -> Optional[time]:
    """Parse an ``HH:MM`` time-of-day cell, returning None when malformed."""
    if isinstance(value, datetime):
        return value.time().replace(second=0, microsecond=0)
    if isinstance(value, time):
        return value.replace(second=0, microsecond=0)
    if value is None:
        return None

    stripped = str(value).strip()
    if not stripped or stripped == EMPTY_CELL:
        return None

    parts = stripped.split(":")
    if len(parts) < 2:
        return None
    try:
        return time(int(parts[0]), int(parts[1]))
    except ValueError:
        return None


def to_storage_date(value: date) -> str:
    return value.strftime(STORAGE_DATE_FORMAT)


def from_storage_date(text: str) -> date:
    return datetime.strptime(text, STORAGE_DATE_FORMAT).date()


def is_date_in_range(value: date, start: date, end: date) -> bool:
    """Inclusive on both ends."""
    return start <= value <= end


def get_start_of_week(value: date) -> date:
    """Monday of the week containing ``value``."""
    return value - timedelta(days=value.weekday())


def get_end_of_week(value: date) -> date:
    """Sunday of the week containing ``value``."""
    return get_start_of_week(value) + timedelta(days=6)


def get_days_in_week(value: date) -> list[date]:
    start = get_start_of_week(value)
    return [start + timedelta(days=i) for i in range(7)]


def get_today() -> date:
    return date.today()
