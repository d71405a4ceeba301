"""Conversions between minute counts and ``HH:MM`` duration text."""

from datetime import datetime, date, time
from typing import Any, Optional

from timesheet.config import EMPTY_CELL


def minutes_to_clock(minutes: int) -> str:
    """Format a minute count as zero-padded ``HH:MM``.

    Hours are not wrapped at 24, so 1500 minutes is ``25:00``.
    """
    hours, mins = divmod(int(minutes), 60)
    return f"{hours:02d}:{mins:02d}"


def clock_to_minutes(text: Any) -> Optional[int]:
    """Parse ``HH:MM`` duration text into minutes.

    Returns None for empty cells, the ``-`` placeholder, or anything that
    is not two integer parts separated by a colon.
    """
    if text is None:
        return None
    if isinstance(text, time):
        return text.hour * 60 + text.minute

    stripped = str(text).strip()
    if not stripped or stripped == EMPTY_CELL:
        return None

    parts = stripped.split(":")
    if len(parts) != 2:
        return None

    try:
        hours = int(parts[0])
        mins = int(parts[1])
    except ValueError:
        return None

    return hours * 60 + mins


def calculate_duration(start: time, end: time) -> int:
    """Whole minutes between two times of day on the same date."""
    anchor = date(2000, 1, 1)
    delta = datetime.combine(anchor, end) - datetime.combine(anchor, start)
    return int(delta.total_seconds() // 60)
