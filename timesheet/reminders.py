"""End-of-day reminder timer.

The caller owns a ``ReminderTimer`` and passes it around; there is no
module-level timer state. ``start`` replaces any running timer and
``stop`` does nothing when no timer is running.
"""

import logging
import threading
from datetime import datetime, timedelta
from typing import Callable, Optional

from timesheet.exceptions import ValidationError
from timesheet.utils.dates import parse_time_string

logger = logging.getLogger(__name__)

REMINDER_TITLE = "End of Day Reminder"
REMINDER_BODY = "Time to review your daily tasks and track your time"


class ReminderSettings:
    """When the reminder fires.

    ``days_enabled`` has seven flags indexed by ``datetime.weekday()``
    (0 is Monday).
    """

    def __init__(
        self,
        enabled: bool = True,
        time: str = "17:00",
        days_enabled: Optional[list[bool]] = None,
    ):
        if parse_time_string(time) is None:
            raise ValidationError(f"Invalid reminder time {time!r}, expected HH:MM")
        days = list(days_enabled) if days_enabled is not None else [True] * 7
        if len(days) != 7:
            raise ValidationError("days_enabled must have 7 entries")
        self.enabled = enabled
        self.time = time
        self.days_enabled = days

    def to_dict(self) -> dict:
        return {"enabled": self.enabled, "time": self.time, "days_enabled": list(self.days_enabled)}


def next_fire_time(settings: ReminderSettings, now: datetime) -> Optional[datetime]:
    """The next moment strictly after ``now`` on an enabled day, or None."""
    if not settings.enabled or not any(settings.days_enabled):
        return None

    at = parse_time_string(settings.time)
    for offset in range(8):
        day = (now + timedelta(days=offset)).date()
        candidate = datetime.combine(day, at)
        if candidate > now and settings.days_enabled[candidate.weekday()]:
            return candidate
    return None


class ReminderTimer:
    """Owned handle around a ``threading.Timer`` that re-arms after each reminder."""

    def __init__(self, clock: Callable[[], datetime] = datetime.now):
        self._clock = clock
        self._timer: Optional[threading.Timer] = None
        self._lock = threading.Lock()
        self.settings: Optional[ReminderSettings] = None
        self.callback: Optional[Callable[[str, str], None]] = None
        self.next_run: Optional[datetime] = None

    @property
    def active(self) -> bool:
        return self._timer is not None

    def start(self, settings: ReminderSettings, callback: Callable[[str, str], None]) -> None:
        """Schedule the reminder, replacing any timer already running.

        ``callback(title, body)`` runs on the timer thread.
        """
        self.stop()
        with self._lock:
            self.settings = settings
            self.callback = callback
            self._schedule()

    def stop(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
                self.next_run = None
                logger.debug("Reminder stopped")

    def _schedule(self, after: Optional[datetime] = None) -> None:
        now = self._clock()
        reference = max(now, after) if after is not None else now
        fire_at = next_fire_time(self.settings, reference)
        if fire_at is None:
            self._timer = None
            self.next_run = None
            logger.info("Reminder disabled, nothing scheduled")
            return
        delay = max((fire_at - now).total_seconds(), 0)
        self._timer = threading.Timer(delay, self._fire)
        self._timer.daemon = True
        self._timer.start()
        self.next_run = fire_at
        logger.info("Next reminder at %s", fire_at.isoformat(timespec="minutes"))

    def _fire(self) -> None:
        callback = self.callback
        if callback is not None:
            try:
                callback(REMINDER_TITLE, REMINDER_BODY)
            except Exception:
                logger.exception("Reminder callback failed")
        with self._lock:
            # A timer replaced by stop() or start() while its callback ran
            # must not re-arm over the new one.
            if self._timer is threading.current_thread():
                self._schedule(after=self.next_run)
