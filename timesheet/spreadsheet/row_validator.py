"""Turns one spreadsheet row into a task draft or a row error."""

from typing import Any, Optional

from timesheet.config import (
    COL_DATE,
    COL_DESCRIPTION,
    COL_DURATION,
    COL_END_TIME,
    COL_PROJECT,
    COL_START_TIME,
    COL_STATUS,
    COL_TITLE,
    COL_TYPE,
)
from timesheet.exceptions import RowValidationError
from timesheet.models.task import TaskDraft, TaskStatus, TaskType
from timesheet.spreadsheet.project_resolver import ProjectResolver
from timesheet.utils.dates import parse_date, parse_time_string
from timesheet.utils.durations import clock_to_minutes


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


class RowValidator:
    """Validates rows keyed by the export column headers.

    Only one error is reported per row: title, type and date are checked
    in that order and the first missing one wins. Optional columns never
    fail a row; malformed values are dropped.

    With ``strict=True`` a type other than work/personal, or a status
    other than pending/completed, fails the row instead of silently
    falling back to personal/pending.
    """

    def __init__(self, resolver: ProjectResolver, strict: bool = False):
        self.resolver = resolver
        self.strict = strict

    def validate(self, row: dict[str, Any], row_number: int) -> TaskDraft:
        """Build a task draft from ``row``.

        Args:
            row: Cell values keyed by column header.
            row_number: 1-based sheet row, used in the error message.

        Raises:
            RowValidationError: If a required field is missing or invalid.
        """
        title = _text(row.get(COL_TITLE))
        if not title:
            raise RowValidationError(row_number, "Task title is required")

        raw_type = _text(row.get(COL_TYPE))
        if not raw_type:
            raise RowValidationError(row_number, "Type is required")

        raw_date = row.get(COL_DATE)
        if raw_date is None or _text(raw_date) == "":
            raise RowValidationError(row_number, "Date is required")

        task_type = self._parse_type(raw_type, row_number)

        task_date = parse_date(raw_date)
        if task_date is None:
            raise RowValidationError(row_number, "Invalid date format")

        project_id = self.resolver.resolve(row.get(COL_PROJECT), task_type)
        if not project_id:
            raise RowValidationError(row_number, "Project is required but could not be created")

        return TaskDraft(
            title=title,
            description=_text(row.get(COL_DESCRIPTION)),
            type=task_type,
            project_id=project_id,
            date=task_date,
            start_time=parse_time_string(row.get(COL_START_TIME)),
            end_time=parse_time_string(row.get(COL_END_TIME)),
            duration=self._parse_duration(row.get(COL_DURATION)),
            status=self._parse_status(_text(row.get(COL_STATUS)), row_number),
        )

    def _parse_type(self, raw: str, row_number: int) -> TaskType:
        lowered = raw.lower()
        if lowered == TaskType.WORK.value:
            return TaskType.WORK
        if self.strict and lowered != TaskType.PERSONAL.value:
            raise RowValidationError(row_number, f'Unknown type "{raw}"')
        return TaskType.PERSONAL

    def _parse_status(self, raw: str, row_number: int) -> TaskStatus:
        lowered = raw.lower()
        if lowered == TaskStatus.COMPLETED.value:
            return TaskStatus.COMPLETED
        if self.strict and lowered not in ("", TaskStatus.PENDING.value):
            raise RowValidationError(row_number, f'Unknown status "{raw}"')
        return TaskStatus.PENDING

    @staticmethod
    def _parse_duration(value: Any) -> Optional[int]:
        minutes = clock_to_minutes(value)
        if minutes is None or minutes < 0:
            return None
        return minutes
