"""Imports tasks from an Excel workbook.

Reads the first sheet of an ``.xlsx`` file whose header row matches the
export columns, validates every row, resolves (or creates) the referenced
projects, and persists the valid rows as tasks in one batch. Bad rows
are reported and skipped; only an unreadable file aborts the whole run.
"""

import io
import logging
import random
from datetime import datetime
from typing import Any, BinaryIO, Optional, Union

from openpyxl import load_workbook

from timesheet.exceptions import ImportFileError, RowValidationError, TimesheetError
from timesheet.spreadsheet.project_resolver import ProjectResolver
from timesheet.spreadsheet.row_validator import RowValidator

logger = logging.getLogger(__name__)

NO_TASKS_MESSAGE = "No tasks found in the Excel file"


class ImportResult:
    """Outcome of one import run."""

    def __init__(self):
        self.success: bool = False
        self.imported_count: int = 0
        self.failed_count: int = 0
        self.errors: list[str] = []
        self.created_projects: list[str] = []
        self.import_time: str = datetime.now().isoformat()

    @property
    def outcome(self) -> str:
        """``failed``, ``partial`` or ``success``."""
        if not self.success:
            return "failed"
        if self.failed_count > 0:
            return "partial"
        return "success"

    def add_error(self, message: str) -> None:
        self.errors.append(message)
        self.failed_count += 1

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "outcome": self.outcome,
            "imported_count": self.imported_count,
            "failed_count": self.failed_count,
            "errors": list(self.errors),
            "created_projects": list(self.created_projects),
            "import_time": self.import_time,
        }


def read_task_rows(source: Union[str, BinaryIO]) -> list[tuple[int, dict[str, Any]]]:
    """Read the first sheet into ``(sheet_row_number, {header: value})`` pairs.

    Completely blank rows are skipped but keep their place in the row
    numbering, so numbers always match what a spreadsheet program shows.

    Raises:
        ImportFileError: If the workbook cannot be opened or read.
    """
    try:
        wb = load_workbook(source, read_only=True, data_only=True)
    except Exception as e:
        raise ImportFileError(str(e) or type(e).__name__) from e

    try:
        ws = wb[wb.sheetnames[0]]
        all_rows = list(ws.iter_rows(values_only=True))
    except Exception as e:
        raise ImportFileError(str(e) or type(e).__name__) from e
    finally:
        wb.close()

    if not all_rows:
        return []

    headers = [str(h).strip() if h is not None else "" for h in all_rows[0]]

    records = []
    for row_number, row in enumerate(all_rows[1:], start=2):
        if all(v is None or (isinstance(v, str) and not v.strip()) for v in row):
            continue
        record = {}
        for col_idx, header in enumerate(headers):
            if header:
                record[header] = row[col_idx] if col_idx < len(row) else None
        records.append((row_number, record))
    return records


class TaskImporter:
    """Imports task rows into the task and project services.

    Args:
        project_service: Provides ``list_projects()`` and ``create_project()``.
        task_service: Provides ``create_tasks(drafts)``, returning one task
            or exception per draft.
        rng: Color source for projects created during import.
        strict: Reject unknown type/status values instead of defaulting.
    """

    def __init__(
        self,
        project_service: Any,
        task_service: Any,
        rng: Optional[random.Random] = None,
        strict: bool = False,
    ):
        self.project_service = project_service
        self.task_service = task_service
        self.rng = rng
        self.strict = strict

    def import_bytes(self, data: bytes) -> ImportResult:
        return self.import_file(io.BytesIO(data))

    def import_file(self, source: Union[str, BinaryIO]) -> ImportResult:
        """Import every row of the first sheet of ``source``.

        Args:
            source: Path to an ``.xlsx`` file or a binary stream.

        Returns:
            ImportResult; ``success`` is True when at least one row imported.
        """
        result = ImportResult()

        try:
            records = read_task_rows(source)
        except ImportFileError as e:
            logger.error("Error reading Excel file: %s", e)
            result.errors.append(f"Failed to read Excel file: {e}")
            return result

        if not records:
            result.errors.append(NO_TASKS_MESSAGE)
            return result

        try:
            projects = self.project_service.list_projects()
        except TimesheetError as e:
            logger.error("Error loading projects: %s", e)
            result.errors.append(f"Failed to load projects: {e}")
            return result

        resolver = ProjectResolver(self.project_service, projects, rng=self.rng)
        validator = RowValidator(resolver, strict=self.strict)
        logger.info("Importing %d task rows", len(records))

        # Row number -> error message, or None once the row is stored.
        outcomes: dict[int, Optional[str]] = {}
        pending = []
        for row_number, record in records:
            try:
                pending.append((row_number, validator.validate(record, row_number)))
            except RowValidationError as e:
                logger.warning("Skipping row: %s", e)
                outcomes[row_number] = str(e)

        if pending:
            try:
                created = self.task_service.create_tasks([draft for _, draft in pending])
            except Exception as e:
                logger.exception("Error saving %d imported rows", len(pending))
                created = [e] * len(pending)
            for (row_number, _), outcome in zip(pending, created):
                if isinstance(outcome, Exception):
                    outcomes[row_number] = f"Row {row_number}: {str(outcome) or type(outcome).__name__}"
                else:
                    outcomes[row_number] = None

        for row_number in sorted(outcomes):
            message = outcomes[row_number]
            if message is None:
                result.imported_count += 1
            else:
                result.add_error(message)

        result.created_projects = sorted(resolver.created_names)
        result.success = result.imported_count > 0
        logger.info(
            "Import finished: %d imported, %d failed, %d projects created",
            result.imported_count,
            result.failed_count,
            len(result.created_projects),
        )
        return result
