"""Exports tasks to styled Excel workbooks.

Three variants share the same ``Tasks`` sheet layout:
  - date-range export with an optional ``Statistics`` sheet
  - single-project export
  - weekly summary with a ``Daily Summary`` sheet ahead of the tasks
"""

import logging
import os
import re
from datetime import date
from typing import Any, BinaryIO, Iterable, Optional, Union

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from timesheet.config import (
    DAILY_SUMMARY_COLUMNS,
    DAILY_SUMMARY_SHEET,
    EMPTY_CELL,
    MAX_SHEET_TITLE,
    NO_PROJECT,
    STATISTICS_SHEET,
    STORAGE_DATE_FORMAT,
    TASK_COLUMNS,
    TASKS_SHEET,
    UNKNOWN_PROJECT,
    UNRESOLVED_PROJECT,
)
from timesheet.exceptions import ExportError, ProjectNotFoundError
from timesheet.models.project import Project
from timesheet.models.task import Task, TaskStatus, TaskType
from timesheet.spreadsheet.statistics import TaskStatistics, daily_summary
from timesheet.utils.dates import format_date, format_time
from timesheet.utils.durations import minutes_to_clock

logger = logging.getLogger(__name__)

EXPORT_FAILED_MESSAGE = "Failed to export tasks to Excel"

Output = Union[str, BinaryIO, None]


class ExportConfig:
    """Date range and filters for a task export."""

    def __init__(
        self,
        start_date: date,
        end_date: date,
        type: Optional[str] = None,
        include_projects: bool = True,
        include_statistics: bool = True,
    ):
        self.start_date = start_date
        self.end_date = end_date
        self.type = type
        self.include_projects = include_projects
        self.include_statistics = include_statistics

    @property
    def type_filter(self) -> Optional[TaskType]:
        """The type to keep, or None when every type is exported."""
        if not self.type or self.type == "all":
            return None
        return TaskType(self.type)

    @property
    def type_label(self) -> str:
        type_filter = self.type_filter
        return type_filter.label if type_filter else "All"


def _header_font() -> Font:
    return Font(bold=True, color="FFFFFF", size=11)


def _header_fill() -> PatternFill:
    return PatternFill(start_color="1A73E8", end_color="1A73E8", fill_type="solid")


def _thin_border() -> Border:
    side = Side(style="thin", color="DADCE0")
    return Border(left=side, right=side, top=side, bottom=side)


def _style_header_row(ws, row: int, col_count: int) -> None:
    """Apply header styling to a row."""
    for col in range(1, col_count + 1):
        cell = ws.cell(row=row, column=col)
        cell.font = _header_font()
        cell.fill = _header_fill()
        cell.alignment = Alignment(horizontal="center", vertical="center")
        cell.border = _thin_border()


def _write_table(ws, headers: list[str], rows: Iterable[list[Any]], width: int = 18) -> None:
    ws.append(headers)
    _style_header_row(ws, 1, len(headers))
    for values in rows:
        ws.append(values)
        for cell in ws[ws.max_row]:
            cell.border = _thin_border()
    for col in range(1, len(headers) + 1):
        ws.column_dimensions[get_column_letter(col)].width = width


def _project_name(task: Task, projects: dict[str, Project]) -> str:
    if not task.project_id:
        return NO_PROJECT
    project = projects.get(task.project_id)
    return project.name if project else UNRESOLVED_PROJECT


def task_row(task: Task, project_name: str) -> list[Any]:
    """Display values for one task, in ``TASK_COLUMNS`` order."""
    return [
        task.title,
        task.description,
        task.type.label,
        project_name,
        format_date(task.date),
        format_time(task.start_time) if task.start_time else EMPTY_CELL,
        format_time(task.end_time) if task.end_time else EMPTY_CELL,
        minutes_to_clock(task.duration) if task.duration is not None else EMPTY_CELL,
        task.status.value if task.status else TaskStatus.PENDING.value,
    ]


def statistics_rows(
    stats: TaskStatistics,
    projects: dict[str, Project],
    include_projects: bool,
) -> list[list[Any]]:
    """Metric/Value pairs for the ``Statistics`` sheet."""
    rows: list[list[Any]] = [
        ["Total Tasks", stats.total_tasks],
        ["Completed Tasks", stats.completed_tasks],
        ["Completion Rate (%)", stats.completion_rate],
        ["Total Duration (HH:MM)", minutes_to_clock(stats.total_duration)],
        ["Work Duration (HH:MM)", minutes_to_clock(stats.work_duration)],
        ["Personal Duration (HH:MM)", minutes_to_clock(stats.personal_duration)],
    ]

    if include_projects and stats.project_breakdown:
        rows.append(["", ""])
        rows.append(["Project Breakdown", ""])
        for project_id, minutes in stats.project_breakdown.items():
            project = projects.get(project_id)
            rows.append([project.name if project else UNKNOWN_PROJECT, minutes_to_clock(minutes)])

    return rows


_SHEET_TITLE_CHARS = re.compile(r"[:\\/?*\[\]]")
_FILE_NAME_CHARS = re.compile(r'[:\\/?*<>|"\x00-\x1f]')


def safe_sheet_title(name: str) -> str:
    """Replace characters Excel forbids in sheet titles and cut to 31 chars."""
    return _SHEET_TITLE_CHARS.sub("_", name)[:MAX_SHEET_TITLE] or TASKS_SHEET


def safe_file_name(name: str) -> str:
    return _FILE_NAME_CHARS.sub("_", name)


def _range_suffix(start: date, end: date) -> str:
    return f"{format_date(start, STORAGE_DATE_FORMAT)}_to_{format_date(end, STORAGE_DATE_FORMAT)}"


def _save(wb: Workbook, output: Output, file_name: str) -> str:
    """Save to a stream, a file path, or a file named ``file_name`` in a directory."""
    if output is not None and not isinstance(output, str):
        wb.save(output)
        return file_name

    path = output or "."
    if os.path.isdir(path):
        path = os.path.join(path, file_name)
    wb.save(path)
    return path


def _new_workbook() -> Workbook:
    wb = Workbook()
    default_sheet = wb.active
    if default_sheet is not None:
        wb.remove(default_sheet)
    return wb


class TaskExporter:
    """Builds task workbooks from the task and project services."""

    def __init__(self, project_service: Any, task_service: Any):
        self.project_service = project_service
        self.task_service = task_service

    def _project_map(self) -> dict[str, Project]:
        return {p.id: p for p in self.project_service.list_projects()}

    def _add_tasks_sheet(
        self,
        wb: Workbook,
        tasks: list[Task],
        projects: dict[str, Project],
        title: str = TASKS_SHEET,
    ) -> None:
        ws = wb.create_sheet(safe_sheet_title(title))
        _write_table(ws, TASK_COLUMNS, (task_row(t, _project_name(t, projects)) for t in tasks))

    def export_tasks(self, config: ExportConfig, output: Output = None) -> str:
        """Export tasks in the configured date range.

        Args:
            config: Date range, type filter and which extra sheets to add.
            output: Directory, file path or binary stream; defaults to the
                current directory.

        Returns:
            The written path, or the suggested file name for streams.

        Raises:
            ExportError: If tasks cannot be read or the file cannot be written.
        """
        try:
            tasks = self.task_service.get_tasks_by_date_range(config.start_date, config.end_date)
            projects = self._project_map()

            type_filter = config.type_filter
            if type_filter is not None:
                tasks = [t for t in tasks if t.type == type_filter]

            wb = _new_workbook()
            self._add_tasks_sheet(wb, tasks, projects)

            if config.include_statistics:
                stats = self.task_service.get_statistics(config.start_date, config.end_date)
                ws = wb.create_sheet(STATISTICS_SHEET)
                _write_table(
                    ws,
                    ["Metric", "Value"],
                    statistics_rows(stats, projects, config.include_projects),
                    width=28,
                )

            file_name = (
                f"Tasks_{config.type_label}_{_range_suffix(config.start_date, config.end_date)}.xlsx"
            )
            written = _save(wb, output, file_name)
        except Exception as e:
            logger.exception("Error exporting tasks to Excel")
            raise ExportError(EXPORT_FAILED_MESSAGE) from e

        logger.info("Exported %d tasks to %s", len(tasks), written)
        return written

    def export_project_tasks(
        self,
        project_id: str,
        start_date: date,
        end_date: date,
        output: Output = None,
    ) -> str:
        """Export one project's tasks to a sheet named after the project."""
        try:
            project = self.project_service.get_project(project_id)
            if project is None:
                raise ProjectNotFoundError(f"Project {project_id} not found")

            tasks = [
                t
                for t in self.task_service.get_tasks_by_date_range(start_date, end_date)
                if t.project_id == project_id
            ]

            wb = _new_workbook()
            self._add_tasks_sheet(wb, tasks, {project.id: project}, title=project.name)

            file_name = safe_file_name(f"{project.name}_Tasks_{_range_suffix(start_date, end_date)}.xlsx")
            written = _save(wb, output, file_name)
        except Exception as e:
            logger.exception("Error exporting project %s to Excel", project_id)
            raise ExportError(EXPORT_FAILED_MESSAGE) from e

        logger.info("Exported %d tasks of project %r to %s", len(tasks), project.name, written)
        return written

    def export_weekly_summary(self, start_date: date, end_date: date, output: Output = None) -> str:
        """Export a ``Daily Summary`` sheet followed by the detailed ``Tasks`` sheet."""
        try:
            tasks = self.task_service.get_tasks_by_date_range(start_date, end_date)
            projects = self._project_map()

            wb = _new_workbook()
            ws = wb.create_sheet(DAILY_SUMMARY_SHEET)
            summary_rows = [
                [
                    format_date(day, STORAGE_DATE_FORMAT),
                    stats.total_tasks,
                    stats.completed_tasks,
                    minutes_to_clock(stats.total_duration),
                    minutes_to_clock(stats.work_duration),
                    minutes_to_clock(stats.personal_duration),
                ]
                for day, stats in daily_summary(tasks)
            ]
            _write_table(ws, DAILY_SUMMARY_COLUMNS, summary_rows, width=16)

            self._add_tasks_sheet(wb, tasks, projects)

            file_name = f"Weekly_Summary_{_range_suffix(start_date, end_date)}.xlsx"
            written = _save(wb, output, file_name)
        except Exception as e:
            logger.exception("Error exporting weekly summary to Excel")
            raise ExportError(EXPORT_FAILED_MESSAGE) from e

        logger.info("Exported weekly summary of %d tasks to %s", len(tasks), written)
        return written
