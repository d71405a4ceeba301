"""Excel import/export and statistics for tasks.

Imports task rows from Excel workbooks (creating referenced projects on
demand), exports date ranges back to styled workbooks, and renders HTML
timesheets.
"""

from timesheet.spreadsheet.exporter import ExportConfig, TaskExporter
from timesheet.spreadsheet.importer import ImportResult, TaskImporter
from timesheet.spreadsheet.project_resolver import ProjectResolver
from timesheet.spreadsheet.report_html import TimesheetReportGenerator
from timesheet.spreadsheet.row_validator import RowValidator
from timesheet.spreadsheet.statistics import TaskStatistics, aggregate

__all__ = [
    "ExportConfig",
    "TaskExporter",
    "ImportResult",
    "TaskImporter",
    "ProjectResolver",
    "TimesheetReportGenerator",
    "RowValidator",
    "TaskStatistics",
    "aggregate",
]
