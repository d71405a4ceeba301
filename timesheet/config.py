"""Configuration constants for the timesheet tracker."""

import logging
import os

# Storage
DEFAULT_DATA_DIR = os.environ.get("TIMESHEET_DATA_DIR", "data")
PROJECTS_COLLECTION = "projects"
TASKS_COLLECTION = "tasks"

# Web server
DEFAULT_HOST = os.environ.get("TIMESHEET_HOST", "0.0.0.0")
DEFAULT_PORT = int(os.environ.get("TIMESHEET_PORT", "5000"))

# Logging
DEFAULT_LOG_LEVEL = os.environ.get("TIMESHEET_LOG_LEVEL", "INFO")
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# Project colors assigned to projects created during import
PROJECT_COLORS = [
    "#FF6B6B",
    "#4ECDC4",
    "#45B7D1",
    "#FFA07A",
    "#98D8C8",
    "#F7DC6F",
    "#BB8FCE",
    "#85C1E2",
    "#F8B88B",
    "#52B788",
]
DEFAULT_PROJECT_COLOR = "#1976D2"

# Project cell values that mean "no project"
NO_PROJECT = "No Project"
UNRESOLVED_PROJECT = "N/A"
UNKNOWN_PROJECT = "Unknown Project"
PROJECT_PLACEHOLDERS = (NO_PROJECT, UNRESOLVED_PROJECT)

# Placeholder written for empty time and duration cells
EMPTY_CELL = "-"

# Spreadsheet columns, in export order
COL_TITLE = "Task Title"
COL_DESCRIPTION = "Description"
COL_TYPE = "Type"
COL_PROJECT = "Project"
COL_DATE = "Date"
COL_START_TIME = "Start Time"
COL_END_TIME = "End Time"
COL_DURATION = "Duration (HH:MM)"
COL_STATUS = "Status"
TASK_COLUMNS = [
    COL_TITLE,
    COL_DESCRIPTION,
    COL_TYPE,
    COL_PROJECT,
    COL_DATE,
    COL_START_TIME,
    COL_END_TIME,
    COL_DURATION,
    COL_STATUS,
]

DAILY_SUMMARY_COLUMNS = [
    "Date",
    "Tasks",
    "Completed",
    "Duration",
    "Work Time",
    "Personal Time",
]

# Sheet names
TASKS_SHEET = "Tasks"
STATISTICS_SHEET = "Statistics"
DAILY_SUMMARY_SHEET = "Daily Summary"
MAX_SHEET_TITLE = 31

# Date and time formats
DISPLAY_DATE_FORMAT = "%m/%d/%Y"
STORAGE_DATE_FORMAT = "%Y-%m-%d"
TIME_FORMAT = "%H:%M"
IMPORT_DATE_FORMATS = (DISPLAY_DATE_FORMAT, STORAGE_DATE_FORMAT)


def configure_logging(level: str = DEFAULT_LOG_LEVEL) -> None:
    """Configure root logging for the command line and web server."""
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)
