"""Custom exceptions for the timesheet tracker."""


class TimesheetError(Exception):
    """Base exception for timesheet errors."""

    pass


class StorageError(TimesheetError):
    """Exception raised when the data store cannot be read or written."""

    pass


class ValidationError(TimesheetError):
    """Exception raised when a project or task fails validation."""

    pass


class RowValidationError(ValidationError):
    """Exception raised when a spreadsheet row cannot become a task."""

    def __init__(self, row_number: int, reason: str):
        self.row_number = row_number
        self.reason = reason
        super().__init__(f"Row {row_number}: {reason}")


class NotFoundError(TimesheetError):
    """Exception raised when a requested entity does not exist."""

    pass


class ProjectNotFoundError(NotFoundError):
    """Exception raised when a project is not found."""

    pass


class TaskNotFoundError(NotFoundError):
    """Exception raised when a task is not found."""

    pass


class ImportFileError(TimesheetError):
    """Exception raised when an uploaded workbook cannot be read."""

    pass


class ExportError(TimesheetError):
    """Exception raised when tasks cannot be exported."""

    pass
