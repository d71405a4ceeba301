"""Project and task services on top of the JSON store."""

from timesheet.services.project_service import ProjectService
from timesheet.services.task_service import TaskService

__all__ = ["ProjectService", "TaskService"]
