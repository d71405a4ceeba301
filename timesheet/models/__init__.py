"""Domain models for projects and tasks."""

from timesheet.models.project import Project
from timesheet.models.task import Task, TaskDraft, TaskStatus, TaskType

__all__ = ["Project", "Task", "TaskDraft", "TaskStatus", "TaskType"]
