"""Duration and completion roll-ups over a set of tasks.

Restricting tasks to a date range is the caller's job; everything here is
a pure function of the tasks it is given.
"""

from datetime import date
from typing import Iterable

from timesheet.models.task import TaskDraft, TaskStatus, TaskType


class TaskStatistics:
    """Aggregate counts and minute totals for a task collection."""

    def __init__(self):
        self.total_tasks: int = 0
        self.completed_tasks: int = 0
        self.total_duration: int = 0
        self.work_duration: int = 0
        self.personal_duration: int = 0
        self.project_breakdown: dict[str, int] = {}

    @property
    def completion_rate(self) -> int:
        """Completed share as a rounded percentage, 0 for no tasks."""
        if self.total_tasks == 0:
            return 0
        return round(self.completed_tasks / self.total_tasks * 100)

    def add(self, task: TaskDraft) -> None:
        minutes = task.duration or 0
        self.total_tasks += 1
        if task.status == TaskStatus.COMPLETED:
            self.completed_tasks += 1
        self.total_duration += minutes
        if task.type == TaskType.WORK:
            self.work_duration += minutes
        elif task.type == TaskType.PERSONAL:
            self.personal_duration += minutes
        if task.project_id:
            self.project_breakdown[task.project_id] = (
                self.project_breakdown.get(task.project_id, 0) + minutes
            )

    def to_dict(self) -> dict:
        return {
            "total_tasks": self.total_tasks,
            "completed_tasks": self.completed_tasks,
            "completion_rate": self.completion_rate,
            "total_duration": self.total_duration,
            "work_duration": self.work_duration,
            "personal_duration": self.personal_duration,
            "project_breakdown": dict(self.project_breakdown),
        }


def aggregate(tasks: Iterable[TaskDraft]) -> TaskStatistics:
    """Reduce tasks to totals; a missing duration counts as zero minutes."""
    stats = TaskStatistics()
    for task in tasks:
        stats.add(task)
    return stats


def daily_summary(tasks: Iterable[TaskDraft]) -> list[tuple[date, TaskStatistics]]:
    """Statistics per distinct task date, sorted by date."""
    by_date: dict[date, TaskStatistics] = {}
    for task in tasks:
        by_date.setdefault(task.date, TaskStatistics()).add(task)
    return sorted(by_date.items(), key=lambda item: item[0])
