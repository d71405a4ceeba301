"""Task service."""

import logging
from datetime import date
from typing import Any, Optional, Union

from timesheet.config import PROJECTS_COLLECTION, TASKS_COLLECTION
from timesheet.exceptions import TaskNotFoundError, ValidationError
from timesheet.models.task import Task, TaskDraft, TaskStatus, TaskType
from timesheet.spreadsheet.statistics import TaskStatistics, aggregate
from timesheet.storage.json_store import JsonStore
from timesheet.utils.dates import is_date_in_range

logger = logging.getLogger(__name__)

_EDITABLE_FIELDS = (
    "title",
    "description",
    "type",
    "project_id",
    "date",
    "start_time",
    "end_time",
    "duration",
    "status",
)


class TaskService:
    """Persists tasks and answers date-range queries over them."""

    def __init__(self, store: JsonStore):
        self.store = store

    def _load(self) -> list[Task]:
        return [Task.from_dict(d) for d in self.store.load(TASKS_COLLECTION)]

    def _save(self, tasks: list[Task]) -> None:
        self.store.save(TASKS_COLLECTION, [t.to_dict() for t in tasks])

    def _project_ids(self) -> set[str]:
        return {d["id"] for d in self.store.load(PROJECTS_COLLECTION)}

    def _validate(self, draft: TaskDraft, project_ids: Optional[set[str]] = None) -> None:
        if not (draft.title or "").strip():
            raise ValidationError("Task title is required")
        if not draft.project_id:
            raise ValidationError("Project is required")
        if project_ids is None:
            project_ids = self._project_ids()
        if draft.project_id not in project_ids:
            raise ValidationError("Invalid project")
        if draft.duration is not None and draft.duration < 0:
            raise ValidationError("Duration cannot be negative")

    def create_task(self, draft: TaskDraft) -> Task:
        """Persist a task draft.

        Raises:
            ValidationError: If the title is blank or the project is unknown.
        """
        with self.store.lock:
            self._validate(draft)
            tasks = self._load()
            task = Task.from_draft(self.store.new_id(), draft)
            tasks.append(task)
            self._save(tasks)
        logger.debug("Created task %s %r", task.id, task.title)
        return task

    def create_tasks(self, drafts: list[TaskDraft]) -> list[Union[Task, ValidationError]]:
        """Persist many drafts with a single read and a single write.

        Each draft is validated on its own. The result has one entry per
        draft, in order: the created ``Task``, or the ``ValidationError``
        that rejected it.

        Raises:
            StorageError: If the tasks file cannot be read or written. No
                draft is persisted in that case.
        """
        results: list[Union[Task, ValidationError]] = []
        created = 0
        with self.store.lock:
            project_ids = self._project_ids()
            tasks = self._load()
            for draft in drafts:
                try:
                    self._validate(draft, project_ids)
                except ValidationError as e:
                    results.append(e)
                    continue
                task = Task.from_draft(self.store.new_id(), draft)
                tasks.append(task)
                results.append(task)
                created += 1
            if created:
                self._save(tasks)
        logger.debug("Created %d of %d tasks", created, len(drafts))
        return results

    def list_tasks(
        self,
        type: Optional[TaskType] = None,
        project_id: Optional[str] = None,
        status: Optional[TaskStatus] = None,
    ) -> list[Task]:
        tasks = self._load()
        if type is not None:
            tasks = [t for t in tasks if t.type == type]
        if project_id is not None:
            tasks = [t for t in tasks if t.project_id == project_id]
        if status is not None:
            tasks = [t for t in tasks if t.status == status]
        return sorted(tasks, key=lambda t: (t.date, t.created_at), reverse=True)

    def get_task(self, task_id: str) -> Optional[Task]:
        for task in self._load():
            if task.id == task_id:
                return task
        return None

    def update_task(self, task_id: str, **changes: Any) -> Task:
        unknown = set(changes) - set(_EDITABLE_FIELDS)
        if unknown:
            raise ValidationError(f"Unknown task fields: {', '.join(sorted(unknown))}")

        with self.store.lock:
            tasks = self._load()
            for task in tasks:
                if task.id != task_id:
                    continue
                for field_name, value in changes.items():
                    setattr(task, field_name, value)
                self._validate(task)
                self._save(tasks)
                return task
        raise TaskNotFoundError(f"Task {task_id} not found")

    def complete_task(self, task_id: str) -> Task:
        return self.update_task(task_id, status=TaskStatus.COMPLETED)

    def delete_task(self, task_id: str) -> bool:
        with self.store.lock:
            tasks = self._load()
            remaining = [t for t in tasks if t.id != task_id]
            if len(remaining) == len(tasks):
                return False
            self._save(remaining)
        return True

    def get_tasks_by_date_range(self, start: date, end: date) -> list[Task]:
        """Tasks dated within [start, end], in storage order."""
        return [t for t in self._load() if is_date_in_range(t.date, start, end)]

    def get_statistics(self, start: date, end: date) -> TaskStatistics:
        return aggregate(self.get_tasks_by_date_range(start, end))
