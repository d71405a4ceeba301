"""Task models: the validated draft and the persisted task."""

from datetime import datetime, date, time
from enum import Enum
from typing import Any, Optional

from timesheet.utils.dates import from_storage_date, to_storage_date


class TaskType(str, Enum):
    """Whether a task belongs to the work or personal timesheet."""

    WORK = "work"
    PERSONAL = "personal"

    @property
    def label(self) -> str:
        return self.value.capitalize()


class TaskStatus(str, Enum):
    """Task completion status."""

    PENDING = "pending"
    COMPLETED = "completed"


def _time_to_str(value: Optional[time]) -> Optional[str]:
    return value.strftime("%H:%M") if value is not None else None


def _time_from_str(value: Optional[str]) -> Optional[time]:
    return time.fromisoformat(value) if value else None


class TaskDraft:
    """A validated task that has not been persisted yet."""

    def __init__(
        self,
        title: str,
        type: TaskType,
        date: date,
        project_id: Optional[str] = None,
        description: str = "",
        start_time: Optional[time] = None,
        end_time: Optional[time] = None,
        duration: Optional[int] = None,
        status: TaskStatus = TaskStatus.PENDING,
    ):
        self.title = title
        self.description = description
        self.type = type
        self.project_id = project_id
        self.date = date
        self.start_time = start_time
        self.end_time = end_time
        self.duration = duration
        self.status = status

    @property
    def completed(self) -> bool:
        return self.status == TaskStatus.COMPLETED

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "description": self.description,
            "type": self.type.value,
            "project_id": self.project_id,
            "date": to_storage_date(self.date),
            "start_time": _time_to_str(self.start_time),
            "end_time": _time_to_str(self.end_time),
            "duration": self.duration,
            "status": self.status.value,
        }

    @staticmethod
    def _fields_from_dict(data: dict) -> dict[str, Any]:
        return {
            "title": data["title"],
            "description": data.get("description") or "",
            "type": TaskType(data["type"]),
            "project_id": data.get("project_id"),
            "date": from_storage_date(data["date"]),
            "start_time": _time_from_str(data.get("start_time")),
            "end_time": _time_from_str(data.get("end_time")),
            "duration": data.get("duration"),
            "status": TaskStatus(data.get("status") or TaskStatus.PENDING.value),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "TaskDraft":
        return cls(**cls._fields_from_dict(data))

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(title={self.title!r}, type={self.type.value}, "
            f"date={self.date.isoformat()}, duration={self.duration})"
        )


class Task(TaskDraft):
    """A persisted task."""

    def __init__(self, id: str, created_at: Optional[datetime] = None, **fields: Any):
        super().__init__(**fields)
        self.id = id
        self.created_at = created_at or datetime.now()

    @classmethod
    def from_draft(cls, id: str, draft: TaskDraft) -> "Task":
        return cls(
            id=id,
            title=draft.title,
            description=draft.description,
            type=draft.type,
            project_id=draft.project_id,
            date=draft.date,
            start_time=draft.start_time,
            end_time=draft.end_time,
            duration=draft.duration,
            status=draft.status,
        )

    def to_dict(self) -> dict:
        result = {"id": self.id}
        result.update(super().to_dict())
        result["created_at"] = self.created_at.isoformat()
        return result

    @classmethod
    def from_dict(cls, data: dict) -> "Task":
        created_at = data.get("created_at")
        return cls(
            id=data["id"],
            created_at=datetime.fromisoformat(created_at) if created_at else None,
            **cls._fields_from_dict(data),
        )
