"""Project model."""

from datetime import datetime
from typing import Optional

from timesheet.models.task import TaskType


class Project:
    """A named, colored grouping of tasks of one type."""

    def __init__(
        self,
        id: str,
        name: str,
        type: TaskType,
        color: str,
        created_at: Optional[datetime] = None,
    ):
        self.id = id
        self.name = name
        self.type = type
        self.color = color
        self.created_at = created_at or datetime.now()

    def matches(self, name: str, task_type: TaskType) -> bool:
        """Case-insensitive name match within the same task type."""
        return self.type == task_type and self.name.lower() == name.lower()

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type.value,
            "color": self.color,
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Project":
        return cls(
            id=data["id"],
            name=data["name"],
            type=TaskType(data["type"]),
            color=data["color"],
            created_at=datetime.fromisoformat(data["created_at"]),
        )

    def __repr__(self) -> str:
        return f"Project(id={self.id!r}, name={self.name!r}, type={self.type.value})"
