"""Matches project names from spreadsheet rows to projects, creating them on demand."""

import logging
import random
from typing import Any, Iterable, Optional

from timesheet.config import PROJECT_COLORS, PROJECT_PLACEHOLDERS
from timesheet.exceptions import TimesheetError
from timesheet.models.project import Project
from timesheet.models.task import TaskType

logger = logging.getLogger(__name__)


class ProjectResolver:
    """Resolves ``(name, type)`` pairs to project ids for one import run.

    The project set is loaded once by the caller. Projects created while
    resolving are added to it so later rows in the same batch reuse them.

    Args:
        project_service: Anything with ``create_project(name, type, color)``.
        projects: Existing projects, in the order they should be matched.
        rng: Color source; pass a seeded ``random.Random`` for repeatable colors.
    """

    def __init__(
        self,
        project_service: Any,
        projects: Iterable[Project],
        rng: Optional[random.Random] = None,
    ):
        self.project_service = project_service
        self.projects: dict[str, Project] = {p.id: p for p in projects}
        self.created_names: set[str] = set()
        self.rng = rng or random.Random()

    def pick_color(self) -> str:
        return self.rng.choice(PROJECT_COLORS)

    def find(self, name: str, task_type: TaskType) -> Optional[Project]:
        for project in self.projects.values():
            if project.matches(name, task_type):
                return project
        return None

    def resolve(self, name: Any, task_type: TaskType) -> Optional[str]:
        """Return the id of the matching or newly created project.

        Returns None for blank names, the ``No Project``/``N/A``
        placeholders, and when the new project cannot be persisted.
        """
        name = str(name).strip() if name is not None else ""
        if not name or name in PROJECT_PLACEHOLDERS:
            return None

        existing = self.find(name, task_type)
        if existing is not None:
            return existing.id

        try:
            project = self.project_service.create_project(
                name=name, type=task_type, color=self.pick_color()
            )
        except (TimesheetError, OSError, ValueError) as e:
            logger.error("Failed to create project %r: %s", name, e)
            return None

        self.projects[project.id] = project
        self.created_names.add(name)
        logger.info("Created project %r (%s) during import", name, task_type.value)
        return project.id
