"""Project service."""

import logging
from typing import Optional

from timesheet.config import DEFAULT_PROJECT_COLOR, PROJECTS_COLLECTION
from timesheet.exceptions import ProjectNotFoundError, ValidationError
from timesheet.models.project import Project
from timesheet.models.task import TaskType
from timesheet.storage.json_store import JsonStore

logger = logging.getLogger(__name__)


class ProjectService:
    """Creates, lists and edits projects."""

    def __init__(self, store: JsonStore):
        self.store = store

    def _load(self) -> list[Project]:
        return [Project.from_dict(d) for d in self.store.load(PROJECTS_COLLECTION)]

    def _save(self, projects: list[Project]) -> None:
        self.store.save(PROJECTS_COLLECTION, [p.to_dict() for p in projects])

    def create_project(
        self, name: str, type: TaskType, color: str = DEFAULT_PROJECT_COLOR
    ) -> Project:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Project name is required")

        with self.store.lock:
            projects = self._load()
            project = Project(id=self.store.new_id(), name=name, type=TaskType(type), color=color)
            projects.append(project)
            self._save(projects)
        logger.info("Created project %r (%s)", project.name, project.type.value)
        return project

    def list_projects(self, type: Optional[TaskType] = None) -> list[Project]:
        projects = self._load()
        if type is not None:
            projects = [p for p in projects if p.type == type]
        return projects

    def get_project(self, project_id: str) -> Optional[Project]:
        for project in self._load():
            if project.id == project_id:
                return project
        return None

    def update_project(
        self,
        project_id: str,
        name: Optional[str] = None,
        type: Optional[TaskType] = None,
        color: Optional[str] = None,
    ) -> Project:
        with self.store.lock:
            projects = self._load()
            for project in projects:
                if project.id != project_id:
                    continue
                if name is not None:
                    if not name.strip():
                        raise ValidationError("Project name is required")
                    project.name = name.strip()
                if type is not None:
                    project.type = TaskType(type)
                if color:
                    project.color = color
                self._save(projects)
                return project
        raise ProjectNotFoundError(f"Project {project_id} not found")

    def delete_project(self, project_id: str) -> bool:
        with self.store.lock:
            projects = self._load()
            remaining = [p for p in projects if p.id != project_id]
            if len(remaining) == len(projects):
                return False
            self._save(remaining)
        return True
