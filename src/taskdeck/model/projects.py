"""Project list cache shared between the project list and open boards."""

from __future__ import annotations

from datetime import date
from typing import Any, Iterable

from taskdeck.model.board import any_overdue
from taskdeck.model.observable import Observable
from taskdeck.model.records import Project, Task


class ProjectCache(Observable):
    """Cached project list with per-project indicators.

    Board screens report task count and overdue changes here; the project
    list watches it. Ops emitted: ``replace_all``, ``upsert``, ``remove``,
    ``task_count``, ``overdue``.
    """

    def __init__(self) -> None:
        self._init_watchers()
        self._projects: list[Project] = []
        self.loaded = False

    def __iter__(self):
        return iter(list(self._projects))

    def __len__(self) -> int:
        return len(self._projects)

    def get(self, project_id: Any) -> Project | None:
        for project in self._projects:
            if project.id == project_id:
                return project
        return None

    def replace_all(self, projects: Iterable[Project]) -> None:
        old = self._projects
        self._projects = list(projects)
        self.loaded = True
        self._emit("replace_all", old, self._projects)

    def clear(self) -> None:
        """Forget every project, e.g. on logout."""
        old = self._projects
        self._projects = []
        self.loaded = False
        self._emit("replace_all", old, self._projects)

    def upsert(self, project: Project) -> None:
        for i, existing in enumerate(self._projects):
            if existing.id == project.id:
                self._projects[i] = project
                self._emit("upsert", existing, project)
                return
        self._projects.append(project)
        self._emit("upsert", None, project)

    def remove(self, project_id: Any) -> Project | None:
        project = self.get(project_id)
        if project is not None:
            self._projects.remove(project)
            self._emit("remove", project, None)
        return project

    def set_task_count(self, project_id: Any, count: int) -> None:
        """Record a project's task count as seen by an open board."""
        project = self.get(project_id)
        if project is None or project.task_count == count:
            return
        old = project.task_count
        project.task_count = count
        self._emit("task_count", old, project)

    def refresh_overdue(self, project_id: Any, tasks: Iterable[Task], today: date | None = None) -> None:
        """Recompute a project's overdue flag from its tasks."""
        project = self.get(project_id)
        if project is None:
            return
        overdue = any_overdue(tasks, today)
        if overdue != project.overdue:
            old = project.overdue
            project.overdue = overdue
            self._emit("overdue", old, project)
