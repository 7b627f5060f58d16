"""Record types mirrored from the backend's JSON."""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from datetime import date
from typing import Any

TASK_STATUSES = ("todo", "in_progress", "done", "cancelled")
TASK_PRIORITIES = ("P1", "P2", "P3")
PROJECT_ROLES = ("owner", "manager", "collaborator")


def coerce_id(value: Any) -> Any:
    """Turn numeric string ids into ints, leave everything else alone."""
    if isinstance(value, str) and value.isdigit():
        return int(value)
    return value


def parse_date(value: str | None) -> date | None:
    """Parse the date part of an ISO date or datetime string."""
    if not value:
        return None
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        return None


def _split(cls, data: dict[str, Any]) -> tuple[dict[str, Any], dict[str, Any]]:
    names = {f.name for f in fields(cls)} - {"extra"}
    known = {k: v for k, v in data.items() if k in names}
    extra = {k: v for k, v in data.items() if k not in names}
    return known, extra


class Record:
    """Mixin for dataclass records: dict round-trip keeping unknown keys."""

    @classmethod
    def from_dict(cls, data: dict[str, Any]):
        known, extra = _split(cls, data)
        for key in ("id", "stage_id", "project_id", "assignee_id", "task_id", "user_id", "owner_id"):
            if key in known:
                known[key] = coerce_id(known[key])
        return cls(**known, extra=extra)

    def to_dict(self) -> dict[str, Any]:
        out = dict(self.extra)
        for f in fields(self):
            if f.name != "extra":
                out[f.name] = getattr(self, f.name)
        return out

    def copy(self, **changes):
        return replace(self, **changes)


@dataclass
class User(Record):
    """A backend user."""

    id: Any
    username: str = ""
    email: str = ""
    role: str = "user"
    extra: dict[str, Any] = field(default_factory=dict, compare=False)

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


@dataclass
class Member(Record):
    """A user's membership in a project."""

    user_id: Any
    role: str = "collaborator"
    user: dict[str, Any] | None = None
    extra: dict[str, Any] = field(default_factory=dict, compare=False)

    @property
    def username(self) -> str:
        if self.user and self.user.get("username"):
            return self.user["username"]
        return f"user {self.user_id}"


@dataclass
class Task(Record):
    """A task card."""

    id: Any
    stage_id: Any
    project_id: Any = None
    title: str = ""
    description: str = ""
    status: str = "todo"
    priority: str = "P2"
    assignee_id: Any = None
    assignee: dict[str, Any] | None = None
    due_date: str | None = None
    estimated_hours: float | None = None
    actual_hours: float | None = None
    position: int = 0
    version: int = 1
    created_at: str | None = None
    updated_at: str | None = None
    extra: dict[str, Any] = field(default_factory=dict, compare=False)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Task:
        task = super().from_dict(data)
        task.position = task.position or 0
        return task

    @property
    def due(self) -> date | None:
        return parse_date(self.due_date)

    @property
    def assignee_name(self) -> str | None:
        if self.assignee and self.assignee.get("username"):
            return self.assignee["username"]
        if self.assignee_id is not None:
            return f"user {self.assignee_id}"
        return None


@dataclass
class Stage(Record):
    """A board column."""

    id: Any
    project_id: Any = None
    name: str = ""
    description: str = ""
    color: str = "#3B82F6"
    position: int = 0
    task_limit: int | None = None
    is_completed: bool = False
    allow_task_creation: bool = True
    allow_task_deletion: bool = True
    allow_task_movement: bool = True
    notification_enabled: bool = True
    auto_assign_status: str | None = None
    created_at: str | None = None
    extra: dict[str, Any] = field(default_factory=dict, compare=False)


@dataclass
class Project(Record):
    """A project, with the client-side indicators shown in the project list."""

    id: Any
    name: str = ""
    description: str = ""
    owner_id: Any = None
    status: str = "active"
    start_date: str | None = None
    end_date: str | None = None
    user_role: str | None = None
    task_count: int = 0
    overdue: bool = False
    stages: list[dict[str, Any]] = field(default_factory=list)
    extra: dict[str, Any] = field(default_factory=dict, compare=False)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Project:
        project = super().from_dict(data)
        if "task_count" not in data and isinstance(data.get("tasks"), list):
            project.task_count = len(data["tasks"])
        return project


@dataclass
class Comment(Record):
    """A task comment, optionally attached to media or replying to another."""

    id: Any
    task_id: Any = None
    user_id: Any = None
    user: dict[str, Any] | None = None
    content: str = ""
    media_id: str | None = None
    media_type: str | None = None
    media_name: str | None = None
    reply_to_id: Any = None
    parent_comment_id: Any = None
    created_at: str | None = None
    replies: list[dict[str, Any]] = field(default_factory=list)
    extra: dict[str, Any] = field(default_factory=dict, compare=False)

    @property
    def author(self) -> str:
        if self.user and self.user.get("username"):
            return self.user["username"]
        return f"user {self.user_id}"

    @property
    def has_media(self) -> bool:
        return bool(self.media_id)
