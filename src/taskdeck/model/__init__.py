"""Client-side records and stores."""

from taskdeck.model.board import (
    any_overdue,
    completed_count,
    filter_by_assignee,
    group_tasks,
    is_overdue,
    sort_stages,
)
from taskdeck.model.projects import ProjectCache
from taskdeck.model.records import Comment, Member, Project, Stage, Task, User
from taskdeck.model.store import TaskStore

__all__ = [
    "Comment",
    "Member",
    "Project",
    "ProjectCache",
    "Stage",
    "Task",
    "TaskStore",
    "User",
    "any_overdue",
    "completed_count",
    "filter_by_assignee",
    "group_tasks",
    "is_overdue",
    "sort_stages",
]
