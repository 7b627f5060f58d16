"""Derived board views: stage ordering, grouping and task indicators."""

from __future__ import annotations

from datetime import date
from typing import Any, Iterable

from taskdeck.model.records import Stage, Task, coerce_id
from taskdeck.model.store import task_sort_key


def sort_stages(stages: Iterable[Stage]) -> list[Stage]:
    """Order stages by position, then creation time, then id."""

    def key(stage: Stage) -> tuple:
        sid = stage.id
        id_key = (0, sid, "") if isinstance(sid, int) else (1, 0, str(sid))
        return (stage.position or 0, stage.created_at or "", id_key)

    return sorted(stages, key=key)


def group_tasks(tasks: Iterable[Task], stages: Iterable[Stage]) -> dict[Any, list[Task]]:
    """Build the board snapshot: stage id -> ordered tasks.

    Every stage gets an entry, empty or not. Tasks pointing at a stage that
    is not on the board are left out.
    """
    groups: dict[Any, list[Task]] = {s.id: [] for s in sort_stages(stages)}
    for task in tasks:
        if task.stage_id in groups:
            groups[task.stage_id].append(task)
    for stage_tasks in groups.values():
        stage_tasks.sort(key=task_sort_key)
    return groups


def is_overdue(task: Task, today: date | None = None) -> bool:
    """True when the due date has passed and the task is not done.

    A task due today is not overdue until the day is over.
    """
    due = task.due
    if due is None or task.status == "done":
        return False
    return (today or date.today()) > due


def any_overdue(tasks: Iterable[Task], today: date | None = None) -> bool:
    return any(is_overdue(t, today) for t in tasks)


def completed_count(tasks: Iterable[Task]) -> int:
    return sum(1 for t in tasks if t.status == "done")


def filter_by_assignee(tasks: Iterable[Task], assignee_ids: Iterable[Any] | None) -> list[Task]:
    """Keep tasks assigned to any of the given users. None or empty keeps all.

    The id ``"unassigned"`` matches tasks with no assignee.
    """
    wanted = {coerce_id(a) for a in assignee_ids or ()}
    if not wanted:
        return list(tasks)
    return [
        t for t in tasks if t.assignee_id in wanted or (t.assignee_id is None and "unassigned" in wanted)
    ]
