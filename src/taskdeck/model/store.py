"""Client-side task store for the open project."""

from __future__ import annotations

from typing import Any, Iterable

from taskdeck.model.observable import Observable
from taskdeck.model.records import Task


def task_sort_key(task: Task) -> tuple:
    """Order within a stage: position, then id."""
    tid = task.id
    id_key = (0, tid, "") if isinstance(tid, int) else (1, 0, str(tid))
    return (task.position or 0, id_key)


class TaskStore(Observable):
    """Flat list of the open project's tasks.

    Every mutation goes through a method here and notifies watchers.
    Nothing is indexed: per-stage views are recomputed from the flat list
    on each read, so they can never drift from it.
    """

    def __init__(self, tasks: Iterable[Task] = ()) -> None:
        self._init_watchers()
        self._tasks: list[Task] = list(tasks)

    def __len__(self) -> int:
        return len(self._tasks)

    def __contains__(self, task_id: Any) -> bool:
        return self._index(task_id) is not None

    def _index(self, task_id: Any) -> int | None:
        for i, task in enumerate(self._tasks):
            if task.id == task_id:
                return i
        return None

    # -- reads --

    def tasks(self) -> list[Task]:
        """All tasks, in insertion order."""
        return list(self._tasks)

    def get(self, task_id: Any) -> Task | None:
        i = self._index(task_id)
        return self._tasks[i] if i is not None else None

    def in_stage(self, stage_id: Any) -> list[Task]:
        """Tasks of one stage, ordered by position then id."""
        return sorted((t for t in self._tasks if t.stage_id == stage_id), key=task_sort_key)

    def count_in_stage(self, stage_id: Any) -> int:
        return sum(1 for t in self._tasks if t.stage_id == stage_id)

    def snapshot(self) -> dict[Any, list[Any]]:
        """Stage id -> ordered task ids, for every stage that has tasks."""
        stage_ids = []
        for task in self._tasks:
            if task.stage_id not in stage_ids:
                stage_ids.append(task.stage_id)
        return {sid: [t.id for t in self.in_stage(sid)] for sid in stage_ids}

    # -- mutations --

    def replace_all(self, tasks: Iterable[Task]) -> None:
        """Swap in a freshly fetched list. No diffing."""
        old = self._tasks
        self._tasks = list(tasks)
        self._emit("replace_all", old, self._tasks)

    def upsert_one(self, task: Task) -> None:
        """Replace the task with the same id, or append it."""
        i = self._index(task.id)
        if i is None:
            self._tasks.append(task)
            self._emit("upsert", None, task)
            return
        old = self._tasks[i]
        self._tasks[i] = task
        self._emit("upsert", old, task)

    def remove_one(self, task_id: Any) -> Task | None:
        i = self._index(task_id)
        if i is None:
            return None
        old = self._tasks.pop(i)
        self._emit("remove", old, None)
        return old

    def remove_stage(self, stage_id: Any) -> list[Task]:
        """Drop every task of a deleted stage."""
        removed = [t for t in self._tasks if t.stage_id == stage_id]
        if removed:
            self._tasks = [t for t in self._tasks if t.stage_id != stage_id]
            self._emit("remove_stage", removed, None)
        return removed

    def move_optimistic(self, task_id: Any, new_stage_id: Any, new_position: int) -> Task:
        """Move a task locally before the server has agreed.

        Returns the task as it was before the move, for rollback.
        Raises KeyError if the task is not in the store.
        """
        i = self._index(task_id)
        if i is None:
            raise KeyError(task_id)
        old = self._tasks[i]
        moved = old.copy(stage_id=new_stage_id, position=new_position)
        self._tasks[i] = moved
        self._emit("move", old, moved)
        return old

    def restore(self, task: Task) -> bool:
        """Put back a snapshot record. A task deleted meanwhile stays deleted."""
        i = self._index(task.id)
        if i is None:
            return False
        old = self._tasks[i]
        self._tasks[i] = task
        self._emit("restore", old, task)
        return True
