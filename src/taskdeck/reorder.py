"""Optimistic drag-and-drop moves of tasks between stages.

One gesture at a time goes IDLE -> DRAGGING -> DROPPED -> IDLE. On drop the
task store is changed at once; the confirming request runs afterwards and
either installs the server's record or puts the pre-drag record back.
"""

from __future__ import annotations

import asyncio
import enum
import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable

from taskdeck.api import ApiClient
from taskdeck.errors import ApiError
from taskdeck.model.records import Stage, Task, User
from taskdeck.model.store import TaskStore
from taskdeck.permissions import PermissionPolicy

logger = logging.getLogger(__name__)

MOVE_FAILED = "Move failed, please refresh the board."


class DragState(enum.Enum):
    IDLE = "idle"
    DRAGGING = "dragging"
    DROPPED = "dropped"


@dataclass(frozen=True)
class PendingMove:
    """An applied optimistic move awaiting server confirmation."""

    task_id: Any
    source_stage_id: Any
    dest_stage_id: Any
    position: int
    snapshot: Task


class DragReorderController:
    """Runs the drag gesture and the optimistic move protocol.

    ``stages`` returns the stages currently on the board. ``on_error`` gets
    a user-facing message when a move could not be saved. ``policy``,
    ``user`` and ``role`` feed the advisory permission check on pick-up.
    """

    def __init__(
        self,
        store: TaskStore,
        api: ApiClient,
        stages: Callable[[], Iterable[Stage]],
        on_error: Callable[[str], None] | None = None,
        policy: PermissionPolicy | None = None,
        user: User | None = None,
        role: str | None = None,
    ) -> None:
        self.store = store
        self.api = api
        self._stages = stages
        self.on_error = on_error
        self.policy = policy
        self.user = user
        self.role = role

        self.state = DragState.IDLE
        self.dragged_task: Task | None = None
        self.source_stage_id: Any = None
        self.dest_stage_id: Any = None

        self._in_flight: dict[Any, PendingMove] = {}
        self._commits: set[asyncio.Task] = set()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def is_in_flight(self, task_id: Any) -> bool:
        return task_id in self._in_flight

    def _stage(self, stage_id: Any) -> Stage | None:
        for stage in self._stages():
            if stage.id == stage_id:
                return stage
        return None

    # -- gesture --

    def can_drag(self, task_id: Any) -> bool:
        """Advisory check: permission, stage movement flag, nothing in flight."""
        if self._closed or task_id in self._in_flight:
            return False
        task = self.store.get(task_id)
        if task is None:
            return False
        if self.policy is not None and not self.policy.allows(self.user, "manage_tasks", self.role):
            return False
        stage = self._stage(task.stage_id)
        return stage is None or stage.allow_task_movement

    def begin(self, task_id: Any) -> bool:
        """Pick up a task. Returns False if the drag is refused."""
        if self.state is not DragState.IDLE or not self.can_drag(task_id):
            return False
        task = self.store.get(task_id)
        self.state = DragState.DRAGGING
        self.dragged_task = task
        self.source_stage_id = task.stage_id
        self.dest_stage_id = None
        logger.debug("drag start task=%s stage=%s", task.id, task.stage_id)
        return True

    def hover(self, stage_id: Any) -> None:
        """Pointer entered a candidate stage. UI feedback only."""
        if self.state is DragState.DRAGGING:
            self.dest_stage_id = stage_id

    def leave(self, stage_id: Any = None) -> None:
        """Pointer left a stage (or any stage, when stage_id is None)."""
        if self.state is DragState.DRAGGING and (stage_id is None or stage_id == self.dest_stage_id):
            self.dest_stage_id = None

    def cancel(self) -> None:
        """Abandon the gesture without touching the store."""
        self._reset()

    def _reset(self) -> None:
        self.state = DragState.IDLE
        self.dragged_task = None
        self.source_stage_id = None
        self.dest_stage_id = None

    def drop(self, stage_id: Any = None) -> PendingMove | None:
        """Release the task over ``stage_id`` (None: outside any stage).

        Applies the move to the store and returns it, or returns None when
        the drop is a cancel or a no-op. Either way the gesture is over.
        """
        if self.state is not DragState.DRAGGING:
            return None
        task = self.dragged_task
        source = self.source_stage_id
        self.state = DragState.DROPPED
        try:
            if stage_id is None or self._stage(stage_id) is None:
                logger.debug("drag cancelled task=%s", task.id)
                return None
            if stage_id == source:
                return None
            if task.id not in self.store:
                return None
            position = self.store.count_in_stage(stage_id)
            snapshot = self.store.move_optimistic(task.id, stage_id, position)
            move = PendingMove(task.id, source, stage_id, position, snapshot)
            self._in_flight[task.id] = move
            logger.info("moved task=%s stage %s -> %s pos=%s (pending)", task.id, source, stage_id, position)
            return move
        finally:
            self._reset()

    def move(self, task_id: Any, stage_id: Any) -> PendingMove | None:
        """Whole gesture in one call, for keyboard moves."""
        if not self.begin(task_id):
            return None
        self.hover(stage_id)
        return self.drop(stage_id)

    # -- confirmation --

    async def commit(self, move: PendingMove) -> Task | None:
        """Confirm a move with the server.

        Returns the task record the store ends up with, or None if the move
        was rolled back or the controller was closed meanwhile.
        """
        try:
            server_task = await self.api.move_task(move.task_id, move.dest_stage_id, move.position)
        except asyncio.CancelledError:
            self._rollback(move)
            raise
        except ApiError as exc:
            logger.warning("move of task %s failed: %s", move.task_id, exc)
            if self._rollback(move) and self.on_error is not None:
                self.on_error(MOVE_FAILED)
            return None
        except Exception:
            self._rollback(move)
            raise

        self._in_flight.pop(move.task_id, None)
        if self._closed:
            return None
        if move.task_id in self.store:
            # re-emit even without a server record so views drop the pending state
            self.store.upsert_one(server_task or self.store.get(move.task_id))
        return self.store.get(move.task_id)

    def _rollback(self, move: PendingMove) -> bool:
        self._in_flight.pop(move.task_id, None)
        if self._closed:
            return False
        restored = self.store.restore(move.snapshot)
        logger.info("rolled back task=%s to stage %s", move.task_id, move.source_stage_id)
        return restored

    def schedule(self, move: PendingMove) -> asyncio.Task:
        """Run commit() in the background, tied to this controller's lifetime."""
        task = asyncio.ensure_future(self.commit(move))
        self._commits.add(task)
        task.add_done_callback(self._commits.discard)
        return task

    async def drop_and_commit(self, stage_id: Any = None) -> Task | None:
        """drop() then commit(). Returns None when nothing was moved."""
        move = self.drop(stage_id)
        if move is None:
            return None
        return await self.commit(move)

    def close(self) -> None:
        """The owning view is gone: cancel commits, ignore late responses."""
        self._closed = True
        self._reset()
        self._in_flight.clear()
        for task in list(self._commits):
            task.cancel()
