"""Stage column widget for the board."""

from __future__ import annotations

from typing import TYPE_CHECKING

from textual.app import ComposeResult
from textual.containers import Vertical
from textual.widgets import Rule, Static

from taskdeck.model.records import Stage, Task
from taskdeck.ui.card import TaskCard
from taskdeck.ui.constants import ICON_LOCK
from taskdeck.ui.drag import DropTarget

if TYPE_CHECKING:
    from taskdeck.reorder import DragReorderController


def stage_header(stage: Stage, count: int) -> str:
    limit = f"/{stage.task_limit}" if stage.task_limit else ""
    lock = f" {ICON_LOCK}" if not stage.allow_task_movement else ""
    return f"{stage.name} ({count}{limit}){lock}"


class StageColumn(DropTarget, Vertical):
    """A single stage on the board, holding its task cards."""

    DEFAULT_CSS = """
    StageColumn {
        width: 1fr;
        height: auto;
        min-height: 100%;
        min-width: 28;
        max-width: 32;
        padding: 0 1;
        border-right: tall $surface-lighten-1;
    }
    StageColumn.drop-target {
        background: $primary-background;
    }
    StageColumn #stage-title {
        width: 100%;
        text-align: center;
        text-style: bold;
    }
    StageColumn > Rule.-horizontal {
        margin: 0;
    }
    """

    def __init__(self, stage: Stage, tasks: list[Task], controller: DragReorderController | None = None) -> None:
        super().__init__()
        self.stage = stage
        self.controller = controller
        self._tasks = list(tasks)
        self._cards: list[TaskCard] = []

    @property
    def stage_id(self):
        return self.stage.id

    def compose(self) -> ComposeResult:
        yield Static(stage_header(self.stage, len(self._tasks)), id="stage-title", markup=False)
        yield Rule()
        self._cards = [TaskCard(task, self.controller) for task in self._tasks]
        yield from self._cards

    def on_mount(self) -> None:
        self.styles.border_top = ("tall", self.stage.color)

    def cards(self) -> list[TaskCard]:
        return list(self._cards)

    def sync_tasks(self, tasks: list[Task]) -> None:
        """Bring the cards in line with ``tasks`` (already ordered)."""
        self._tasks = list(tasks)
        self.query_one("#stage-title", Static).update(stage_header(self.stage, len(tasks)))
        if [c.task_id for c in self._cards] == [t.id for t in tasks]:
            for card, task in zip(self._cards, tasks):
                card.update_task(task)
            return
        for card in self._cards:
            card.remove()
        self._cards = [TaskCard(t, self.controller) for t in tasks]
        if self._cards:
            self.mount_all(self._cards)

    # -- DropTarget: column accepting task drops --

    def drag_over(self, draggable, x: int, y: int) -> bool:
        if not isinstance(draggable, TaskCard):
            return False
        if self.controller is not None:
            self.controller.hover(self.stage.id)
        self.add_class("drop-target")
        return True

    def drag_away(self, draggable) -> None:
        if self.controller is not None:
            self.controller.leave(self.stage.id)
        self.remove_class("drop-target")

    def try_drop(self, draggable, x: int, y: int) -> bool:
        if not isinstance(draggable, TaskCard):
            return False
        self.remove_class("drop-target")
        if self.controller is not None:
            move = self.controller.drop(self.stage.id)
            if move is not None:
                self.controller.schedule(move)
        return True
