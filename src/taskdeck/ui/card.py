"""Task card widget for the board."""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING

from textual.app import ComposeResult
from textual.message import Message
from textual.widgets import Static

from taskdeck.model.board import is_overdue
from taskdeck.model.records import Task
from taskdeck.ui.constants import ICON_DUE, ICON_OVERDUE, ICON_USER, PRIORITY_ICONS, STATUS_LABELS
from taskdeck.ui.drag import DraggableMixin, DragGhost

if TYPE_CHECKING:
    from taskdeck.reorder import DragReorderController


def build_footer_text(task: Task, today: date | None = None) -> str:
    """One-line summary of status, assignee and due date."""
    parts = [STATUS_LABELS.get(task.status, task.status)]
    if task.assignee_name:
        parts.append(f"{ICON_USER} {task.assignee_name}")
    if task.due:
        icon = ICON_OVERDUE if is_overdue(task, today) else ICON_DUE
        parts.append(f"{icon} {task.due.isoformat()}")
    return "  ".join(parts)


class TaskCard(DraggableMixin, Static, can_focus=True):
    """A single task in a stage column."""

    BINDINGS = [
        ("space", "open_task"),
        ("enter", "open_task"),
    ]

    class Opened(Message):
        """Posted when the card is clicked or activated."""

        def __init__(self, card: TaskCard) -> None:
            super().__init__()
            self.card = card

    DEFAULT_CSS = """
    TaskCard {
        width: 100%;
        height: auto;
        padding: 0 1;
        margin-bottom: 1;
        background: $surface;
    }
    TaskCard:focus {
        background: $primary;
    }
    TaskCard.overdue #card-footer {
        color: $error;
    }
    TaskCard.pending {
        text-style: italic;
    }
    TaskCard.dragging {
        display: none;
    }
    TaskCard #card-title {
        width: 100%;
    }
    TaskCard #card-footer {
        width: 100%;
        height: 1;
        color: $text-muted;
    }
    """

    def __init__(self, task: Task, controller: DragReorderController | None = None) -> None:
        Static.__init__(self)
        self._init_draggable()
        self.record = task
        self.controller = controller

    @property
    def task_id(self):
        return self.record.id

    def compose(self) -> ComposeResult:
        yield Static(id="card-title", markup=False)
        yield Static(id="card-footer", markup=False)

    def on_mount(self) -> None:
        self._render_task()

    def update_task(self, task: Task) -> None:
        self.record = task
        if self.is_mounted:
            self._render_task()

    def _render_task(self) -> None:
        task = self.record
        icon = PRIORITY_ICONS.get(task.priority, "")
        self.query_one("#card-title", Static).update(f"{icon} {task.title}".strip())
        self.query_one("#card-footer", Static).update(build_footer_text(task))
        self.set_class(is_overdue(task), "overdue")
        self.set_class(self.controller is not None and self.controller.is_in_flight(task.id), "pending")

    def action_open_task(self) -> None:
        self.draggable_clicked()

    # -- DraggableMixin --

    def draggable_begin(self) -> bool:
        if self.controller is None:
            return False
        if not self.controller.begin(self.record.id):
            self.notify("This task cannot be moved right now", severity="warning")
            return False
        return True

    def draggable_make_ghost(self):
        return DragGhost(self.record.title, markup=False)

    def draggable_clicked(self) -> None:
        self.post_message(self.Opened(self))

    def _drag_cancel(self) -> None:
        super()._drag_cancel()
        if self.controller is not None:
            self.controller.drop(None)
