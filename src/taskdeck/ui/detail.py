"""Task detail modal: fields, comments and task actions."""

from __future__ import annotations

import logging

from rich.markup import escape
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Static

from taskdeck.api import ApiClient
from taskdeck.errors import ApiError, AuthExpiredError
from taskdeck.model.board import is_overdue
from taskdeck.model.records import Comment, Stage, Task
from taskdeck.ui.constants import ICON_COMMENT, ICON_DELETE, ICON_TASK, PRIORITY_ICONS, STATUS_LABELS

logger = logging.getLogger(__name__)


def task_lines(task: Task, stage: Stage | None = None) -> list[str]:
    """Label/value lines shown at the top of the detail view."""
    lines = [
        f"Stage:     {stage.name if stage else task.stage_id}",
        f"Status:    {STATUS_LABELS.get(task.status, task.status)}",
        f"Priority:  {PRIORITY_ICONS.get(task.priority, '')} {task.priority}",
        f"Assignee:  {task.assignee_name or '-'}",
    ]
    if task.due:
        overdue = " (overdue)" if is_overdue(task) else ""
        lines.append(f"Due:       {task.due.isoformat()}{overdue}")
    if task.estimated_hours is not None:
        lines.append(f"Estimate:  {task.estimated_hours:g}h")
    return lines


class CommentRow(Static):
    """A single comment line."""

    DEFAULT_CSS = """
    CommentRow {
        width: 100%;
        height: auto;
        margin-bottom: 1;
    }
    """

    def __init__(self, comment: Comment) -> None:
        reply = "  ↳ " if comment.reply_to_id or comment.parent_comment_id else ""
        media = f" [{comment.media_name or comment.media_type}]" if comment.has_media else ""
        super().__init__(f"{reply}{comment.author}: {comment.content}{media}", markup=False)
        self.comment = comment


class TaskDetailModal(ModalScreen[str | None]):
    """Show a task with its comments.

    Dismisses with ``"edit"`` or ``"delete"`` when the user picks one of
    those actions, else None.
    """

    DEFAULT_CSS = """
    TaskDetailModal {
        align: center middle;
        background: rgba(0, 0, 0, 0.6);
    }
    TaskDetailModal #detail-container {
        width: 90%;
        height: 90%;
        background: $surface;
        padding: 0 1;
    }
    TaskDetailModal #detail-title-bar {
        width: 100%;
        height: auto;
        background: $primary;
        text-style: bold;
        padding: 0 1;
    }
    TaskDetailModal #detail-fields {
        height: auto;
        margin: 1 0;
    }
    TaskDetailModal #detail-description {
        height: auto;
        margin-bottom: 1;
    }
    TaskDetailModal #comments {
        height: 1fr;
        border-top: solid $surface-lighten-2;
    }
    TaskDetailModal #detail-buttons {
        height: 3;
        align: right middle;
    }
    TaskDetailModal Button {
        margin: 0 1;
    }
    """

    BINDINGS = [
        ("escape", "close", "Close"),
    ]

    def __init__(self, task: Task, api: ApiClient, stage: Stage | None = None, can_edit: bool = True) -> None:
        super().__init__()
        self.record = task
        self.api = api
        self.stage = stage
        self.can_edit = can_edit
        self.comments: list[Comment] = []

    def compose(self) -> ComposeResult:
        with Vertical(id="detail-container"):
            yield Static(f"{ICON_TASK} #{self.record.id} {self.record.title}", id="detail-title-bar", markup=False)
            yield Static("\n".join(task_lines(self.record, self.stage)), id="detail-fields", markup=False)
            yield Static(self.record.description or "", id="detail-description", markup=False)
            yield Static(f"{ICON_COMMENT} Comments", id="comments-title")
            yield VerticalScroll(id="comments")
            yield Input(placeholder="Add a comment and press enter", id="comment-input")
            with Horizontal(id="detail-buttons"):
                yield Button("Edit", id="edit", disabled=not self.can_edit)
                yield Button(f"{ICON_DELETE} Delete", id="delete", variant="error", disabled=not self.can_edit)
                yield Button("Close", id="close")

    async def on_mount(self) -> None:
        await self.load_comments()

    async def load_comments(self) -> None:
        try:
            self.comments = await self.api.list_comments(self.record.id)
        except AuthExpiredError:
            return
        except ApiError as exc:
            self.notify(f"Could not load comments: {escape(exc.message)}", severity="error")
            return
        container = self.query_one("#comments", VerticalScroll)
        await container.remove_children()
        if self.comments:
            await container.mount_all([CommentRow(c) for c in self.comments])
        else:
            await container.mount(Static("No comments yet.", classes="empty"))

    async def on_input_submitted(self, event: Input.Submitted) -> None:
        event.stop()
        content = event.value.strip()
        if not content:
            return
        try:
            comment = await self.api.add_comment(self.record.id, content)
        except AuthExpiredError:
            return
        except ApiError as exc:
            self.notify(f"Could not add comment: {escape(exc.message)}", severity="error")
            return
        logger.info("comment %s added to task %s", comment.id, self.record.id)
        event.input.value = ""
        await self.load_comments()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        event.stop()
        if event.button.id in ("edit", "delete"):
            self.dismiss(event.button.id)
        else:
            self.dismiss(None)

    def action_close(self) -> None:
        self.dismiss(None)
