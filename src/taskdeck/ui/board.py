"""Board screen showing one column per stage."""

from __future__ import annotations

import logging
from typing import Any

from rich.markup import escape
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, HorizontalScroll
from textual.screen import Screen
from textual.widgets import Footer, Static

from taskdeck.errors import ApiError, AuthExpiredError
from taskdeck.model.board import completed_count, group_tasks, sort_stages
from taskdeck.model.records import Project, Stage, Task
from taskdeck.model.store import TaskStore
from taskdeck.reorder import DragReorderController
from taskdeck.ui.card import TaskCard
from taskdeck.ui.column import StageColumn
from taskdeck.ui.confirm import ConfirmModal
from taskdeck.ui.constants import ICON_PROJECT
from taskdeck.ui.detail import TaskDetailModal
from taskdeck.ui.forms import StageForm, TaskForm
from taskdeck.ui.watcher import StoreWatcherMixin

logger = logging.getLogger(__name__)


class BoardScreen(StoreWatcherMixin, Screen):
    """Kanban board for one project."""

    DEFAULT_CSS = """
    BoardScreen {
        layers: base overlay;
    }
    BoardScreen #board-header {
        width: 100%;
        height: 1;
        background: $primary;
        padding: 0 1;
    }
    BoardScreen #board-title {
        width: 1fr;
        text-style: bold;
    }
    BoardScreen #board-stats {
        width: auto;
    }
    BoardScreen #columns {
        height: 1fr;
    }
    BoardScreen #board-empty {
        padding: 1 2;
        color: $text-muted;
    }
    """

    BINDINGS = [
        Binding("escape", "cancel_drag", "Cancel drag", show=False),
        ("r", "refresh", "Refresh"),
        ("n", "new_task", "New task"),
        ("s", "new_stage", "New stage"),
        ("e", "edit_task", "Edit task"),
        ("delete", "delete_task", "Delete task"),
        ("S", "edit_stage", "Edit stage"),
        ("x", "delete_stage", "Delete stage"),
        Binding("left_square_bracket", "move_task(-1)", "Move left"),
        Binding("right_square_bracket", "move_task(1)", "Move right"),
        ("q", "close", "Projects"),
    ]

    def __init__(self, project: Project) -> None:
        self._init_watcher()
        super().__init__()
        self.project = project
        self.role: str | None = project.user_role
        self.stages: list[Stage] = []
        self.store = TaskStore()
        self.controller: DragReorderController | None = None
        self._active_draggable = None

    def compose(self) -> ComposeResult:
        with Horizontal(id="board-header"):
            yield Static(f"{ICON_PROJECT} {self.project.name}", id="board-title", markup=False)
            yield Static("", id="board-stats")
        yield HorizontalScroll(id="columns")
        yield Footer()

    async def on_mount(self) -> None:
        app = self.app
        self.controller = DragReorderController(
            self.store,
            app.api,
            lambda: self.stages,
            on_error=self._on_move_error,
            policy=app.policy,
            user=app.session.current_user,
            role=self.role,
        )
        self.store_watch(self.store, self._on_store_changed)
        await self.load()

    def on_unmount(self) -> None:
        if self.controller is not None:
            self.controller.close()

    # -- loading and rendering --

    async def load(self) -> None:
        """Fetch project, stages and tasks, then rebuild the board."""
        api = self.app.api
        try:
            project = await api.get_project(self.project.id)
            stages = await api.list_stages(self.project.id)
            tasks = await api.list_tasks(self.project.id)
        except AuthExpiredError:
            return
        except ApiError as exc:
            self.notify(f"Could not load board: {escape(exc.message)}", severity="error")
            return
        self.project = project
        self.role = project.user_role
        if self.controller is not None:
            self.controller.role = self.role
        self.stages = sort_stages(stages)
        with self.suppressing():
            self.store.replace_all(tasks)
        await self.rebuild()
        self._report_project()

    async def rebuild(self) -> None:
        """Recreate every column from the stages and the store."""
        container = self.query_one("#columns", HorizontalScroll)
        await container.remove_children()
        groups = group_tasks(self.store.tasks(), self.stages)
        if not self.stages:
            await container.mount(Static("No stages yet. Press s to add one.", id="board-empty"))
        else:
            await container.mount_all(StageColumn(stage, groups[stage.id], self.controller) for stage in self.stages)
        self._update_stats()

    def columns(self) -> list[StageColumn]:
        return list(self.query(StageColumn))

    def column_for(self, stage_id: Any) -> StageColumn | None:
        for column in self.columns():
            if column.stage_id == stage_id:
                return column
        return None

    def _on_store_changed(self, source, op, old, new) -> None:
        if op in ("replace_all", "remove_stage"):
            self.call_later(self.rebuild)
        else:
            affected = {t.stage_id for t in (old, new) if isinstance(t, Task)}
            for stage_id in affected:
                column = self.column_for(stage_id)
                if column is not None:
                    column.sync_tasks(self.store.in_stage(stage_id))
            self._update_stats()
        self._report_project()

    def _update_stats(self) -> None:
        total = len(self.store)
        done = completed_count(self.store.tasks())
        self.query_one("#board-stats", Static).update(f"{done}/{total} done")

    def _report_project(self) -> None:
        """Push task count and overdue state to the shared project list."""
        projects = self.app.projects
        projects.set_task_count(self.project.id, len(self.store))
        projects.refresh_overdue(self.project.id, self.store.tasks())

    def _on_move_error(self, message: str) -> None:
        self.notify(message, severity="error", timeout=8)

    # -- focus helpers --

    def focused_card(self) -> TaskCard | None:
        return self.focused if isinstance(self.focused, TaskCard) else None

    def focused_stage(self) -> Stage | None:
        widget = self.focused
        while widget is not None:
            if isinstance(widget, StageColumn):
                return widget.stage
            widget = widget.parent
        return self.stages[0] if self.stages else None

    def _focus_task(self, task_id: Any) -> None:
        for card in self.query(TaskCard):
            if card.task_id == task_id:
                card.focus()
                return

    def _stage(self, stage_id: Any) -> Stage | None:
        return next((s for s in self.stages if s.id == stage_id), None)

    def _allowed(self, action: str) -> bool:
        if self.app.policy.allows(self.app.session.current_user, action, self.role):
            return True
        self.notify("You don't have permission to do that", severity="warning")
        return False

    # -- screen routes mouse events to the active draggable --

    def on_mouse_move(self, event) -> None:
        if self._active_draggable is not None:
            self._active_draggable._drag_move(event.screen_x, event.screen_y)

    def on_mouse_up(self, event) -> None:
        if self._active_draggable is not None:
            self._active_draggable._drag_finish(event.screen_x, event.screen_y)

    def action_cancel_drag(self) -> None:
        if self._active_draggable is not None:
            self._active_draggable._drag_cancel()

    # -- keyboard moves --

    def action_move_task(self, direction: int) -> None:
        """Move the focused task to the previous or next stage."""
        card = self.focused_card()
        if card is None or self.controller is None:
            return
        index = next((i for i, s in enumerate(self.stages) if s.id == card.record.stage_id), None)
        if index is None:
            return
        target = index + direction
        if not 0 <= target < len(self.stages):
            return
        task_id = card.task_id
        if not self.controller.can_drag(task_id):
            self.notify("This task cannot be moved right now", severity="warning")
            return
        move = self.controller.move(task_id, self.stages[target].id)
        if move is not None:
            self.controller.schedule(move)
            self.call_after_refresh(self._focus_task, task_id)

    # -- tasks --

    def on_task_card_opened(self, event: TaskCard.Opened) -> None:
        event.stop()
        task = event.card.record
        modal = TaskDetailModal(task, self.app.api, self._stage(task.stage_id), can_edit=self._can_manage_tasks())

        async def on_close(result: str | None) -> None:
            if result == "edit":
                self._edit(task.id)
            elif result == "delete":
                self._confirm_delete(task.id)

        self.app.push_screen(modal, on_close)

    def _can_manage_tasks(self) -> bool:
        return self.app.policy.allows(self.app.session.current_user, "manage_tasks", self.role)

    def action_new_task(self) -> None:
        stage = self.focused_stage()
        if stage is None:
            self.notify("Add a stage first", severity="warning")
            return
        if not stage.allow_task_creation:
            self.notify(f"Stage '{escape(stage.name)}' does not accept new tasks", severity="warning")
            return
        if not self._allowed("manage_tasks"):
            return

        async def on_form(values: dict | None) -> None:
            if values is not None:
                await self.create_task(stage, values)

        self.app.push_screen(TaskForm(title=f"New task in {stage.name}"), on_form)

    async def create_task(self, stage: Stage, values: dict) -> Task | None:
        fields = dict(values, project_id=self.project.id, stage_id=stage.id)
        try:
            task = await self.app.api.create_task(fields)
        except AuthExpiredError:
            return None
        except ApiError as exc:
            self.notify(f"Could not create task: {escape(exc.message)}", severity="error")
            return None
        logger.info("created task %s in stage %s", task.id, stage.id)
        self.store.upsert_one(task)
        return task

    def action_edit_task(self) -> None:
        card = self.focused_card()
        if card is not None:
            self._edit(card.task_id)

    def _edit(self, task_id: Any) -> None:
        task = self.store.get(task_id)
        if task is None or not self._allowed("manage_tasks"):
            return

        async def on_form(values: dict | None) -> None:
            if values is not None:
                await self.update_task(task_id, values)

        self.app.push_screen(TaskForm.for_task(task), on_form)

    async def update_task(self, task_id: Any, values: dict) -> Task | None:
        try:
            task = await self.app.api.update_task(task_id, values)
        except AuthExpiredError:
            return None
        except ApiError as exc:
            self.notify(f"Could not save task: {escape(exc.message)}", severity="error")
            return None
        self.store.upsert_one(task)
        return task

    def action_delete_task(self) -> None:
        card = self.focused_card()
        if card is not None:
            self._confirm_delete(card.task_id)

    def _confirm_delete(self, task_id: Any) -> None:
        task = self.store.get(task_id)
        if task is None or not self._allowed("manage_tasks"):
            return
        stage = self._stage(task.stage_id)
        if stage is not None and not stage.allow_task_deletion:
            self.notify(f"Tasks cannot be deleted from '{escape(stage.name)}'", severity="warning")
            return

        async def on_confirm(confirmed: bool) -> None:
            if confirmed:
                await self.delete_task(task_id)

        self.app.push_screen(ConfirmModal(f"Delete task '{task.title}'?"), on_confirm)

    async def delete_task(self, task_id: Any) -> bool:
        try:
            await self.app.api.delete_task(task_id)
        except AuthExpiredError:
            return False
        except ApiError as exc:
            self.notify(f"Could not delete task: {escape(exc.message)}", severity="error")
            return False
        logger.info("deleted task %s", task_id)
        self.store.remove_one(task_id)
        return True

    # -- stages --

    def action_new_stage(self) -> None:
        if not self._allowed("manage_stages"):
            return

        async def on_form(values: dict | None) -> None:
            if values is not None:
                await self.create_stage(values)

        self.app.push_screen(StageForm(), on_form)

    async def create_stage(self, values: dict) -> Stage | None:
        fields = dict(values, project_id=self.project.id)
        try:
            stage = await self.app.api.create_stage(fields)
        except AuthExpiredError:
            return None
        except ApiError as exc:
            self.notify(f"Could not create stage: {escape(exc.message)}", severity="error")
            return None
        logger.info("created stage %s", stage.id)
        self.stages = sort_stages([*self.stages, stage])
        await self.rebuild()
        return stage

    def focused_column(self) -> StageColumn | None:
        widget = self.focused
        while widget is not None and not isinstance(widget, StageColumn):
            widget = widget.parent
        return widget

    def action_edit_stage(self) -> None:
        column = self.focused_column()
        if column is None or not self._allowed("manage_stages"):
            return
        stage_id = column.stage_id

        async def on_form(values: dict | None) -> None:
            if values is not None:
                await self.update_stage(stage_id, values)

        self.app.push_screen(StageForm.for_stage(column.stage), on_form)

    async def update_stage(self, stage_id: Any, values: dict) -> Stage | None:
        try:
            stage = await self.app.api.update_stage(stage_id, values)
        except AuthExpiredError:
            return None
        except ApiError as exc:
            self.notify(f"Could not save stage: {escape(exc.message)}", severity="error")
            return None
        logger.info("updated stage %s", stage.id)
        self.stages = sort_stages([stage if s.id == stage.id else s for s in self.stages])
        await self.rebuild()
        return stage

    def action_delete_stage(self) -> None:
        column = self.focused_column()
        if column is None or not self._allowed("manage_stages"):
            return
        stage = column.stage
        count = self.store.count_in_stage(stage.id)

        async def on_confirm(confirmed: bool) -> None:
            if confirmed:
                await self.delete_stage(stage.id)

        message = f"Delete stage '{stage.name}'"
        message += f" and its {count} task(s)?" if count else "?"
        self.app.push_screen(ConfirmModal(message), on_confirm)

    async def delete_stage(self, stage_id: Any) -> bool:
        try:
            await self.app.api.delete_stage(stage_id)
        except AuthExpiredError:
            return False
        except ApiError as exc:
            self.notify(f"Could not delete stage: {escape(exc.message)}", severity="error")
            return False
        logger.info("deleted stage %s", stage_id)
        self.stages = [s for s in self.stages if s.id != stage_id]
        with self.suppressing():
            self.store.remove_stage(stage_id)
        await self.rebuild()
        self._report_project()
        return True

    # -- misc --

    async def action_refresh(self) -> None:
        await self.load()

    def action_close(self) -> None:
        self.app.pop_screen()
