"""Project list screen."""

from __future__ import annotations

import logging

from rich.markup import escape
from rich.text import Text
from textual.app import ComposeResult
from textual.screen import Screen
from textual.widgets import DataTable, Footer, Static

from taskdeck.errors import ApiError, AuthExpiredError
from taskdeck.model.records import Project, coerce_id
from taskdeck.ui.confirm import ConfirmModal
from taskdeck.ui.constants import ICON_OVERDUE, ICON_PROJECT
from taskdeck.ui.forms import ProjectForm
from taskdeck.ui.watcher import StoreWatcherMixin

logger = logging.getLogger(__name__)


class ProjectsScreen(StoreWatcherMixin, Screen):
    """Lists the user's projects with task counts and overdue markers."""

    DEFAULT_CSS = """
    ProjectsScreen #projects-header {
        width: 100%;
        height: 1;
        background: $primary;
        text-style: bold;
        padding: 0 1;
    }
    ProjectsScreen #projects-empty {
        padding: 1 2;
        color: $text-muted;
    }
    ProjectsScreen DataTable {
        height: 1fr;
    }
    """

    BINDINGS = [
        ("n", "new_project", "New project"),
        ("e", "edit_project", "Edit"),
        ("delete", "delete_project", "Delete"),
        ("r", "refresh", "Refresh"),
        ("ctrl+l", "logout", "Log out"),
    ]

    def __init__(self) -> None:
        self._init_watcher()
        super().__init__()

    def compose(self) -> ComposeResult:
        user = self.app.session.current_user
        who = f"  ({user.username or user.email})" if user else ""
        yield Static(f"{ICON_PROJECT} Projects{who}", id="projects-header", markup=False)
        yield DataTable(id="projects", cursor_type="row")
        yield Static("", id="projects-empty")
        yield Footer()

    async def on_mount(self) -> None:
        table = self.query_one("#projects", DataTable)
        table.add_columns("Name", "Tasks", "Status", "Description")
        self.store_watch(self.app.projects, self._on_projects_changed)
        if self.app.projects.loaded:
            self._render_projects()
        else:
            await self.action_refresh()
        table.focus()

    def _on_projects_changed(self, source, op, old, new) -> None:
        self._render_projects()

    def _render_projects(self) -> None:
        table = self.query_one("#projects", DataTable)
        selected = self.selected_project()
        table.clear()
        for project in self.app.projects:
            name = f"{ICON_OVERDUE} {project.name}" if project.overdue else project.name
            description = Text(project.description or "")
            table.add_row(Text(name), str(project.task_count), project.status, description, key=str(project.id))
        empty = self.query_one("#projects-empty", Static)
        empty.update("" if len(self.app.projects) else "No projects yet. Press n to create one.")
        if selected is not None:
            for row, project in enumerate(self.app.projects):
                if project.id == selected.id:
                    table.move_cursor(row=row)

    def selected_project(self) -> Project | None:
        table = self.query_one("#projects", DataTable)
        projects = list(self.app.projects)
        if not projects or table.row_count == 0:
            return None
        row = table.cursor_row
        return projects[row] if 0 <= row < len(projects) else None

    async def action_refresh(self) -> None:
        try:
            projects = await self.app.api.list_projects()
        except AuthExpiredError:
            return
        except ApiError as exc:
            self.notify(f"Could not load projects: {escape(exc.message)}", severity="error")
            return
        self.app.projects.replace_all(projects)

    def on_data_table_row_selected(self, event: DataTable.RowSelected) -> None:
        event.stop()
        project = self.app.projects.get(coerce_id(event.row_key.value))
        if project is not None:
            self.app.open_board(project)

    def action_new_project(self) -> None:
        if not self.app.policy.allows(self.app.session.current_user, "create_project"):
            self.notify("You are not allowed to create projects", severity="warning")
            return
        self.app.push_screen(ProjectForm(), self._on_project_form)

    async def _on_project_form(self, values: dict | None) -> None:
        if values is None:
            return
        try:
            project = await self.app.api.create_project(values)
        except AuthExpiredError:
            return
        except ApiError as exc:
            self.notify(f"Could not create project: {escape(exc.message)}", severity="error")
            return
        logger.info("created project %s", project.id)
        self.app.projects.upsert(project)

    def action_edit_project(self) -> None:
        project = self.selected_project()
        if project is None:
            return
        if not self.app.policy.allows(self.app.session.current_user, "edit_project", project.user_role):
            self.notify("You are not allowed to edit this project", severity="warning")
            return

        async def on_form(values: dict | None) -> None:
            if values is not None:
                await self.update_project(project, values)

        self.app.push_screen(ProjectForm.for_project(project), on_form)

    async def update_project(self, project: Project, values: dict) -> Project | None:
        try:
            updated = await self.app.api.update_project(project.id, values)
        except AuthExpiredError:
            return None
        except ApiError as exc:
            self.notify(f"Could not save project: {escape(exc.message)}", severity="error")
            return None
        logger.info("updated project %s", project.id)
        # the update response carries no tasks or role
        updated.task_count = project.task_count
        updated.overdue = project.overdue
        updated.user_role = project.user_role
        self.app.projects.upsert(updated)
        return updated

    def action_delete_project(self) -> None:
        project = self.selected_project()
        if project is None:
            return
        if not self.app.policy.allows(self.app.session.current_user, "delete_project", project.user_role):
            self.notify("You are not allowed to delete this project", severity="warning")
            return

        async def on_confirm(confirmed: bool) -> None:
            if confirmed:
                await self._delete(project)

        self.app.push_screen(ConfirmModal(f"Delete project '{project.name}' and all its tasks?"), on_confirm)

    async def _delete(self, project: Project) -> None:
        try:
            await self.app.api.delete_project(project.id)
        except AuthExpiredError:
            return
        except ApiError as exc:
            self.notify(f"Could not delete project: {escape(exc.message)}", severity="error")
            return
        logger.info("deleted project %s", project.id)
        self.app.projects.remove(project.id)

    def action_logout(self) -> None:
        self.app.logout()
