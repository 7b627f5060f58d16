"""Main Textual application for taskdeck."""

from __future__ import annotations

import logging

from textual.app import App

from taskdeck.api import ApiClient
from taskdeck.config import Settings
from taskdeck.model.projects import ProjectCache
from taskdeck.model.records import Project
from taskdeck.permissions import PermissionPolicy
from taskdeck.session import Session
from taskdeck.ui.board import BoardScreen
from taskdeck.ui.login import LoginScreen
from taskdeck.ui.projects import ProjectsScreen

logger = logging.getLogger(__name__)


class TaskdeckApp(App):
    """Terminal kanban client for the project/task backend.

    Owns the session, the API client, the shared project list and the
    permission policy; screens reach them through ``self.app``.
    """

    CSS = """
    Tooltip {
        padding: 0 1;
        margin: 0;
    }
    """

    TITLE = "taskdeck"
    BINDINGS = [("ctrl+q", "quit", "Quit")]

    def __init__(
        self,
        settings: Settings,
        session: Session | None = None,
        api: ApiClient | None = None,
        policy: PermissionPolicy | None = None,
    ) -> None:
        super().__init__()
        self.settings = settings
        self.session = session or Session.load(settings.session_path)
        self.api = api or ApiClient(settings.api_url, session=self.session, timeout=settings.timeout)
        self.api.on_unauthorized = self._on_unauthorized
        self.projects = ProjectCache()
        self.policy = policy or PermissionPolicy.named(settings.permissions)

    async def on_mount(self) -> None:
        if self.session.authenticated:
            await self.push_screen(ProjectsScreen())
        else:
            await self.push_screen(LoginScreen())

    async def _reset_screens(self) -> None:
        while len(self.screen_stack) > 1:
            await self.pop_screen()

    async def show_projects(self) -> None:
        await self._reset_screens()
        self.projects.clear()
        await self.push_screen(ProjectsScreen())

    async def show_login(self, notice: str | None = None) -> None:
        await self._reset_screens()
        self.projects.clear()
        await self.push_screen(LoginScreen(notice))

    def open_board(self, project: Project) -> None:
        self.push_screen(BoardScreen(project))

    def logout(self) -> None:
        logger.info("logging out")
        self.api.logout()
        self.call_later(self.show_login)

    def _on_unauthorized(self) -> None:
        self.call_later(self.show_login, "Your session has expired. Please sign in again.")

    async def action_quit(self) -> None:
        """Close the board commits and the HTTP client, then quit."""
        for screen in self.screen_stack:
            if isinstance(screen, BoardScreen) and screen.controller is not None:
                screen.controller.close()
        await self.api.aclose()
        self.exit()
