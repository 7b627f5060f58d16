"""Textual UI for taskdeck."""

from taskdeck.ui.app import TaskdeckApp
from taskdeck.ui.board import BoardScreen
from taskdeck.ui.card import TaskCard
from taskdeck.ui.column import StageColumn
from taskdeck.ui.confirm import ConfirmModal
from taskdeck.ui.login import LoginScreen
from taskdeck.ui.projects import ProjectsScreen

__all__ = [
    "BoardScreen",
    "ConfirmModal",
    "LoginScreen",
    "ProjectsScreen",
    "StageColumn",
    "TaskCard",
    "TaskdeckApp",
]
