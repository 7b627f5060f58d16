"""Tests for the confirm modal and the create/edit forms."""

import pytest
from textual.app import App
from textual.widgets import Input, Select, Static

from taskdeck.model.records import Stage, Task
from taskdeck.ui.confirm import ConfirmModal
from taskdeck.ui.forms import ProjectForm, StageForm, TaskForm

UNSET = object()


class ModalApp(App):
    """Minimal app that pushes one modal and records its result."""

    def __init__(self, modal):
        super().__init__()
        self.modal = modal
        self.result = UNSET

    def on_mount(self) -> None:
        self.push_screen(self.modal, self._done)

    def _done(self, result) -> None:
        self.result = result


def _set(form, **values):
    for key, value in values.items():
        form.query_one(f"#field-{key}", Input).value = value


def _error(form, key):
    return str(form.query_one(f"#error-{key}", Static).content)


# --- confirm ---


@pytest.mark.asyncio
async def test_confirm_button_returns_true():
    app = ModalApp(ConfirmModal("Delete it?"))
    async with app.run_test() as pilot:
        await pilot.click("#confirm")
        await pilot.pause()
        assert app.result is True


@pytest.mark.asyncio
async def test_confirm_escape_returns_false():
    app = ModalApp(ConfirmModal("Delete it?"))
    async with app.run_test() as pilot:
        await pilot.press("escape")
        await pilot.pause()
        assert app.result is False


@pytest.mark.asyncio
async def test_confirm_focuses_cancel():
    app = ModalApp(ConfirmModal("Delete it?", confirm_label="Remove"))
    async with app.run_test() as pilot:
        await pilot.pause()
        assert app.screen.focused.id == "cancel"
        await pilot.press("enter")
        await pilot.pause()
        assert app.result is False


# --- task form ---


@pytest.mark.asyncio
async def test_task_form_requires_title():
    form = TaskForm()
    app = ModalApp(form)
    async with app.run_test() as pilot:
        await pilot.pause()
        form.submit()
        await pilot.pause()

        assert app.result is UNSET
        assert _error(form, "title") == "Title is required"


@pytest.mark.asyncio
async def test_task_form_new_defaults():
    form = TaskForm()
    app = ModalApp(form)
    async with app.run_test() as pilot:
        await pilot.pause()
        assert form.query_one("#field-priority", Select).value == "P2"
        assert form.query_one("#field-status", Select).value == "todo"


@pytest.mark.asyncio
async def test_task_form_returns_cleaned_values():
    form = TaskForm()
    app = ModalApp(form)
    async with app.run_test() as pilot:
        await pilot.pause()
        _set(form, title="  Write docs ", due_date="2030-01-31", estimated_hours="1.5")
        form.submit()
        await pilot.pause()

        assert app.result == {
            "title": "Write docs",
            "priority": "P2",
            "status": "todo",
            "due_date": "2030-01-31",
            "estimated_hours": 1.5,
        }


@pytest.mark.asyncio
async def test_task_form_reports_every_bad_field():
    form = TaskForm()
    app = ModalApp(form)
    async with app.run_test() as pilot:
        await pilot.pause()
        _set(form, title="ok", due_date="31/01/2030", estimated_hours="-2")
        form.submit()
        await pilot.pause()

        assert app.result is UNSET
        assert _error(form, "title") == ""
        assert _error(form, "due_date") == "Due date must be YYYY-MM-DD"
        assert _error(form, "estimated_hours") == "Estimated hours cannot be negative"


@pytest.mark.asyncio
async def test_task_form_prefills_existing_task():
    task = Task(id=7, stage_id=1, title="Fix bug", priority="P1", status="in_progress", due_date="2030-02-01T00:00:00Z")
    form = TaskForm.for_task(task)
    app = ModalApp(form)
    async with app.run_test() as pilot:
        await pilot.pause()
        assert form.query_one("#field-title", Input).value == "Fix bug"
        assert form.query_one("#field-due_date", Input).value == "2030-02-01"
        assert form.query_one("#field-priority", Select).value == "P1"
        assert form.query_one("#field-status", Select).value == "in_progress"
        assert "Fix bug" in str(form.query_one("#form-title", Static).content)


@pytest.mark.asyncio
async def test_form_escape_returns_none():
    app = ModalApp(TaskForm())
    async with app.run_test() as pilot:
        await pilot.press("escape")
        await pilot.pause()
        assert app.result is None


# --- stage and project forms ---


@pytest.mark.asyncio
async def test_stage_form_converts_limit():
    form = StageForm()
    app = ModalApp(form)
    async with app.run_test() as pilot:
        await pilot.pause()
        _set(form, name="Review", color="green", task_limit="4")
        form.submit()
        await pilot.pause()

        assert app.result == {"name": "Review", "color": "green", "task_limit": 4}


@pytest.mark.asyncio
async def test_stage_form_rejects_bad_color():
    form = StageForm.for_stage(Stage(id=3, name="Doing"))
    app = ModalApp(form)
    async with app.run_test() as pilot:
        await pilot.pause()
        _set(form, color="mauve")
        form.submit()
        await pilot.pause()

        assert app.result is UNSET
        assert _error(form, "color") == "Color must be #RRGGBB or a palette name"


@pytest.mark.asyncio
async def test_project_form_checks_date_order():
    form = ProjectForm()
    app = ModalApp(form)
    async with app.run_test() as pilot:
        await pilot.pause()
        _set(form, name="Launch", start_date="2030-05-01", end_date="2030-04-01")
        form.submit()
        await pilot.pause()

        assert app.result is UNSET
        assert _error(form, "end_date") == "End date cannot be before start date"
