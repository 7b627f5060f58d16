"""Modal forms for creating and editing projects, stages and tasks.

Each form validates on submit and shows field errors inline; it dismisses
with a dict of cleaned values, or None when cancelled. Talking to the
backend is left to the caller.
"""

from __future__ import annotations

from typing import Any, Callable

from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Label, Select, Static

from taskdeck.model.records import TASK_PRIORITIES, TASK_STATUSES, Project, Stage, Task
from taskdeck.ui.constants import STATUS_LABELS
from taskdeck.validation import validate_project, validate_stage, validate_task


class Field:
    """One form row: an Input, or a Select when ``options`` is given."""

    def __init__(
        self,
        key: str,
        label: str,
        placeholder: str = "",
        options: list[tuple[str, str]] | None = None,
        default: str | None = None,
    ):
        self.key = key
        self.label = label
        self.placeholder = placeholder
        self.options = options
        self.default = default


class FormModal(ModalScreen[dict | None]):
    """Base form modal. Subclasses set FORM_TITLE, FIELDS and VALIDATOR."""

    DEFAULT_CSS = """
    FormModal {
        align: center middle;
        background: rgba(0, 0, 0, 0.6);
    }
    FormModal #form {
        width: 70;
        height: auto;
        max-height: 90%;
        border: thick $primary;
        background: $surface;
        padding: 1 2;
    }
    FormModal #form-title {
        text-style: bold;
        margin-bottom: 1;
    }
    FormModal .field-error {
        color: $error;
        height: auto;
    }
    FormModal #form-buttons {
        width: 100%;
        height: 3;
        align: center middle;
        margin-top: 1;
    }
    FormModal Button {
        margin: 0 2;
    }
    """

    BINDINGS = [("escape", "cancel", "Cancel")]

    FORM_TITLE = ""
    FIELDS: list[Field] = []
    VALIDATOR: Callable[[dict], dict[str, str]] | None = None

    def __init__(self, initial: dict[str, Any] | None = None, title: str | None = None) -> None:
        super().__init__()
        self.initial = {k: v for k, v in (initial or {}).items() if v is not None}
        self.form_title = title or self.FORM_TITLE

    def compose(self) -> ComposeResult:
        with Vertical(id="form"):
            yield Static(self.form_title, id="form-title", markup=False)
            with VerticalScroll():
                for field in self.FIELDS:
                    yield Label(field.label)
                    yield self._make_input(field)
                    yield Static("", id=f"error-{field.key}", classes="field-error", markup=False)
            with Horizontal(id="form-buttons"):
                yield Button("Save", id="save", variant="primary")
                yield Button("Cancel", id="cancel")

    def _make_input(self, field: Field):
        value = self.initial.get(field.key)
        if field.options is not None:
            allowed = [v for _, v in field.options]
            return Select(
                field.options,
                value=next(v for v in (value, field.default, allowed[0]) if v in allowed),
                allow_blank=False,
                id=f"field-{field.key}",
            )
        return Input("" if value is None else str(value), placeholder=field.placeholder, id=f"field-{field.key}")

    def values(self) -> dict[str, Any]:
        """Current field values, stripped, with empty inputs left out."""
        out: dict[str, Any] = {}
        for field in self.FIELDS:
            widget = self.query_one(f"#field-{field.key}")
            value = widget.value
            if isinstance(value, str):
                value = value.strip()
                if not value:
                    continue
            out[field.key] = value
        return out

    def clean(self, values: dict[str, Any]) -> dict[str, Any]:
        """Convert validated values for the backend. Override per form."""
        return values

    def show_errors(self, errors: dict[str, str]) -> None:
        for field in self.FIELDS:
            self.query_one(f"#error-{field.key}", Static).update(errors.get(field.key, ""))

    def submit(self) -> None:
        values = self.values()
        validator = type(self).VALIDATOR
        errors = validator(values) if validator else {}
        self.show_errors(errors)
        if errors:
            return
        self.dismiss(self.clean(values))

    def on_input_submitted(self, event: Input.Submitted) -> None:
        event.stop()
        self.submit()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        event.stop()
        if event.button.id == "save":
            self.submit()
        else:
            self.dismiss(None)

    def action_cancel(self) -> None:
        self.dismiss(None)


class TaskForm(FormModal):
    FORM_TITLE = "New task"
    FIELDS = [
        Field("title", "Title"),
        Field("description", "Description"),
        Field("priority", "Priority", options=[(p, p) for p in TASK_PRIORITIES], default="P2"),
        Field("status", "Status", options=[(STATUS_LABELS[s], s) for s in TASK_STATUSES], default="todo"),
        Field("due_date", "Due date", placeholder="YYYY-MM-DD"),
        Field("estimated_hours", "Estimated hours"),
    ]
    VALIDATOR = staticmethod(validate_task)

    @classmethod
    def for_task(cls, task: Task) -> TaskForm:
        initial = task.to_dict()
        if task.due_date:
            initial["due_date"] = task.due_date[:10]
        return cls(initial, title=f"Edit task: {task.title}")

    def clean(self, values):
        if "estimated_hours" in values:
            values["estimated_hours"] = float(values["estimated_hours"])
        return values


class StageForm(FormModal):
    FORM_TITLE = "New stage"
    FIELDS = [
        Field("name", "Name"),
        Field("description", "Description"),
        Field("color", "Color", placeholder="#3B82F6 or blue, green, ..."),
        Field("task_limit", "Task limit"),
    ]
    VALIDATOR = staticmethod(validate_stage)

    @classmethod
    def for_stage(cls, stage: Stage) -> StageForm:
        return cls(stage.to_dict(), title=f"Edit stage: {stage.name}")

    def clean(self, values):
        if "task_limit" in values:
            values["task_limit"] = int(values["task_limit"])
        return values


class ProjectForm(FormModal):
    FORM_TITLE = "New project"
    FIELDS = [
        Field("name", "Name"),
        Field("description", "Description"),
        Field("start_date", "Start date", placeholder="YYYY-MM-DD"),
        Field("end_date", "End date", placeholder="YYYY-MM-DD"),
    ]
    VALIDATOR = staticmethod(validate_project)

    @classmethod
    def for_project(cls, project: Project) -> ProjectForm:
        return cls(project.to_dict(), title=f"Edit project: {project.name}")
