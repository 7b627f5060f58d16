"""Yes/no confirmation modal for destructive actions."""

from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Static

from taskdeck.ui.constants import ICON_BACK, ICON_DELETE


class ConfirmModal(ModalScreen[bool]):
    """Ask a question; dismisses with True only on confirm."""

    DEFAULT_CSS = """
    ConfirmModal {
        align: center middle;
        background: rgba(0, 0, 0, 0.6);
    }
    ConfirmModal #dialog {
        width: 60;
        height: auto;
        border: thick $error;
        background: $surface;
        padding: 1 2;
    }
    ConfirmModal #message {
        text-align: center;
        margin-bottom: 1;
    }
    ConfirmModal #buttons {
        width: 100%;
        height: 3;
        align: center middle;
    }
    ConfirmModal Button {
        margin: 0 2;
    }
    """

    BINDINGS = [("escape", "cancel", "Cancel")]

    def __init__(self, message: str, confirm_label: str = "Delete") -> None:
        super().__init__()
        self.question = message
        self.confirm_label = confirm_label

    def compose(self) -> ComposeResult:
        with Vertical(id="dialog"):
            yield Static(self.question, id="message", markup=False)
            with Horizontal(id="buttons"):
                yield Button(f"{ICON_DELETE} {self.confirm_label}", id="confirm", variant="error")
                yield Button(f"{ICON_BACK} Cancel", id="cancel")

    def on_mount(self) -> None:
        self.query_one("#cancel", Button).focus()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        event.stop()
        self.dismiss(event.button.id == "confirm")

    def action_cancel(self) -> None:
        self.dismiss(False)
