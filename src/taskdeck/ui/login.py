"""Login and registration screen."""

from __future__ import annotations

import logging

from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.screen import Screen
from textual.widgets import Button, Footer, Input, Label, Static

from taskdeck.errors import ApiError
from taskdeck.validation import validate_login

logger = logging.getLogger(__name__)


class LoginScreen(Screen):
    """Email/password form with a toggle into registration mode."""

    DEFAULT_CSS = """
    LoginScreen {
        align: center middle;
    }
    LoginScreen #login-box {
        width: 60;
        height: auto;
        border: thick $primary;
        background: $surface;
        padding: 1 2;
    }
    LoginScreen #login-title {
        text-style: bold;
        text-align: center;
        width: 100%;
        margin-bottom: 1;
    }
    LoginScreen #login-error {
        color: $error;
        height: auto;
    }
    LoginScreen .register-only {
        display: none;
    }
    LoginScreen.registering .register-only {
        display: block;
    }
    LoginScreen #login-buttons {
        width: 100%;
        height: 3;
        align: center middle;
        margin-top: 1;
    }
    LoginScreen Button {
        margin: 0 1;
    }
    """

    BINDINGS = [("ctrl+r", "toggle_register", "Login/Register")]

    def __init__(self, notice: str | None = None) -> None:
        super().__init__()
        self.notice = notice
        self.registering = False

    def compose(self) -> ComposeResult:
        with Vertical(id="login-box"):
            yield Static("taskdeck: sign in", id="login-title")
            yield Label("Username", classes="register-only")
            yield Input(id="username", classes="register-only")
            yield Label("Email")
            yield Input(id="email", placeholder="you@example.com")
            yield Label("Password")
            yield Input(id="password", password=True)
            yield Static(self.notice or "", id="login-error", markup=False)
            with Horizontal(id="login-buttons"):
                yield Button("Sign in", id="submit", variant="primary")
                yield Button("Create an account", id="toggle")
        yield Footer()

    def on_mount(self) -> None:
        self.query_one("#email", Input).focus()

    def action_toggle_register(self) -> None:
        self.registering = not self.registering
        self.set_class(self.registering, "registering")
        self.query_one("#login-title", Static).update(
            "taskdeck: create an account" if self.registering else "taskdeck: sign in"
        )
        self.query_one("#submit", Button).label = "Register" if self.registering else "Sign in"
        self.query_one("#toggle", Button).label = "I have an account" if self.registering else "Create an account"
        self.show_error("")

    def show_error(self, message: str) -> None:
        self.query_one("#login-error", Static).update(message)

    def form_data(self) -> dict[str, str]:
        data = {key: self.query_one(f"#{key}", Input).value for key in ("email", "password")}
        if self.registering:
            data["username"] = self.query_one("#username", Input).value
        return data

    async def submit(self) -> None:
        data = self.form_data()
        errors = validate_login(data, register=self.registering)
        if errors:
            self.show_error("\n".join(errors.values()))
            return
        api = self.app.api
        try:
            if self.registering:
                user = await api.register(data["username"].strip(), data["email"].strip(), data["password"])
            else:
                user = await api.login(data["email"].strip(), data["password"])
        except ApiError as exc:
            self.show_error(exc.message)
            return
        logger.info("signed in as %s", user.username or user.email)
        self.app.call_later(self.app.show_projects)

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        event.stop()
        if event.button.id == "toggle":
            self.action_toggle_register()
        else:
            await self.submit()

    async def on_input_submitted(self, event: Input.Submitted) -> None:
        event.stop()
        await self.submit()
