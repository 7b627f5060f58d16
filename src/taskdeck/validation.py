"""Form validation. Each validator returns field -> message, empty when valid."""

import re
from datetime import date

from taskdeck.errors import ValidationError
from taskdeck.model.records import TASK_PRIORITIES, TASK_STATUSES

MAX_NAME = 255
STAGE_COLORS = ("blue", "green", "yellow", "purple", "orange", "red", "indigo", "pink")

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
_HEX_RE = re.compile(r"^#[0-9A-Fa-f]{6}$")


def _parse_iso(value: str) -> date | None:
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def _check_name(errors: dict, key: str, value, label: str) -> None:
    value = (value or "").strip()
    if not value:
        errors[key] = f"{label} is required"
    elif len(value) > MAX_NAME:
        errors[key] = f"{label} must be at most {MAX_NAME} characters"


def validate_task(data: dict) -> dict[str, str]:
    errors: dict[str, str] = {}
    _check_name(errors, "title", data.get("title"), "Title")

    priority = data.get("priority")
    if priority and priority not in TASK_PRIORITIES:
        errors["priority"] = f"Priority must be one of {', '.join(TASK_PRIORITIES)}"

    status = data.get("status")
    if status and status not in TASK_STATUSES:
        errors["status"] = f"Status must be one of {', '.join(TASK_STATUSES)}"

    due = data.get("due_date")
    if due and _parse_iso(due) is None:
        errors["due_date"] = "Due date must be YYYY-MM-DD"

    hours = data.get("estimated_hours")
    if hours not in (None, ""):
        try:
            if float(hours) < 0:
                errors["estimated_hours"] = "Estimated hours cannot be negative"
        except (TypeError, ValueError):
            errors["estimated_hours"] = "Estimated hours must be a number"
    return errors


def validate_stage(data: dict) -> dict[str, str]:
    errors: dict[str, str] = {}
    _check_name(errors, "name", data.get("name"), "Name")

    color = data.get("color")
    if color and not (_HEX_RE.match(color) or color in STAGE_COLORS):
        errors["color"] = "Color must be #RRGGBB or a palette name"

    limit = data.get("task_limit")
    if limit not in (None, ""):
        try:
            if int(limit) <= 0:
                errors["task_limit"] = "Task limit must be positive"
        except (TypeError, ValueError):
            errors["task_limit"] = "Task limit must be a whole number"
    return errors


def validate_project(data: dict) -> dict[str, str]:
    errors: dict[str, str] = {}
    _check_name(errors, "name", data.get("name"), "Name")

    start = _parse_iso(data["start_date"]) if data.get("start_date") else None
    if data.get("start_date") and start is None:
        errors["start_date"] = "Start date must be YYYY-MM-DD"
    end = _parse_iso(data["end_date"]) if data.get("end_date") else None
    if data.get("end_date") and end is None:
        errors["end_date"] = "End date must be YYYY-MM-DD"
    if start and end and end < start:
        errors["end_date"] = "End date cannot be before start date"
    return errors


def validate_login(data: dict, register: bool = False) -> dict[str, str]:
    errors: dict[str, str] = {}
    email = (data.get("email") or "").strip()
    if not email:
        errors["email"] = "Email is required"
    elif not _EMAIL_RE.match(email):
        errors["email"] = "Email address is not valid"

    password = data.get("password") or ""
    if not password:
        errors["password"] = "Password is required"
    elif register and len(password) < 6:
        errors["password"] = "Password must be at least 6 characters"

    if register and not (data.get("username") or "").strip():
        errors["username"] = "Username is required"
    return errors


def require_valid(errors: dict[str, str]) -> None:
    """Raise ValidationError when any field failed."""
    if errors:
        raise ValidationError(errors)
