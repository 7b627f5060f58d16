"""Shared helpers for CLI command handlers."""

import asyncio
import json
import logging
import sys
from pathlib import Path

from taskdeck.api import ApiClient
from taskdeck.config import load_settings
from taskdeck.errors import ApiError, AuthExpiredError, ValidationError
from taskdeck.model.board import is_overdue
from taskdeck.model.records import Stage, Task
from taskdeck.session import Session

LOG_FORMAT = "%(asctime)s %(levelname)s %(message)s"


def configure_logging(verbose: bool, log_file: Path | None = None) -> None:
    """Send log records to stderr (or ``log_file``) when --verbose is given."""
    if not verbose:
        return
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        logging.basicConfig(format=LOG_FORMAT, filename=str(log_file), level=logging.DEBUG)
    else:
        logging.basicConfig(format=LOG_FORMAT, stream=sys.stderr, level=logging.DEBUG)


def load_session(args) -> Session:
    """The stored session for the configured home directory."""
    return Session.load(load_settings(api_url=getattr(args, "api_url", None)).session_path)


def make_client(args) -> ApiClient:
    """Client for the configured backend, carrying the stored session.

    ``args.transport`` (when present) is handed to httpx, which lets tests
    plug in a mock backend.
    """
    settings = load_settings(api_url=getattr(args, "api_url", None))
    session = Session.load(settings.session_path)
    return ApiClient(
        settings.api_url,
        session=session,
        timeout=settings.timeout,
        transport=getattr(args, "transport", None),
    )


def run(args, func, login_required: bool = True) -> int:
    """Run ``await func(api)`` on a fresh client and return its exit code.

    Backend and validation errors end the process through error().
    """
    api = make_client(args)
    if login_required and not api.session.authenticated:
        error("not logged in, run `taskdeck login`", args.json)

    async def main():
        async with api:
            return await func(api)

    try:
        return asyncio.run(main())
    except AuthExpiredError:
        error("session expired, run `taskdeck login`", args.json)
    except (ApiError, ValidationError) as e:
        error(str(e), args.json)


def output_json(data: dict | list) -> None:
    """Write JSON to stdout."""
    print(json.dumps(data, indent=2))


def output_result(data: dict | list, text: str, json_mode: bool) -> None:
    """Output mutation result as JSON or plain text."""
    if json_mode:
        output_json(data)
    else:
        print(text)


def error(message: str, json_mode: bool) -> None:
    """Print error to stderr and exit 1."""
    if json_mode:
        print(json.dumps({"error": message}), file=sys.stderr)
    else:
        print(f"error: {message}", file=sys.stderr)
    sys.exit(1)


def find_stage(stages: list[Stage], stage_id, json_mode: bool) -> Stage:
    """Lookup stage by ID. Exit 1 listing available stages if not found."""
    for stage in stages:
        if str(stage.id) == str(stage_id):
            return stage
    available = [f"  {s.id}  {s.name}" for s in stages]
    error(f"Stage '{stage_id}' not found. Available:\n" + "\n".join(available), json_mode)


def task_summary(task: Task, stage: Stage | None = None) -> dict:
    """Task as a JSON-friendly dict."""
    data = {
        "id": task.id,
        "title": task.title,
        "priority": task.priority,
        "status": task.status,
        "position": task.position,
        "assignee_id": task.assignee_id,
        "due_date": task.due_date,
        "overdue": is_overdue(task),
    }
    if stage is not None:
        data["stage"] = {"id": stage.id, "name": stage.name}
    else:
        data["stage_id"] = task.stage_id
    return data


def format_task_line(task: Task, indent: str = "") -> str:
    """Format a task as a text line."""
    flags = []
    if task.assignee_name:
        flags.append(f"@{task.assignee_name}")
    if task.due_date:
        flags.append(f"due {task.due_date[:10]}" + (" OVERDUE" if is_overdue(task) else ""))
    extra = f"  ({', '.join(flags)})" if flags else ""
    return f"{indent}{task.id}  [{task.priority}] {task.title}{extra}"
