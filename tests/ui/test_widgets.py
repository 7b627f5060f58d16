"""Tests for the text helpers behind cards, columns and the detail view."""

from datetime import date

from taskdeck.model.records import Stage, Task
from taskdeck.ui.card import build_footer_text
from taskdeck.ui.column import stage_header
from taskdeck.ui.constants import ICON_DUE, ICON_LOCK, ICON_OVERDUE
from taskdeck.ui.detail import task_lines

TODAY = date(2030, 6, 15)


def test_footer_shows_status_only():
    assert build_footer_text(Task(id=1, stage_id=1), TODAY) == "To do"


def test_footer_due_today_is_not_overdue():
    task = Task(id=1, stage_id=1, due_date="2030-06-15")
    assert f"{ICON_DUE} 2030-06-15" in build_footer_text(task, TODAY)


def test_footer_past_due_is_overdue():
    task = Task(id=1, stage_id=1, due_date="2030-06-14", assignee={"username": "bob"}, assignee_id=2)
    text = build_footer_text(task, TODAY)
    assert f"{ICON_OVERDUE} 2030-06-14" in text
    assert "bob" in text


def test_footer_done_task_never_overdue():
    task = Task(id=1, stage_id=1, status="done", due_date="2030-06-01")
    assert ICON_OVERDUE not in build_footer_text(task, TODAY)


def test_stage_header_counts():
    assert stage_header(Stage(id=1, name="Todo"), 2) == "Todo (2)"


def test_stage_header_limit_and_lock():
    stage = Stage(id=1, name="QA", task_limit=3, allow_task_movement=False)
    assert stage_header(stage, 1) == f"QA (1/3) {ICON_LOCK}"


def test_task_lines():
    task = Task(id=1, stage_id=1, priority="P3", estimated_hours=2.0)
    lines = task_lines(task, Stage(id=1, name="Todo"))
    assert lines[0].endswith("Todo")
    assert lines[3].endswith("-")
    assert lines[-1].endswith("2h")
