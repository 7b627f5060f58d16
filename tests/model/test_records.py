"""Tests for record parsing."""

from datetime import date

from taskdeck.model.records import Comment, Member, Project, Task, User, coerce_id, parse_date


def test_coerce_id():
    assert coerce_id("42") == 42
    assert coerce_id(42) == 42
    assert coerce_id("abc") == "abc"
    assert coerce_id(None) is None


def test_parse_date():
    assert parse_date("2024-06-15") == date(2024, 6, 15)
    assert parse_date("2024-06-15T10:00:00Z") == date(2024, 6, 15)
    assert parse_date("not a date") is None
    assert parse_date(None) is None


def test_task_from_dict_coerces_ids_and_keeps_extra():
    task = Task.from_dict({"id": "7", "stage_id": "3", "title": "X", "position": None, "labels": ["a"]})
    assert task.id == 7
    assert task.stage_id == 3
    assert task.position == 0
    assert task.extra == {"labels": ["a"]}


def test_task_to_dict_round_trips_extra():
    data = {"id": 7, "stage_id": 3, "title": "X", "labels": ["a"]}
    out = Task.from_dict(data).to_dict()
    assert out["labels"] == ["a"]
    assert out["title"] == "X"


def test_task_copy_is_independent():
    task = Task(id=1, stage_id=2, title="X")
    moved = task.copy(stage_id=3)
    assert task.stage_id == 2
    assert moved.stage_id == 3


def test_task_assignee_name():
    assert Task(id=1, stage_id=1, assignee={"username": "bob"}).assignee_name == "bob"
    assert Task(id=1, stage_id=1, assignee_id=2).assignee_name == "user 2"
    assert Task(id=1, stage_id=1).assignee_name is None


def test_project_task_count_from_tasks():
    project = Project.from_dict({"id": 1, "name": "Demo", "tasks": [{}, {}]})
    assert project.task_count == 2


def test_user_is_admin():
    assert User(id=1, role="admin").is_admin
    assert not User(id=1).is_admin


def test_member_and_comment_names():
    assert Member(user_id=3).username == "user 3"
    assert Comment(id=1, user={"username": "bob"}).author == "bob"
    assert not Comment(id=1).has_media
