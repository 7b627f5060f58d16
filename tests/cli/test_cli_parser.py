"""Tests for the argument parser and the entry point."""

import json
import sys

import pytest

from taskdeck.__main__ import main
from taskdeck.cli import build_parser
from taskdeck.cli.member import member_add
from taskdeck.cli.project import project_list
from taskdeck.cli.stage import stage_reorder
from taskdeck.cli.task import task_list, task_move


def test_task_move_arguments():
    args = build_parser().parse_args(["task", "move", "1", "100", "--stage", "12", "--json"])
    assert args.func is task_move
    assert (args.project, args.id, args.stage) == (1, 100, 12)
    assert args.json is True


def test_task_move_requires_stage(capsys):
    with pytest.raises(SystemExit):
        build_parser().parse_args(["task", "move", "1", "100"])
    assert "--stage" in capsys.readouterr().err


def test_task_list_repeated_assignee():
    args = build_parser().parse_args(["task", "list", "1", "--assignee", "2", "--assignee", "unassigned"])
    assert args.func is task_list
    assert args.assignee == ["2", "unassigned"]
    assert args.stage is None


def test_task_add_rejects_unknown_priority(capsys):
    with pytest.raises(SystemExit):
        build_parser().parse_args(["task", "add", "1", "Title", "--priority", "P9"])
    assert "invalid choice" in capsys.readouterr().err


def test_project_without_verb_lists():
    args = build_parser().parse_args(["project"])
    assert args.func is project_list


def test_member_add_accepts_id_or_name():
    args = build_parser().parse_args(["member", "add", "1", "2"])
    assert args.func is member_add
    assert (args.project, args.user, args.role) == (1, 2, "collaborator")
    assert build_parser().parse_args(["member", "add", "1", "bob", "--role", "manager"]).user == "bob"


def test_stage_reorder_takes_several_ids():
    args = build_parser().parse_args(["stage", "reorder", "1", "12", "10", "11"])
    assert args.func is stage_reorder
    assert args.ids == [12, 10, 11]


def test_api_url_option():
    args = build_parser().parse_args(["whoami", "--api-url", "http://example.test/api"])
    assert args.api_url == "http://example.test/api"


def test_main_dispatches_noun(home, monkeypatch, capsys):
    monkeypatch.setattr(sys, "argv", ["taskdeck", "whoami", "--json"])
    with pytest.raises(SystemExit) as exc:
        main()
    assert exc.value.code == 1
    assert "not logged in" in json.loads(capsys.readouterr().err)["error"]


def test_main_logout(logged_in, monkeypatch, capsys):
    monkeypatch.setattr(sys, "argv", ["taskdeck", "logout"])
    with pytest.raises(SystemExit) as exc:
        main()
    assert exc.value.code == 0
    assert "logged out" in capsys.readouterr().out
