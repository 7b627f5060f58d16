"""Tests for the shared project list cache."""

from datetime import date

import pytest

from taskdeck.model.projects import ProjectCache
from taskdeck.model.records import Project


@pytest.fixture
def cache():
    cache = ProjectCache()
    cache.replace_all([Project(id=1, name="Demo", task_count=2), Project(id=2, name="Other")])
    return cache


@pytest.fixture
def events(cache):
    seen = []
    cache.watch(lambda source, op, old, new: seen.append(op))
    return seen


def test_replace_all_marks_loaded():
    cache = ProjectCache()
    assert not cache.loaded
    cache.replace_all([])
    assert cache.loaded


def test_clear_forgets_projects(cache, events):
    cache.clear()
    assert len(cache) == 0
    assert not cache.loaded
    assert events == ["replace_all"]


def test_iter_and_get(cache):
    assert [p.name for p in cache] == ["Demo", "Other"]
    assert cache.get(2).name == "Other"
    assert cache.get(3) is None


def test_upsert_existing(cache, events):
    cache.upsert(Project(id=1, name="Renamed"))
    assert cache.get(1).name == "Renamed"
    assert len(cache) == 2
    assert events == ["upsert"]


def test_upsert_new(cache):
    cache.upsert(Project(id=3, name="Third"))
    assert len(cache) == 3


def test_remove(cache, events):
    assert cache.remove(1).name == "Demo"
    assert cache.get(1) is None
    assert events == ["remove"]
    assert cache.remove(1) is None


def test_set_task_count_unknown_project_is_noop(cache, events):
    cache.set_task_count(99, 1)
    assert events == []


def test_set_task_count_unchanged_emits_nothing(cache, events):
    cache.set_task_count(1, 2)
    assert events == []
    cache.set_task_count(1, 5)
    assert cache.get(1).task_count == 5
    assert events == ["task_count"]


def test_refresh_overdue(cache, events, make_task):
    today = date(2024, 6, 15)
    cache.refresh_overdue(1, [make_task(1, 10, due_date="2024-06-01")], today)
    assert cache.get(1).overdue
    cache.refresh_overdue(1, [make_task(1, 10, due_date="2024-06-01", status="done")], today)
    assert not cache.get(1).overdue
    assert events == ["overdue", "overdue"]
