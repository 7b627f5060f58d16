"""Shared fixtures: an in-memory backend served through httpx.MockTransport."""

import httpx
import pytest

from fakes import ALICE, BASE_URL, TOKEN, FakeBackend
from taskdeck.api import ApiClient
from taskdeck.session import Session


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def session(tmp_path):
    """A logged-in session stored under tmp_path."""
    s = Session(path=tmp_path / "session.json")
    s.save(TOKEN, dict(ALICE))
    return s


@pytest.fixture
def api(backend, session):
    return ApiClient(BASE_URL, session=session, transport=httpx.MockTransport(backend.handler))


@pytest.fixture
def make_task():
    """Factory for Task records: make_task(id, stage_id, position=0, **fields)."""
    from taskdeck.model.records import Task

    def _make(tid, stage_id, position=0, **fields):
        title = fields.pop("title", f"Task {tid}")
        return Task(id=tid, stage_id=stage_id, position=position, project_id=1, title=title, **fields)

    return _make


@pytest.fixture
def make_stage():
    """Factory for Stage records: make_stage(id, position=0, **fields)."""
    from taskdeck.model.records import Stage

    def _make(sid, position=0, **fields):
        return Stage(id=sid, project_id=1, position=position, name=fields.pop("name", f"Stage {sid}"), **fields)

    return _make
