"""Shared fixtures for CLI tests."""

from argparse import Namespace

import httpx
import pytest

from fakes import BASE_URL


@pytest.fixture
def home(tmp_path, monkeypatch):
    """Point the CLI's config and session at tmp_path."""
    monkeypatch.setenv("TASKDECK_HOME", str(tmp_path))
    monkeypatch.delenv("TASKDECK_API_URL", raising=False)
    monkeypatch.delenv("TASKDECK_TIMEOUT", raising=False)
    return tmp_path


@pytest.fixture
def logged_in(home, session):
    """A stored session for alice in the CLI's home directory."""
    return session


@pytest.fixture
def cli_args(backend):
    """Namespace factory wired to the fake backend: cli_args(json=False, **fields)."""

    def _make(json=False, **fields):
        return Namespace(json=json, api_url=BASE_URL, transport=httpx.MockTransport(backend.handler), **fields)

    return _make
