"""Fixtures for UI tests."""

import pytest

from fakes import BASE_URL
from taskdeck.config import Settings
from taskdeck.ui import TaskdeckApp


@pytest.fixture
def settings(tmp_path):
    return Settings(api_url=BASE_URL, home=tmp_path)


@pytest.fixture
def app(settings, session, api):
    """The full app, signed in as alice, talking to the fake backend."""
    return TaskdeckApp(settings, session=session, api=api)


@pytest.fixture
def wait_for():
    """wait_for(pilot, condition): pause the pilot until condition() holds."""

    async def _wait(pilot, condition, tries=100):
        for _ in range(tries):
            if condition():
                # let a freshly pushed screen finish composing
                await pilot.pause()
                return
            await pilot.pause()
        raise AssertionError("condition never became true")

    return _wait
