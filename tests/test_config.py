"""Tests for settings resolution."""

import pytest

from taskdeck.config import DEFAULT_API_URL, DEFAULT_TIMEOUT, load_settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    monkeypatch.delenv("TASKDECK_API_URL", raising=False)
    monkeypatch.delenv("TASKDECK_TIMEOUT", raising=False)
    monkeypatch.setenv("TASKDECK_HOME", str(tmp_path))


def test_defaults(tmp_path):
    settings = load_settings()
    assert settings.api_url == DEFAULT_API_URL
    assert settings.timeout == DEFAULT_TIMEOUT
    assert settings.session_path == tmp_path / "session.json"


def test_config_file(tmp_path):
    (tmp_path / "config.yaml").write_text("api_url: http://example.com/api/\ntimeout: 5\n")
    settings = load_settings()
    assert settings.api_url == "http://example.com/api"
    assert settings.timeout == 5.0


def test_env_beats_file(tmp_path, monkeypatch):
    (tmp_path / "config.yaml").write_text("api_url: http://file/api\n")
    monkeypatch.setenv("TASKDECK_API_URL", "http://env/api")
    monkeypatch.setenv("TASKDECK_TIMEOUT", "12")
    settings = load_settings()
    assert settings.api_url == "http://env/api"
    assert settings.timeout == 12.0


def test_argument_beats_env(monkeypatch):
    monkeypatch.setenv("TASKDECK_API_URL", "http://env/api")
    assert load_settings(api_url="http://flag/api").api_url == "http://flag/api"


def test_malformed_file_ignored(tmp_path, caplog):
    (tmp_path / "config.yaml").write_text("api_url: [unclosed\n")
    assert load_settings().api_url == DEFAULT_API_URL
    assert "malformed" in caplog.text


def test_non_mapping_file_ignored(tmp_path):
    (tmp_path / "config.yaml").write_text("- a\n- b\n")
    assert load_settings().api_url == DEFAULT_API_URL


def test_bad_timeout_env_ignored(monkeypatch):
    monkeypatch.setenv("TASKDECK_TIMEOUT", "soon")
    assert load_settings().timeout == DEFAULT_TIMEOUT


def test_bad_timeout_in_file_ignored(tmp_path, caplog):
    (tmp_path / "config.yaml").write_text("api_url: http://example.com/api\ntimeout: fast\n")
    settings = load_settings()
    assert settings.timeout == DEFAULT_TIMEOUT
    assert settings.api_url == "http://example.com/api"
    assert "not a number" in caplog.text


def test_explicit_home(tmp_path):
    home = tmp_path / "elsewhere"
    assert load_settings(home=home).session_path == home / "session.json"


def test_permissions_mode_from_file(tmp_path):
    (tmp_path / "config.yaml").write_text("permissions: strict\n")
    assert load_settings().permissions == "strict"


def test_unknown_permissions_mode_ignored(tmp_path, caplog):
    (tmp_path / "config.yaml").write_text("permissions: everyone\n")
    assert load_settings().permissions == "permissive"
    assert "ignoring permissions" in caplog.text
