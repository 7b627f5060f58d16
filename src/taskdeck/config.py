"""Settings: defaults, then config.yaml, then environment."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

import yaml

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "http://localhost:8080/api"
DEFAULT_TIMEOUT = 60.0
CONFIG_FILE = "config.yaml"
PERMISSION_MODES = ("permissive", "strict")


def default_home() -> Path:
    """Directory holding config.yaml and session.json."""
    env = os.environ.get("TASKDECK_HOME")
    if env:
        return Path(env).expanduser()
    return Path.home() / ".config" / "taskdeck"


@dataclass
class Settings:
    api_url: str = DEFAULT_API_URL
    timeout: float = DEFAULT_TIMEOUT
    home: Path | None = None
    permissions: str = "permissive"

    @property
    def session_path(self) -> Path:
        return (self.home or default_home()) / "session.json"


def _read_config_file(path: Path) -> dict:
    if not path.is_file():
        return {}
    try:
        data = yaml.safe_load(path.read_text()) or {}
    except yaml.YAMLError as exc:
        logger.warning("ignoring malformed %s: %s", path, exc)
        return {}
    if not isinstance(data, dict):
        logger.warning("ignoring %s: expected a mapping", path)
        return {}
    return data


def _timeout(value, source: str, fallback: float) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        logger.warning("ignoring timeout %r from %s: not a number", value, source)
        return fallback


def load_settings(home: Path | None = None, api_url: str | None = None) -> Settings:
    """Build settings. ``api_url`` (from the command line) wins over everything."""
    home = home or default_home()
    settings = Settings(home=home)

    data = _read_config_file(home / CONFIG_FILE)
    if data.get("api_url"):
        settings.api_url = str(data["api_url"])
    if data.get("timeout") is not None:
        settings.timeout = _timeout(data["timeout"], CONFIG_FILE, settings.timeout)
    mode = data.get("permissions")
    if mode in PERMISSION_MODES:
        settings.permissions = mode
    elif mode is not None:
        logger.warning("ignoring permissions %r from %s: expected one of %s", mode, CONFIG_FILE, PERMISSION_MODES)

    env_url = os.environ.get("TASKDECK_API_URL")
    if env_url:
        settings.api_url = env_url
    env_timeout = os.environ.get("TASKDECK_TIMEOUT")
    if env_timeout:
        settings.timeout = _timeout(env_timeout, "TASKDECK_TIMEOUT", settings.timeout)

    if api_url:
        settings.api_url = api_url
    settings.api_url = settings.api_url.rstrip("/")
    return settings
