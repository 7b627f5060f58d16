"""Persisted login session (bearer token and user)."""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from taskdeck.model.records import User

logger = logging.getLogger(__name__)


@dataclass
class Session:
    """Token and user kept in a JSON file between runs."""

    path: Path
    token: str | None = None
    user: dict[str, Any] = field(default_factory=dict)

    @property
    def authenticated(self) -> bool:
        return bool(self.token and self.user)

    @property
    def current_user(self) -> User | None:
        if not self.token or not self.user:
            return None
        return User.from_dict(self.user)

    @classmethod
    def load(cls, path: Path) -> "Session":
        """Read the session file. A corrupt file is removed."""
        session = cls(path=path)
        if not path.is_file():
            return session
        try:
            data = json.loads(path.read_text())
            session.token = data.get("token") or None
            session.user = data.get("user") or {}
        except (ValueError, AttributeError) as exc:
            logger.warning("discarding unreadable session %s: %s", path, exc)
            session.clear()
        return session

    def save(self, token: str, user: dict[str, Any]) -> None:
        self.token = token
        self.user = dict(user)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps({"token": token, "user": self.user}, indent=2))
        try:
            self.path.chmod(0o600)
        except OSError as exc:
            logger.debug("could not restrict %s: %s", self.path, exc)

    def clear(self) -> None:
        self.token = None
        self.user = {}
        self.path.unlink(missing_ok=True)
