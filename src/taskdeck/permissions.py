"""Role -> action permission policy."""

from __future__ import annotations

from dataclasses import dataclass, field

from taskdeck.model.records import User

PROJECT_ACTIONS = (
    "create_project",
    "edit_project",
    "delete_project",
    "manage_stages",
    "manage_tasks",
    "invite_members",
    "manage_members",
)

SYSTEM_ACTIONS = ("manage_users", "view_all_projects", "view_user_management")

_MEMBER_ACTIONS = frozenset(a for a in PROJECT_ACTIONS if a != "edit_project")

DEFAULT_ROLES: dict[str, frozenset[str]] = {
    "owner": frozenset(PROJECT_ACTIONS),
    "manager": _MEMBER_ACTIONS,
    "collaborator": _MEMBER_ACTIONS,
}


@dataclass
class PermissionPolicy:
    """Decides what a user may do in a project.

    Advisory only: the backend enforces the real rules. ``default_allow``
    covers calls with no project role and actions the role table does not
    mention. Tighten it by passing a stricter ``roles`` table or
    ``default_allow=False``; callers don't change.
    """

    roles: dict[str, frozenset[str]] = field(default_factory=lambda: dict(DEFAULT_ROLES))
    admin_all: bool = True
    default_allow: bool = True

    @classmethod
    def permissive(cls) -> PermissionPolicy:
        """Single-machine mode: any logged-in user may do anything."""
        return cls()

    @classmethod
    def strict(cls) -> PermissionPolicy:
        """Only what the role table grants."""
        return cls(default_allow=False)

    @classmethod
    def named(cls, mode: str) -> PermissionPolicy:
        """Policy for the ``permissions`` config value."""
        return cls.strict() if mode == "strict" else cls.permissive()

    def allows(self, user: User | None, action: str, role: str | None = None) -> bool:
        if user is None:
            return False
        if action in SYSTEM_ACTIONS:
            return self.allows_system(user, action)
        if self.admin_all and user.is_admin:
            return True
        if action == "create_project":
            return True
        if not role:
            return self.default_allow
        granted = self.roles.get(role)
        if granted is None:
            return self.default_allow
        if action not in PROJECT_ACTIONS:
            return self.default_allow
        return action in granted

    def allows_system(self, user: User | None, action: str) -> bool:
        if user is None:
            return False
        if action == "view_user_management":
            return True
        return user.is_admin
