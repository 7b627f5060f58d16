"""Tests for the role/action permission policy."""

import pytest

from taskdeck.model.records import User
from taskdeck.permissions import DEFAULT_ROLES, PROJECT_ACTIONS, PermissionPolicy

ALICE = User(id=1, username="alice")
ADMIN = User(id=9, username="root", role="admin")


def test_no_user_denied():
    assert not PermissionPolicy().allows(None, "manage_tasks", "owner")


@pytest.mark.parametrize("action", PROJECT_ACTIONS)
def test_owner_allowed_everything(action):
    assert PermissionPolicy().allows(ALICE, action, "owner")


def test_collaborator_cannot_edit_project():
    policy = PermissionPolicy()
    assert not policy.allows(ALICE, "edit_project", "collaborator")
    assert policy.allows(ALICE, "manage_tasks", "collaborator")


def test_admin_allowed_without_role():
    assert PermissionPolicy.strict().allows(ADMIN, "delete_project")


def test_anyone_may_create_projects():
    assert PermissionPolicy.strict().allows(ALICE, "create_project")


def test_missing_role_uses_default():
    assert PermissionPolicy.permissive().allows(ALICE, "manage_tasks")
    assert not PermissionPolicy.strict().allows(ALICE, "manage_tasks")


def test_named_policies():
    assert PermissionPolicy.named("strict") == PermissionPolicy.strict()
    assert PermissionPolicy.named("permissive") == PermissionPolicy.permissive()


def test_unknown_role_uses_default():
    assert PermissionPolicy().allows(ALICE, "manage_tasks", "guest")
    assert not PermissionPolicy.strict().allows(ALICE, "manage_tasks", "guest")


def test_custom_role_table():
    roles = dict(DEFAULT_ROLES, viewer=frozenset())
    policy = PermissionPolicy(roles=roles)
    assert not policy.allows(ALICE, "manage_stages", "viewer")


def test_system_actions_need_admin():
    policy = PermissionPolicy()
    assert not policy.allows(ALICE, "manage_users", "owner")
    assert policy.allows(ADMIN, "manage_users")
    assert policy.allows(ALICE, "view_user_management")
