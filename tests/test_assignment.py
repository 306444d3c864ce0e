from __future__ import annotations

import pytest

import config
from integrations.assignment import (
    ActorContext,
    BranchLock,
    NoAssignmentPolicy,
    RestrictedRoleAssignmentPolicy,
)


def test_actor_from_user_normalises_role_and_branch() -> None:
    actor = ActorContext.from_user({"_id": "u1", "role": " Accounts_Manager ", "branch": {"_id": "b1", "branchName": "Main"}})

    assert actor == ActorContext(user_id="u1", role="accounts_manager", branch_id="b1")
    assert ActorContext.from_user(None) == ActorContext()


def test_restricted_role_is_locked_to_its_branch() -> None:
    policy = RestrictedRoleAssignmentPolicy(["accounts_manager"])

    assert policy.resolve(ActorContext(role="accounts_manager", branch_id="b1")) == BranchLock("b1")
    assert policy.resolve(ActorContext(role="accounts_manager")) is None
    assert policy.resolve(ActorContext(role="admin", branch_id="b1")) is None


def test_restricted_roles_default_to_config(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config, "LEAD_RESTRICTED_ROLES", frozenset({"telecaller"}))
    policy = RestrictedRoleAssignmentPolicy()

    assert policy.resolve(ActorContext(role="telecaller", branch_id="b9")) == BranchLock("b9")
    assert policy.resolve(ActorContext(role="accounts_manager", branch_id="b9")) is None


def test_no_assignment_policy_never_locks() -> None:
    assert NoAssignmentPolicy().resolve(ActorContext(role="accounts_manager", branch_id="b1")) is None
