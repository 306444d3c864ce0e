"""Branch auto-assignment for actors whose role ties them to one branch."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Collection, Mapping, Protocol

import config
from core.codec import extract_reference_id


@dataclass(frozen=True)
class ActorContext:
    """The signed-in user as far as the wizard needs to know."""

    user_id: str = ""
    role: str = ""
    branch_id: str = ""

    @classmethod
    def from_user(cls, user: Mapping[str, object] | None) -> "ActorContext":
        """Build the context from a session user record with a possibly populated branch."""

        if not isinstance(user, Mapping):
            return cls()
        role = user.get("role")
        return cls(
            user_id=extract_reference_id(user),
            role=role.strip().lower() if isinstance(role, str) else "",
            branch_id=extract_reference_id(user.get("branch")),
        )


@dataclass(frozen=True)
class BranchLock:
    """A branch the actor must use; the wizard shows it read-only."""

    branch_id: str


class AssignmentPolicy(Protocol):
    def resolve(self, actor: ActorContext) -> BranchLock | None: ...


class RestrictedRoleAssignmentPolicy:
    """Lock restricted roles (e.g. accounts managers) to their own branch."""

    def __init__(self, restricted_roles: Collection[str] | None = None) -> None:
        roles = config.LEAD_RESTRICTED_ROLES if restricted_roles is None else restricted_roles
        self._restricted_roles = frozenset(role.strip().lower() for role in roles)

    def resolve(self, actor: ActorContext) -> BranchLock | None:
        if actor.role not in self._restricted_roles or not actor.branch_id:
            return None
        return BranchLock(branch_id=actor.branch_id)


class NoAssignmentPolicy:
    def resolve(self, actor: ActorContext) -> BranchLock | None:
        return None


__all__ = [
    "ActorContext",
    "AssignmentPolicy",
    "BranchLock",
    "NoAssignmentPolicy",
    "RestrictedRoleAssignmentPolicy",
]
