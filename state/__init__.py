"""Session state utilities."""

from .ensure_state import begin_edit, current_actor, current_branch_lock, ensure_state, reset_state

__all__ = ["begin_edit", "current_actor", "current_branch_lock", "ensure_state", "reset_state"]
