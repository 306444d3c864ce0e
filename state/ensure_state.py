"""Helpers for initializing Streamlit session state."""

from __future__ import annotations

import logging
import uuid
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, Callable

import streamlit as st
from pydantic import ValidationError

from constants.keys import StateKeys
from integrations.assignment import ActorContext, BranchLock, RestrictedRoleAssignmentPolicy
from models.lead import LeadFormState
from utils.logging_context import set_lead_id, set_session_id
from wizard.hydration import default_state, hydrate

logger = logging.getLogger(__name__)

MODE_CREATE = "create"
MODE_EDIT = "edit"

_DEFAULT_STATE_FACTORIES: Mapping[str, Callable[[], Any]] = MappingProxyType(
    {
        StateKeys.SESSION_ID: lambda: uuid.uuid4().hex,
        StateKeys.WIZARD_MODE: lambda: MODE_CREATE,
        StateKeys.SERVER_RECORD: lambda: None,
        StateKeys.ACTOR: ActorContext,
        StateKeys.DEBUG: lambda: False,
    }
)

_PRESERVED_KEYS = frozenset({StateKeys.SESSION_ID, StateKeys.ACTOR, StateKeys.DEBUG})


def current_actor() -> ActorContext:
    actor = st.session_state.get(StateKeys.ACTOR)
    if isinstance(actor, ActorContext):
        return actor
    coerced = ActorContext.from_user(actor if isinstance(actor, Mapping) else None)
    st.session_state[StateKeys.ACTOR] = coerced
    return coerced


def current_branch_lock() -> BranchLock | None:
    return RestrictedRoleAssignmentPolicy().resolve(current_actor())


def _initial_form_state(existing: object) -> LeadFormState:
    lock = current_branch_lock()
    if isinstance(existing, Mapping):
        try:
            return LeadFormState.model_validate(existing)
        except ValidationError as error:
            logger.warning("Discarding invalid lead form state: %s", error)
    record = st.session_state.get(StateKeys.SERVER_RECORD)
    if record is not None:
        return hydrate(record, branch_lock=lock)
    return default_state(branch_lock=lock)


def ensure_state() -> None:
    """Initialize ``st.session_state`` with required keys.

    Existing keys are preserved across reruns.
    """

    for key, factory in _DEFAULT_STATE_FACTORIES.items():
        if key not in st.session_state:
            st.session_state[key] = factory()
    current_actor()
    existing = st.session_state.get(StateKeys.LEAD_FORM)
    if not isinstance(existing, LeadFormState):
        st.session_state[StateKeys.LEAD_FORM] = _initial_form_state(existing)
    set_session_id(str(st.session_state[StateKeys.SESSION_ID]))
    set_lead_id(st.session_state[StateKeys.LEAD_FORM].record_id)


def reset_state() -> None:
    """Drop the wizard session (form, navigation, widgets) and start a blank lead.

    The session id, the signed-in actor and the debug flag survive.
    """

    for key in list(st.session_state.keys()):
        if key not in _PRESERVED_KEYS:
            del st.session_state[key]
    ensure_state()


def begin_edit(server_record: Mapping[str, Any]) -> LeadFormState:
    """Start a fresh wizard session hydrated from ``server_record``."""

    reset_state()
    st.session_state[StateKeys.SERVER_RECORD] = dict(server_record)
    st.session_state[StateKeys.WIZARD_MODE] = MODE_EDIT
    form_state = hydrate(server_record, branch_lock=current_branch_lock())
    st.session_state[StateKeys.LEAD_FORM] = form_state
    set_lead_id(form_state.record_id)
    return form_state
