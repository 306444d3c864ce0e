"""Streamlit flow for the lead intake wizard."""

from __future__ import annotations

import logging
from typing import Any, Mapping

import streamlit as st

from constants.keys import StateKeys
from core.errors import CrmApiError
from integrations.assignment import RestrictedRoleAssignmentPolicy
from integrations.crm_api import CrmApiClient, SubmissionOutcome, SubmitFn, build_submit_function
from integrations.reference_data import ApiReferenceData, ReferenceDataProvider
from state import begin_edit, current_actor, ensure_state, reset_state
from utils.errors import display_error
from utils.logging_context import log_context
from wizard.navigation import (
    SubmitStatus,
    WizardController,
    build_navigation_state,
    inject_navigation_style,
    render_navigation,
    render_stepper,
)
from wizard.navigation_types import WizardContext

logger = logging.getLogger(__name__)

__all__ = ["build_controller", "load_lead_for_edit", "run_wizard"]


@st.cache_resource(show_spinner=False)
def _crm_client() -> CrmApiClient:
    return CrmApiClient()


@st.cache_resource(show_spinner=False)
def _reference_data() -> ApiReferenceData:
    return ApiReferenceData(_crm_client())


def _store_notice(kind: str, message: str, detail: str | None = None) -> None:
    st.session_state[StateKeys.LAST_SUBMIT_RESULT] = {"kind": kind, "message": message, "detail": detail}


def _on_success(outcome: SubmissionOutcome) -> None:
    edited = st.session_state.get(StateKeys.WIZARD_MODE) == "edit"
    reset_state()
    _store_notice("success", "Lead updated successfully!" if edited else "Lead created successfully!")


def build_controller(
    *,
    submit: SubmitFn | None = None,
    reference_data: ReferenceDataProvider | None = None,
) -> WizardController:
    """Build the controller for this rerun from session state."""

    ensure_state()
    return WizardController(
        form_state=st.session_state[StateKeys.LEAD_FORM],
        submit=submit or build_submit_function(_crm_client()),
        reference_data=reference_data or _reference_data(),
        actor=current_actor(),
        assignment_policy=RestrictedRoleAssignmentPolicy(),
        on_success=_on_success,
    )


def load_lead_for_edit(record_id: str) -> bool:
    """Fetch ``record_id`` and restart the wizard in edit mode."""

    try:
        record = _crm_client().get_lead(record_id.strip())
    except CrmApiError as error:
        display_error("Could not load the lead.", str(error))
        return False
    begin_edit(record)
    return True


def _handle_submit(controller: WizardController) -> None:
    result = controller.submit()
    if result.status is SubmitStatus.INVALID:
        _store_notice("error", "Please fix the highlighted fields before saving.")
    elif result.status is SubmitStatus.FAILED and result.outcome is not None:
        detail = f"HTTP {result.outcome.status_code}" if result.outcome.status_code else None
        _store_notice("error", result.outcome.reason or "Failed to save lead.", detail)


def _handle_cancel(controller: WizardController) -> None:
    controller.cancel()
    reset_state()


def _render_notice() -> None:
    notice: Mapping[str, Any] | None = st.session_state.pop(StateKeys.LAST_SUBMIT_RESULT, None)
    if not notice:
        return
    if notice.get("kind") == "success":
        st.success(str(notice.get("message", "")))
    else:
        display_error(str(notice.get("message", "")), notice.get("detail"))


def run_wizard() -> None:
    """Render the active step with stepper and navigation controls."""

    controller = build_controller()
    context = WizardContext(controller=controller, reference_data=controller.reference_data)
    inject_navigation_style()

    title = "Edit Lead" if controller.form_state.is_edit else "Create New Lead"
    st.header(title)
    _render_notice()

    nav_state = build_navigation_state(
        controller,
        on_submit=lambda: _handle_submit(controller),
        on_cancel=lambda: _handle_cancel(controller),
    )
    render_stepper(nav_state, controller)

    step = controller.current_step
    with log_context(wizard_step=step.key):
        step.renderer(context)

    render_navigation(nav_state)
