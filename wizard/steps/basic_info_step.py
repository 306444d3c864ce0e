from __future__ import annotations

import streamlit as st

from components.form_fields import bound_date_input, bound_selectbox, bound_text_input
from constants.keys import UIKeys
from models.lead import LEAD_SOURCES, LeadPriority, LeadStatus
from wizard.field_paths import FieldPath
from wizard.navigation_types import WizardContext

__all__ = ["STATUS_LABELS", "step_basic_info"]

STATUS_LABELS: dict[str, str] = {
    LeadStatus.NEW: "New",
    LeadStatus.NOT_ANSWERED: "Not Answered",
    LeadStatus.QUALIFIED: "Qualified",
    LeadStatus.PENDING: "Pending",
    LeadStatus.COMPLETED: "Order Completed",
    LeadStatus.UNQUALIFIED: "Unqualified",
}


def _title(value: str) -> str:
    return value.replace("_", " ").title()


def step_basic_info(context: WizardContext) -> None:
    """Render lead date, status, priority, source and notes."""

    controller = context.controller
    st.subheader("Basic Information")
    st.caption("Setting the status to *Order Completed* unlocks the health and payment steps.")

    left, right = st.columns(2)
    with left:
        bound_date_input(controller, FieldPath.LEAD_DATE, "Lead date", UIKeys.LEAD_DATE)
        bound_selectbox(
            controller,
            FieldPath.STATUS,
            "Lead status",
            UIKeys.STATUS,
            [status.value for status in LeadStatus],
            format_func=lambda value: STATUS_LABELS.get(value, _title(value)),
        )
    with right:
        bound_selectbox(
            controller,
            FieldPath.PRIORITY,
            "Priority",
            UIKeys.PRIORITY,
            [priority.value for priority in LeadPriority],
            format_func=_title,
        )
        bound_selectbox(
            controller,
            FieldPath.LEAD_SOURCE,
            "Lead source",
            UIKeys.LEAD_SOURCE,
            LEAD_SOURCES,
            format_func=_title,
        )
    bound_text_input(controller, FieldPath.NOTES, "Notes", UIKeys.NOTES, area=True)
