from __future__ import annotations

import streamlit as st

from components.form_fields import bound_date_input, bound_selectbox, bound_text_input
from constants.keys import UIKeys
from integrations.reference_data import label_for
from models.lead import PAYMENT_MODES, PAYMENT_TYPES
from wizard.field_paths import FieldPath
from wizard.navigation.ui import render_validation_messages
from wizard.navigation_types import WizardContext

__all__ = ["step_payment_assignment"]

_PAYMENT_MODE_LABELS: dict[str, str] = {
    "gpay": "GPay",
    "phonepe": "PhonePe",
    "bank_transfer": "Bank Transfer",
    "online_sales": "Online Sales",
    "cash": "Cash",
    "full_cod": "Full COD",
}


def step_payment_assignment(context: WizardContext) -> None:
    """Render payment details and the branch the order ships from."""

    controller = context.controller
    st.subheader("Payment & Assignment")

    left, right = st.columns(2)
    with left:
        bound_selectbox(
            controller,
            FieldPath.PAYMENT_TYPE,
            "Payment type",
            UIKeys.PAYMENT_TYPE,
            PAYMENT_TYPES,
            format_func=lambda value: value.upper() if value == "cod" else value.title(),
        )
        bound_date_input(controller, FieldPath.PAYMENT_DATE, "Payment date", UIKeys.PAYMENT_DATE)
    with right:
        bound_selectbox(
            controller,
            FieldPath.PAYMENT_MODE,
            "Payment mode",
            UIKeys.PAYMENT_MODE,
            PAYMENT_MODES,
            format_func=lambda value: _PAYMENT_MODE_LABELS.get(value, value),
        )
        bound_text_input(controller, FieldPath.PAYMENT_NOTE, "Payment note", UIKeys.PAYMENT_NOTE)

    branches = context.reference_data.branches()
    locked = controller.branch_lock is not None
    bound_selectbox(
        controller,
        FieldPath.BRANCH,
        "Dispatch branch",
        UIKeys.BRANCH,
        [item.id for item in branches],
        format_func=lambda branch_id: label_for(branches, branch_id),
        disabled=locked,
        help="Assigned automatically from your branch." if locked else None,
    )
    render_validation_messages(controller.current_warnings())
