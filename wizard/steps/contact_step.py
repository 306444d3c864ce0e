from __future__ import annotations

import streamlit as st

import config
from components.form_fields import bound_selectbox, bound_text_input
from constants.keys import UIKeys
from models.lead import GENDERS, MARITAL_STATUSES
from wizard.field_paths import FieldPath
from wizard.navigation_types import WizardContext

__all__ = ["step_contact"]


def step_contact(context: WizardContext) -> None:
    """Render customer contact details and the postal address."""

    controller = context.controller
    st.subheader("Customer Details")

    left, right = st.columns(2)
    with left:
        bound_text_input(controller, FieldPath.CONTACT_NAME, "Customer name *", UIKeys.CONTACT_NAME)
        bound_text_input(
            controller,
            FieldPath.CONTACT_PHONE,
            "Mobile number *",
            UIKeys.CONTACT_PHONE,
            placeholder=f"{config.LEAD_PHONE_DIGITS} digits",
        )
        bound_text_input(controller, FieldPath.CONTACT_EMAIL, "Email", UIKeys.CONTACT_EMAIL)
    with right:
        bound_text_input(controller, FieldPath.CONTACT_AGE, "Age", UIKeys.CONTACT_AGE)
        bound_selectbox(controller, FieldPath.CONTACT_GENDER, "Gender", UIKeys.CONTACT_GENDER, GENDERS)
        bound_selectbox(
            controller,
            FieldPath.CONTACT_MARITAL_STATUS,
            "Marital status",
            UIKeys.CONTACT_MARITAL_STATUS,
            MARITAL_STATUSES,
        )

    st.markdown("##### Address")
    bound_text_input(controller, FieldPath.ADDRESS_STREET, "Street", UIKeys.ADDRESS_STREET)
    city_col, state_col = st.columns(2)
    with city_col:
        bound_text_input(controller, FieldPath.ADDRESS_CITY, "City", UIKeys.ADDRESS_CITY)
        bound_text_input(controller, FieldPath.ADDRESS_PIN_CODE, "PIN code", UIKeys.ADDRESS_PIN_CODE)
    with state_col:
        bound_text_input(controller, FieldPath.ADDRESS_STATE, "State", UIKeys.ADDRESS_STATE)
        bound_text_input(controller, FieldPath.ADDRESS_COUNTRY, "Country", UIKeys.ADDRESS_COUNTRY)
