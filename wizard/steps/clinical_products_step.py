from __future__ import annotations

import streamlit as st

from components.form_fields import field_error, seed_widget
from constants.keys import UIKeys
from integrations.reference_data import label_for
from wizard.field_paths import FieldPath
from wizard.navigation_types import WizardContext

__all__ = ["step_clinical_products"]


def step_clinical_products(context: WizardContext) -> None:
    """Render health issue tags and product selection.

    Products already stored on the lead stay listed even when they are not in
    the active catalogue, so invalid ids can be seen and removed.
    """

    controller = context.controller
    state = controller.form_state
    st.subheader("Health & Products")

    tag_items = context.reference_data.clinical_tags()
    tag_options = [item.id for item in tag_items]
    tag_options += [tag for tag in state.clinical_tags if tag not in tag_options]
    seed_widget(UIKeys.CLINICAL_TAGS, list(state.clinical_tags))
    st.multiselect(
        "Health issues",
        tag_options,
        key=UIKeys.CLINICAL_TAGS,
        format_func=lambda tag: label_for(tag_items, tag),
        on_change=lambda: controller.set_clinical_tags(st.session_state.get(UIKeys.CLINICAL_TAGS, [])),
    )
    field_error(controller, FieldPath.CLINICAL_TAGS)

    product_items = context.reference_data.products()
    product_options = [item.id for item in product_items]
    product_options += [pid for pid in state.product_selections if pid not in product_options]
    seed_widget(UIKeys.PRODUCTS, list(state.product_selections))
    st.multiselect(
        "Products",
        product_options,
        key=UIKeys.PRODUCTS,
        format_func=lambda pid: label_for(product_items, pid),
        on_change=lambda: controller.set_products(st.session_state.get(UIKeys.PRODUCTS, [])),
    )
    field_error(controller, FieldPath.PRODUCTS)
    if not product_items:
        st.info("No active products could be loaded.")
