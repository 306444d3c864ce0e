from __future__ import annotations

from datetime import date

import streamlit as st

from components.form_fields import field_error, seed_widget
from constants.keys import UIKeys
from core.codec import MERIDIEMS, reminder_from_wire
from wizard.field_paths import FieldPath
from wizard.navigation_types import WizardContext

__all__ = ["step_reminders"]


def _add_reminder(context: WizardContext) -> None:
    reminder, problem = context.controller.add_reminder(
        st.session_state.get(UIKeys.REMINDER_DATE),
        str(st.session_state.get(UIKeys.REMINDER_TIME) or ""),
        str(st.session_state.get(UIKeys.REMINDER_MERIDIEM) or MERIDIEMS[0]),
        str(st.session_state.get(UIKeys.REMINDER_NOTE) or ""),
    )
    if reminder is None:
        st.session_state[f"{UIKeys.REMINDER_NOTE}.problem"] = problem
        return
    st.session_state.pop(f"{UIKeys.REMINDER_NOTE}.problem", None)
    st.session_state[UIKeys.REMINDER_TIME] = ""
    st.session_state[UIKeys.REMINDER_NOTE] = ""


def step_reminders(context: WizardContext) -> None:
    """Render existing follow-up reminders and a small form to add one."""

    controller = context.controller
    st.subheader("Reminders")

    reminders = controller.form_state.reminders
    if not reminders:
        st.caption("No reminders yet.")
    for reminder in reminders:
        text_col, action_col = st.columns((5, 1))
        text_col.markdown(f"**{reminder_from_wire(reminder.when_utc)}** · {reminder.note}")
        if action_col.button("Remove", key=f"reminder_remove_{reminder.id}"):
            controller.remove_reminder(reminder.id)
            st.rerun()

    st.markdown("##### Add reminder")
    seed_widget(UIKeys.REMINDER_DATE, date.today())
    seed_widget(UIKeys.REMINDER_MERIDIEM, MERIDIEMS[0])
    date_col, time_col, meridiem_col = st.columns((2, 1, 1))
    date_col.date_input("Date", key=UIKeys.REMINDER_DATE)
    time_col.text_input("Time", key=UIKeys.REMINDER_TIME, placeholder="hh:mm")
    meridiem_col.selectbox("AM/PM", MERIDIEMS, key=UIKeys.REMINDER_MERIDIEM)
    st.text_area("Note", key=UIKeys.REMINDER_NOTE)
    st.button("Add reminder", key="reminder_add", on_click=_add_reminder, args=(context,))
    problem = st.session_state.get(f"{UIKeys.REMINDER_NOTE}.problem")
    if problem:
        st.warning(problem)
    field_error(controller, FieldPath.REMINDERS)
