# app.py: Lead intake wizard (Streamlit entrypoint)
from __future__ import annotations

import logging
import sys
from pathlib import Path

import streamlit as st

APP_ROOT = Path(__file__).resolve().parent
if str(APP_ROOT) not in sys.path:
    sys.path.insert(0, str(APP_ROOT))

import config  # noqa: E402
from constants.keys import StateKeys  # noqa: E402
from integrations.assignment import ActorContext  # noqa: E402
from state import ensure_state, reset_state  # noqa: E402
from utils.logging_context import configure_logging, current_context  # noqa: E402
from wizard.flow import load_lead_for_edit, run_wizard  # noqa: E402

APP_VERSION = "0.1.0"

configure_logging(level=logging.DEBUG if config.ADMIN_DEBUG else logging.INFO)

st.set_page_config(
    page_title="Lead Intake",
    page_icon="🧾",
    layout="wide",
    initial_sidebar_state="expanded",
)

ensure_state()


def _render_sidebar() -> None:
    with st.sidebar:
        st.markdown("### Session")
        actor = st.session_state.get(StateKeys.ACTOR)
        role = st.text_input("Role", value=getattr(actor, "role", ""), key="sidebar.actor.role")
        branch = st.text_input("Branch ID", value=getattr(actor, "branch_id", ""), key="sidebar.actor.branch")
        if st.button("Apply", key="sidebar.actor.apply"):
            st.session_state[StateKeys.ACTOR] = ActorContext.from_user(
                {"role": role, "branch": branch, "_id": getattr(actor, "user_id", "")}
            )
            reset_state()
            st.rerun()

        st.markdown("### Edit existing lead")
        record_id = st.text_input("Lead ID", key="sidebar.edit.record_id")
        if st.button("Open", key="sidebar.edit.open", disabled=not record_id.strip()):
            if load_lead_for_edit(record_id):
                st.rerun()
        if st.button("New lead", key="sidebar.edit.new"):
            reset_state()
            st.rerun()

        if st.checkbox("Debug details", key=StateKeys.DEBUG):
            st.json(current_context(), expanded=False)
        st.caption(f"v{APP_VERSION}")


_render_sidebar()
run_wizard()
