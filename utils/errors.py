"""Utility helpers for rendering error messages in Streamlit."""

from __future__ import annotations

from typing import Final

import streamlit as st

import config
from constants.keys import StateKeys

_DETAILS_LABEL: Final[str] = "Details"


def is_debug_session_active() -> bool:
    """Return ``True`` when debug output is enabled for this session."""

    if config.ADMIN_DEBUG:
        return True
    try:
        return bool(st.session_state.get(StateKeys.DEBUG))
    except Exception:  # pragma: no cover - Streamlit session not initialised
        return False


def display_error(msg: str, detail: str | None = None) -> None:
    """Render a user-facing error with optional debug details.

    Args:
        msg: Short error message for the user.
        detail: Optional technical detail shown when debug mode is enabled.
    """

    st.error(msg)
    if detail and is_debug_session_active():
        with st.expander(_DETAILS_LABEL):
            st.code(detail)
