"""Reusable form field helpers that bind Streamlit widgets to the wizard controller."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from datetime import date
from typing import TYPE_CHECKING, Any

import streamlit as st

from wizard.date_utils import default_date
from wizard.field_paths import FieldPath, get_value

if TYPE_CHECKING:  # pragma: no cover - typing-only import path
    from wizard.navigation.router import WizardController

Formatter = Callable[[Any], str]

__all__ = [
    "bound_date_input",
    "bound_selectbox",
    "bound_text_input",
    "field_error",
    "seed_widget",
]


def _default_formatter(value: Any) -> str:
    """Return ``value`` normalised as a string."""

    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return str(value)


def seed_widget(widget_key: str, value: Any) -> None:
    """Prime ``widget_key`` once so the widget reflects the form state."""

    if widget_key not in st.session_state:
        st.session_state[widget_key] = value


def field_error(controller: "WizardController", path: FieldPath) -> None:
    """Render the visible error for ``path`` below its widget."""

    message = controller.validation.visible_errors.get(path)
    if message:
        st.caption(f":red[{message}]")


def _sync(controller: "WizardController", path: FieldPath, widget_key: str) -> Callable[[], None]:
    def _on_change() -> None:
        value = st.session_state.get(widget_key)
        if isinstance(value, date):
            value = value.isoformat()
        controller.set_field(path, value)

    return _on_change


def bound_text_input(
    controller: "WizardController",
    path: FieldPath,
    label: str,
    widget_key: str,
    *,
    area: bool = False,
    value_formatter: Formatter | None = None,
    **widget_kwargs: Any,
) -> str:
    """Render a text input (or area) whose edits flow through ``set_field``."""

    formatter = value_formatter or _default_formatter
    seed_widget(widget_key, formatter(get_value(controller.form_state, path)))
    factory = st.text_area if area else st.text_input
    value = factory(
        label,
        key=widget_key,
        on_change=_sync(controller, path, widget_key),
        **{k: v for k, v in widget_kwargs.items() if v is not None},
    )
    field_error(controller, path)
    return value


def bound_selectbox(
    controller: "WizardController",
    path: FieldPath,
    label: str,
    widget_key: str,
    options: Sequence[str],
    *,
    format_func: Formatter = _default_formatter,
    disabled: bool = False,
    help: str | None = None,
) -> str | None:
    """Render a selectbox; a stored value outside ``options`` is kept selectable."""

    current = _default_formatter(get_value(controller.form_state, path))
    choices = list(options)
    if current and current not in choices:
        choices.append(current)
    if not current:
        choices.insert(0, "")
    seed_widget(widget_key, current)
    value = st.selectbox(
        label,
        choices,
        key=widget_key,
        format_func=lambda option: format_func(option) if option else "Select…",
        on_change=_sync(controller, path, widget_key),
        disabled=disabled,
        help=help,
    )
    field_error(controller, path)
    return value


def bound_date_input(
    controller: "WizardController",
    path: FieldPath,
    label: str,
    widget_key: str,
) -> date:
    seed_widget(widget_key, default_date(get_value(controller.form_state, path)))
    value = st.date_input(label, key=widget_key, on_change=_sync(controller, path, widget_key))
    field_error(controller, path)
    return value
