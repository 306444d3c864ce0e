from __future__ import annotations

import html
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Callable, Literal, Mapping

import streamlit as st
from streamlit.delta_generator import DeltaGenerator

from wizard.navigation.router import WizardController

_NAVIGATION_STYLE = """
<style>
.wizard-nav-marker + div[data-testid="stHorizontalBlock"] {
    max-width: 640px;
    margin: 1rem auto 0.5rem;
    gap: 0.5rem;
}
.wizard-nav-marker + div[data-testid="stHorizontalBlock"] button {
    border-radius: 12px;
    min-height: 2.75rem;
}
.wizard-nav-warning-area {
    max-width: 640px;
    margin: 0.4rem auto 0;
}
.wizard-nav-warning {
    border: 1px solid rgba(245, 158, 11, 0.4);
    border-radius: 10px;
    background: rgba(251, 191, 36, 0.15);
    padding: 0.55rem 0.8rem;
    font-size: 0.9rem;
}
.wizard-nav-warning--empty {
    display: none;
}
.lead-stepper__step--current + div button {
    box-shadow: 0 0 0 2px rgba(59, 130, 246, 0.4);
}
</style>
"""


class NavigationDirection(StrEnum):
    PREVIOUS = "previous"
    NEXT = "next"
    SUBMIT = "submit"
    CANCEL = "cancel"


@dataclass(frozen=True)
class NavigationButtonState:
    """Typed configuration for a single navigation button."""

    direction: NavigationDirection
    label: str
    enabled: bool = True
    primary: bool = False
    hint: str | None = None
    on_click: Callable[[], object] | None = field(default=None, repr=False, compare=False)


@dataclass(frozen=True)
class StepperItem:
    index: int
    label: str
    status: Literal["done", "current", "upcoming"]
    clickable: bool


@dataclass(frozen=True)
class NavigationState:
    """Aggregated state used to render the stepper and navigation controls."""

    current_key: str
    step_items: tuple[StepperItem, ...] = ()
    previous: NavigationButtonState | None = None
    next: NavigationButtonState | None = None
    submit: NavigationButtonState | None = None
    cancel: NavigationButtonState | None = None


def inject_navigation_style() -> None:
    st.markdown(_NAVIGATION_STYLE, unsafe_allow_html=True)


def build_navigation_state(
    controller: WizardController,
    *,
    on_submit: Callable[[], object] | None = None,
    on_cancel: Callable[[], object] | None = None,
) -> NavigationState:
    """Derive button and stepper configuration from ``controller``.

    No Streamlit calls happen here so the result can be asserted on directly.
    """

    steps = controller.active_steps
    index = controller.step_index
    completed = controller.completed_steps
    busy = controller.busy

    items = tuple(
        StepperItem(
            index=position,
            label=step.label,
            status="current" if position == index else ("done" if position in completed else "upcoming"),
            clickable=position != index and (position < index or position in completed or position == index + 1),
        )
        for position, step in enumerate(steps)
    )

    previous_button = None
    if index > 0:
        previous_button = NavigationButtonState(
            direction=NavigationDirection.PREVIOUS,
            label="◀ Back",
            enabled=not busy,
            on_click=controller.go_back,
        )

    next_button = None
    submit_button = None
    if index < len(steps) - 1:
        next_button = NavigationButtonState(
            direction=NavigationDirection.NEXT,
            label="Next ▶",
            enabled=not busy,
            primary=True,
            on_click=controller.go_forward,
        )
    else:
        submit_button = NavigationButtonState(
            direction=NavigationDirection.SUBMIT,
            label="Saving…" if busy else ("Update Lead" if controller.form_state.is_edit else "Create Lead"),
            enabled=not busy,
            primary=True,
            hint="Submitting validates every step and opens the first one that needs attention.",
            on_click=on_submit or controller.submit,
        )

    cancel_button = NavigationButtonState(
        direction=NavigationDirection.CANCEL,
        label="Cancel",
        enabled=not busy,
        on_click=on_cancel or controller.cancel,
    )

    return NavigationState(
        current_key=steps[index].key,
        step_items=items,
        previous=previous_button,
        next=next_button,
        submit=submit_button,
        cancel=cancel_button,
    )


def render_stepper(state: NavigationState, controller: WizardController) -> None:
    """Render clickable step pills; refused jumps leave the index unchanged."""

    if not state.step_items:
        return
    cols = st.columns(len(state.step_items), gap="small")
    for column, item in zip(cols, state.step_items):
        prefix = "✓ " if item.status == "done" else f"{item.index + 1}. "
        column.markdown(f"<div class='lead-stepper__step--{item.status}'>", unsafe_allow_html=True)
        triggered = column.button(
            f"{prefix}{item.label}",
            key=f"lead_stepper_{item.index}",
            disabled=not item.clickable or controller.busy,
            use_container_width=True,
        )
        column.markdown("</div>", unsafe_allow_html=True)
        if triggered and controller.jump_to(item.index):
            st.rerun()


def _render_navigation_button(
    column: DeltaGenerator,
    button: NavigationButtonState | None,
    state: NavigationState,
) -> None:
    if button is None:
        column.write("")
        return
    triggered = column.button(
        button.label,
        key=f"lead_nav_{button.direction.value}_{state.current_key}",
        type="primary" if button.primary else "secondary",
        disabled=not button.enabled,
        use_container_width=True,
    )
    if button.hint:
        column.caption(button.hint)
    if triggered and button.on_click is not None:
        button.on_click()
        st.rerun()


def render_navigation(state: NavigationState) -> None:
    """Render Back / Next-or-Submit / Cancel controls."""

    st.markdown("<div class='wizard-nav-marker'></div>", unsafe_allow_html=True)
    cols = st.columns((1, 1, 1), gap="small")
    _render_navigation_button(cols[0], state.previous, state)
    _render_navigation_button(cols[1], state.next or state.submit, state)
    _render_navigation_button(cols[2], state.cancel, state)


def render_validation_messages(messages: Mapping[str, str]) -> None:
    """Render a combined warning box for non-blocking messages."""

    unique = list(dict.fromkeys(messages.values())) if messages else []
    combined = "\n".join(unique)
    sanitized = html.escape(combined).replace("\n", "<br />")
    warning_class = "wizard-nav-warning--active" if combined.strip() else "wizard-nav-warning--empty"
    st.markdown(
        f"""
        <div class="wizard-nav-warning-area">
            <div class="wizard-nav-warning {warning_class}">
                {sanitized}
            </div>
        </div>
        """,
        unsafe_allow_html=True,
    )


__all__ = [
    "NavigationButtonState",
    "NavigationDirection",
    "NavigationState",
    "StepperItem",
    "build_navigation_state",
    "inject_navigation_style",
    "render_navigation",
    "render_stepper",
    "render_validation_messages",
]
