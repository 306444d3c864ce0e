"""Navigation controller and controls for the lead wizard."""

from __future__ import annotations

from wizard.navigation.keys import WizardSessionKeys
from wizard.navigation.router import SubmitResult, SubmitStatus, WizardController
from wizard.navigation.ui import (
    build_navigation_state,
    inject_navigation_style,
    render_navigation,
    render_stepper,
    render_validation_messages,
)

__all__ = [
    "SubmitResult",
    "SubmitStatus",
    "WizardController",
    "WizardSessionKeys",
    "build_navigation_state",
    "inject_navigation_style",
    "render_navigation",
    "render_stepper",
    "render_validation_messages",
]
