"""Registry for wizard steps, metadata, and canonical order."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Final, Sequence

from models.lead import LeadFormState, LeadStatus
from wizard.navigation_types import StepRenderer, WizardContext
from wizard.types import StepKey
from wizard.validation import (
    STEP_VALIDATORS,
    StepValidator,
    ValidationPolicy,
    ValidationResult,
)

StepPredicate = Callable[[LeadFormState], bool]


@dataclass(frozen=True)
class StepDefinition:
    """Metadata + validation/rendering contract for an individual wizard step."""

    key: str
    label: str
    description: str
    validator: StepValidator
    renderer: StepRenderer
    is_active: StepPredicate | None = None

    def validate(self, state: LeadFormState, policy: ValidationPolicy | None = None) -> ValidationResult:
        return self.validator(state, policy or ValidationPolicy.from_config())


def _order_completed(state: LeadFormState) -> bool:
    return state.status is LeadStatus.COMPLETED


def _render_reminders_step(context: WizardContext) -> None:
    from wizard.steps import reminders_step

    reminders_step.step_reminders(context)


def _render_basic_info_step(context: WizardContext) -> None:
    from wizard.steps import basic_info_step

    basic_info_step.step_basic_info(context)


def _render_contact_step(context: WizardContext) -> None:
    from wizard.steps import contact_step

    contact_step.step_contact(context)


def _render_clinical_products_step(context: WizardContext) -> None:
    from wizard.steps import clinical_products_step

    clinical_products_step.step_clinical_products(context)


def _render_payment_assignment_step(context: WizardContext) -> None:
    from wizard.steps import payment_assignment_step

    payment_assignment_step.step_payment_assignment(context)


LEAD_STEPS: Final[tuple[StepDefinition, ...]] = (
    StepDefinition(
        key=StepKey.REMINDERS,
        label="Reminders",
        description="Follow-up reminders and notes",
        validator=STEP_VALIDATORS[StepKey.REMINDERS],
        renderer=_render_reminders_step,
    ),
    StepDefinition(
        key=StepKey.BASIC_INFO,
        label="Basic Information",
        description="Lead details and status",
        validator=STEP_VALIDATORS[StepKey.BASIC_INFO],
        renderer=_render_basic_info_step,
    ),
    StepDefinition(
        key=StepKey.CONTACT,
        label="Customer Details",
        description="Contact and personal information",
        validator=STEP_VALIDATORS[StepKey.CONTACT],
        renderer=_render_contact_step,
    ),
    StepDefinition(
        key=StepKey.CLINICAL_PRODUCTS,
        label="Health & Products",
        description="Medical conditions and products",
        validator=STEP_VALIDATORS[StepKey.CLINICAL_PRODUCTS],
        renderer=_render_clinical_products_step,
        is_active=_order_completed,
    ),
    StepDefinition(
        key=StepKey.PAYMENT_ASSIGNMENT,
        label="Payment & Assignment",
        description="Payment details and branch assignment",
        validator=STEP_VALIDATORS[StepKey.PAYMENT_ASSIGNMENT],
        renderer=_render_payment_assignment_step,
        is_active=_order_completed,
    ),
)


def resolve_active_steps(state: LeadFormState) -> tuple[StepDefinition, ...]:
    """Return the steps active for ``state`` in canonical order.

    Only ``state.status`` is consulted: a completed order unlocks the health and
    payment steps, every other status stops after the contact step.
    """

    return tuple(step for step in LEAD_STEPS if step.is_active is None or step.is_active(state))


def clamp_step_index(index: int, active_steps: Sequence[StepDefinition]) -> int:
    """Clamp ``index`` into the valid range for ``active_steps``."""

    if not active_steps:
        return 0
    return max(0, min(index, len(active_steps) - 1))


__all__ = [
    "LEAD_STEPS",
    "StepDefinition",
    "clamp_step_index",
    "resolve_active_steps",
]
