from __future__ import annotations

import pytest

from models.lead import LeadFormState, LeadStatus
from wizard.step_registry import LEAD_STEPS, clamp_step_index, resolve_active_steps

FULL_SEQUENCE = ("reminders", "basic-info", "contact", "clinical-products", "payment-assignment")


def _active_keys(state: LeadFormState) -> tuple[str, ...]:
    return tuple(step.key for step in resolve_active_steps(state))


def test_step_registry_order() -> None:
    assert tuple(step.key for step in LEAD_STEPS) == FULL_SEQUENCE


def test_step_registry_keys_are_unique() -> None:
    keys = [step.key for step in LEAD_STEPS]
    assert len(keys) == len(set(keys))


@pytest.mark.parametrize("status", [status for status in LeadStatus if status is not LeadStatus.COMPLETED])
def test_only_first_three_steps_before_order_completion(status: LeadStatus) -> None:
    assert _active_keys(LeadFormState(status=status)) == FULL_SEQUENCE[:3]


def test_completed_order_unlocks_every_step() -> None:
    assert _active_keys(LeadFormState(status=LeadStatus.COMPLETED)) == FULL_SEQUENCE


def test_active_steps_depend_only_on_status() -> None:
    state = LeadFormState(status=LeadStatus.COMPLETED, product_selections=["bad"], branch_assignment="")
    same_status = LeadFormState(status=LeadStatus.COMPLETED)

    assert resolve_active_steps(state) == resolve_active_steps(same_status)


def test_contact_step_definition() -> None:
    step = LEAD_STEPS[2]
    assert step.label == "Customer Details"
    assert step.is_active is None
    assert callable(step.renderer)


@pytest.mark.parametrize(("index", "expected"), [(-2, 0), (0, 0), (2, 2), (4, 2), (99, 2)])
def test_clamp_step_index(index: int, expected: int) -> None:
    steps = resolve_active_steps(LeadFormState())
    assert clamp_step_index(index, steps) == expected


def test_clamp_step_index_handles_empty_sequence() -> None:
    assert clamp_step_index(3, ()) == 0
