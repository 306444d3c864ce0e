"""Tests for the lead wizard navigation controller."""

from __future__ import annotations

from datetime import date, timezone
from typing import Any, Callable

import pytest

import config
from config import BranchRequirement
from integrations.assignment import ActorContext, RestrictedRoleAssignmentPolicy
from integrations.crm_api import SubmissionOutcome
from integrations.reference_data import StaticReferenceData
from models.lead import LeadFormState, LeadStatus
from wizard.field_paths import FieldPath
from wizard.navigation.keys import WizardSessionKeys
from wizard.navigation.router import REMINDER_INCOMPLETE_MESSAGE, SubmitStatus, WizardController
from wizard.types import StepKey
from wizard.validation import ErrorVisibility, ValidationPolicy

VALID_PRODUCT_ID = "65a1b2c3d4e5f60718293a4b"
RECORD_ID = "65f00000000000000000abcd"
BRANCH_ID = "64f0c0ffee0000000000beef"

ControllerFactory = Callable[..., WizardController]


@pytest.fixture
def session() -> dict[str, object]:
    return {}


@pytest.fixture
def make_controller(
    session: dict[str, object],
    submit_recorder: Any,
    reference_data: StaticReferenceData,
    warn_policy: ValidationPolicy,
) -> ControllerFactory:
    def _factory(state: LeadFormState | None = None, **overrides: Any) -> WizardController:
        kwargs: dict[str, Any] = {
            "form_state": state if state is not None else LeadFormState(),
            "submit": submit_recorder,
            "reference_data": reference_data,
            "validation_policy": warn_policy,
            "session_state": session,
        }
        kwargs.update(overrides)
        return WizardController(**kwargs)

    return _factory


def _fill_contact(controller: WizardController) -> None:
    controller.set_field(FieldPath.CONTACT_NAME, "Asha Rao")
    controller.set_field(FieldPath.CONTACT_PHONE, "9876543210")


def test_controller_starts_on_first_step(make_controller: ControllerFactory) -> None:
    controller = make_controller()

    assert controller.step_index == 0
    assert controller.current_step.key == StepKey.REMINDERS
    assert len(controller.active_steps) == 3
    assert controller.completed_steps == frozenset()
    assert not controller.has_attempted_submit
    assert not controller.busy


def test_go_back_is_noop_on_first_step(make_controller: ControllerFactory) -> None:
    controller = make_controller()

    assert controller.go_back() is False
    assert controller.step_index == 0


def test_go_forward_marks_step_completed(make_controller: ControllerFactory) -> None:
    controller = make_controller()

    assert controller.go_forward() is True
    assert controller.step_index == 1
    assert controller.completed_steps == frozenset({0})

    assert controller.go_back() is True
    assert controller.step_index == 0


def test_failing_step_blocks_forward_with_hidden_errors(make_controller: ControllerFactory) -> None:
    controller = make_controller()
    controller.jump_to(1)
    controller.jump_to(2)

    assert controller.go_forward() is False
    assert controller.step_index == 2
    assert 2 not in controller.completed_steps
    assert controller.validation.visible_errors == {}
    assert controller.validation.visibility is ErrorVisibility.HIDDEN


def test_go_forward_never_passes_last_step(make_controller: ControllerFactory) -> None:
    controller = make_controller()
    _fill_contact(controller)
    controller.go_forward()
    controller.go_forward()

    assert controller.is_last_step
    assert controller.go_forward() is False
    assert controller.step_index == 2
    assert 2 in controller.completed_steps


def test_jump_to_rules(make_controller: ControllerFactory) -> None:
    controller = make_controller()

    assert controller.jump_to(2) is False
    assert controller.jump_to(5) is False
    assert controller.jump_to(-1) is False
    assert controller.jump_to(1) is True
    assert controller.step_index == 1

    assert controller.jump_to(0) is True
    assert controller.step_index == 0
    assert controller.jump_to(1) is True
    assert controller.step_index == 1


def test_jump_to_next_step_runs_validation(make_controller: ControllerFactory) -> None:
    controller = make_controller(LeadFormState(status=LeadStatus.COMPLETED))
    controller.jump_to(1)
    controller.jump_to(2)

    assert controller.jump_to(3) is False
    assert controller.step_index == 2

    _fill_contact(controller)
    assert controller.jump_to(3) is True
    assert controller.jump_to(0) is True
    assert controller.jump_to(2) is True
    assert controller.jump_to(4) is False


def test_submit_with_invalid_contact_opens_first_failing_step(
    make_controller: ControllerFactory, submit_recorder: Any
) -> None:
    controller = make_controller()

    result = controller.submit()

    assert result.status is SubmitStatus.INVALID
    assert not result.ok
    assert controller.step_index == 2
    assert controller.has_attempted_submit
    assert controller.validation.visible_errors == {
        FieldPath.CONTACT_NAME: "Customer name is required",
        FieldPath.CONTACT_PHONE: "Customer mobile is required",
    }
    assert submit_recorder.payloads == []


def test_go_back_from_failing_step_skips_validation(make_controller: ControllerFactory) -> None:
    controller = make_controller()
    controller.submit()
    assert controller.step_index == 2
    errors_before = dict(controller.validation.visible_errors)
    assert errors_before

    assert controller.go_back() is True

    assert controller.step_index == 1
    assert dict(controller.validation.visible_errors) == errors_before


def test_errors_shown_on_forward_after_first_submit(make_controller: ControllerFactory) -> None:
    controller = make_controller()
    controller.submit()
    controller.set_field(FieldPath.CONTACT_NAME, "Asha")
    controller.set_field(FieldPath.CONTACT_PHONE, "123")

    assert controller.go_forward() is False
    assert controller.validation.visible_errors == {
        FieldPath.CONTACT_PHONE: "Please enter a valid 10-digit mobile number"
    }


def test_editing_a_field_clears_only_its_error(make_controller: ControllerFactory) -> None:
    controller = make_controller()
    controller.submit()

    controller.set_field(FieldPath.CONTACT_NAME, "Asha")

    assert controller.validation.visible_errors == {FieldPath.CONTACT_PHONE: "Customer mobile is required"}


def test_successful_submit(make_controller: ControllerFactory, submit_recorder: Any) -> None:
    outcomes: list[SubmissionOutcome] = []
    controller = make_controller(on_success=outcomes.append)
    _fill_contact(controller)

    result = controller.submit()

    assert result.status is SubmitStatus.SUBMITTED
    assert result.ok
    assert len(submit_recorder.payloads) == 1
    payload = submit_recorder.payloads[0]
    assert payload["contact"]["phone"] == "9876543210"
    assert "recordId" not in payload
    assert outcomes == [submit_recorder.outcome]
    assert not controller.busy


def test_failed_submit_surfaces_reason(make_controller: ControllerFactory, submit_recorder: Any) -> None:
    submit_recorder.outcome = SubmissionOutcome(ok=False, reason="Duplicate mobile number", status_code=409)
    outcomes: list[SubmissionOutcome] = []
    controller = make_controller(on_success=outcomes.append)
    _fill_contact(controller)

    result = controller.submit()

    assert result.status is SubmitStatus.FAILED
    assert result.outcome is not None
    assert result.outcome.reason == "Duplicate mobile number"
    assert outcomes == []
    assert not controller.busy


def test_busy_flag_is_cleared_when_submit_raises(make_controller: ControllerFactory) -> None:
    def _explode(_payload: dict[str, Any]) -> SubmissionOutcome:
        raise RuntimeError("boom")

    controller = make_controller(submit=_explode)
    _fill_contact(controller)

    with pytest.raises(RuntimeError):
        controller.submit()
    assert not controller.busy


def test_second_submit_while_busy_is_ignored(make_controller: ControllerFactory, submit_recorder: Any) -> None:
    controller = make_controller()
    _fill_contact(controller)
    nested: list[SubmitStatus] = []
    submit_recorder.on_call = lambda: nested.append(controller.submit().status)

    result = controller.submit()

    assert result.status is SubmitStatus.SUBMITTED
    assert nested == [SubmitStatus.BUSY]
    assert len(submit_recorder.payloads) == 1


def test_busy_does_not_outlive_the_submit_call(make_controller: ControllerFactory, submit_recorder: Any) -> None:
    controller = make_controller()
    _fill_contact(controller)

    assert controller.submit().status is SubmitStatus.SUBMITTED
    assert controller.busy is False
    assert controller.submit().status is SubmitStatus.SUBMITTED
    assert len(submit_recorder.payloads) == 2


def test_edit_mode_payload_keeps_record_id(make_controller: ControllerFactory, submit_recorder: Any) -> None:
    controller = make_controller(LeadFormState(record_id=RECORD_ID))
    _fill_contact(controller)

    controller.submit()

    assert submit_recorder.payloads[0]["recordId"] == RECORD_ID


def test_status_change_expands_and_clamps_steps(make_controller: ControllerFactory) -> None:
    controller = make_controller()
    _fill_contact(controller)
    controller.set_field(FieldPath.STATUS, "completed")
    assert len(controller.active_steps) == 5

    for _ in range(4):
        assert controller.go_forward() is True
    assert controller.step_index == 4
    assert controller.completed_steps == frozenset({0, 1, 2, 3})

    controller.set_field(FieldPath.STATUS, LeadStatus.PENDING)

    assert len(controller.active_steps) == 3
    assert controller.step_index == 2
    assert controller.completed_steps == frozenset({0, 1, 2})


def test_missing_branch_warns_but_submits(make_controller: ControllerFactory) -> None:
    controller = make_controller(LeadFormState(status=LeadStatus.COMPLETED))
    _fill_contact(controller)

    result = controller.submit()

    assert result.status is SubmitStatus.SUBMITTED
    assert FieldPath.BRANCH in result.validation.warnings


def test_current_warnings_follow_live_branch_value(make_controller: ControllerFactory) -> None:
    controller = make_controller(LeadFormState(status=LeadStatus.COMPLETED))
    _fill_contact(controller)
    for _ in range(4):
        controller.go_forward()
    assert controller.current_step.key == StepKey.PAYMENT_ASSIGNMENT
    assert FieldPath.BRANCH in controller.current_warnings()

    controller.set_field(FieldPath.BRANCH, BRANCH_ID)

    assert controller.current_warnings() == {}


def test_missing_branch_blocks_under_block_policy(make_controller: ControllerFactory) -> None:
    controller = make_controller(
        LeadFormState(status=LeadStatus.COMPLETED),
        validation_policy=ValidationPolicy(branch_requirement=BranchRequirement.BLOCK),
    )
    _fill_contact(controller)

    result = controller.submit()

    assert result.status is SubmitStatus.INVALID
    assert controller.current_step.key == StepKey.PAYMENT_ASSIGNMENT
    assert FieldPath.BRANCH in controller.validation.visible_errors


def test_invalid_products_block_submit(make_controller: ControllerFactory) -> None:
    controller = make_controller(LeadFormState(status=LeadStatus.COMPLETED))
    _fill_contact(controller)
    controller.set_products(["not-an-id", VALID_PRODUCT_ID])

    result = controller.submit()

    assert result.status is SubmitStatus.INVALID
    assert controller.current_step.key == StepKey.CLINICAL_PRODUCTS

    controller.remove_product("not-an-id")
    assert FieldPath.PRODUCTS not in controller.validation.visible_errors


def test_branch_lock_for_restricted_role(make_controller: ControllerFactory) -> None:
    controller = make_controller(
        actor=ActorContext(user_id="u1", role="accounts_manager", branch_id=BRANCH_ID),
        assignment_policy=RestrictedRoleAssignmentPolicy(["accounts_manager"]),
    )

    assert controller.branch_lock is not None
    assert controller.form_state.branch_assignment == BRANCH_ID
    assert controller.set_field(FieldPath.BRANCH, "another-branch") is False
    assert controller.form_state.branch_assignment == BRANCH_ID


def test_unrestricted_role_can_pick_branch(make_controller: ControllerFactory) -> None:
    controller = make_controller(
        actor=ActorContext(role="admin", branch_id=BRANCH_ID),
        assignment_policy=RestrictedRoleAssignmentPolicy(["accounts_manager"]),
    )

    assert controller.branch_lock is None
    assert controller.set_field(FieldPath.BRANCH, {"_id": "b-2", "branchName": "North"}) is True
    assert controller.form_state.branch_assignment == "b-2"


def test_product_and_tag_sets(make_controller: ControllerFactory) -> None:
    controller = make_controller()

    assert controller.add_product({"_id": VALID_PRODUCT_ID, "productName": "Tea"}) is True
    assert controller.add_product(VALID_PRODUCT_ID) is False
    assert controller.form_state.product_selections == [VALID_PRODUCT_ID]
    assert controller.remove_product(VALID_PRODUCT_ID) is True
    assert controller.remove_product(VALID_PRODUCT_ID) is False

    assert controller.toggle_clinical_tag("Skin Problems") is True
    assert controller.toggle_clinical_tag("Skin Problems") is False
    assert controller.form_state.clinical_tags == []


def test_set_field_replaces_collections_with_set_semantics(make_controller: ControllerFactory) -> None:
    controller = make_controller()

    assert controller.set_field(FieldPath.PRODUCTS, [{"_id": VALID_PRODUCT_ID}, VALID_PRODUCT_ID]) is True
    assert controller.set_field(FieldPath.CLINICAL_TAGS, ["Diabetes", "Diabetes"]) is True

    assert controller.form_state.product_selections == [VALID_PRODUCT_ID]
    assert controller.form_state.clinical_tags == ["Diabetes"]
    with pytest.raises(KeyError):
        controller.set_field(FieldPath.REMINDERS, [])


def test_add_and_remove_reminders(make_controller: ControllerFactory, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config, "REMINDER_TIMEZONE", timezone.utc)
    controller = make_controller()

    reminder, problem = controller.add_reminder(date(2024, 1, 1), "12:30", "AM", " call back ")

    assert problem is None
    assert reminder is not None
    assert reminder.when_utc == "2024-01-01T00:30:00.000Z"
    assert reminder.note == "call back"
    assert controller.form_state.reminders == [reminder]

    assert controller.remove_reminder(reminder.id) is True
    assert controller.form_state.reminders == []
    assert controller.remove_reminder("missing") is False


def test_add_reminder_rejects_incomplete_or_invalid_input(make_controller: ControllerFactory) -> None:
    controller = make_controller()

    assert controller.add_reminder(date(2024, 1, 1), "10:00", "AM", "  ") == (None, REMINDER_INCOMPLETE_MESSAGE)
    reminder, problem = controller.add_reminder(date(2024, 1, 1), "13:00", "PM", "call")
    assert reminder is None
    assert problem
    assert controller.form_state.reminders == []


def test_navigation_survives_rerun(make_controller: ControllerFactory, session: dict[str, object]) -> None:
    state = LeadFormState()
    first = make_controller(state)
    first.go_forward()

    second = make_controller(state)

    assert second.step_index == 1
    assert second.completed_steps == frozenset({0})


def test_cancel_discards_navigation(make_controller: ControllerFactory, session: dict[str, object]) -> None:
    controller = make_controller()
    controller.go_forward()
    keys = WizardSessionKeys(wizard_id="lead")

    controller.cancel()

    assert keys.navigation_state not in session
    assert keys.validation_result not in session
