from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Callable, Iterable, MutableMapping, cast

import streamlit as st

from core.codec import extract_reference_id, reminder_to_wire, to_wire_format
from core.validators import deduplicate_preserve_order
from integrations.assignment import ActorContext, AssignmentPolicy, BranchLock, NoAssignmentPolicy
from integrations.crm_api import SubmissionOutcome, SubmitFn
from integrations.reference_data import ReferenceDataProvider
from models.lead import LeadFormState, Reminder
from utils.logging_context import log_context, set_lead_id, set_wizard_step
from wizard import step_registry
from wizard.field_paths import FieldPath, is_scalar_path, set_value
from wizard.hydration import new_reminder_id
from wizard.navigation.keys import WizardSessionKeys
from wizard.step_registry import StepDefinition
from wizard.validation import (
    ErrorVisibility,
    ValidationPolicy,
    ValidationResult,
    validate_steps,
)

logger = logging.getLogger(__name__)

REMINDER_INCOMPLETE_MESSAGE = "Date, time and note are required to add a reminder"


class SubmitStatus(StrEnum):
    SUBMITTED = "submitted"
    INVALID = "invalid"
    FAILED = "failed"
    BUSY = "busy"


@dataclass(frozen=True)
class SubmitResult:
    """What happened on a submit attempt."""

    status: SubmitStatus
    validation: ValidationResult = field(default_factory=ValidationResult)
    outcome: SubmissionOutcome | None = None
    payload: dict[str, Any] | None = None

    @property
    def ok(self) -> bool:
        return self.status is SubmitStatus.SUBMITTED


class WizardController:
    """Own the lead wizard's navigation state and gate it on step validation.

    The aggregate form state is held by the controller; navigation data (step
    index, completed steps, submit attempt and busy flags) lives in
    ``session_state`` under a namespaced key so it survives Streamlit reruns.
    """

    def __init__(
        self,
        *,
        form_state: LeadFormState,
        submit: SubmitFn,
        reference_data: ReferenceDataProvider,
        actor: ActorContext | None = None,
        assignment_policy: AssignmentPolicy | None = None,
        validation_policy: ValidationPolicy | None = None,
        on_success: Callable[[SubmissionOutcome], None] | None = None,
        wizard_id: str = "lead",
        session_state: MutableMapping[str, object] | None = None,
    ) -> None:
        self._form_state = form_state
        self._submit = submit
        self._reference_data = reference_data
        self._actor = actor or ActorContext()
        self._policy = validation_policy or ValidationPolicy.from_config()
        self._on_success = on_success
        self._session_state = cast(
            MutableMapping[str, object],
            session_state if session_state is not None else st.session_state,
        )
        self._session_keys = WizardSessionKeys(wizard_id=wizard_id)
        self._branch_lock: BranchLock | None = (assignment_policy or NoAssignmentPolicy()).resolve(self._actor)
        if self._branch_lock is not None:
            form_state.branch_assignment = self._branch_lock.branch_id
        set_lead_id(form_state.record_id)
        self.ensure_state_defaults()

    # -- state access -----------------------------------------------------

    @property
    def form_state(self) -> LeadFormState:
        return self._form_state

    @property
    def reference_data(self) -> ReferenceDataProvider:
        return self._reference_data

    @property
    def actor(self) -> ActorContext:
        return self._actor

    @property
    def branch_lock(self) -> BranchLock | None:
        return self._branch_lock

    @property
    def state(self) -> dict[str, object]:
        raw_state = self._session_state.get(self._session_keys.navigation_state)
        if isinstance(raw_state, dict):
            return raw_state
        fresh: dict[str, object] = {}
        self._session_state[self._session_keys.navigation_state] = fresh
        return fresh

    def ensure_state_defaults(self) -> None:
        state = self.state
        state.setdefault("step_index", 0)
        state.setdefault("completed_steps", [])
        state.setdefault("has_attempted_submit", False)
        state.setdefault("busy", False)
        if not isinstance(self._session_state.get(self._session_keys.validation_result), ValidationResult):
            self._store_result(ValidationResult())
        set_wizard_step(self.current_step.key)

    @property
    def active_steps(self) -> tuple[StepDefinition, ...]:
        return step_registry.resolve_active_steps(self._form_state)

    @property
    def step_index(self) -> int:
        raw = self.state.get("step_index")
        index = raw if isinstance(raw, int) else 0
        clamped = step_registry.clamp_step_index(index, self.active_steps)
        if clamped != index:
            self.state["step_index"] = clamped
        return clamped

    @property
    def current_step(self) -> StepDefinition:
        return self.active_steps[self.step_index]

    @property
    def completed_steps(self) -> frozenset[int]:
        raw = self.state.get("completed_steps")
        if not isinstance(raw, list):
            return frozenset()
        return frozenset(index for index in raw if isinstance(index, int))

    @property
    def has_attempted_submit(self) -> bool:
        return bool(self.state.get("has_attempted_submit"))

    @property
    def busy(self) -> bool:
        return bool(self.state.get("busy"))

    @property
    def error_visibility(self) -> ErrorVisibility:
        return ErrorVisibility.SHOWN if self.has_attempted_submit else ErrorVisibility.HIDDEN

    @property
    def validation(self) -> ValidationResult:
        result = self._session_state.get(self._session_keys.validation_result)
        if isinstance(result, ValidationResult):
            return result
        return ValidationResult(visibility=self.error_visibility)

    @property
    def is_first_step(self) -> bool:
        return self.step_index == 0

    @property
    def is_last_step(self) -> bool:
        return self.step_index == len(self.active_steps) - 1

    def _store_result(self, result: ValidationResult) -> None:
        self._session_state[self._session_keys.validation_result] = result

    def _clear_result(self) -> None:
        self._store_result(ValidationResult(visibility=self.error_visibility))

    def _set_step_index(self, index: int) -> None:
        self.state["step_index"] = index
        set_wizard_step(self.active_steps[index].key)

    def _mark_completed(self, index: int) -> None:
        completed = self.state.get("completed_steps")
        if isinstance(completed, list):
            if index not in completed:
                completed.append(index)
        else:
            self.state["completed_steps"] = [index]

    def _refresh_active_steps(self) -> None:
        """Clamp navigation data after the active step sequence changed."""

        steps = self.active_steps
        raw = self.state.get("step_index")
        index = raw if isinstance(raw, int) else 0
        clamped = step_registry.clamp_step_index(index, steps)
        if clamped != index:
            logger.info("Active steps shrank to %d; moving from step %d to %d", len(steps), index, clamped)
        self._set_step_index(clamped)
        self.state["completed_steps"] = sorted(i for i in self.completed_steps if i < len(steps))

    # -- navigation -------------------------------------------------------

    def go_back(self) -> bool:
        """Move to the previous step without validating the current one."""

        index = self.step_index
        if index <= 0:
            return False
        self._set_step_index(index - 1)
        return True

    def go_forward(self) -> bool:
        """Validate the current step and advance when it passes.

        Before the first submit attempt a failing step blocks navigation but its
        errors are discarded rather than displayed.
        """

        steps = self.active_steps
        index = self.step_index
        result = steps[index].validate(self._form_state, self._policy)
        if not result.ok:
            if self.has_attempted_submit:
                self._store_result(result.with_visibility(ErrorVisibility.SHOWN))
            else:
                logger.debug("Step '%s' blocked forward navigation (%d errors hidden)", steps[index].key, len(result.errors))
            return False
        self._mark_completed(index)
        self._clear_result()
        if index >= len(steps) - 1:
            return False
        self._set_step_index(index + 1)
        return True

    def jump_to(self, target_index: int) -> bool:
        """Jump to a visited or completed step, or to the next one via :meth:`go_forward`."""

        steps = self.active_steps
        if not 0 <= target_index < len(steps):
            return False
        index = self.step_index
        if target_index < index or target_index in self.completed_steps:
            self._set_step_index(target_index)
            return True
        if target_index == index + 1:
            return self.go_forward()
        return False

    def submit(self) -> SubmitResult:
        """Validate every active step and hand the payload to the submit function.

        ``busy`` is set and cleared around the synchronous submit call within a
        single rerun, so ``SubmitStatus.BUSY`` is only returned for a re-entrant
        call made while that function runs. It does not guard against a second
        click that arrives in a later rerun.
        """

        if self.busy:
            logger.warning("Ignoring submit while a previous submission is in flight")
            return SubmitResult(status=SubmitStatus.BUSY, validation=self.validation)

        self.state["has_attempted_submit"] = True
        steps = self.active_steps
        keys = [step.key for step in steps]
        merged, first_failing = validate_steps(keys, self._form_state, self._policy)
        merged = merged.with_visibility(ErrorVisibility.SHOWN)

        if first_failing is not None:
            failing_index = keys.index(first_failing)
            step_result = steps[failing_index].validate(self._form_state, self._policy)
            self._set_step_index(failing_index)
            self._store_result(
                ValidationResult(
                    errors=step_result.errors,
                    warnings=merged.warnings,
                    visibility=ErrorVisibility.SHOWN,
                )
            )
            logger.info("Submit blocked by step '%s' (%d errors in total)", first_failing, len(merged.errors))
            return SubmitResult(status=SubmitStatus.INVALID, validation=merged)

        payload = to_wire_format(self._form_state)
        self.state["busy"] = True
        try:
            with log_context(lead_id=self._form_state.record_id or "new"):
                outcome = self._submit(payload)
        finally:
            self.state["busy"] = False

        if not outcome.ok:
            logger.warning("Lead submission failed: %s", outcome.reason)
            self._store_result(ValidationResult(warnings=merged.warnings, visibility=ErrorVisibility.SHOWN))
            return SubmitResult(status=SubmitStatus.FAILED, validation=merged, outcome=outcome, payload=payload)

        logger.info("Lead %s submitted", "updated" if self._form_state.record_id else "created")
        self._clear_result()
        if self._on_success is not None:
            self._on_success(outcome)
        return SubmitResult(status=SubmitStatus.SUBMITTED, validation=merged, outcome=outcome, payload=payload)

    def cancel(self) -> None:
        """Discard navigation data; the caller drops the controller itself."""

        self._session_state.pop(self._session_keys.navigation_state, None)
        self._session_state.pop(self._session_keys.validation_result, None)
        logger.info("Lead wizard cancelled")

    # -- edits ------------------------------------------------------------

    def _clear_field_error(self, path: str) -> None:
        current = self.validation
        updated = current.without(path)
        if updated is not current:
            self._store_result(updated)

    def set_field(self, path: FieldPath | str, value: object) -> bool:
        """Write a field and clear its error.

        Product and clinical tag collections are replaced through their set
        semantics. Returns ``False`` when the field is locked for the current
        actor.

        Raises:
            KeyError: For the reminder list, which only changes through
                :meth:`add_reminder` and :meth:`remove_reminder`.
        """

        field_path = FieldPath(path)
        if not is_scalar_path(field_path):
            if field_path is FieldPath.PRODUCTS:
                self.set_products(cast(Iterable[object], value))
            elif field_path is FieldPath.CLINICAL_TAGS:
                self.set_clinical_tags(cast(Iterable[object], value))
            else:
                raise KeyError(f"{field_path} cannot be assigned directly")
            return True
        if field_path is FieldPath.BRANCH and self._branch_lock is not None:
            if extract_reference_id(value) != self._branch_lock.branch_id:
                logger.warning("Branch is locked to %s for role '%s'", self._branch_lock.branch_id, self._actor.role)
                return False
            return True
        previous_status = self._form_state.status
        if field_path is FieldPath.BRANCH:
            value = extract_reference_id(value)
        set_value(self._form_state, field_path, value)
        self._clear_field_error(field_path)
        if field_path is FieldPath.STATUS and self._form_state.status is not previous_status:
            self._refresh_active_steps()
        return True

    def set_clinical_tags(self, tags: Iterable[object]) -> None:
        self._form_state.clinical_tags = deduplicate_preserve_order(list(tags))
        self._clear_field_error(FieldPath.CLINICAL_TAGS)

    def toggle_clinical_tag(self, tag: str) -> bool:
        """Select or deselect ``tag``; returns whether it is now selected."""

        current = list(self._form_state.clinical_tags)
        if tag in current:
            current.remove(tag)
            selected = False
        else:
            current.append(tag)
            selected = True
        self.set_clinical_tags(current)
        return selected

    def set_products(self, products: Iterable[object]) -> None:
        ids = [extract_reference_id(product) for product in products]
        self._form_state.product_selections = deduplicate_preserve_order(ids)
        self._clear_field_error(FieldPath.PRODUCTS)

    def add_product(self, product: object) -> bool:
        """Add a product by bare id or populated object; duplicates are ignored."""

        product_id = extract_reference_id(product)
        if not product_id or product_id in self._form_state.product_selections:
            return False
        self.set_products([*self._form_state.product_selections, product_id])
        return True

    def remove_product(self, product_id: str) -> bool:
        if product_id not in self._form_state.product_selections:
            return False
        self.set_products(item for item in self._form_state.product_selections if item != product_id)
        return True

    def add_reminder(
        self,
        reminder_date: object,
        clock_time: str,
        meridiem: str,
        note: str,
    ) -> tuple[Reminder | None, str | None]:
        """Append a reminder; returns the reminder or a message explaining the refusal."""

        if not reminder_date or not (clock_time or "").strip() or not (note or "").strip():
            return None, REMINDER_INCOMPLETE_MESSAGE
        try:
            when_utc = reminder_to_wire(cast(Any, reminder_date), clock_time, meridiem)
        except ValueError as error:
            return None, str(error)
        reminder = Reminder(id=new_reminder_id(), when_utc=when_utc, note=note.strip())
        self._form_state.reminders = [*self._form_state.reminders, reminder]
        self._clear_field_error(FieldPath.REMINDERS)
        return reminder, None

    def remove_reminder(self, reminder_id: str) -> bool:
        remaining = [reminder for reminder in self._form_state.reminders if reminder.id != reminder_id]
        if len(remaining) == len(self._form_state.reminders):
            return False
        self._form_state.reminders = remaining
        return True

    def current_warnings(self) -> dict[str, str]:
        """Non-blocking messages for the current step, computed from live state."""

        return dict(self.current_step.validate(self._form_state, self._policy).warnings)


__all__ = [
    "REMINDER_INCOMPLETE_MESSAGE",
    "SubmitResult",
    "SubmitStatus",
    "WizardController",
]
