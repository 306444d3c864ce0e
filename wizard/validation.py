"""Per-step validation rules for the lead wizard.

Validators are pure: they inspect the aggregate form state and return a
:class:`ValidationResult`. Whether errors are shown is decided by the result's
visibility, which the navigation controller flips after the first submit
attempt.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import StrEnum
from typing import Callable, Iterable, Mapping

import config
from config import BranchRequirement
from core.validators import has_email_shape, invalid_object_ids, strip_non_digits
from models.lead import LeadFormState
from wizard.field_paths import FieldPath
from wizard.types import FieldErrors, StepKey

BRANCH_REQUIRED_MESSAGE = "Please assign a branch"


class ErrorVisibility(StrEnum):
    HIDDEN = "errors-hidden"
    SHOWN = "errors-shown"


@dataclass(frozen=True)
class ValidationResult:
    """Field errors and non-blocking warnings for one or more steps."""

    errors: FieldErrors = field(default_factory=dict)
    warnings: FieldErrors = field(default_factory=dict)
    visibility: ErrorVisibility = ErrorVisibility.HIDDEN

    @property
    def ok(self) -> bool:
        return not self.errors

    @property
    def visible_errors(self) -> dict[str, str]:
        if self.visibility is ErrorVisibility.SHOWN:
            return dict(self.errors)
        return {}

    def with_visibility(self, visibility: ErrorVisibility) -> "ValidationResult":
        return replace(self, visibility=visibility)

    def without(self, field_key: str) -> "ValidationResult":
        """Return a copy with the error and warning for ``field_key`` removed."""

        if field_key not in self.errors and field_key not in self.warnings:
            return self
        return replace(
            self,
            errors={key: msg for key, msg in self.errors.items() if key != field_key},
            warnings={key: msg for key, msg in self.warnings.items() if key != field_key},
        )

    def merged(self, other: "ValidationResult") -> "ValidationResult":
        return ValidationResult(
            errors={**self.errors, **other.errors},
            warnings={**self.warnings, **other.warnings},
            visibility=self.visibility,
        )


@dataclass(frozen=True)
class ValidationPolicy:
    """Configurable knobs for the step validators."""

    branch_requirement: BranchRequirement = BranchRequirement.WARN
    phone_digits: int = 10

    @classmethod
    def from_config(cls) -> "ValidationPolicy":
        return cls(
            branch_requirement=config.LEAD_BRANCH_REQUIREMENT,
            phone_digits=config.LEAD_PHONE_DIGITS,
        )


StepValidator = Callable[[LeadFormState, ValidationPolicy], ValidationResult]


def _no_required_fields(_state: LeadFormState, _policy: ValidationPolicy) -> ValidationResult:
    return ValidationResult()


def validate_contact(state: LeadFormState, policy: ValidationPolicy) -> ValidationResult:
    errors: dict[str, str] = {}
    contact = state.contact
    if not contact.name.strip():
        errors[FieldPath.CONTACT_NAME] = "Customer name is required"
    if not contact.phone.strip():
        errors[FieldPath.CONTACT_PHONE] = "Customer mobile is required"
    elif len(strip_non_digits(contact.phone)) != policy.phone_digits:
        errors[FieldPath.CONTACT_PHONE] = f"Please enter a valid {policy.phone_digits}-digit mobile number"
    email = contact.email.strip()
    if email and not has_email_shape(email):
        errors[FieldPath.CONTACT_EMAIL] = "Please enter a valid email address"
    return ValidationResult(errors=errors)


def validate_clinical_products(state: LeadFormState, _policy: ValidationPolicy) -> ValidationResult:
    invalid = invalid_object_ids(state.product_selections)
    if not invalid:
        return ValidationResult()
    return ValidationResult(
        errors={
            FieldPath.PRODUCTS: (
                f"Invalid product IDs detected: {', '.join(invalid)}. Please remove invalid products."
            )
        }
    )


def validate_payment_assignment(state: LeadFormState, policy: ValidationPolicy) -> ValidationResult:
    if state.branch_assignment.strip() or policy.branch_requirement is BranchRequirement.OFF:
        return ValidationResult()
    if policy.branch_requirement is BranchRequirement.BLOCK:
        return ValidationResult(errors={FieldPath.BRANCH: BRANCH_REQUIRED_MESSAGE})
    return ValidationResult(warnings={FieldPath.BRANCH: BRANCH_REQUIRED_MESSAGE})


STEP_VALIDATORS: Mapping[str, StepValidator] = {
    StepKey.REMINDERS: _no_required_fields,
    StepKey.BASIC_INFO: _no_required_fields,
    StepKey.CONTACT: validate_contact,
    StepKey.CLINICAL_PRODUCTS: validate_clinical_products,
    StepKey.PAYMENT_ASSIGNMENT: validate_payment_assignment,
}


def validate_step(
    step_key: str,
    state: LeadFormState,
    policy: ValidationPolicy | None = None,
) -> ValidationResult:
    """Run the validator registered for ``step_key``; unknown steps have no rules."""

    validator = STEP_VALIDATORS.get(step_key, _no_required_fields)
    return validator(state, policy or ValidationPolicy.from_config())


def validate_steps(
    step_keys: Iterable[str],
    state: LeadFormState,
    policy: ValidationPolicy | None = None,
) -> tuple[ValidationResult, str | None]:
    """Validate every step in ``step_keys``.

    Returns:
        The merged result and the key of the first step (in the given order)
        whose own validation failed, or ``None`` when all passed.
    """

    resolved_policy = policy or ValidationPolicy.from_config()
    merged = ValidationResult()
    first_failing: str | None = None
    for key in step_keys:
        result = validate_step(key, state, resolved_policy)
        if not result.ok and first_failing is None:
            first_failing = key
        merged = merged.merged(result)
    return merged, first_failing


__all__ = [
    "BRANCH_REQUIRED_MESSAGE",
    "ErrorVisibility",
    "STEP_VALIDATORS",
    "StepValidator",
    "ValidationPolicy",
    "ValidationResult",
    "validate_clinical_products",
    "validate_contact",
    "validate_payment_assignment",
    "validate_step",
    "validate_steps",
]
