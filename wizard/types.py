"""Shared type aliases for the wizard package."""

from __future__ import annotations

from enum import StrEnum
from typing import Mapping


class StepKey(StrEnum):
    """Identifiers of the lead wizard steps in canonical order."""

    REMINDERS = "reminders"
    BASIC_INFO = "basic-info"
    CONTACT = "contact"
    CLINICAL_PRODUCTS = "clinical-products"
    PAYMENT_ASSIGNMENT = "payment-assignment"


# Field path (see ``wizard.field_paths.FieldPath``) mapped to a user-facing message
FieldErrors = Mapping[str, str]


__all__ = [
    "FieldErrors",
    "StepKey",
]
