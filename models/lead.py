"""Pydantic models for the in-progress lead edited by the intake wizard."""

from __future__ import annotations

from datetime import date
from enum import StrEnum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

import config
from core.validators import deduplicate_preserve_order


def _today_iso() -> str:
    return date.today().isoformat()


class LeadStatus(StrEnum):
    """Business state of a lead; drives which wizard steps are active."""

    NEW = "new"
    NOT_ANSWERED = "not_answered"
    QUALIFIED = "qualified"
    PENDING = "pending"
    COMPLETED = "completed"
    UNQUALIFIED = "unqualified"

    @classmethod
    def from_wire(cls, value: object, *, default: "LeadStatus | None" = None) -> "LeadStatus":
        """Parse ``value`` including the legacy ``new_lead``/``order_completed`` spellings."""

        fallback = default or cls.NEW
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return fallback
        candidate = value.strip().lower()
        candidate = _LEGACY_STATUS_ALIASES.get(candidate, candidate)
        try:
            return cls(candidate)
        except ValueError:
            return fallback


_LEGACY_STATUS_ALIASES = {
    "new_lead": "new",
    "order_completed": "completed",
}


class LeadPriority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


LEAD_SOURCES: tuple[str, ...] = (
    "website",
    "social_media",
    "referral",
    "advertisement",
    "walk_in",
    "phone_call",
    "other",
)
GENDERS: tuple[str, ...] = ("Male", "Female", "Other")
MARITAL_STATUSES: tuple[str, ...] = ("Married", "Unmarried")
PAYMENT_TYPES: tuple[str, ...] = ("prepaid", "local", "cod")
PAYMENT_MODES: tuple[str, ...] = ("gpay", "phonepe", "bank_transfer", "online_sales", "cash", "full_cod")


class _WireModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_assignment=True,
        extra="ignore",
    )


class Contact(_WireModel):
    """Contact and personal details of the prospective customer."""

    name: str = ""
    phone: str = ""
    email: str = ""
    age: str = ""
    gender: str = ""
    marital_status: str = ""


class Address(_WireModel):
    """Free-form postal address; every part is optional."""

    street: str = ""
    city: str = ""
    state: str = ""
    pin_code: str = ""
    country: str = Field(default_factory=lambda: config.LEAD_DEFAULT_COUNTRY)


class Payment(_WireModel):
    """Payment details, only relevant once the order is completed."""

    payment_type: str = "prepaid"
    payment_mode: str = "gpay"
    payment_date: str = Field(default_factory=_today_iso)
    payment_note: str = ""


class Reminder(_WireModel):
    """A follow-up reminder; ``id`` is generated locally when appended."""

    model_config = ConfigDict(frozen=True)

    id: str
    when_utc: str
    note: str = ""


class LeadFormState(_WireModel):
    """Aggregate state of the lead while the wizard is open.

    The instance is mutated in place by every edit. ``record_id`` is only set
    in edit mode and cannot change afterwards.
    """

    record_id: Optional[str] = Field(default=None, frozen=True)
    lead_date: str = Field(default_factory=_today_iso)
    status: LeadStatus = LeadStatus.NEW
    priority: LeadPriority = LeadPriority.MEDIUM
    lead_source: str = ""
    notes: str = ""
    contact: Contact = Field(default_factory=Contact)
    address: Address = Field(default_factory=Address)
    clinical_tags: List[str] = Field(default_factory=list)
    product_selections: List[str] = Field(default_factory=list)
    payment: Payment = Field(default_factory=Payment)
    branch_assignment: str = ""
    reminders: List[Reminder] = Field(default_factory=list)

    @field_validator("clinical_tags", "product_selections", mode="before")
    @classmethod
    def _unique_members(cls, value: object) -> list[str]:
        """Keep set semantics for multi-select fields."""

        return deduplicate_preserve_order(value)

    @field_validator("status", mode="before")
    @classmethod
    def _parse_status(cls, value: object) -> LeadStatus:
        return LeadStatus.from_wire(value)

    @property
    def is_edit(self) -> bool:
        return self.record_id is not None


__all__ = [
    "Address",
    "Contact",
    "GENDERS",
    "LEAD_SOURCES",
    "LeadFormState",
    "LeadPriority",
    "LeadStatus",
    "MARITAL_STATUSES",
    "PAYMENT_MODES",
    "PAYMENT_TYPES",
    "Payment",
    "Reminder",
]
