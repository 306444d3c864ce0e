"""Typed accessors for editable fields of :class:`LeadFormState`.

Every editable field has a :class:`FieldPath` member. Reads and writes go
through a setter table keyed by that member, so an unknown field name fails at
lookup instead of silently writing nowhere. The enum values double as the keys
of validation error mappings.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Callable, Final, Mapping

from models.lead import LeadFormState, LeadPriority, LeadStatus


class FieldPath(StrEnum):
    LEAD_DATE = "leadDate"
    STATUS = "status"
    PRIORITY = "priority"
    LEAD_SOURCE = "leadSource"
    NOTES = "notes"
    CONTACT_NAME = "contact.name"
    CONTACT_PHONE = "contact.phone"
    CONTACT_EMAIL = "contact.email"
    CONTACT_AGE = "contact.age"
    CONTACT_GENDER = "contact.gender"
    CONTACT_MARITAL_STATUS = "contact.maritalStatus"
    ADDRESS_STREET = "address.street"
    ADDRESS_CITY = "address.city"
    ADDRESS_STATE = "address.state"
    ADDRESS_PIN_CODE = "address.pinCode"
    ADDRESS_COUNTRY = "address.country"
    PAYMENT_TYPE = "payment.paymentType"
    PAYMENT_MODE = "payment.paymentMode"
    PAYMENT_DATE = "payment.paymentDate"
    PAYMENT_NOTE = "payment.paymentNote"
    BRANCH = "branchAssignment"
    # collection fields, edited through dedicated controller operations
    CLINICAL_TAGS = "clinicalTags"
    PRODUCTS = "products"
    REMINDERS = "reminders"


Getter = Callable[[LeadFormState], object]
Setter = Callable[[LeadFormState, object], None]


def _text(value: object) -> str:
    if value is None:
        return ""
    return str(value)


def _set_status(state: LeadFormState, value: object) -> None:
    state.status = value if isinstance(value, LeadStatus) else LeadStatus(_text(value))


def _set_priority(state: LeadFormState, value: object) -> None:
    state.priority = value if isinstance(value, LeadPriority) else LeadPriority(_text(value))


def _set_contact(attr: str) -> Setter:
    def _setter(state: LeadFormState, value: object) -> None:
        setattr(state.contact, attr, _text(value))

    return _setter


def _set_address(attr: str) -> Setter:
    def _setter(state: LeadFormState, value: object) -> None:
        setattr(state.address, attr, _text(value))

    return _setter


def _set_payment(attr: str) -> Setter:
    def _setter(state: LeadFormState, value: object) -> None:
        setattr(state.payment, attr, _text(value))

    return _setter


def _set_top(attr: str) -> Setter:
    def _setter(state: LeadFormState, value: object) -> None:
        setattr(state, attr, _text(value))

    return _setter


_SCALAR_SETTERS: Final[Mapping[FieldPath, Setter]] = {
    FieldPath.LEAD_DATE: _set_top("lead_date"),
    FieldPath.STATUS: _set_status,
    FieldPath.PRIORITY: _set_priority,
    FieldPath.LEAD_SOURCE: _set_top("lead_source"),
    FieldPath.NOTES: _set_top("notes"),
    FieldPath.CONTACT_NAME: _set_contact("name"),
    FieldPath.CONTACT_PHONE: _set_contact("phone"),
    FieldPath.CONTACT_EMAIL: _set_contact("email"),
    FieldPath.CONTACT_AGE: _set_contact("age"),
    FieldPath.CONTACT_GENDER: _set_contact("gender"),
    FieldPath.CONTACT_MARITAL_STATUS: _set_contact("marital_status"),
    FieldPath.ADDRESS_STREET: _set_address("street"),
    FieldPath.ADDRESS_CITY: _set_address("city"),
    FieldPath.ADDRESS_STATE: _set_address("state"),
    FieldPath.ADDRESS_PIN_CODE: _set_address("pin_code"),
    FieldPath.ADDRESS_COUNTRY: _set_address("country"),
    FieldPath.PAYMENT_TYPE: _set_payment("payment_type"),
    FieldPath.PAYMENT_MODE: _set_payment("payment_mode"),
    FieldPath.PAYMENT_DATE: _set_payment("payment_date"),
    FieldPath.PAYMENT_NOTE: _set_payment("payment_note"),
    FieldPath.BRANCH: _set_top("branch_assignment"),
}

_GETTERS: Final[Mapping[FieldPath, Getter]] = {
    FieldPath.LEAD_DATE: lambda state: state.lead_date,
    FieldPath.STATUS: lambda state: state.status,
    FieldPath.PRIORITY: lambda state: state.priority,
    FieldPath.LEAD_SOURCE: lambda state: state.lead_source,
    FieldPath.NOTES: lambda state: state.notes,
    FieldPath.CONTACT_NAME: lambda state: state.contact.name,
    FieldPath.CONTACT_PHONE: lambda state: state.contact.phone,
    FieldPath.CONTACT_EMAIL: lambda state: state.contact.email,
    FieldPath.CONTACT_AGE: lambda state: state.contact.age,
    FieldPath.CONTACT_GENDER: lambda state: state.contact.gender,
    FieldPath.CONTACT_MARITAL_STATUS: lambda state: state.contact.marital_status,
    FieldPath.ADDRESS_STREET: lambda state: state.address.street,
    FieldPath.ADDRESS_CITY: lambda state: state.address.city,
    FieldPath.ADDRESS_STATE: lambda state: state.address.state,
    FieldPath.ADDRESS_PIN_CODE: lambda state: state.address.pin_code,
    FieldPath.ADDRESS_COUNTRY: lambda state: state.address.country,
    FieldPath.PAYMENT_TYPE: lambda state: state.payment.payment_type,
    FieldPath.PAYMENT_MODE: lambda state: state.payment.payment_mode,
    FieldPath.PAYMENT_DATE: lambda state: state.payment.payment_date,
    FieldPath.PAYMENT_NOTE: lambda state: state.payment.payment_note,
    FieldPath.BRANCH: lambda state: state.branch_assignment,
    FieldPath.CLINICAL_TAGS: lambda state: tuple(state.clinical_tags),
    FieldPath.PRODUCTS: lambda state: tuple(state.product_selections),
    FieldPath.REMINDERS: lambda state: tuple(state.reminders),
}


def is_scalar_path(path: FieldPath) -> bool:
    """Return ``True`` when ``path`` can be written with :func:`set_value`."""

    return path in _SCALAR_SETTERS


def get_value(state: LeadFormState, path: FieldPath) -> object:
    """Read the value at ``path``."""

    return _GETTERS[FieldPath(path)](state)


def set_value(state: LeadFormState, path: FieldPath, value: object) -> None:
    """Write ``value`` to the scalar field at ``path``.

    Raises:
        KeyError: If ``path`` is a collection field.
        ValueError: If ``value`` is not a valid status or priority.
    """

    setter = _SCALAR_SETTERS.get(FieldPath(path))
    if setter is None:
        raise KeyError(f"{path} is not a scalar field")
    setter(state, value)


__all__ = [
    "FieldPath",
    "get_value",
    "is_scalar_path",
    "set_value",
]
