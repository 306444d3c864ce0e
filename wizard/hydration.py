"""Build the wizard's aggregate state from defaults or an existing server record.

Server records are denormalized: references may arrive populated (objects with
``_id``) or as bare identifiers, dates as full timestamps, and optional parts
may be missing entirely. Hydration never raises for malformed input; every
field falls back to the create-mode default instead.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any, Mapping

from core.codec import extract_reference_id
from core.validators import deduplicate_preserve_order
from integrations.assignment import BranchLock
from models.lead import (
    Address,
    Contact,
    LeadFormState,
    LeadPriority,
    LeadStatus,
    Payment,
    Reminder,
)
from wizard.date_utils import truncate_to_date

logger = logging.getLogger(__name__)


def new_reminder_id() -> str:
    return uuid.uuid4().hex


def default_state(*, branch_lock: BranchLock | None = None) -> LeadFormState:
    """Return the create-mode state, pre-assigning a locked branch if any."""

    state = LeadFormState()
    if branch_lock is not None:
        state.branch_assignment = branch_lock.branch_id
    return state


def _mapping(value: object) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def _text(value: object, default: str = "") -> str:
    if value is None or isinstance(value, (Mapping, list, tuple, set)):
        return default
    text = str(value).strip()
    return text or default


def _first(record: Mapping[str, Any], *keys: str) -> object:
    for key in keys:
        value = record.get(key)
        if value not in (None, ""):
            return value
    return None


def _hydrate_contact(record: Mapping[str, Any]) -> Contact:
    # Records written by this app nest the contact; legacy records are flat.
    nested = _mapping(record.get("contact"))

    def _pick(nested_key: str, *flat_keys: str) -> str:
        value = _first(nested, nested_key)
        return _text(value if value is not None else _first(record, *flat_keys))

    return Contact(
        name=_pick("name", "customerName", "name"),
        phone=_pick("phone", "customerMobile", "mobileNumber", "phone"),
        email=_pick("email", "customerEmail", "email"),
        age=_pick("age", "age"),
        gender=_pick("gender", "gender"),
        marital_status=_pick("maritalStatus", "maritalStatus"),
    )


def _hydrate_address(raw: object) -> Address:
    address = _mapping(raw)
    defaults = Address()
    return Address(
        street=_text(address.get("street")),
        city=_text(address.get("city")),
        state=_text(address.get("state")),
        pin_code=_text(_first(address, "pinCode", "pincode", "zip")),
        country=_text(address.get("country"), defaults.country),
    )


def _hydrate_payment(raw: object) -> Payment:
    payment = _mapping(raw)
    defaults = Payment()
    return Payment(
        payment_type=_text(payment.get("paymentType"), defaults.payment_type),
        payment_mode=_text(payment.get("paymentMode"), defaults.payment_mode),
        payment_date=truncate_to_date(payment.get("paymentDate")) if payment.get("paymentDate") else defaults.payment_date,
        payment_note=_text(payment.get("paymentNote")),
    )


def _hydrate_reminders(raw: object) -> list[Reminder]:
    if not isinstance(raw, list):
        return []
    reminders: list[Reminder] = []
    used_ids: set[str] = set()
    for entry in raw:
        item = _mapping(entry)
        when = _text(_first(item, "datetime", "date", "whenUtc"))
        if not when:
            continue
        reminder_id = extract_reference_id(item)
        if not reminder_id or reminder_id in used_ids:
            reminder_id = new_reminder_id()
        used_ids.add(reminder_id)
        reminders.append(Reminder(id=reminder_id, when_utc=when, note=_text(item.get("note"))))
    return reminders


def _hydrate_tags(raw: object) -> list[str]:
    if not isinstance(raw, list):
        return []
    tags: list[str] = []
    for entry in raw:
        if isinstance(entry, Mapping):
            tags.append(_text(_first(entry, "healthIssue", "name", "label")))
        else:
            tags.append(_text(entry))
    return deduplicate_preserve_order(tags)


def _hydrate_priority(raw: object) -> LeadPriority:
    try:
        return LeadPriority(_text(raw, LeadPriority.MEDIUM.value).lower())
    except ValueError:
        return LeadPriority.MEDIUM


def hydrate(server_record: object, *, branch_lock: BranchLock | None = None) -> LeadFormState:
    """Convert an existing lead record into the wizard's aggregate state."""

    if not isinstance(server_record, Mapping):
        logger.warning("Lead record has unexpected type %s; using defaults.", type(server_record).__name__)
        return default_state(branch_lock=branch_lock)

    record = server_record
    record_id = extract_reference_id(record) or _text(record.get("recordId")) or None
    products = _first(record, "productSelections", "products")
    product_ids = [extract_reference_id(item) for item in products] if isinstance(products, list) else []
    branch = extract_reference_id(_first(record, "branchAssignment", "dispatchedFrom", "branchId", "branch"))
    if branch_lock is not None:
        branch = branch_lock.branch_id

    state = LeadFormState(
        record_id=record_id,
        lead_date=truncate_to_date(record.get("leadDate")),
        status=LeadStatus.from_wire(_first(record, "leadStatus", "status")),
        priority=_hydrate_priority(record.get("priority")),
        lead_source=_text(record.get("leadSource")),
        notes=_text(record.get("notes")),
        contact=_hydrate_contact(record),
        address=_hydrate_address(record.get("address")),
        clinical_tags=_hydrate_tags(_first(record, "clinicalTags", "healthIssues")),
        product_selections=deduplicate_preserve_order(product_ids),
        payment=_hydrate_payment(record.get("payment")),
        branch_assignment=branch,
        reminders=_hydrate_reminders(record.get("reminders")),
    )
    logger.info("Hydrated lead %s (status=%s)", record_id or "<new>", state.status.value)
    return state


__all__ = [
    "default_state",
    "hydrate",
    "new_reminder_id",
]
