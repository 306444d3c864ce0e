"""Conversion between the wizard's form state and the CRM wire format.

Outbound payloads use camelCase keys that mirror :class:`LeadFormState`.
Reminder times are entered on a 12-hour clock in the configured local zone and
sent as absolute UTC timestamps.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import date, datetime, time, timezone, tzinfo
from typing import Any

import config
from core.validators import deduplicate_preserve_order, strip_non_digits
from models.lead import LeadFormState, LeadStatus
from utils.patterns import CLOCK_TIME_RE

logger = logging.getLogger(__name__)

MERIDIEMS: tuple[str, str] = ("AM", "PM")


def normalize_phone(value: object) -> str:
    """Return ``value`` with every non-digit removed."""

    return strip_non_digits(value)


def extract_reference_id(value: object) -> str:
    """Return the bare identifier of a possibly populated reference.

    Populated objects expose ``_id`` (backend) or ``id``; primitives pass
    through. Anything else, including objects without a usable identifier,
    degrades to ``""``.
    """

    if value is None or isinstance(value, bool):
        return ""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, int):
        return str(value)
    if isinstance(value, Mapping):
        for key in ("_id", "id"):
            candidate = value.get(key)
            if isinstance(candidate, bool):
                continue
            if isinstance(candidate, str) and candidate.strip():
                return candidate.strip()
            if isinstance(candidate, int):
                return str(candidate)
        return ""
    return ""


def to_twenty_four_hour(hour: int, meridiem: str) -> int:
    """Convert a 12-hour clock ``hour`` to 24-hour form.

    ``12 AM`` becomes ``0``, ``12 PM`` stays ``12`` and every other ``PM``
    hour gains twelve.

    Raises:
        ValueError: If ``hour`` is outside ``1..12`` or ``meridiem`` is unknown.
    """

    marker = meridiem.strip().upper() if isinstance(meridiem, str) else ""
    if marker not in MERIDIEMS:
        raise ValueError(f"Unknown meridiem: {meridiem!r}")
    if not 1 <= hour <= 12:
        raise ValueError(f"Hour {hour} is not on a 12-hour clock")
    if marker == "AM":
        return 0 if hour == 12 else hour
    return 12 if hour == 12 else hour + 12


def parse_clock_time(value: str, meridiem: str) -> time:
    """Parse ``"hh:mm"`` plus a meridiem flag into a 24-hour :class:`time`."""

    match = CLOCK_TIME_RE.match(value or "")
    if not match:
        raise ValueError(f"Invalid time: {value!r}")
    minute = int(match.group("minute"))
    if minute > 59:
        raise ValueError(f"Invalid minute in {value!r}")
    hour = to_twenty_four_hour(int(match.group("hour")), meridiem)
    return time(hour, minute)


def _coerce_date(value: date | str) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value).strip())


def _format_utc(moment: datetime) -> str:
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def reminder_to_wire(
    reminder_date: date | str,
    clock_time: str,
    meridiem: str,
    *,
    tz: tzinfo | None = None,
) -> str:
    """Combine a date and 12-hour clock value into an absolute UTC timestamp.

    Raises:
        ValueError: If the date, time or meridiem cannot be parsed.
    """

    local_zone = tz or config.REMINDER_TIMEZONE
    local = datetime.combine(_coerce_date(reminder_date), parse_clock_time(clock_time, meridiem), tzinfo=local_zone)
    return _format_utc(local)


def parse_wire_timestamp(value: str) -> datetime:
    """Parse an ISO timestamp; naive values are treated as UTC."""

    parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def reminder_from_wire(value: str, *, tz: tzinfo | None = None) -> str:
    """Return a display string such as ``Jan 1, 2024, 12:30 AM``.

    Unparsable input is returned unchanged so the user still sees something.
    """

    if not isinstance(value, str) or not value.strip():
        return ""
    try:
        moment = parse_wire_timestamp(value).astimezone(tz or config.REMINDER_TIMEZONE)
    except ValueError:
        logger.debug("Leaving unparsable reminder timestamp as-is: %s", value)
        return value
    hour12 = moment.hour % 12 or 12
    marker = "AM" if moment.hour < 12 else "PM"
    return f"{moment:%b} {moment.day}, {moment.year}, {hour12}:{moment:%M} {marker}"


def _age_to_wire(value: str) -> int | None:
    digits = value.strip()
    if digits.isdigit():
        return int(digits)
    return None


def to_wire_format(state: LeadFormState) -> dict[str, Any]:
    """Serialise ``state`` into the outbound CRM payload."""

    payload = state.model_dump(by_alias=True, mode="json", exclude={"record_id", "payment"})
    if state.record_id is not None:
        payload["recordId"] = state.record_id

    contact = payload["contact"]
    contact["name"] = state.contact.name.strip()
    contact["phone"] = normalize_phone(state.contact.phone)
    contact["email"] = state.contact.email.strip()
    age = _age_to_wire(state.contact.age)
    if age is None:
        contact.pop("age", None)
    else:
        contact["age"] = age

    payload["notes"] = state.notes.strip()
    payload["clinicalTags"] = deduplicate_preserve_order(state.clinical_tags)
    payload["productSelections"] = deduplicate_preserve_order(
        extract_reference_id(product) for product in state.product_selections
    )
    payload["branchAssignment"] = extract_reference_id(state.branch_assignment)
    if state.status is LeadStatus.COMPLETED:
        payload["payment"] = state.payment.model_dump(by_alias=True, mode="json")
    return payload


__all__ = [
    "MERIDIEMS",
    "extract_reference_id",
    "normalize_phone",
    "parse_clock_time",
    "parse_wire_timestamp",
    "reminder_from_wire",
    "reminder_to_wire",
    "to_twenty_four_hour",
    "to_wire_format",
]
