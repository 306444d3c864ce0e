"""Helper validators shared across the lead model and wizard."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from utils.patterns import EMAIL_SHAPE_RE, NON_DIGIT_RE, OBJECT_ID_RE


def deduplicate_preserve_order(value: object) -> list[str]:
    """Return ``value`` as a list of unique strings, preserving the original order."""

    if value is None:
        return []
    if isinstance(value, str):
        candidate_iter: Iterable[Any] = [value]
    elif isinstance(value, Mapping):
        candidate_iter = list(value.values())
    elif isinstance(value, Iterable):
        candidate_iter = value  # type: ignore[assignment]
    else:
        return []

    seen: set[str] = set()
    result: list[str] = []
    for item in candidate_iter:
        if item is None:
            continue
        as_str = str(item).strip()
        if not as_str:
            continue
        if as_str in seen:
            continue
        seen.add(as_str)
        result.append(as_str)
    return result


def is_object_id(value: object) -> bool:
    """Return ``True`` when ``value`` is a 24 character hexadecimal identifier."""

    return isinstance(value, str) and bool(OBJECT_ID_RE.match(value))


def invalid_object_ids(values: Iterable[object]) -> list[str]:
    """Return the entries of ``values`` that are not backend identifiers."""

    return [str(value) for value in values if not is_object_id(value)]


def strip_non_digits(value: object) -> str:
    """Remove every non-digit character from ``value``."""

    if value is None:
        return ""
    return NON_DIGIT_RE.sub("", str(value))


def has_email_shape(value: str) -> bool:
    """Return ``True`` when ``value`` looks like a single-``@`` address with a dotted domain."""

    return bool(EMAIL_SHAPE_RE.match(value.strip()))
