"""Date helper utilities shared across wizard steps and hydration."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any


def truncate_to_date(value: Any, *, fallback: date | None = None) -> str:
    """Return the ``YYYY-MM-DD`` part of ``value``.

    Full timestamps such as ``2024-05-01T10:00:00.000Z`` are cut at the ``T``.
    Values that do not start with a valid ISO date resolve to ``fallback``
    (today when omitted).
    """

    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, str):
        head = value.strip().split("T", 1)[0].split(" ", 1)[0]
        try:
            return date.fromisoformat(head).isoformat()
        except ValueError:
            pass
    return (fallback or date.today()).isoformat()


def default_date(value: Any, *, fallback: date | None = None) -> date:
    """Return a ``date`` for widgets, parsing ISO strings when possible."""

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip())
        except ValueError:
            pass
    if fallback is not None:
        return fallback
    return date.today()


__all__ = [
    "default_date",
    "truncate_to_date",
]
