"""Shared regular expression patterns used across validation and codecs."""

from __future__ import annotations

import re

__all__ = [
    "CLOCK_TIME_RE",
    "EMAIL_SHAPE_RE",
    "NON_DIGIT_RE",
    "OBJECT_ID_RE",
]


# Backend identifiers are 24 hexadecimal characters (MongoDB ObjectId).
OBJECT_ID_RE = re.compile(r"^[0-9a-fA-F]{24}$")

# Loose address shape: one "@", no whitespace, at least one dot in the domain.
EMAIL_SHAPE_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

# ASCII only: the backend expects 0-9, not other Unicode decimal digits.
NON_DIGIT_RE = re.compile(r"[^0-9]")

# "hh:mm" as typed into the reminder time field; the hour is validated later.
CLOCK_TIME_RE = re.compile(r"^\s*(?P<hour>\d{1,2})\s*:\s*(?P<minute>\d{2})\s*$")
