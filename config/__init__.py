"""Central configuration for the lead intake wizard.

Values come from the environment (optionally seeded by a ``.env`` file) and,
for credentials, from ``st.secrets`` first. Invalid values fall back to the
documented defaults and emit a :class:`RuntimeWarning` instead of failing the
app at import time.
"""

from __future__ import annotations

import logging
import os
import warnings
from enum import StrEnum
from typing import Mapping
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import streamlit as st
from dotenv import load_dotenv

load_dotenv()


logger = logging.getLogger(__name__)


_TRUTHY_ENV_VALUES: tuple[str, ...] = ("1", "true", "yes", "on")

DEFAULT_RESTRICTED_ROLES: tuple[str, ...] = ("accounts_manager",)
DEFAULT_COUNTRY_FALLBACK = "India"
DEFAULT_TIMEZONE_NAME = "UTC"
DEFAULT_PHONE_DIGITS = 10
DEFAULT_API_TIMEOUT = 15.0


class BranchRequirement(StrEnum):
    """Policy applied to a missing branch assignment on the final step."""

    OFF = "off"
    WARN = "warn"
    BLOCK = "block"


def _is_truthy_flag(value: str | None) -> bool:
    """Return ``True`` when ``value`` matches a truthy environment token."""

    if value is None:
        return False
    return value.strip().lower() in _TRUTHY_ENV_VALUES


def _parse_positive_int_env(value: object | None, *, env_var: str, default: int) -> int:
    """Return a positive integer parsed from ``value`` or ``default``."""

    if value is None:
        return default
    if isinstance(value, str):
        candidate = value.strip()
        if not candidate:
            return default
        try:
            parsed = int(candidate)
        except ValueError:
            warnings.warn(
                "%s is not a number; ignoring %s" % (candidate, env_var),
                RuntimeWarning,
            )
            return default
    elif isinstance(value, int):
        parsed = value
    else:
        warnings.warn(
            "Unsupported %s value '%s'; using %s." % (env_var, value, default),
            RuntimeWarning,
        )
        return default
    if parsed <= 0:
        return default
    return parsed


def _parse_positive_float_env(value: str | None, *, env_var: str, default: float) -> float:
    if value is None or not value.strip():
        return default
    try:
        parsed = float(value.strip())
    except ValueError:
        warnings.warn(
            "%s is not a number; ignoring %s" % (value, env_var),
            RuntimeWarning,
        )
        return default
    return parsed if parsed > 0 else default


def normalise_branch_requirement(
    value: object | None,
    *,
    default: BranchRequirement = BranchRequirement.WARN,
) -> BranchRequirement:
    """Return a supported branch requirement policy or ``default``."""

    if isinstance(value, BranchRequirement):
        return value
    if not isinstance(value, str):
        return default
    candidate = value.strip().lower()
    if not candidate:
        return default
    try:
        return BranchRequirement(candidate)
    except ValueError:
        warnings.warn(
            "Unsupported LEAD_BRANCH_REQUIREMENT '%s'; falling back to '%s'." % (candidate, default.value),
            RuntimeWarning,
        )
        return default


def parse_role_list(value: str | None, *, default: tuple[str, ...] = DEFAULT_RESTRICTED_ROLES) -> frozenset[str]:
    """Split a comma separated role list into a normalised set."""

    if value is None:
        return frozenset(default)
    roles = {token.strip().lower() for token in value.split(",") if token.strip()}
    return frozenset(roles)


def resolve_timezone(name: str | None) -> ZoneInfo:
    """Return the :class:`ZoneInfo` for ``name``, defaulting to UTC."""

    candidate = (name or "").strip() or DEFAULT_TIMEZONE_NAME
    try:
        return ZoneInfo(candidate)
    except (ZoneInfoNotFoundError, ValueError):
        warnings.warn(
            "Unknown REMINDER_TIMEZONE '%s'; falling back to UTC." % candidate,
            RuntimeWarning,
        )
        return ZoneInfo(DEFAULT_TIMEZONE_NAME)


CRM_API_BASE_URL = os.getenv("CRM_API_BASE_URL", "http://localhost:5000/api").rstrip("/")
CRM_API_TIMEOUT = _parse_positive_float_env(
    os.getenv("CRM_API_TIMEOUT"),
    env_var="CRM_API_TIMEOUT",
    default=DEFAULT_API_TIMEOUT,
)
LEAD_BRANCH_REQUIREMENT = normalise_branch_requirement(os.getenv("LEAD_BRANCH_REQUIREMENT"))
LEAD_RESTRICTED_ROLES = parse_role_list(os.getenv("LEAD_RESTRICTED_ROLES"))
REMINDER_TIMEZONE = resolve_timezone(os.getenv("REMINDER_TIMEZONE"))
LEAD_PHONE_DIGITS = _parse_positive_int_env(
    os.getenv("LEAD_PHONE_DIGITS"),
    env_var="LEAD_PHONE_DIGITS",
    default=DEFAULT_PHONE_DIGITS,
)
LEAD_DEFAULT_COUNTRY = os.getenv("LEAD_DEFAULT_COUNTRY", DEFAULT_COUNTRY_FALLBACK).strip() or DEFAULT_COUNTRY_FALLBACK
ADMIN_DEBUG = _is_truthy_flag(os.getenv("ADMIN_DEBUG"))

_missing_token_logged = False


def _coerce_secret_value(value: object | None) -> str:
    if isinstance(value, str):
        return value.strip()
    return ""


def get_crm_api_token() -> str:
    """Return the CRM API bearer token from secrets or environment variables."""

    global _missing_token_logged

    # 1. Streamlit secrets (top-level key)
    try:
        direct_secret = st.secrets["CRM_API_TOKEN"]
    except Exception:
        direct_secret = None
    token = _coerce_secret_value(direct_secret)
    if token:
        _missing_token_logged = False
        return token

    # 2. Streamlit secrets (``crm`` section)
    try:
        crm_section = st.secrets["crm"]
    except Exception:
        crm_section = None
    if isinstance(crm_section, Mapping):
        section_token = _coerce_secret_value(crm_section.get("CRM_API_TOKEN"))
        if section_token:
            _missing_token_logged = False
            return section_token

    # 3. Environment variable fallback
    env_token = _coerce_secret_value(os.getenv("CRM_API_TOKEN"))
    if env_token:
        _missing_token_logged = False
        return env_token

    if not _missing_token_logged:
        logger.info("CRM_API_TOKEN not configured; requests are sent without authorization.")
        _missing_token_logged = True

    return ""


__all__ = [
    "ADMIN_DEBUG",
    "BranchRequirement",
    "CRM_API_BASE_URL",
    "CRM_API_TIMEOUT",
    "LEAD_BRANCH_REQUIREMENT",
    "LEAD_DEFAULT_COUNTRY",
    "LEAD_PHONE_DIGITS",
    "LEAD_RESTRICTED_ROLES",
    "REMINDER_TIMEZONE",
    "get_crm_api_token",
    "normalise_branch_requirement",
    "parse_role_list",
    "resolve_timezone",
]
