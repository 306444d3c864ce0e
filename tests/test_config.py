from __future__ import annotations

from zoneinfo import ZoneInfo

import pytest
import streamlit as st

import config
from config import BranchRequirement


def test_branch_requirement_parsing() -> None:
    assert config.normalise_branch_requirement("BLOCK") is BranchRequirement.BLOCK
    assert config.normalise_branch_requirement(" off ") is BranchRequirement.OFF
    assert config.normalise_branch_requirement(None) is BranchRequirement.WARN
    assert config.normalise_branch_requirement("") is BranchRequirement.WARN


def test_unknown_branch_requirement_warns() -> None:
    with pytest.warns(RuntimeWarning):
        assert config.normalise_branch_requirement("sometimes") is BranchRequirement.WARN


def test_parse_role_list() -> None:
    assert config.parse_role_list("Accounts_Manager, admin ,") == frozenset({"accounts_manager", "admin"})
    assert config.parse_role_list(None) == frozenset({"accounts_manager"})
    assert config.parse_role_list("") == frozenset()


def test_resolve_timezone() -> None:
    assert config.resolve_timezone("Asia/Kolkata") == ZoneInfo("Asia/Kolkata")
    assert config.resolve_timezone(None) == ZoneInfo("UTC")
    with pytest.warns(RuntimeWarning):
        assert config.resolve_timezone("Nowhere/Special") == ZoneInfo("UTC")


def test_positive_int_parsing() -> None:
    assert config._parse_positive_int_env("12", env_var="LEAD_PHONE_DIGITS", default=10) == 12
    assert config._parse_positive_int_env("0", env_var="LEAD_PHONE_DIGITS", default=10) == 10
    assert config._parse_positive_int_env(None, env_var="LEAD_PHONE_DIGITS", default=10) == 10
    with pytest.warns(RuntimeWarning):
        assert config._parse_positive_int_env("ten", env_var="LEAD_PHONE_DIGITS", default=10) == 10


def test_positive_float_parsing() -> None:
    assert config._parse_positive_float_env("2.5", env_var="CRM_API_TIMEOUT", default=15.0) == 2.5
    assert config._parse_positive_float_env("-1", env_var="CRM_API_TIMEOUT", default=15.0) == 15.0
    with pytest.warns(RuntimeWarning):
        assert config._parse_positive_float_env("soon", env_var="CRM_API_TIMEOUT", default=15.0) == 15.0


def test_crm_api_token_prefers_secrets(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(st, "secrets", {"crm": {"CRM_API_TOKEN": " from-secrets "}}, raising=False)
    monkeypatch.setenv("CRM_API_TOKEN", "from-env")

    assert config.get_crm_api_token() == "from-secrets"


def test_crm_api_token_falls_back_to_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(st, "secrets", {}, raising=False)
    monkeypatch.setenv("CRM_API_TOKEN", "from-env")

    assert config.get_crm_api_token() == "from-env"


def test_crm_api_token_missing(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(st, "secrets", {}, raising=False)
    monkeypatch.delenv("CRM_API_TOKEN", raising=False)

    assert config.get_crm_api_token() == ""
