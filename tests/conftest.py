from pathlib import Path
import sys
from dataclasses import dataclass
from typing import Any, Callable

import streamlit as st

import pytest


ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import config
from config import BranchRequirement
from integrations.crm_api import SubmissionOutcome
from integrations.reference_data import ReferenceItem, StaticReferenceData
from models.lead import LeadFormState
from wizard.validation import ValidationPolicy

VALID_PRODUCT_ID = "65a1b2c3d4e5f60718293a4b"
OTHER_PRODUCT_ID = "65a1b2c3d4e5f60718293a4c"
BRANCH_ID = "64f0c0ffee0000000000beef"


@pytest.fixture(autouse=True)
def _deterministic_config(monkeypatch: pytest.MonkeyPatch) -> None:
    """Pin config values that tests rely on regardless of the local environment."""

    monkeypatch.setattr(config, "LEAD_BRANCH_REQUIREMENT", BranchRequirement.WARN, raising=False)
    monkeypatch.setattr(config, "LEAD_PHONE_DIGITS", 10, raising=False)
    monkeypatch.setattr(config, "LEAD_DEFAULT_COUNTRY", "India", raising=False)
    monkeypatch.setattr(config, "ADMIN_DEBUG", False, raising=False)
    monkeypatch.setattr(config, "LEAD_RESTRICTED_ROLES", frozenset({"accounts_manager"}), raising=False)
    yield


@dataclass
class _SessionDict(dict[str, object]):
    """Lightweight replacement for ``st.session_state`` during tests."""

    def clear(self) -> None:  # type: ignore[override]
        super().clear()


@pytest.fixture(autouse=True)
def _stub_streamlit_session_state(monkeypatch: pytest.MonkeyPatch) -> None:
    """Replace Streamlit's runtime-bound session state with a plain dictionary."""

    session_state = _SessionDict()
    monkeypatch.setattr(st, "session_state", session_state, raising=False)
    yield


class RecordingSubmit:
    """Submit function double that records payloads and returns a canned outcome."""

    def __init__(self, outcome: SubmissionOutcome | None = None) -> None:
        self.outcome = outcome or SubmissionOutcome(ok=True, data={"_id": VALID_PRODUCT_ID})
        self.payloads: list[dict[str, Any]] = []
        self.on_call: Callable[[], None] | None = None

    def __call__(self, payload: dict[str, Any]) -> SubmissionOutcome:
        self.payloads.append(payload)
        if self.on_call is not None:
            self.on_call()
        return self.outcome


@pytest.fixture
def reference_data() -> StaticReferenceData:
    return StaticReferenceData(
        branch_items=(ReferenceItem(id=BRANCH_ID, label="Main Branch"),),
        product_items=(
            ReferenceItem(id=VALID_PRODUCT_ID, label="Herbal Tea"),
            ReferenceItem(id=OTHER_PRODUCT_ID, label="Joint Oil"),
        ),
    )


@pytest.fixture
def warn_policy() -> ValidationPolicy:
    return ValidationPolicy(branch_requirement=BranchRequirement.WARN, phone_digits=10)


@pytest.fixture
def valid_contact_state() -> LeadFormState:
    state = LeadFormState()
    state.contact.name = "Asha Rao"
    state.contact.phone = "98765 43210"
    return state


@pytest.fixture
def submit_recorder() -> RecordingSubmit:
    return RecordingSubmit()
