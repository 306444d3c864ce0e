from __future__ import annotations

import logging
from typing import Any

from integrations.reference_data import StaticReferenceData
from models.lead import LeadFormState
from utils.logging_context import current_context, configure_logging, log_context, set_session_id
from wizard.navigation.router import WizardController
from wizard.validation import ValidationPolicy


def test_log_context_overrides_and_restores() -> None:
    set_session_id("session-123")

    with log_context(wizard_step="contact", lead_id="lead-9"):
        assert current_context() == {"session_id": "session-123", "wizard_step": "contact", "lead_id": "lead-9"}

    assert current_context()["lead_id"] != "lead-9"
    assert current_context()["session_id"] == "session-123"


def test_navigation_logging_includes_context(caplog: Any, submit_recorder: Any) -> None:
    configure_logging()
    set_session_id("session-abc")
    caplog.set_level(logging.INFO, logger="wizard.navigation.router")
    controller = WizardController(
        form_state=LeadFormState(),
        submit=submit_recorder,
        reference_data=StaticReferenceData(),
        validation_policy=ValidationPolicy(),
        session_state={},
    )

    controller.submit()

    records = [record for record in caplog.records if "Submit blocked" in record.message]
    assert records, "Expected a log entry for the blocked submit"
    record = records[0]
    assert record.session_id == "session-abc"
    assert record.wizard_step == "contact"
