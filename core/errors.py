"""Custom exception types for the CRM service layer."""

from __future__ import annotations


class LeadWizardError(Exception):
    """Base exception for lead wizard related issues."""


class CrmApiError(LeadWizardError):
    """Raised when the CRM backend rejects a request or cannot be reached."""

    def __init__(self, message: str, *, status_code: int | None = None, payload: object | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload


class InvalidRecordIdError(LeadWizardError):
    """Raised when an update targets an identifier the backend cannot accept."""

    def __init__(self, record_id: object) -> None:
        super().__init__(f"Invalid lead ID format: {record_id!r}")
        self.record_id = record_id
