"""Pydantic models for the lead intake wizard."""

from .lead import (
    Address,
    Contact,
    LeadFormState,
    LeadPriority,
    LeadStatus,
    Payment,
    Reminder,
)

__all__ = [
    "Address",
    "Contact",
    "LeadFormState",
    "LeadPriority",
    "LeadStatus",
    "Payment",
    "Reminder",
]
