"""External collaborators of the lead wizard (CRM API, reference data, assignment)."""
