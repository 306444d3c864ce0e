class UIKeys:
    """Keys for UI widgets in ``st.session_state``."""

    LEAD_DATE = "ui.lead.lead_date"
    STATUS = "ui.lead.status"
    PRIORITY = "ui.lead.priority"
    LEAD_SOURCE = "ui.lead.lead_source"
    NOTES = "ui.lead.notes"
    CONTACT_NAME = "ui.contact.name"
    CONTACT_PHONE = "ui.contact.phone"
    CONTACT_EMAIL = "ui.contact.email"
    CONTACT_AGE = "ui.contact.age"
    CONTACT_GENDER = "ui.contact.gender"
    CONTACT_MARITAL_STATUS = "ui.contact.marital_status"
    ADDRESS_STREET = "ui.address.street"
    ADDRESS_CITY = "ui.address.city"
    ADDRESS_STATE = "ui.address.state"
    ADDRESS_PIN_CODE = "ui.address.pin_code"
    ADDRESS_COUNTRY = "ui.address.country"
    CLINICAL_TAGS = "ui.clinical.tags"
    PRODUCTS = "ui.clinical.products"
    PAYMENT_TYPE = "ui.payment.type"
    PAYMENT_MODE = "ui.payment.mode"
    PAYMENT_DATE = "ui.payment.date"
    PAYMENT_NOTE = "ui.payment.note"
    BRANCH = "ui.assignment.branch"
    REMINDER_DATE = "ui.reminder.date"
    REMINDER_TIME = "ui.reminder.time"
    REMINDER_MERIDIEM = "ui.reminder.meridiem"
    REMINDER_NOTE = "ui.reminder.note"


class StateKeys:
    """Keys for data stored in ``st.session_state``."""

    SESSION_ID = "session_id"
    LEAD_FORM = "lead_form_state"
    LEAD_WIZARD = "lead_wizard_controller"
    WIZARD_MODE = "lead_wizard_mode"
    SERVER_RECORD = "lead_server_record"
    ACTOR = "actor_context"
    LAST_SUBMIT_RESULT = "lead_last_submit_result"
    DEBUG = "debug"
