"""Per-session logging context for the lead wizard.

Every log record carries the Streamlit session, the active wizard step and the
lead being edited, so a single support log can be filtered per user journey.
"""

from __future__ import annotations

import contextvars
import logging
from contextlib import contextmanager
from typing import Final, Iterator, Mapping

LOG_FORMAT: Final[str] = (
    "%(asctime)s %(levelname)s [session=%(session_id)s step=%(wizard_step)s lead=%(lead_id)s] %(name)s: %(message)s"
)
_UNSET: Final[str] = "-"

_CONTEXT_VARS: Final[Mapping[str, contextvars.ContextVar[str]]] = {
    name: contextvars.ContextVar(name, default=_UNSET) for name in ("session_id", "wizard_step", "lead_id")
}
_base_record_factory = logging.getLogRecordFactory()
_factory_installed = False


def _normalise(value: object | None) -> str:
    text = "" if value is None else str(value).strip()
    return text or _UNSET


def _stamp(record: logging.LogRecord) -> None:
    for name, var in _CONTEXT_VARS.items():
        setattr(record, name, var.get())


class _ContextFilter(logging.Filter):
    """Stamp context fields onto records created before the factory was installed."""

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: D401 - logging protocol
        _stamp(record)
        return True


def _context_record_factory(*args: object, **kwargs: object) -> logging.LogRecord:
    record = _base_record_factory(*args, **kwargs)
    _stamp(record)
    return record


def configure_logging(*, level: int = logging.INFO) -> None:
    """Install the context-aware format, filter and record factory once."""

    global _factory_installed

    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=level, format=LOG_FORMAT)
    for handler in root.handlers:
        if handler.formatter is None:
            handler.setFormatter(logging.Formatter(LOG_FORMAT))
    if not any(isinstance(flt, _ContextFilter) for flt in root.filters):
        root.addFilter(_ContextFilter())
    if not _factory_installed:
        logging.setLogRecordFactory(_context_record_factory)
        _factory_installed = True


def set_session_id(session_id: str | None) -> None:
    """Bind the Streamlit session; also makes sure logging is configured."""

    configure_logging()
    _CONTEXT_VARS["session_id"].set(_normalise(session_id))


def set_wizard_step(step: str | None) -> None:
    _CONTEXT_VARS["wizard_step"].set(_normalise(step))


def set_lead_id(lead_id: str | None) -> None:
    _CONTEXT_VARS["lead_id"].set(_normalise(lead_id))


def current_context() -> dict[str, str]:
    return {name: var.get() for name, var in _CONTEXT_VARS.items()}


@contextmanager
def log_context(
    *,
    session_id: str | None = None,
    wizard_step: str | None = None,
    lead_id: str | None = None,
) -> Iterator[None]:
    """Override the given context fields for the duration of the block."""

    overrides = {"session_id": session_id, "wizard_step": wizard_step, "lead_id": lead_id}
    tokens = [
        (_CONTEXT_VARS[name], _CONTEXT_VARS[name].set(_normalise(value)))
        for name, value in overrides.items()
        if value is not None
    ]
    try:
        yield
    finally:
        for var, token in reversed(tokens):
            var.reset(token)


__all__ = [
    "LOG_FORMAT",
    "configure_logging",
    "current_context",
    "log_context",
    "set_lead_id",
    "set_session_id",
    "set_wizard_step",
]
