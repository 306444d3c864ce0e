from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

from integrations.reference_data import ReferenceDataProvider

if TYPE_CHECKING:  # pragma: no cover - typing-only import path
    from wizard.navigation.router import WizardController


@dataclass(frozen=True)
class WizardContext:
    """Context passed to step renderer callables."""

    controller: "WizardController"
    reference_data: ReferenceDataProvider


StepRenderer = Callable[[WizardContext], None]
