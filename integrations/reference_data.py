"""Read-only reference lists (branches, products, clinical tags) for the wizard.

The wizard never mutates these lists; it uses them to populate selection
widgets and to show labels for identifiers already stored on a lead.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterable, Mapping, Protocol, Sequence

from core.codec import extract_reference_id
from core.errors import CrmApiError

if TYPE_CHECKING:  # pragma: no cover - typing-only import path
    from integrations.crm_api import CrmApiClient

logger = logging.getLogger(__name__)

# Offered when the backend has no active health issues configured.
FALLBACK_CLINICAL_TAGS: tuple[str, ...] = (
    "Diabetes Management",
    "Digestive Disorders",
    "Stress and Anxiety",
    "Skin Problems",
    "Joint Pain and Arthritis",
)


@dataclass(frozen=True)
class ReferenceItem:
    id: str
    label: str


class ReferenceDataProvider(Protocol):
    def branches(self) -> Sequence[ReferenceItem]: ...

    def products(self) -> Sequence[ReferenceItem]: ...

    def clinical_tags(self) -> Sequence[ReferenceItem]: ...


def coerce_items(raw: object, *, label_keys: Sequence[str]) -> tuple[ReferenceItem, ...]:
    """Convert backend list entries into :class:`ReferenceItem` values.

    Entries without an identifier are skipped; a missing label falls back to the
    identifier. Plain strings become items whose id and label are the string.
    """

    if not isinstance(raw, Iterable) or isinstance(raw, (str, bytes, Mapping)):
        return ()
    items: list[ReferenceItem] = []
    seen: set[str] = set()
    for entry in raw:
        if isinstance(entry, str):
            item_id = label = entry.strip()
        elif isinstance(entry, Mapping):
            item_id = extract_reference_id(entry)
            label = ""
            for key in label_keys:
                candidate = entry.get(key)
                if isinstance(candidate, str) and candidate.strip():
                    label = candidate.strip()
                    break
            label = label or item_id
        else:
            continue
        if not item_id or item_id in seen:
            continue
        seen.add(item_id)
        items.append(ReferenceItem(id=item_id, label=label))
    return tuple(items)


def label_for(items: Sequence[ReferenceItem], item_id: str) -> str:
    """Return the label for ``item_id`` or the identifier itself when unknown."""

    for item in items:
        if item.id == item_id:
            return item.label
    return item_id


def with_fallback_tags(items: Sequence[ReferenceItem]) -> tuple[ReferenceItem, ...]:
    if items:
        return tuple(items)
    return tuple(ReferenceItem(id=tag, label=tag) for tag in FALLBACK_CLINICAL_TAGS)


@dataclass(frozen=True)
class StaticReferenceData:
    """In-memory provider, used for tests and offline demos."""

    branch_items: tuple[ReferenceItem, ...] = ()
    product_items: tuple[ReferenceItem, ...] = ()
    clinical_tag_items: tuple[ReferenceItem, ...] = field(default=())

    def branches(self) -> Sequence[ReferenceItem]:
        return self.branch_items

    def products(self) -> Sequence[ReferenceItem]:
        return self.product_items

    def clinical_tags(self) -> Sequence[ReferenceItem]:
        return with_fallback_tags(self.clinical_tag_items)


class ApiReferenceData:
    """Provider backed by the CRM REST API, cached per instance."""

    def __init__(self, client: "CrmApiClient") -> None:
        self._client = client
        self._cache: dict[str, tuple[ReferenceItem, ...]] = {}

    def _load(self, name: str, path: str, label_keys: Sequence[str]) -> tuple[ReferenceItem, ...]:
        cached = self._cache.get(name)
        if cached is not None:
            return cached
        try:
            body = self._client.get_json(path)
        except CrmApiError as error:
            logger.warning("Failed to load %s reference data: %s", name, error)
            return ()
        raw = body.get("data", body) if isinstance(body, Mapping) else body
        items = coerce_items(raw, label_keys=label_keys)
        self._cache[name] = items
        return items

    def branches(self) -> Sequence[ReferenceItem]:
        return self._load("branches", "/branches/active", ("branchName", "name", "label"))

    def products(self) -> Sequence[ReferenceItem]:
        return self._load("products", "/products/active", ("productName", "name", "label"))

    def clinical_tags(self) -> Sequence[ReferenceItem]:
        # Tags are stored on the lead by label, so the label doubles as the id.
        items = self._load("clinical_tags", "/health-issues/active", ("healthIssue", "name", "label"))
        return with_fallback_tags(tuple(ReferenceItem(id=item.label, label=item.label) for item in items))

    def clear(self) -> None:
        self._cache.clear()


__all__ = [
    "ApiReferenceData",
    "FALLBACK_CLINICAL_TAGS",
    "ReferenceDataProvider",
    "ReferenceItem",
    "StaticReferenceData",
    "coerce_items",
    "label_for",
    "with_fallback_tags",
]
