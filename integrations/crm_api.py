"""Thin REST client for the CRM backend and the wizard's submit function."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping

import requests
from requests import Response

import config
from core.errors import CrmApiError, InvalidRecordIdError
from core.validators import is_object_id

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SubmissionOutcome:
    """Result of handing a payload to the backend.

    ``reason`` carries the backend message verbatim when ``ok`` is false.
    """

    ok: bool
    reason: str = ""
    status_code: int | None = None
    data: Mapping[str, Any] = field(default_factory=dict)


SubmitFn = Callable[[dict[str, Any]], SubmissionOutcome]


def _error_message(resp: Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        body = None
    if isinstance(body, Mapping):
        for key in ("message", "error", "detail"):
            value = body.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()
    text = (resp.text or "").strip()
    return text or f"HTTP {resp.status_code}"


class CrmApiClient:
    """Minimal JSON client; retries and token refresh are handled upstream."""

    def __init__(
        self,
        base_url: str | None = None,
        *,
        token: str | None = None,
        timeout: float | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self._base_url = (base_url or config.CRM_API_BASE_URL).rstrip("/")
        self._token = token if token is not None else config.get_crm_api_token()
        self._timeout = timeout or config.CRM_API_TIMEOUT
        self._session = session or requests.Session()

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    def request(self, method: str, path: str, *, json: Mapping[str, Any] | None = None) -> Any:
        """Send a request and return the decoded JSON body.

        Raises:
            CrmApiError: On transport failures or non-2xx responses.
        """

        url = f"{self._base_url}/{path.lstrip('/')}"
        try:
            resp: Response = self._session.request(
                method,
                url,
                json=json,
                headers=self._headers(),
                timeout=self._timeout,
            )
        except requests.RequestException as exc:
            logger.warning("%s %s failed: %s", method, url, exc)
            raise CrmApiError(f"Could not reach the CRM backend: {exc}") from exc
        if resp.status_code >= 400:
            message = _error_message(resp)
            logger.warning("%s %s returned %s: %s", method, url, resp.status_code, message)
            raise CrmApiError(message, status_code=resp.status_code, payload=resp.text)
        if not resp.content:
            return {}
        try:
            return resp.json()
        except ValueError as exc:
            raise CrmApiError("CRM backend returned invalid JSON", status_code=resp.status_code) from exc

    def get_json(self, path: str) -> Any:
        return self.request("GET", path)

    def get_lead(self, record_id: str) -> dict[str, Any]:
        """Fetch a lead record for editing, unwrapping the ``data`` envelope."""

        if not is_object_id(record_id):
            raise InvalidRecordIdError(record_id)
        body = self.request("GET", f"/leads/{record_id}")
        if isinstance(body, Mapping) and isinstance(body.get("data"), Mapping):
            return dict(body["data"])
        if isinstance(body, Mapping):
            return dict(body)
        raise CrmApiError("CRM backend returned an unexpected lead payload")

    def create_lead(self, payload: Mapping[str, Any]) -> Any:
        return self.request("POST", "/leads", json=payload)

    def update_lead(self, record_id: str, payload: Mapping[str, Any]) -> Any:
        if not is_object_id(record_id):
            raise InvalidRecordIdError(record_id)
        return self.request("PUT", f"/leads/{record_id}", json=payload)


def build_submit_function(client: CrmApiClient) -> SubmitFn:
    """Return a submit function that creates or updates depending on ``recordId``."""

    def _submit(payload: dict[str, Any]) -> SubmissionOutcome:
        record_id = payload.get("recordId")
        try:
            if record_id:
                body = client.update_lead(str(record_id), payload)
            else:
                body = client.create_lead(payload)
        except InvalidRecordIdError as error:
            logger.error("Refusing to update lead: %s", error)
            return SubmissionOutcome(ok=False, reason=str(error))
        except CrmApiError as error:
            return SubmissionOutcome(ok=False, reason=str(error), status_code=error.status_code)
        data = body if isinstance(body, Mapping) else {}
        return SubmissionOutcome(ok=True, data=data)

    return _submit


__all__ = [
    "CrmApiClient",
    "SubmissionOutcome",
    "SubmitFn",
    "build_submit_function",
]
