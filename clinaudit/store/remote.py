"""Client for the remote list/replace_all endpoint."""

import json
from typing import Any, Optional

import requests
import structlog

from clinaudit.errors import StoreError
from clinaudit.models.audit import AuditRecord, records_from_dicts, records_to_dicts

logger = structlog.get_logger()

ACTION_LIST = "list"
ACTION_REPLACE_ALL = "replace_all"


class RemoteAuditStore:
    """
    Store backed by a spreadsheet script endpoint.

    Every call is a JSON POST of ``{"action": ..., "payload": ...}`` to one
    URL. The endpoint answers ``{"ok": true, "items": [...]}`` or
    ``{"ok": false, "error": "..."}``. Failures raise ``StoreError`` and are
    never retried.
    """

    def __init__(self, endpoint: str, timeout: Optional[float] = 10.0):
        """Initialize remote store.

        Args:
            endpoint: Endpoint URL (a deployed script URL ends with ``/exec``)
            timeout: Request timeout in seconds
        """
        if not endpoint:
            raise StoreError("Remote endpoint URL is not set")
        self.endpoint = endpoint
        self.timeout = timeout

        self._session = requests.Session()

    def request(self, action: str, payload: dict[str, Any]) -> dict[str, Any]:
        """Send one action and return the decoded success envelope.

        Args:
            action: ``list`` or ``replace_all``
            payload: Action payload

        Returns:
            Response envelope with ``ok`` set to true
        """
        body = json.dumps({"action": action, "payload": payload})

        try:
            # Plain string body, so no JSON content type header is sent
            response = self._session.post(
                self.endpoint, data=body, timeout=self.timeout
            )
        except requests.RequestException as e:
            logger.error("remote_request_error", action=action, error=str(e))
            raise StoreError(f"Request failed: {e}") from e

        text = response.text
        try:
            data = json.loads(text)
        except (json.JSONDecodeError, TypeError):
            data = None

        ok = isinstance(data, dict) and data.get("ok") is True
        if not response.ok or not ok:
            error = data.get("error") if isinstance(data, dict) else None
            message = error or f"Request failed ({response.status_code})"
            logger.warning(
                "remote_request_rejected",
                action=action,
                status_code=response.status_code,
                error=message,
            )
            raise StoreError(
                str(message), details={"status_code": response.status_code}
            )

        return data

    def load(self) -> list[AuditRecord]:
        """Read every audit record."""
        data = self.request(ACTION_LIST, {})
        records = records_from_dicts(data.get("items"))

        logger.debug("audits_loaded_remote", count=len(records))
        return records

    def save_all(self, records: list[AuditRecord]) -> None:
        """Replace the remote collection."""
        self.request(ACTION_REPLACE_ALL, {"items": records_to_dicts(records)})

        logger.debug("audits_saved_remote", count=len(records))

    def close(self) -> None:
        """Close the client session."""
        self._session.close()

    def __enter__(self) -> "RemoteAuditStore":
        """Context manager entry."""
        return self

    def __exit__(self, _exc_type: Any, _exc_val: Any, _exc_tb: Any) -> None:
        """Context manager exit."""
        self.close()
