"""The single POST endpoint behind the remote store."""

import json
from typing import Any, Optional

import structlog
from fastapi import APIRouter, Request
from pydantic import BaseModel

from clinaudit.db.repository import AuditRowRepository
from clinaudit.store.remote import ACTION_LIST, ACTION_REPLACE_ALL

logger = structlog.get_logger()

router = APIRouter()


class Envelope(BaseModel):
    """Response envelope shared by every action."""

    ok: bool
    items: Optional[list[Any]] = None
    error: Optional[str] = None


def _fail(error: str) -> Envelope:
    logger.warning("exec_rejected", error=error)
    return Envelope(ok=False, error=error)


def handle_action(
    repository: AuditRowRepository, action: Any, payload: Any
) -> Envelope:
    """Dispatch one action against the repository."""
    if action == ACTION_LIST:
        return Envelope(ok=True, items=repository.list_items())

    if action == ACTION_REPLACE_ALL:
        items = payload.get("items") if isinstance(payload, dict) else None
        if not isinstance(items, list):
            return _fail("payload.items must be an array")
        repository.replace_all(items)
        return Envelope(ok=True)

    return _fail(f"Unknown action: {action}")


@router.post(
    "/exec",
    response_model=Envelope,
    response_model_exclude_none=True,
)
async def exec_action(request: Request) -> Envelope:
    """Run ``list`` or ``replace_all``.

    The body is read as text whatever its content type. Failures are
    reported in the envelope with HTTP 200.
    """
    body = await request.body()
    try:
        data = json.loads(body or b"null")
    except (json.JSONDecodeError, UnicodeDecodeError):
        return _fail("Request body is not valid JSON")

    if not isinstance(data, dict):
        return _fail("Request body must be a JSON object")

    try:
        return handle_action(
            AuditRowRepository(), data.get("action"), data.get("payload")
        )
    except Exception as e:
        logger.error("exec_failed", action=data.get("action"), error=str(e))
        return Envelope(ok=False, error=str(e))
