"""Audit stores: remote endpoint, local file, and in-memory."""

from typing import Optional

import structlog

from clinaudit.config import Settings, get_settings
from clinaudit.store.base import AuditStore
from clinaudit.store.local import LocalAuditStore
from clinaudit.store.memory import InMemoryAuditStore
from clinaudit.store.remote import RemoteAuditStore

logger = structlog.get_logger()


def create_store(settings: Optional[Settings] = None) -> AuditStore:
    """Create the configured audit store.

    With ``backend`` set to ``auto`` the remote store is used when an
    endpoint is configured, otherwise the local file store.
    """
    settings = settings or get_settings()
    store_settings = settings.store
    backend = store_settings.backend

    if backend == "auto":
        backend = "remote" if store_settings.endpoint else "local"

    logger.debug("store_selected", backend=backend)

    if backend == "remote":
        return RemoteAuditStore(
            endpoint=store_settings.endpoint or "",
            timeout=store_settings.timeout,
        )
    if backend == "memory":
        return InMemoryAuditStore()
    return LocalAuditStore(
        path=store_settings.local_path,
        storage_key=store_settings.storage_key,
    )


__all__ = [
    "AuditStore",
    "InMemoryAuditStore",
    "LocalAuditStore",
    "RemoteAuditStore",
    "create_store",
]
