"""
Shared helper for wiring the Supabase-backed storage adapter.

Why:
    App startup may occur before Supabase is reachable locally, leaving the
    storage adapter unset. This module provides an idempotent helper that is
    used at startup and lazily from the webhook routes to (re)attempt wiring.

Security:
    Uses SUPABASE_URL and SUPABASE_KEY from the startup settings. The helper
    only wires server-side adapters; no secrets are exposed to clients.
"""
from __future__ import annotations

import logging
import os
from typing import Any
from urllib.parse import urlparse

from backend.storage.config import StorageSettings
from backend.storage.supabase_adapter import SupabaseStorageAdapter
from backend.web.routes import webhooks as _webhooks

logger = logging.getLogger("webhooks.web")


def _is_local_host(url: str) -> bool:
    host = (urlparse(url).hostname or "").lower()
    return host in {"127.0.0.1", "localhost"}


def _storage3_client(settings: StorageSettings) -> Any | None:
    """Build a storage3 client directly from the key.

    Compatible with local `supabase start` where keys are not JWTs and the
    official client refuses them.
    """
    force = (os.getenv("SUPABASE_FALLBACK_STORAGE3", "false") or "").strip().lower() == "true"
    if not force and not _is_local_host(settings.supabase_url):
        return None
    from storage3._sync.client import SyncStorageClient  # type: ignore

    key = settings.supabase_key
    storage_url = f"{settings.supabase_url.rstrip('/')}/storage/v1"
    headers = {"Authorization": f"Bearer {key}", "apikey": key}
    return SyncStorageClient(storage_url, headers)  # type: ignore[arg-type]


def wire_supabase_adapter(settings: StorageSettings) -> bool:
    """Attempt to wire the Supabase storage adapter into the webhook routes.

    Behavior:
        - Returns True when wiring succeeds (adapter injected).
        - Returns False when neither client can be built (keeps Null adapter,
          so uploads fail with a storage error until a later attempt succeeds).
        - Safe and idempotent to call multiple times.

    Logging:
        - On success, logs an info message.
        - On failure, logs a warning including exception class and message.
    """
    client = None
    try:
        from supabase import create_client  # type: ignore

        client = create_client(settings.supabase_url, settings.supabase_key)
    except Exception as exc:
        logger.warning("Supabase client unavailable: %s: %s", exc.__class__.__name__, str(exc))

    if client is None:
        try:
            client = _storage3_client(settings)
        except Exception as exc:
            logger.warning("storage3 client unavailable: %s: %s", exc.__class__.__name__, str(exc))
            client = None
        if client is None:
            return False
        logger.info("Falling back to storage3 client for %s", settings.supabase_url)

    _webhooks.set_storage_adapter(SupabaseStorageAdapter(client))
    logger.info("Storage adapter wired: Supabase bucket=%s", settings.bucket_name)
    return True


__all__ = ["wire_supabase_adapter"]
