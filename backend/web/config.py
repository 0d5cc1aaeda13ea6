"""
Configuration and startup checks for the upload webhooks.

Why: Serving requests with a missing bucket or key would fail every call at
runtime. This module provides a single guard that refuses to start instead.

Permissions: The caller needs no special privileges. The function simply reads
environment variables and raises `SystemExit` on fatal misconfiguration.
"""
from __future__ import annotations

import logging
import os
from typing import Mapping
from urllib.parse import urlparse

from backend.storage.config import StorageConfigError, StorageSettings, load_storage_settings

logger = logging.getLogger("webhooks.web")


def ensure_config_on_startup(env: Mapping[str, str] | None = None) -> StorageSettings:
    """Load storage settings or abort process startup.

    Checks:
    - SUPABASE_URL, SUPABASE_KEY, BUCKET_NAME and FOLDER_NAME are set and
      non-blank.
    - SUPABASE_URL is an absolute http(s) URL.

    Returns the immutable settings used for the lifetime of the process.
    """
    try:
        settings = load_storage_settings(os.environ if env is None else env)
    except StorageConfigError as exc:
        logger.error("Environment variables not configured: %s", ", ".join(exc.missing))
        raise SystemExit(
            f"Refusing to start: environment variables not configured ({', '.join(exc.missing)})."
        ) from exc

    parsed = urlparse(settings.supabase_url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        logger.error("SUPABASE_URL is not an http(s) URL: %s", settings.supabase_url)
        raise SystemExit("Refusing to start: SUPABASE_URL must be an absolute http(s) URL.")

    logger.info(
        "Storage configured: url=%s bucket=%s folder=%s key=%s",
        settings.supabase_url,
        settings.bucket_name,
        settings.folder_name,
        settings.masked_key(),
    )
    return settings


__all__ = ["ensure_config_on_startup"]
