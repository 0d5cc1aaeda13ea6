"""
Centralized storage configuration for the upload webhooks.

Intent:
    Provide a single source of truth for the Supabase endpoint, key, bucket
    and folder used by every webhook entry point. Values are read once at
    process start and kept in an immutable settings object.

Behavior:
    - load_storage_settings() reads SUPABASE_URL, SUPABASE_KEY, BUCKET_NAME
      and FOLDER_NAME; any missing or blank value raises StorageConfigError
      naming every absent variable.
    - Optional knobs (cache directive, strict base64, orphan cleanup) fall back
      to conservative defaults.

Permissions:
    Pure configuration; no external calls or privileges required.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

CACHE_CONTROL_SECONDS_DEFAULT = 3600
# One week keeps the directive within what CDNs honour for public objects.
CACHE_CONTROL_SECONDS_MAX = 7 * 24 * 60 * 60

REQUIRED_ENV_VARS = ("SUPABASE_URL", "SUPABASE_KEY", "BUCKET_NAME", "FOLDER_NAME")


class StorageConfigError(RuntimeError):
    """Raised when mandatory storage configuration is absent."""

    def __init__(self, missing: list[str]):
        self.missing = list(missing)
        super().__init__(f"missing storage configuration: {', '.join(self.missing)}")


@dataclass(frozen=True, slots=True)
class StorageSettings:
    """Immutable process-wide storage settings."""

    supabase_url: str
    supabase_key: str
    bucket_name: str
    folder_name: str
    cache_control_seconds: int = CACHE_CONTROL_SECONDS_DEFAULT
    strict_base64: bool = False
    cleanup_orphans: bool = False

    def masked_key(self) -> str:
        key = self.supabase_key
        return (key[:6] + "…" + key[-4:]) if len(key) > 12 else "***"


def _read(env: Mapping[str, str], name: str) -> str:
    return (env.get(name) or "").strip()


def _env_flag(env: Mapping[str, str], name: str, default: str = "false") -> bool:
    return (env.get(name, default) or "").strip().lower() == "true"


def _parse_int_env(env: Mapping[str, str], name: str, default: int, *, contract_max: int | None = None) -> int:
    raw = _read(env, name)
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    if value <= 0:
        return default
    if isinstance(contract_max, int) and contract_max > 0:
        value = min(value, contract_max)
    return value


def load_storage_settings(env: Mapping[str, str] | None = None) -> StorageSettings:
    """Build StorageSettings from the environment or raise StorageConfigError.

    Env:
        SUPABASE_URL, SUPABASE_KEY, BUCKET_NAME, FOLDER_NAME – required.
        STORAGE_CACHE_CONTROL_SECONDS – optional, default 3600, clamped to a week.
        STRICT_BASE64_VALIDATION – optional, "true" rejects malformed base64.
        CLEANUP_ORPHANED_UPLOADS – optional, "true" deletes objects whose public
        URL could not be resolved.
    """
    source = os.environ if env is None else env
    missing = [name for name in REQUIRED_ENV_VARS if not _read(source, name)]
    if missing:
        raise StorageConfigError(missing)
    return StorageSettings(
        supabase_url=_read(source, "SUPABASE_URL"),
        supabase_key=_read(source, "SUPABASE_KEY"),
        bucket_name=_read(source, "BUCKET_NAME"),
        folder_name=_read(source, "FOLDER_NAME"),
        cache_control_seconds=_parse_int_env(
            source,
            "STORAGE_CACHE_CONTROL_SECONDS",
            CACHE_CONTROL_SECONDS_DEFAULT,
            contract_max=CACHE_CONTROL_SECONDS_MAX,
        ),
        strict_base64=_env_flag(source, "STRICT_BASE64_VALIDATION"),
        cleanup_orphans=_env_flag(source, "CLEANUP_ORPHANED_UPLOADS"),
    )


__all__ = [
    "CACHE_CONTROL_SECONDS_DEFAULT",
    "REQUIRED_ENV_VARS",
    "StorageConfigError",
    "StorageSettings",
    "load_storage_settings",
]
