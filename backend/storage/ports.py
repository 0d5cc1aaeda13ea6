"""
Storage ports used by the upload webhooks.

Keep these small and framework-agnostic so tests can supply simple fakes.
"""
from __future__ import annotations

from typing import Protocol


class ObjectStoragePort(Protocol):
    """Minimal interface to write objects to a bucket and publish them.

    Intent:
        Allow the publisher to persist payloads without depending on a
        specific cloud SDK.

    Permissions:
        Implementations hold the backend credentials; callers only pass
        bucket/key pairs.
    """

    def upload_object(
        self,
        *,
        bucket: str,
        key: str,
        body: bytes,
        content_type: str,
        cache_control_seconds: int,
        upsert: bool = False,
    ) -> None: ...

    def get_public_url(self, *, bucket: str, key: str) -> str: ...

    def delete_object(self, *, bucket: str, key: str) -> None: ...


class NullStorageAdapter:
    """Fallback adapter that signals the storage backend is not configured."""

    def upload_object(
        self,
        *,
        bucket: str,
        key: str,
        body: bytes,
        content_type: str,
        cache_control_seconds: int,
        upsert: bool = False,
    ) -> None:  # noqa: D401
        raise RuntimeError("storage_adapter_not_configured")

    def get_public_url(self, *, bucket: str, key: str) -> str:  # noqa: D401
        raise RuntimeError("storage_adapter_not_configured")

    def delete_object(self, *, bucket: str, key: str) -> None:  # noqa: D401
        raise RuntimeError("storage_adapter_not_configured")


__all__ = ["ObjectStoragePort", "NullStorageAdapter"]
