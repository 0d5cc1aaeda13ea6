"""
Supabase-backed storage adapter for webhook uploads.

This adapter implements ObjectStoragePort using a provided Supabase client.
It is duck-typed so tests can pass simple fakes. The client is expected to
expose `.storage.from_(bucket)` (supabase) or `.from_(bucket)` (storage3)
which returns an object offering:

- upload(path, file, file_options) -> Any (raises on failure)
- get_public_url(path) -> str | { publicUrl | publicURL | data }
- remove([path]) -> Any

Security:
    The bucket must be public for the returned URLs to be reachable. The key
    used to build the client never leaves the server.
"""
from __future__ import annotations

from typing import Any, Dict

from .ports import ObjectStoragePort


class SupabaseStorageAdapter(ObjectStoragePort):
    """Storage adapter using a supabase client for Storage operations."""

    def __init__(self, client: Any):
        self._client = client

    # --- Helpers -----------------------------------------------------------------

    def _bucket(self, bucket: str) -> Any:
        """Return a bucket proxy from either supabase client or storage3 client.

        Supports two client shapes:
        - supabase.create_client(...): expose `.storage.from_(bucket)`
        - storage3 SyncStorageClient: expose `.from_(bucket)` directly
        """
        c = self._client
        storage = getattr(c, "storage", None)
        if storage is not None and hasattr(storage, "from_"):
            return storage.from_(bucket)
        if hasattr(c, "from_"):
            return c.from_(bucket)  # type: ignore[attr-defined]
        raise RuntimeError("invalid_supabase_client")

    @staticmethod
    def _relative_key(key: str) -> str:
        # Keys are already bucket-relative; a folder may share the bucket name.
        return key.lstrip("/")

    @staticmethod
    def _first_key(d: Dict[str, Any], *keys: str) -> Any:
        for k in keys:
            if k in d and d[k] is not None:
                return d[k]
        return None

    # --- Protocol methods --------------------------------------------------------

    def upload_object(
        self,
        *,
        bucket: str,
        key: str,
        body: bytes,
        content_type: str,
        cache_control_seconds: int,
        upsert: bool = False,
    ) -> None:
        """Upload a binary object to Supabase Storage.

        Behavior:
            - Sends the bucket-relative key as given, minus any leading slash.
            - Sends content-type, cache-control and the upsert toggle as file
              options; upsert "false" makes the backend reject an existing key.

        Raises:
            Propagates client exceptions (e.g. storage3 StorageException). A
            legacy dict response carrying an `error` entry is raised as
            RuntimeError.
        """
        b = self._bucket(bucket)
        norm_key = self._relative_key(key)
        opts = {
            "content-type": content_type,
            "cache-control": str(int(cache_control_seconds)),
            "upsert": "true" if upsert else "false",
        }
        res = b.upload(norm_key, body, opts)
        if isinstance(res, dict) and res.get("error"):
            err = res["error"]
            message = err.get("message") if isinstance(err, dict) else err
            raise RuntimeError(str(message or "upload_failed"))

    def get_public_url(self, *, bucket: str, key: str) -> str:
        """Return the public URL for `key`.

        Newer clients return a plain string; older ones (and the JS-shaped
        responses some proxies emit) wrap it in a dict, optionally under
        `data`.
        """
        b = self._bucket(bucket)
        norm_key = self._relative_key(key)
        res = b.get_public_url(norm_key)
        url = None
        if isinstance(res, str):
            url = res
        elif isinstance(res, dict):
            url = self._first_key(res, "publicUrl", "publicURL", "public_url")
            data = res.get("data")
            if url is None and isinstance(data, dict):
                url = self._first_key(data, "publicUrl", "publicURL", "public_url")
        if not url:
            raise RuntimeError("failed_to_resolve_public_url")
        return str(url)

    def delete_object(self, *, bucket: str, key: str) -> None:
        b = self._bucket(bucket)
        b.remove([self._relative_key(key)])


__all__ = ["SupabaseStorageAdapter"]
