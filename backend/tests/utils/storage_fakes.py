from __future__ import annotations

from typing import Dict, List, Optional, Tuple

TEST_STORAGE_BASE_URL = "https://storage.example.com"


class RecordingStorage:
    """Fake object storage that records every call made through the port.

    Behaves like a bucket that refuses overwrites when `upsert` is False and
    builds deterministic public URLs. Failures can be injected per operation.
    """

    def __init__(
        self,
        *,
        upload_error: Optional[Exception] = None,
        url_error: Optional[Exception] = None,
        delete_error: Optional[Exception] = None,
        public_url: Optional[str] = None,
    ) -> None:
        self.upload_error = upload_error
        self.url_error = url_error
        self.delete_error = delete_error
        self.public_url = public_url
        self.objects: Dict[Tuple[str, str], bytes] = {}
        self.uploads: List[dict] = []
        self.url_requests: List[dict] = []
        self.deletes: List[dict] = []

    @property
    def call_count(self) -> int:
        return len(self.uploads) + len(self.url_requests) + len(self.deletes)

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
        self.uploads.append(
            {
                "bucket": bucket,
                "key": key,
                "body": body,
                "content_type": content_type,
                "cache_control_seconds": cache_control_seconds,
                "upsert": upsert,
            }
        )
        if self.upload_error is not None:
            raise self.upload_error
        if not upsert and (bucket, key) in self.objects:
            raise RuntimeError("The resource already exists")
        self.objects[(bucket, key)] = body

    def get_public_url(self, *, bucket: str, key: str) -> str:
        self.url_requests.append({"bucket": bucket, "key": key})
        if self.url_error is not None:
            raise self.url_error
        if self.public_url is not None:
            return self.public_url
        return f"{TEST_STORAGE_BASE_URL}/storage/v1/object/public/{bucket}/{key}"

    def delete_object(self, *, bucket: str, key: str) -> None:
        self.deletes.append({"bucket": bucket, "key": key})
        if self.delete_error is not None:
            raise self.delete_error
        self.objects.pop((bucket, key), None)


__all__ = ["RecordingStorage", "TEST_STORAGE_BASE_URL"]
