"""
Upload publisher: store one webhook payload and resolve its public URL.

Intent:
    Keep the webhook use case free of HTTP details. Routes hand over the verb,
    the decoded body and the payload kind; the publisher names, uploads and
    publishes the object through an injected ObjectStoragePort.

Behavior:
    - `check_request` rejects wrong verbs and wrong-shaped payloads and never
      touches storage.
    - Keys are fresh UUID4 names; uploads never overwrite.
"""
from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

from backend.storage.config import CACHE_CONTROL_SECONDS_DEFAULT, StorageSettings
from backend.storage.keys import PathConvention, make_object_key, new_object_id
from backend.storage.ports import ObjectStoragePort

from .codecs import decode_base64_lenient, decode_base64_strict, encode_json_document
from .errors import (
    InternalError,
    InvalidPayload,
    MethodNotAllowed,
    PublicUrlResolutionFailed,
    PublishError,
    StorageUploadFailed,
)

logger = logging.getLogger("webhooks.uploads")

WRITE_METHOD = "POST"


class PayloadKind(enum.Enum):
    BASE64_IMAGE = "base64_image"
    JSON_DOCUMENT = "json_document"


CONTENT_TYPES = {
    PayloadKind.BASE64_IMAGE: "image/png",
    PayloadKind.JSON_DOCUMENT: "application/json",
}
EXTENSIONS = {
    PayloadKind.BASE64_IMAGE: ".png",
    PayloadKind.JSON_DOCUMENT: ".json",
}
# Images have always been written to the bucket root; JSON goes into the folder.
DEFAULT_PATH_CONVENTIONS = {
    PayloadKind.BASE64_IMAGE: PathConvention.FLAT_WITH_EXTENSION,
    PayloadKind.JSON_DOCUMENT: PathConvention.FOLDER_PREFIXED,
}


@dataclass(frozen=True)
class UploadRequest:
    kind: PayloadKind
    raw_payload: Any


@dataclass(frozen=True)
class StoredObjectRef:
    bucket: str
    path: str
    content_type: str
    cache_control_seconds: int


@dataclass(frozen=True)
class PublishResult:
    public_url: str
    storage_key: str


def check_request(method: str, payload: Any, kind: PayloadKind) -> None:
    """Raise MethodNotAllowed or InvalidPayload; the verb is checked first."""
    if (method or "").upper() != WRITE_METHOD:
        raise MethodNotAllowed(detail=f"method={method}")
    if kind is PayloadKind.BASE64_IMAGE:
        if not isinstance(payload, str) or not payload:
            raise InvalidPayload(detail="expected a non-empty base64 string")
    elif kind is PayloadKind.JSON_DOCUMENT:
        if not isinstance(payload, (dict, list)):
            raise InvalidPayload(detail="expected a JSON object")
    else:  # pragma: no cover - enum is exhaustive
        raise InternalError(detail=f"unknown payload kind: {kind!r}")


class UploadPublisher:
    def __init__(
        self,
        storage: ObjectStoragePort,
        *,
        bucket: str,
        folder: str,
        cache_control_seconds: int = CACHE_CONTROL_SECONDS_DEFAULT,
        path_convention: Optional[PathConvention] = None,
        strict_base64: bool = False,
        cleanup_orphans: bool = False,
        id_factory: Callable[[], str] = new_object_id,
    ) -> None:
        self._storage = storage
        self._bucket = bucket
        self._folder = folder
        self._cache_control_seconds = cache_control_seconds
        self._path_convention = path_convention
        self._strict_base64 = strict_base64
        self._cleanup_orphans = cleanup_orphans
        self._id_factory = id_factory

    @classmethod
    def from_settings(
        cls,
        storage: ObjectStoragePort,
        settings: StorageSettings,
        *,
        path_convention: Optional[PathConvention] = None,
    ) -> "UploadPublisher":
        return cls(
            storage,
            bucket=settings.bucket_name,
            folder=settings.folder_name,
            cache_control_seconds=settings.cache_control_seconds,
            path_convention=path_convention,
            strict_base64=settings.strict_base64,
            cleanup_orphans=settings.cleanup_orphans,
        )

    def publish(self, method: str, payload: Any, kind: PayloadKind) -> PublishResult:
        """Store one webhook payload and return its public URL.

        Intent:
            Single operation shared by every webhook entry point: validate the
            verb and payload, serialize, upload under a fresh key, then resolve
            the public URL for that key.

        Behavior:
            - Non-POST verbs fail with MethodNotAllowed before the payload is
              looked at; wrong-shaped payloads fail with InvalidPayload. Neither
              touches storage.
            - Upload failures raise StorageUploadFailed and the URL is never
              resolved. A failed resolution raises PublicUrlResolutionFailed;
              the uploaded object stays in the bucket unless orphan cleanup is
              enabled.
            - Anything unexpected surfaces as InternalError.
            - No retries: at most one upload per call.
        """
        check_request(method, payload, kind)
        request = UploadRequest(kind=kind, raw_payload=payload)
        try:
            body = self._serialize(request)
            ref = self._object_ref(kind)
        except PublishError:
            raise
        except Exception as exc:
            logger.error("publish preparation failed: kind=%s error=%s: %s", kind.value, exc.__class__.__name__, str(exc))
            raise InternalError(detail=str(exc)) from exc
        self._upload(ref, body)
        public_url = self._resolve_public_url(ref)
        return PublishResult(public_url=public_url, storage_key=ref.path)

    # --- Steps -------------------------------------------------------------------

    def _serialize(self, request: UploadRequest) -> bytes:
        if request.kind is PayloadKind.JSON_DOCUMENT:
            return encode_json_document(request.raw_payload)
        if self._strict_base64:
            try:
                return decode_base64_strict(request.raw_payload)
            except ValueError as exc:
                raise InvalidPayload(detail=str(exc)) from exc
        return decode_base64_lenient(request.raw_payload)

    def _object_ref(self, kind: PayloadKind) -> StoredObjectRef:
        convention = self._path_convention or DEFAULT_PATH_CONVENTIONS[kind]
        key = make_object_key(
            convention=convention,
            object_id=self._id_factory(),
            ext=EXTENSIONS[kind],
            folder=self._folder,
        )
        return StoredObjectRef(
            bucket=self._bucket,
            path=key,
            content_type=CONTENT_TYPES[kind],
            cache_control_seconds=self._cache_control_seconds,
        )

    def _upload(self, ref: StoredObjectRef, body: bytes) -> None:
        logger.info("uploading: bucket=%s key=%s bytes=%d", ref.bucket, ref.path, len(body))
        try:
            self._storage.upload_object(
                bucket=ref.bucket,
                key=ref.path,
                body=body,
                content_type=ref.content_type,
                cache_control_seconds=ref.cache_control_seconds,
                upsert=False,
            )
        except Exception as exc:
            logger.error("upload failed: key=%s error=%s: %s", ref.path, exc.__class__.__name__, str(exc))
            raise StorageUploadFailed(detail=str(exc)) from exc

    def _resolve_public_url(self, ref: StoredObjectRef) -> str:
        try:
            url = self._storage.get_public_url(bucket=ref.bucket, key=ref.path)
        except Exception as exc:
            logger.error("public url failed: key=%s error=%s: %s", ref.path, exc.__class__.__name__, str(exc))
            self._handle_orphan(ref)
            raise PublicUrlResolutionFailed(detail=str(exc)) from exc
        if not url:
            logger.error("public url failed: key=%s error=empty_public_url", ref.path)
            self._handle_orphan(ref)
            raise PublicUrlResolutionFailed(detail="empty_public_url")
        logger.info("published: key=%s url=%s", ref.path, url)
        return str(url)

    def _handle_orphan(self, ref: StoredObjectRef) -> None:
        if not self._cleanup_orphans:
            logger.warning("orphaned object left in storage: bucket=%s key=%s", ref.bucket, ref.path)
            return
        try:
            self._storage.delete_object(bucket=ref.bucket, key=ref.path)
            logger.info("orphaned object removed: bucket=%s key=%s", ref.bucket, ref.path)
        except Exception as exc:
            logger.warning(
                "orphan cleanup failed: key=%s error=%s: %s", ref.path, exc.__class__.__name__, str(exc)
            )


__all__ = [
    "PayloadKind",
    "UploadRequest",
    "StoredObjectRef",
    "PublishResult",
    "UploadPublisher",
    "WRITE_METHOD",
    "check_request",
]
