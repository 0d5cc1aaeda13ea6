"""Error taxonomy for publishing webhook payloads.

Every failure of a single publish call is one of these. Routes translate them
into HTTP responses; `detail` is meant for logs only and never reaches the
caller.
"""
from __future__ import annotations


class PublishError(Exception):
    status_code = 500
    code = "internal_error"

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail
        super().__init__(detail or self.code)


class MethodNotAllowed(PublishError):
    status_code = 405
    code = "method_not_allowed"


class InvalidPayload(PublishError):
    status_code = 400
    code = "invalid_payload"


class StorageUploadFailed(PublishError):
    status_code = 500
    code = "storage_upload_failed"


class PublicUrlResolutionFailed(PublishError):
    status_code = 500
    code = "public_url_resolution_failed"


class InternalError(PublishError):
    status_code = 500
    code = "internal_error"


__all__ = [
    "PublishError",
    "MethodNotAllowed",
    "InvalidPayload",
    "StorageUploadFailed",
    "PublicUrlResolutionFailed",
    "InternalError",
]
