"""
Response shapes and caller-facing messages for the webhook entry points.

Why:
    Existing callers depend on three different success shapes (bare URL,
    `{"publicUrl"}` and `{"message", "fileUrl", "fileName"}`), so each entry
    point picks one explicitly instead of sharing a unified body.

Design:
    Framework-agnostic: helpers return plain bodies; routes wrap them in
    HTTP responses. Error messages are fixed per error kind so backend
    details never leak to callers.
"""
from __future__ import annotations

import enum
from typing import Any

from .errors import PublishError
from .publisher import PayloadKind, PublishResult

JSON_SAVED_MESSAGE = "JSON saved to Supabase successfully."


class ResponseShape(enum.Enum):
    PLAIN_URL = "plain_url"
    URL_FIELD = "url_field"
    MESSAGE_AND_FILE_INFO = "message_and_file_info"


_MESSAGES = {
    "method_not_allowed": "Method not allowed. Use POST.",
    "storage_upload_failed": "Failed to upload the file to Supabase.",
    "public_url_resolution_failed": "Failed to generate the public URL for the file.",
}
_KIND_MESSAGES = {
    ("invalid_payload", PayloadKind.BASE64_IMAGE): "Invalid payload. Send a valid Base64 string.",
    ("invalid_payload", PayloadKind.JSON_DOCUMENT): "Invalid payload. Send a valid JSON object.",
    ("internal_error", PayloadKind.BASE64_IMAGE): "Internal error while processing the image.",
    ("internal_error", PayloadKind.JSON_DOCUMENT): "Internal error while processing the JSON.",
}


def error_message(code: str, kind: PayloadKind) -> str:
    message = _KIND_MESSAGES.get((code, kind)) or _MESSAGES.get(code)
    return message or _KIND_MESSAGES[("internal_error", kind)]


def error_body(exc: PublishError, kind: PayloadKind) -> dict[str, str]:
    return {"error": error_message(exc.code, kind)}


def success_body(shape: ResponseShape, result: PublishResult) -> Any:
    """Return the success body for `shape` (a str for PLAIN_URL, else a dict)."""
    if shape is ResponseShape.PLAIN_URL:
        return result.public_url
    if shape is ResponseShape.URL_FIELD:
        return {"publicUrl": result.public_url}
    return {
        "message": JSON_SAVED_MESSAGE,
        "fileUrl": result.public_url,
        "fileName": result.storage_key,
    }


__all__ = ["JSON_SAVED_MESSAGE", "ResponseShape", "error_body", "error_message", "success_body"]
