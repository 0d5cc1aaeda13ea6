"""Use case layer for webhook uploads.

Re-export the publisher and its collaborators for convenient imports in tests.
"""

from .errors import (
    InternalError,
    InvalidPayload,
    MethodNotAllowed,
    PublicUrlResolutionFailed,
    PublishError,
    StorageUploadFailed,
)
from .publisher import PayloadKind, PublishResult, StoredObjectRef, UploadPublisher, UploadRequest, check_request
from .responses import ResponseShape

__all__ = [
    "InternalError",
    "InvalidPayload",
    "MethodNotAllowed",
    "PayloadKind",
    "PublicUrlResolutionFailed",
    "PublishError",
    "PublishResult",
    "ResponseShape",
    "StorageUploadFailed",
    "StoredObjectRef",
    "UploadPublisher",
    "UploadRequest",
    "check_request",
]
