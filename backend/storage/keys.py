"""
Helpers to generate storage keys for uploaded webhook payloads.

Conventions:
    - Images: {uuid}.png at the bucket root (no folder prefix).
    - JSON documents: {folder}/{uuid}.json

Identifiers are UUID4 strings, so every call yields a fresh key and a retried
request never lands on a previous partial write.
"""
from __future__ import annotations

import enum
import uuid


class PathConvention(enum.Enum):
    """How a webhook entry point lays out its objects inside the bucket."""

    FLAT_WITH_EXTENSION = "flat"
    FOLDER_PREFIXED = "folder"


def new_object_id() -> str:
    return str(uuid.uuid4())


def _normalize_ext(ext: str) -> str:
    ext = (ext or "").lower()
    # keep only alnum and dots
    ext = "".join(ch for ch in ext if ch.isalnum() or ch == ".")
    if ext and not ext.startswith("."):
        ext = f".{ext}"
    return ext


def _normalize_folder(folder: str | None) -> str:
    return (folder or "").strip().strip("/")


def make_object_key(*, convention: PathConvention, object_id: str, ext: str, folder: str | None = None) -> str:
    """Build the storage key for one upload.

    Returns: "{id}{ext}" for FLAT_WITH_EXTENSION, "{folder}/{id}{ext}" for
    FOLDER_PREFIXED. A blank folder degrades to the flat shape.
    """
    name = f"{object_id}{_normalize_ext(ext)}"
    if convention is PathConvention.FOLDER_PREFIXED:
        prefix = _normalize_folder(folder)
        if prefix:
            return f"{prefix}/{name}"
    return name


__all__ = ["PathConvention", "make_object_key", "new_object_id"]
