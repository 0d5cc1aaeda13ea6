"""
Payload codecs: base64 text to bytes and JSON documents to bytes.

Why:
    Webhook callers historically send base64 produced by many different tools
    (URL-safe alphabet, missing padding, line breaks). Decoding is therefore
    lenient by default: characters outside the alphabet are dropped instead of
    rejected. A strict variant exists for deployments that opt in.
"""
from __future__ import annotations

import base64
import binascii
import json
import re
from typing import Any

_NON_ALPHABET_RE = re.compile(r"[^A-Za-z0-9+/]")
_URLSAFE_TO_STANDARD = str.maketrans("-_", "+/")
_WHITESPACE_RE = re.compile(r"\s+")


def decode_base64_lenient(text: str) -> bytes:
    """Decode base64 the forgiving way; never raises for str input.

    Behavior:
        - URL-safe characters (`-`, `_`) are read as `+` and `/`.
        - Decoding stops at the first `=`; padding is recomputed.
        - Any other character outside the alphabet is dropped.
        - A trailing single character (6 bits, not a full byte) is ignored.
    """
    data = text.translate(_URLSAFE_TO_STANDARD).split("=", 1)[0]
    data = _NON_ALPHABET_RE.sub("", data)
    remainder = len(data) % 4
    if remainder == 1:
        data = data[:-1]
    elif remainder:
        data += "=" * (4 - remainder)
    return base64.b64decode(data, validate=True)


def decode_base64_strict(text: str) -> bytes:
    """Decode standard base64, rejecting anything malformed with ValueError.

    Whitespace (e.g. MIME line breaks) is tolerated; the alphabet and the
    padding are not.
    """
    data = _WHITESPACE_RE.sub("", text)
    if not data:
        raise ValueError("empty_base64")
    try:
        return base64.b64decode(data, validate=True)
    except binascii.Error as exc:
        raise ValueError("invalid_base64") from exc


def encode_json_document(document: Any) -> bytes:
    """Serialize a JSON document as 2-space indented UTF-8 text."""
    return json.dumps(document, indent=2, ensure_ascii=False).encode("utf-8")


__all__ = ["decode_base64_lenient", "decode_base64_strict", "encode_json_document"]
