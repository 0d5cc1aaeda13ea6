"""
Payload codecs: lenient/strict base64 and JSON document encoding.
"""
from __future__ import annotations

import base64
import json
import os

import pytest

from backend.uploads.codecs import decode_base64_lenient, decode_base64_strict, encode_json_document


def test_lenient_round_trip_on_well_formed_input():
    for size in (0, 1, 2, 3, 4, 5, 64, 1000):
        raw = os.urandom(size)
        encoded = base64.b64encode(raw).decode("ascii")
        decoded = decode_base64_lenient(encoded)
        assert decoded == raw
        assert base64.b64encode(decoded).decode("ascii") == encoded


def test_lenient_accepts_missing_padding_and_urlsafe_alphabet():
    assert decode_base64_lenient("aGVsbG8") == b"hello"
    raw = bytes([0xFB, 0xFF, 0xBF])
    assert decode_base64_lenient(base64.urlsafe_b64encode(raw).decode("ascii")) == raw


def test_lenient_drops_characters_outside_the_alphabet():
    assert decode_base64_lenient("aGVs\nbG8=\n") == b"hello"
    assert decode_base64_lenient(" a G V s b G 8 = ") == b"hello"
    assert decode_base64_lenient("aGVs*bG8!") == b"hello"


def test_lenient_stops_at_padding_and_ignores_dangling_character():
    assert decode_base64_lenient("aGVsbG8=IGlnbm9yZWQ=") == b"hello"
    assert decode_base64_lenient("aGVsbG8gx") == b"hello "
    assert decode_base64_lenient("!!!") == b""


def test_strict_accepts_well_formed_input_with_line_breaks():
    assert decode_base64_strict("aGVs\r\nbG8=") == b"hello"


@pytest.mark.parametrize("text", ["", "   ", "aGVsbG8", "aGVs*bG8=", "aGVsbG8-"])
def test_strict_rejects_malformed_input(text: str):
    with pytest.raises(ValueError):
        decode_base64_strict(text)


def test_json_document_is_indented_with_two_spaces():
    assert encode_json_document({"a": 1}) == b'{\n  "a": 1\n}'
    assert encode_json_document({"a": [1, {"b": None}]}).decode("utf-8") == (
        '{\n  "a": [\n    1,\n    {\n      "b": null\n    }\n  ]\n}'
    )


def test_json_document_round_trip_and_utf8():
    document = {"título": "ação", "n": [1, 2, 3]}
    encoded = encode_json_document(document)
    assert json.loads(encoded.decode("utf-8")) == document
    assert "ação".encode("utf-8") in encoded
