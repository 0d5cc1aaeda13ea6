"""Webhook API routes: store a base64 image or a JSON document and return its URL."""

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass
from typing import Any, Optional

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from backend.storage.config import StorageSettings
from backend.storage.keys import PathConvention
from backend.storage.ports import NullStorageAdapter, ObjectStoragePort
from backend.uploads.errors import InternalError, PublishError
from backend.uploads.publisher import WRITE_METHOD, PayloadKind, PublishResult, UploadPublisher, check_request
from backend.uploads.responses import ResponseShape, error_body, success_body

logger = logging.getLogger("webhooks.web.webhooks")

webhooks_router = APIRouter(tags=["Webhooks"])

STORAGE_ADAPTER: ObjectStoragePort = NullStorageAdapter()
SETTINGS: Optional[StorageSettings] = None

# Every other verb is routed too so the handler answers 405 with a JSON body.
OTHER_METHODS = ["GET", "HEAD", "PUT", "PATCH", "DELETE", "OPTIONS"]


def set_storage_adapter(adapter: ObjectStoragePort) -> None:
    """Allow tests or startup code to provide a concrete storage adapter."""
    global STORAGE_ADAPTER
    STORAGE_ADAPTER = adapter


def set_settings(settings: Optional[StorageSettings]) -> None:
    global SETTINGS
    SETTINGS = settings


@dataclass(frozen=True, slots=True)
class WebhookEntryPoint:
    """One externally visible webhook and the variants it is wired with."""

    name: str
    path: str
    kind: PayloadKind
    path_convention: PathConvention
    response_shape: ResponseShape


ENTRY_POINTS = (
    WebhookEntryPoint(
        name="image",
        path="/api/webhooks/image",
        kind=PayloadKind.BASE64_IMAGE,
        path_convention=PathConvention.FLAT_WITH_EXTENSION,
        response_shape=ResponseShape.URL_FIELD,
    ),
    WebhookEntryPoint(
        name="json",
        path="/api/webhooks/json",
        kind=PayloadKind.JSON_DOCUMENT,
        path_convention=PathConvention.FOLDER_PREFIXED,
        response_shape=ResponseShape.MESSAGE_AND_FILE_INFO,
    ),
    WebhookEntryPoint(
        name="json-url",
        path="/api/webhooks/json/url",
        kind=PayloadKind.JSON_DOCUMENT,
        path_convention=PathConvention.FOLDER_PREFIXED,
        response_shape=ResponseShape.PLAIN_URL,
    ),
)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"invalid_json_constant: {name}")


async def _read_payload(request: Request) -> Any:
    """Decode the request body the way a standard body parser would.

    Behavior:
        - JSON content types are parsed (malformed or too deeply nested JSON,
          NaN/Infinity -> None).
        - Text or absent content types yield the body as a str.
        - Anything else yields raw bytes, which no payload kind accepts.
    """
    raw = await request.body()
    if not raw:
        return None
    ctype = (request.headers.get("content-type") or "").split(";", 1)[0].strip().lower()
    if ctype == "application/json" or ctype.endswith("+json"):
        try:
            return json.loads(raw.decode("utf-8"), parse_constant=_reject_constant)
        except (ValueError, RecursionError):
            return None
    if not ctype or ctype.startswith("text/"):
        return raw.decode("utf-8", errors="replace")
    return raw


def _publisher(entry: WebhookEntryPoint) -> UploadPublisher:
    if SETTINGS is None:
        raise RuntimeError("webhook_settings_not_configured")
    adapter = STORAGE_ADAPTER
    # Lazy wiring: if adapter is not ready, try wiring once now.
    if isinstance(adapter, NullStorageAdapter):
        from backend.web.storage_wiring import wire_supabase_adapter

        wire_supabase_adapter(SETTINGS)
        adapter = STORAGE_ADAPTER  # refresh after potential wiring
    return UploadPublisher.from_settings(adapter, SETTINGS, path_convention=entry.path_convention)


def _publish(entry: WebhookEntryPoint, method: str, payload: Any) -> PublishResult:
    # Runs in a worker thread; wiring builds a blocking client.
    return _publisher(entry).publish(method, payload, entry.kind)


async def _handle(request: Request, entry: WebhookEntryPoint) -> Response:
    """Run one webhook call and map its outcome to an HTTP response.

    Every error is converted here; nothing propagates past the handler.
    """
    try:
        is_write = request.method.upper() == WRITE_METHOD
        payload = await _read_payload(request) if is_write else None
        check_request(request.method, payload, entry.kind)
        result = await asyncio.to_thread(_publish, entry, request.method, payload)
    except PublishError as exc:
        logger.info("webhook %s rejected: status=%s code=%s", entry.name, exc.status_code, exc.code)
        return JSONResponse(error_body(exc, entry.kind), status_code=exc.status_code)
    except Exception as exc:
        logger.error("webhook %s failed: %s: %s", entry.name, exc.__class__.__name__, str(exc))
        return JSONResponse(error_body(InternalError(), entry.kind), status_code=500)

    body = success_body(entry.response_shape, result)
    if isinstance(body, str):
        return PlainTextResponse(body, status_code=200)
    return JSONResponse(body, status_code=200)


def _make_endpoint(entry: WebhookEntryPoint):
    async def endpoint(request: Request) -> Response:
        return await _handle(request, entry)

    endpoint.__name__ = f"{entry.name.replace('-', '_')}_webhook"
    endpoint.__doc__ = f"Store a {entry.kind.value.replace('_', ' ')} and return its public URL."
    return endpoint


for _entry in ENTRY_POINTS:
    _endpoint = _make_endpoint(_entry)
    webhooks_router.add_api_route(_entry.path, _endpoint, methods=[WRITE_METHOD], name=_entry.name)
    webhooks_router.add_api_route(
        _entry.path,
        _endpoint,
        methods=OTHER_METHODS,
        name=f"{_entry.name}-other-methods",
        include_in_schema=False,
    )


__all__ = ["ENTRY_POINTS", "WebhookEntryPoint", "set_settings", "set_storage_adapter", "webhooks_router"]
