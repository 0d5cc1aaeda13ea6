"Supabase upload webhooks"
from __future__ import annotations

import logging
import os
import sys

from dotenv import load_dotenv
from fastapi import FastAPI


def _should_load_dotenv() -> bool:
    """Decide if we should load a local .env file.

    - Never load under pytest to avoid contaminating test env.
    - Allow explicit opt-out via WEBHOOKS_ENABLE_DOTENV (default true
      outside pytest).
    """
    if "pytest" in sys.modules or os.getenv("PYTEST_CURRENT_TEST"):
        return False
    flag = (os.getenv("WEBHOOKS_ENABLE_DOTENV", "true") or "").strip().lower()
    return flag in ("1", "true", "yes")


if _should_load_dotenv():
    load_dotenv()

from backend.web.config import ensure_config_on_startup  # noqa: E402
from backend.web.routes import webhooks as webhooks_routes  # noqa: E402
from backend.web.storage_wiring import wire_supabase_adapter  # noqa: E402

logger = logging.getLogger("webhooks.web")

# Fail fast: without bucket/folder/credentials the process must not serve.
SETTINGS = ensure_config_on_startup()

app = FastAPI(
    title="Supabase upload webhooks",
    description="Stores base64 images and JSON documents in Supabase Storage and returns their public URLs.",
    version="1.0.0",
)
app.include_router(webhooks_routes.webhooks_router)

webhooks_routes.set_settings(SETTINGS)
# If this fails (e.g., local Supabase still starting), the routes retry
# wiring on the first request that needs storage.
wire_supabase_adapter(SETTINGS)


@app.get("/health")
async def health():
    return {"status": "ok"}
