# -*- coding: utf-8 -*-
"""
Daily Reflection API
--------------------
- GET  /healthz              : health check
- /entries, /ratings         : day entries (see api_entries.py)
- /analysis/*                : monthly analysis + assistant prompt (api_analysis.py)
- GET  /reminder/daily       : today's reminder decision (api_reminder.py)

Notes:
- Single user, single journal. Auth and UI live in the client app.
- The entry store is chosen by ENTRY_STORE_BACKEND (memory | file | supabase)
  and injected into every route group.
"""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Callable, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api_analysis import register_analysis_routes
from .api_entries import register_entry_routes
from .api_reminder import register_reminder_routes
from .entry_store import EntryStore, build_entry_store_from_env
from .supabase_client import aclose_async_client

APP_NAME = os.getenv("REFLECTION_APP_NAME", "Daily Reflection")
PORT = int(os.getenv("REFLECTION_PORT", "8765"))
HOST = os.getenv("REFLECTION_HOST", "0.0.0.0")
ALLOWED_ORIGINS_RAW = os.getenv("REFLECTION_CORS_ORIGINS", "*")
ALLOWED_ORIGINS = [o.strip() for o in ALLOWED_ORIGINS_RAW.split(",") if o.strip()] or ["*"]

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger("reflection")


@asynccontextmanager
async def _lifespan(_app: FastAPI):
    yield
    await aclose_async_client()


def create_app(store: Optional[EntryStore] = None, clock: Optional[Callable[[], datetime]] = None) -> FastAPI:
    """Build the app around one entry store and one local clock."""
    if store is None:
        store = build_entry_store_from_env()
    now = clock or datetime.now

    app = FastAPI(title=APP_NAME, version="1.0.0", lifespan=_lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=ALLOWED_ORIGINS != ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.entry_store = store

    @app.get("/healthz")
    async def healthz():
        return {"status": "ok", "store": store.backend}

    register_entry_routes(app, store)
    register_analysis_routes(app, store, clock=lambda: now().date())
    register_reminder_routes(app, store, clock=now)

    logger.info("%s ready (store=%s)", APP_NAME, store.backend)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("reflection_api.app:app", host=HOST, port=PORT, log_level="info")
