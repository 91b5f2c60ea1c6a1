# -*- coding: utf-8 -*-
"""supabase_client.py

Shared Supabase HTTP client for the entry store
-----------------------------------------------

- One lazily-created ``httpx.AsyncClient`` (connection pooled) per process.
- Small helpers for PostgREST calls made with the service_role key.
- Call ``aclose_async_client`` on app shutdown.
"""

from __future__ import annotations

import asyncio
import logging
import os
from typing import Any, Dict, Optional

import httpx

logger = logging.getLogger("supabase_client")


SUPABASE_URL = os.getenv("SUPABASE_URL", "").rstrip("/")
SUPABASE_SERVICE_ROLE_KEY = os.getenv("SUPABASE_SERVICE_ROLE_KEY", "")


def ensure_supabase_config() -> None:
    if not SUPABASE_URL or not SUPABASE_SERVICE_ROLE_KEY:
        raise RuntimeError(
            "Supabase configuration missing: SUPABASE_URL or SUPABASE_SERVICE_ROLE_KEY"
        )


_client: Optional[httpx.AsyncClient] = None
_client_lock = asyncio.Lock()


def _build_limits() -> httpx.Limits:
    max_conn = int(os.getenv("SUPABASE_HTTP_MAX_CONNECTIONS", "20") or "20")
    max_keepalive = int(
        os.getenv("SUPABASE_HTTP_MAX_KEEPALIVE_CONNECTIONS", "5") or "5"
    )
    return httpx.Limits(
        max_connections=max(1, max_conn),
        max_keepalive_connections=max(1, max_keepalive),
    )


def _build_timeout() -> httpx.Timeout:
    t = float(os.getenv("SUPABASE_HTTP_TIMEOUT_SECONDS", "8.0") or "8.0")
    if t <= 0:
        t = 8.0
    return httpx.Timeout(t)


async def get_async_client() -> httpx.AsyncClient:
    """Return the shared AsyncClient."""

    global _client
    if _client is not None:
        return _client

    async with _client_lock:
        if _client is None:
            _client = httpx.AsyncClient(
                timeout=_build_timeout(),
                limits=_build_limits(),
            )
        return _client


async def aclose_async_client() -> None:
    global _client
    if _client is None:
        return
    try:
        await _client.aclose()
    finally:
        _client = None


def sb_service_role_headers_json(*, prefer: Optional[str] = None) -> Dict[str, str]:
    ensure_supabase_config()
    h = {
        "apikey": SUPABASE_SERVICE_ROLE_KEY,
        "Authorization": f"Bearer {SUPABASE_SERVICE_ROLE_KEY}",
        "Content-Type": "application/json",
    }
    if prefer:
        h["Prefer"] = prefer
    return h


async def sb_request(
    method: str,
    path: str,
    *,
    params: Optional[Dict[str, str]] = None,
    json: Any = None,
    prefer: Optional[str] = None,
    timeout: Optional[float] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> httpx.Response:
    """Send a request to Supabase (base URL + path, path starting with ``/``)."""

    ensure_supabase_config()
    p = str(path or "").strip()
    if not p.startswith("/"):
        p = "/" + p
    url = f"{SUPABASE_URL}{p}"

    c = client or await get_async_client()
    kwargs: Dict[str, Any] = {}
    if timeout is not None:
        kwargs["timeout"] = timeout
    return await c.request(
        method=str(method or "GET").upper(),
        url=url,
        headers=sb_service_role_headers_json(prefer=prefer),
        params=params,
        json=json,
        **kwargs,
    )


async def sb_get(
    path: str,
    *,
    params: Optional[Dict[str, str]] = None,
    timeout: Optional[float] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> httpx.Response:
    return await sb_request("GET", path, params=params, timeout=timeout, client=client)


async def sb_post(
    path: str,
    *,
    json: Any,
    params: Optional[Dict[str, str]] = None,
    prefer: Optional[str] = None,
    timeout: Optional[float] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> httpx.Response:
    return await sb_request(
        "POST",
        path,
        params=params,
        json=json,
        prefer=prefer,
        timeout=timeout,
        client=client,
    )
