# -*- coding: utf-8 -*-
"""entry_store.py

Day entry persistence
---------------------

One ``DayEntry`` per ``YYYY-MM-DD`` key. Every backend exposes the same three
coroutines:

    get(date) -> DayEntry | None
    get_all() -> {date: DayEntry}      (empty dict when nothing is stored)
    put(date, entry) -> None           (upsert, no delete)

Backends
- memory   : dict in process (tests, local runs)
- file     : one JSON document on disk, atomic replace on write
- supabase : PostgREST table ``day_entries`` (entry_date, rating, description)

Any backend read/write that does not complete raises ``StorageFailure``. The
stores never retry; the caller decides what to show.

Reads do not validate: whatever was stored comes back as a ``DayEntry`` and the
analysis decides what it can use. Writes validate.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
import tempfile
from typing import Any, Dict, Mapping, Optional

import httpx

from reflection_engine.models import DayEntry, MalformedEntryError, parse_date_key

from . import supabase_client
from .observability import elapsed_ms, log_alert, log_event, monotonic_ms

logger = logging.getLogger("entry_store")

ENTRY_STORE_BACKEND = (os.getenv("ENTRY_STORE_BACKEND", "memory") or "memory").strip().lower()
ENTRY_STORE_PATH = (os.getenv("ENTRY_STORE_PATH", "data/entries.json") or "data/entries.json").strip()
DAY_ENTRIES_TABLE = (os.getenv("DAY_ENTRIES_TABLE", "day_entries") or "day_entries").strip()
try:
    ENTRY_STORE_TIMEOUT_SEC = float(os.getenv("ENTRY_STORE_TIMEOUT_SEC", "5.0") or "5.0")
except ValueError:
    ENTRY_STORE_TIMEOUT_SEC = 5.0


class StorageFailure(RuntimeError):
    """The backend read/write did not complete."""

    def __init__(self, message: str, *, backend: str = "", op: str = ""):
        super().__init__(message)
        self.backend = backend
        self.op = op


def _require_date_key(date_key: str) -> str:
    if parse_date_key(date_key) is None:
        raise MalformedEntryError(f"date must be YYYY-MM-DD, got {date_key!r}")
    return date_key


def _entry_from_raw(raw: Any) -> DayEntry:
    if isinstance(raw, DayEntry):
        return raw
    if isinstance(raw, dict):
        return DayEntry.from_dict(raw)
    # not an object at all; keep it so the analysis can skip it visibly
    return DayEntry(rating=None, description=raw)  # type: ignore[arg-type]


def _report_failure(backend: str, op: str, exc: BaseException) -> StorageFailure:
    log_alert(
        logger,
        "ENTRY_STORE_FAILED",
        level="error",
        event="entry_store_failed",
        backend=backend,
        op=op,
        error=type(exc).__name__,
    )
    return StorageFailure(f"{backend} {op} failed: {type(exc).__name__}: {exc}", backend=backend, op=op)


class EntryStore:
    """Base class: subclasses implement the three coroutines."""

    backend = "base"

    async def get(self, date_key: str) -> Optional[DayEntry]:
        raise NotImplementedError

    async def get_all(self) -> Dict[str, DayEntry]:
        raise NotImplementedError

    async def put(self, date_key: str, entry: DayEntry) -> None:
        raise NotImplementedError


class MemoryEntryStore(EntryStore):
    backend = "memory"

    def __init__(self, entries: Optional[Mapping[str, Any]] = None):
        self._entries: Dict[str, DayEntry] = {k: _entry_from_raw(v) for k, v in (entries or {}).items()}

    async def get(self, date_key: str) -> Optional[DayEntry]:
        return self._entries.get(date_key)

    async def get_all(self) -> Dict[str, DayEntry]:
        return dict(self._entries)

    async def put(self, date_key: str, entry: DayEntry) -> None:
        _require_date_key(date_key)
        self._entries[date_key] = entry.validate()


class JsonFileEntryStore(EntryStore):
    """``{"YYYY-MM-DD": {"rating": 4, "description": "..."}, ...}`` on disk."""

    backend = "file"

    def __init__(self, path: str):
        self.path = path
        self._lock = asyncio.Lock()

    def _read_sync(self) -> Dict[str, Any]:
        if not os.path.exists(self.path):
            return {}
        with open(self.path, "r", encoding="utf-8") as f:
            text = f.read()
        if not text.strip():
            return {}
        data = json.loads(text)
        if not isinstance(data, dict):
            raise ValueError("entries file must hold a JSON object")
        return data

    def _write_sync(self, data: Dict[str, Any]) -> None:
        folder = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(folder, exist_ok=True)
        fd, tmp = tempfile.mkstemp(prefix=".entries_", suffix=".json", dir=folder)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2, sort_keys=True)
            os.replace(tmp, self.path)
        except BaseException:
            try:
                os.remove(tmp)
            except OSError:
                pass
            raise

    async def _read(self) -> Dict[str, Any]:
        try:
            return await asyncio.to_thread(self._read_sync)
        except (OSError, ValueError) as exc:
            raise _report_failure(self.backend, "read", exc) from exc

    async def get(self, date_key: str) -> Optional[DayEntry]:
        raw = (await self._read()).get(date_key)
        return None if raw is None else _entry_from_raw(raw)

    async def get_all(self) -> Dict[str, DayEntry]:
        return {k: _entry_from_raw(v) for k, v in (await self._read()).items()}

    async def put(self, date_key: str, entry: DayEntry) -> None:
        _require_date_key(date_key)
        entry.validate()
        async with self._lock:
            data = await self._read()
            data[date_key] = entry.to_dict()
            try:
                await asyncio.to_thread(self._write_sync, data)
            except OSError as exc:
                raise _report_failure(self.backend, "write", exc) from exc


class SupabaseEntryStore(EntryStore):
    """PostgREST-backed store. One row per entry_date (unique)."""

    backend = "supabase"

    def __init__(
        self,
        table: str = DAY_ENTRIES_TABLE,
        *,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = ENTRY_STORE_TIMEOUT_SEC,
    ):
        self.table = table
        self._client = client
        self.timeout = timeout

    @staticmethod
    def _row_to_entry(row: Dict[str, Any]) -> DayEntry:
        return DayEntry.from_dict({"rating": row.get("rating"), "description": row.get("description")})

    async def _select(self, params: Dict[str, str], op: str) -> Any:
        start_ms = monotonic_ms()
        try:
            resp = await supabase_client.sb_get(
                f"/rest/v1/{self.table}", params=params, timeout=self.timeout, client=self._client
            )
        except (httpx.HTTPError, RuntimeError) as exc:
            raise _report_failure(self.backend, op, exc) from exc
        if resp.status_code >= 300:
            raise _report_failure(self.backend, op, RuntimeError(f"http_{resp.status_code}: {resp.text[:300]}"))
        log_event(logger, "entry_store_read", level="debug", backend=self.backend, op=op, duration_ms=elapsed_ms(start_ms))
        try:
            return resp.json()
        except ValueError as exc:
            raise _report_failure(self.backend, op, exc) from exc

    async def get(self, date_key: str) -> Optional[DayEntry]:
        rows = await self._select(
            {"select": "entry_date,rating,description", "entry_date": f"eq.{date_key}", "limit": "1"},
            "get",
        )
        if not rows:
            return None
        return self._row_to_entry(rows[0])

    async def get_all(self) -> Dict[str, DayEntry]:
        rows = await self._select({"select": "entry_date,rating,description", "order": "entry_date.asc"}, "get_all")
        return {str(r.get("entry_date")): self._row_to_entry(r) for r in (rows or [])}

    async def put(self, date_key: str, entry: DayEntry) -> None:
        _require_date_key(date_key)
        entry.validate()
        payload = {"entry_date": date_key, "rating": entry.rating, "description": entry.description}
        try:
            resp = await supabase_client.sb_post(
                f"/rest/v1/{self.table}",
                json=payload,
                params={"on_conflict": "entry_date"},
                prefer="resolution=merge-duplicates,return=minimal",
                timeout=self.timeout,
                client=self._client,
            )
        except (httpx.HTTPError, RuntimeError) as exc:
            raise _report_failure(self.backend, "put", exc) from exc
        if resp.status_code not in (200, 201, 204):
            raise _report_failure(self.backend, "put", RuntimeError(f"http_{resp.status_code}: {resp.text[:300]}"))


def build_entry_store_from_env() -> EntryStore:
    if ENTRY_STORE_BACKEND == "file":
        return JsonFileEntryStore(ENTRY_STORE_PATH)
    if ENTRY_STORE_BACKEND == "supabase":
        supabase_client.ensure_supabase_config()
        return SupabaseEntryStore()
    if ENTRY_STORE_BACKEND != "memory":
        logger.warning("Unknown ENTRY_STORE_BACKEND=%r; using memory", ENTRY_STORE_BACKEND)
    return MemoryEntryStore()
