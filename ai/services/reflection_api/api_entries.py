# -*- coding: utf-8 -*-
"""
Day Entry API
-------------
- GET /entries            : every stored entry, oldest first
- GET /entries/{date}     : one entry (404 when the day is unrated)
- PUT /entries/{date}     : upsert today's (or any day's) rating + notes
- GET /ratings            : the five rating levels (label / emoji / color)

Notes:
- date is always YYYY-MM-DD, the device's local calendar date at write time.
- The 1512 character description limit is enforced here, on the write side.
  The analysis itself accepts any length.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from reflection_engine.models import (
    MAX_DESCRIPTION_CHARS,
    RATING_LEVELS,
    DayEntry,
    MalformedEntryError,
    count_words,
    parse_date_key,
    rating_color,
    rating_label,
)

from .entry_store import EntryStore, StorageFailure
from .observability import log_event

logger = logging.getLogger("entries_api")


class DayEntryIn(BaseModel):
    rating: int = Field(..., ge=1, le=5, description="1=Terrible .. 5=Excellent")
    description: str = Field(default="", max_length=MAX_DESCRIPTION_CHARS, description="Free-text notes")


class DayEntryOut(BaseModel):
    date: str
    rating: Optional[int] = None
    description: str = ""
    label: Optional[str] = None
    color: str
    word_count: int = 0


class RatingLevel(BaseModel):
    rating: int
    key: str
    label: str
    emoji: str
    color: str


def _entry_out(date_key: str, entry: DayEntry) -> DayEntryOut:
    desc = entry.description if isinstance(entry.description, str) else ""
    rating = entry.rating if rating_label(entry.rating) else None
    return DayEntryOut(
        date=date_key,
        rating=rating,
        description=desc,
        label=rating_label(entry.rating),
        color=rating_color(entry.rating),
        word_count=count_words(desc),
    )


def _require_date(date_key: str) -> str:
    if parse_date_key(date_key) is None:
        raise HTTPException(status_code=400, detail="date must be YYYY-MM-DD")
    return date_key


def register_entry_routes(app: FastAPI, store: EntryStore) -> None:
    """Attach the entry endpoints, bound to ``store``."""

    @app.get("/ratings", response_model=List[RatingLevel])
    async def list_rating_levels() -> List[RatingLevel]:
        return [
            RatingLevel(rating=r, key=key, label=label, emoji=emoji, color=color)
            for r, (key, label, emoji, color) in sorted(RATING_LEVELS.items())
        ]

    @app.get("/entries", response_model=List[DayEntryOut])
    async def list_entries() -> List[DayEntryOut]:
        try:
            entries = await store.get_all()
        except StorageFailure as exc:
            raise HTTPException(status_code=502, detail=str(exc))
        return [_entry_out(k, entries[k]) for k in sorted(entries)]

    @app.get("/entries/{date_key}", response_model=DayEntryOut)
    async def get_entry(date_key: str) -> DayEntryOut:
        _require_date(date_key)
        try:
            entry = await store.get(date_key)
        except StorageFailure as exc:
            raise HTTPException(status_code=502, detail=str(exc))
        if entry is None:
            raise HTTPException(status_code=404, detail="No entry for this date")
        return _entry_out(date_key, entry)

    @app.put("/entries/{date_key}", response_model=DayEntryOut)
    async def put_entry(date_key: str, payload: DayEntryIn) -> DayEntryOut:
        _require_date(date_key)
        entry = DayEntry(rating=payload.rating, description=payload.description or "")
        try:
            await store.put(date_key, entry)
        except MalformedEntryError as exc:
            raise HTTPException(status_code=400, detail=str(exc))
        except StorageFailure as exc:
            raise HTTPException(status_code=502, detail=str(exc))
        log_event(
            logger,
            "entry_saved",
            date=date_key,
            rating=entry.rating,
            word_count=count_words(entry.description),
            description=entry.description,
        )
        return _entry_out(date_key, entry)
