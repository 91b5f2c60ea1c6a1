# -*- coding: utf-8 -*-
"""
Daily Reminder API
------------------
- GET /reminder/daily : schedule-or-cancel decision for today's reminder

Called at app launch and by scripts/reminder_runner.py. Safe to call
repeatedly; the answer only changes when today's entry is written.
"""

from __future__ import annotations

from datetime import datetime
from typing import Callable, Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from .entry_store import EntryStore, StorageFailure
from .reminder import plan_daily_reminder


class ReminderResponse(BaseModel):
    action: str
    today: str
    fire_at: Optional[str] = None
    title: str
    body: str


def register_reminder_routes(app: FastAPI, store: EntryStore, clock: Optional[Callable[[], datetime]] = None) -> None:
    now = clock or datetime.now

    @app.get("/reminder/daily", response_model=ReminderResponse)
    async def daily_reminder() -> ReminderResponse:
        try:
            decision = await plan_daily_reminder(store, now)
        except StorageFailure:
            raise HTTPException(status_code=502, detail="Failed to check today's entry")
        return ReminderResponse(**decision.to_dict())
