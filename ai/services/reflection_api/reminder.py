# -*- coding: utf-8 -*-
"""reminder.py

Daily reflection reminder (decision only)
-----------------------------------------

One reminder per day at REMINDER_HOUR:REMINDER_MINUTE local time, and only
while today has no entry. This module decides *whether* and *when*; handing
the decision to a device scheduler happens elsewhere.

Both inputs are explicit (store + clock) so the check can run any number of
times with the same answer.
"""

from __future__ import annotations

import logging
import os
from dataclasses import asdict, dataclass
from datetime import date, datetime, timedelta
from typing import Callable, Optional

from reflection_engine.models import format_date

from .entry_store import EntryStore
from .observability import log_event

logger = logging.getLogger("reminder")

try:
    REMINDER_HOUR = int(os.getenv("REMINDER_HOUR", "21") or "21")
except ValueError:
    REMINDER_HOUR = 21
try:
    REMINDER_MINUTE = int(os.getenv("REMINDER_MINUTE", "0") or "0")
except ValueError:
    REMINDER_MINUTE = 0

REMINDER_TITLE = "🌙 Daily Reflection Time"
REMINDER_BODY = "How was your day? Time to reflect!"


@dataclass(frozen=True)
class ReminderDecision:
    action: str                 # "schedule" | "cancel"
    today: str                  # YYYY-MM-DD
    fire_at: Optional[str]      # local ISO datetime, None when cancelled
    title: str = REMINDER_TITLE
    body: str = REMINDER_BODY

    def to_dict(self):
        return asdict(self)


async def has_rated_today(store: EntryStore, today: date) -> bool:
    entry = await store.get(format_date(today))
    return entry is not None and entry.is_well_formed()


def next_fire_time(now: datetime, hour: int = REMINDER_HOUR, minute: int = REMINDER_MINUTE) -> datetime:
    target = now.replace(hour=hour, minute=minute, second=0, microsecond=0)
    if now > target:
        target = target + timedelta(days=1)
    return target


async def plan_daily_reminder(
    store: EntryStore,
    clock: Callable[[], datetime] = datetime.now,
    *,
    hour: int = REMINDER_HOUR,
    minute: int = REMINDER_MINUTE,
) -> ReminderDecision:
    now = clock()
    today = now.date()
    if await has_rated_today(store, today):
        decision = ReminderDecision(action="cancel", today=format_date(today), fire_at=None)
    else:
        fire_at = next_fire_time(now, hour, minute)
        decision = ReminderDecision(
            action="schedule",
            today=format_date(today),
            fire_at=fire_at.isoformat(timespec="minutes"),
        )
    log_event(logger, "reminder_planned", action=decision.action, today=decision.today, fire_at=decision.fire_at)
    return decision
