import asyncio
from datetime import datetime

from reflection_api.entry_store import MemoryEntryStore
from reflection_api.reminder import has_rated_today, next_fire_time, plan_daily_reminder
from reflection_engine.models import DayEntry


def run(coro):
    return asyncio.run(coro)


def test_next_fire_time_today_before_hour():
    assert next_fire_time(datetime(2025, 10, 28, 18, 30), 21, 0) == datetime(2025, 10, 28, 21, 0)


def test_next_fire_time_rolls_to_tomorrow_after_hour():
    assert next_fire_time(datetime(2025, 10, 31, 21, 5), 21, 0) == datetime(2025, 11, 1, 21, 0)


def test_unrated_today_schedules(fixed_now):
    decision = run(plan_daily_reminder(MemoryEntryStore(), fixed_now, hour=21, minute=0))
    assert decision.action == "schedule"
    assert decision.today == "2025-10-28"
    assert decision.fire_at == "2025-10-28T21:00"


def test_rated_today_cancels(fixed_now):
    store = MemoryEntryStore({"2025-10-28": {"rating": 4, "description": ""}})
    assert run(has_rated_today(store, fixed_now().date()))
    decision = run(plan_daily_reminder(store, fixed_now, hour=21, minute=0))
    assert decision.action == "cancel"
    assert decision.fire_at is None


def test_idempotent(fixed_now):
    store = MemoryEntryStore({"2025-10-27": {"rating": 2, "description": ""}})
    first = run(plan_daily_reminder(store, fixed_now, hour=21, minute=0))
    second = run(plan_daily_reminder(store, fixed_now, hour=21, minute=0))
    assert first == second
    assert first.action == "schedule"
    assert run(store.get_all()).keys() == {"2025-10-27"}


def test_entry_without_valid_rating_still_schedules(fixed_now):
    store = MemoryEntryStore({"2025-10-28": {"description": "no rating stored"}})
    assert not run(has_rated_today(store, fixed_now().date()))
    decision = run(plan_daily_reminder(store, fixed_now, hour=21, minute=0))
    assert decision.action == "schedule"
    assert decision.fire_at == "2025-10-28T21:00"


def test_out_of_range_rating_counts_as_unrated(fixed_now):
    store = MemoryEntryStore({"2025-10-28": {"rating": 9, "description": ""}})
    assert not run(has_rated_today(store, fixed_now().date()))
