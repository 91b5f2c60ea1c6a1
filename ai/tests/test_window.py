from datetime import date

import pytest

from reflection_engine.models import DayEntry
from reflection_engine.window import select_window, window_cutoff


def _e(r=3):
    return DayEntry(rating=r, description="")


def test_cutoff_is_calendar_day_subtraction():
    assert window_cutoff(date(2025, 3, 31), 30) == date(2025, 3, 1)
    # across a DST change in most northern zones
    assert window_cutoff(date(2025, 11, 5), 7) == date(2025, 10, 29)


def test_includes_exactly_window_days_ago_and_excludes_older(today):
    entries = {
        "2025-09-28": _e(),   # exactly 30 days before 2025-10-28
        "2025-09-27": _e(),   # 31 days before
        "2025-10-28": _e(),   # today
    }
    out = select_window(entries, 30, today=today)
    assert set(out) == {"2025-09-28", "2025-10-28"}


def test_future_entries_pass_through(today):
    out = select_window({"2025-11-02": _e(5)}, 30, today=today)
    assert "2025-11-02" in out


def test_does_not_mutate_input(today):
    entries = {"2025-01-01": _e(), "2025-10-20": _e()}
    before = dict(entries)
    out = select_window(entries, 30, today=today)
    assert entries == before
    assert out is not entries
    assert list(out) == ["2025-10-20"]


def test_skips_keys_that_are_not_dates(today):
    entries = {"2025-10-20": _e(), "yesterday": _e(), "2025-13-01": _e(), "2025-10-2": _e()}
    assert list(select_window(entries, 30, today=today)) == ["2025-10-20"]


def test_negative_window_rejected(today):
    with pytest.raises(ValueError):
        select_window({}, -1, today=today)
