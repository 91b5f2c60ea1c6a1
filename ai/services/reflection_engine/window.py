from __future__ import annotations
from typing import Dict, Mapping, Optional
from datetime import date, timedelta
from .models import DayEntry, parse_date_key


def window_cutoff(today: date, window_days: int) -> date:
    # calendar-day subtraction; never elapsed seconds
    return today - timedelta(days=int(window_days))


def select_window(all_entries: Mapping[str, DayEntry], window_days: int, today: Optional[date] = None) -> Dict[str, DayEntry]:
    """Entries dated on or after ``today - window_days``.

    - No upper bound: today's entry and entries dated after today pass through.
    - Keys that are not YYYY-MM-DD calendar dates are left out.
    - Returns a new dict; the input mapping is not touched.
    """
    if window_days is None or int(window_days) < 0:
        raise ValueError("window_days must be >= 0")
    today = today or date.today()
    cutoff = window_cutoff(today, window_days)
    out: Dict[str, DayEntry] = {}
    for key, entry in all_entries.items():
        d = parse_date_key(key)
        if d is None:
            continue
        if d >= cutoff:
            out[key] = entry
    return out
