from __future__ import annotations
from typing import Mapping, List
from fractions import Fraction
from .models import DayEntry

MIN_ENTRIES_FOR_TREND = 7
# minimum meaningful shift on the 1..5 scale
TREND_THRESHOLD = Fraction(3, 10)


def _mean(ratings: List[int]) -> Fraction:
    return Fraction(sum(ratings), len(ratings))


def classify_trend(entries: Mapping[str, DayEntry]) -> str:
    """improving / declining / stable from the two chronological halves.

    Fewer than MIN_ENTRIES_FOR_TREND dated entries is always "stable".
    Halves split at floor(n/2); an odd extra entry lands in the second half.
    """
    if len(entries) < MIN_ENTRIES_FOR_TREND:
        return "stable"
    # YYYY-MM-DD keys: lexicographic order is chronological order
    keys = sorted(entries)
    ratings = [entries[k].rating for k in keys]
    mid = len(ratings) // 2
    difference = _mean(ratings[mid:]) - _mean(ratings[:mid])
    if difference > TREND_THRESHOLD:
        return "improving"
    if difference < -TREND_THRESHOLD:
        return "declining"
    return "stable"
