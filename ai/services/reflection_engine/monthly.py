from __future__ import annotations
from typing import Dict, Mapping, Optional, Callable, Tuple, List, Protocol
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
import logging

from .models import DayEntry, MonthlyAnalysis, RATING_LEVELS, empty_distribution, parse_date_key
from .window import select_window
from .trend import classify_trend
from .themes import extract_themes
from .insights import generate_insights, generate_recommendations, NO_DATA_INSIGHT, NO_DATA_RECOMMENDATION

logger = logging.getLogger("reflection_engine.monthly")

DEFAULT_WINDOW_DAYS = 30


class EntrySource(Protocol):
    async def get_all(self) -> Mapping[str, DayEntry]: ...


def period_label(window_days: int) -> str:
    return f"Last {window_days} Days"


def round_rating(total: int, count: int) -> float:
    """Mean rounded to one decimal, halves away from zero."""
    if count <= 0:
        return 0
    mean = Decimal(total) / Decimal(count)
    return float(mean.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def split_well_formed(entries: Mapping[str, DayEntry]) -> Tuple[Dict[str, DayEntry], List[str]]:
    """Keep entries the aggregates can use; return the skipped date keys too.

    A rating outside 1..5 (or not an int) or a non-string description makes
    the whole entry unusable: it is left out of every aggregate.
    """
    good: Dict[str, DayEntry] = {}
    skipped: List[str] = []
    for key, entry in entries.items():
        if isinstance(entry, DayEntry) and entry.is_well_formed():
            good[key] = entry
        else:
            skipped.append(key)
    return good, skipped


def empty_analysis(window_days: int) -> MonthlyAnalysis:
    return MonthlyAnalysis(
        period=period_label(window_days),
        total_days=window_days,
        rated_days=0,
        average_rating=0,
        rating_distribution=empty_distribution(),
        emotional_trend="stable",
        top_themes=(),
        insights=(NO_DATA_INSIGHT,),
        recommendations=(NO_DATA_RECOMMENDATION,),
    )


def build_monthly_analysis(windowed: Mapping[str, DayEntry], window_days: int = DEFAULT_WINDOW_DAYS) -> MonthlyAnalysis:
    # Pre: windowed already filtered to the window and to well-formed entries
    if not windowed:
        return empty_analysis(window_days)

    distribution = empty_distribution()
    total = 0
    for e in windowed.values():
        total += e.rating
        distribution[RATING_LEVELS[e.rating][0]] += 1
    rated_days = len(windowed)
    mean = total / rated_days

    trend = classify_trend(windowed)
    themes = extract_themes(windowed)
    # rules see the unrounded mean
    insights = generate_insights(rated_days, mean, trend, themes)
    recommendations = generate_recommendations(mean, trend, themes)

    return MonthlyAnalysis(
        period=period_label(window_days),
        total_days=window_days,
        rated_days=rated_days,
        average_rating=round_rating(total, rated_days),
        rating_distribution=distribution,
        emotional_trend=trend,
        top_themes=tuple(themes),
        insights=tuple(insights),
        recommendations=tuple(recommendations),
    )


class MonthlyAnalyzer:
    """Read-then-compute: one store snapshot per analyze() call.

    Storage errors raised by ``store.get_all()`` are not caught here.
    """

    def __init__(self, store: EntrySource, clock: Optional[Callable[[], date]] = None):
        self.store = store
        self.clock = clock or date.today

    async def analyze(self, window_days: int = DEFAULT_WINDOW_DAYS) -> MonthlyAnalysis:
        if isinstance(window_days, bool) or not isinstance(window_days, int) or window_days < 1:
            raise ValueError("window_days must be a positive integer")
        snapshot = dict(await self.store.get_all())
        for key in snapshot:
            if parse_date_key(key) is None:
                logger.warning("malformed_entry_skipped date=%r reason=bad_date_key", key)
        windowed = select_window(snapshot, window_days, today=self.clock())
        usable, skipped = split_well_formed(windowed)
        for key in skipped:
            logger.warning("malformed_entry_skipped date=%s reason=bad_fields entry=%r", key, windowed[key])
        return build_monthly_analysis(usable, window_days)
