from __future__ import annotations
from dataclasses import dataclass, asdict
from datetime import date, datetime
from typing import Dict, Optional, Any, Tuple
import re

# rating -> (bucket key, display label, emoji, color)
RATING_LEVELS: Dict[int, Tuple[str, str, str, str]] = {
    5: ("excellent", "Excellent", "😄", "#2ecc71"),
    4: ("good", "Good", "🙂", "#a2ddb8"),
    3: ("neutral", "Neutral", "😐", "#f1c40f"),
    2: ("bad", "Bad", "😕", "#e67e22"),
    1: ("terrible", "Terrible", "😞", "#e74c3c"),
}
BUCKETS = [RATING_LEVELS[r][0] for r in (5, 4, 3, 2, 1)]
UNRATED_COLOR = "#95a5a6"

MAX_DESCRIPTION_CHARS = 1512

TRENDS = ("improving", "declining", "stable")

_DATE_KEY = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class MalformedEntryError(ValueError):
    """A day entry that cannot be written (bad rating, description or date key)."""


def format_date(d: date) -> str:
    """YYYY-MM-DD, zero-padded."""
    return f"{d.year:04d}-{d.month:02d}-{d.day:02d}"


def parse_date_key(s: Any) -> Optional[date]:
    """Parse a YYYY-MM-DD key as a calendar date; None if it is not one."""
    if not isinstance(s, str) or not _DATE_KEY.match(s):
        return None
    try:
        return datetime.strptime(s, "%Y-%m-%d").date()
    except ValueError:
        return None


def is_valid_rating(rating: Any) -> bool:
    # bool is an int subclass; True must not count as a rating of 1
    return isinstance(rating, int) and not isinstance(rating, bool) and rating in RATING_LEVELS


def rating_label(rating: Any) -> Optional[str]:
    if not is_valid_rating(rating):
        return None
    return RATING_LEVELS[rating][1]


def rating_color(rating: Any) -> str:
    if not is_valid_rating(rating):
        return UNRATED_COLOR
    return RATING_LEVELS[rating][3]


def count_words(text: Optional[str]) -> int:
    return len((text or "").split())


@dataclass(frozen=True)
class DayEntry:
    rating: int                 # 1..5
    description: str = ""       # free text, up to MAX_DESCRIPTION_CHARS on write

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "DayEntry":
        # No validation here: stored data is read as-is and the analysis
        # pipeline decides what to skip.
        desc = raw.get("description")
        return cls(rating=raw.get("rating"), description="" if desc is None else desc)

    def is_well_formed(self) -> bool:
        return is_valid_rating(self.rating) and isinstance(self.description, str)

    def validate(self) -> "DayEntry":
        if not is_valid_rating(self.rating):
            raise MalformedEntryError(f"rating must be an integer 1..5, got {self.rating!r}")
        if not isinstance(self.description, str):
            raise MalformedEntryError("description must be a string")
        if len(self.description) > MAX_DESCRIPTION_CHARS:
            raise MalformedEntryError(f"description exceeds {MAX_DESCRIPTION_CHARS} characters")
        return self

    def to_dict(self):
        return asdict(self)


@dataclass(frozen=True)
class MonthlyAnalysis:
    period: str
    total_days: int
    rated_days: int
    average_rating: float
    rating_distribution: Dict[str, int]
    emotional_trend: str        # one of TRENDS
    top_themes: Tuple[str, ...] = ()
    insights: Tuple[str, ...] = ()
    recommendations: Tuple[str, ...] = ()

    def to_dict(self):
        d = asdict(self)
        d["rating_distribution"] = {b: self.rating_distribution.get(b, 0) for b in BUCKETS}
        d["top_themes"] = list(self.top_themes)
        d["insights"] = list(self.insights)
        d["recommendations"] = list(self.recommendations)
        return d


def empty_distribution() -> Dict[str, int]:
    return {b: 0 for b in BUCKETS}
