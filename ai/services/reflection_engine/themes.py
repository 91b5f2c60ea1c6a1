from __future__ import annotations
from typing import List, Mapping, Tuple, Dict
import re
from .models import DayEntry

# Declaration order is the tie-break order for equal scores.
THEME_KEYWORDS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("work", ("work", "job", "project", "meeting", "deadline", "colleague")),
    ("social", ("friend", "family", "party", "dinner", "hangout", "visit")),
    ("health", ("exercise", "gym", "run", "workout", "health", "sleep")),
    ("learning", ("learn", "study", "read", "course", "book", "skill")),
    ("stress", ("stress", "anxiety", "worry", "pressure", "overwhelm")),
    ("achievement", ("accomplish", "achieve", "success", "complete", "finish", "win")),
)

MAX_THEMES = 3

# whole word equal to the stem or starting with it
_STEM_PATTERNS: Dict[str, "re.Pattern[str]"] = {
    stem: re.compile(rf"\b{re.escape(stem)}\w*\b")
    for _, stems in THEME_KEYWORDS
    for stem in stems
}


def _text_blob(entries: Mapping[str, DayEntry]) -> str:
    return " ".join((e.description or "").casefold() for e in entries.values())


def score_themes(entries: Mapping[str, DayEntry]) -> List[Tuple[str, int]]:
    """(theme, count) for every theme, in table order."""
    text = _text_blob(entries)
    scores = []
    for theme, stems in THEME_KEYWORDS:
        count = sum(len(_STEM_PATTERNS[s].findall(text)) for s in stems)
        scores.append((theme, count))
    return scores


def extract_themes(entries: Mapping[str, DayEntry], limit: int = MAX_THEMES) -> List[str]:
    # sorted() is stable, so equal counts keep table order
    ranked = sorted(score_themes(entries), key=lambda kv: kv[1], reverse=True)[:limit]
    return [theme.capitalize() for theme, count in ranked if count > 0]
