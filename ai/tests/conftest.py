from datetime import date, datetime, timedelta

import pytest

from reflection_engine.models import DayEntry, format_date

TODAY = date(2025, 10, 28)


class DictSource:
    """Minimal async source for the analyzer."""

    def __init__(self, entries):
        self.entries = dict(entries)
        self.calls = 0

    async def get_all(self):
        self.calls += 1
        return dict(self.entries)


def consecutive_entries(ratings, descriptions=None, end=TODAY):
    """Entries on consecutive days ending at ``end``, oldest first."""
    descriptions = descriptions or [""] * len(ratings)
    n = len(ratings)
    return {
        format_date(end - timedelta(days=n - 1 - i)): DayEntry(rating=r, description=d)
        for i, (r, d) in enumerate(zip(ratings, descriptions))
    }


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def make_entries():
    return consecutive_entries


@pytest.fixture
def dict_source():
    return DictSource


@pytest.fixture
def fixed_now():
    return lambda: datetime(2025, 10, 28, 18, 30)
