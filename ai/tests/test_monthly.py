import asyncio
import itertools
import logging
from datetime import timedelta

import pytest

from reflection_engine.insights import DEFAULT_RECOMMENDATIONS, NO_DATA_INSIGHT, NO_DATA_RECOMMENDATION
from reflection_engine.models import BUCKETS, DayEntry, format_date
from reflection_engine.monthly import MonthlyAnalyzer, build_monthly_analysis, round_rating


def _analyze(source, today, days=30):
    return asyncio.run(MonthlyAnalyzer(source, clock=lambda: today).analyze(days))


def test_empty_store_short_circuits(dict_source, today):
    report = _analyze(dict_source({}), today)
    assert report.rated_days == 0
    assert report.average_rating == 0
    assert report.emotional_trend == "stable"
    assert report.top_themes == ()
    assert report.insights == (NO_DATA_INSIGHT,)
    assert report.recommendations == (NO_DATA_RECOMMENDATION,)
    assert report.rating_distribution == {b: 0 for b in BUCKETS}
    assert report.period == "Last 30 Days"
    assert report.total_days == 30


def test_only_old_entries_is_empty_window(dict_source, today):
    old = {format_date(today - timedelta(days=40)): DayEntry(rating=5, description="work")}
    report = _analyze(dict_source(old), today)
    assert report.rated_days == 0
    assert report.insights == (NO_DATA_INSIGHT,)


def test_improving_month(dict_source, make_entries, today):
    report = _analyze(dict_source(make_entries([2] * 7 + [4] * 7)), today)
    assert report.rated_days == 14
    assert report.average_rating == 3.0
    assert report.emotional_trend == "improving"
    assert report.rating_distribution["bad"] == 7
    assert report.rating_distribution["good"] == 7


def test_declining_month(dict_source, make_entries, today):
    report = _analyze(dict_source(make_entries([4] * 7 + [2] * 7)), today)
    assert report.emotional_trend == "declining"
    assert any("declining" in i for i in report.insights)
    assert report.recommendations[0].startswith("Identify patterns")


def test_flat_month_without_notes_gets_defaults(dict_source, make_entries, today):
    report = _analyze(dict_source(make_entries([3] * 14)), today)
    assert report.top_themes == ()
    assert list(report.recommendations) == DEFAULT_RECOMMENDATIONS
    assert len(report.recommendations) <= 4


def test_distribution_sums_to_rated_days_and_average_in_range(dict_source, make_entries, today):
    for ratings in itertools.product([1, 2, 3, 4, 5], repeat=3):
        ratings = list(ratings) * 3
        report = _analyze(dict_source(make_entries(ratings)), today)
        assert sum(report.rating_distribution.values()) == report.rated_days == len(ratings)
        assert 1.0 <= report.average_rating <= 5.0
        assert report.average_rating == round_rating(sum(ratings), len(ratings))
        assert len(report.recommendations) <= 4
        assert report.insights


def test_round_half_away_from_zero():
    assert round_rating(13, 4) == 3.3      # 3.25
    assert round_rating(9, 4) == 2.3       # 2.25 (banker's rounding would give 2.2)
    assert round_rating(10, 3) == 3.3
    assert round_rating(0, 0) == 0


def test_malformed_entries_excluded_and_logged(dict_source, make_entries, today, caplog):
    entries = make_entries([4, 4, 4])
    entries[format_date(today - timedelta(days=5))] = DayEntry(rating=9, description="work work work")
    entries[format_date(today - timedelta(days=6))] = DayEntry(rating=True, description="")
    entries[format_date(today - timedelta(days=7))] = DayEntry(rating=3, description=42)
    entries["not-a-date"] = DayEntry(rating=1, description="")
    with caplog.at_level(logging.WARNING, logger="reflection_engine.monthly"):
        report = _analyze(dict_source(entries), today)
    assert report.rated_days == 3
    assert report.average_rating == 4.0
    assert report.top_themes == ()
    assert sum(report.rating_distribution.values()) == 3
    assert sum("malformed_entry_skipped" in r.getMessage() for r in caplog.records) == 4


def test_one_snapshot_per_call(dict_source, make_entries, today):
    source = dict_source(make_entries([3, 4]))
    _analyze(source, today)
    assert source.calls == 1


def test_storage_failure_propagates(today):
    class Broken:
        async def get_all(self):
            raise RuntimeError("disk gone")

    with pytest.raises(RuntimeError, match="disk gone"):
        _analyze(Broken(), today)


@pytest.mark.parametrize("days", [0, -3, True, "30"])
def test_invalid_window_rejected(dict_source, today, days):
    with pytest.raises(ValueError):
        _analyze(dict_source({}), today, days)


def test_custom_window_label(dict_source, make_entries, today):
    report = _analyze(dict_source(make_entries([5] * 3)), today, days=7)
    assert report.period == "Last 7 Days"
    assert report.total_days == 7


def test_report_is_immutable_and_serializable(make_entries):
    report = build_monthly_analysis(make_entries([5, 4, 3]), 30)
    with pytest.raises(Exception):
        report.rated_days = 10
    d = report.to_dict()
    assert list(d["rating_distribution"]) == BUCKETS
    assert isinstance(d["insights"], list)


def test_themes_flow_into_insights_and_recommendations(dict_source, make_entries, today):
    notes = ["stress and more stress at work", "worry and pressure", "deadline", "meeting", "friend", "slept"]
    report = _analyze(dict_source(make_entries([3, 3, 4, 3, 3, 4], notes)), today)
    assert report.top_themes == ("Stress", "Work", "Social")
    assert report.insights[-1] == "🔍 Main focus areas: Stress, Work, Social."
    assert report.recommendations[0].startswith("Practice stress management")
    assert len(report.recommendations) == 4
