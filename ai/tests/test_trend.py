from reflection_engine.trend import classify_trend


def test_fewer_than_seven_entries_is_stable(make_entries):
    assert classify_trend(make_entries([1, 1, 1, 5, 5, 5])) == "stable"
    assert classify_trend(make_entries([])) == "stable"


def test_improving(make_entries):
    assert classify_trend(make_entries([2] * 7 + [4] * 7)) == "improving"


def test_declining(make_entries):
    assert classify_trend(make_entries([4] * 7 + [2] * 7)) == "declining"


def test_flat_is_stable(make_entries):
    assert classify_trend(make_entries([3] * 14)) == "stable"


def test_halves_follow_dates_not_insertion_order(make_entries):
    entries = make_entries([2] * 7 + [4] * 7)
    shuffled = dict(reversed(list(entries.items())))
    assert classify_trend(shuffled) == "improving"


def test_odd_count_extra_entry_goes_to_second_half(make_entries):
    # split at 3: [3,3,3] vs [5,3,3,3] -> +0.5
    # (a split at 4 would give [3,3,3,5] vs [3,3,3] -> -0.5)
    assert classify_trend(make_entries([3, 3, 3, 5, 3, 3, 3])) == "improving"


def test_threshold_is_exclusive(make_entries):
    exact = [3] * 10 + [3] * 7 + [4] * 3
    # 20 entries: first 10 mean 3.0, second 10 mean 3.3 -> exactly 0.3, not > 0.3
    assert classify_trend(make_entries(exact)) == "stable"
    just_over = [3] * 10 + [3] * 6 + [4] * 4
    assert classify_trend(make_entries(just_over)) == "improving"


def test_exact_boundary_without_float_drift(make_entries):
    # halves 3.3 and 3.6: float subtraction gives 0.30000000000000027
    first = [3] * 7 + [4] * 3
    second = [3] * 4 + [4] * 6
    assert classify_trend(make_entries(first + second)) == "stable"
    assert classify_trend(make_entries(second + first)) == "stable"
