#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Validate an entries JSON export ({"YYYY-MM-DD": {"rating": 4, "description": "..."}}).
Reports what the monthly analysis would skip.
"""
import os, json, argparse
from collections import Counter

from reflection_engine.models import DayEntry, MAX_DESCRIPTION_CHARS, parse_date_key, rating_label

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
DEFAULT_IN = os.path.join(ROOT, "data", "entries.json")


def check_entries(data):
    """Return (bad_dates, malformed, too_long, rating_counts)."""
    bad_dates, malformed, too_long = [], [], []
    rating_counts = Counter()
    for key, raw in data.items():
        if parse_date_key(key) is None:
            bad_dates.append(key)
            continue
        entry = DayEntry.from_dict(raw) if isinstance(raw, dict) else None
        if entry is None or not entry.is_well_formed():
            malformed.append(key)
            continue
        if len(entry.description) > MAX_DESCRIPTION_CHARS:
            too_long.append(key)
        rating_counts[rating_label(entry.rating)] += 1
    return bad_dates, malformed, too_long, rating_counts


def main(argv=None):
    ap = argparse.ArgumentParser()
    ap.add_argument("--src", default=DEFAULT_IN)
    args = ap.parse_args(argv)

    if not os.path.exists(args.src):
        raise SystemExit(f"not found: {args.src}")

    with open(args.src, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except ValueError as e:
            raise SystemExit(f"bad json: {e}")
    if not isinstance(data, dict):
        raise SystemExit("expected a JSON object keyed by date")

    bad_dates, malformed, too_long, rating_counts = check_entries(data)

    print("Records:", len(data))
    print("Bad date keys:", len(bad_dates), sorted(bad_dates)[:10])
    print("Malformed entries:", len(malformed), sorted(malformed)[:10])
    print("Descriptions over limit:", len(too_long))
    print("Rating counts:", dict(rating_counts))
    return 1 if (bad_dates or malformed) else 0


if __name__ == "__main__":
    raise SystemExit(main())
