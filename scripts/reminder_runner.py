#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
reminder_runner.py

Thin cron script: asks the reflection service whether today's reminder should
fire and prints the decision. Any cron service works (system cron, GitHub
Actions, hosted cron jobs).

- Exits non-zero when the service cannot answer, so cron monitoring sees it.
- --json prints the raw decision for piping into a notifier.

Usage
  python scripts/reminder_runner.py
  REFLECTION_BASE_URL=http://localhost:8765 python scripts/reminder_runner.py --json

Env
- REFLECTION_BASE_URL (default http://localhost:8765)
- REMINDER_HTTP_TIMEOUT_SEC (default 10)
- REMINDER_RETRIES (default 2)
"""

from __future__ import annotations

import argparse
import json
import os
import sys
import time
from typing import Any, Dict, List, Optional

import httpx

ENDPOINT = "/reminder/daily"


def _get_json(client: httpx.Client, url: str, retries: int) -> Dict[str, Any]:
    last_err: Optional[Exception] = None
    for i in range(retries + 1):
        try:
            r = client.get(url)
            if r.status_code >= 300:
                try:
                    j = r.json()
                    detail = j.get("detail") if isinstance(j, dict) else None
                except Exception:
                    detail = None
                raise RuntimeError(f"HTTP {r.status_code} {detail or r.text[:300]}")
            j = r.json()
            if not isinstance(j, dict):
                raise RuntimeError("Invalid JSON response (not an object)")
            return j
        except Exception as e:
            last_err = e
            if i < retries:
                time.sleep(min(2 ** i, 10))
                continue
            break

    raise RuntimeError(f"Request failed after retries: {last_err}")


def main(argv: List[str]) -> int:
    parser = argparse.ArgumentParser()
    parser.add_argument("--base-url", default=os.getenv("REFLECTION_BASE_URL") or "http://localhost:8765")
    parser.add_argument("--timeout-sec", type=float, default=float(os.getenv("REMINDER_HTTP_TIMEOUT_SEC") or "10"))
    parser.add_argument("--retries", type=int, default=int(os.getenv("REMINDER_RETRIES") or "2"))
    parser.add_argument("--json", action="store_true", help="print the raw decision as JSON")
    args = parser.parse_args(argv)

    base_url = (args.base_url or "").strip().rstrip("/")
    if not base_url:
        print("ERROR: base_url is empty. Set REFLECTION_BASE_URL.", file=sys.stderr)
        return 2

    url = f"{base_url}{ENDPOINT}"
    try:
        with httpx.Client(timeout=max(1.0, float(args.timeout_sec))) as client:
            decision = _get_json(client, url, retries=max(0, int(args.retries)))
    except RuntimeError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(decision, ensure_ascii=False))
    elif decision.get("action") == "schedule":
        print(f"today={decision.get('today')} not rated yet -> reminder at {decision.get('fire_at')}")
    else:
        print(f"today={decision.get('today')} already rated -> reminder cancelled")
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
