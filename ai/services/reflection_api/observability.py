# -*- coding: utf-8 -*-
"""observability.py

Structured logs for the reflection service
------------------------------------------

Goals
- Make it obvious where a request stopped (store read, analysis, reminder).
- Every storage failure leaves both a JSON event line and a plain alert marker.

Policy
- logging only; JSON strings so log tooling can filter on ``event``.
- Entry descriptions are never written to logs: fields named in
  OBS_REDACT_FIELDS are replaced by their length.

Environment
- OBS_LOG_JSON=true/false (default true)
- OBS_ALERT_MARKERS_ENABLED=true/false (default true)
- OBS_ALERT_PREFIX (default "ALERT::")
- OBS_ALERT_KV_MAX_LEN (default 200)
- OBS_REDACT_FIELDS (default "description,text")
"""

from __future__ import annotations

import json
import logging
import os
import time
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Optional


OBS_LOG_JSON = (os.getenv("OBS_LOG_JSON", "true").strip().lower() != "false")
OBS_ALERT_MARKERS_ENABLED = (os.getenv("OBS_ALERT_MARKERS_ENABLED", "true").strip().lower() != "false")
OBS_ALERT_PREFIX = (os.getenv("OBS_ALERT_PREFIX", "ALERT::") or "ALERT::").strip() or "ALERT::"
try:
    OBS_ALERT_KV_MAX_LEN = int(os.getenv("OBS_ALERT_KV_MAX_LEN", "200") or "200")
except Exception:
    OBS_ALERT_KV_MAX_LEN = 200

OBS_REDACT_FIELDS = frozenset(
    k.strip()
    for k in (os.getenv("OBS_REDACT_FIELDS", "description,text") or "").split(",")
    if k.strip()
)


def redact_fields(fields: Dict[str, Any]) -> Dict[str, Any]:
    """Replace journal text with its length; the text itself never reaches a log line."""
    out: Dict[str, Any] = {}
    for k, v in (fields or {}).items():
        if k in OBS_REDACT_FIELDS and v is not None:
            n = len(v) if isinstance(v, str) else 0
            out[k] = f"<redacted len={n}>"
        else:
            out[k] = v
    return out


def _iso_now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _safe_default(o: Any) -> str:
    try:
        return str(o)
    except Exception:
        return repr(o)


def _safe_json_dumps(obj: Dict[str, Any]) -> str:
    return json.dumps(obj, ensure_ascii=False, separators=(",", ":"), default=_safe_default)


def log_event(logger: logging.Logger, event: str, *, level: str = "info", **fields: Any) -> None:
    """Write a structured event log.

    - level: info|warning|error|debug
    - event: stable identifier (e.g., analysis_complete)
    """
    payload: Dict[str, Any] = {
        "ts": _iso_now(),
        "event": event,
        **redact_fields(fields),
    }

    msg = _safe_json_dumps(payload) if OBS_LOG_JSON else f"{event} {payload}"

    try:
        fn = getattr(logger, level, logger.info)
        fn(msg)
    except Exception:
        # logging must never take the request down
        try:
            logger.info(msg)
        except Exception:
            pass


def _compact_kv(fields: Dict[str, Any]) -> str:
    """Single-line key=value rendering for alert markers, long values truncated."""
    parts = []
    for k, v in (fields or {}).items():
        if v is None:
            continue
        try:
            s = str(v)
        except Exception:
            s = repr(v)
        s = s.replace("\n", " ").replace("\r", " ").strip()
        if OBS_ALERT_KV_MAX_LEN > 0 and len(s) > OBS_ALERT_KV_MAX_LEN:
            s = s[: max(0, OBS_ALERT_KV_MAX_LEN - 3)] + "..."
        parts.append(f"{k}={s}")
    return " ".join(parts)


def log_alert(
    logger: logging.Logger,
    alert_key: str,
    *,
    level: str = "warning",
    message: Optional[str] = None,
    event: str = "alert",
    **fields: Any,
) -> None:
    """JSON event (event="alert", alert_key=...) plus an 'ALERT::KEY k=v' marker line."""
    safe_fields: Dict[str, Any] = dict(fields or {})
    safe_fields["alert_key"] = alert_key
    if message:
        safe_fields["message"] = message

    log_event(logger, event, level=level, **safe_fields)

    if OBS_ALERT_MARKERS_ENABLED:
        try:
            kv = _compact_kv(redact_fields({k: v for k, v in safe_fields.items() if k not in ("message",)}))
            line = f"{OBS_ALERT_PREFIX}{alert_key}"
            if kv:
                line = f"{line} {kv}"
            getattr(logger, level, logger.warning)(line)
        except Exception:
            pass


# ----------------------------
# Run context helpers
# ----------------------------

def new_run_id(prefix: str = "run") -> str:
    """Short run id for correlation."""
    return f"{prefix}_{uuid.uuid4().hex[:12]}"


def monotonic_ms() -> float:
    return time.monotonic() * 1000.0


def elapsed_ms(start_ms: float) -> int:
    try:
        return int(max(0.0, monotonic_ms() - float(start_ms)))
    except Exception:
        return 0
