# -*- coding: utf-8 -*-
"""
Monthly Analysis API
--------------------
- GET /analysis/monthly?days=30          : MonthlyAnalysis for the trailing window
- GET /analysis/prompt?days=30&style=... : text prompt for an external assistant

The analysis is computed on read from one store snapshot. Nothing is cached or
persisted, and no external model is called.
"""

from __future__ import annotations

import logging
import os
from datetime import date
from typing import Callable, Dict, List, Literal, Optional

from fastapi import FastAPI, HTTPException, Query
from pydantic import BaseModel

from reflection_engine.monthly import DEFAULT_WINDOW_DAYS, MonthlyAnalyzer, split_well_formed
from reflection_engine.prompt import build_ai_prompt, build_simple_ai_prompt
from reflection_engine.window import select_window

from .entry_store import EntryStore, StorageFailure
from .observability import elapsed_ms, log_event, monotonic_ms, new_run_id

logger = logging.getLogger("analysis_api")

try:
    ANALYSIS_MAX_WINDOW_DAYS = int(os.getenv("ANALYSIS_MAX_WINDOW_DAYS", "365") or "365")
except ValueError:
    ANALYSIS_MAX_WINDOW_DAYS = 365


class MonthlyAnalysisResponse(BaseModel):
    period: str
    total_days: int
    rated_days: int
    average_rating: float
    rating_distribution: Dict[str, int]
    emotional_trend: Literal["improving", "declining", "stable"]
    top_themes: List[str]
    insights: List[str]
    recommendations: List[str]


class PromptResponse(BaseModel):
    style: str
    days: int
    entry_count: int
    prompt: str


def _clamp_days(days: int) -> int:
    return max(1, min(int(days), ANALYSIS_MAX_WINDOW_DAYS))


def register_analysis_routes(app: FastAPI, store: EntryStore, clock: Optional[Callable[[], date]] = None) -> None:
    """Attach the analysis endpoints, bound to ``store`` and ``clock``."""

    analyzer = MonthlyAnalyzer(store, clock=clock)

    @app.get("/analysis/monthly", response_model=MonthlyAnalysisResponse)
    async def monthly_analysis(days: int = Query(DEFAULT_WINDOW_DAYS)) -> MonthlyAnalysisResponse:
        run_id = new_run_id("analysis")
        window = _clamp_days(days)
        start_ms = monotonic_ms()
        try:
            report = await analyzer.analyze(window)
        except StorageFailure as exc:
            log_event(logger, "analysis_failed", level="error", run_id=run_id, window_days=window, error=str(exc))
            raise HTTPException(status_code=502, detail="Failed to load entries")
        log_event(
            logger,
            "analysis_complete",
            run_id=run_id,
            window_days=window,
            rated_days=report.rated_days,
            trend=report.emotional_trend,
            themes=len(report.top_themes),
            duration_ms=elapsed_ms(start_ms),
        )
        return MonthlyAnalysisResponse(**report.to_dict())

    @app.get("/analysis/prompt", response_model=PromptResponse)
    async def analysis_prompt(
        days: int = Query(DEFAULT_WINDOW_DAYS),
        style: Literal["full", "simple"] = Query("full"),
    ) -> PromptResponse:
        window = _clamp_days(days)
        try:
            snapshot = await store.get_all()
        except StorageFailure:
            raise HTTPException(status_code=502, detail="Failed to load entries")
        windowed, _ = split_well_formed(select_window(snapshot, window, today=analyzer.clock()))
        builder = build_simple_ai_prompt if style == "simple" else build_ai_prompt
        return PromptResponse(
            style=style,
            days=window,
            entry_count=len(windowed),
            prompt=builder(windowed, window),
        )
