"""
Behavioral memory engine: cross-time insights over stored trading profiles.

Orders a wallet's stored analyses by storage time, reports style and
primary-token shifts between consecutive profiles, scores sizing
consistency over time, and suggests improvement areas from the latest
profile. Rule-based; no ML. Inputs are never mutated.
"""

from __future__ import annotations

from datetime import datetime
from typing import Sequence

from swap_insights.analysis_engine.models import (
    CONFIDENCE_LOW,
    CONSISTENCY_CONSISTENT,
    CONSISTENCY_HIGHLY_VARIED,
    CONSISTENCY_VARIED,
    CONSISTENCY_VERY_CONSISTENT,
)
from swap_insights.analysis_engine.statistics import mean, round_half_up
from swap_insights.behavioral_memory.models import AggregatedInsights, AnalysisCache
from swap_insights.insights_logging import get_logger, short_wallet
from swap_insights.storage.schema import StoredAnalysis

logger = get_logger(__name__)

# Minimum number of stored profiles to aggregate
MIN_ANALYSES_FOR_INSIGHTS = 2
CONSISTENCY_SCORES = {
    CONSISTENCY_VERY_CONSISTENT: 1.0,
    CONSISTENCY_CONSISTENT: 0.75,
    CONSISTENCY_VARIED: 0.5,
    CONSISTENCY_HIGHLY_VARIED: 0.25,
}
# Latest profile below this major-token share gets a liquidity suggestion
MAJOR_TOKEN_FOCUS_MIN_PCT = 50

IMPROVE_VOLUME = "Increase trading volume for better pattern recognition"
IMPROVE_SIZING = "Consider more consistent position sizing"
IMPROVE_LIQUIDITY = "Focus on major tokens for better liquidity"


def _stored_at(analysis: StoredAnalysis) -> datetime:
    # fromisoformat only accepts a trailing Z from Python 3.11
    return datetime.fromisoformat(analysis.stored_at.replace("Z", "+00:00"))


def sort_by_stored_at(analyses: Sequence[StoredAnalysis]) -> list[StoredAnalysis]:
    """Oldest first; a new list, input order untouched."""
    return sorted(analyses, key=_stored_at)


def generate_aggregated_insights(analyses: Sequence[StoredAnalysis]) -> AggregatedInsights | None:
    """
    Derive evolution notes, consistency score, and improvement areas.

    Returns None when fewer than two analyses are supplied.
    """
    if len(analyses) < MIN_ANALYSES_FOR_INSIGHTS:
        return None

    ordered = sort_by_stored_at(analyses)
    evolution: list[str] = []
    scores: list[float] = []

    for prev_stored, curr_stored in zip(ordered, ordered[1:]):
        prev = prev_stored.analysis
        curr = curr_stored.analysis

        prev_style = prev.trading_rhythm.trading_style
        curr_style = curr.trading_rhythm.trading_style
        if prev_style != curr_style:
            evolution.append(f"Trading style evolved from {prev_style} to {curr_style}")

        prev_top = prev.top_token
        curr_top = curr.top_token
        if prev_top and curr_top and prev_top != curr_top:
            evolution.append(f"Shifted primary focus from {prev_top} to {curr_top}")

        scores.append(CONSISTENCY_SCORES.get(curr.trading_sizing.consistency, 0.25))

    latest = ordered[-1].analysis
    improvement: list[str] = []
    if latest.data_quality.data_confidence == CONFIDENCE_LOW:
        improvement.append(IMPROVE_VOLUME)
    if latest.trading_sizing.consistency == CONSISTENCY_HIGHLY_VARIED:
        improvement.append(IMPROVE_SIZING)
    if latest.token_preferences.token_categories.major < MAJOR_TOKEN_FOCUS_MIN_PCT:
        improvement.append(IMPROVE_LIQUIDITY)

    insights = AggregatedInsights(
        trading_evolution=evolution,
        consistency_score=round_half_up(mean(scores), 2),
        improvement_areas=improvement,
    )
    logger.debug(
        "aggregated_insights",
        wallet=short_wallet(latest.wallet),
        analyses=len(ordered),
        evolution_notes=len(evolution),
        consistency_score=insights.consistency_score,
    )
    return insights


def build_analysis_cache(
    wallet: str,
    analyses: Sequence[StoredAnalysis],
    new_analysis: StoredAnalysis | None = None,
) -> AnalysisCache:
    """
    Return a new AnalysisCache holding the history (plus new_analysis, if given).

    An analysis whose id is already in the history is not appended twice.
    """
    history = list(analyses)
    if new_analysis is not None and all(a.id != new_analysis.id for a in history):
        history.append(new_analysis)
    ordered = sort_by_stored_at(history)
    return AnalysisCache(
        wallet=wallet,
        last_analysis=ordered[-1] if ordered else None,
        historical_analyses=ordered,
        aggregated_insights=generate_aggregated_insights(ordered),
    )
