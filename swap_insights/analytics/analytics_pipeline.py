"""
Analytics pipeline: run full wallet analysis (analyze -> decide -> store).

Single entrypoint for callers (tool layer, batch jobs): builds the profile,
smart-stores it when a storage backend is supplied, and folds stored
profiles into an AnalysisCache with aggregated insights.

A storage failure never loses the profile: the result reports stored=False
with the error, and the freshly computed patterns are still returned.
"""

from __future__ import annotations

from contextlib import nullcontext
from typing import Any, Iterable, Sequence

from swap_insights.analysis_engine.models import SwapEvent
from swap_insights.analysis_engine.patterns import SwapPatternAnalyzer
from swap_insights.behavioral_memory.engine import build_analysis_cache
from swap_insights.behavioral_memory.models import AnalysisCache
from swap_insights.core.exceptions import StorageError
from swap_insights.insights_logging import get_logger, short_wallet
from swap_insights.storage.locks import WalletLockRegistry
from swap_insights.storage.schema import StoredAnalysis
from swap_insights.storage.store import TradingAnalysisStorage

logger = get_logger(__name__)


def run_wallet_analysis(
    wallet: str,
    swaps: Sequence[SwapEvent],
    storage: TradingAnalysisStorage | None = None,
    existing: StoredAnalysis | None = None,
    locks: WalletLockRegistry | None = None,
    analyzer: SwapPatternAnalyzer | None = None,
) -> dict[str, Any]:
    """
    Analyze one wallet's swaps and, if storage is given, smart-store the profile.

    Returns dict: wallet, patterns, stored, analysis, decision, error.
    `analysis` is the newly stored analysis, or `existing` when skipped or failed.
    `decision` is None without storage or when the write failed.
    """
    wallet = (wallet or "").strip()
    analyzer = analyzer or SwapPatternAnalyzer()
    logger.info("analytics_pipeline_start", wallet=short_wallet(wallet), swaps=len(swaps))

    patterns = analyzer.analyze_patterns(wallet, swaps)
    result: dict[str, Any] = {
        "wallet": wallet,
        "patterns": patterns.to_dict(),
        "stored": False,
        "analysis": existing.to_dict() if existing else None,
        "decision": None,
        "error": None,
    }

    if storage is not None:
        guard = locks.hold(wallet) if locks is not None else nullcontext()
        with guard:
            try:
                outcome = storage.smart_store_analysis(wallet, patterns, existing)
            except StorageError as e:
                logger.warning("analytics_pipeline_store_failed", wallet=short_wallet(wallet), error=str(e))
                result["error"] = str(e)
            else:
                result["decision"] = outcome.decision.to_dict()
                result["stored"] = outcome.stored
                result["analysis"] = outcome.analysis.to_dict() if outcome.analysis else None

    logger.info(
        "analytics_pipeline_done",
        wallet=short_wallet(wallet),
        swap_count=patterns.data_quality.total_swaps,
        personality=patterns.trading_personality,
        stored=result["stored"],
    )
    return result


def load_analyses(storage: TradingAnalysisStorage, blob_ids: Iterable[str]) -> list[StoredAnalysis]:
    """Read stored analyses; missing or unreadable blobs are skipped."""
    analyses: list[StoredAnalysis] = []
    for blob_id in blob_ids:
        analysis = storage.get_analysis(blob_id)
        if analysis is not None:
            analyses.append(analysis)
    return analyses


def update_analysis_cache(
    storage: TradingAnalysisStorage,
    wallet: str,
    history: Sequence[StoredAnalysis],
    new_analysis: StoredAnalysis | None = None,
    persist: bool = True,
) -> tuple[AnalysisCache, str | None]:
    """
    Build the wallet's AnalysisCache (history + new_analysis) and optionally store it.

    Returns (cache, blob_id); blob_id is None when not persisted or the write failed.
    """
    cache = build_analysis_cache(wallet, history, new_analysis)
    if not persist:
        return cache, None
    try:
        return cache, storage.store_analysis_cache(cache)
    except StorageError as e:
        logger.warning("analysis_cache_store_failed", wallet=short_wallet(wallet), error=str(e))
        return cache, None
