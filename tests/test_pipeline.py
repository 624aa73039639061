"""
Pytest tests for the analytics pipeline (analyze -> decide -> store -> history).
"""

from __future__ import annotations

from datetime import datetime, timezone
from unittest.mock import patch

from conftest import BASE_TS_MS, HOUR_MS, WALLET
from swap_insights.analytics import load_analyses, run_wallet_analysis, update_analysis_cache
from swap_insights.core.exceptions import StorageError
from swap_insights.storage.locks import WalletLockRegistry
from swap_insights.storage.schema import StoredAnalysis



def _swaps(make_swap, count=40):
    return [make_swap(timestamp=BASE_TS_MS + i * HOUR_MS) for i in range(count)]


def test_pipeline_without_storage(analyzer, make_swap):
    result = run_wallet_analysis(WALLET, _swaps(make_swap), analyzer=analyzer)
    assert result["wallet"] == WALLET
    assert result["patterns"]["dataQuality"]["totalSwaps"] == 40
    assert result["stored"] is False
    assert result["analysis"] is None
    assert result["decision"] is None
    assert result["error"] is None


def test_pipeline_stores_then_skips(storage, analyzer, make_swap):
    locks = WalletLockRegistry()
    swaps = _swaps(make_swap)

    first = run_wallet_analysis(WALLET, swaps, storage=storage, locks=locks, analyzer=analyzer)
    assert first["stored"] is True
    assert first["decision"]["reason"] == "no_previous_analysis"
    assert first["analysis"]["metadata"]["blobId"]
    assert len(locks) == 1

    existing = StoredAnalysis.from_dict(first["analysis"])
    second = run_wallet_analysis(
        WALLET, swaps, storage=storage, existing=existing, locks=locks, analyzer=analyzer
    )
    assert second["stored"] is False
    assert second["decision"]["reason"] == "no_significant_change"
    assert second["analysis"] == first["analysis"]


def test_pipeline_store_failure_keeps_patterns(storage, analyzer, make_swap):
    with patch.object(storage.store, "write", side_effect=StorageError("publisher down")):
        result = run_wallet_analysis(WALLET, _swaps(make_swap), storage=storage, analyzer=analyzer)
    assert result["stored"] is False
    assert result["error"] == "publisher down"
    assert result["patterns"]["dataQuality"]["totalSwaps"] == 40
    assert result["decision"] is None


def test_pipeline_empty_wallet(storage, analyzer):
    result = run_wallet_analysis(f"  {WALLET} ", [], storage=storage, analyzer=analyzer)
    assert result["wallet"] == WALLET
    assert result["patterns"]["tradingPersonality"] == "No Trading Activity Detected"
    assert result["stored"] is True


def test_history_and_cache(storage, analyzer, make_swap):
    first = storage.store_analysis(WALLET, analyzer.analyze_patterns(WALLET, _swaps(make_swap, 10)))
    storage.clock = lambda: datetime(2025, 3, 2, tzinfo=timezone.utc)
    second = storage.store_analysis(WALLET, analyzer.analyze_patterns(WALLET, _swaps(make_swap, 60)))

    history = load_analyses(storage, [first.metadata.blob_id, "missing-blob"])
    assert [a.id for a in history] == [first.id]

    cache, blob_id = update_analysis_cache(storage, WALLET, history, second)
    assert blob_id
    assert len(cache.historical_analyses) == 2
    assert storage.get_analysis_cache(blob_id) == cache

    unsaved, none_id = update_analysis_cache(storage, WALLET, history, persist=False)
    assert none_id is None
    assert unsaved.historical_analyses == history


def test_cache_store_failure_returns_cache(storage, analyzer, make_swap):
    stored = storage.store_analysis(WALLET, analyzer.analyze_patterns(WALLET, _swaps(make_swap, 5)))
    with patch.object(storage.store, "write", side_effect=StorageError("down")):
        cache, blob_id = update_analysis_cache(storage, WALLET, [stored])
    assert blob_id is None
    assert cache.last_analysis == stored


def test_pipeline_decides_once(storage, analyzer, make_swap):
    """The reported decision is the one smart store acted on."""
    with patch.object(storage, "decide", wraps=storage.decide) as decide:
        result = run_wallet_analysis(WALLET, _swaps(make_swap), storage=storage, analyzer=analyzer)
    assert decide.call_count == 1
    assert result["decision"]["store"] is True
    assert result["decision"]["data_hash"] == result["analysis"]["metadata"]["dataHash"]
