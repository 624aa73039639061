"""
Pytest fixtures for Swap Insights tests: swap factory, fixed clock, and a
temporary SQLite analysis store.
"""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

WALLET = "0x7d3c5e2f9a1b4c6d8e0f1a2b3c4d5e6f7a8b9c0d1e2f3a4b5c6d7e8f9a0b1c2d"
SUI_USDC_POOL = "0xcf994611fd4c48e277ce3ffd4d4364c914af2c3cbb05f7bf6facd371de688630"
CETUS_SUI_POOL = "0x5b0b24c27ccf6d0e98f3a8704d2e577de83fa574d3a9060eb8945eeb82b3e2df"
UNKNOWN_POOL = "0xdeadbeefcafe0000000000000000000000000000000000000000000000000000"
# 2024-01-01 00:00:00 UTC, a Monday
BASE_TS_MS = 1_704_067_200_000
MINUTE_MS = 60_000
HOUR_MS = 60 * MINUTE_MS
DAY_MS = 24 * HOUR_MS
FIXED_NOW = datetime(2025, 3, 1, 12, 0, 0, 250_000, tzinfo=timezone.utc)


@pytest.fixture
def make_swap():
    """Factory for SwapEvent records with sensible defaults."""
    from swap_insights.analysis_engine.models import SwapEvent

    counter = {"n": 0}

    def _make(
        timestamp: int = BASE_TS_MS,
        pool: str = SUI_USDC_POOL,
        amount_in: str = "1000000000",
        amount_out: str = "1000000",
        atob: bool = True,
        sender: str = WALLET,
    ) -> SwapEvent:
        counter["n"] += 1
        digest = f"digest{counter['n']}"
        return SwapEvent(
            id=f"{digest}:0",
            timestamp=timestamp,
            sender=sender,
            pool=pool,
            amount_in=amount_in,
            amount_out=amount_out,
            atob=atob,
            after_sqrt_price="18446744073709551616",
            before_sqrt_price="18446744073709551616",
            fee_amount="2500",
            tx_digest=digest,
        )

    return _make


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_NOW


@pytest.fixture
def analyzer(fixed_clock):
    from swap_insights.analysis_engine.patterns import SwapPatternAnalyzer

    return SwapPatternAnalyzer(clock=fixed_clock)


@pytest.fixture
def sql_store(tmp_path):
    """Fresh SQLite-backed analysis store per test."""
    from swap_insights.storage.sql_store import SqlAnalysisStore

    store = SqlAnalysisStore(f"sqlite:///{tmp_path / 'analysis.db'}")
    store.init_db()
    return store


@pytest.fixture
def storage(sql_store, fixed_clock):
    from swap_insights.storage.store import TradingAnalysisStorage

    return TradingAnalysisStorage(sql_store, signer="test-signer", clock=fixed_clock)


@pytest.fixture
def settings_env(monkeypatch):
    """monkeypatch with the settings cache cleared before and after the test."""
    from swap_insights.config import reset_settings_cache

    reset_settings_cache()
    yield monkeypatch
    reset_settings_cache()
