"""
Pytest tests for token / pool classification and amount normalization.
"""

from __future__ import annotations

import pytest

from conftest import CETUS_SUI_POOL, SUI_USDC_POOL, UNKNOWN_POOL
from swap_insights.analysis_engine.tokens import (
    CATEGORY_DEFI,
    CATEGORY_MAJOR,
    CATEGORY_OTHER,
    UNKNOWN_TOKEN,
    PoolInfo,
    StaticTokenMetadata,
    TokenClassifier,
)



class _EmptyProvider:
    """Provider that knows nothing; classifier falls back to defaults."""

    def pool_info(self, pool_id):
        return None

    def decimals(self, symbol):
        return None

    def rate(self, symbol):
        return None


# --- Pools ---


def test_known_pool_tokens():
    classifier = TokenClassifier()
    assert classifier.tokens_from_pool(SUI_USDC_POOL) == ("SUI", "USDC")
    assert classifier.tokens_from_pool(CETUS_SUI_POOL) == ("CETUS", "SUI")
    assert classifier.pool_display_name(SUI_USDC_POOL) == "SUI/USDC"


def test_unknown_pool_fallback():
    """Unknown pools yield UNKNOWN tokens and a label from the id prefix."""
    classifier = TokenClassifier()
    info = classifier.pool_info(UNKNOWN_POOL)
    assert (info.token_a, info.token_b) == (UNKNOWN_TOKEN, UNKNOWN_TOKEN)
    assert info.display_name == "Pool:0xdeadbe..."
    assert info.pool_id == UNKNOWN_POOL


def test_swap_direction_follows_atob():
    classifier = TokenClassifier()
    a_to_b = classifier.swap_direction(SUI_USDC_POOL, True)
    assert (a_to_b.token_in, a_to_b.token_out) == ("SUI", "USDC")
    b_to_a = classifier.swap_direction(SUI_USDC_POOL, False)
    assert (b_to_a.token_in, b_to_a.token_out) == ("USDC", "SUI")


# --- Categories ---


def test_categorize_tokens():
    classifier = TokenClassifier()
    assert classifier.categorize_token("SUI") == CATEGORY_MAJOR
    assert classifier.categorize_token("USDT") == CATEGORY_MAJOR
    assert classifier.categorize_token("CETUS") == CATEGORY_DEFI
    assert classifier.categorize_token("WAL") == CATEGORY_DEFI
    assert classifier.categorize_token("FOO") == CATEGORY_OTHER

    cats = classifier.categorize_tokens(["SUI", "CETUS", "FOO", "USDC"])
    assert cats.major == ["SUI", "USDC"]
    assert cats.defi == ["CETUS"]
    assert cats.other == ["FOO"]


def test_custom_category_sets():
    classifier = TokenClassifier(major_tokens={"SUI"}, protocol_tokens={"FOO"})
    assert classifier.categorize_token("USDC") == CATEGORY_OTHER
    assert classifier.categorize_token("FOO") == CATEGORY_DEFI


# --- Amounts ---


def test_normalize_amount_uses_decimals():
    classifier = TokenClassifier()
    assert classifier.normalize_amount("1500000", "USDC") == pytest.approx(1.5)
    assert classifier.normalize_amount("1000000000", "SUI") == pytest.approx(1.0)
    # unknown token defaults to 9 decimals
    assert classifier.normalize_amount("2000000000", "FOO") == pytest.approx(2.0)


def test_normalize_amount_unparseable_is_zero():
    classifier = TokenClassifier()
    assert classifier.normalize_amount("abc", "SUI") == 0
    assert classifier.normalize_amount("", "SUI") == 0


def test_to_common_unit_applies_rate():
    classifier = TokenClassifier()
    assert classifier.to_common_unit("1000000000000", "CETUS") == pytest.approx(25.0)
    assert classifier.to_common_unit("5000000", "USDC") == pytest.approx(5.0)
    # unknown token: rate 1.0
    assert classifier.to_common_unit("3000000000", "FOO") == pytest.approx(3.0)


def test_injected_metadata_overrides_tables():
    """Pools, decimals and rates passed in are merged over the built-in tables."""
    provider = StaticTokenMetadata(
        pools={"0xabc": PoolInfo("0xabc", "FOO", "SUI", "FOO/SUI")},
        decimals={"FOO": 6},
        rates={"FOO": 2.0},
    )
    classifier = TokenClassifier(provider)
    assert classifier.tokens_from_pool("0xabc") == ("FOO", "SUI")
    assert classifier.to_common_unit("3000000", "FOO") == pytest.approx(6.0)
    # built-ins still present
    assert classifier.tokens_from_pool(SUI_USDC_POOL) == ("SUI", "USDC")


def test_provider_without_data_uses_defaults():
    classifier = TokenClassifier(_EmptyProvider())
    assert classifier.tokens_from_pool(SUI_USDC_POOL) == (UNKNOWN_TOKEN, UNKNOWN_TOKEN)
    assert classifier.to_common_unit("1000000000", "USDC") == pytest.approx(1.0)


def test_format_amounts():
    classifier = TokenClassifier()
    assert classifier.format_token_amount("1500000", "USDC") == "1.50 USDC"
    assert classifier.format_token_amount("2500000000000", "SUI") == "2.50K SUI"
    assert classifier.format_common_unit("1000000000000", "CETUS") == "25.00 SUI equiv"


# --- Preferences ---


def test_token_and_pool_preferences():
    classifier = TokenClassifier()
    pools = [SUI_USDC_POOL, SUI_USDC_POOL, CETUS_SUI_POOL]

    tokens = classifier.token_preferences(pools)
    assert [(t.token, t.count) for t in tokens] == [("SUI", 3), ("USDC", 2), ("CETUS", 1)]
    assert tokens[0].percentage == pytest.approx(50.0)

    by_pool = classifier.pool_preferences(pools)
    assert [(p.display_name, p.count) for p in by_pool] == [("SUI/USDC", 2), ("CETUS/SUI", 1)]
    assert by_pool[0].percentage == pytest.approx(200 / 3)
