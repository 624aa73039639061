"""
Analysis engine package — wallet trading-pattern profiles.

Consumes a wallet's DEX swap events, classifies pools and tokens with
injectable lookup tables, and produces a TradingPatterns profile.
Pure computation; no I/O.
"""

from swap_insights.analysis_engine.models import SwapEvent, TradingPatterns
from swap_insights.analysis_engine.patterns import (
    SwapPatternAnalyzer,
    analyze_patterns,
    classify_consistency,
    classify_trading_style,
)
from swap_insights.analysis_engine.tokens import (
    PoolInfo,
    StaticTokenMetadata,
    TokenClassifier,
    TokenMetadataProvider,
)

__all__ = [
    "SwapEvent",
    "TradingPatterns",
    "SwapPatternAnalyzer",
    "analyze_patterns",
    "classify_consistency",
    "classify_trading_style",
    "PoolInfo",
    "StaticTokenMetadata",
    "TokenClassifier",
    "TokenMetadataProvider",
]
