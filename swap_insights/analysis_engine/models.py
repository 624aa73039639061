"""
Data models for pattern analysis input and output.

SwapEvent is one executed DEX trade as delivered by the swap source.
TradingPatterns is the behavioral profile derived from a wallet's swaps.
Profiles serialize to the camelCase JSON shape persisted in the analysis
store and are rebuilt from it with from_dict().
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

CONFIDENCE_LOW = "low"
CONFIDENCE_MEDIUM = "medium"
CONFIDENCE_HIGH = "high"

CONSISTENCY_VERY_CONSISTENT = "very_consistent"
CONSISTENCY_CONSISTENT = "consistent"
CONSISTENCY_VARIED = "varied"
CONSISTENCY_HIGHLY_VARIED = "highly_varied"

STYLE_HIGH_FREQUENCY = "high_frequency"
STYLE_ACTIVE = "active"
STYLE_MODERATE = "moderate"
STYLE_OCCASIONAL = "occasional"


@dataclass(frozen=True)
class SwapEvent:
    """
    One executed swap. Immutable once observed.

    Amounts are raw integer strings in the sold/bought token's smallest unit.
    atob=True means token A of the pool was sold for token B.
    """

    id: str
    """txDigest:eventSeq"""
    timestamp: int
    """Milliseconds since epoch."""
    sender: str
    pool: str
    amount_in: str
    amount_out: str
    atob: bool
    after_sqrt_price: str = "0"
    before_sqrt_price: str = "0"
    fee_amount: str = "0"
    tx_digest: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "timestamp": self.timestamp,
            "sender": self.sender,
            "pool": self.pool,
            "amountIn": self.amount_in,
            "amountOut": self.amount_out,
            "atob": self.atob,
            "afterSqrtPrice": self.after_sqrt_price,
            "beforeSqrtPrice": self.before_sqrt_price,
            "feeAmount": self.fee_amount,
            "txDigest": self.tx_digest,
        }


@dataclass
class DataQuality:
    total_swaps: int
    time_range: str
    data_confidence: str
    """low | medium | high"""

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalSwaps": self.total_swaps,
            "timeRange": self.time_range,
            "dataConfidence": self.data_confidence,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DataQuality:
        return cls(
            total_swaps=int(data["totalSwaps"]),
            time_range=data["timeRange"],
            data_confidence=data["dataConfidence"],
        )


@dataclass
class TokenShare:
    token: str
    percentage: int

    def to_dict(self) -> dict[str, Any]:
        return {"token": self.token, "percentage": self.percentage}


@dataclass
class TokenCategoryShares:
    """Rounded percentages of distinct tokens observed (not of trades)."""

    major: int = 0
    defi: int = 0
    other: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {"major": self.major, "defi": self.defi, "other": self.other}


@dataclass
class TokenPreferences:
    favorite_tokens: list[TokenShare]
    diversification: float
    """0-1; 1 = maximally diversified."""
    token_categories: TokenCategoryShares

    def to_dict(self) -> dict[str, Any]:
        return {
            "favoriteTokens": [t.to_dict() for t in self.favorite_tokens],
            "diversification": self.diversification,
            "tokenCategories": self.token_categories.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TokenPreferences:
        cats = data.get("tokenCategories") or {}
        return cls(
            favorite_tokens=[
                TokenShare(token=t["token"], percentage=t["percentage"])
                for t in data.get("favoriteTokens") or []
            ],
            diversification=data["diversification"],
            token_categories=TokenCategoryShares(
                major=cats.get("major", 0),
                defi=cats.get("defi", 0),
                other=cats.get("other", 0),
            ),
        )


@dataclass
class PoolShare:
    display_name: str
    percentage: int

    def to_dict(self) -> dict[str, Any]:
        return {"displayName": self.display_name, "percentage": self.percentage}


@dataclass
class PoolPreferences:
    favorite_pools: list[PoolShare]
    pool_count: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "favoritePools": [p.to_dict() for p in self.favorite_pools],
            "poolCount": self.pool_count,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PoolPreferences:
        return cls(
            favorite_pools=[
                PoolShare(display_name=p["displayName"], percentage=p["percentage"])
                for p in data.get("favoritePools") or []
            ],
            pool_count=int(data["poolCount"]),
        )


@dataclass
class TradeSizing:
    average_trade_size: str
    typical_range: str
    consistency: str
    """very_consistent | consistent | varied | highly_varied"""

    def to_dict(self) -> dict[str, Any]:
        return {
            "averageTradeSize": self.average_trade_size,
            "typicalRange": self.typical_range,
            "consistency": self.consistency,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TradeSizing:
        return cls(
            average_trade_size=data["averageTradeSize"],
            typical_range=data["typicalRange"],
            consistency=data["consistency"],
        )


@dataclass
class TradingRhythm:
    frequency: str
    average_time_between_trades: str
    trading_style: str
    """high_frequency | active | moderate | occasional"""

    def to_dict(self) -> dict[str, Any]:
        return {
            "frequency": self.frequency,
            "averageTimeBetweenTrades": self.average_time_between_trades,
            "tradingStyle": self.trading_style,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TradingRhythm:
        return cls(
            frequency=data["frequency"],
            average_time_between_trades=data["averageTimeBetweenTrades"],
            trading_style=data["tradingStyle"],
        )


@dataclass
class PeriodShare:
    period: str
    percentage: int

    def to_dict(self) -> dict[str, Any]:
        return {"period": self.period, "percentage": self.percentage}


@dataclass
class TimingPatterns:
    most_active_hour: str
    most_active_day: str
    time_distribution: list[PeriodShare]

    def to_dict(self) -> dict[str, Any]:
        return {
            "mostActiveHour": self.most_active_hour,
            "mostActiveDay": self.most_active_day,
            "timeDistribution": [p.to_dict() for p in self.time_distribution],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TimingPatterns:
        return cls(
            most_active_hour=data["mostActiveHour"],
            most_active_day=data["mostActiveDay"],
            time_distribution=[
                PeriodShare(period=p["period"], percentage=p["percentage"])
                for p in data.get("timeDistribution") or []
            ],
        )


@dataclass
class TradingPatterns:
    """
    Behavioral profile of one wallet at one point in time.

    Everything except analysis_date is a deterministic function of the
    swaps and classifier tables.
    """

    wallet: str
    analysis_date: str
    """ISO 8601 UTC, e.g. 2025-01-01T00:00:00.000Z"""
    data_quality: DataQuality
    token_preferences: TokenPreferences
    pool_preferences: PoolPreferences
    trading_sizing: TradeSizing
    trading_rhythm: TradingRhythm
    timing_patterns: TimingPatterns
    trading_personality: str
    key_insights: list[str] = field(default_factory=list)

    @property
    def top_token(self) -> str | None:
        favorites = self.token_preferences.favorite_tokens
        return favorites[0].token if favorites else None

    def to_dict(self) -> dict[str, Any]:
        return {
            "wallet": self.wallet,
            "analysisDate": self.analysis_date,
            "dataQuality": self.data_quality.to_dict(),
            "tokenPreferences": self.token_preferences.to_dict(),
            "poolPreferences": self.pool_preferences.to_dict(),
            "tradingSizing": self.trading_sizing.to_dict(),
            "tradingRhythm": self.trading_rhythm.to_dict(),
            "timingPatterns": self.timing_patterns.to_dict(),
            "tradingPersonality": self.trading_personality,
            "keyInsights": list(self.key_insights),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TradingPatterns:
        return cls(
            wallet=data["wallet"],
            analysis_date=data["analysisDate"],
            data_quality=DataQuality.from_dict(data["dataQuality"]),
            token_preferences=TokenPreferences.from_dict(data["tokenPreferences"]),
            pool_preferences=PoolPreferences.from_dict(data["poolPreferences"]),
            trading_sizing=TradeSizing.from_dict(data["tradingSizing"]),
            trading_rhythm=TradingRhythm.from_dict(data["tradingRhythm"]),
            timing_patterns=TimingPatterns.from_dict(data["timingPatterns"]),
            trading_personality=data["tradingPersonality"],
            key_insights=list(data.get("keyInsights") or []),
        )
