"""
Data models for wallet behavioral memory.

AnalysisCache is the ordered history of stored profiles for one wallet
plus the cross-time insights derived from it. Stored entries are never
modified; the cache only appends and summarizes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from swap_insights.storage.schema import StoredAnalysis


@dataclass
class AggregatedInsights:
    """
    Cross-time findings over two or more stored profiles.

    trading_evolution: style / primary-token changes, oldest to newest.
    consistency_score: mean sizing-consistency value (0.25-1.0), 2 decimals.
    improvement_areas: suggestions derived from the latest profile only.
    """

    trading_evolution: list[str]
    consistency_score: float
    improvement_areas: list[str]

    def to_dict(self) -> dict[str, Any]:
        return {
            "tradingEvolution": list(self.trading_evolution),
            "consistencyScore": self.consistency_score,
            "improvementAreas": list(self.improvement_areas),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AggregatedInsights:
        return cls(
            trading_evolution=list(data.get("tradingEvolution") or []),
            consistency_score=float(data["consistencyScore"]),
            improvement_areas=list(data.get("improvementAreas") or []),
        )


@dataclass
class AnalysisCache:
    wallet: str
    last_analysis: StoredAnalysis | None = None
    historical_analyses: list[StoredAnalysis] = field(default_factory=list)
    aggregated_insights: AggregatedInsights | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "wallet": self.wallet,
            "historicalAnalyses": [a.to_dict() for a in self.historical_analyses],
        }
        if self.last_analysis is not None:
            out["lastAnalysis"] = self.last_analysis.to_dict()
        if self.aggregated_insights is not None:
            out["aggregatedInsights"] = self.aggregated_insights.to_dict()
        return out

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AnalysisCache:
        last = data.get("lastAnalysis")
        insights = data.get("aggregatedInsights")
        return cls(
            wallet=data["wallet"],
            last_analysis=StoredAnalysis.from_dict(last) if last else None,
            historical_analyses=[
                StoredAnalysis.from_dict(a) for a in data.get("historicalAnalyses") or []
            ],
            aggregated_insights=AggregatedInsights.from_dict(insights) if insights else None,
        )
