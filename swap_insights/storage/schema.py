"""
Storage schema for trading analyses and the store-or-skip decision.

StoredAnalysis wraps a TradingPatterns profile with persistence metadata
(id, timestamp, schema version, content fingerprint). The external store
returns an opaque locator (blob id) which is the only field the pipeline
cannot fill in itself.

Change detection: a fresh profile is stored when there is no previous one,
when the swap count grew by more than 10%, or when the fingerprint differs.

The fingerprint covers swap count, top token, trading style and, by default,
the analysis date. Including the date means two profiles with identical
content computed at different times never match, so in practice the 10%
growth rule only matters for profiles stamped at the same instant. That
behavior is kept on purpose; pass include_analysis_date=False (or set
FINGERPRINT_INCLUDE_ANALYSIS_DATE=false) for a content-only fingerprint.
"""

from __future__ import annotations

import hashlib
import json
import math
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any

from swap_insights.analysis_engine.models import TradingPatterns
from swap_insights.analysis_engine.patterns import format_analysis_date
from swap_insights.config.env import DEFAULT_STORAGE_EPOCHS
from swap_insights.config.settings import Settings
from swap_insights.core.exceptions import InvalidArgumentError

STORAGE_VERSION = "1.0"
FINGERPRINT_LENGTH = 16
# Store again when swap count grows by more than this fraction
SWAP_GROWTH_THRESHOLD = 0.1

REASON_NO_PREVIOUS = "no_previous_analysis"
REASON_SWAP_GROWTH = "swap_count_growth"
REASON_FINGERPRINT_CHANGED = "fingerprint_changed"
REASON_NO_CHANGE = "no_significant_change"


@dataclass
class StorageConfig:
    network: str = "testnet"
    epochs: int = DEFAULT_STORAGE_EPOCHS
    """Storage duration in store epochs."""
    deletable: bool = True

    def __post_init__(self) -> None:
        if self.epochs <= 0:
            raise InvalidArgumentError(f"epochs must be > 0, got {self.epochs}")

    @classmethod
    def from_settings(cls, settings: Settings) -> StorageConfig:
        return cls(
            network=settings.walrus_network,
            epochs=settings.storage_epochs,
            deletable=settings.storage_deletable,
        )


DEFAULT_STORAGE_CONFIG = StorageConfig()


@dataclass
class StoredAnalysisMetadata:
    data_hash: str
    swap_count: int
    confidence_level: str
    expires_at: str | None = None
    blob_id: str | None = None
    """Locator returned by the store; None until persisted."""

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "dataHash": self.data_hash,
            "swapCount": self.swap_count,
            "confidenceLevel": self.confidence_level,
        }
        if self.expires_at is not None:
            out["expiresAt"] = self.expires_at
        if self.blob_id is not None:
            out["blobId"] = self.blob_id
        return out

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> StoredAnalysisMetadata:
        return cls(
            data_hash=data["dataHash"],
            swap_count=int(data["swapCount"]),
            confidence_level=data["confidenceLevel"],
            expires_at=data.get("expiresAt"),
            blob_id=data.get("blobId"),
        )


@dataclass
class StoredAnalysis:
    id: str
    wallet: str
    analysis: TradingPatterns
    stored_at: str
    version: str
    metadata: StoredAnalysisMetadata

    def with_blob_id(self, blob_id: str) -> StoredAnalysis:
        """Copy with the store locator set; self is left untouched."""
        return replace(self, metadata=replace(self.metadata, blob_id=blob_id))

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "wallet": self.wallet,
            "analysis": self.analysis.to_dict(),
            "storedAt": self.stored_at,
            "version": self.version,
            "metadata": self.metadata.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> StoredAnalysis:
        return cls(
            id=data["id"],
            wallet=data["wallet"],
            analysis=TradingPatterns.from_dict(data["analysis"]),
            stored_at=data["storedAt"],
            version=data.get("version", STORAGE_VERSION),
            metadata=StoredAnalysisMetadata.from_dict(data["metadata"]),
        )


@dataclass
class StoreDecision:
    store: bool
    reason: str
    data_hash: str
    swap_count: int
    swap_growth: float | None
    """Relative growth vs previous swap count; None without a previous analysis."""

    def to_dict(self) -> dict[str, Any]:
        return {
            "store": self.store,
            "reason": self.reason,
            "data_hash": self.data_hash,
            "swap_count": self.swap_count,
            "swap_growth": self.swap_growth,
        }


def generate_analysis_id(wallet: str, timestamp_ms: int) -> str:
    return f"analysis-{wallet[:8]}-{timestamp_ms}"


def generate_cache_id(wallet: str) -> str:
    return f"cache-{wallet}"


def fingerprint_fields(
    patterns: TradingPatterns,
    include_analysis_date: bool = True,
) -> dict[str, Any]:
    fields: dict[str, Any] = {
        "swapCount": patterns.data_quality.total_swaps,
        "topToken": patterns.top_token,
        "tradingStyle": patterns.trading_rhythm.trading_style,
    }
    if include_analysis_date:
        fields["analysisDate"] = patterns.analysis_date
    return fields


def hash_analysis_data(patterns: TradingPatterns, include_analysis_date: bool = True) -> str:
    """Short content fingerprint (16 hex chars of SHA-256 over canonical JSON)."""
    canonical = json.dumps(
        fingerprint_fields(patterns, include_analysis_date),
        sort_keys=True,
        separators=(",", ":"),
    )
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()[:FINGERPRINT_LENGTH]


def swap_growth(previous_count: int, new_count: int) -> float:
    """Relative swap-count growth. From a previous count of 0, any new swap is infinite growth."""
    if previous_count <= 0:
        return math.inf if new_count > previous_count else 0.0
    return (new_count - previous_count) / previous_count


def _decide(
    existing: StoredAnalysis | None,
    new_swap_count: int,
    new_data_hash: str,
) -> tuple[bool, str, float | None]:
    if existing is None:
        return True, REASON_NO_PREVIOUS, None
    growth = swap_growth(existing.metadata.swap_count, new_swap_count)
    if growth > SWAP_GROWTH_THRESHOLD:
        return True, REASON_SWAP_GROWTH, growth
    if existing.metadata.data_hash != new_data_hash:
        return True, REASON_FINGERPRINT_CHANGED, growth
    return False, REASON_NO_CHANGE, growth


def should_update_analysis(
    existing: StoredAnalysis | None,
    new_swap_count: int,
    new_data_hash: str,
) -> bool:
    """True when there is no previous analysis, swaps grew >10%, or the fingerprint changed."""
    return _decide(existing, new_swap_count, new_data_hash)[0]


def decide_store(
    patterns: TradingPatterns,
    existing: StoredAnalysis | None,
    include_analysis_date: bool = True,
) -> StoreDecision:
    """Pure store-or-skip decision for a fresh profile against the last stored one."""
    data_hash = hash_analysis_data(patterns, include_analysis_date)
    swap_count = patterns.data_quality.total_swaps
    store, reason, growth = _decide(existing, swap_count, data_hash)
    return StoreDecision(
        store=store,
        reason=reason,
        data_hash=data_hash,
        swap_count=swap_count,
        swap_growth=growth,
    )


def build_stored_analysis(
    wallet: str,
    patterns: TradingPatterns,
    now: datetime,
    include_analysis_date: bool = True,
) -> StoredAnalysis:
    """Payload handed to the store (no locator yet)."""
    timestamp_ms = int(now.timestamp() * 1000)
    return StoredAnalysis(
        id=generate_analysis_id(wallet, timestamp_ms),
        wallet=wallet,
        analysis=patterns,
        stored_at=format_analysis_date(now),
        version=STORAGE_VERSION,
        metadata=StoredAnalysisMetadata(
            data_hash=hash_analysis_data(patterns, include_analysis_date),
            swap_count=patterns.data_quality.total_swaps,
            confidence_level=patterns.data_quality.data_confidence,
        ),
    )
