"""
Trading analysis storage: shapes payloads for the external blob store and
applies the store-or-skip decision.

The store itself (Walrus over HTTP, or the local SQL store) is injected as
an AnalysisStore. This module never deals with transport or auth; it builds
the JSON payload, hands it over with the storage duration and signer, and
interprets the returned locator.

One store decision per wallet at a time is assumed. Callers that analyze
the same wallet concurrently must serialize through WalletLockRegistry.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Callable, Protocol

from swap_insights.analysis_engine.models import TradingPatterns
from swap_insights.analysis_engine.patterns import utc_now
from swap_insights.behavioral_memory.models import AnalysisCache
from swap_insights.config.settings import Settings
from swap_insights.core.exceptions import SignerRequiredError, StorageError
from swap_insights.insights_logging import get_logger, short_wallet
from swap_insights.storage.schema import (
    DEFAULT_STORAGE_CONFIG,
    StorageConfig,
    StoreDecision,
    StoredAnalysis,
    build_stored_analysis,
    decide_store,
    generate_cache_id,
)

logger = get_logger(__name__)

CONTENT_TYPE_JSON = "application/json"


class AnalysisStore(Protocol):
    """Content-addressed blob store. write() returns an opaque locator (blob id)."""

    def write(
        self,
        content: bytes,
        *,
        identifier: str,
        epochs: int,
        deletable: bool,
        signer: Any,
    ) -> str: ...

    def read(self, blob_id: str) -> bytes | None: ...


@dataclass
class SmartStoreResult:
    """
    stored=False means the previous analysis was returned unchanged; it does
    not reflect the latest swaps.
    """

    stored: bool
    analysis: StoredAnalysis | None
    decision: StoreDecision

    def to_dict(self) -> dict[str, Any]:
        return {
            "stored": self.stored,
            "analysis": self.analysis.to_dict() if self.analysis else None,
            "decision": self.decision.to_dict(),
        }


def _encode(payload: dict[str, Any]) -> bytes:
    return json.dumps(payload, indent=2).encode("utf-8")


class TradingAnalysisStorage:
    """
    Args:
        store: Blob store the payloads are written to.
        config: Storage duration / deletable flag.
        signer: Signing credential passed through to the store; writes fail without it.
        clock: Returns the current aware datetime (storage timestamps and ids).
        include_analysis_date: Keep the analysis date in the change fingerprint.
    """

    def __init__(
        self,
        store: AnalysisStore,
        config: StorageConfig | None = None,
        signer: Any = None,
        clock: Callable[[], Any] | None = None,
        include_analysis_date: bool = True,
    ) -> None:
        self.store = store
        self.config = config or DEFAULT_STORAGE_CONFIG
        self.signer = signer
        self.clock = clock or utc_now
        self.include_analysis_date = include_analysis_date
        logger.info(
            "analysis_storage_init",
            network=self.config.network,
            epochs=self.config.epochs,
            store=type(store).__name__,
        )

    @classmethod
    def from_settings(
        cls,
        store: AnalysisStore,
        settings: Settings,
        signer: Any = None,
    ) -> TradingAnalysisStorage:
        return cls(
            store,
            config=StorageConfig.from_settings(settings),
            signer=signer,
            include_analysis_date=settings.fingerprint_include_analysis_date,
        )

    def set_signer(self, signer: Any) -> None:
        self.signer = signer

    def _write(self, payload: dict[str, Any], identifier: str) -> str:
        if self.signer is None:
            raise SignerRequiredError()
        return self.store.write(
            _encode(payload),
            identifier=identifier,
            epochs=self.config.epochs,
            deletable=self.config.deletable,
            signer=self.signer,
        )

    def _read_json(self, blob_id: str) -> dict[str, Any] | None:
        content = self.store.read(blob_id)
        if content is None:
            return None
        return json.loads(content.decode("utf-8"))

    def store_analysis(self, wallet: str, patterns: TradingPatterns) -> StoredAnalysis:
        """
        Write the profile and return a new StoredAnalysis carrying the blob id.

        Raises:
            SignerRequiredError: no signer configured.
            StorageError: the store rejected the write.
        """
        stored = build_stored_analysis(
            wallet, patterns, self.clock(), include_analysis_date=self.include_analysis_date
        )
        blob_id = self._write(stored.to_dict(), identifier=f"{stored.id}.json")
        logger.info(
            "analysis_stored",
            wallet=short_wallet(wallet),
            analysis_id=stored.id,
            blob_id=blob_id,
            swap_count=stored.metadata.swap_count,
        )
        return stored.with_blob_id(blob_id)

    def get_analysis(self, blob_id: str) -> StoredAnalysis | None:
        """Read a stored analysis back; None if missing or unreadable."""
        try:
            data = self._read_json(blob_id)
            if data is None:
                logger.info("analysis_not_found", blob_id=blob_id)
                return None
            return StoredAnalysis.from_dict(data)
        except (StorageError, KeyError, TypeError, ValueError) as e:
            logger.warning("analysis_read_failed", blob_id=blob_id, error=str(e))
            return None

    def store_analysis_cache(self, cache: AnalysisCache) -> str:
        cache_id = generate_cache_id(cache.wallet)
        blob_id = self._write(cache.to_dict(), identifier=f"{cache_id}.json")
        logger.info(
            "analysis_cache_stored",
            wallet=short_wallet(cache.wallet),
            blob_id=blob_id,
            analyses=len(cache.historical_analyses),
        )
        return blob_id

    def get_analysis_cache(self, blob_id: str) -> AnalysisCache | None:
        try:
            data = self._read_json(blob_id)
            if data is None:
                return None
            return AnalysisCache.from_dict(data)
        except (StorageError, KeyError, TypeError, ValueError) as e:
            logger.warning("analysis_cache_read_failed", blob_id=blob_id, error=str(e))
            return None

    def decide(self, patterns: TradingPatterns, existing: StoredAnalysis | None) -> StoreDecision:
        return decide_store(patterns, existing, include_analysis_date=self.include_analysis_date)

    def smart_store_analysis(
        self,
        wallet: str,
        patterns: TradingPatterns,
        existing: StoredAnalysis | None = None,
    ) -> SmartStoreResult:
        """
        Store only when the profile differs materially from `existing`.

        On skip the previous StoredAnalysis is returned as-is.
        """
        decision = self.decide(patterns, existing)
        if not decision.store:
            logger.info(
                "analysis_store_skipped",
                wallet=short_wallet(wallet),
                reason=decision.reason,
                swap_count=decision.swap_count,
            )
            return SmartStoreResult(stored=False, analysis=existing, decision=decision)

        stored = self.store_analysis(wallet, patterns)
        return SmartStoreResult(stored=True, analysis=stored, decision=decision)
