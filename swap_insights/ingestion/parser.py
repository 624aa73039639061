"""
Swap event parser — raw Cetus SwapEvent payloads (suix_queryEvents shape)
to SwapEvent records.

Purely structural; no analysis. Raw events are validated with pydantic;
invalid events are skipped (with a warning) when parsing a batch.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Iterable

from pydantic import BaseModel, Field, ValidationError

from swap_insights.analysis_engine.models import SwapEvent
from swap_insights.analysis_engine.tokens import TokenClassifier
from swap_insights.config.settings import get_settings
from swap_insights.insights_logging import get_logger, short_wallet

logger = get_logger(__name__)


class RawEventId(BaseModel):
    tx_digest: str = Field(..., alias="txDigest", min_length=1)
    event_seq: str | int = Field(..., alias="eventSeq")


class RawSwapPayload(BaseModel):
    """parsedJson of a pool SwapEvent. Amounts arrive as decimal strings (or ints)."""

    pool: str = Field(..., min_length=1)
    amount_in: str | int
    amount_out: str | int
    atob: bool
    after_sqrt_price: str | int = "0"
    before_sqrt_price: str | int = "0"
    fee_amount: str | int = "0"


class RawSwapEvent(BaseModel):
    id: RawEventId
    timestamp_ms: int = Field(..., alias="timestampMs", ge=0)
    sender: str = Field(..., min_length=1)
    parsed_json: RawSwapPayload = Field(..., alias="parsedJson")

    def to_swap_event(self) -> SwapEvent:
        payload = self.parsed_json
        return SwapEvent(
            id=f"{self.id.tx_digest}:{self.id.event_seq}",
            timestamp=self.timestamp_ms,
            sender=self.sender,
            pool=payload.pool,
            amount_in=str(payload.amount_in),
            amount_out=str(payload.amount_out),
            atob=payload.atob,
            after_sqrt_price=str(payload.after_sqrt_price),
            before_sqrt_price=str(payload.before_sqrt_price),
            fee_amount=str(payload.fee_amount),
            tx_digest=self.id.tx_digest,
        )


def parse_swap_event(raw: dict[str, Any]) -> SwapEvent:
    """
    Convert one raw event to a SwapEvent.

    Raises:
        pydantic.ValidationError: missing or malformed fields.
    """
    return RawSwapEvent.model_validate(raw).to_swap_event()


def parse_wallet_swaps(
    raw_events: Iterable[dict[str, Any]],
    wallet: str,
    limit: int | None = None,
) -> list[SwapEvent]:
    """
    Keep the wallet's own swaps (sender == wallet), in input order.

    Events that fail validation are skipped. At most `limit` swaps are returned;
    limit defaults to SWAP_FETCH_LIMIT from settings.
    """
    if limit is None:
        limit = get_settings().swap_fetch_limit
    swaps: list[SwapEvent] = []
    skipped = 0
    for raw in raw_events:
        if not isinstance(raw, dict) or raw.get("sender") != wallet:
            continue
        try:
            swaps.append(parse_swap_event(raw))
        except ValidationError as e:
            skipped += 1
            logger.warning(
                "swap_event_invalid",
                wallet=short_wallet(wallet),
                errors=e.error_count(),
            )
            continue
        if len(swaps) >= limit:
            break
    logger.debug("swap_events_parsed", wallet=short_wallet(wallet), swaps=len(swaps), skipped=skipped)
    return swaps


def format_swap_for_display(swap: SwapEvent, classifier: TokenClassifier | None = None) -> dict[str, Any]:
    """Compact, human-readable view of one swap."""
    classifier = classifier or TokenClassifier()
    direction = classifier.swap_direction(swap.pool, swap.atob)
    return {
        "timestamp": datetime.fromtimestamp(swap.timestamp / 1000, tz=timezone.utc).isoformat(),
        "pool": classifier.pool_display_name(swap.pool),
        "side": "buy" if swap.atob else "sell",
        "sold": classifier.format_token_amount(swap.amount_in, direction.token_in),
        "bought": classifier.format_token_amount(swap.amount_out, direction.token_out),
        "amountIn": swap.amount_in,
        "amountOut": swap.amount_out,
        "fee": swap.fee_amount,
        "txHash": swap.tx_digest,
    }
