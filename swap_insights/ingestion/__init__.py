"""
Ingestion package — raw DEX swap events to typed SwapEvent records.

Fetching events from the chain is the swap source's job; this package only
validates and converts what it delivers.
"""

from swap_insights.ingestion.parser import (
    RawSwapEvent,
    format_swap_for_display,
    parse_swap_event,
    parse_wallet_swaps,
)

__all__ = [
    "RawSwapEvent",
    "format_swap_for_display",
    "parse_swap_event",
    "parse_wallet_swaps",
]
