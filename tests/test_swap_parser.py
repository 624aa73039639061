"""
Pytest tests for raw swap event parsing (suix_queryEvents shape).
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from conftest import BASE_TS_MS, SUI_USDC_POOL, WALLET
from swap_insights.ingestion.parser import format_swap_for_display, parse_swap_event, parse_wallet_swaps

OTHER_WALLET = "0x1111111111111111111111111111111111111111111111111111111111111111"


def _raw(sender=WALLET, digest="Dg1", seq="0", ts=str(BASE_TS_MS), **payload):
    parsed = {
        "pool": SUI_USDC_POOL,
        "amount_in": "2000000000",
        "amount_out": "1500000",
        "atob": True,
        "after_sqrt_price": "18446744073709551616",
        "before_sqrt_price": "18446744073709551615",
        "fee_amount": "5000",
    }
    parsed.update(payload)
    return {
        "id": {"txDigest": digest, "eventSeq": seq},
        "timestampMs": ts,
        "sender": sender,
        "type": "0x1eab::pool::SwapEvent",
        "parsedJson": parsed,
    }


def test_parse_swap_event():
    swap = parse_swap_event(_raw())
    assert swap.id == "Dg1:0"
    assert swap.timestamp == BASE_TS_MS
    assert swap.sender == WALLET
    assert swap.pool == SUI_USDC_POOL
    assert swap.amount_in == "2000000000"
    assert swap.atob is True
    assert swap.fee_amount == "5000"
    assert swap.tx_digest == "Dg1"


def test_parse_numeric_amounts_become_strings():
    swap = parse_swap_event(_raw(amount_in=42, amount_out=7, seq=3))
    assert swap.amount_in == "42"
    assert swap.amount_out == "7"
    assert swap.id == "Dg1:3"


def test_parse_optional_fields_default():
    raw = _raw()
    for key in ("after_sqrt_price", "before_sqrt_price", "fee_amount"):
        del raw["parsedJson"][key]
    swap = parse_swap_event(raw)
    assert swap.fee_amount == "0"


@pytest.mark.parametrize(
    "mutate",
    [
        lambda r: r.pop("timestampMs"),
        lambda r: r.update(timestampMs="-5"),
        lambda r: r["parsedJson"].pop("pool"),
        lambda r: r["parsedJson"].update(atob="sideways"),
        lambda r: r["id"].update(txDigest=""),
    ],
)
def test_parse_rejects_malformed(mutate):
    raw = _raw()
    mutate(raw)
    with pytest.raises(ValidationError):
        parse_swap_event(raw)


def test_parse_wallet_swaps_filters_and_skips():
    """Only the wallet's own valid swaps are kept, in input order."""
    bad = _raw(digest="Dg3")
    del bad["parsedJson"]["amount_in"]
    events = [
        _raw(digest="Dg1"),
        _raw(sender=OTHER_WALLET, digest="Dg2"),
        bad,
        "not-an-event",
        _raw(digest="Dg4"),
    ]
    swaps = parse_wallet_swaps(events, WALLET)
    assert [s.tx_digest for s in swaps] == ["Dg1", "Dg4"]


def test_parse_wallet_swaps_limit():
    events = [_raw(digest=f"Dg{i}") for i in range(10)]
    swaps = parse_wallet_swaps(events, WALLET, limit=3)
    assert [s.tx_digest for s in swaps] == ["Dg0", "Dg1", "Dg2"]


def test_format_swap_for_display():
    view = format_swap_for_display(parse_swap_event(_raw()))
    assert view["pool"] == "SUI/USDC"
    assert view["side"] == "buy"
    assert view["sold"] == "2.00 SUI"
    assert view["bought"] == "1.50 USDC"
    assert view["timestamp"] == "2024-01-01T00:00:00+00:00"
    assert view["txHash"] == "Dg1"


def test_parse_wallet_swaps_default_limit_from_settings(settings_env):
    """Without an explicit limit, SWAP_FETCH_LIMIT caps the result."""
    settings_env.setenv("SWAP_FETCH_LIMIT", "2")
    events = [_raw(digest=f"Dg{i}") for i in range(5)]
    swaps = parse_wallet_swaps(events, WALLET)
    assert [s.tx_digest for s in swaps] == ["Dg0", "Dg1"]
