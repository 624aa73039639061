"""
Swap Insights log output.

One structlog pipeline for the analyzer, the stores and the pipeline.
Every line carries event_type, level, logger name and a UTC timestamp.
Wallet addresses are 66-character hex strings; `wallet` and `wallet_id`
fields are cut to a 16-character prefix so a profile run reads on one line.

LOG_FORMAT=json (default) renders JSON lines for collectors; anything else
renders the colored console view used when running analyses locally.
LOG_LEVEL picks the threshold (default INFO); the analysis core only logs at
debug, so INFO shows store decisions and pipeline runs.

Imports nothing from swap_insights so every module can import it first.
"""

from __future__ import annotations

import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any

import structlog

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_LEVEL_VALUE = getattr(logging, LOG_LEVEL, logging.INFO)
LOG_FORMAT = os.getenv("LOG_FORMAT", "json").strip().lower()

WALLET_PREFIX_LEN = 16
_WALLET_KEYS = ("wallet", "wallet_id")


def short_wallet(wallet: str) -> str:
    """First 16 characters of a wallet address plus '...'; shorter values unchanged."""
    wallet = wallet or ""
    if len(wallet) > WALLET_PREFIX_LEN:
        return wallet[:WALLET_PREFIX_LEN] + "..."
    return wallet


def _add_timestamp(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    if "timestamp" not in event_dict:
        event_dict["timestamp"] = datetime.now(timezone.utc).isoformat()
    return event_dict


def _shorten_wallets(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Cut full addresses passed as wallet / wallet_id; already-short values pass through."""
    for key in _WALLET_KEYS:
        value = event_dict.get(key)
        if isinstance(value, str) and not value.endswith("..."):
            event_dict[key] = short_wallet(value)
    return event_dict


def _event_type(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """structlog's positional 'event' becomes event_type (e.g. analysis_store_skipped)."""
    if "event" in event_dict and "event_type" not in event_dict:
        event_dict["event_type"] = event_dict.pop("event")
    if "message" not in event_dict and "event_type" in event_dict:
        event_dict["message"] = str(event_dict["event_type"])
    return event_dict


def configure_structlog() -> None:
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        _add_timestamp,
        _shorten_wallets,
        _event_type,
    ]
    if LOG_FORMAT == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(LOG_LEVEL_VALUE),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )


if not structlog.is_configured():
    configure_structlog()


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Module logger with `logger=<name>` bound.

        logger = get_logger(__name__)
        logger.info("analysis_stored", wallet=wallet, blob_id=blob_id, swap_count=60)

    JSON: {"event_type": "analysis_stored", "wallet": "0x7d3c5e2f9a1b4c...",
    "blob_id": "...", "swap_count": 60, "level": "info", "logger": "...", "timestamp": "..."}
    """
    return structlog.get_logger(name).bind(logger=name)


def bind_wallet(wallet_id: str) -> structlog.BoundLogger:
    """Logger for one wallet's profile run; wallet_id is on every line."""
    return get_logger("swap_insights").bind(wallet_id=wallet_id)
