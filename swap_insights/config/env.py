"""
Environment variable loading and validation for Swap Insights.

- WALRUS_NETWORK: testnet | mainnet (default: testnet)
- WALRUS_PUBLISHER_URL / WALRUS_AGGREGATOR_URL: HTTP endpoints (default per network)
- ANALYSIS_STORAGE_EPOCHS: storage duration in epochs (default 10)
- ANALYSIS_STORAGE_DELETABLE: whether stored blobs are deletable (default true)
- ANALYSIS_DB_URL / ANALYSIS_DB_PATH: local SQL store (default SQLite swap_insights.db)
- SWAP_FETCH_LIMIT: max swaps handed to the engine per wallet (default 100)
- FINGERPRINT_INCLUDE_ANALYSIS_DATE: keep analysis date in the change fingerprint (default true)
- Loads .env from project root when available.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

from swap_insights.core.exceptions import InvalidArgumentError

# Project root: config is swap_insights/config/, root is 2 levels up
_CONFIG_DIR = Path(__file__).resolve().parent
_PACKAGE_DIR = _CONFIG_DIR.parent
_ROOT = _PACKAGE_DIR.parent
_ENV_PATH = _ROOT / ".env"

WALRUS_NETWORKS = ("testnet", "mainnet")

DEFAULT_PUBLISHER_URLS = {
    "testnet": "https://publisher.walrus-testnet.walrus.space",
    "mainnet": "https://publisher.walrus-mainnet.walrus.space",
}
DEFAULT_AGGREGATOR_URLS = {
    "testnet": "https://aggregator.walrus-testnet.walrus.space",
    "mainnet": "https://aggregator.walrus-mainnet.walrus.space",
}

DEFAULT_STORAGE_EPOCHS = 10
DEFAULT_SWAP_FETCH_LIMIT = 100
DEFAULT_SQLITE_PATH = "swap_insights.db"

_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off")


def load_env() -> None:
    """Load .env from project root. Safe to call multiple times; never overrides real env."""
    load_dotenv(_ENV_PATH, override=False)


def _get_bool(name: str, default: bool) -> bool:
    raw = (os.getenv(name) or "").strip().lower()
    if raw in _TRUE_VALUES:
        return True
    if raw in _FALSE_VALUES:
        return False
    return default


def _get_positive_int(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError as e:
        raise InvalidArgumentError(f"{name} must be an integer, got {raw!r}") from e
    if value <= 0:
        raise InvalidArgumentError(f"{name} must be > 0, got {value}")
    return value


def get_walrus_network() -> str:
    """
    Return WALRUS_NETWORK from env: testnet | mainnet.
    Default: testnet. Unrecognized values fall back to testnet.
    """
    load_env()
    raw = (os.getenv("WALRUS_NETWORK") or "testnet").strip().lower()
    return raw if raw in WALRUS_NETWORKS else "testnet"


def get_publisher_url() -> str:
    """WALRUS_PUBLISHER_URL, else the public publisher for the current network."""
    load_env()
    url = (os.getenv("WALRUS_PUBLISHER_URL") or "").strip()
    return url.rstrip("/") if url else DEFAULT_PUBLISHER_URLS[get_walrus_network()]


def get_aggregator_url() -> str:
    """WALRUS_AGGREGATOR_URL, else the public aggregator for the current network."""
    load_env()
    url = (os.getenv("WALRUS_AGGREGATOR_URL") or "").strip()
    return url.rstrip("/") if url else DEFAULT_AGGREGATOR_URLS[get_walrus_network()]


def get_storage_epochs() -> int:
    load_env()
    return _get_positive_int("ANALYSIS_STORAGE_EPOCHS", DEFAULT_STORAGE_EPOCHS)


def get_storage_deletable() -> bool:
    load_env()
    return _get_bool("ANALYSIS_STORAGE_DELETABLE", True)


def get_swap_fetch_limit() -> int:
    load_env()
    return _get_positive_int("SWAP_FETCH_LIMIT", DEFAULT_SWAP_FETCH_LIMIT)


def get_fingerprint_include_analysis_date() -> bool:
    load_env()
    return _get_bool("FINGERPRINT_INCLUDE_ANALYSIS_DATE", True)


def get_database_url() -> str:
    """Return ANALYSIS_DB_URL if set; else SQLite from ANALYSIS_DB_PATH or default."""
    load_env()
    url = (os.getenv("ANALYSIS_DB_URL") or "").strip()
    if url:
        return url
    path = (os.getenv("ANALYSIS_DB_PATH") or "").strip() or DEFAULT_SQLITE_PATH
    return f"sqlite:///{path}"
