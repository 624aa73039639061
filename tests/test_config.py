"""
Pytest tests for environment-driven settings.
"""

from __future__ import annotations

import pytest

from swap_insights.config import get_settings, reset_settings_cache
from swap_insights.config.env import DEFAULT_AGGREGATOR_URLS, DEFAULT_PUBLISHER_URLS
from swap_insights.core.exceptions import InvalidArgumentError
from swap_insights.storage.schema import StorageConfig

_ENV_VARS = (
    "WALRUS_NETWORK",
    "WALRUS_PUBLISHER_URL",
    "WALRUS_AGGREGATOR_URL",
    "ANALYSIS_STORAGE_EPOCHS",
    "ANALYSIS_STORAGE_DELETABLE",
    "ANALYSIS_DB_URL",
    "ANALYSIS_DB_PATH",
    "SWAP_FETCH_LIMIT",
    "FINGERPRINT_INCLUDE_ANALYSIS_DATE",
)


@pytest.fixture
def clean_env(monkeypatch):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    reset_settings_cache()
    yield monkeypatch
    reset_settings_cache()


def test_defaults(clean_env):
    settings = get_settings()
    assert settings.walrus_network == "testnet"
    assert settings.publisher_url == DEFAULT_PUBLISHER_URLS["testnet"]
    assert settings.aggregator_url == DEFAULT_AGGREGATOR_URLS["testnet"]
    assert settings.storage_epochs == 10
    assert settings.storage_deletable is True
    assert settings.swap_fetch_limit == 100
    assert settings.fingerprint_include_analysis_date is True
    assert settings.database_url == "sqlite:///swap_insights.db"


def test_overrides(clean_env):
    clean_env.setenv("WALRUS_NETWORK", "MAINNET")
    clean_env.setenv("ANALYSIS_STORAGE_EPOCHS", "25")
    clean_env.setenv("ANALYSIS_STORAGE_DELETABLE", "no")
    clean_env.setenv("FINGERPRINT_INCLUDE_ANALYSIS_DATE", "false")
    clean_env.setenv("ANALYSIS_DB_PATH", "/tmp/analysis.db")
    settings = get_settings()
    assert settings.walrus_network == "mainnet"
    assert settings.publisher_url == DEFAULT_PUBLISHER_URLS["mainnet"]
    assert settings.storage_epochs == 25
    assert settings.storage_deletable is False
    assert settings.fingerprint_include_analysis_date is False
    assert settings.database_url == "sqlite:////tmp/analysis.db"

    config = StorageConfig.from_settings(settings)
    assert config.network == "mainnet"
    assert config.epochs == 25
    assert config.deletable is False


def test_settings_cached_until_reset(clean_env):
    first = get_settings()
    clean_env.setenv("SWAP_FETCH_LIMIT", "5")
    assert get_settings() is first
    reset_settings_cache()
    assert get_settings().swap_fetch_limit == 5


def test_unknown_network_falls_back(clean_env):
    clean_env.setenv("WALRUS_NETWORK", "devnet")
    assert get_settings().walrus_network == "testnet"


@pytest.mark.parametrize("value", ["0", "-3", "ten"])
def test_invalid_epochs(clean_env, value):
    clean_env.setenv("ANALYSIS_STORAGE_EPOCHS", value)
    with pytest.raises(InvalidArgumentError):
        get_settings()


def test_storage_from_settings_uses_fingerprint_flag(clean_env, sql_store):
    from swap_insights.storage.store import TradingAnalysisStorage

    clean_env.setenv("FINGERPRINT_INCLUDE_ANALYSIS_DATE", "0")
    storage = TradingAnalysisStorage.from_settings(sql_store, get_settings(), signer="key")
    assert storage.include_analysis_date is False
    assert storage.signer == "key"
