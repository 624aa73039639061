"""
Application settings.

Typed, immutable snapshot of the environment (see config.env) shared by the
storage layer and pipeline. Cached after first build; tests reset the cache
after changing the environment.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache

from swap_insights.config import env


@dataclass(frozen=True)
class Settings:
    walrus_network: str
    publisher_url: str
    aggregator_url: str
    storage_epochs: int
    storage_deletable: bool
    database_url: str
    swap_fetch_limit: int
    fingerprint_include_analysis_date: bool


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the current application settings (built once from the environment)."""
    return Settings(
        walrus_network=env.get_walrus_network(),
        publisher_url=env.get_publisher_url(),
        aggregator_url=env.get_aggregator_url(),
        storage_epochs=env.get_storage_epochs(),
        storage_deletable=env.get_storage_deletable(),
        database_url=env.get_database_url(),
        swap_fetch_limit=env.get_swap_fetch_limit(),
        fingerprint_include_analysis_date=env.get_fingerprint_include_analysis_date(),
    )


def reset_settings_cache() -> None:
    get_settings.cache_clear()
