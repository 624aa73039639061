"""
Configuration management for Swap Insights.

Loads and validates settings from environment variables and an optional
.env file. Exposes a single source of truth for storage and fetch settings.
"""

from swap_insights.config.settings import Settings, get_settings, reset_settings_cache  # noqa: F401

__all__ = ["Settings", "get_settings", "reset_settings_cache"]
