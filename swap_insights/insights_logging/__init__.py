"""
Structured logging for Swap Insights.

JSON logs with timestamp, event_type, and wallet context.
Use get_logger() in every module for aggregation-friendly output.
"""

from swap_insights.insights_logging.logger import bind_wallet, get_logger, short_wallet

__all__ = ["bind_wallet", "get_logger", "short_wallet"]
