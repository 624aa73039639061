"""
Analytics pipeline: swaps -> profile -> store-or-skip -> history.

Orchestration around the pure analysis core; the only place that touches
the analysis store.
"""

from swap_insights.analytics.analytics_pipeline import (
    load_analyses,
    run_wallet_analysis,
    update_analysis_cache,
)

__all__ = [
    "load_analyses",
    "run_wallet_analysis",
    "update_analysis_cache",
]
