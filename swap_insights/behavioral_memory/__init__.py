# Long-term wallet behavioral memory: how stored trading profiles evolve.
# Statistical only; no ML.

from swap_insights.behavioral_memory.models import (
    AggregatedInsights,
    AnalysisCache,
)
from swap_insights.behavioral_memory.engine import (
    build_analysis_cache,
    generate_aggregated_insights,
)

__all__ = [
    "AggregatedInsights",
    "AnalysisCache",
    "build_analysis_cache",
    "generate_aggregated_insights",
]
