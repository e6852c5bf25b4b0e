"""Analysis layer — panel aggregation, reputation, market research and investor insights."""

from synthpanel.analysis.aggregator import (
    PanelStatistics,
    ResultAggregator,
    compute_statistics,
    sentiment_from_interest,
)
from synthpanel.analysis.market_analysis import MarketAnalysisService
from synthpanel.analysis.match_insights import MatchInsightService
from synthpanel.analysis.reputation import activity_from_reviews, compute_reputation

__all__ = [
    "MarketAnalysisService",
    "MatchInsightService",
    "PanelStatistics",
    "ResultAggregator",
    "activity_from_reviews",
    "compute_reputation",
    "compute_statistics",
    "sentiment_from_interest",
]
