"""Summary statistics for room pairings."""

from .metrics import (
    compute_score_distribution_stats,
    summarize_pairing,
    ScoreDistributionStats,
    PairingSummary,
)

__all__ = [
    "compute_score_distribution_stats",
    "summarize_pairing",
    "ScoreDistributionStats",
    "PairingSummary",
]
