"""
Summary statistics for room pairings.

Reports describe how a proposed pairing is distributed across score tiers.
They are informational only and never change the proposals.
"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List, Any, Optional, Sequence

import numpy as np

from ..roster.schema import PairProposal

logger = logging.getLogger(__name__)

DEFAULT_QUANTILES = (0.1, 0.25, 0.5, 0.75, 0.9)


@dataclass
class ScoreDistributionStats:
    """Statistics about score distribution."""
    mean: float
    std: float
    min: float
    max: float
    quantiles: Dict[str, float]  # e.g., {"p10": 0.2, "p50": 0.5, "p90": 0.8}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "mean": float(self.mean),
            "std": float(self.std),
            "min": float(self.min),
            "max": float(self.max),
            "quantiles": {k: float(v) for k, v in self.quantiles.items()}
        }


@dataclass
class PairingSummary:
    """
    Summary of a proposed pairing.

    Attributes:
        total_rooms: Number of rooms, including single occupancy
        paired_rooms: Rooms with two members
        single_rooms: Rooms with one member
        average_score: Mean pair score over paired rooms (0.0 if none)
        flagged_rooms: Paired rooms requiring supervision
        label_counts: Number of rooms per recommendation label
        distribution: Score distribution over paired rooms, if any
    """
    total_rooms: int
    paired_rooms: int
    single_rooms: int
    average_score: float
    flagged_rooms: int
    label_counts: Dict[str, int] = field(default_factory=dict)
    distribution: Optional[ScoreDistributionStats] = None

    def to_dict(self) -> Dict[str, Any]:
        result = {
            "total_rooms": self.total_rooms,
            "paired_rooms": self.paired_rooms,
            "single_rooms": self.single_rooms,
            "average_score": self.average_score,
            "flagged_rooms": self.flagged_rooms,
            "label_counts": dict(self.label_counts),
        }
        if self.distribution:
            result["distribution"] = self.distribution.to_dict()
        return result

    def summary(self) -> str:
        """Generate text summary of the pairing."""
        lines = [
            "Pairing Summary",
            "=" * 50,
            f"  Rooms:          {self.total_rooms}",
            f"  Paired:         {self.paired_rooms}",
            f"  Single:         {self.single_rooms}",
            f"  Average score:  {self.average_score:.4f}",
            f"  Flagged:        {self.flagged_rooms}",
        ]
        for label, count in self.label_counts.items():
            lines.append(f"  {label}: {count}")
        if self.distribution:
            for q_name, q_value in self.distribution.quantiles.items():
                lines.append(f"  {q_name}: {q_value:.4f}")
        return "\n".join(lines)


def compute_score_distribution_stats(
    scores: np.ndarray,
    quantiles: Sequence[float] = DEFAULT_QUANTILES
) -> ScoreDistributionStats:
    """
    Compute distribution statistics for scores.

    Args:
        scores: Array of compatibility scores
        quantiles: Quantile values to compute (default: p10, p25, p50, p75, p90)

    Returns:
        ScoreDistributionStats instance
    """
    quantile_dict = {
        f"p{int(q * 100)}": float(np.percentile(scores, q * 100))
        for q in quantiles
    }

    return ScoreDistributionStats(
        mean=float(np.mean(scores)),
        std=float(np.std(scores)),
        min=float(np.min(scores)),
        max=float(np.max(scores)),
        quantiles=quantile_dict
    )


def summarize_pairing(proposals: List[PairProposal]) -> PairingSummary:
    """
    Summarize a list of room proposals.

    Args:
        proposals: Output of PairingOptimizer.optimize

    Returns:
        PairingSummary instance
    """
    scores = np.array([p.score for p in proposals if p.score is not None], dtype=float)
    labels = Counter(p.recommendation_label.value for p in proposals)

    distribution = None
    average = 0.0
    if scores.size > 0:
        distribution = compute_score_distribution_stats(scores)
        average = float(np.mean(scores))

    summary = PairingSummary(
        total_rooms=len(proposals),
        paired_rooms=int(scores.size),
        single_rooms=sum(1 for p in proposals if p.is_single),
        average_score=average,
        flagged_rooms=sum(1 for p in proposals if p.requires_supervision),
        label_counts=dict(labels),
        distribution=distribution,
    )
    logger.info(f"Pairing average score {average:.4f} over {summary.paired_rooms} rooms")
    return summary
