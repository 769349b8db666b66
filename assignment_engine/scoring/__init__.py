"""Compatibility scoring for peer and supervisor relationships."""

from .compatibility import CompatibilityScorer, score
from .tables import recommendation_label, PEER_WEIGHTS, SUPERVISOR_WEIGHTS

__all__ = [
    "CompatibilityScorer",
    "score",
    "recommendation_label",
    "PEER_WEIGHTS",
    "SUPERVISOR_WEIGHTS",
]
