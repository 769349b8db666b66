"""Roster records, result records and the in-memory roster collaborator."""

from .schema import (
    Person,
    Supervisor,
    Role,
    RelationshipKind,
    RecommendationLabel,
    AssignmentStatus,
    CompatibilityFactor,
    CompatibilityResult,
    PairProposal,
    SupervisorSuggestion,
    PeerSuggestion,
    Assignment,
)
from .roster import Roster, CohortFilter, PoolFilter

__all__ = [
    "Person",
    "Supervisor",
    "Role",
    "RelationshipKind",
    "RecommendationLabel",
    "AssignmentStatus",
    "CompatibilityFactor",
    "CompatibilityResult",
    "PairProposal",
    "SupervisorSuggestion",
    "PeerSuggestion",
    "Assignment",
    "Roster",
    "CohortFilter",
    "PoolFilter",
]
