"""
Fixed lookup tables, weights and thresholds for compatibility scoring.

All calibration lives here as immutable constants shared by the pairing
optimizer and the supervisor ranker. Changing calibration is a code change.

Peer weights:        behavior 0.30, trait 0.40, age 0.20, cohort 0.10
Supervisor weights:  experience 0.40, trait 0.35, workload 0.15, role 0.10
"""

from types import MappingProxyType
from typing import Optional, Tuple

from ..profiling import TraitGroup
from ..roster.schema import RecommendationLabel, RelationshipKind, Role

NEUTRAL_SCORE = 0.5

PEER_WEIGHTS = MappingProxyType({
    "behavior": 0.30,
    "trait": 0.40,
    "age": 0.20,
    "cohort": 0.10,
})

SUPERVISOR_WEIGHTS = MappingProxyType({
    "experience": 0.40,
    "trait": 0.35,
    "workload": 0.15,
    "role": 0.10,
})

# Behavior (HIGH score = HIGH risk)
HIGH_RISK_MIN = 4
LOW_RISK_MAX = 2
BEHAVIOR_WINDOW = 3
BOTH_HIGH_RISK_SCORE = 0.1
MENTOR_PAIRING_SCORE = 0.9
SIGNIFICANT_BEHAVIOR_GAP = 2

# Age proximity
AGE_WINDOW = 4

# Cohort affinity
SAME_COHORT_SCORE = 1.0
OTHER_COHORT_SCORE = 0.5

# Supervisor experience
EXPERIENCE_CAP_YEARS = 5
EXPERIENCED_MIN_YEARS = 3
EXPERIENCED_FOR_HIGH_RISK_SCORE = 1.0
UNDER_EXPERIENCED_FOR_HIGH_RISK_SCORE = 0.3

# Supervisor workload
WORKLOAD_CAPACITY = 5
HIGH_WORKLOAD = 4

# Supervisor role fit
MENTORING_ROLES = frozenset({Role.MENTOR, Role.COUNSELOR})
MENTORING_ROLE_SCORE = 1.0
INSTRUCTOR_ROLE_SCORE = 0.8
EXAM_COMPLETED = "completed"

# Peer trait table, keyed by the unordered pair of groups so that
# lookups are symmetric by construction.
PEER_TRAIT_TABLE = MappingProxyType({
    frozenset({TraitGroup.FIRE}): (0.8, "same group"),
    frozenset({TraitGroup.EARTH}): (0.8, "same group"),
    frozenset({TraitGroup.AIR}): (0.8, "same group"),
    frozenset({TraitGroup.WATER}): (0.8, "same group"),
    frozenset({TraitGroup.FIRE, TraitGroup.AIR}): (0.7, "complementary groups"),
    frozenset({TraitGroup.EARTH, TraitGroup.WATER}): (0.7, "complementary groups"),
    frozenset({TraitGroup.FIRE, TraitGroup.WATER}): (0.3, "challenging combination"),
    frozenset({TraitGroup.EARTH, TraitGroup.AIR}): (0.3, "challenging combination"),
})

# Supervisor trait rules as (staff group, supervisee groups or None for any,
# score, note). Rules are applied in order and a later match overrides an
# earlier one; the identical-group rule is applied last.
SUPERVISOR_TRAIT_RULES: Tuple[Tuple[TraitGroup, Optional[frozenset], float, str], ...] = (
    (TraitGroup.EARTH, None, 0.7, "Earth staff provides stability and structure"),
    (TraitGroup.WATER, frozenset({TraitGroup.FIRE, TraitGroup.WATER}), 0.8,
     "Water staff provides emotional support"),
    (TraitGroup.FIRE, frozenset({TraitGroup.EARTH, TraitGroup.AIR}), 0.7,
     "Fire staff provides motivation and energy"),
    (TraitGroup.AIR, frozenset({TraitGroup.FIRE, TraitGroup.AIR}), 0.7,
     "Air staff provides clear communication"),
)
SAME_GROUP_SUPERVISION = (0.8, "Same group provides natural understanding")

# Label thresholds, checked top-down with strict '>'
PEER_THRESHOLDS = (
    (0.7, RecommendationLabel.EXCELLENT),
    (0.5, RecommendationLabel.GOOD),
    (0.3, RecommendationLabel.MODERATE),
)
SUPERVISOR_THRESHOLDS = (
    (0.8, RecommendationLabel.EXCELLENT),
    (0.6, RecommendationLabel.GOOD),
    (0.4, RecommendationLabel.MODERATE),
)
REQUIRES_SUPERVISION_MAX = 0.3

THRESHOLDS = MappingProxyType({
    RelationshipKind.PEER: PEER_THRESHOLDS,
    RelationshipKind.SUPERVISOR: SUPERVISOR_THRESHOLDS,
})

WEIGHTS = MappingProxyType({
    RelationshipKind.PEER: PEER_WEIGHTS,
    RelationshipKind.SUPERVISOR: SUPERVISOR_WEIGHTS,
})

# Display notes for room proposals
ROOM_NOTES = MappingProxyType({
    RecommendationLabel.EXCELLENT: "Excellent compatibility - encourage peer mentorship",
    RecommendationLabel.GOOD: "Good compatibility - monitor for positive interactions",
    RecommendationLabel.MODERATE: "Moderate compatibility - provide structured activities",
    RecommendationLabel.NOT_RECOMMENDED: "Low compatibility - requires supervision",
    RecommendationLabel.SINGLE_OCCUPANCY: "Single occupancy - monitor for isolation",
})
BEHAVIOR_GAP_NOTE = "Significant behavior score difference - pair mentoring opportunity"


def recommendation_label(score: float, kind: RelationshipKind) -> RecommendationLabel:
    """
    Map a score to its display tier.

    Args:
        score: Compatibility score in [0, 1]
        kind: Relationship kind (selects the threshold set)

    Returns:
        RecommendationLabel
    """
    for threshold, label in THRESHOLDS[kind]:
        if score > threshold:
            return label
    return RecommendationLabel.NOT_RECOMMENDED
