"""
Multi-factor compatibility scoring.

Scores a pair of people for a relationship kind and explains every term.

Peer Formula:
    score = 0.30 * behavior + 0.40 * trait + 0.20 * age + 0.10 * cohort

Supervisor Formula:
    score = 0.40 * experience + 0.35 * trait + 0.15 * workload + 0.10 * role

Each term is clamped to [0, 1] before weighting and the weighted sum is
clamped again. Missing birth dates or ages fall back to a neutral 0.5 term,
so the scorer never raises for data-quality reasons.
"""

import logging
from typing import List, Optional, Union

from ..exceptions import InvalidInputError
from ..roster.schema import (
    CompatibilityFactor,
    CompatibilityResult,
    Person,
    RelationshipKind,
    Role,
    Supervisor,
)
from . import tables

logger = logging.getLogger(__name__)

KindInput = Union[RelationshipKind, str]


def _clamp(value: float) -> float:
    return min(1.0, max(0.0, value))


def _format_number(value: float) -> str:
    return f"{value:g}"


def _coerce_kind(kind: KindInput) -> RelationshipKind:
    if isinstance(kind, RelationshipKind):
        return kind
    try:
        return RelationshipKind(kind)
    except ValueError:
        raise InvalidInputError(f"Unknown relationship kind: {kind!r}")


class CompatibilityScorer:
    """
    Pure scoring function over two people and a relationship kind.

    The scorer holds no state; a single instance can be shared between
    the pairing optimizer and the rankers.
    """

    def score(
        self,
        person_a: Person,
        person_b: Person,
        kind: KindInput = RelationshipKind.PEER
    ) -> CompatibilityResult:
        """
        Compute the compatibility of two people.

        For the supervisor kind, person_a is the supervisee and person_b the
        supervisor.

        Args:
            person_a: First person (supervisee for the supervisor kind)
            person_b: Second person (Supervisor for the supervisor kind)
            kind: 'peer' or 'supervisor'

        Returns:
            CompatibilityResult with score, factors and recommendation label
        """
        kind = _coerce_kind(kind)

        if kind == RelationshipKind.PEER:
            factors = self._peer_factors(person_a, person_b)
        else:
            if not isinstance(person_b, Supervisor):
                raise InvalidInputError(
                    f"Supervisor scoring needs a Supervisor counterpart, got {type(person_b).__name__}"
                )
            factors = self._supervisor_factors(person_a, person_b)

        total = _clamp(sum(factor.contribution for factor in factors))
        logger.debug(f"Scored {person_a.id} / {person_b.id} ({kind.value}): {total:.4f}")

        return CompatibilityResult(
            score=total,
            factors=factors,
            kind=kind,
            recommendation_label=tables.recommendation_label(total, kind),
        )

    # ------------------------------------------------------------------
    # Peer factors
    # ------------------------------------------------------------------

    def _peer_factors(self, a: Person, b: Person) -> List[CompatibilityFactor]:
        weights = tables.PEER_WEIGHTS
        return [
            self._behavior_factor(a, b, weights["behavior"]),
            self._peer_trait_factor(a, b, weights["trait"]),
            self._age_factor(a, b, weights["age"]),
            self._cohort_factor(a, b, weights["cohort"]),
        ]

    def _behavior_factor(self, a: Person, b: Person, weight: float) -> CompatibilityFactor:
        """
        Behavior-risk interaction.

        Two high-risk people are discouraged; a low-risk person with a
        high-risk person is encouraged as a mentor/mentee pairing. Otherwise
        the term falls off linearly with the score difference.
        """
        low, high = sorted((a.behavior_score, b.behavior_score))

        if low >= tables.HIGH_RISK_MIN:
            term = tables.BOTH_HIGH_RISK_SCORE
            explanation = "Both high-risk - pairing discouraged"
        elif low <= tables.LOW_RISK_MAX and high >= tables.HIGH_RISK_MIN:
            term = tables.MENTOR_PAIRING_SCORE
            explanation = "Mentor/mentee pairing - encouraged"
        else:
            diff = high - low
            term = max(0.0, (tables.BEHAVIOR_WINDOW - diff) / tables.BEHAVIOR_WINDOW)
            explanation = f"Behavior scores {a.behavior_score} and {b.behavior_score} (difference {diff})"

        return CompatibilityFactor("behavior", _clamp(term), weight, explanation)

    def _peer_trait_factor(self, a: Person, b: Person, weight: float) -> CompatibilityFactor:
        profile_a, profile_b = a.profile, b.profile
        if not profile_a.is_known or not profile_b.is_known:
            return CompatibilityFactor(
                "trait", tables.NEUTRAL_SCORE, weight, "Insufficient data - missing birth date"
            )

        term, note = tables.PEER_TRAIT_TABLE.get(
            frozenset({profile_a.group, profile_b.group}),
            (tables.NEUTRAL_SCORE, "neutral combination"),
        )
        explanation = f"{profile_a.describe()} with {profile_b.describe()} - {note}"
        return CompatibilityFactor("trait", _clamp(term), weight, explanation)

    def _age_factor(self, a: Person, b: Person, weight: float) -> CompatibilityFactor:
        if a.age is None or b.age is None:
            return CompatibilityFactor(
                "age", tables.NEUTRAL_SCORE, weight, "Insufficient data - missing age"
            )

        diff = abs(a.age - b.age)
        term = max(0.0, (tables.AGE_WINDOW - diff) / tables.AGE_WINDOW)
        explanation = f"Age difference of {_format_number(diff)} years"
        return CompatibilityFactor("age", _clamp(term), weight, explanation)

    def _cohort_factor(self, a: Person, b: Person, weight: float) -> CompatibilityFactor:
        if a.group_tag is not None and a.group_tag == b.group_tag:
            return CompatibilityFactor(
                "cohort", tables.SAME_COHORT_SCORE, weight, f"Same group ({a.group_tag})"
            )
        return CompatibilityFactor(
            "cohort", tables.OTHER_COHORT_SCORE, weight, "Different or unknown group"
        )

    # ------------------------------------------------------------------
    # Supervisor factors
    # ------------------------------------------------------------------

    def _supervisor_factors(self, person: Person, staff: Supervisor) -> List[CompatibilityFactor]:
        weights = tables.SUPERVISOR_WEIGHTS
        return [
            self._experience_factor(person, staff, weights["experience"]),
            self._supervisor_trait_factor(person, staff, weights["trait"]),
            self._workload_factor(staff, weights["workload"]),
            self._role_factor(person, staff, weights["role"]),
        ]

    def _experience_factor(
        self, person: Person, staff: Supervisor, weight: float
    ) -> CompatibilityFactor:
        years = staff.experience_years
        years_text = _format_number(years)
        high_risk = person.behavior_score >= tables.HIGH_RISK_MIN

        if high_risk and years >= tables.EXPERIENCED_MIN_YEARS:
            term = tables.EXPERIENCED_FOR_HIGH_RISK_SCORE
            explanation = f"Experienced staff ({years_text}yr) well-matched for high-risk person"
        elif high_risk:
            term = tables.UNDER_EXPERIENCED_FOR_HIGH_RISK_SCORE
            explanation = f"Under-experienced staff ({years_text}yr) for high-risk person - flagged"
        else:
            term = min(years / tables.EXPERIENCE_CAP_YEARS, 1.0)
            explanation = f"{years_text} years of experience"

        return CompatibilityFactor("experience", _clamp(term), weight, explanation)

    def _supervisor_trait_factor(
        self, person: Person, staff: Supervisor, weight: float
    ) -> CompatibilityFactor:
        person_profile, staff_profile = person.profile, staff.profile
        if not person_profile.is_known or not staff_profile.is_known:
            return CompatibilityFactor(
                "trait", tables.NEUTRAL_SCORE, weight, "Insufficient data - missing birth date"
            )

        staff_group, person_group = staff_profile.group, person_profile.group
        term: Optional[float] = None
        note = "neutral combination"

        for rule_group, supervisee_groups, rule_score, rule_note in tables.SUPERVISOR_TRAIT_RULES:
            if staff_group != rule_group:
                continue
            if supervisee_groups is None or person_group in supervisee_groups:
                term, note = rule_score, rule_note

        if staff_group == person_group:
            term, note = tables.SAME_GROUP_SUPERVISION

        if term is None:
            term = tables.NEUTRAL_SCORE

        explanation = (
            f"Staff {staff_profile.describe()} supervising {person_profile.describe()} - {note}"
        )
        return CompatibilityFactor("trait", _clamp(term), weight, explanation)

    def _workload_factor(self, staff: Supervisor, weight: float) -> CompatibilityFactor:
        load = staff.current_load
        term = max(0.0, 1 - load / tables.WORKLOAD_CAPACITY)
        if load >= tables.HIGH_WORKLOAD:
            explanation = f"High workload ({load} assignments)"
        else:
            explanation = f"Current workload of {load} assignments"
        return CompatibilityFactor("workload", _clamp(term), weight, explanation)

    def _role_factor(self, person: Person, staff: Supervisor, weight: float) -> CompatibilityFactor:
        if staff.role in tables.MENTORING_ROLES:
            return CompatibilityFactor(
                "role", tables.MENTORING_ROLE_SCORE, weight, "Appropriate mentoring role"
            )
        if staff.role == Role.INSTRUCTOR and person.exam_status != tables.EXAM_COMPLETED:
            return CompatibilityFactor(
                "role", tables.INSTRUCTOR_ROLE_SCORE, weight, "Academic support role"
            )
        return CompatibilityFactor(
            "role", tables.NEUTRAL_SCORE, weight, f"General role ({staff.role.value})"
        )


_default_scorer = CompatibilityScorer()


def score(
    person_a: Person,
    person_b: Person,
    kind: KindInput = RelationshipKind.PEER
) -> CompatibilityResult:
    """Score a pair with the shared default scorer."""
    return _default_scorer.score(person_a, person_b, kind)
