"""
Greedy room pairing for a cohort.

This module partitions a cohort into rooms of two by repeatedly taking the
single best-scoring pair among the people not yet placed.

Key Design Decisions:
- Greedy heuristic, not an exact maximum-weight matching
- Every person lands in exactly one room; an odd person out gets a single room
- Low-scoring pairs are still formed and flagged for supervision
- Ties go to the first pair in input order (row-major over the cohort)
- Pair scores do not change as people are placed, so the upper triangle of
  the score matrix is computed once and masked on each round
"""

import logging
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from ..exceptions import InvalidInputError
from ..roster.schema import (
    CompatibilityResult,
    PairProposal,
    Person,
    RecommendationLabel,
    RelationshipKind,
)
from ..scoring import CompatibilityScorer
from ..scoring import tables

logger = logging.getLogger(__name__)

DEFAULT_LARGE_COHORT_WARNING = 500


class PairingOptimizer:
    """
    Greedy pairing of a cohort into two-person rooms.

    Attributes:
        scorer: CompatibilityScorer used for peer scores
        large_cohort_warning: Cohort size above which a warning is logged
    """

    def __init__(
        self,
        scorer: Optional[CompatibilityScorer] = None,
        large_cohort_warning: int = DEFAULT_LARGE_COHORT_WARNING
    ):
        self.scorer = scorer or CompatibilityScorer()
        self.large_cohort_warning = large_cohort_warning

    def optimize(self, cohort: Sequence[Person]) -> List[PairProposal]:
        """
        Partition a cohort into proposed rooms.

        Rooms are numbered from 1 in the order pairs are formed, so room
        numbers trend toward descending compatibility.

        Args:
            cohort: People to place, in roster order

        Returns:
            List of PairProposal covering every person exactly once

        Raises:
            InvalidInputError: If the same person id appears twice
        """
        people = list(cohort)
        self._check_unique(people)

        n_people = len(people)
        if n_people > self.large_cohort_warning:
            logger.warning(
                f"Cohort of {n_people} exceeds {self.large_cohort_warning}; "
                f"consider running the pairing as a background job"
            )
        logger.info(f"Optimizing room pairing for {n_people} people")

        score_matrix, results = self._score_matrix(people)
        available = np.ones(n_people, dtype=bool)
        proposals: List[PairProposal] = []
        room_number = 1

        while available.sum() >= 2:
            mask = np.outer(available, available)
            masked = np.where(mask, score_matrix, -np.inf)
            flat_index = int(np.argmax(masked))
            i, j = divmod(flat_index, n_people)

            result = results[(i, j)]
            proposals.append(self._pair_proposal(room_number, people[i], people[j], result))
            available[i] = False
            available[j] = False
            room_number += 1

        if available.any():
            leftover = people[int(np.flatnonzero(available)[0])]
            proposals.append(self._single_proposal(room_number, leftover))

        n_flagged = sum(1 for p in proposals if p.requires_supervision)
        logger.info(f"Formed {len(proposals)} rooms ({n_flagged} flagged for supervision)")
        return proposals

    def _score_matrix(
        self, people: List[Person]
    ) -> Tuple[np.ndarray, Dict[Tuple[int, int], CompatibilityResult]]:
        """
        Score every unordered pair once.

        Only the upper triangle (i < j) is filled; every other cell is -inf so
        that argmax never selects a self-pair or a mirrored duplicate.

        Args:
            people: Cohort members

        Returns:
            Tuple of (score matrix, results keyed by (i, j))
        """
        n_people = len(people)
        matrix = np.full((n_people, n_people), -np.inf)
        results: Dict[Tuple[int, int], CompatibilityResult] = {}

        for i in range(n_people):
            for j in range(i + 1, n_people):
                result = self.scorer.score(people[i], people[j], RelationshipKind.PEER)
                matrix[i, j] = result.score
                results[(i, j)] = result

        logger.debug(f"Scored {len(results)} candidate pairs")
        return matrix, results

    def _pair_proposal(
        self, room_number: int, a: Person, b: Person, result: CompatibilityResult
    ) -> PairProposal:
        label = result.recommendation_label
        notes = [tables.ROOM_NOTES[label]]
        if abs(a.behavior_score - b.behavior_score) >= tables.SIGNIFICANT_BEHAVIOR_GAP:
            notes.append(tables.BEHAVIOR_GAP_NOTE)

        return PairProposal(
            room_number=room_number,
            members=[a, b],
            score=result.score,
            factors=result.explanations,
            recommendation_label=label,
            recommendations=notes,
        )

    def _single_proposal(self, room_number: int, person: Person) -> PairProposal:
        return PairProposal(
            room_number=room_number,
            members=[person],
            score=None,
            factors=["Single occupancy"],
            recommendation_label=RecommendationLabel.SINGLE_OCCUPANCY,
            recommendations=[tables.ROOM_NOTES[RecommendationLabel.SINGLE_OCCUPANCY]],
        )

    @staticmethod
    def _check_unique(people: List[Person]) -> None:
        seen = set()
        for person in people:
            if person.id in seen:
                raise InvalidInputError(f"Person {person.id} appears more than once in the cohort")
            seen.add(person.id)


def optimize(cohort: Sequence[Person]) -> List[PairProposal]:
    """Convenience function to pair a cohort with default settings."""
    return PairingOptimizer().optimize(cohort)
