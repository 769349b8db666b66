"""
Top-K ranking of supervisors and roommate candidates for one person.

Both rankers score every candidate, sort descending with a stable sort
(ties keep pool order) and cut the list at top_k. No minimum score is
applied; weak candidates are surfaced with a not_recommended label.
"""

import logging
from typing import List, Optional, Sequence

from ..exceptions import InvalidInputError
from ..roster.schema import (
    Person,
    PeerSuggestion,
    RelationshipKind,
    Supervisor,
    SupervisorSuggestion,
)
from ..scoring import CompatibilityScorer

logger = logging.getLogger(__name__)

DEFAULT_SUPERVISOR_TOP_K = 5
DEFAULT_PEER_TOP_K = 10


def _check_top_k(top_k: int) -> int:
    if isinstance(top_k, bool) or not isinstance(top_k, int) or top_k < 0:
        raise InvalidInputError(f"top_k must be a non-negative integer, got {top_k!r}")
    return top_k


class SupervisorRanker:
    """
    Rank candidate supervisors for a person.

    Attributes:
        scorer: CompatibilityScorer used for supervisor scores
        top_k: Default number of suggestions returned
    """

    def __init__(
        self,
        scorer: Optional[CompatibilityScorer] = None,
        top_k: int = DEFAULT_SUPERVISOR_TOP_K
    ):
        self.scorer = scorer or CompatibilityScorer()
        self.top_k = _check_top_k(top_k)

    def suggest(
        self,
        person: Person,
        pool: Sequence[Supervisor],
        top_k: Optional[int] = None
    ) -> List[SupervisorSuggestion]:
        """
        Suggest supervisors for a person.

        Args:
            person: The supervisee
            pool: Candidate supervisors with current workload filled in
            top_k: Number of suggestions (defaults to the ranker's top_k)

        Returns:
            Up to top_k suggestions, best first; empty if the pool is empty
        """
        limit = self.top_k if top_k is None else _check_top_k(top_k)

        suggestions = []
        for supervisor in pool:
            result = self.scorer.score(person, supervisor, RelationshipKind.SUPERVISOR)
            suggestions.append(SupervisorSuggestion(
                supervisor=supervisor,
                score=result.score,
                factors=result.explanations,
                recommendation_label=result.recommendation_label,
            ))

        ranked = sorted(suggestions, key=lambda s: s.score, reverse=True)[:limit]
        logger.info(
            f"Ranked {len(suggestions)} supervisors for person {person.id}; returning {len(ranked)}"
        )
        return ranked


class PeerRanker:
    """
    Rank roommate candidates for a person by peer score.

    Attributes:
        scorer: CompatibilityScorer used for peer scores
        top_k: Default number of suggestions returned
    """

    def __init__(
        self,
        scorer: Optional[CompatibilityScorer] = None,
        top_k: int = DEFAULT_PEER_TOP_K
    ):
        self.scorer = scorer or CompatibilityScorer()
        self.top_k = _check_top_k(top_k)

    def suggest(
        self,
        person: Person,
        candidates: Sequence[Person],
        top_k: Optional[int] = None
    ) -> List[PeerSuggestion]:
        """
        Suggest roommates for a person.

        The person themself is skipped if present among the candidates.

        Args:
            person: The person looking for a roommate
            candidates: Possible roommates
            top_k: Number of suggestions (defaults to the ranker's top_k)

        Returns:
            Up to top_k suggestions, best first
        """
        limit = self.top_k if top_k is None else _check_top_k(top_k)

        suggestions = []
        for candidate in candidates:
            if candidate.id == person.id:
                continue
            result = self.scorer.score(person, candidate, RelationshipKind.PEER)
            suggestions.append(PeerSuggestion(
                candidate=candidate,
                score=result.score,
                factors=result.explanations,
                recommendation_label=result.recommendation_label,
            ))

        ranked = sorted(suggestions, key=lambda s: s.score, reverse=True)[:limit]
        logger.info(
            f"Ranked {len(suggestions)} roommate candidates for person {person.id}; "
            f"returning {len(ranked)}"
        )
        return ranked
