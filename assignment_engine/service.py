"""
Assignment service: the operations exposed to collaborators.

This module is the thin, persistence-aware layer around the pure engine.
It resolves ids through the roster, fills supervisor workload from the
assignment store, invokes the scorer/optimizer/rankers, and writes to the
store only for the apply/assign/rate operations.

Operations:
- get_peer_suggestions        read-only
- optimize_cohort             read-only
- apply_pairing               replaces all active peer assignments
- get_supervisor_suggestions  read-only
- create_supervisor_assignment additive
- rate_supervisor_assignment  mutates rating/notes of one assignment
- get_room_assignments        read-only
"""

import dataclasses
import logging
from typing import Any, Dict, List, Optional, Sequence, Union

from .configs import DEFAULT_CONFIG, get_config_value
from .evaluation import summarize_pairing
from .exceptions import InvalidInputError
from .pairing import PairingOptimizer
from .ranking import PeerRanker, SupervisorRanker
from .roster import (
    CohortFilter,
    PairProposal,
    PoolFilter,
    RecommendationLabel,
    RelationshipKind,
    Roster,
    Supervisor,
)
from .scoring import CompatibilityScorer, recommendation_label
from .store import AssignmentStore

logger = logging.getLogger(__name__)

ProposalInput = Union[PairProposal, Dict[str, Any]]


class AssignmentService:
    """
    Entry point for room pairing and supervisor assignment.

    Attributes:
        roster: Roster collaborator supplying people and staff
        store: AssignmentStore holding applied assignments
        config: Configuration dictionary
    """

    def __init__(
        self,
        roster: Roster,
        store: Optional[AssignmentStore] = None,
        config: Optional[Dict[str, Any]] = None
    ):
        self.roster = roster
        self.store = store if store is not None else AssignmentStore()
        self.config = config if config is not None else DEFAULT_CONFIG

        scorer = CompatibilityScorer()
        self.optimizer = PairingOptimizer(
            scorer,
            large_cohort_warning=get_config_value(self.config, "pairing.large_cohort_warning", 500),
        )
        self.peer_ranker = PeerRanker(
            scorer, top_k=get_config_value(self.config, "suggestions.peer_top_k", 10)
        )
        self.supervisor_ranker = SupervisorRanker(
            scorer, top_k=get_config_value(self.config, "suggestions.supervisor_top_k", 5)
        )
        self.scorer = scorer

    # ------------------------------------------------------------------
    # Peer operations
    # ------------------------------------------------------------------

    def get_peer_suggestions(self, person_id: str, top_k: Optional[int] = None) -> Dict[str, Any]:
        """
        Rank possible roommates for a person.

        Candidates are active people without an active room assignment.

        Raises:
            NotFoundError: If the person is not in the roster
        """
        person = self.roster.get_person(person_id)
        assigned = self.store.peer_assigned_ids()
        candidates = [
            p for p in self.roster.people()
            if p.id != person.id and p.id not in assigned
        ]
        suggestions = self.peer_ranker.suggest(person, candidates, top_k)
        return {
            "person": person.to_dict(),
            "suggestions": [s.to_dict() for s in suggestions],
        }

    def optimize_cohort(self, cohort_filter: Optional[CohortFilter] = None) -> Dict[str, Any]:
        """
        Propose a room pairing for a cohort without persisting it.

        Returns:
            Dictionary with proposals, total_rooms, average_score and
            score_stats
        """
        cohort = self.roster.people(cohort_filter)
        proposals = self.optimizer.optimize(cohort)
        summary = summarize_pairing(proposals)
        return {
            "proposals": [p.to_dict() for p in proposals],
            "total_rooms": summary.total_rooms,
            "average_score": summary.average_score,
            "score_stats": summary.to_dict(),
        }

    def apply_pairing(self, proposals: Sequence[ProposalInput]) -> Dict[str, Any]:
        """
        Persist a room pairing, replacing all active peer assignments.

        Proposals may be PairProposal objects or dictionaries as returned by
        optimize_cohort (members given as ids or as dicts with an 'id').

        Raises:
            NotFoundError: If a member id is not in the roster
            InvalidInputError: If a proposal is malformed
            ConcurrencyConflictError: If configured to reject concurrent applies
        """
        resolved = [self._resolve_proposal(p) for p in proposals]
        blocking = not get_config_value(self.config, "store.reject_concurrent_apply", False)
        records = self.store.apply_peer_assignments(resolved, blocking=blocking)
        return {
            "message": "Room assignments updated successfully",
            "rooms": len(resolved),
            "assignments": len(records),
        }

    def _resolve_proposal(self, proposal: ProposalInput) -> PairProposal:
        if isinstance(proposal, PairProposal):
            for member in proposal.members:
                self.roster.get_person(member.id)
            return proposal

        if not isinstance(proposal, dict):
            raise InvalidInputError(f"Unsupported proposal type: {type(proposal).__name__}")
        if "room_number" not in proposal or "members" not in proposal:
            raise InvalidInputError("Proposal needs 'room_number' and 'members'")

        member_ids = [m["id"] if isinstance(m, dict) else m for m in proposal["members"]]
        members = [self.roster.get_person(member_id) for member_id in member_ids]
        label = proposal.get("recommendation_label", RecommendationLabel.NOT_RECOMMENDED)
        if isinstance(label, str):
            try:
                label = RecommendationLabel(label)
            except ValueError:
                raise InvalidInputError(f"Unknown recommendation label: {label!r}")

        try:
            room_number = int(proposal["room_number"])
        except (TypeError, ValueError):
            raise InvalidInputError(f"Invalid room number: {proposal['room_number']!r}")

        return PairProposal(
            room_number=room_number,
            members=members,
            score=proposal.get("score"),
            factors=list(proposal.get("factors", [])),
            recommendation_label=label,
            recommendations=list(proposal.get("recommendations", [])),
        )

    def get_room_assignments(self) -> Dict[str, Any]:
        """Current rooms, grouped by room number."""
        rooms = self.store.rooms()
        return {
            "rooms": {
                room_number: [r.to_dict() for r in records]
                for room_number, records in rooms.items()
            },
            "total_rooms": len(rooms),
        }

    # ------------------------------------------------------------------
    # Supervisor operations
    # ------------------------------------------------------------------

    def supervisor_pool(self, pool_filter: Optional[PoolFilter] = None) -> List[Supervisor]:
        """
        Candidate supervisors with workload from the store.

        The store's active assignment count is added to the roster's baseline
        load. Average effectiveness comes from the store when the supervisor
        has active assignments there.
        """
        if pool_filter is None:
            roles = get_config_value(self.config, "suggestions.supervisor_roles")
            pool_filter = PoolFilter(roles=set(roles) if roles else None)
        return [self._with_workload(s) for s in self.roster.supervisors(pool_filter)]

    def _with_workload(self, supervisor: Supervisor) -> Supervisor:
        count, average = self.store.supervisor_workload(supervisor.id)
        if count == 0:
            return supervisor
        return dataclasses.replace(
            supervisor,
            current_load=supervisor.current_load + count,
            average_effectiveness=average,
        )

    def get_supervisor_suggestions(
        self,
        person_id: str,
        pool_filter: Optional[PoolFilter] = None,
        top_k: Optional[int] = None
    ) -> Dict[str, Any]:
        """
        Rank supervisors for a person.

        Raises:
            NotFoundError: If the person is not in the roster
        """
        person = self.roster.get_person(person_id)
        pool = self.supervisor_pool(pool_filter)
        suggestions = self.supervisor_ranker.suggest(person, pool, top_k)
        return {
            "person": person.to_dict(),
            "suggestions": [s.to_dict() for s in suggestions],
        }

    def create_supervisor_assignment(self, person_id: str, supervisor_id: str) -> Dict[str, Any]:
        """
        Assign a supervisor to a person, scoring the pair at assignment time.

        Raises:
            NotFoundError: If the person or supervisor is not in the roster
        """
        person = self.roster.get_person(person_id)
        supervisor = self._with_workload(self.roster.get_supervisor(supervisor_id))
        result = self.scorer.score(person, supervisor, RelationshipKind.SUPERVISOR)

        record, created = self.store.create_supervisor_assignment(
            person.id, supervisor.id, result.score, result.explanations
        )
        # An existing record keeps the score it was assigned with
        label = recommendation_label(record.score, RelationshipKind.SUPERVISOR)
        response = record.to_dict()
        response["recommendation_label"] = label.value
        response["created"] = created
        return response

    def rate_supervisor_assignment(
        self,
        assignment_id: str,
        rating: int,
        notes: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Record an effectiveness rating for a supervisor assignment.

        Raises:
            NotFoundError: If the assignment does not exist
            InvalidInputError: If the rating is out of range or the
                assignment is not a supervisor assignment
        """
        record = self.store.get(assignment_id)
        if record.kind != RelationshipKind.SUPERVISOR:
            raise InvalidInputError(f"Assignment {assignment_id} is not a supervisor assignment")
        self.store.rate_assignment(assignment_id, rating, notes)
        return {"message": "Effectiveness rating updated successfully", "id": record.id}
