"""
Assignment persistence.

This module keeps applied room pairings and supervisor assignments as
Assignment records, in memory, with optional JSON persistence.

Key Design Decisions:
- Applying a pairing is a full delete-and-reinsert of active peer records,
  serialized by a single writer lock
- Peer record ids are derived from room and bed, so reapplying the same
  proposals leaves the store unchanged
- Supervisor assignments are additive; an existing active record for the
  same (person, supervisor) pair is returned instead of duplicated
- Ratings mutate an existing record and never recompute its score
"""

import json
import logging
import threading
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from ..exceptions import ConcurrencyConflictError, InvalidInputError, NotFoundError
from ..roster.schema import (
    Assignment,
    AssignmentStatus,
    PairProposal,
    RATING_MAX,
    RATING_MIN,
    RelationshipKind,
    validate_int_range,
)

logger = logging.getLogger(__name__)

DEFAULT_EFFECTIVENESS = 3.0


def _now() -> str:
    return datetime.now().isoformat(timespec="seconds")


def peer_record_id(room_number: int, bed_number: int) -> str:
    return f"room-{room_number}-bed-{bed_number}"


class AssignmentStore:
    """
    Record store for peer and supervisor assignments.

    Attributes:
        path: Optional JSON file backing the store
    """

    def __init__(self, path: Optional[str] = None):
        self.path = Path(path) if path else None
        self._records: Dict[str, Assignment] = {}
        self._next_supervisor_id = 1
        self._write_lock = threading.Lock()

    # ------------------------------------------------------------------
    # Peer assignments
    # ------------------------------------------------------------------

    def apply_peer_assignments(
        self,
        proposals: Sequence[PairProposal],
        blocking: bool = True
    ) -> List[Assignment]:
        """
        Replace all active peer assignments with the given rooms.

        Args:
            proposals: Rooms to persist (one or two members each)
            blocking: Wait for a concurrent apply to finish; when False a
                concurrent apply raises ConcurrencyConflictError instead

        Returns:
            The new active peer records, ordered by room and bed

        Raises:
            ConcurrencyConflictError: If blocking is False and another apply
                is in progress
            InvalidInputError: If a person appears in more than one room,
                or a room number is repeated or not a positive integer
        """
        if not self._write_lock.acquire(blocking=blocking):
            raise ConcurrencyConflictError("Another room assignment apply is in progress")
        try:
            new_records = self._build_peer_records(proposals)

            previous = {
                record_id: record for record_id, record in self._records.items()
                if record.kind == RelationshipKind.PEER and record.is_active
            }
            for record_id in previous:
                del self._records[record_id]

            for record in new_records:
                old = previous.get(record.id)
                if old is not None and self._same_placement(old, record):
                    record.assigned_at = old.assigned_at
                self._records[record.id] = record

            logger.info(
                f"Applied {len(proposals)} rooms: replaced {len(previous)} peer records "
                f"with {len(new_records)}"
            )
            return new_records
        finally:
            self._write_lock.release()

    def _build_peer_records(self, proposals: Sequence[PairProposal]) -> List[Assignment]:
        seen = set()
        seen_rooms = set()
        records = []
        timestamp = _now()

        for proposal in proposals:
            room_number = proposal.room_number
            if isinstance(room_number, bool) or not isinstance(room_number, int) or room_number < 1:
                raise InvalidInputError(f"Room number must be a positive integer, got {room_number!r}")
            if room_number in seen_rooms:
                raise InvalidInputError(f"Room {room_number} appears more than once")
            seen_rooms.add(room_number)

        for proposal in sorted(proposals, key=lambda p: p.room_number):
            member_ids = proposal.member_ids()
            if not 1 <= len(member_ids) <= 2:
                raise InvalidInputError(
                    f"Room {proposal.room_number} must have one or two members, got {len(member_ids)}"
                )
            for bed_index, member_id in enumerate(member_ids):
                if member_id in seen:
                    raise InvalidInputError(f"Person {member_id} is assigned to more than one room")
                seen.add(member_id)

                others = [m for m in member_ids if m != member_id]
                records.append(Assignment(
                    id=peer_record_id(proposal.room_number, bed_index + 1),
                    subject_id=member_id,
                    counterpart_id=others[0] if others else None,
                    kind=RelationshipKind.PEER,
                    score=proposal.score,
                    factors=list(proposal.factors),
                    room_number=proposal.room_number,
                    bed_number=bed_index + 1,
                    assigned_at=timestamp,
                ))
        return records

    @staticmethod
    def _same_placement(old: Assignment, new: Assignment) -> bool:
        return (
            old.subject_id == new.subject_id
            and old.counterpart_id == new.counterpart_id
            and old.score == new.score
            and old.factors == new.factors
        )

    def rooms(self) -> Dict[int, List[Assignment]]:
        """Group active peer records by room number, beds in order."""
        grouped: Dict[int, List[Assignment]] = {}
        for record in sorted(
            self.active_assignments(RelationshipKind.PEER),
            key=lambda r: (r.room_number, r.bed_number)
        ):
            grouped.setdefault(record.room_number, []).append(record)
        return grouped

    def peer_assigned_ids(self) -> set:
        return {r.subject_id for r in self.active_assignments(RelationshipKind.PEER)}

    # ------------------------------------------------------------------
    # Supervisor assignments
    # ------------------------------------------------------------------

    def create_supervisor_assignment(
        self,
        subject_id: str,
        supervisor_id: str,
        score: float,
        factors: List[str]
    ) -> Tuple[Assignment, bool]:
        """
        Record a supervisor assignment.

        Args:
            subject_id: Supervisee id
            supervisor_id: Supervisor id
            score: Supervisor compatibility score at assignment time
            factors: Factor explanations at assignment time

        Returns:
            Tuple of (record, created); created is False when an active
            assignment for the same pair already existed
        """
        with self._write_lock:
            for record in self._records.values():
                if (
                    record.kind == RelationshipKind.SUPERVISOR
                    and record.is_active
                    and record.subject_id == subject_id
                    and record.counterpart_id == supervisor_id
                ):
                    logger.info(
                        f"Supervisor {supervisor_id} already assigned to {subject_id} ({record.id})"
                    )
                    return record, False

            record = Assignment(
                id=f"sup-{self._next_supervisor_id}",
                subject_id=subject_id,
                counterpart_id=supervisor_id,
                kind=RelationshipKind.SUPERVISOR,
                score=score,
                factors=list(factors),
                assigned_at=_now(),
            )
            self._next_supervisor_id += 1
            self._records[record.id] = record

        logger.info(f"Created supervisor assignment {record.id}: {supervisor_id} -> {subject_id}")
        return record, True

    def rate_assignment(
        self,
        assignment_id: str,
        rating: int,
        notes: Optional[str] = None
    ) -> Assignment:
        """
        Set the effectiveness rating and notes of an assignment.

        Raises:
            InvalidInputError: If the rating is not an integer 1-5
            NotFoundError: If the assignment does not exist
        """
        rating = validate_int_range("effectiveness_rating", rating, RATING_MIN, RATING_MAX)
        with self._write_lock:
            record = self.get(assignment_id)
            record.effectiveness_rating = rating
            record.notes = notes
            record.updated_at = _now()
        logger.info(f"Rated assignment {assignment_id}: {rating}")
        return record

    def supervisor_workload(self, supervisor_id: str) -> Tuple[int, float]:
        """
        Active load and mean effectiveness of a supervisor.

        Unrated active assignments count as the default rating of 3.

        Returns:
            Tuple of (active assignment count, average effectiveness)
        """
        active = [
            r for r in self.active_assignments(RelationshipKind.SUPERVISOR)
            if r.counterpart_id == supervisor_id
        ]
        if not active:
            return 0, DEFAULT_EFFECTIVENESS
        ratings = [
            r.effectiveness_rating if r.effectiveness_rating is not None else DEFAULT_EFFECTIVENESS
            for r in active
        ]
        return len(active), float(np.mean(ratings))

    # ------------------------------------------------------------------
    # Reads and persistence
    # ------------------------------------------------------------------

    def get(self, assignment_id: str) -> Assignment:
        record = self._records.get(str(assignment_id))
        if record is None:
            raise NotFoundError("assignment", str(assignment_id))
        return record

    def active_assignments(self, kind: Optional[RelationshipKind] = None) -> List[Assignment]:
        return [
            r for r in self._records.values()
            if r.status == AssignmentStatus.ACTIVE and (kind is None or r.kind == kind)
        ]

    def all_assignments(self) -> List[Assignment]:
        return list(self._records.values())

    def to_dict(self) -> Dict:
        return {
            "next_supervisor_id": self._next_supervisor_id,
            "assignments": [r.to_dict() for r in self._records.values()],
        }

    def save(self, filepath: Optional[str] = None) -> None:
        """Save all records to a JSON file."""
        target = Path(filepath) if filepath else self.path
        if target is None:
            raise InvalidInputError("No path given for saving the assignment store")
        target.parent.mkdir(parents=True, exist_ok=True)
        with open(target, "w") as f:
            json.dump(self.to_dict(), f, indent=2)
        logger.info(f"Saved {len(self._records)} assignments to {target}")

    @classmethod
    def load(cls, filepath: str) -> "AssignmentStore":
        """Load a store from a JSON file written by save()."""
        with open(filepath, "r") as f:
            data = json.load(f)
        store = cls(filepath)
        for item in data.get("assignments", []):
            record = Assignment.from_dict(item)
            store._records[record.id] = record
        store._next_supervisor_id = data.get("next_supervisor_id", 1)
        logger.info(f"Loaded {len(store._records)} assignments from {filepath}")
        return store

    @classmethod
    def open(cls, filepath: Optional[str]) -> "AssignmentStore":
        """Load the store at filepath if it exists, otherwise start empty."""
        if filepath and Path(filepath).exists():
            return cls.load(filepath)
        return cls(filepath)
