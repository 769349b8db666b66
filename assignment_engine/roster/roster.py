"""
In-memory roster of people and staff.

The roster is the collaborator that supplies records to the engine. It
resolves identifiers (raising NotFoundError for unknown ids) and applies
cohort and pool filters before anything is scored.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Set

from ..exceptions import InvalidInputError, NotFoundError
from .schema import Person, Role, Supervisor

logger = logging.getLogger(__name__)

DEFAULT_SUPERVISOR_ROLES = (Role.MENTOR, Role.COUNSELOR, Role.INSTRUCTOR)


@dataclass
class CohortFilter:
    """
    Selection of people to pair.

    Attributes:
        group_tags: Only include people with one of these tags (None = all)
        person_ids: Only include these ids (None = all)
        include_inactive: Include people whose status is not 'active'
    """
    group_tags: Optional[Set[str]] = None
    person_ids: Optional[Set[str]] = None
    include_inactive: bool = False

    def __post_init__(self):
        if self.group_tags is not None:
            self.group_tags = {str(tag) for tag in self.group_tags}
        if self.person_ids is not None:
            self.person_ids = {str(pid) for pid in self.person_ids}

    def matches(self, person: Person) -> bool:
        if not self.include_inactive and not person.is_active:
            return False
        if self.group_tags is not None and person.group_tag not in self.group_tags:
            return False
        if self.person_ids is not None and person.id not in self.person_ids:
            return False
        return True


@dataclass
class PoolFilter:
    """
    Selection of candidate supervisors.

    Attributes:
        roles: Allowed roles (defaults to mentor, counselor, instructor)
        group_tags: Only include staff with one of these tags (None = all)
        include_inactive: Include staff whose status is not 'active'
    """
    roles: Optional[Set[Role]] = None
    group_tags: Optional[Set[str]] = None
    include_inactive: bool = False

    def __post_init__(self):
        if self.roles is None:
            self.roles = set(DEFAULT_SUPERVISOR_ROLES)
        else:
            try:
                self.roles = {Role(r) if isinstance(r, str) else r for r in self.roles}
            except ValueError as e:
                raise InvalidInputError(f"Unknown role in pool filter: {e}")
        if self.group_tags is not None:
            self.group_tags = {str(tag) for tag in self.group_tags}

    def matches(self, supervisor: Supervisor) -> bool:
        if not self.include_inactive and not supervisor.is_active:
            return False
        if supervisor.role not in self.roles:
            return False
        if self.group_tags is not None and supervisor.group_tag not in self.group_tags:
            return False
        return True


class Roster:
    """
    Lookup and filtering over people and supervisors.

    Insertion order is preserved, so cohorts and pools are returned in the
    order records were added. The pairing tie-break depends on this order.
    """

    def __init__(
        self,
        people: Optional[Iterable[Person]] = None,
        supervisors: Optional[Iterable[Supervisor]] = None
    ):
        self._people: Dict[str, Person] = {}
        self._supervisors: Dict[str, Supervisor] = {}
        for person in people or []:
            self.add_person(person)
        for supervisor in supervisors or []:
            self.add_supervisor(supervisor)
        logger.debug(f"Roster holds {len(self._people)} people and {len(self._supervisors)} supervisors")

    def add_person(self, person: Person) -> None:
        if person.id in self._people:
            raise InvalidInputError(f"Duplicate person id: {person.id}")
        self._people[person.id] = person

    def add_supervisor(self, supervisor: Supervisor) -> None:
        if supervisor.id in self._supervisors:
            raise InvalidInputError(f"Duplicate supervisor id: {supervisor.id}")
        self._supervisors[supervisor.id] = supervisor

    def get_person(self, person_id: str) -> Person:
        """
        Resolve a person by id.

        Raises:
            NotFoundError: If no such person exists
        """
        person = self._people.get(str(person_id))
        if person is None:
            raise NotFoundError("person", str(person_id))
        return person

    def get_supervisor(self, supervisor_id: str) -> Supervisor:
        """
        Resolve a supervisor by id.

        Raises:
            NotFoundError: If no such supervisor exists
        """
        supervisor = self._supervisors.get(str(supervisor_id))
        if supervisor is None:
            raise NotFoundError("supervisor", str(supervisor_id))
        return supervisor

    def people(self, cohort_filter: Optional[CohortFilter] = None) -> List[Person]:
        cohort_filter = cohort_filter or CohortFilter()
        return [p for p in self._people.values() if cohort_filter.matches(p)]

    def supervisors(self, pool_filter: Optional[PoolFilter] = None) -> List[Supervisor]:
        pool_filter = pool_filter or PoolFilter()
        return [s for s in self._supervisors.values() if pool_filter.matches(s)]

    def __len__(self) -> int:
        return len(self._people)
