"""Shared fixtures for assignment engine tests."""

import pytest

from assignment_engine.roster import Person, Roster, Supervisor
from assignment_engine.service import AssignmentService
from assignment_engine.store import AssignmentStore


@pytest.fixture
def make_person():
    """Factory for Person records with neutral defaults."""
    def _make(pid, **kwargs):
        return Person(id=pid, **kwargs)
    return _make


@pytest.fixture
def make_supervisor():
    """Factory for Supervisor records with neutral defaults."""
    def _make(pid, **kwargs):
        kwargs.setdefault("role", "mentor")
        return Supervisor(id=pid, **kwargs)
    return _make


@pytest.fixture
def people():
    return [
        Person(id="1", name="Jordan Avery", birth_date="2007-04-02", age=17,
               group_tag="Alpha", behavior_score=1, exam_status="in_progress"),
        Person(id="2", name="Riley Brooks", birth_date="2007-08-15", age=17,
               group_tag="Alpha", behavior_score=5),
        Person(id="3", name="Casey Chen", birth_date="2008-01-10", age=16,
               group_tag="Alpha", behavior_score=3, exam_status="completed"),
        Person(id="4", name="Morgan Diaz", birth_date="2007-12-28", age=17,
               group_tag="Bravo", behavior_score=4),
        Person(id="5", name="Taylor Evans", birth_date="2008-06-30", age=16,
               group_tag="Bravo", behavior_score=2),
        Person(id="6", name="Quinn Foster", age=16, group_tag="Bravo", behavior_score=3),
        Person(id="7", name="Drew Garcia", birth_date="2007-10-05", age=17,
               group_tag="Alpha", behavior_score=5),
        Person(id="8", name="Jamie Hughes", birth_date="2008-03-25", age=16,
               group_tag="Bravo", behavior_score=1, exam_status="completed"),
        Person(id="9", name="Avery Ingram", birth_date="2007-11-11",
               group_tag="Bravo", behavior_score=2),
        Person(id="10", name="Parker James", birth_date="2008-02-20", age=16,
               group_tag="Alpha", behavior_score=3, status="inactive"),
    ]


@pytest.fixture
def supervisors():
    return [
        Supervisor(id="S1", name="Dana Kim", birth_date="1985-09-01", role="mentor",
                   experience_years=6, group_tag="Alpha"),
        Supervisor(id="S2", name="Lee Morgan", birth_date="1990-07-04", role="counselor",
                   experience_years=2, group_tag="Bravo"),
        Supervisor(id="S3", name="Sam Ortiz", birth_date="1979-05-05", role="instructor",
                   experience_years=10, group_tag="Alpha"),
        Supervisor(id="S4", name="Robin Patel", birth_date="1992-02-14", role="administrator",
                   experience_years=4),
        Supervisor(id="S5", name="Chris Reed", role="mentor", experience_years=1,
                   group_tag="Bravo"),
    ]


@pytest.fixture
def roster(people, supervisors):
    return Roster(people, supervisors)


@pytest.fixture
def store():
    return AssignmentStore()


@pytest.fixture
def service(roster, store):
    return AssignmentService(roster, store)
