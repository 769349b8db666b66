"""Unit tests for roster record validation."""

import pytest

from assignment_engine.exceptions import InvalidInputError
from assignment_engine.roster import Person, Role, Supervisor


@pytest.mark.unit
def test_person_normalizes_inputs():
    person = Person(id=7, birth_date="2008-01-10", age="16", behavior_score=4.0)
    assert person.id == "7"
    assert person.age == 16.0
    assert person.behavior_score == 4
    assert person.to_dict()["trait_group"] == "Earth"


@pytest.mark.unit
@pytest.mark.parametrize("kwargs", [
    {"behavior_score": 0},
    {"behavior_score": 6},
    {"behavior_score": 2.5},
    {"age": -1},
    {"birth_date": "2008-01-10 garbage"},
])
def test_person_rejects_invalid_values(kwargs):
    with pytest.raises(InvalidInputError):
        Person(id="p", **kwargs)


@pytest.mark.unit
def test_supervisor_defaults():
    staff = Supervisor(id="s", role="Counselor", average_effectiveness=None)
    assert staff.role == Role.COUNSELOR
    assert staff.current_load == 0
    assert staff.average_effectiveness == 3.0


@pytest.mark.unit
@pytest.mark.parametrize("value", [1, 4.5, "5"])
def test_supervisor_accepts_effectiveness_in_range(value):
    assert Supervisor(id="s", average_effectiveness=value).average_effectiveness == float(value)


@pytest.mark.unit
@pytest.mark.parametrize("kwargs", [
    {"average_effectiveness": 0.5},
    {"average_effectiveness": 5.5},
    {"average_effectiveness": -2},
    {"average_effectiveness": "high"},
    {"experience_years": -1},
    {"current_load": -1},
    {"current_load": 1.5},
    {"role": "janitor"},
])
def test_supervisor_rejects_invalid_values(kwargs):
    with pytest.raises(InvalidInputError):
        Supervisor(id="s", **kwargs)
