"""Integration tests for CSV roster loading."""

from pathlib import Path

import pytest

from assignment_engine.configs import DEFAULT_CONFIG, merge_config
from assignment_engine.data_loading import load_people, load_roster, load_staff
from assignment_engine.exceptions import InvalidInputError
from assignment_engine.profiling import TraitGroup
from assignment_engine.roster import Role

PROJECT_ROOT = Path(__file__).resolve().parents[2]


def _write(path, text):
    path.write_text(text.strip() + "\n")
    return str(path)


@pytest.mark.integration
class TestLoaders:
    """Tests for load_people, load_staff and load_roster."""

    def test_sample_roster(self):
        roster = load_roster(DEFAULT_CONFIG, base_dir=str(PROJECT_ROOT))

        assert len(roster) == 10
        assert len(roster.people()) == 9
        assert roster.get_person("6").birth_date is None
        assert roster.get_person("9").age is None
        assert roster.get_person("2").trait_group == TraitGroup.FIRE
        assert roster.get_supervisor("S3").role == Role.INSTRUCTOR
        assert [s.id for s in roster.supervisors()] == ["S1", "S2", "S3", "S5"]

    def test_blank_cells_are_missing(self, tmp_path):
        path = _write(tmp_path / "people.csv", """
id,name,birth_date,age,group_tag,behavior_score
001,A,,,,2
002,B,2008-06-30,16.0,Bravo,4
""")
        people = load_people(path)

        assert [p.id for p in people] == ["001", "002"]
        assert people[0].birth_date is None
        assert people[0].age is None
        assert people[0].group_tag is None
        assert people[1].age == 16.0
        assert people[1].behavior_score == 4

    def test_semicolon_delimiter(self, tmp_path):
        path = _write(tmp_path / "people.csv", """
id;name;behavior_score
1;A;3
""")
        assert load_people(path, delimiter=";")[0].name == "A"

    def test_out_of_range_behavior_score(self, tmp_path):
        path = _write(tmp_path / "people.csv", """
id,behavior_score
1,3
2,7
""")
        with pytest.raises(InvalidInputError, match="row 2"):
            load_people(path)

    def test_malformed_birth_date(self, tmp_path):
        path = _write(tmp_path / "people.csv", """
id,birth_date
1,not-a-date
""")
        with pytest.raises(InvalidInputError):
            load_people(path)

    def test_missing_id_column(self, tmp_path):
        path = _write(tmp_path / "people.csv", """
name,behavior_score
A,3
""")
        with pytest.raises(InvalidInputError, match="id"):
            load_people(path)

    def test_staff_roles(self, tmp_path):
        path = _write(tmp_path / "staff.csv", """
id,role,experience_years,current_load
S1,Mentor,4,2
S2,instructor,,
""")
        staff = load_staff(path)

        assert staff[0].role == Role.MENTOR
        assert staff[0].current_load == 2
        assert staff[1].experience_years == 0.0

    def test_unknown_staff_role(self, tmp_path):
        path = _write(tmp_path / "staff.csv", """
id,role
S1,janitor
""")
        with pytest.raises(InvalidInputError):
            load_staff(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_people(str(tmp_path / "missing.csv"))

    def test_missing_staff_file_gives_empty_pool(self, tmp_path):
        _write(tmp_path / "people.csv", """
id,behavior_score
1,3
""")
        config = merge_config(DEFAULT_CONFIG, {
            "data": {"people": {"path": "people.csv"}, "staff": {"path": "staff.csv"}},
        })

        roster = load_roster(config, base_dir=str(tmp_path))

        assert len(roster) == 1
        assert roster.supervisors() == []
