"""
Unit tests for peer and supervisor compatibility scoring.

Expected scores are written as the weighted sum of their terms so the
arithmetic is visible in each test.
"""

import itertools

import pytest

from assignment_engine.exceptions import InvalidInputError
from assignment_engine.roster import RecommendationLabel, RelationshipKind
from assignment_engine.scoring import (
    PEER_WEIGHTS,
    SUPERVISOR_WEIGHTS,
    CompatibilityScorer,
    recommendation_label,
    score,
)

FIRE_DATE = "2007-04-02"    # Aries
EARTH_DATE = "2008-01-10"   # Capricorn
AIR_DATE = "2007-10-05"     # Libra
WATER_DATE = "2008-06-30"   # Cancer

GROUP_DATES = {
    "Fire": FIRE_DATE,
    "Earth": EARTH_DATE,
    "Air": AIR_DATE,
    "Water": WATER_DATE,
}


@pytest.fixture
def scorer():
    return CompatibilityScorer()


def _factor(result, name):
    return next(f for f in result.factors if f.name == name)


@pytest.mark.unit
class TestPeerScore:
    """Tests for the peer formula."""

    def test_weights_sum_to_one(self):
        assert sum(PEER_WEIGHTS.values()) == pytest.approx(1.0)
        assert sum(SUPERVISOR_WEIGHTS.values()) == pytest.approx(1.0)

    def test_two_high_risk_without_data(self, scorer, make_person):
        """Both high-risk with no birth date, age or group."""
        a = make_person("a", behavior_score=5)
        b = make_person("b", behavior_score=5)

        result = scorer.score(a, b)

        expected = 0.3 * 0.1 + 0.4 * 0.5 + 0.2 * 0.5 + 0.1 * 0.5
        assert result.score == pytest.approx(expected)
        assert result.score == pytest.approx(0.38)
        assert result.recommendation_label == RecommendationLabel.MODERATE
        assert "Both high-risk - pairing discouraged" in result.explanations
        assert "Insufficient data - missing birth date" in result.explanations
        assert "Insufficient data - missing age" in result.explanations

    def test_mentor_pairing(self, scorer, make_person):
        """Low-risk with high-risk, same trait group, age and group tag."""
        a = make_person("a", behavior_score=1, birth_date=FIRE_DATE, age=17, group_tag="Alpha")
        b = make_person("b", behavior_score=5, birth_date=FIRE_DATE, age=17, group_tag="Alpha")

        result = scorer.score(a, b)

        expected = 0.3 * 0.9 + 0.4 * 0.8 + 0.2 * 1.0 + 0.1 * 1.0
        assert result.score == pytest.approx(expected)
        assert result.score == pytest.approx(0.89)
        assert result.recommendation_label == RecommendationLabel.EXCELLENT
        assert result.explanations[0] == "Mentor/mentee pairing - encouraged"
        assert result.explanations[1] == "Aries (Fire) with Aries (Fire) - same group"
        assert result.explanations[2] == "Age difference of 0 years"
        assert result.explanations[3] == "Same group (Alpha)"

    @pytest.mark.parametrize("score_a, score_b, expected", [
        (3, 3, 1.0),
        (2, 3, 2 / 3),
        (1, 3, 1 / 3),
        (3, 4, 2 / 3),
        (1, 2, 2 / 3),
        (4, 5, 0.1),
        (2, 4, 0.9),
        (1, 5, 0.9),
    ])
    def test_behavior_term(self, scorer, make_person, score_a, score_b, expected):
        a = make_person("a", behavior_score=score_a)
        b = make_person("b", behavior_score=score_b)
        assert _factor(scorer.score(a, b), "behavior").score == pytest.approx(expected)

    @pytest.mark.parametrize("group_a, group_b, expected", [
        ("Fire", "Fire", 0.8),
        ("Water", "Water", 0.8),
        ("Fire", "Air", 0.7),
        ("Earth", "Water", 0.7),
        ("Fire", "Water", 0.3),
        ("Earth", "Air", 0.3),
    ])
    def test_trait_table(self, scorer, make_person, group_a, group_b, expected):
        a = make_person("a", birth_date=GROUP_DATES[group_a])
        b = make_person("b", birth_date=GROUP_DATES[group_b])
        assert _factor(scorer.score(a, b), "trait").score == pytest.approx(expected)

    def test_trait_neutral_when_one_birth_date_missing(self, scorer, make_person):
        a = make_person("a", birth_date=FIRE_DATE)
        b = make_person("b")
        factor = _factor(scorer.score(a, b), "trait")
        assert factor.score == 0.5
        assert factor.explanation == "Insufficient data - missing birth date"

    @pytest.mark.parametrize("age_a, age_b, expected", [
        (17, 17, 1.0),
        (16, 18, 0.5),
        (15, 19, 0.0),
        (14, 20, 0.0),
        (16.5, 17, 0.875),
    ])
    def test_age_term(self, scorer, make_person, age_a, age_b, expected):
        a = make_person("a", age=age_a)
        b = make_person("b", age=age_b)
        assert _factor(scorer.score(a, b), "age").score == pytest.approx(expected)

    @pytest.mark.parametrize("tag_a, tag_b, expected", [
        ("Alpha", "Alpha", 1.0),
        ("Alpha", "Bravo", 0.5),
        ("Alpha", None, 0.5),
        (None, None, 0.5),
    ])
    def test_cohort_term(self, scorer, make_person, tag_a, tag_b, expected):
        a = make_person("a", group_tag=tag_a)
        b = make_person("b", group_tag=tag_b)
        assert _factor(scorer.score(a, b), "cohort").score == expected

    def test_lowest_peer_score(self, scorer, make_person):
        """Both high-risk, challenging groups, distant ages, different tags."""
        a = make_person("a", behavior_score=5, birth_date=FIRE_DATE, age=14, group_tag="X")
        b = make_person("b", behavior_score=4, birth_date=WATER_DATE, age=19, group_tag="Y")

        result = scorer.score(a, b)

        expected = 0.3 * 0.1 + 0.4 * 0.3 + 0.2 * 0.0 + 0.1 * 0.5
        assert result.score == pytest.approx(expected)
        assert result.recommendation_label == RecommendationLabel.NOT_RECOMMENDED

    def test_factor_order(self, scorer, make_person):
        result = scorer.score(make_person("a"), make_person("b"))
        assert [f.name for f in result.factors] == ["behavior", "trait", "age", "cohort"]
        assert len(result.explanations) == 4

    def test_symmetric_and_bounded(self, scorer, people):
        """Peer scores are symmetric and stay within [0, 1] for every pair."""
        for a, b in itertools.combinations(people, 2):
            forward = scorer.score(a, b)
            backward = scorer.score(b, a)
            assert forward.score == backward.score
            assert 0.0 <= forward.score <= 1.0
            assert all(0.0 <= f.score <= 1.0 for f in forward.factors)

    def test_module_level_score(self, make_person):
        a = make_person("a", behavior_score=5)
        b = make_person("b", behavior_score=5)
        assert score(a, b).score == pytest.approx(0.38)
        assert score(a, b, "peer").kind == RelationshipKind.PEER


@pytest.mark.unit
class TestSupervisorScore:
    """Tests for the supervisor formula."""

    def test_full_formula(self, scorer, make_person, make_supervisor):
        """Experienced mentor with water traits for a high-risk fire supervisee."""
        person = make_person("p", behavior_score=5, birth_date=FIRE_DATE)
        staff = make_supervisor(
            "s", role="mentor", experience_years=6, birth_date="1990-07-04", current_load=1
        )

        result = scorer.score(person, staff, RelationshipKind.SUPERVISOR)

        expected = 0.4 * 1.0 + 0.35 * 0.8 + 0.15 * 0.8 + 0.1 * 1.0
        assert result.score == pytest.approx(expected)
        assert result.recommendation_label == RecommendationLabel.EXCELLENT
        assert result.explanations == [
            "Experienced staff (6yr) well-matched for high-risk person",
            "Staff Cancer (Water) supervising Aries (Fire) - Water staff provides emotional support",
            "Current workload of 1 assignments",
            "Appropriate mentoring role",
        ]

    @pytest.mark.parametrize("behavior, years, expected", [
        (4, 3, 1.0),
        (5, 10, 1.0),
        (4, 2.9, 0.3),
        (5, 0, 0.3),
        (3, 2.5, 0.5),
        (1, 5, 1.0),
        (2, 12, 1.0),
        (3, 0, 0.0),
    ])
    def test_experience_term(self, scorer, make_person, make_supervisor, behavior, years, expected):
        person = make_person("p", behavior_score=behavior)
        staff = make_supervisor("s", experience_years=years)
        result = scorer.score(person, staff, "supervisor")
        assert _factor(result, "experience").score == pytest.approx(expected)

    def test_under_experienced_flagged(self, scorer, make_person, make_supervisor):
        person = make_person("p", behavior_score=4)
        staff = make_supervisor("s", experience_years=1)
        factor = _factor(scorer.score(person, staff, "supervisor"), "experience")
        assert factor.explanation == "Under-experienced staff (1yr) for high-risk person - flagged"

    @pytest.mark.parametrize("staff_group, person_group, expected", [
        ("Earth", "Fire", 0.7),
        ("Earth", "Air", 0.7),
        ("Earth", "Earth", 0.8),
        ("Water", "Fire", 0.8),
        ("Water", "Water", 0.8),
        ("Water", "Earth", 0.5),
        ("Water", "Air", 0.5),
        ("Fire", "Earth", 0.7),
        ("Fire", "Air", 0.7),
        ("Fire", "Fire", 0.8),
        ("Fire", "Water", 0.5),
        ("Air", "Fire", 0.7),
        ("Air", "Air", 0.8),
        ("Air", "Earth", 0.5),
        ("Air", "Water", 0.5),
    ])
    def test_trait_rules(self, scorer, make_person, make_supervisor,
                         staff_group, person_group, expected):
        person = make_person("p", birth_date=GROUP_DATES[person_group])
        staff = make_supervisor("s", birth_date=GROUP_DATES[staff_group])
        result = scorer.score(person, staff, "supervisor")
        assert _factor(result, "trait").score == pytest.approx(expected)

    def test_trait_neutral_when_staff_birth_date_missing(self, scorer, make_person, make_supervisor):
        person = make_person("p", birth_date=FIRE_DATE)
        staff = make_supervisor("s")
        factor = _factor(scorer.score(person, staff, "supervisor"), "trait")
        assert factor.score == 0.5
        assert factor.explanation == "Insufficient data - missing birth date"

    @pytest.mark.parametrize("load, expected", [
        (0, 1.0),
        (2, 0.6),
        (4, 0.2),
        (5, 0.0),
        (8, 0.0),
    ])
    def test_workload_term(self, scorer, make_person, make_supervisor, load, expected):
        result = scorer.score(
            make_person("p"), make_supervisor("s", current_load=load), "supervisor"
        )
        assert _factor(result, "workload").score == pytest.approx(expected)

    def test_high_workload_explanation(self, scorer, make_person, make_supervisor):
        result = scorer.score(make_person("p"), make_supervisor("s", current_load=4), "supervisor")
        assert _factor(result, "workload").explanation == "High workload (4 assignments)"

    @pytest.mark.parametrize("role, exam_status, expected", [
        ("mentor", "not_started", 1.0),
        ("counselor", "completed", 1.0),
        ("instructor", "in_progress", 0.8),
        ("instructor", "completed", 0.5),
        ("administrator", "not_started", 0.5),
        ("other", "not_started", 0.5),
    ])
    def test_role_term(self, scorer, make_person, make_supervisor, role, exam_status, expected):
        person = make_person("p", exam_status=exam_status)
        staff = make_supervisor("s", role=role)
        result = scorer.score(person, staff, "supervisor")
        assert _factor(result, "role").score == expected

    def test_bounded(self, scorer, people, supervisors):
        for person in people:
            for staff in supervisors:
                result = scorer.score(person, staff, RelationshipKind.SUPERVISOR)
                assert 0.0 <= result.score <= 1.0

    def test_requires_supervisor_counterpart(self, scorer, make_person):
        with pytest.raises(InvalidInputError):
            scorer.score(make_person("p"), make_person("q"), RelationshipKind.SUPERVISOR)

    def test_unknown_kind_rejected(self, scorer, make_person):
        with pytest.raises(InvalidInputError):
            scorer.score(make_person("p"), make_person("q"), "friend")


@pytest.mark.unit
@pytest.mark.parametrize("value, kind, expected", [
    (0.71, RelationshipKind.PEER, RecommendationLabel.EXCELLENT),
    (0.70, RelationshipKind.PEER, RecommendationLabel.GOOD),
    (0.50, RelationshipKind.PEER, RecommendationLabel.MODERATE),
    (0.31, RelationshipKind.PEER, RecommendationLabel.MODERATE),
    (0.30, RelationshipKind.PEER, RecommendationLabel.NOT_RECOMMENDED),
    (0.81, RelationshipKind.SUPERVISOR, RecommendationLabel.EXCELLENT),
    (0.80, RelationshipKind.SUPERVISOR, RecommendationLabel.GOOD),
    (0.60, RelationshipKind.SUPERVISOR, RecommendationLabel.MODERATE),
    (0.40, RelationshipKind.SUPERVISOR, RecommendationLabel.NOT_RECOMMENDED),
    (0.0, RelationshipKind.SUPERVISOR, RecommendationLabel.NOT_RECOMMENDED),
])
def test_recommendation_label_thresholds(value, kind, expected):
    """Thresholds use a strict greater-than comparison."""
    assert recommendation_label(value, kind) == expected
