"""
Data model for roster records and assignment results.

Roster records (Person, Supervisor) are supplied by the roster collaborator.
Result records (proposals, suggestions, assignments) are produced by the
engine and, once applied, persisted by the AssignmentStore.

Conventions:
- behavior_score is an integer 1-5 where a HIGH score means HIGH risk
- trait_group is derived from birth_date and is None when it is unknown
"""

from dataclasses import dataclass, field, asdict
from datetime import date
from enum import Enum
from typing import Optional, Dict, Any, List

from ..exceptions import InvalidInputError
from ..profiling import TraitGroup, TraitProfile, ZodiacSign, derive_profile, parse_birth_date

BEHAVIOR_SCORE_MIN = 1
BEHAVIOR_SCORE_MAX = 5
RATING_MIN = 1
RATING_MAX = 5


class Role(Enum):
    """Staff roles recognized by the supervisor ranker."""
    MENTOR = "mentor"
    COUNSELOR = "counselor"
    INSTRUCTOR = "instructor"
    ADMINISTRATOR = "administrator"
    OTHER = "other"


class RelationshipKind(Enum):
    """Relationship being scored."""
    PEER = "peer"
    SUPERVISOR = "supervisor"


class RecommendationLabel(Enum):
    """Display tier derived from score thresholds."""
    EXCELLENT = "excellent"
    GOOD = "good"
    MODERATE = "moderate"
    NOT_RECOMMENDED = "not_recommended"
    SINGLE_OCCUPANCY = "single_occupancy"


class AssignmentStatus(Enum):
    """Lifecycle status of a persisted assignment."""
    ACTIVE = "active"
    COMPLETED = "completed"
    TERMINATED = "terminated"


def validate_int_range(name: str, value: Any, low: int, high: int) -> int:
    """
    Check that a value is an integer within [low, high].

    Integral floats (e.g., 4.0 read from a CSV column) are accepted.

    Raises:
        InvalidInputError: If the value is not an integer or out of range
    """
    if isinstance(value, bool):
        raise InvalidInputError(f"{name} must be an integer between {low} and {high}, got {value}")
    try:
        as_float = float(value)
    except (TypeError, ValueError):
        raise InvalidInputError(f"{name} must be an integer between {low} and {high}, got {value!r}")
    if not as_float.is_integer() or not low <= as_float <= high:
        raise InvalidInputError(f"{name} must be an integer between {low} and {high}, got {value}")
    return int(as_float)


def _optional_number(name: str, value: Any) -> Optional[float]:
    if value is None:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidInputError(f"{name} must be a number, got {value!r}")
    if number < 0:
        raise InvalidInputError(f"{name} must be non-negative, got {value}")
    return number


@dataclass
class Person:
    """
    One roster member.

    Attributes:
        id: Roster identifier (stored as a string)
        name: Display name
        birth_date: Birth date; drives the derived trait profile
        age: Age in years
        group_tag: Platoon or cohort tag
        behavior_score: Integer 1-5, higher is more concerning
        exam_status: Exam-readiness status ('completed' when finished)
        status: Roster status; only 'active' people are paired by default
    """
    id: str
    name: Optional[str] = None
    birth_date: Optional[date] = None
    age: Optional[float] = None
    group_tag: Optional[str] = None
    behavior_score: int = 3
    exam_status: str = "not_started"
    status: str = "active"

    def __post_init__(self):
        """Normalize inputs and validate ranges."""
        if self.id is None or str(self.id).strip() == "":
            raise InvalidInputError("id is required")
        self.id = str(self.id)
        self.birth_date = parse_birth_date(self.birth_date)
        self.age = _optional_number("age", self.age)
        self.behavior_score = validate_int_range(
            "behavior_score", self.behavior_score, BEHAVIOR_SCORE_MIN, BEHAVIOR_SCORE_MAX
        )

    @property
    def profile(self) -> TraitProfile:
        return derive_profile(self.birth_date)

    @property
    def sign(self) -> Optional[ZodiacSign]:
        return self.profile.sign

    @property
    def trait_group(self) -> Optional[TraitGroup]:
        return self.profile.group

    @property
    def is_active(self) -> bool:
        return self.status == "active"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary, including the derived profile."""
        profile = self.profile
        return {
            "id": self.id,
            "name": self.name,
            "birth_date": self.birth_date.isoformat() if self.birth_date else None,
            "age": self.age,
            "group_tag": self.group_tag,
            "behavior_score": self.behavior_score,
            "exam_status": self.exam_status,
            "status": self.status,
            "zodiac_sign": profile.sign.value if profile.sign else None,
            "trait_group": profile.group.value if profile.group else None,
        }


@dataclass
class Supervisor(Person):
    """
    Staff member who can be assigned to supervise a person.

    Attributes:
        experience_years: Years of experience (>= 0)
        role: Staff role
        current_load: Number of active supervision assignments
        average_effectiveness: Mean effectiveness rating (1-5), 3 when unrated
    """
    experience_years: float = 0.0
    role: Role = Role.OTHER
    current_load: int = 0
    average_effectiveness: float = 3.0

    def __post_init__(self):
        super().__post_init__()
        if isinstance(self.role, str):
            try:
                self.role = Role(self.role.strip().lower())
            except ValueError:
                raise InvalidInputError(f"Unknown role: {self.role!r}")
        self.experience_years = _optional_number("experience_years", self.experience_years) or 0.0
        load = _optional_number("current_load", self.current_load) or 0.0
        if not load.is_integer():
            raise InvalidInputError(f"current_load must be an integer, got {self.current_load}")
        self.current_load = int(load)
        effectiveness = _optional_number("average_effectiveness", self.average_effectiveness)
        if effectiveness is None:
            effectiveness = 3.0
        if not RATING_MIN <= effectiveness <= RATING_MAX:
            raise InvalidInputError(
                f"average_effectiveness must be between {RATING_MIN} and {RATING_MAX}, "
                f"got {self.average_effectiveness}"
            )
        self.average_effectiveness = effectiveness

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result.update({
            "experience_years": self.experience_years,
            "role": self.role.value,
            "current_load": self.current_load,
            "average_effectiveness": self.average_effectiveness,
        })
        return result


@dataclass(frozen=True)
class CompatibilityFactor:
    """
    One weighted term of a compatibility score.

    Attributes:
        name: Factor identifier (e.g., 'behavior', 'trait')
        score: Term value in [0, 1]
        weight: Weight of the term in the final score
        explanation: Human-readable description of how the term was derived
    """
    name: str
    score: float
    weight: float
    explanation: str

    @property
    def contribution(self) -> float:
        return self.score * self.weight

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class CompatibilityResult:
    """
    Result of scoring one pair.

    Attributes:
        score: Weighted, clamped score in [0, 1]
        factors: Factor terms in evaluation order
        kind: Relationship kind that was scored
        recommendation_label: Tier derived from the kind's thresholds
    """
    score: float
    factors: List[CompatibilityFactor]
    kind: RelationshipKind
    recommendation_label: RecommendationLabel

    @property
    def explanations(self) -> List[str]:
        return [factor.explanation for factor in self.factors]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "score": self.score,
            "kind": self.kind.value,
            "recommendation_label": self.recommendation_label.value,
            "factors": self.explanations,
            "breakdown": [factor.to_dict() for factor in self.factors],
        }


@dataclass
class PairProposal:
    """
    One proposed room.

    Attributes:
        room_number: Sequential room number, starting at 1
        members: One or two people
        score: Pair score, or None for single occupancy
        factors: Factor explanations of the pair score
        recommendation_label: Score tier, or single_occupancy
        recommendations: Display notes for staff
    """
    room_number: int
    members: List[Person]
    score: Optional[float]
    factors: List[str] = field(default_factory=list)
    recommendation_label: RecommendationLabel = RecommendationLabel.NOT_RECOMMENDED
    recommendations: List[str] = field(default_factory=list)

    @property
    def is_single(self) -> bool:
        return len(self.members) == 1

    @property
    def requires_supervision(self) -> bool:
        return self.score is not None and self.score <= 0.3

    def member_ids(self) -> List[str]:
        return [member.id for member in self.members]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "room_number": self.room_number,
            "members": [member.to_dict() for member in self.members],
            "score": self.score,
            "factors": list(self.factors),
            "recommendation_label": self.recommendation_label.value,
            "recommendations": list(self.recommendations),
            "requires_supervision": self.requires_supervision,
        }


@dataclass
class SupervisorSuggestion:
    """A ranked supervisor candidate for one person."""
    supervisor: Supervisor
    score: float
    factors: List[str]
    recommendation_label: RecommendationLabel

    def to_dict(self) -> Dict[str, Any]:
        return {
            "supervisor": self.supervisor.to_dict(),
            "score": self.score,
            "factors": list(self.factors),
            "recommendation_label": self.recommendation_label.value,
            "current_load": self.supervisor.current_load,
            "average_effectiveness": self.supervisor.average_effectiveness,
        }


@dataclass
class PeerSuggestion:
    """A ranked roommate candidate for one person."""
    candidate: Person
    score: float
    factors: List[str]
    recommendation_label: RecommendationLabel

    def to_dict(self) -> Dict[str, Any]:
        return {
            "candidate": self.candidate.to_dict(),
            "score": self.score,
            "factors": list(self.factors),
            "recommendation_label": self.recommendation_label.value,
        }


@dataclass
class Assignment:
    """
    Persisted assignment record.

    Peer records hold one row per room occupant, with the roommate as
    counterpart (None for single occupancy). Supervisor records hold the
    supervisee as subject and the supervisor as counterpart.
    """
    id: str
    subject_id: str
    counterpart_id: Optional[str]
    kind: RelationshipKind
    score: Optional[float]
    factors: List[str] = field(default_factory=list)
    effectiveness_rating: Optional[int] = None
    notes: Optional[str] = None
    status: AssignmentStatus = AssignmentStatus.ACTIVE
    room_number: Optional[int] = None
    bed_number: Optional[int] = None
    assigned_at: Optional[str] = None
    updated_at: Optional[str] = None

    def __post_init__(self):
        """Convert string inputs to enums if needed."""
        if isinstance(self.kind, str):
            self.kind = RelationshipKind(self.kind)
        if isinstance(self.status, str):
            self.status = AssignmentStatus(self.status)

    @property
    def is_active(self) -> bool:
        return self.status == AssignmentStatus.ACTIVE

    def to_dict(self) -> Dict[str, Any]:
        result = asdict(self)
        result["kind"] = self.kind.value
        result["status"] = self.status.value
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Assignment":
        return cls(**data)
