"""
Shared types for the energy engine.

Closed enums for every tagged value (lunar phases, energy categories,
alignment buckets, ...), frozen dataclasses for the readings the engine
produces, plain dataclasses for the histories collaborators supply, and the
two error shapes:

  - InvalidInput      raised immediately on malformed input
  - InsufficientData  returned (never raised) when an analysis lacks samples
"""
from dataclasses import asdict, dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Optional

from dateutil.parser import ParserError, parse as parse_date


class InvalidInput(ValueError):
    """Malformed or missing input: bad date of birth, out-of-range date, ..."""


@dataclass(frozen=True)
class InsufficientData:
    """Not enough samples yet. An expected state for new users, not an error."""
    reason: str
    required: int
    available: int

    def to_dict(self) -> dict:
        return {"status": "INSUFFICIENT_DATA", **asdict(self)}


# ── Enums ──────────────────────────────────────────────────────────────────────

class LunarPhase(Enum):
    NEW_MOON = "new_moon"
    WAXING_CRESCENT = "waxing_crescent"
    FIRST_QUARTER = "first_quarter"
    WAXING_GIBBOUS = "waxing_gibbous"
    FULL_MOON = "full_moon"
    WANING_GIBBOUS = "waning_gibbous"
    LAST_QUARTER = "last_quarter"
    WANING_CRESCENT = "waning_crescent"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ").title()


class EnergyCategory(Enum):
    """The nine energy categories, in index order."""
    CREATIVE_FLOW = ("Creative Flow", "High imagination, idea generation, artistic expression")
    FOCUSED_EXECUTION = ("Focused Execution", "Deep concentration, task completion, analytical work")
    REFLECTIVE_PAUSE = ("Reflective Pause", "Introspection, planning, rest, consolidation")
    COMMUNICATIVE_ENERGY = ("Communicative Energy", "Networking, presentations, negotiations, social interaction")
    GROUNDED_STABILITY = ("Grounded Stability", "Practical tasks, organization, routine, maintenance")
    HIGH_MOMENTUM = ("High Momentum", "Fast-paced, action-oriented, initiating energy")
    STRUCTURED_GROWTH = ("Structured Growth", "Methodical progress, building, step-by-step advancement")
    TRANSFORMATIVE = ("Transformative", "Change, release, endings and new beginnings")
    HARMONIOUS = ("Harmonious", "Balance, relationships, beauty, cooperation")

    def __init__(self, label: str, description: str):
        self.label = label
        self.description = description

    @classmethod
    def at(cls, index: int) -> "EnergyCategory":
        members = list(cls)
        return members[index % len(members)]


class Alignment(Enum):
    STRONG = "strong"
    MODERATE = "moderate"
    CHALLENGING = "challenging"


class Element(Enum):
    """Declared in generative order: each element nourishes the next."""
    WOOD = "Wood"
    FIRE = "Fire"
    EARTH = "Earth"
    METAL = "Metal"
    WATER = "Water"


class DoshaType(Enum):
    VATA = "Vata"
    PITTA = "Pitta"
    KAPHA = "Kapha"


class CorrelationStrength(Enum):
    STRONG = "strong"
    MODERATE = "moderate"
    WEAK = "weak"
    NONE = "none"


class Trend(Enum):
    IMPROVING = "improving"
    DECLINING = "declining"
    STABLE = "stable"


class Impact(Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class PatternKind(Enum):
    DAY_OF_WEEK = "day_of_week"
    TIME_OF_DAY = "time_of_day"
    LUNAR_PHASE = "lunar_phase"


class TimeOfDay(Enum):
    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"


# ── Input coercion ─────────────────────────────────────────────────────────────

def coerce_datetime(value, field_name: str = "date") -> datetime:
    """
    Accept a datetime, a date (local midnight) or an ISO-ish string.
    Anything else raises InvalidInput.
    """
    if value is None:
        raise InvalidInput(f"{field_name} is required")
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, str):
        try:
            return parse_date(value)
        except (ParserError, ValueError, OverflowError) as e:
            raise InvalidInput(f"{field_name} is not a valid date: {value!r}") from e
    raise InvalidInput(f"{field_name} must be a date, datetime or string, got {type(value).__name__}")


def coerce_date(value, field_name: str = "date") -> date:
    return coerce_datetime(value, field_name).date()


# ── Profile ────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class BirthPlace:
    """Accepted and carried; no formula reads it."""
    city: str = ""
    country: str = ""
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    _ALIASES = {"lat": "latitude", "lon": "longitude", "lng": "longitude"}

    @classmethod
    def from_dict(cls, data) -> "BirthPlace":
        if not isinstance(data, dict):
            raise InvalidInput(f"birth_place must be an object, got {type(data).__name__}")
        fields = {}
        for key, value in data.items():
            name = cls._ALIASES.get(key, key)
            if name not in ("city", "country", "latitude", "longitude"):
                raise InvalidInput(f"birth_place has unknown field {key!r}")
            if name in ("latitude", "longitude") and value is not None:
                try:
                    value = float(value)
                except (TypeError, ValueError) as e:
                    raise InvalidInput(f"birth_place.{name} must be a number, got {value!r}") from e
            fields[name] = value
        return cls(**fields)


@dataclass(frozen=True)
class UserProfile:
    date_of_birth: date
    name: str = ""
    birth_place: Optional[BirthPlace] = None

    def __post_init__(self):
        # Normalise datetimes and strings to a plain date, reject the rest.
        object.__setattr__(self, "date_of_birth", coerce_date(self.date_of_birth, "date_of_birth"))

    @classmethod
    def from_dict(cls, data: dict) -> "UserProfile":
        if not isinstance(data, dict):
            raise InvalidInput(f"profile must be an object, got {type(data).__name__}")
        place = data.get("birth_place") or data.get("birthPlace") or data.get("place_of_birth")
        return cls(
            date_of_birth=data.get("date_of_birth") or data.get("dateOfBirth"),
            name=data.get("name", ""),
            birth_place=BirthPlace.from_dict(place) if place else None,
        )


# ── Readings ───────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class EnergyReading:
    category: EnergyCategory
    intensity: int
    color: str

    @property
    def label(self) -> str:
        return self.category.label

    @property
    def description(self) -> str:
        return self.category.description

    def to_dict(self) -> dict:
        return {
            "type": self.category.label,
            "description": self.category.description,
            "intensity": self.intensity,
            "color": self.color,
        }


@dataclass(frozen=True)
class ConnectionReading:
    alignment: Alignment
    score: float
    color: str
    summary: str

    def to_dict(self) -> dict:
        return {
            "alignment": self.alignment.value,
            "score": round(self.score, 4),
            "color": self.color,
            "summary": self.summary,
        }


@dataclass(frozen=True)
class DailyEnergyRecord:
    date: datetime
    user_energy: EnergyReading
    environmental_energy: EnergyReading
    connection: ConnectionReading
    lunar_phase: LunarPhase
    lunar_fraction: float
    life_path: int
    personal_year: int
    day_number: int
    birth_element: Element
    year_element: Element
    dosha: DoshaType
    dosha_energy: int

    @property
    def perfect_day_score(self) -> int:
        return int(round(self.connection.score * 100))

    def to_dict(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "user_energy": self.user_energy.to_dict(),
            "environmental_energy": self.environmental_energy.to_dict(),
            "connection": self.connection.to_dict(),
            "lunar_phase": self.lunar_phase.value,
            "lunar_fraction": round(self.lunar_fraction, 6),
            "life_path": self.life_path,
            "personal_year": self.personal_year,
            "day_number": self.day_number,
            "birth_element": self.birth_element.value,
            "year_element": self.year_element.value,
            "dosha": self.dosha.value,
            "dosha_energy": self.dosha_energy,
            "perfect_day_score": self.perfect_day_score,
        }


# ── Supplied histories ─────────────────────────────────────────────────────────

@dataclass(frozen=True)
class TimeSeriesPoint:
    date: date
    value: float


@dataclass
class SleepSession:
    date: date
    duration: float                         # hours
    quality: float                          # 1-5
    next_day_energy: Optional[float] = None


@dataclass
class WeatherSample:
    date: date
    temperature: float
    humidity: float = 0.0
    pressure: float = 0.0
    condition: str = ""
    energy_level: Optional[float] = None


@dataclass
class HabitLog:
    habit: str
    date: date
    completed: bool


@dataclass
class HabitCompletion:
    habit: str
    energy_before: Optional[float] = None
    energy_after: Optional[float] = None


@dataclass
class JournalEntry:
    """A timestamped log entry. The hour buckets time-of-day patterns."""
    timestamp: datetime
    score: Optional[float] = None


# ── Analytics results ──────────────────────────────────────────────────────────

@dataclass(frozen=True)
class CorrelationResult:
    factor: str
    coefficient: float
    strength: CorrelationStrength
    description: str
    sample_size: int

    def to_dict(self) -> dict:
        return {
            "factor": self.factor,
            "coefficient": round(self.coefficient, 4),
            "strength": self.strength.value,
            "description": self.description,
            "sample_size": self.sample_size,
        }


@dataclass(frozen=True)
class HabitCorrelation:
    habit: str
    total_logs: int
    average_when_done: float
    average_when_skipped: float
    impact_score: float
    impact: str                              # positive | negative | neutral
    correlation: CorrelationResult
    recommendation: str

    def to_dict(self) -> dict:
        return {
            "habit": self.habit,
            "total_logs": self.total_logs,
            "average_when_done": round(self.average_when_done, 2),
            "average_when_skipped": round(self.average_when_skipped, 2),
            "impact_score": round(self.impact_score, 2),
            "impact": self.impact,
            "correlation": self.correlation.to_dict(),
            "recommendation": self.recommendation,
        }


@dataclass(frozen=True)
class ForecastFactor:
    name: str
    impact: str                              # positive | negative | neutral
    weight: float
    description: str


@dataclass(frozen=True)
class ForecastDay:
    date: date
    predicted_energy: int
    confidence: int
    factors: tuple
    recommendations: tuple
    trend: Trend
    lunar_phase: LunarPhase
    alignment: Alignment

    def to_dict(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "predicted_energy": self.predicted_energy,
            "confidence": self.confidence,
            "factors": [asdict(f) for f in self.factors],
            "recommendations": list(self.recommendations),
            "trend": self.trend.value,
            "lunar_phase": self.lunar_phase.value,
            "alignment": self.alignment.value,
        }


@dataclass(frozen=True)
class EnergyForecast:
    days: tuple
    overall_trend: Trend
    best_day: date
    worst_day: date
    average_energy: int
    confidence: int
    baseline: float

    def __iter__(self):
        return iter(self.days)

    def __len__(self):
        return len(self.days)

    def to_dict(self) -> dict:
        return {
            "days": [d.to_dict() for d in self.days],
            "overall_trend": self.overall_trend.value,
            "best_day": self.best_day.isoformat(),
            "worst_day": self.worst_day.isoformat(),
            "average_energy": self.average_energy,
            "confidence": self.confidence,
            "baseline": round(self.baseline, 2),
        }


@dataclass(frozen=True)
class RecognizedPattern:
    kind: PatternKind
    key: str
    title: str
    description: str
    confidence: int
    sample_count: int
    average_score: float
    impact: Impact
    recommendation: str

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "key": self.key,
            "title": self.title,
            "description": self.description,
            "confidence": self.confidence,
            "sample_count": self.sample_count,
            "average_score": round(self.average_score, 2),
            "impact": self.impact.value,
            "recommendation": self.recommendation,
        }


@dataclass(frozen=True)
class TrendSummary:
    start: date
    end: date
    average_user_energy: int
    average_environmental_energy: int
    average_alignment: int
    slope: Optional[float]
    best_days: tuple = field(default_factory=tuple)
    challenging_days: tuple = field(default_factory=tuple)
    insights: tuple = field(default_factory=tuple)

    def to_dict(self) -> dict:
        return {
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "average_user_energy": self.average_user_energy,
            "average_environmental_energy": self.average_environmental_energy,
            "average_alignment": self.average_alignment,
            "slope": None if self.slope is None else round(self.slope, 4),
            "best_days": [d.isoformat() for d in self.best_days],
            "challenging_days": [d.isoformat() for d in self.challenging_days],
            "insights": list(self.insights),
        }
