"""
Core domain models for the ArchCircuit backend.
All models use Pydantic v2 for type safety and validation.
"""
import datetime as dt
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import ClassVar, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator


def utcnow() -> dt.datetime:
    """Naive UTC timestamp, matching how the database stores datetimes."""
    return dt.datetime.now(dt.timezone.utc).replace(tzinfo=None)


# Enums for constrained values
class Region(str, Enum):
    """Geographic region of a city."""
    NORTH = "North"
    SOUTH = "South"
    EAST = "East"
    WEST = "West"
    NORTHEAST = "Northeast"
    ISLANDS = "Islands"


class TravelMode(str, Enum):
    """Ways a city can be reached."""
    TRAIN = "Train"
    ROAD = "Road"
    FLIGHT = "Flight"


class LearningGoal(str, Enum):
    """Pedagogical themes a city can support."""
    ARCHITECTURAL_PRINCIPLES = "Architectural Principles"
    SPATIAL_ORGANIZATION = "Spatial Organization"
    CLIMATE_RESPONSIVENESS = "Climate Responsiveness"
    BUILDING_SERVICES = "Building Services"
    BYE_LAWS_REGULATIONS = "Bye-laws & Regulations"
    CONSTRUCTION_PRACTICES = "Construction Practices"
    HERITAGE_CONSERVATION = "Heritage & Conservation"


class AcademicYear(IntEnum):
    """Year of the architecture programme the tour is designed for."""
    FIRST = 1
    SECOND = 2
    THIRD = 3


class Semester(IntEnum):
    FIRST = 1
    SECOND = 2


class CircuitStatus(str, Enum):
    """Lifecycle status of a circuit. Moves forward only."""
    DRAFT = "Draft"
    APPROVED = "Approved"
    EXPORTED = "Exported"

    def can_transition_to(self, target: "CircuitStatus") -> bool:
        """Check whether moving to target keeps the lifecycle monotonic."""
        order = list(CircuitStatus)
        return order.index(target) >= order.index(self)


# Regions visited first when no constraint narrows the search
MAINLAND_REGIONS: tuple[Region, ...] = (
    Region.NORTH,
    Region.SOUTH,
    Region.EAST,
    Region.WEST,
)

# Regions considered "nearby" for travel-efficient circuits
REGION_ADJACENCY: dict[Region, tuple[Region, ...]] = {
    Region.NORTH: (Region.WEST, Region.EAST),
    Region.SOUTH: (Region.WEST, Region.EAST, Region.ISLANDS),
    Region.EAST: (Region.NORTH, Region.SOUTH, Region.NORTHEAST),
    Region.WEST: (Region.NORTH, Region.SOUTH),
    Region.NORTHEAST: (Region.EAST,),
    Region.ISLANDS: (Region.SOUTH,),
}


# Domain Models

class City(BaseModel):
    """A study destination from the city catalog. Never mutated by the pipeline."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Stable catalog identifier (e.g., 'ahmedabad')")
    name: str = Field(description="Display name")
    state: str = Field(default="", description="State or union territory")
    region: Region = Field(description="Geographic region")
    categories: tuple[str, ...] = Field(default=(), description="Category tags (e.g., 'Modernist', 'Vernacular')")
    ideal_years: tuple[AcademicYear, ...] = Field(description="Academic years the city is ideal for")
    learning_focus: tuple[LearningGoal, ...] = Field(description="Learning-focus tags, in catalog order")
    suggested_days: int = Field(ge=1, description="Suggested visit length in days")
    terrain: str = Field(default="", description="Terrain description")
    urban_rural_index: int = Field(ge=1, le=5, description="1 = rural, 5 = urban")
    heritage_contemporary_index: int = Field(ge=1, le=5, description="1 = heritage, 5 = contemporary")
    travel_modes: tuple[TravelMode, ...] = Field(description="Supported travel modes")
    risk_notes: Optional[str] = Field(default=None, description="Seasonal or logistical risks")
    key_sites: tuple[str, ...] = Field(default=(), description="Notable buildings and sites")
    lat: Optional[float] = Field(default=None, description="Latitude coordinate")
    lon: Optional[float] = Field(default=None, description="Longitude coordinate")


class CircuitConstraints(BaseModel):
    """Geographic and travel-style constraints for a circuit."""
    regions: list[Region] = Field(default_factory=list, description="Permitted regions (empty = no restriction)")
    max_daily_travel_hours: float = Field(default=8.0, gt=0, description="Maximum daily travel hours")
    preferred_modes: list[TravelMode] = Field(
        default_factory=lambda: list(TravelMode),
        description="Preferred travel modes"
    )
    urban_rural_preference: int = Field(default=3, ge=1, le=5, description="1 = rural, 5 = urban")
    heritage_contemporary_preference: int = Field(default=3, ge=1, le=5, description="1 = heritage, 5 = contemporary")


class CircuitScore(BaseModel):
    """
    Weighted score of a circuit.
    The total is always derived from the four components.
    """
    academic_match: float = Field(ge=0, le=100, description="Learning goal and year coverage")
    travel_efficiency: float = Field(ge=0, le=100, description="Regional clustering and duration fit")
    pedagogical_progression: float = Field(ge=0, le=100, description="Heritage-to-contemporary sequencing")
    user_preference: float = Field(ge=0, le=100, description="Urban/rural and heritage/contemporary fit")

    WEIGHTS: ClassVar[dict[str, float]] = {
        "academic_match": 0.4,
        "travel_efficiency": 0.3,
        "pedagogical_progression": 0.2,
        "user_preference": 0.1,
    }

    @field_validator(
        "academic_match",
        "travel_efficiency",
        "pedagogical_progression",
        "user_preference",
    )
    @classmethod
    def round_component(cls, value: float) -> float:
        return round(value, 2)

    @computed_field
    @property
    def total(self) -> float:
        return round(
            sum(getattr(self, name) * weight for name, weight in self.WEIGHTS.items()),
            2,
        )


class DayPlanEntry(BaseModel):
    """One day of a circuit's day-by-day plan."""
    day: int = Field(ge=1, description="Day number, contiguous from 1 across the circuit")
    city: str = Field(description="City display name")
    morning: str = Field(description="Morning activity")
    afternoon: str = Field(description="Afternoon activity")
    evening: str = Field(description="Evening activity")
    learning_focus: list[LearningGoal] = Field(default_factory=list, max_length=2, description="Focus for the day")


class CircuitRequest(BaseModel):
    """
    Normalized circuit generation request.
    This is the input record the whole pipeline works from.
    """
    academic_year: AcademicYear = Field(description="Target academic year (1-3)")
    semester: Optional[Semester] = Field(default=None, description="Optional semester")
    duration: int = Field(ge=1, description="Trip duration in days")
    starting_city: Optional[str] = Field(default=None, description="Starting city name (case-insensitive)")
    learning_goals: list[LearningGoal] = Field(default_factory=list, description="Requested learning goals")
    constraints: CircuitConstraints = Field(default_factory=CircuitConstraints)

    @field_validator("starting_city")
    @classmethod
    def blank_starting_city_is_none(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            return None
        return value

    @field_validator("learning_goals")
    @classmethod
    def drop_repeated_goals(cls, value: list[LearningGoal]) -> list[LearningGoal]:
        return list(dict.fromkeys(value))


class Circuit(BaseModel):
    """A scored, day-planned multi-city study tour."""
    id: UUID = Field(default_factory=uuid4, description="Unique circuit ID")
    name: str = Field(description="Circuit name")
    academic_year: AcademicYear
    semester: Optional[Semester] = None
    duration: int = Field(ge=1)
    learning_goals: list[LearningGoal] = Field(default_factory=list)
    cities: list[str] = Field(min_length=2, max_length=6, description="Ordered city IDs")
    day_plan: list[DayPlanEntry] = Field(default_factory=list)
    academic_justification: str = Field(default="")
    status: CircuitStatus = Field(default=CircuitStatus.DRAFT)
    starting_city: Optional[str] = None
    constraints: CircuitConstraints = Field(default_factory=CircuitConstraints)
    score: CircuitScore

    created_at: dt.datetime = Field(default_factory=utcnow)
    updated_at: dt.datetime = Field(default_factory=utcnow)


@dataclass(frozen=True)
class Candidate:
    """An unscored ordered city sequence produced during generation."""
    cities: tuple[City, ...]
    index: int = 0

    @property
    def city_ids(self) -> tuple[str, ...]:
        return tuple(city.id for city in self.cities)

    def __len__(self) -> int:
        return len(self.cities)
