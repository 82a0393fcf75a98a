"""
Request/Response schemas for API endpoints.
These schemas define the contract between the circuit planner UI and the backend.
"""
from typing import Optional
from pydantic import BaseModel, Field

from archcircuit.domain.models import (
    AcademicYear,
    Circuit,
    CircuitConstraints,
    CircuitStatus,
    City,
    LearningGoal,
    Semester,
)


class CircuitGenerateRequest(BaseModel):
    """Request schema for generating circuits (form submission)."""
    academic_year: AcademicYear = Field(description="Target academic year (1-3)")
    semester: Optional[Semester] = Field(default=None, description="Optional semester")
    duration: int = Field(ge=1, description="Trip duration in days (UI offers 3-10)")
    starting_city: Optional[str] = Field(default=None, max_length=100, description="Starting city name")
    learning_goals: list[LearningGoal] = Field(default_factory=list, description="Requested learning goals")
    constraints: CircuitConstraints = Field(default_factory=CircuitConstraints)

    model_config = {
        "json_schema_extra": {
            "example": {
                "academic_year": 1,
                "duration": 5,
                "starting_city": "Ahmedabad",
                "learning_goals": ["Architectural Principles", "Climate Responsiveness"],
                "constraints": {
                    "regions": ["West", "North"],
                    "max_daily_travel_hours": 6,
                    "preferred_modes": ["Train", "Road"],
                    "urban_rural_preference": 3,
                    "heritage_contemporary_preference": 2
                }
            }
        }
    }


class CircuitGenerateResponse(BaseModel):
    """Ranked circuits for a generation request (not yet saved)."""
    circuits: list[Circuit]
    total: int


class CircuitListResponse(BaseModel):
    """List of saved circuits."""
    circuits: list[Circuit]
    total: int


class CircuitStatusUpdateRequest(BaseModel):
    """Request schema for moving a circuit forward in its lifecycle."""
    status: CircuitStatus = Field(description="Target status")


class CircuitCitiesUpdateRequest(BaseModel):
    """Request schema for reordering or removing cities, and optionally dropping learning goals."""
    cities: list[str] = Field(description="New ordered list of city IDs")
    learning_goals: Optional[list[LearningGoal]] = Field(
        default=None,
        description="Learning goals to keep (removals only; omit to keep all)"
    )

    model_config = {
        "json_schema_extra": {
            "example": {
                "cities": ["jaipur", "ahmedabad", "udaipur"],
                "learning_goals": ["Architectural Principles"]
            }
        }
    }


class CircuitCustomizeResponse(BaseModel):
    """Updated circuit plus warnings about the edit."""
    circuit: Circuit
    warnings: list[str] = Field(default_factory=list)


class CityListResponse(BaseModel):
    """Catalog cities matching the query."""
    cities: list[City]
    total: int


class ErrorResponse(BaseModel):
    """Error body for domain errors."""
    code: str
    message: str
