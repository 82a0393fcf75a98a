"""
Day Plan Synthesizer.

Expands an ordered city sequence into a contiguous day-by-day plan of
morning / afternoon / evening activities. Template choice is a fixed
function of the day's position, so the same circuit always yields the same
plan.
"""
import logging
from dataclasses import dataclass
from typing import Sequence

from archcircuit.domain.models import AcademicYear, City, DayPlanEntry, LearningGoal

logger = logging.getLogger(__name__)


MORNING_ACTIVITIES: dict[LearningGoal, tuple[str, str, str]] = {
    LearningGoal.ARCHITECTURAL_PRINCIPLES: (
        "Measured drawing session: Documenting proportion and scale",
        "Sketching exercise: Analyzing composition and form",
        "Site analysis: Understanding context and site response",
    ),
    LearningGoal.SPATIAL_ORGANIZATION: (
        "Space planning study: Analyzing circulation and hierarchy",
        "Functional zoning documentation",
        "Spatial sequence analysis and documentation",
    ),
    LearningGoal.CLIMATE_RESPONSIVENESS: (
        "Passive design strategies documentation",
        "Orientation and ventilation study",
        "Material and climate response analysis",
    ),
    LearningGoal.BUILDING_SERVICES: (
        "MEP systems documentation",
        "Services integration study",
        "Building systems analysis",
    ),
    LearningGoal.BYE_LAWS_REGULATIONS: (
        "Site visit: FSI and setback documentation",
        "Regulatory compliance study",
        "Building codes and approval process discussion",
    ),
    LearningGoal.CONSTRUCTION_PRACTICES: (
        "Active construction site visit",
        "Material assembly and joinery documentation",
        "Construction methodology study",
    ),
    LearningGoal.HERITAGE_CONSERVATION: (
        "Heritage site documentation and measured drawing",
        "Conservation techniques study",
        "Historical architectural analysis",
    ),
}

AFTERNOON_ACTIVITIES: dict[LearningGoal, tuple[str, str, str]] = {
    LearningGoal.ARCHITECTURAL_PRINCIPLES: (
        "Detailed documentation: Proportional systems and geometric analysis",
        "Comparative study of multiple buildings",
        "Contextual analysis and site mapping",
    ),
    LearningGoal.SPATIAL_ORGANIZATION: (
        "Spatial experience walkthrough and documentation",
        "Diagram development: Circulation and zoning",
        "User observation and behavioral mapping",
    ),
    LearningGoal.CLIMATE_RESPONSIVENESS: (
        "Climate data collection and analysis",
        "Vernacular building techniques study",
        "Environmental performance assessment",
    ),
    LearningGoal.BUILDING_SERVICES: (
        "Technical systems deep dive",
        "Services coordination study",
        "Sustainable systems analysis",
    ),
    LearningGoal.BYE_LAWS_REGULATIONS: (
        "Discussion with local architect on regulatory frameworks",
        "Case study: Development control regulations",
        "Site planning and bye-law compliance analysis",
    ),
    LearningGoal.CONSTRUCTION_PRACTICES: (
        "Discussion with site engineer / contractor",
        "Construction sequence documentation",
        "Quality control and site management observation",
    ),
    LearningGoal.HERITAGE_CONSERVATION: (
        "Architectural photography and analysis",
        "Historical research and contextual study",
        "Material degradation and conservation study",
    ),
}

EVENING_REFLECTIONS: tuple[str, ...] = (
    "Group discussion: Synthesizing observations and learnings",
    "Pin-up session: Sharing documentation and sketches",
    "Reflective journaling and sketch compilation",
    "Faculty-led discussion on key takeaways",
    "Peer review of documentation work",
    "Preparation for next day's site visits",
)

# Used when a city shares no focus with the requested goals (e.g., added by hand)
FALLBACK_MORNING = "Site visit and documentation"
FALLBACK_AFTERNOON = "Continued site documentation"

MAX_FOCUS_PER_DAY = 2


@dataclass(frozen=True)
class CityStay:
    """Days allocated to one city in the sequence."""
    city: City
    days: int
    position: int


def allocate_days(cities: Sequence[City], duration: int) -> list[CityStay]:
    """
    Give each city min(suggested_days, remaining budget) days, in order.

    Cities reached after the budget is exhausted get no stay.
    """
    stays: list[CityStay] = []
    allocated = 0
    for position, city in enumerate(cities):
        days = min(city.suggested_days, duration - allocated)
        if days <= 0:
            break
        stays.append(CityStay(city=city, days=days, position=position))
        allocated += days
    return stays


class DayPlanSynthesizer:
    """Builds DayPlanEntry sequences from ordered cities."""

    def arrival_line(self, city: City) -> str:
        return f"Arrive in {city.name}. Orientation and site briefing."

    def travel_line(self, next_city: City) -> str:
        return f"Travel to next city: {next_city.name}"

    def _pick(self, pools: dict[LearningGoal, tuple[str, str, str]], focus: LearningGoal, slot: int) -> str:
        options = pools[focus]
        return options[slot % len(options)]

    def _morning(self, focus_cycle: Sequence[LearningGoal], day_in_city: int, slot: int) -> str:
        if not focus_cycle:
            return FALLBACK_MORNING
        focus = focus_cycle[day_in_city % len(focus_cycle)]
        return self._pick(MORNING_ACTIVITIES, focus, slot)

    def _afternoon(self, focus_cycle: Sequence[LearningGoal], day_in_city: int, slot: int) -> str:
        if not focus_cycle:
            return FALLBACK_AFTERNOON
        focus = focus_cycle[(day_in_city + 1) % len(focus_cycle)]
        return self._pick(AFTERNOON_ACTIVITIES, focus, slot)

    def synthesize(
        self,
        cities: Sequence[City],
        learning_goals: Sequence[LearningGoal],
        academic_year: AcademicYear,
        duration: int,
    ) -> list[DayPlanEntry]:
        """
        Expand cities into at most `duration` contiguous days starting at day 1.

        Args:
            cities: Ordered cities of the circuit
            learning_goals: Requested learning goals
            academic_year: Target academic year
            duration: Total trip length in days

        Returns:
            Ordered day plan entries
        """
        goals = set(learning_goals)
        stays = allocate_days(cities, duration)
        plan: list[DayPlanEntry] = []
        day_number = 1

        for stay_index, stay in enumerate(stays):
            city = stay.city
            relevant = [focus for focus in city.learning_focus if focus in goals]
            is_last_stay = stay_index == len(stays) - 1

            for d in range(stay.days):
                slot = d + stay.position

                if d == 0:
                    morning = self.arrival_line(city)
                else:
                    morning = self._morning(relevant, d, slot)
                afternoon = self._afternoon(relevant, d, slot)

                if d == stay.days - 1 and not is_last_stay:
                    evening = self.travel_line(stays[stay_index + 1].city)
                else:
                    evening = EVENING_REFLECTIONS[(day_number - 1) % len(EVENING_REFLECTIONS)]

                plan.append(
                    DayPlanEntry(
                        day=day_number,
                        city=city.name,
                        morning=morning,
                        afternoon=afternoon,
                        evening=evening,
                        learning_focus=relevant[:MAX_FOCUS_PER_DAY],
                    )
                )
                day_number += 1

        logger.debug(
            f"Day plan for year {int(academic_year)}: {len(plan)} days "
            f"across {len(stays)} of {len(cities)} cities"
        )
        return plan
