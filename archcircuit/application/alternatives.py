"""
Alternative city suggestions for circuit customization.
"""
from typing import Iterable, Optional

from archcircuit.domain.models import AcademicYear, City, LearningGoal
from archcircuit.infrastructure.city_catalog import CityCatalog


MAX_ALTERNATIVES = 5


def find_alternative_cities(
    catalog: CityCatalog,
    city_id: str,
    academic_year: AcademicYear,
    learning_goals: Optional[Iterable[LearningGoal]] = None,
    exclude_ids: Optional[Iterable[str]] = None,
) -> list[City]:
    """
    Suggest replacements for a city in a circuit.

    Candidates must suit the academic year and share a learning focus with the
    replaced city (and with the requested goals, when given). Same-region
    cities come first; catalog order otherwise.
    """
    current = catalog.get(city_id)
    if current is None:
        return []

    excluded = set(exclude_ids or ()) | {city_id}
    goals = set(learning_goals or ())
    current_focus = set(current.learning_focus)

    matches = []
    for city in catalog:
        if city.id in excluded:
            continue
        if academic_year not in city.ideal_years:
            continue
        shared = current_focus.intersection(city.learning_focus)
        if not shared:
            continue
        if goals and not goals.intersection(city.learning_focus):
            continue
        matches.append(city)

    matches.sort(key=lambda c: c.region != current.region)
    return matches[:MAX_ALTERNATIVES]
