"""
Eligibility filter for circuit generation.
Narrows the catalog to cities compatible with the request.
"""
import logging
from typing import Iterable

from archcircuit.domain.models import AcademicYear, City, CircuitConstraints, LearningGoal

logger = logging.getLogger(__name__)


# Maximum distance between a city's index and the requested preference
PREFERENCE_TOLERANCE = 2


def is_city_eligible(
    city: City,
    academic_year: AcademicYear,
    learning_goals: Iterable[LearningGoal],
    constraints: CircuitConstraints,
) -> bool:
    """Check a single city against year, goals, region and balance preferences."""
    if academic_year not in city.ideal_years:
        return False

    if not set(city.learning_focus) & set(learning_goals):
        return False

    if constraints.regions and city.region not in constraints.regions:
        return False

    if abs(city.urban_rural_index - constraints.urban_rural_preference) > PREFERENCE_TOLERANCE:
        return False

    if abs(city.heritage_contemporary_index - constraints.heritage_contemporary_preference) > PREFERENCE_TOLERANCE:
        return False

    return True


def filter_eligible_cities(
    cities: Iterable[City],
    academic_year: AcademicYear,
    learning_goals: list[LearningGoal],
    constraints: CircuitConstraints,
) -> list[City]:
    """
    Return the eligible cities in catalog order.

    An empty result is a valid outcome (no matches), not an error.
    """
    eligible = [
        city for city in cities
        if is_city_eligible(city, academic_year, learning_goals, constraints)
    ]
    logger.info(
        f"Eligibility: {len(eligible)} cities for year {int(academic_year)}, "
        f"goals={[g.value for g in learning_goals]}"
    )
    return eligible
