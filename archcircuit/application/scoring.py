"""
Circuit scoring.

Total = Academic Match (40%) + Travel Efficiency (30%)
      + Pedagogical Progression (20%) + User Preference (10%)

Every component is a pure function of the candidate and the request;
there is no randomness and no hidden state.
"""
import logging
from typing import Sequence

from archcircuit.domain.models import (
    AcademicYear,
    City,
    CircuitConstraints,
    CircuitScore,
    LearningGoal,
)

logger = logging.getLogger(__name__)


def _clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return max(low, min(high, value))


class CircuitScorer:
    """Scores ordered city sequences against a circuit request."""

    # Academic match
    IDEAL_CITIES_PER_GOAL = 2
    GOAL_COVERAGE_WEIGHT = 0.7
    YEAR_MATCH_WEIGHT = 0.3

    # Travel efficiency
    MAX_REGIONS_WITHOUT_PENALTY = 3
    MANY_REGIONS_PENALTY = 30
    SINGLE_REGION_BONUS = 10
    CLUSTERING_WEIGHT = 0.6
    DURATION_MATCH_WEIGHT = 0.4
    MODE_MISMATCH_PENALTY = 20

    # Pedagogical progression
    PROGRESSION_BASE = 70
    PROGRESSION_BONUS = 15
    DIVERSITY_BONUS = 15
    HERITAGE_LEANING_MAX_INDEX = 2
    MAX_HERITAGE_DROP = 2
    DIVERSITY_TARGET_TAGS = 4

    # User preference
    PREFERENCE_TERM_MAX = 50
    PREFERENCE_SCALE = 5

    def score(
        self,
        cities: Sequence[City],
        academic_year: AcademicYear,
        learning_goals: Sequence[LearningGoal],
        constraints: CircuitConstraints,
        duration: int,
    ) -> CircuitScore:
        """Compute all four components; the total is derived by CircuitScore."""
        return CircuitScore(
            academic_match=self.academic_match(cities, learning_goals, academic_year),
            travel_efficiency=self.travel_efficiency(cities, constraints, duration),
            pedagogical_progression=self.pedagogical_progression(cities),
            user_preference=self.user_preference(cities, constraints),
        )

    def academic_match(
        self,
        cities: Sequence[City],
        learning_goals: Sequence[LearningGoal],
        academic_year: AcademicYear,
    ) -> float:
        """Goal coverage (ideal: 2+ cities per goal) blended with year suitability."""
        year_matches = sum(1 for c in cities if academic_year in c.ideal_years)
        year_score = year_matches / len(cities) * 100

        if not learning_goals:
            return _clamp(year_score)

        coverage_total = 0.0
        for goal in learning_goals:
            covering = sum(1 for c in cities if goal in c.learning_focus)
            coverage_total += min(covering, self.IDEAL_CITIES_PER_GOAL) / self.IDEAL_CITIES_PER_GOAL
        coverage_score = coverage_total / len(learning_goals) * 100

        return _clamp(
            coverage_score * self.GOAL_COVERAGE_WEIGHT + year_score * self.YEAR_MATCH_WEIGHT
        )

    def travel_efficiency(
        self,
        cities: Sequence[City],
        constraints: CircuitConstraints,
        duration: int,
    ) -> float:
        """Regional clustering, fit of suggested days to duration, and travel mode fit."""
        score = 100.0

        region_count = len({c.region for c in cities})
        if region_count > self.MAX_REGIONS_WITHOUT_PENALTY:
            score -= self.MANY_REGIONS_PENALTY
        elif region_count == 1:
            score += self.SINGLE_REGION_BONUS

        suggested_days = sum(c.suggested_days for c in cities)
        duration_match = 1 - abs(suggested_days - duration) / duration
        score = score * self.CLUSTERING_WEIGHT + duration_match * 100 * self.DURATION_MATCH_WEIGHT

        preferred = set(constraints.preferred_modes)
        if any(not preferred.intersection(c.travel_modes) for c in cities):
            score -= self.MODE_MISMATCH_PENALTY

        return _clamp(score)

    def pedagogical_progression(self, cities: Sequence[City]) -> float:
        """Reward heritage-to-contemporary sequencing and focus diversity."""
        score = float(self.PROGRESSION_BASE)

        heritage_first = True
        last_heritage_index = 0
        for i, city in enumerate(cities):
            if city.heritage_contemporary_index <= self.HERITAGE_LEANING_MAX_INDEX:
                last_heritage_index = i
            if i > 0:
                previous = cities[i - 1].heritage_contemporary_index
                if city.heritage_contemporary_index < previous - self.MAX_HERITAGE_DROP:
                    heritage_first = False

        if heritage_first or last_heritage_index < len(cities) / 2:
            score += self.PROGRESSION_BONUS

        distinct_focus = {focus for c in cities for focus in c.learning_focus}
        score += min(len(distinct_focus) / self.DIVERSITY_TARGET_TAGS, 1) * self.DIVERSITY_BONUS

        return _clamp(score)

    def user_preference(self, cities: Sequence[City], constraints: CircuitConstraints) -> float:
        """Closeness of the average urban/rural and heritage/contemporary indices to the preferences."""
        count = len(cities)
        avg_urban = sum(c.urban_rural_index for c in cities) / count
        avg_heritage = sum(c.heritage_contemporary_index for c in cities) / count

        urban_term = self.PREFERENCE_TERM_MAX * (
            1 - abs(avg_urban - constraints.urban_rural_preference) / self.PREFERENCE_SCALE
        )
        heritage_term = self.PREFERENCE_TERM_MAX * (
            1 - abs(avg_heritage - constraints.heritage_contemporary_preference) / self.PREFERENCE_SCALE
        )

        return _clamp(urban_term, 0, self.PREFERENCE_TERM_MAX) + _clamp(heritage_term, 0, self.PREFERENCE_TERM_MAX)
