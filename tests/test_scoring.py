"""
Tests for circuit scoring.
"""
import pytest

from archcircuit.application.scoring import CircuitScorer
from archcircuit.domain.models import AcademicYear, CircuitConstraints, CircuitScore, Region, TravelMode

from tests.factories import AP, BS, CR, HC, make_city


@pytest.fixture
def scorer() -> CircuitScorer:
    return CircuitScorer()


def pick(catalog, *city_ids):
    return [catalog.get(cid) for cid in city_ids]


class TestCircuitScore:
    """Tests for the score model itself."""

    def test_total_is_weighted_combination(self):
        score = CircuitScore(
            academic_match=80,
            travel_efficiency=60,
            pedagogical_progression=90,
            user_preference=50,
        )
        assert score.total == pytest.approx(0.4 * 80 + 0.3 * 60 + 0.2 * 90 + 0.1 * 50)

    def test_components_rounded_to_two_decimals(self):
        score = CircuitScore(
            academic_match=33.33333,
            travel_efficiency=66.66666,
            pedagogical_progression=10,
            user_preference=0,
        )
        assert score.academic_match == 33.33
        assert score.travel_efficiency == 66.67

    def test_total_cannot_be_set(self):
        score = CircuitScore.model_validate({
            "academic_match": 10,
            "travel_efficiency": 10,
            "pedagogical_progression": 10,
            "user_preference": 10,
            "total": 99,
        })
        assert score.total == 10.0

    def test_components_must_be_within_range(self):
        with pytest.raises(ValueError):
            CircuitScore(academic_match=101, travel_efficiency=0, pedagogical_progression=0, user_preference=0)


class TestCircuitScorer:
    """Tests for each scoring component."""

    def test_regional_candidate(self, scorer, catalog):
        cities = pick(catalog, "north-c", "north-a", "north-b")
        score = scorer.score(cities, AcademicYear.FIRST, [AP], CircuitConstraints(), 5)

        assert score.academic_match == 100
        assert score.travel_efficiency == 90
        assert score.pedagogical_progression == 100
        assert score.user_preference == pytest.approx(96.67)
        assert score.total == pytest.approx(96.67)

    def test_cross_region_candidate(self, scorer, catalog):
        cities = pick(catalog, "north-c", "south-a", "north-b")
        score = scorer.score(cities, AcademicYear.FIRST, [AP], CircuitConstraints(), 5)

        assert score.travel_efficiency == 76
        assert score.total == pytest.approx(92.47)

    def test_academic_match_partial_goal_coverage(self, scorer):
        cities = [make_city("a", focus=(AP,)), make_city("b", focus=(HC,), years=(2,))]
        # AP covered once (0.5), CR not at all (0) -> 25 coverage; year match 50%
        value = scorer.academic_match(cities, [AP, CR], AcademicYear.FIRST)
        assert value == pytest.approx(25 * 0.7 + 50 * 0.3)

    def test_travel_efficiency_penalizes_many_regions(self, scorer):
        cities = [
            make_city("n", region=Region.NORTH),
            make_city("s", region=Region.SOUTH),
            make_city("e", region=Region.EAST),
            make_city("w", region=Region.WEST),
        ]
        # 70 * 0.6 + 100 * 0.4 (8 suggested days == duration)
        assert scorer.travel_efficiency(cities, CircuitConstraints(), 8) == pytest.approx(82)

    def test_travel_efficiency_mode_mismatch(self, scorer):
        cities = [
            make_city("a", modes=(TravelMode.FLIGHT,)),
            make_city("b", modes=(TravelMode.TRAIN,)),
        ]
        constraints = CircuitConstraints(preferred_modes=[TravelMode.TRAIN])
        # 110 * 0.6 + 100 * 0.4 - 20
        assert scorer.travel_efficiency(cities, constraints, 4) == pytest.approx(86)

    def test_travel_efficiency_clamped_at_zero(self, scorer):
        cities = [make_city("a", days=30), make_city("b", days=30)]
        assert scorer.travel_efficiency(cities, CircuitConstraints(), 2) == 0

    def test_pedagogical_progression_heritage_first(self, scorer):
        cities = [make_city("a", heritage=1, focus=(AP,)), make_city("b", heritage=5, focus=(AP,))]
        # base 70 + 15 progression + 15 * 1/4 diversity
        assert scorer.pedagogical_progression(cities) == pytest.approx(88.75)

    def test_pedagogical_progression_late_heritage(self, scorer):
        cities = [
            make_city("a", heritage=5, focus=(AP,)),
            make_city("b", heritage=5, focus=(AP,)),
            make_city("c", heritage=1, focus=(AP,)),
        ]
        assert scorer.pedagogical_progression(cities) == pytest.approx(73.75)

    def test_user_preference_terms_clamped(self, scorer):
        cities = [make_city("a", urban=5, heritage=5), make_city("b", urban=5, heritage=5)]
        constraints = CircuitConstraints(urban_rural_preference=1, heritage_contemporary_preference=5)
        # urban term 50 * (1 - 4/5) = 10; heritage term 50
        assert scorer.user_preference(cities, constraints) == pytest.approx(60)

    def test_scoring_is_deterministic(self, scorer, catalog):
        cities = pick(catalog, "west-a", "south-a", "east-a")
        first = scorer.score(cities, AcademicYear.FIRST, [AP, HC], CircuitConstraints(), 7)
        second = scorer.score(cities, AcademicYear.FIRST, [AP, HC], CircuitConstraints(), 7)
        assert first.model_dump() == second.model_dump()

    def test_all_components_within_bounds(self, scorer, catalog):
        cities = list(catalog.cities)[:6]
        for duration in (1, 3, 10, 40):
            score = scorer.score(cities, AcademicYear.SECOND, [AP, BS, CR], CircuitConstraints(), duration)
            for value in score.model_dump().values():
                assert 0 <= value <= 100
