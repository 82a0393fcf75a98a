"""
Tests for the eligibility filter.
"""
from archcircuit.application.eligibility import filter_eligible_cities, is_city_eligible
from archcircuit.domain.models import AcademicYear, CircuitConstraints, Region

from tests.factories import AP, BS, CR, make_city


def ids(cities):
    return [c.id for c in cities]


class TestIsCityEligible:
    """Tests for the single-city check."""

    def test_requires_academic_year(self):
        city = make_city("x", years=(2, 3))
        assert not is_city_eligible(city, AcademicYear.FIRST, [AP], CircuitConstraints())
        assert is_city_eligible(city, AcademicYear.SECOND, [AP], CircuitConstraints())

    def test_requires_shared_learning_focus(self):
        city = make_city("x", focus=(AP,))
        assert not is_city_eligible(city, AcademicYear.FIRST, [BS], CircuitConstraints())
        assert is_city_eligible(city, AcademicYear.FIRST, [BS, AP], CircuitConstraints())

    def test_region_constraint_only_when_non_empty(self):
        city = make_city("x", region=Region.SOUTH)
        assert is_city_eligible(city, AcademicYear.FIRST, [AP], CircuitConstraints(regions=[]))
        assert not is_city_eligible(city, AcademicYear.FIRST, [AP], CircuitConstraints(regions=[Region.NORTH]))

    def test_balance_tolerance_is_two_points(self):
        city = make_city("x", urban=5, heritage=1)
        assert is_city_eligible(
            city, AcademicYear.FIRST, [AP],
            CircuitConstraints(urban_rural_preference=3, heritage_contemporary_preference=3),
        )
        assert not is_city_eligible(
            city, AcademicYear.FIRST, [AP], CircuitConstraints(urban_rural_preference=2)
        )
        assert not is_city_eligible(
            city, AcademicYear.FIRST, [AP], CircuitConstraints(heritage_contemporary_preference=4)
        )


class TestFilterEligibleCities:
    """Tests for filtering a whole catalog."""

    def test_year_and_goal_filter_preserves_catalog_order(self, catalog):
        eligible = filter_eligible_cities(catalog.cities, AcademicYear.FIRST, [AP], CircuitConstraints())
        assert ids(eligible) == [
            "north-a", "north-b", "north-c", "west-a", "west-b", "south-a", "east-a",
        ]

    def test_region_constraint(self, catalog):
        eligible = filter_eligible_cities(
            catalog.cities, AcademicYear.FIRST, [AP], CircuitConstraints(regions=[Region.WEST])
        )
        assert ids(eligible) == ["west-a", "west-b"]

    def test_heritage_preference_excludes_distant_cities(self, catalog):
        eligible = filter_eligible_cities(
            catalog.cities, AcademicYear.FIRST, [AP],
            CircuitConstraints(heritage_contemporary_preference=5),
        )
        assert ids(eligible) == ["north-b", "north-c", "west-b"]

    def test_empty_goals_match_nothing(self, catalog):
        assert filter_eligible_cities(catalog.cities, AcademicYear.FIRST, [], CircuitConstraints()) == []

    def test_no_match_is_empty_not_error(self, catalog):
        eligible = filter_eligible_cities(
            catalog.cities, AcademicYear.FIRST, [CR], CircuitConstraints(regions=[Region.ISLANDS])
        )
        assert eligible == []

    def test_catalog_is_not_mutated(self, catalog):
        before = list(catalog.cities)
        filter_eligible_cities(catalog.cities, AcademicYear.FIRST, [AP], CircuitConstraints())
        assert list(catalog.cities) == before
