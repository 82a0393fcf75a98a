"""
Tests for the circuit generation pipeline.
"""
import pytest

from archcircuit.application.circuit_ranker import CircuitRanker
from archcircuit.domain.errors import InvalidCircuitRequestError
from archcircuit.domain.models import AcademicYear, CircuitRequest, CircuitStatus, Region
from archcircuit.infrastructure.city_catalog import DEFAULT_CATALOG_PATH, CityCatalog

from tests.factories import AP, CR, HC, make_city


VOLATILE_FIELDS = {"id", "created_at", "updated_at"}


@pytest.fixture
def ranker(catalog) -> CircuitRanker:
    return CircuitRanker(catalog)


@pytest.fixture
def bundled_ranker() -> CircuitRanker:
    return CircuitRanker(CityCatalog.from_json(DEFAULT_CATALOG_PATH))


class TestCircuitRanker:
    """Tests against the fixture catalog."""

    def test_ranked_circuits(self, ranker):
        circuits = ranker.generate(
            CircuitRequest(academic_year=AcademicYear.FIRST, duration=5, learning_goals=[AP])
        )

        assert [c.cities for c in circuits] == [
            ["north-c", "north-a", "north-b"],
            ["north-c", "south-a", "north-b"],
        ]
        assert circuits[0].name == "North C-North A-North B Circuit 1"
        assert circuits[1].name == "North C-South A-North B Circuit 2"
        assert circuits[0].score.total == pytest.approx(96.67)
        assert circuits[1].score.total == pytest.approx(92.47)

    def test_circuit_fields_come_from_request(self, ranker):
        request = CircuitRequest(
            academic_year=AcademicYear.FIRST,
            semester=2,
            duration=5,
            learning_goals=[AP, CR],
        )
        circuit = ranker.generate(request)[0]

        assert circuit.status == CircuitStatus.DRAFT
        assert circuit.academic_year == AcademicYear.FIRST
        assert circuit.semester == 2
        assert circuit.duration == 5
        assert circuit.learning_goals == [AP, CR]
        assert circuit.academic_justification.startswith("This circuit is designed for first year")
        assert len(circuit.day_plan) == 5
        assert circuit.created_at == circuit.updated_at

    def test_accepts_raw_mapping(self, ranker):
        circuits = ranker.generate({
            "academic_year": 1,
            "duration": 5,
            "learning_goals": ["Architectural Principles"],
        })
        assert len(circuits) == 2

    @pytest.mark.parametrize("payload", [
        {"duration": 5},
        {"academic_year": 4, "duration": 5},
        {"academic_year": 1, "duration": 0},
        {"academic_year": 1, "duration": 5, "learning_goals": ["Astronomy"]},
        {"academic_year": 1, "duration": 5, "constraints": {"urban_rural_preference": 9}},
    ])
    def test_invalid_request_raises(self, ranker, payload):
        with pytest.raises(InvalidCircuitRequestError):
            ranker.generate(payload)

    def test_no_eligible_cities_returns_empty(self, ranker):
        request = CircuitRequest(
            academic_year=AcademicYear.FIRST,
            duration=5,
            learning_goals=[AP],
            constraints={"regions": ["Islands"]},
        )
        assert ranker.generate(request) == []

    def test_max_results_limits_output(self, catalog):
        ranker = CircuitRanker(catalog, max_results=1)
        circuits = ranker.generate(
            CircuitRequest(academic_year=AcademicYear.FIRST, duration=5, learning_goals=[AP])
        )
        assert len(circuits) == 1
        assert circuits[0].name.endswith("Circuit 1")

    def test_generation_is_deterministic(self, ranker):
        request = CircuitRequest(
            academic_year=AcademicYear.FIRST,
            duration=7,
            learning_goals=[AP, HC],
            starting_city="west a",
        )
        first = [c.model_dump(exclude=VOLATILE_FIELDS) for c in ranker.generate(request)]
        second = [c.model_dump(exclude=VOLATILE_FIELDS) for c in ranker.generate(request)]
        assert first == second

    def test_each_circuit_gets_a_fresh_id(self, ranker):
        request = CircuitRequest(academic_year=AcademicYear.FIRST, duration=5, learning_goals=[AP])
        ids = [c.id for c in ranker.generate(request)] + [c.id for c in ranker.generate(request)]
        assert len(set(ids)) == len(ids)


class TestBundledCatalog:
    """Invariants over the shipped city catalog."""

    @pytest.mark.parametrize("year", [1, 2, 3])
    @pytest.mark.parametrize("duration", [3, 5, 10])
    def test_circuit_invariants(self, bundled_ranker, year, duration):
        circuits = bundled_ranker.generate({
            "academic_year": year,
            "duration": duration,
            "learning_goals": ["Architectural Principles", "Heritage & Conservation"],
        })

        assert 1 <= len(circuits) <= 5
        totals = [c.score.total for c in circuits]
        assert totals == sorted(totals, reverse=True)

        for rank, circuit in enumerate(circuits, start=1):
            assert 2 <= len(circuit.cities) <= 6
            assert len(set(circuit.cities)) == len(circuit.cities)
            assert circuit.name.endswith(f"Circuit {rank}")
            assert 0 <= circuit.score.total <= 100
            assert 1 <= len(circuit.day_plan) <= duration
            assert [d.day for d in circuit.day_plan] == list(range(1, len(circuit.day_plan) + 1))

    def test_first_year_week(self, bundled_ranker):
        circuits = bundled_ranker.generate({
            "academic_year": 1,
            "duration": 5,
            "learning_goals": ["Architectural Principles"],
        })
        assert circuits
        assert all(len(c.day_plan) == 5 for c in circuits)

    def test_islands_not_open_to_first_year(self, bundled_ranker):
        circuits = bundled_ranker.generate({
            "academic_year": 1,
            "duration": 5,
            "learning_goals": ["Architectural Principles"],
            "constraints": {"regions": ["Islands"]},
        })
        assert circuits == []

    def test_starting_city_leads_a_candidate(self, bundled_ranker):
        circuits = bundled_ranker.generate({
            "academic_year": 2,
            "duration": 6,
            "starting_city": "ahmedabad",
            "learning_goals": ["Architectural Principles", "Climate Responsiveness"],
            "constraints": {"regions": ["West"]},
        })
        assert any(c.cities[0] == "ahmedabad" for c in circuits)
        assert all(c.starting_city == "ahmedabad" for c in circuits)


class TestRankingTies:
    """Equal totals keep the order candidates were generated in."""

    @pytest.fixture
    def mirrored_catalog(self) -> CityCatalog:
        # West is listed first in the catalog, but North is generated first
        return CityCatalog([
            make_city("w1", region=Region.WEST),
            make_city("w2", region=Region.WEST),
            make_city("n1", region=Region.NORTH),
            make_city("n2", region=Region.NORTH),
        ])

    def test_equal_totals_keep_generation_order(self, mirrored_catalog):
        ranker = CircuitRanker(mirrored_catalog)
        request = CircuitRequest(academic_year=AcademicYear.FIRST, duration=3, learning_goals=[AP])

        candidates = ranker.generator.generate(
            list(mirrored_catalog), request.duration, request.constraints
        )
        assert [c.index for c in candidates] == [0, 1]
        assert [list(c.city_ids) for c in candidates] == [["n1", "n2"], ["w1", "w2"]]

        circuits = ranker.generate(request)

        assert circuits[0].score.total == circuits[1].score.total
        assert [c.cities for c in circuits] == [list(c.city_ids) for c in candidates]
        assert [c.name for c in circuits] == ["N1-N2 Circuit 1", "W1-W2 Circuit 2"]


class TestRankerSettings:
    """Explicit limits passed to the ranker."""

    def test_zero_results_is_respected(self, catalog):
        ranker = CircuitRanker(catalog, max_results=0)
        assert ranker.generate({"academic_year": 1, "duration": 5, "learning_goals": [AP]}) == []

    def test_max_cities_above_six_is_capped(self, catalog):
        ranker = CircuitRanker(catalog, max_cities=10)
        circuits = ranker.generate({"academic_year": 1, "duration": 20, "learning_goals": [AP]})

        assert circuits
        assert all(len(c.cities) <= 6 for c in circuits)


class TestStartingCity:
    """Starting city names are resolved against the catalog."""

    def test_name_lookup_is_case_insensitive(self, ranker):
        circuits = ranker.generate({
            "academic_year": 1,
            "duration": 5,
            "starting_city": "  WEST a ",
            "learning_goals": [AP],
        })
        assert ["west-a", "south-a", "north-b"] in [c.cities for c in circuits]

    def test_unknown_name_is_ignored(self, ranker):
        base = {"academic_year": 1, "duration": 5, "learning_goals": [AP]}
        with_unknown = ranker.generate(dict(base, starting_city="Atlantis"))
        without = ranker.generate(base)
        assert [c.cities for c in with_unknown] == [c.cities for c in without]


def test_repeated_learning_goals_collapse():
    request = CircuitRequest(academic_year=AcademicYear.FIRST, duration=5, learning_goals=[AP, CR, AP])
    assert request.learning_goals == [AP, CR]
