"""
Tests for the city catalog.
"""
import json

import pytest

from archcircuit.domain.models import AcademicYear, Region
from archcircuit.infrastructure.city_catalog import DEFAULT_CATALOG_PATH, CityCatalog

from tests.factories import make_city


class TestCityCatalog:
    """Tests for lookups over a fixed catalog."""

    def test_preserves_order(self, catalog):
        assert [c.id for c in catalog][:3] == ["north-a", "north-b", "north-c"]
        assert len(catalog) == 11

    def test_get_by_id(self, catalog):
        assert catalog.get("west-a").region == Region.WEST
        assert catalog.get("nowhere") is None

    def test_find_by_name_is_case_insensitive(self, catalog):
        assert catalog.find_by_name("  WEST a ").id == "west-a"
        assert catalog.find_by_name("West D") is None

    def test_duplicate_ids_rejected(self):
        with pytest.raises(ValueError, match="Duplicate city id"):
            CityCatalog([make_city("a"), make_city("a")])

    def test_from_json(self, tmp_path):
        path = tmp_path / "cities.json"
        path.write_text(json.dumps([
            {
                "id": "ahmedabad",
                "name": "Ahmedabad",
                "region": "West",
                "ideal_years": [1, 2],
                "learning_focus": ["Architectural Principles"],
                "suggested_days": 3,
                "urban_rural_index": 4,
                "heritage_contemporary_index": 3,
                "travel_modes": ["Train"],
            }
        ]))

        catalog = CityCatalog.from_json(path)

        city = catalog.get("ahmedabad")
        assert city.ideal_years == (AcademicYear.FIRST, AcademicYear.SECOND)
        assert city.suggested_days == 3


class TestBundledCatalog:
    """Sanity checks for the shipped catalog data."""

    @pytest.fixture
    def bundled(self) -> CityCatalog:
        return CityCatalog.from_json(DEFAULT_CATALOG_PATH)

    def test_loads(self, bundled):
        assert len(bundled) == 24
        assert bundled.find_by_name("Ahmedabad") is not None

    def test_every_region_represented(self, bundled):
        assert {city.region for city in bundled} == set(Region)

    def test_every_year_has_cities(self, bundled):
        for year in AcademicYear:
            assert any(year in city.ideal_years for city in bundled)
