"""
City catalog: read-only repository of study destinations.

The catalog is injected into the generation pipeline so the core can run
against fixture catalogs; nothing in the pipeline mutates it.
"""
import json
import logging
from pathlib import Path
from typing import Iterable, Iterator, Optional, Union

from archcircuit.config import settings
from archcircuit.domain.models import City

logger = logging.getLogger(__name__)


DEFAULT_CATALOG_PATH = Path(__file__).resolve().parent.parent / "data" / "cities.json"


class CityCatalog:
    """
    Fixed, totally-ordered collection of City records.
    Exposes lookups only; there is no update operation.
    """

    def __init__(self, cities: Iterable[City]):
        self._cities: tuple[City, ...] = tuple(cities)
        self._by_id: dict[str, City] = {}

        for city in self._cities:
            if city.id in self._by_id:
                raise ValueError(f"Duplicate city id in catalog: {city.id}")
            self._by_id[city.id] = city

    @classmethod
    def from_json(cls, path: Union[str, Path]) -> "CityCatalog":
        """Load a catalog from a JSON array of city records."""
        path = Path(path)
        with path.open(encoding="utf-8") as f:
            raw = json.load(f)

        catalog = cls(City.model_validate(item) for item in raw)
        logger.info(f"Loaded {len(catalog)} cities from {path}")
        return catalog

    @property
    def cities(self) -> tuple[City, ...]:
        return self._cities

    def get(self, city_id: str) -> Optional[City]:
        return self._by_id.get(city_id)

    def find_by_name(self, name: str) -> Optional[City]:
        """Case-insensitive lookup by display name."""
        wanted = name.strip().lower()
        for city in self._cities:
            if city.name.lower() == wanted:
                return city
        return None

    def __len__(self) -> int:
        return len(self._cities)

    def __iter__(self) -> Iterator[City]:
        return iter(self._cities)


# Global instance
_city_catalog: Optional[CityCatalog] = None


def get_city_catalog() -> CityCatalog:
    """Get or create the process-wide catalog instance."""
    global _city_catalog
    if _city_catalog is None:
        _city_catalog = CityCatalog.from_json(settings.city_catalog_path or DEFAULT_CATALOG_PATH)
    return _city_catalog
