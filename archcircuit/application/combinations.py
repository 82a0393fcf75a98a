"""
Candidate generation for study circuits.

Builds a short, curated list of ordered city sequences from the eligible
pool: one diversity-maximizing sequence per region of interest (regional
clustering), one across the whole pool, and one anchored at the starting
city when requested. Every step works on tuples and returns new sequences,
so generation never aliases shared lists.
"""
import logging
import math
from typing import Optional, Sequence

from archcircuit.domain.models import (
    Candidate,
    City,
    CircuitConstraints,
    MAINLAND_REGIONS,
    REGION_ADJACENCY,
    Region,
)

logger = logging.getLogger(__name__)


MIN_CITIES_PER_CIRCUIT = 2
MAX_CITIES_PER_CIRCUIT = 6


def target_city_count(duration: int, pool_size: int, max_cities: int = MAX_CITIES_PER_CIRCUIT) -> int:
    """Cities per candidate: ceil(duration / 2) clamped to [2, min(max_cities, pool_size)]."""
    upper = min(max_cities, pool_size)
    return max(MIN_CITIES_PER_CIRCUIT, min(math.ceil(duration / 2), upper))


def group_cities_by_region(cities: Sequence[City]) -> dict[Region, tuple[City, ...]]:
    """Partition cities by region, preserving catalog order within each region."""
    groups: dict[Region, list[City]] = {}
    for city in cities:
        groups.setdefault(city.region, []).append(city)
    return {region: tuple(members) for region, members in groups.items()}


def select_next_city(
    selected: tuple[City, ...],
    remaining: tuple[City, ...],
) -> tuple[City, tuple[City, ...]]:
    """
    Pick the remaining city adding the most learning-focus tags not yet covered.

    Ties go to the earliest city in the pool. Returns the chosen city and the
    new remaining pool.
    """
    covered = {focus for city in selected for focus in city.learning_focus}

    best_index = 0
    best_gain = -1
    for i, city in enumerate(remaining):
        gain = len(set(city.learning_focus) - covered)
        if gain > best_gain:
            best_index, best_gain = i, gain

    chosen = remaining[best_index]
    return chosen, remaining[:best_index] + remaining[best_index + 1:]


def diversity_select(
    pool: Sequence[City],
    count: int,
    seed: Optional[City] = None,
) -> tuple[City, ...]:
    """
    Greedy diversity selection of up to `count` cities from `pool`.

    If `seed` is in the pool it is placed first.
    """
    selected: tuple[City, ...] = ()
    remaining = tuple(pool)

    if seed is not None and any(city.id == seed.id for city in remaining):
        selected = (seed,)
        remaining = tuple(city for city in remaining if city.id != seed.id)

    while len(selected) < count and remaining:
        chosen, remaining = select_next_city(selected, remaining)
        selected = selected + (chosen,)

    return selected


class CombinationGenerator:
    """
    Generates ordered city-sequence candidates from an eligible pool.
    Purely deterministic: same inputs give the same candidates in the same order.
    """

    def __init__(self, max_candidates: int = 10, max_cities: int = MAX_CITIES_PER_CIRCUIT):
        self.max_candidates = max_candidates
        self.max_cities = min(max_cities, MAX_CITIES_PER_CIRCUIT)

    def _regions_of_interest(self, constraints: CircuitConstraints) -> tuple[Region, ...]:
        if constraints.regions:
            # Keep request order, drop repeats
            return tuple(dict.fromkeys(constraints.regions))
        return MAINLAND_REGIONS

    def _eligible_start(
        self,
        eligible: Sequence[City],
        starting_city: Optional[City],
    ) -> Optional[City]:
        if starting_city is None:
            return None
        if any(city.id == starting_city.id for city in eligible):
            return starting_city
        logger.info(f"Starting city '{starting_city.id}' is not in the eligible pool")
        return None

    def _nearby_pool(self, start: City, eligible: Sequence[City]) -> tuple[City, ...]:
        """Start city, then same-region cities, then cities from adjacent regions."""
        nearby_regions = REGION_ADJACENCY[start.region]
        others = [city for city in eligible if city.id != start.id]
        same_region = [city for city in others if city.region == start.region]
        adjacent = [city for city in others if city.region in nearby_regions]
        return (start,) + tuple(same_region) + tuple(adjacent)

    def generate(
        self,
        eligible: Sequence[City],
        duration: int,
        constraints: CircuitConstraints,
        starting_city: Optional[City] = None,
    ) -> list[Candidate]:
        """
        Build up to `max_candidates` candidates.

        Candidates with fewer than 2 cities and exact repeats of an earlier
        sequence are discarded.
        """
        if len(eligible) < MIN_CITIES_PER_CIRCUIT:
            logger.info(f"Only {len(eligible)} eligible cities; no candidates generated")
            return []

        count = target_city_count(duration, len(eligible), self.max_cities)
        start = self._eligible_start(eligible, starting_city)
        by_region = group_cities_by_region(eligible)

        sequences: list[tuple[City, ...]] = []

        # Regional clustering
        for region in self._regions_of_interest(constraints):
            regional = by_region.get(region, ())
            if len(regional) >= count:
                sequences.append(diversity_select(regional, count, seed=start))

        # Cross-region diversity
        sequences.append(diversity_select(eligible, count, seed=start))

        # Anchored at the starting city
        if start is not None:
            sequences.append(diversity_select(self._nearby_pool(start, eligible), count, seed=start))

        candidates: list[Candidate] = []
        seen: set[tuple[str, ...]] = set()
        for cities in sequences:
            if len(cities) < MIN_CITIES_PER_CIRCUIT:
                continue
            key = tuple(city.id for city in cities)
            if key in seen:
                continue
            seen.add(key)
            candidates.append(Candidate(cities=cities, index=len(candidates)))
            if len(candidates) >= self.max_candidates:
                break

        logger.info(
            f"Generated {len(candidates)} candidates of {count} cities "
            f"from {len(eligible)} eligible cities"
        )
        return candidates
