"""
Circuit Ranker.

Orchestrates the generation pipeline:
1. Eligibility filter over the catalog
2. Candidate generation (regional, cross-region, starting-city)
3. Scoring, justification and day-plan synthesis per candidate
4. Stable sort by total score and top-N selection
"""
import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union

from pydantic import ValidationError

from archcircuit.application.combinations import CombinationGenerator
from archcircuit.application.day_plan import DayPlanSynthesizer
from archcircuit.application.eligibility import filter_eligible_cities
from archcircuit.application.justification import compose_justification
from archcircuit.application.scoring import CircuitScorer
from archcircuit.config import settings
from archcircuit.domain.errors import InvalidCircuitRequestError
from archcircuit.domain.models import (
    Candidate,
    Circuit,
    CircuitRequest,
    CircuitScore,
    DayPlanEntry,
    utcnow,
)
from archcircuit.infrastructure.city_catalog import CityCatalog

logger = logging.getLogger(__name__)


MAX_CITIES_IN_NAME = 3


@dataclass(frozen=True)
class ScoredCandidate:
    """A candidate with everything needed to build a Circuit."""
    candidate: Candidate
    score: CircuitScore
    justification: str
    day_plan: list[DayPlanEntry]


def circuit_name(candidate: Candidate, rank: int) -> str:
    """Name from the first 1-3 city names plus the circuit's rank."""
    names = "-".join(city.name for city in candidate.cities[:MAX_CITIES_IN_NAME])
    return f"{names} Circuit {rank}"


class CircuitRanker:
    """
    Service for generating ranked study-tour circuits.
    Synchronous and side-effect free; the catalog is injected and only read.
    """

    def __init__(
        self,
        catalog: CityCatalog,
        max_candidates: Optional[int] = None,
        max_results: Optional[int] = None,
        max_cities: Optional[int] = None,
    ):
        self.catalog = catalog
        self.max_results = settings.max_results if max_results is None else max_results
        self.generator = CombinationGenerator(
            max_candidates=settings.max_candidates if max_candidates is None else max_candidates,
            max_cities=settings.max_cities_per_circuit if max_cities is None else max_cities,
        )
        self.scorer = CircuitScorer()
        self.day_planner = DayPlanSynthesizer()

    @staticmethod
    def parse_request(request: Union[CircuitRequest, Mapping[str, Any]]) -> CircuitRequest:
        """Validate raw input at the boundary, before any pipeline work."""
        if isinstance(request, CircuitRequest):
            return request
        try:
            return CircuitRequest.model_validate(request)
        except ValidationError as e:
            raise InvalidCircuitRequestError(f"Invalid circuit request: {e}") from e

    def evaluate(self, candidate: Candidate, request: CircuitRequest) -> ScoredCandidate:
        """Score, justify and day-plan a single candidate. Pure function of its inputs."""
        cities = candidate.cities
        score = self.scorer.score(
            cities,
            request.academic_year,
            request.learning_goals,
            request.constraints,
            request.duration,
        )
        justification = compose_justification(cities, request.learning_goals, request.academic_year)
        day_plan = self.day_planner.synthesize(
            cities,
            request.learning_goals,
            request.academic_year,
            request.duration,
        )
        logger.debug(f"Candidate {candidate.index} {list(candidate.city_ids)}: total={score.total}")
        return ScoredCandidate(
            candidate=candidate,
            score=score,
            justification=justification,
            day_plan=day_plan,
        )

    def _build_circuit(self, scored: ScoredCandidate, request: CircuitRequest, rank: int) -> Circuit:
        now = utcnow()
        return Circuit(
            name=circuit_name(scored.candidate, rank),
            academic_year=request.academic_year,
            semester=request.semester,
            duration=request.duration,
            learning_goals=list(request.learning_goals),
            cities=list(scored.candidate.city_ids),
            day_plan=scored.day_plan,
            academic_justification=scored.justification,
            starting_city=request.starting_city,
            constraints=request.constraints.model_copy(deep=True),
            score=scored.score,
            created_at=now,
            updated_at=now,
        )

    def generate(self, request: Union[CircuitRequest, Mapping[str, Any]]) -> list[Circuit]:
        """
        Generate up to `max_results` circuits, best first.

        Raises:
            InvalidCircuitRequestError: if the request is malformed

        Returns:
            Ranked circuits; empty when no city or candidate matches
        """
        request = self.parse_request(request)

        eligible = filter_eligible_cities(
            self.catalog.cities,
            request.academic_year,
            request.learning_goals,
            request.constraints,
        )
        if not eligible:
            logger.info("No eligible cities; returning no circuits")
            return []

        start = None
        if request.starting_city:
            start = self.catalog.find_by_name(request.starting_city)
            if start is None:
                logger.info(f"Starting city '{request.starting_city}' is not in the catalog")

        candidates = self.generator.generate(
            eligible,
            request.duration,
            request.constraints,
            start,
        )
        if not candidates:
            return []

        scored = [self.evaluate(candidate, request) for candidate in candidates]

        # Stable sort: ties keep generation order
        scored.sort(key=lambda s: s.score.total, reverse=True)
        top = scored[:self.max_results]

        circuits = [
            self._build_circuit(item, request, rank)
            for rank, item in enumerate(top, start=1)
        ]
        logger.info(
            f"Ranked {len(scored)} candidates, returning {len(circuits)} circuits "
            f"(best total={scored[0].score.total})"
        )
        return circuits
