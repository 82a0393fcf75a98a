"""
Circuit Store service.
Persists generated circuits and applies user edits (status, city list).
"""
import logging
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from archcircuit.application.day_plan import DayPlanSynthesizer
from archcircuit.application.scoring import CircuitScorer
from archcircuit.domain.errors import (
    CircuitCustomizationError,
    CircuitNotFoundError,
    InvalidStatusTransitionError,
)
from archcircuit.domain.models import (
    Circuit,
    CircuitConstraints,
    CircuitScore,
    CircuitStatus,
    DayPlanEntry,
    LearningGoal,
    utcnow,
)
from archcircuit.infrastructure.city_catalog import CityCatalog
from archcircuit.infrastructure.models import CircuitModel

logger = logging.getLogger(__name__)


MIN_CITIES = 2
MAX_CITIES = 6
COPY_SUFFIX = " (Copy)"


class CircuitStore:
    """
    Service for saving, loading and editing circuits.
    Saving the same ID twice overwrites the earlier record.
    """

    def __init__(self, catalog: CityCatalog):
        self.catalog = catalog
        self.scorer = CircuitScorer()
        self.day_planner = DayPlanSynthesizer()

    @staticmethod
    def _apply_to_model(circuit: Circuit, model: CircuitModel) -> None:
        """Copy Circuit fields onto an ORM row (JSON columns get plain dicts/lists)."""
        data = circuit.model_dump(mode="json")
        model.name = circuit.name
        model.academic_year = int(circuit.academic_year)
        model.semester = int(circuit.semester) if circuit.semester is not None else None
        model.duration = circuit.duration
        model.starting_city = circuit.starting_city
        model.status = circuit.status
        model.cities = data["cities"]
        model.learning_goals = data["learning_goals"]
        model.day_plan = data["day_plan"]
        model.constraints = data["constraints"]
        model.score = data["score"]
        model.academic_justification = circuit.academic_justification
        model.created_at = circuit.created_at
        model.updated_at = circuit.updated_at

    @staticmethod
    def _model_to_circuit(model: CircuitModel) -> Circuit:
        """Convert CircuitModel (ORM) to Circuit (domain)."""
        return Circuit(
            id=model.id,
            name=model.name,
            academic_year=model.academic_year,
            semester=model.semester,
            duration=model.duration,
            learning_goals=model.learning_goals or [],
            cities=model.cities,
            day_plan=[DayPlanEntry.model_validate(entry) for entry in model.day_plan or []],
            academic_justification=model.academic_justification,
            status=model.status,
            starting_city=model.starting_city,
            constraints=CircuitConstraints.model_validate(model.constraints or {}),
            score=CircuitScore.model_validate(model.score),
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    async def _get_model(self, circuit_id: UUID, db: AsyncSession) -> Optional[CircuitModel]:
        result = await db.execute(select(CircuitModel).where(CircuitModel.id == circuit_id))
        return result.scalar_one_or_none()

    async def _require_model(self, circuit_id: UUID, db: AsyncSession) -> CircuitModel:
        model = await self._get_model(circuit_id, db)
        if model is None:
            raise CircuitNotFoundError(f"Circuit with ID {circuit_id} not found")
        return model

    async def save(self, circuit: Circuit, db: AsyncSession) -> Circuit:
        """Insert the circuit, or overwrite the stored record with the same ID."""
        model = await self._get_model(circuit.id, db)
        if model is None:
            model = CircuitModel(id=circuit.id)
            db.add(model)
            logger.info(f"Saving new circuit {circuit.id} ({circuit.name})")
        else:
            logger.info(f"Overwriting circuit {circuit.id} ({circuit.name})")

        self._apply_to_model(circuit, model)
        await db.commit()
        return circuit

    async def get(self, circuit_id: UUID, db: AsyncSession) -> Optional[Circuit]:
        model = await self._get_model(circuit_id, db)
        return self._model_to_circuit(model) if model else None

    async def list_all(self, db: AsyncSession) -> list[Circuit]:
        """All saved circuits, most recently updated first."""
        result = await db.execute(select(CircuitModel).order_by(CircuitModel.updated_at.desc()))
        return [self._model_to_circuit(m) for m in result.scalars().all()]

    async def delete(self, circuit_id: UUID, db: AsyncSession) -> bool:
        """Delete a circuit. Returns False when nothing was stored under the ID."""
        model = await self._get_model(circuit_id, db)
        if model is None:
            return False
        await db.delete(model)
        await db.commit()
        logger.info(f"Deleted circuit {circuit_id}")
        return True

    async def duplicate(self, circuit_id: UUID, db: AsyncSession) -> Optional[Circuit]:
        """Clone a circuit under a new ID as a fresh Draft."""
        original = await self.get(circuit_id, db)
        if original is None:
            return None

        now = utcnow()
        copy = original.model_copy(
            update={
                "id": uuid4(),
                "name": f"{original.name}{COPY_SUFFIX}",
                "status": CircuitStatus.DRAFT,
                "created_at": now,
                "updated_at": now,
            },
            deep=True,
        )
        return await self.save(copy, db)

    async def update_status(
        self,
        circuit_id: UUID,
        status: CircuitStatus,
        db: AsyncSession,
    ) -> Circuit:
        """
        Move a circuit forward in its lifecycle (Draft -> Approved -> Exported).

        Raises:
            CircuitNotFoundError: if the circuit does not exist
            InvalidStatusTransitionError: if the move goes backwards
        """
        model = await self._require_model(circuit_id, db)
        current = CircuitStatus(model.status)

        if not current.can_transition_to(status):
            logger.warning(f"Rejected status change {current.value} -> {status.value} for {circuit_id}")
            raise InvalidStatusTransitionError(
                f"Cannot move circuit from {current.value} to {status.value}"
            )

        if current != status:
            model.status = status
            model.updated_at = utcnow()
            await db.commit()

        return self._model_to_circuit(model)

    @staticmethod
    def _remaining_goals(
        circuit: Circuit,
        learning_goals: Optional[list[LearningGoal]],
    ) -> list[LearningGoal]:
        if learning_goals is None:
            return list(circuit.learning_goals)

        goals = list(dict.fromkeys(learning_goals))
        if not goals:
            raise CircuitCustomizationError("Circuit must keep at least one learning goal")
        added = [g.value for g in goals if g not in circuit.learning_goals]
        if added:
            raise CircuitCustomizationError(f"Learning goals can only be removed: {', '.join(added)}")
        return goals

    def _coverage_warnings(
        self,
        circuit: Circuit,
        city_ids: list[str],
        learning_goals: list[LearningGoal],
    ) -> list[str]:
        warnings = []
        goals = set(learning_goals)

        for removed_id in circuit.cities:
            if removed_id in city_ids:
                continue
            city = self.catalog.get(removed_id)
            if city is None:
                continue
            affected = [g.value for g in city.learning_focus if g in goals]
            if affected:
                warnings.append(f"Removing {city.name} may reduce coverage of: {', '.join(affected)}")

        if (
            set(city_ids) == set(circuit.cities)
            and city_ids != circuit.cities
        ):
            warnings.append("City order changed - review travel efficiency")

        for goal in circuit.learning_goals:
            if goal not in goals:
                warnings.append(f"Removed learning goal: {goal.value}")

        return warnings

    async def customize(
        self,
        circuit_id: UUID,
        city_ids: list[str],
        db: AsyncSession,
        learning_goals: Optional[list[LearningGoal]] = None,
    ) -> tuple[Circuit, list[str]]:
        """
        Replace a circuit's ordered city list, then rebuild its day plan and score.

        `learning_goals`, when given, narrows the circuit's goals; goals can be
        removed but not added, and at least one must remain.

        Returns:
            The updated circuit and human-readable warnings about the edit

        Raises:
            CircuitNotFoundError: if the circuit does not exist
            CircuitCustomizationError: if the city list or learning goals are invalid
        """
        model = await self._require_model(circuit_id, db)
        circuit = self._model_to_circuit(model)

        if len(city_ids) < MIN_CITIES:
            raise CircuitCustomizationError(f"Circuit must have at least {MIN_CITIES} cities")
        if len(city_ids) > MAX_CITIES:
            raise CircuitCustomizationError(f"Circuit can have at most {MAX_CITIES} cities")
        if len(set(city_ids)) != len(city_ids):
            raise CircuitCustomizationError("Circuit cities must be distinct")

        unknown = [cid for cid in city_ids if self.catalog.get(cid) is None]
        if unknown:
            raise CircuitCustomizationError(f"Unknown city IDs: {', '.join(unknown)}")

        goals = self._remaining_goals(circuit, learning_goals)
        cities = [self.catalog.get(cid) for cid in city_ids]
        warnings = self._coverage_warnings(circuit, city_ids, goals)

        updated = circuit.model_copy(
            update={
                "cities": list(city_ids),
                "learning_goals": goals,
                "day_plan": self.day_planner.synthesize(
                    cities,
                    goals,
                    circuit.academic_year,
                    circuit.duration,
                ),
                "score": self.scorer.score(
                    cities,
                    circuit.academic_year,
                    goals,
                    circuit.constraints,
                    circuit.duration,
                ),
                "updated_at": utcnow(),
            }
        )
        self._apply_to_model(updated, model)
        await db.commit()

        for warning in warnings:
            logger.warning(f"Circuit {circuit_id}: {warning}")

        return updated, warnings
