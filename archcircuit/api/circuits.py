"""
Circuits API endpoints for generating, saving and editing study circuits.
"""
from uuid import UUID

import anyio
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from archcircuit.api.dependencies import get_circuit_ranker, get_circuit_store
from archcircuit.application.circuit_ranker import CircuitRanker
from archcircuit.application.circuit_store import CircuitStore
from archcircuit.domain.models import Circuit, CircuitRequest
from archcircuit.domain.schemas import (
    CircuitCitiesUpdateRequest,
    CircuitCustomizeResponse,
    CircuitGenerateRequest,
    CircuitGenerateResponse,
    CircuitListResponse,
    CircuitStatusUpdateRequest,
    ErrorResponse,
)
from archcircuit.infrastructure.database import get_db


router = APIRouter(prefix="/circuits", tags=["circuits"])


@router.post(
    "/generate",
    response_model=CircuitGenerateResponse,
    summary="Generate ranked circuits",
    description="Filter the catalog, build candidate city sequences, score them and return the top 5."
)
async def generate_circuits(
    request: CircuitGenerateRequest,
    ranker: CircuitRanker = Depends(get_circuit_ranker),
) -> CircuitGenerateResponse:
    """
    Generate circuits for a form submission.

    Generated circuits are not saved; POST one to /circuits to keep it.
    An empty list means no catalog city matched the request.
    """
    circuit_request = CircuitRequest.model_validate(request.model_dump())
    circuits = await anyio.to_thread.run_sync(ranker.generate, circuit_request)
    return CircuitGenerateResponse(circuits=circuits, total=len(circuits))


@router.post(
    "",
    response_model=Circuit,
    status_code=status.HTTP_201_CREATED,
    summary="Save a circuit",
    description="Save a circuit. A circuit with the same ID is overwritten."
)
async def save_circuit(
    circuit: Circuit,
    db: AsyncSession = Depends(get_db),
    store: CircuitStore = Depends(get_circuit_store),
) -> Circuit:
    return await store.save(circuit, db)


@router.get(
    "",
    response_model=CircuitListResponse,
    summary="List saved circuits",
    description="Saved circuits, most recently updated first."
)
async def list_circuits(
    db: AsyncSession = Depends(get_db),
    store: CircuitStore = Depends(get_circuit_store),
) -> CircuitListResponse:
    circuits = await store.list_all(db)
    return CircuitListResponse(circuits=circuits, total=len(circuits))


@router.get(
    "/{circuit_id}",
    response_model=Circuit,
    summary="Get circuit by ID",
)
async def get_circuit(
    circuit_id: UUID,
    db: AsyncSession = Depends(get_db),
    store: CircuitStore = Depends(get_circuit_store),
) -> Circuit:
    circuit = await store.get(circuit_id, db)
    if not circuit:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Circuit with ID {circuit_id} not found"
        )
    return circuit


@router.delete(
    "/{circuit_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete circuit",
)
async def delete_circuit(
    circuit_id: UUID,
    db: AsyncSession = Depends(get_db),
    store: CircuitStore = Depends(get_circuit_store),
) -> None:
    """Delete a saved circuit. Deleting a missing circuit is a no-op."""
    await store.delete(circuit_id, db)


@router.post(
    "/{circuit_id}/duplicate",
    response_model=Circuit,
    status_code=status.HTTP_201_CREATED,
    summary="Duplicate circuit",
    description="Clone a circuit under a new ID as a fresh Draft."
)
async def duplicate_circuit(
    circuit_id: UUID,
    db: AsyncSession = Depends(get_db),
    store: CircuitStore = Depends(get_circuit_store),
) -> Circuit:
    duplicate = await store.duplicate(circuit_id, db)
    if not duplicate:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Circuit with ID {circuit_id} not found"
        )
    return duplicate


@router.patch(
    "/{circuit_id}/status",
    response_model=Circuit,
    responses={
        404: {"model": ErrorResponse, "description": "Circuit not found"},
        409: {"model": ErrorResponse, "description": "Status would move backwards"},
    },
    summary="Update circuit status",
    description="Move a circuit forward: Draft -> Approved -> Exported."
)
async def update_circuit_status(
    circuit_id: UUID,
    request: CircuitStatusUpdateRequest,
    db: AsyncSession = Depends(get_db),
    store: CircuitStore = Depends(get_circuit_store),
) -> Circuit:
    return await store.update_status(circuit_id, request.status, db)


@router.put(
    "/{circuit_id}/cities",
    response_model=CircuitCustomizeResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid city list or learning goals"},
        404: {"model": ErrorResponse, "description": "Circuit not found"},
    },
    summary="Customize circuit cities",
    description="Reorder or remove cities and drop learning goals; the day plan and score are rebuilt."
)
async def update_circuit_cities(
    circuit_id: UUID,
    request: CircuitCitiesUpdateRequest,
    db: AsyncSession = Depends(get_db),
    store: CircuitStore = Depends(get_circuit_store),
) -> CircuitCustomizeResponse:
    circuit, warnings = await store.customize(
        circuit_id, request.cities, db, learning_goals=request.learning_goals
    )
    return CircuitCustomizeResponse(circuit=circuit, warnings=warnings)
