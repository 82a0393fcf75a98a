"""
FastAPI dependencies for the circuit services.
"""
from fastapi import Depends

from archcircuit.application.circuit_ranker import CircuitRanker
from archcircuit.application.circuit_store import CircuitStore
from archcircuit.infrastructure.city_catalog import CityCatalog, get_city_catalog


def get_catalog() -> CityCatalog:
    """The read-only city catalog. Override in tests to use a fixture catalog."""
    return get_city_catalog()


def get_circuit_ranker(catalog: CityCatalog = Depends(get_catalog)) -> CircuitRanker:
    return CircuitRanker(catalog)


def get_circuit_store(catalog: CityCatalog = Depends(get_catalog)) -> CircuitStore:
    return CircuitStore(catalog)
