"""
Cities API endpoints for browsing the catalog.
"""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from archcircuit.api.dependencies import get_catalog
from archcircuit.application.alternatives import find_alternative_cities
from archcircuit.domain.models import AcademicYear, City, LearningGoal, Region
from archcircuit.domain.schemas import CityListResponse
from archcircuit.infrastructure.city_catalog import CityCatalog


router = APIRouter(prefix="/cities", tags=["cities"])


@router.get(
    "",
    response_model=CityListResponse,
    summary="List catalog cities",
)
async def list_cities(
    region: Optional[Region] = Query(default=None, description="Only cities in this region"),
    academic_year: Optional[AcademicYear] = Query(default=None, description="Only cities ideal for this year"),
    catalog: CityCatalog = Depends(get_catalog),
) -> CityListResponse:
    cities = [
        city for city in catalog
        if (region is None or city.region == region)
        and (academic_year is None or academic_year in city.ideal_years)
    ]
    return CityListResponse(cities=cities, total=len(cities))


@router.get(
    "/{city_id}",
    response_model=City,
    summary="Get city by ID",
)
async def get_city(
    city_id: str,
    catalog: CityCatalog = Depends(get_catalog),
) -> City:
    city = catalog.get(city_id)
    if not city:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"City '{city_id}' not found"
        )
    return city


@router.get(
    "/{city_id}/alternatives",
    response_model=CityListResponse,
    summary="Suggest replacement cities",
    description="Cities for the same academic year sharing a learning focus, same region first."
)
async def get_city_alternatives(
    city_id: str,
    academic_year: AcademicYear = Query(description="Academic year of the circuit"),
    learning_goals: list[LearningGoal] = Query(default=[], description="Circuit learning goals"),
    exclude: list[str] = Query(default=[], description="City IDs already in the circuit"),
    catalog: CityCatalog = Depends(get_catalog),
) -> CityListResponse:
    if not catalog.get(city_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"City '{city_id}' not found"
        )
    cities = find_alternative_cities(catalog, city_id, academic_year, learning_goals, exclude)
    return CityListResponse(cities=cities, total=len(cities))
