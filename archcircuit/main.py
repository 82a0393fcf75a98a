"""
Main FastAPI application entrypoint.
"""
import logging

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager

from archcircuit import __version__
from archcircuit.config import settings
from archcircuit.api.health import router as health_router
from archcircuit.api.cities import router as cities_router
from archcircuit.api.circuits import router as circuits_router
from archcircuit.domain.errors import (
    CircuitError,
    CircuitCustomizationError,
    CircuitNotFoundError,
    InvalidCircuitRequestError,
    InvalidStatusTransitionError,
)
from archcircuit.infrastructure.database import init_models

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


# Domain error -> (HTTP status, error code)
ERROR_RESPONSES = {
    InvalidCircuitRequestError: (status.HTTP_400_BAD_REQUEST, "INVALID_REQUEST"),
    CircuitCustomizationError: (status.HTTP_400_BAD_REQUEST, "INVALID_CUSTOMIZATION"),
    CircuitNotFoundError: (status.HTTP_404_NOT_FOUND, "CIRCUIT_NOT_FOUND"),
    InvalidStatusTransitionError: (status.HTTP_409_CONFLICT, "INVALID_STATUS_TRANSITION"),
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan event handler for startup and shutdown.
    """
    # Startup
    logger.info(f"Starting ArchCircuit API on {settings.host}:{settings.port}")
    logger.info(f"Debug mode: {settings.debug}")
    await init_models()

    yield

    # Shutdown
    logger.info("Shutting down ArchCircuit API")


# Create FastAPI app
app = FastAPI(
    title="ArchCircuit API",
    description="Study tour circuit recommendations for architecture students",
    version=__version__,
    lifespan=lifespan,
)

# CORS middleware for the planner UI
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(CircuitError)
async def circuit_error_handler(request: Request, exc: CircuitError) -> JSONResponse:
    """Translate domain errors into {"code", "message"} bodies."""
    status_code, code = ERROR_RESPONSES.get(
        type(exc), (status.HTTP_400_BAD_REQUEST, "CIRCUIT_ERROR")
    )
    return JSONResponse(status_code=status_code, content={"code": code, "message": str(exc)})


# Register routers
app.include_router(health_router, prefix="/api")
app.include_router(cities_router, prefix="/api")
app.include_router(circuits_router, prefix="/api")


@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "name": "ArchCircuit API",
        "version": __version__,
        "status": "running",
        "docs": "/docs",
    }
