"""
Configuration management for the ArchCircuit backend.
Uses Pydantic Settings to load configuration from environment variables.
"""
from typing import Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Database
    database_url: str = Field(
        default="sqlite+aiosqlite:///./archcircuit.db",
        description="Database URL for saved circuits (async driver required)"
    )

    # City catalog
    city_catalog_path: Optional[str] = Field(
        default=None,
        description="Path to a JSON city catalog (defaults to the bundled catalog)"
    )

    # =========================================================================
    # Circuit Generation
    # =========================================================================

    max_candidates: int = Field(
        default=10,
        ge=1,
        description="Maximum number of candidate city sequences considered for scoring"
    )
    max_results: int = Field(
        default=5,
        ge=1,
        description="Maximum number of ranked circuits returned"
    )
    max_cities_per_circuit: int = Field(
        default=6,
        ge=2,
        le=6,
        description="Upper bound on cities in a single circuit"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Root log level")

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        return value.upper()

    # Server
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8000, description="Server port")
    debug: bool = Field(default=False, description="Debug mode")


# Global settings instance
settings = Settings()
