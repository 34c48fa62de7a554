# tutorsearch/core/config.py
import logging
import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

PROD_ENVIRONMENTS = {"prod", "production", "live"}

# Load .env file only if not in CI
if not os.getenv("CI"):
    env_path = Path(__file__).resolve().parents[2] / ".env"
    logger.debug("[CONFIG] Looking for .env at: %s (exists=%s)", env_path, env_path.exists())
    load_dotenv(env_path)


class Settings(BaseSettings):
    environment: str = Field(default="development", description="Deployment environment name")
    log_level: str = Field(default="INFO", description="Root logging level")

    database_url: str = Field(
        default="sqlite:///./tutorsearch.db",
        description="SQLAlchemy URL for the persisted teacher/job records",
    )
    sql_echo: bool = False
    postgis_enabled: bool = Field(
        default=True,
        description="Use PostGIS geography functions when the database is PostgreSQL",
    )

    # Search tuning
    search_default_limit: int = Field(default=20, ge=1)
    search_max_limit: int = Field(default=100, ge=1)
    teacher_default_radius_m: int = Field(default=25000, gt=0)
    job_default_radius_m: int = Field(default=25000, gt=0)
    nearby_default_radius_m: int = Field(default=10000, gt=0)
    nearby_result_cap: int = Field(default=50, ge=1)
    search_max_radius_m: int = Field(
        default=100000,
        gt=0,
        description="Requested radii above this are clamped (upper bound of the last distance band)",
    )
    search_request_timeout_s: float = Field(default=5.0, gt=0)

    # Location suggestions
    location_min_query_length: int = Field(default=2, ge=1)
    location_suggestion_limit: int = Field(default=8, ge=1)
    location_group_scan_limit: int = Field(default=50, ge=1)

    model_config = SettingsConfigDict(
        env_file=".env" if not os.getenv("CI") else None,
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("environment", mode="before")
    @classmethod
    def _normalize_environment(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().lower() or "development"
        return value

    @property
    def is_production(self) -> bool:
        return self.environment in PROD_ENVIRONMENTS


settings = Settings()
