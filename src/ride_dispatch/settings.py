from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class MatchingSettings(BaseSettings):
    """Driver discovery and scoring configuration."""

    search_radius_km: float = Field(default=10.0, gt=0.0, le=100.0)
    discovery_freshness_minutes: float = Field(
        default=10.0,
        gt=0.0,
        le=120.0,
        description="Maximum age of a location sample for the driver to be discovered",
    )
    availability_freshness_minutes: float = Field(
        default=5.0,
        gt=0.0,
        le=120.0,
        description="Samples older than this incur the staleness penalty",
    )

    distance_weight: float = Field(default=0.30, ge=0.0, le=1.0)
    rating_weight: float = Field(default=0.25, ge=0.0, le=1.0)
    freshness_weight: float = Field(default=0.20, ge=0.0, le=1.0)
    staleness_penalty: float = Field(default=0.15, ge=0.0, le=1.0)
    fleet_bonus: float = Field(default=0.10, ge=0.0, le=1.0)

    default_driver_rating: float = Field(default=5.0, ge=1.0, le=5.0)
    claim_drivers: bool = Field(
        default=False,
        description="Atomically mark the matched driver busy before notifying them",
    )
    offer_timeout_seconds: int = Field(
        default=15,
        ge=1,
        le=3600,
        description="Unanswered offers older than this release the claimed driver",
    )

    model_config = SettingsConfigDict(env_prefix="MATCHING_")

    def __init__(self, **data):
        super().__init__(**data)
        weights_sum = (
            self.distance_weight
            + self.rating_weight
            + self.freshness_weight
            + self.staleness_penalty
            + self.fleet_bonus
        )
        if not (0.99 <= weights_sum <= 1.01):
            raise ValueError(
                f"Scoring weights must sum to 1.0, got {weights_sum}. "
                f"(distance: {self.distance_weight}, rating: {self.rating_weight}, "
                f"freshness: {self.freshness_weight}, staleness: {self.staleness_penalty}, "
                f"fleet: {self.fleet_bonus})"
            )
        if self.availability_freshness_minutes > self.discovery_freshness_minutes:
            raise ValueError(
                "availability_freshness_minutes cannot exceed discovery_freshness_minutes"
            )


class LoggingSettings(BaseSettings):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    format: Literal["text", "json"] = "text"
    environment: str = "development"

    model_config = SettingsConfigDict(env_prefix="LOG_")


class DatabaseSettings(BaseSettings):
    url: str = "sqlite:///data/ride_dispatch.db"
    echo: bool = False

    model_config = SettingsConfigDict(env_prefix="DB_")

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        if "://" not in v:
            raise ValueError("Database URL must be a SQLAlchemy URL (e.g. sqlite:///path.db)")
        return v


class APISettings(BaseSettings):
    key: str = ""
    host: str = "0.0.0.0"
    port: int = Field(default=8000, ge=1, le=65535)

    model_config = SettingsConfigDict(env_prefix="API_")


class Settings(BaseSettings):
    matching: MatchingSettings = Field(default_factory=MatchingSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    api: APISettings = Field(default_factory=APISettings)

    model_config = SettingsConfigDict(
        env_nested_delimiter="__",
        case_sensitive=False,
    )


def get_settings() -> Settings:
    """Load and validate settings from environment variables."""
    return Settings()
