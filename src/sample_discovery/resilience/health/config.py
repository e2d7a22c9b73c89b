"""Health tracker configuration models and settings."""

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class HealthTrackerConfig(BaseModel):
    """Health tracker configuration."""

    failure_threshold: int = Field(
        default=3,
        ge=1,
        le=100,
        description="Consecutive failures before a dependency is degraded",
    )
    health_check_interval_ms: int = Field(
        default=300_000,
        ge=0,
        description="Time a degraded dependency is skipped before a probe",
    )


class HealthSettings(BaseSettings):
    """Health tracking configuration."""

    model_config = SettingsConfigDict(
        env_prefix="HEALTH_", env_file=".env", extra="ignore"
    )

    failure_threshold: int = 3
    health_check_interval_ms: int = 300_000

    def get_config(self) -> HealthTrackerConfig:
        return HealthTrackerConfig(
            failure_threshold=self.failure_threshold,
            health_check_interval_ms=self.health_check_interval_ms,
        )
