"""Retry configuration models and settings."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class RetryPolicy(BaseModel):
    """Retry policy supplied per call site."""

    model_config = ConfigDict(frozen=True)

    max_retries: int = Field(
        default=3, ge=0, le=10, description="Retries after the initial attempt"
    )
    base_delay_ms: int = Field(
        default=1000, gt=0, description="Base delay in milliseconds"
    )
    max_delay_ms: int = Field(
        default=30000, gt=0, description="Maximum exponential delay in milliseconds"
    )
    jitter_ratio: float = Field(
        default=0.5, ge=0.0, le=1.0, description="Relative spread of the jitter"
    )
    stop_on_non_retryable: bool = Field(
        default=False,
        description="Stop as soon as a failure is classified as not retryable",
    )

    @field_validator("max_delay_ms")
    @classmethod
    def validate_max_delay(cls, v: int, info: Any) -> int:
        """Ensure max_delay_ms is not below base_delay_ms."""
        if info.data.get("base_delay_ms") and v < info.data["base_delay_ms"]:
            raise ValueError("max_delay_ms must be greater than or equal to base_delay_ms")
        return v

    @property
    def max_attempts(self) -> int:
        """Total attempts, the initial call included."""
        return self.max_retries + 1


class RetrySettings(BaseSettings):
    """Retry configuration for the catalog provider."""

    model_config = SettingsConfigDict(
        env_prefix="RETRY_", env_file=".env", extra="ignore"
    )

    max_retries: int = 3
    base_delay_ms: int = 1000
    max_delay_ms: int = 30000
    jitter_ratio: float = 0.5
    stop_on_non_retryable: bool = False

    def get_policy(self) -> RetryPolicy:
        """Get the default retry policy."""
        return RetryPolicy(
            max_retries=self.max_retries,
            base_delay_ms=self.base_delay_ms,
            max_delay_ms=self.max_delay_ms,
            jitter_ratio=self.jitter_ratio,
            stop_on_non_retryable=self.stop_on_non_retryable,
        )
