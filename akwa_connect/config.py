"""
Akwa-Connect — Application Configuration

Loads all configuration from environment variables (and an optional .env file)
using Pydantic Settings.  A cached ``get_settings()`` helper is provided so that
FastAPI dependency-injection (and the matching engine) always receives the same
validated instance without re-parsing the environment on every request.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central configuration for the Akwa-Connect compatibility service."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    # ------------------------------------------------------------------ #
    # Compatibility scoring weights (must sum to 1.0)
    # ------------------------------------------------------------------ #
    LOCATION_WEIGHT: float = 0.30
    PREFERENCES_WEIGHT: float = 0.25
    HOBBIES_WEIGHT: float = 0.20
    DEMOGRAPHICS_WEIGHT: float = 0.15
    BIO_SIMILARITY_WEIGHT: float = 0.10

    # ------------------------------------------------------------------ #
    # Thresholds and profile defaults
    # ------------------------------------------------------------------ #
    COMPATIBILITY_THRESHOLD: float = 40.0
    DEFAULT_AGE: int = 25                  # used when a profile has no dob
    DEFAULT_MIN_AGE_PREFERENCE: int = 25
    DEFAULT_MAX_AGE_PREFERENCE: int = 40
    DEFAULT_MATCH_REASON: str = "Good overall compatibility"

    # Largest candidate pool the HTTP layer will hand to the engine
    MAX_CANDIDATE_POOL: int = 5000

    # ------------------------------------------------------------------ #
    # Runtime environment
    # ------------------------------------------------------------------ #
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # ------------------------------------------------------------------ #
    # CORS
    # ------------------------------------------------------------------ #
    ALLOWED_ORIGINS: str = "*"

    # ------------------------------------------------------------------ #
    # Derived helpers
    # ------------------------------------------------------------------ #
    @property
    def allowed_origins_list(self) -> list[str]:
        """Return ALLOWED_ORIGINS as a list split on commas."""
        return [o.strip() for o in self.ALLOWED_ORIGINS.split(",")]

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"

    @property
    def weights(self) -> dict[str, float]:
        """Scoring weights keyed by breakdown dimension."""
        return {
            "location": self.LOCATION_WEIGHT,
            "preferences": self.PREFERENCES_WEIGHT,
            "hobbies": self.HOBBIES_WEIGHT,
            "demographics": self.DEMOGRAPHICS_WEIGHT,
            "bio_similarity": self.BIO_SIMILARITY_WEIGHT,
        }

    @field_validator(
        "LOCATION_WEIGHT",
        "PREFERENCES_WEIGHT",
        "HOBBIES_WEIGHT",
        "DEMOGRAPHICS_WEIGHT",
        "BIO_SIMILARITY_WEIGHT",
    )
    @classmethod
    def _weight_must_be_between_0_and_1(cls, v: float) -> float:
        if not 0.0 <= v <= 1.0:
            raise ValueError(f"Weight must be between 0 and 1, got {v}")
        return v

    @field_validator("COMPATIBILITY_THRESHOLD")
    @classmethod
    def _threshold_must_be_a_score(cls, v: float) -> float:
        if not 0.0 <= v <= 100.0:
            raise ValueError(f"Threshold must be between 0 and 100, got {v}")
        return v

    @model_validator(mode="after")
    def _weights_must_sum_to_one(self) -> "Settings":
        total = sum(self.weights.values())
        if abs(total - 1.0) > 1e-6:
            raise ValueError(f"Scoring weights must sum to 1.0, got {total:.4f}")
        if self.DEFAULT_MIN_AGE_PREFERENCE > self.DEFAULT_MAX_AGE_PREFERENCE:
            raise ValueError("DEFAULT_MIN_AGE_PREFERENCE exceeds DEFAULT_MAX_AGE_PREFERENCE")
        return self


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached, validated ``Settings`` instance.

    Using ``@lru_cache`` guarantees the .env file is read and validated
    exactly once per process lifetime.  Import this function anywhere you
    need access to configuration::

        from akwa_connect.config import get_settings
        settings = get_settings()
    """
    return Settings()
