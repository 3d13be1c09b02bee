"""Runtime settings and fixed review policy."""
from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class CoreSettings(BaseSettings):
    """Settings read from HACKATHON_* environment variables (or a .env file)."""

    model_config = SettingsConfigDict(
        env_prefix="HACKATHON_", env_file=".env", extra="ignore"
    )

    certificate_base_url: str = "http://localhost:2000/api/certificates/view"
    # When False, unknown phase ids fall back to digit matching / phase one.
    strict_phase_resolution: bool = True


class ReviewLimits:
    """Review policy constants (not configurable)"""

    MAX_REUPLOADS = 2
    SHOWCASE_MAX_RANK = 3


@lru_cache
def get_settings() -> CoreSettings:
    return CoreSettings()
