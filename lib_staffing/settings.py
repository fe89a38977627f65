"""Runtime settings read from the environment (``.env`` supported)."""

from __future__ import annotations

import logging
import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field


logger = logging.getLogger(__name__)


class AnalyticsSettings(BaseModel):
    """Settings for the scoring backend and data sources."""

    scoring_timeout_seconds: float = Field(default=60.0, gt=0)
    scoring_temperature: float = Field(default=0.3, ge=0.0, le=2.0)
    scoring_max_tokens: int = Field(default=8192, ge=1)
    taxonomy_path: str | None = None
    employees_path: str | None = None


def load_settings() -> AnalyticsSettings:
    """Build settings from ``STAFFING_*`` environment variables.

    Raises:
        ValueError: If a numeric variable is set but out of range or malformed.
    """
    load_dotenv()

    data: dict = {}
    env_map = {
        "STAFFING_SCORING_TIMEOUT": "scoring_timeout_seconds",
        "STAFFING_SCORING_TEMPERATURE": "scoring_temperature",
        "STAFFING_SCORING_MAX_TOKENS": "scoring_max_tokens",
        "STAFFING_TAXONOMY_PATH": "taxonomy_path",
        "STAFFING_EMPLOYEES_PATH": "employees_path",
    }
    for env_name, field_name in env_map.items():
        value = os.getenv(env_name, "")
        if value:
            data[field_name] = value

    try:
        settings = AnalyticsSettings(**data)
    except Exception as exc:
        raise ValueError(f"Invalid analytics settings: {exc}") from exc

    logger.info(
        "Analytics settings: timeout=%ss temperature=%s max_tokens=%d",
        settings.scoring_timeout_seconds,
        settings.scoring_temperature,
        settings.scoring_max_tokens,
    )
    return settings
