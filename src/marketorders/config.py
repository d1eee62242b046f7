"""Application settings, read from the environment (prefix ``MARKETORDERS_``)
or from a local ``.env`` file."""

from __future__ import annotations

import logging
from decimal import Decimal
from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="MARKETORDERS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # --- Storage ---
    data_dir: Path = Path("data")

    # --- Calendar ---
    # Marketplace local time zone; decides what "today" is for same-day rules.
    timezone: str = "Indian/Antananarivo"
    availability_horizon_days: int = Field(default=60, gt=0)

    # --- Fees ---
    # Flat supermarket delivery fee used when no schedule is configured.
    default_market_fee: Decimal = Field(default=Decimal("5000"), ge=0)
    currency: str = "MGA"

    # --- Logging ---
    log_level: str = "WARNING"


@lru_cache
def get_settings() -> Settings:
    settings = Settings()
    logger.debug("Settings loaded (data_dir=%s, timezone=%s)",
                 settings.data_dir, settings.timezone)
    return settings
