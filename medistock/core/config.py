"""Environment-driven configuration for MediStock.

Every tunable lives on ``AppSettings`` so there is one place to look when a
deployment needs a different database, timezone or stock threshold. Values
come from the process environment first and ``.env`` files second.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from zoneinfo import ZoneInfo

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

INVENTORY_ORDERS = ("insertion", "name")


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    APP_NAME: str = "MediStock"
    APP_ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    DATA_DIR: Path = Field(default_factory=lambda: Path(__file__).resolve().parents[2] / "data")
    DB_URL: str = Field(default="", validation_alias=AliasChoices("DB_URL", "DATABASE_URL"))

    # Calendar days in the history filter and the CSV "Fecha" column are
    # interpreted in this zone.
    TZ: str = "America/Mexico_City"

    # X-API-Key must match this when set; an empty token leaves the API open.
    API_TOKEN: str = Field(default="", validation_alias=AliasChoices("API_TOKEN", "API_KEY"))

    LOW_STOCK_THRESHOLD: int = 10
    INVENTORY_ORDER: str = "insertion"

    @field_validator("INVENTORY_ORDER")
    @classmethod
    def check_inventory_order(cls, value: str) -> str:
        value = (value or "").strip().lower()
        if value not in INVENTORY_ORDERS:
            raise ValueError(f"INVENTORY_ORDER must be one of {', '.join(INVENTORY_ORDERS)}")
        return value

    @property
    def database_url(self) -> str:
        return self.DB_URL or f"sqlite:///{self.DATA_DIR / 'medistock.db'}"

    @property
    def local_tz(self) -> ZoneInfo:
        return ZoneInfo(self.TZ)


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    settings = AppSettings()
    settings.DATA_DIR.mkdir(parents=True, exist_ok=True)
    return settings


settings = get_settings()
