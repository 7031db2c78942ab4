"""Application configuration via pydantic settings."""

from datetime import date
from decimal import Decimal
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Typed application configuration."""

    app_env: str = Field("local", alias="APP_ENV")
    app_name: str = "Beach Desk API"
    api_v1_prefix: str = "/api/v1"

    database_url: str = Field(
        "sqlite+aiosqlite:///./beachdesk.db", alias="DATABASE_URL"
    )
    sync_database_url: str | None = Field(default=None, alias="SYNC_DATABASE_URL")

    establishment_name: str = Field("Zeus Balneario", alias="ESTABLISHMENT_NAME")
    establishment_location: str = Field(
        "Necochea, Argentina", alias="ESTABLISHMENT_LOCATION"
    )

    season_start: date = Field(date(2025, 12, 1), alias="SEASON_START")
    season_end: date = Field(date(2026, 2, 28), alias="SEASON_END")
    special_window_start: date | None = Field(
        date(2026, 2, 14), alias="SPECIAL_WINDOW_START"
    )
    special_window_days: int = Field(4, alias="SPECIAL_WINDOW_DAYS")
    special_window_label: str = Field("Carnaval", alias="SPECIAL_WINDOW_LABEL")

    payment_tolerance: Decimal = Field(Decimal("100"), alias="PAYMENT_TOLERANCE")
    reserved_horizon_days: int = Field(7, alias="RESERVED_HORIZON_DAYS")

    cors_allowlist: list[str] = Field(
        default_factory=lambda: ["http://localhost:5173"], alias="CORS_ALLOWLIST"
    )
    cors_allow_credentials: bool = Field(default=False, alias="CORS_ALLOW_CREDENTIALS")

    model_config = SettingsConfigDict(
        env_file=Path(__file__).resolve().parents[3] / ".env",
        case_sensitive=False,
        populate_by_name=True,
    )

    @field_validator("cors_allowlist", mode="before")
    @classmethod
    def _split_origins(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value


@lru_cache
def get_settings() -> Settings:
    """Return a cached settings instance."""
    return Settings()  # type: ignore[call-arg]
