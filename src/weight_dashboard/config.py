"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")

DATA_SOURCES = frozenset({"sheets", "local"})


class AppConfig(BaseSettings):
    """Application settings loaded from environment variables."""

    sheet_id: str = "12nJDx3anatLU4vMt09JvJek5fyS9uFE6AvWYk0uwpBQ"
    sheets_base_url: str = "https://docs.google.com/spreadsheets/d"
    input_sheet_name: str = "Input"
    settings_sheet_name: str = "settings"
    local_data_path: str = "data/sample.json"
    meals_path: str | None = "data/meals.json"
    data_source: str = "sheets"
    fallback_year: int = 2026
    request_timeout_seconds: float = 15
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_data_source(raw: str | None, default: str = "sheets") -> str:
    """Validate a data source name, falling back to ``default`` when unset."""
    if raw is None:
        return default
    cleaned = raw.strip().lower()
    if not cleaned:
        return default
    if cleaned not in DATA_SOURCES:
        raise ValueError(f"Unknown data source: {raw!r}")
    return cleaned
