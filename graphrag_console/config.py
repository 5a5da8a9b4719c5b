from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # GraphRAG backend
    API_BASE_URL: str = "http://localhost:5001"
    REQUEST_TIMEOUT: float | None = Field(
        default=None,
        description="Seconds before a backend call is abandoned; None waits indefinitely",
    )

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = Field(default="json", description="'json', 'logfmt' or 'console'")

    @field_validator("API_BASE_URL")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")


def get_settings() -> Settings:
    return Settings()
