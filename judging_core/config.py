"""Runtime configuration for the backend-facing sinks."""
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings read from JUDGING_* environment variables or a .env file."""

    model_config = SettingsConfigDict(
        env_prefix="JUDGING_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    API_BASE_URL: str = "http://localhost:5000"
    REQUEST_TIMEOUT_SECONDS: float = Field(default=10.0, gt=0, le=300)
    # Value of the backend session cookie (connect.sid), if the routes require a login.
    SESSION_COOKIE: str | None = None

    @field_validator("API_BASE_URL")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError("API_BASE_URL must be an http(s) URL")
        return v.rstrip("/")


@lru_cache
def get_settings() -> Settings:
    return Settings()
