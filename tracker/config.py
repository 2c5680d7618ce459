"""Client Configuration: environment-driven settings via pydantic-settings.

Invariants:
    - Every setting can be overridden with a TRACKER_-prefixed environment variable
    - get_settings() is cached (lru_cache): single instance per process

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults target a local development server
"""

from functools import lru_cache
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Client settings from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="TRACKER_", env_file=".env", case_sensitive=False,
    )

    # Remote service
    api_base_url: str = "http://localhost:8000/api"
    request_timeout_seconds: float = 30.0

    @field_validator("api_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    # Durable session (token, loggedIn, user_id)
    session_file: Path = Path.home() / ".config" / "tracker" / "session.json"

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
