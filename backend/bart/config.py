"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - get_settings() is cached (lru_cache): single instance per process
    - Game rules (rounds, threshold range, points) are constants in core, not settings

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults provided for all settings: works out-of-the-box for local play
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Game: seed for the pop-threshold RNG (None = nondeterministic)
    threshold_seed: int | None = None

    @field_validator("threshold_seed", mode="before")
    @classmethod
    def empty_seed_is_none(cls, v):
        """THRESHOLD_SEED= (empty) in .env means unseeded."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    # Sessions: in-memory registry cap; the oldest session is evicted first
    max_sessions: int = Field(default=1000, ge=1)

    # API
    cors_origins: list[str] = ["http://localhost:5173"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
