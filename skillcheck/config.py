"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - Only the composition root (main.build_orchestrator) reads settings; core never does
    - get_settings() is cached (lru_cache) — single instance per process
    - Every variable is prefixed SKILLCHECK_ (e.g. SKILLCHECK_RANDOM_SEED)

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults provided for every setting: works with no environment at all
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Host settings from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="SKILLCHECK_", env_file=".env", case_sensitive=False,
    )

    # Engine wiring
    random_seed: int | None = None
    skill_catalog_path: str | None = None
    emit_skill_loaded: bool = False

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"
    event_logger_name: str = "skillcheck.events"

    @field_validator("log_format")
    @classmethod
    def check_log_format(cls, v: str) -> str:
        v = v.lower()
        if v not in ("json", "text"):
            raise ValueError("log_format must be 'json' or 'text'")
        return v


@lru_cache
def get_settings() -> Settings:
    return Settings()
