from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False  # True for production (structured JSON), False for dev (colored)

    # Traversal
    MAX_DEPTH: int = 64  # Nesting levels before traversal aborts

    # Guards returning an invalid result without itemized violations
    GUARD_FAILURE_PATH: str = "base"
    GUARD_FAILURE_MESSAGE: str = "is invalid"

    model_config = SettingsConfigDict(env_prefix="SKIMA_", env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    return Settings()
