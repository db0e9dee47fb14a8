# firebase_token/config.py
from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Centralized service configuration, read from the environment.
    """

    FIREBASE_SECRET: str | None = None
    SERVICE_JWT_SECRET: str | None = None
    ENABLE_DEV_TOKEN: bool = False
    ALLOWED_OPTIONS: list[str] = ["admin", "debug", "expires", "notBefore", "simulate"]
    MAX_DATA_ENTRIES: int = 50
    MAX_STRING_CHARS: int = 1024
    CORS_ORIGINS: list[str] = ["*"]


@lru_cache
def get_settings() -> Settings:
    return Settings()
