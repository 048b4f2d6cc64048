from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # ==============================
    # Database
    # ==============================
    DATABASE_URL: str = "sqlite:///./posledger.db"
    SQLITE_BUSY_TIMEOUT_SECONDS: float = 5.0

    # ==============================
    # Logging
    # ==============================
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    # ==============================
    # Inventory
    # ==============================
    DEFAULT_MIN_QUANTITY: int = 5
    EXPIRY_WARNING_DAYS: int = 7

    # ==============================
    # Orders
    # ==============================
    BRANCH_ID: int = 1


@lru_cache
def get_settings() -> Settings:
    """Cached settings loader (once per process)."""
    return Settings()


__all__ = ["Settings", "get_settings"]
