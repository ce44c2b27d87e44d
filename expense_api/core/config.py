"""
Configuration helpers for the expense API.

Routers/services must read settings through get_settings() instead of
fetching os.environ directly, so tests can swap the environment and call
get_settings.cache_clear().
"""

from dataclasses import dataclass
from functools import lru_cache
import os


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    expenses_file: str
    single_writer: bool
    log_level: str
    host: str
    port: int
    cors_origins: tuple[str, ...]


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _int(value: str, default: int = 0) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    def _bool(value: str | None, default: bool = False) -> bool:
        if value is None:
            return default
        return value.strip().lower() in {"1", "true", "yes", "on"}

    def _list(value: str | None) -> tuple[str, ...]:
        return tuple(item.strip().rstrip("/") for item in (value or "").split(",") if item.strip())

    return Settings(
        app_env=(os.getenv("APP_ENV") or "dev").lower(),
        expenses_file=os.getenv("EXPENSES_FILE") or "expense.json",
        single_writer=_bool(os.getenv("EXPENSES_SINGLE_WRITER"), False),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
        host=os.getenv("HOST", "0.0.0.0"),
        port=_int(os.getenv("PORT", "8080"), 8080),
        cors_origins=_list(os.getenv("CORS_ORIGINS")),
    )
