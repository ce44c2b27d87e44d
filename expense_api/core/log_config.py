"""Logging setup shared by the API process and the operator scripts."""
from __future__ import annotations

import logging.config

from .config import get_settings

_configured = False


def build_logging_config(level: str = "INFO") -> dict:
    """Return a dictConfig routing app and uvicorn loggers through RichHandler."""
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "format": "%(name)s - %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
        },
        "handlers": {
            "default": {
                "class": "rich.logging.RichHandler",
                "formatter": "default",
                "level": "DEBUG",
                "rich_tracebacks": True,
                "show_time": True,
                "show_path": False,
                "log_time_format": "%Y-%m-%d %H:%M:%S",
                "markup": False,
            },
        },
        "loggers": {
            "uvicorn": {"handlers": ["default"], "level": "INFO", "propagate": False},
            "uvicorn.error": {"handlers": ["default"], "level": "INFO", "propagate": False},
            "uvicorn.access": {"handlers": ["default"], "level": "INFO", "propagate": False},
            "": {"handlers": ["default"], "level": level, "propagate": False},
        },
    }


def configure_logging(level: str | None = None, *, force: bool = False) -> None:
    """Apply the logging config once per process (force=True re-applies it)."""
    global _configured
    if _configured and not force:
        return
    logging.config.dictConfig(build_logging_config(level or get_settings().log_level))
    _configured = True
