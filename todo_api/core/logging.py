# todo_api/core/logging.py
import logging.config

from todo_api.core.config import settings


def setup_logging(level: str | None = None) -> None:
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {
                    "format": "%(asctime)s %(levelname)s [%(name)s] %(message)s",
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                },
            },
            "loggers": {
                "todo_api": {"level": level or settings.LOG_LEVEL, "handlers": ["console"], "propagate": False},
                "uvicorn.error": {"level": "INFO"},
                "sqlalchemy.engine": {"level": "WARNING"},
            },
            "root": {"level": "WARNING", "handlers": ["console"]},
        }
    )
