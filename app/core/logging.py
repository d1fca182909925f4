import logging.config
from typing import Optional

from app.core.config import settings


def setup_logging(level: Optional[str] = None) -> None:
    """Настройка логирования приложения"""
    logging.config.dictConfig({
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
            "app": {
                "handlers": ["console"],
                "level": (level or settings.log_level).upper(),
                "propagate": False,
            },
        },
    })
