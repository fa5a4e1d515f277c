# app/core/logging_config.py
import logging.config
import os
from typing import Any, Dict

from app.core.config import settings


def build_logging_config() -> Dict[str, Any]:
    """Configuration dictConfig : console, fichier optionnel, correlation id"""
    handlers = ["console"]
    config: Dict[str, Any] = {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {
            "correlation_id": {
                "()": "asgi_correlation_id.CorrelationIdFilter",
                "uuid_length": 32,
                "default_value": "-",
            },
        },
        "formatters": {
            "standard": {
                "format": settings.LOG_FORMAT,
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "filters": ["correlation_id"],
                "formatter": "standard",
            },
        },
        "root": {
            "level": settings.LOG_LEVEL.upper(),
            "handlers": handlers,
        },
    }

    if settings.LOG_FILE:
        log_dir = os.path.dirname(os.path.abspath(settings.LOG_FILE))
        os.makedirs(log_dir, exist_ok=True)
        config["handlers"]["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "filename": settings.LOG_FILE,
            "maxBytes": 5 * 1024 * 1024,
            "backupCount": 5,
            "encoding": "utf8",
            "filters": ["correlation_id"],
            "formatter": "standard",
        }
        handlers.append("file")

    return config


def setup_logging() -> None:
    logging.config.dictConfig(build_logging_config())
