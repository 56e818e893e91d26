"""
Logging configuration for structured logging.

Production emits JSON lines; development uses a readable format.
Everything goes to stderr so command output on stdout stays clean.
"""

import logging
import logging.config
from typing import Optional

from pythonjsonlogger import jsonlogger


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter that always carries the level and logger name."""

    def add_fields(self, log_record, record, message_dict):
        """Add custom fields to log record."""
        super().add_fields(log_record, record, message_dict)
        log_record["level"] = record.levelname
        log_record.setdefault("logger", record.name)


def get_logging_config(environment: str = "development", level: Optional[str] = None) -> dict:
    """
    Get logging configuration for the application.

    Args:
        environment: Environment name (development, production, test)
        level: Explicit level overriding the environment default

    Returns:
        logging.config.dictConfig dictionary
    """
    log_level = level or ("DEBUG" if environment == "development" else "INFO")
    if environment == "test" and not level:
        log_level = "WARNING"
    formatter = "verbose" if environment == "development" else "json"

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {
                "()": CustomJsonFormatter,
                "format": "%(asctime)s %(name)s %(levelname)s %(message)s",
            },
            "verbose": {
                "format": "{levelname} {asctime} {name} {message}",
                "style": "{",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": formatter,
                "stream": "ext://sys.stderr",
            },
        },
        "root": {
            "handlers": ["console"],
            "level": "WARNING",
        },
        "loggers": {
            "core": {
                "handlers": ["console"],
                "level": log_level,
                "propagate": False,
            },
            "signing": {
                "handlers": ["console"],
                "level": log_level,
                "propagate": False,
            },
            "licenses": {
                "handlers": ["console"],
                "level": log_level,
                "propagate": False,
            },
            "LicenseTool": {
                "handlers": ["console"],
                "level": log_level,
                "propagate": False,
            },
        },
    }


def configure_logging(environment: str = "development", level: Optional[str] = None) -> None:
    """Apply ``get_logging_config`` to the logging module."""
    logging.config.dictConfig(get_logging_config(environment, level))
