# tabular_integrity/logging_config.py

import logging
import logging.config
import os

DEFAULT_LOG_LEVEL = "WARNING"

_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def configure_logging(level: str | None = None) -> None:
    """
    Configure package logging to stderr.

    The level is taken from the argument, then TABULAR_INTEGRITY_LOG_LEVEL,
    then DEFAULT_LOG_LEVEL. Loggers of other libraries are left untouched.

    Args:
        level: Optional level name such as "INFO" or "debug".
    """
    resolved = (
        level or os.getenv("TABULAR_INTEGRITY_LOG_LEVEL") or DEFAULT_LOG_LEVEL
    ).upper()

    if resolved not in logging.getLevelNamesMapping():
        resolved = DEFAULT_LOG_LEVEL

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {"standard": {"format": _FORMAT}},
            "handlers": {
                "stderr": {
                    "class": "logging.StreamHandler",
                    "formatter": "standard",
                    "stream": "ext://sys.stderr",
                },
            },
            "loggers": {
                "tabular_integrity": {
                    "handlers": ["stderr"],
                    "level": resolved,
                    "propagate": False,
                },
            },
        },
    )
