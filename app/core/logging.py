"""Structured logging configuration.

Installs a single stdout handler on the root logger.  The level comes from
``settings.LOG_LEVEL`` unless an explicit level is passed.
"""

import logging
import sys

from app.core.config import settings

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

# Client libraries that log every HTTP round trip to Supabase
_NOISY_LOGGERS = ("httpx", "httpcore", "hpack", "postgrest", "uvicorn.access")


def setup_logging(level: str | None = None) -> None:
    """Configure the root logger for the API process."""
    log_level = getattr(logging, (level or settings.LOG_LEVEL).upper(), logging.INFO)

    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setFormatter(
        logging.Formatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S%z")
    )

    root = logging.getLogger()
    root.setLevel(log_level)
    # Repeated calls (tests, reloads) replace rather than stack handlers
    root.handlers.clear()
    root.addHandler(handler)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
