"""structlog configuration.

The engine only ever calls ``structlog.get_logger()``; applications call
``configure_logging`` once at startup to choose JSON output for production
or readable console output for development.
"""

import logging
from typing import Optional

import structlog

from .config import EngineSettings, get_settings


def configure_logging(settings: Optional[EngineSettings] = None) -> None:
    """Configure structlog processors and level filtering.

    Args:
        settings: Engine settings (default: cached settings from environment)
    """
    settings = settings or get_settings()
    level = logging.getLevelName(settings.log_level)

    processors: list = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    if settings.use_json_logs:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=False,
    )
