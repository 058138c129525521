# core/monitoring/logging.py
"""structlog configuration shared by the CLI and the API server."""

import logging
import sys
from typing import Optional

import structlog

from core.config import Settings, get_settings


def configure_logging(
    level: Optional[str] = None,
    json_output: Optional[bool] = None,
    settings: Optional[Settings] = None
) -> None:
    """Route structlog through stdlib logging with a console or JSON renderer.

    Args:
        level: Log level name; defaults to ``settings.log_level``.
        json_output: Emit JSON lines instead of the console renderer.
        settings: Settings to read defaults from.
    """
    settings = settings or get_settings()
    level_name = (level or settings.log_level).upper()
    json_output = settings.log_json if json_output is None else json_output

    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format="%(message)s",
        stream=sys.stderr,
        force=True,
    )

    renderer = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer(colors=False)
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
