"""
Structured logging setup shared by the API and the scripts.
"""

import logging
import sys
from typing import Optional

import structlog

from config.settings import settings


def configure_logging(level: Optional[str] = None) -> None:
    """
    Configure structlog on top of stdlib logging.

    JSON lines in production, the colored console renderer elsewhere.
    Logs go to stderr so script output on stdout stays readable.
    """
    level_name = (level or settings.log_level).upper()

    logging.basicConfig(
        level=getattr(logging, level_name),
        format="%(message)s",
        stream=sys.stderr,
    )

    # Quiet the HTTP client used by supabase
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.JSONRenderer() if settings.is_production
                else structlog.dev.ConsoleRenderer()
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
