from __future__ import annotations

import logging
import os
import sys
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from pathlib import Path

LOG_LEVEL_ENV = "PORTFOLIO_SYNC_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "WARNING"

_LOGGING_CONFIGURED = False


def setup_logging(
    filename: str | Path | None = None,
    level: str | None = None,
    force: bool = False,
) -> structlog.BoundLogger:
    """Set up structured logging for portfolio-sync.

    Only the first call configures anything unless ``force`` is set; later calls
    return the shared logger.

    Args:
        filename: Optional path to a log file. If None, logs are written to stderr.
        level: Log level name. Defaults to $PORTFOLIO_SYNC_LOG_LEVEL, then WARNING.
        force: Reconfigure even if logging was already set up.

    Returns:
        A structlog logger bound to the portfolio_sync namespace.
    """
    global _LOGGING_CONFIGURED  # noqa: PLW0603
    if force or not _LOGGING_CONFIGURED:
        level_name = (level or os.environ.get(LOG_LEVEL_ENV) or DEFAULT_LOG_LEVEL).upper()
        numeric_level = logging.getLevelName(level_name)
        if not isinstance(numeric_level, int):
            numeric_level = logging.WARNING

        handlers: list[logging.Handler] = []
        if filename:
            handlers.append(logging.FileHandler(str(filename), encoding="utf-8"))
        else:
            handlers.append(logging.StreamHandler(sys.stderr))

        logging.basicConfig(
            level=numeric_level,
            handlers=handlers,
            format="%(message)s",
            force=force,
        )
        structlog.configure(
            processors=[
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.processors.add_log_level,
                structlog.processors.StackInfoRenderer(),
                structlog.processors.format_exc_info,
                structlog.processors.JSONRenderer(),
            ],
            wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
            context_class=dict,
            logger_factory=structlog.stdlib.LoggerFactory(),
            cache_logger_on_first_use=True,
        )
        _LOGGING_CONFIGURED = True

    return structlog.get_logger("portfolio_sync")
