"""
Akwa-Connect — Structured logging configuration

Every module obtains its logger with ``structlog.get_logger("akwa_connect.<name>")``
and logs event names with key/value context.  ``configure_logging`` sets up
JSON rendering once per process; the threshold comes from ``LOG_LEVEL``.
"""

from __future__ import annotations

import logging

import structlog

from akwa_connect.config import get_settings


def configure_logging(log_level: str | None = None) -> None:
    """Configure structlog for JSON output filtered at ``log_level``."""
    level_name = (log_level or get_settings().LOG_LEVEL).upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level = logging.INFO

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
