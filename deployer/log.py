"""Structured logging configuration with structlog.

Usage::

    # At CLI startup
    from deployer.log import configure_logging

    configure_logging()               # level/format from settings
    configure_logging(level="DEBUG")  # --verbose

    # Then use structlog normally
    import structlog
    log = structlog.get_logger(__name__)
    log.info("inventory_written", path=str(path))
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

import structlog
from structlog.typing import Processor

from deployer.config import settings


def _resolve_level(level_name: str) -> int:
    return getattr(logging, level_name.upper(), logging.WARNING)


def configure_logging(level: Optional[str] = None, fmt: Optional[str] = None) -> None:
    """Configure structlog for the CLI.

    Args:
        level: Log level name. Defaults to ``settings.log_level``.
        fmt: ``"json"`` for machine-readable lines, anything else for the
            console renderer. Defaults to ``settings.log_format``.

    Logs are written to stderr so they never mix with command output.
    """
    fmt = (fmt or settings.log_format).lower()

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if fmt == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            _resolve_level(level or settings.log_level)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        # The CLI test runner swaps sys.stderr per invocation
        cache_logger_on_first_use=False,
    )
