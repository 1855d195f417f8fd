"""Structured logging setup for the provisioner CLI."""

import logging
import sys

import structlog


def configure_logging(level: int = logging.WARNING) -> None:
    """Configure structlog to emit JSON lines on stderr at the given level."""
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        # Resolve loggers per call so a reconfigured stream is picked up
        cache_logger_on_first_use=False,
    )
