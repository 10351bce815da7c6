"""Structured logging for the watchdog process."""

import logging
import sys
from pathlib import Path
from typing import Optional

import structlog


def configure_logging(verbose: bool = False, log_file: Optional[str] = None) -> None:
    """
    Configure structlog on top of stdlib logging.

    Phase diagnostics are logged at DEBUG, so they only show up when the
    launcher asked for verbose output.
    """
    level = logging.DEBUG if verbose else logging.INFO

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        level=level,
        handlers=handlers,
        force=True,
    )

    # One line per ping otherwise
    for name in ("httpx", "httpcore"):
        logging.getLogger(name).setLevel(logging.WARNING)
