"""Logging setup shared by the CLI and both transports."""

from __future__ import annotations

import logging
import sys

# These log full request URLs, and the API key travels as a query parameter.
_QUIET_LOGGERS = ("httpx", "httpcore")


def setup_logging(level: str = "WARNING") -> None:
    """Send log records to stderr; stdout belongs to the stdio transport."""
    root_logger = logging.getLogger()
    if root_logger.handlers:
        return

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
