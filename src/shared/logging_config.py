"""
Structured logging configuration.

Call configure_logging() once at app startup.
"""
import logging
import os
import sys


def configure_logging(level: int | str | None = None) -> None:
    """Configure root logger with structured format."""
    if level is None:
        level = os.environ.get("SUPAMOCKA_LOG_LEVEL", "INFO").upper()
    fmt = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
    logging.basicConfig(
        level=level,
        format=fmt,
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[logging.StreamHandler(sys.stderr)],
        force=True,
    )
    # Suppress noisy third-party loggers
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
