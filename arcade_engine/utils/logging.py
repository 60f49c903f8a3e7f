"""Structured logging configuration."""

from __future__ import annotations

import logging
import sys

# Per-request access lines drown out tick-level engine output.
_NOISY_LOGGERS = ("uvicorn.access",)


def setup_logging(level: str = "INFO") -> None:
    """Configure the root logger with one stdout handler for engine output."""
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(numeric_level)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s [%(levelname)-5s] %(name)-25s | %(message)s",
            datefmt="%H:%M:%S",
        )
    )

    root = logging.getLogger()
    root.setLevel(numeric_level)
    root.handlers.clear()
    root.addHandler(handler)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(numeric_level, logging.WARNING))
