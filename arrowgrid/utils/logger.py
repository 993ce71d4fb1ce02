"""Logging utilities for the arrow-word editor."""

from __future__ import annotations

import logging
from typing import IO, Optional

PACKAGE_LOGGER = "arrowgrid"
# Chatty third-party loggers kept at WARNING unless the caller asks for DEBUG.
NOISY_LOGGERS = ("reportlab",)


def configure_logging(level: int = logging.INFO, stream: Optional[IO[str]] = None) -> None:
    """Install a single stderr (or ``stream``) handler on the root logger.

    Rejected placements and reconciliation drops are logged at DEBUG, so
    raising the level to DEBUG is enough to trace why a definition lost its
    anchor after an edit.
    """

    handler = logging.StreamHandler(stream)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s | %(levelname)-7s | %(name)s | %(message)s",
            datefmt="%H:%M:%S",
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(level if level <= logging.DEBUG else logging.WARNING)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a namespaced logger, configuring defaults on first use."""

    if not logging.getLogger().handlers:
        configure_logging()
    return logging.getLogger(name or PACKAGE_LOGGER)
