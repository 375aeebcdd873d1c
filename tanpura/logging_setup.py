"""Logging configuration helpers for tanpura."""

from __future__ import annotations

import logging
import os
import sys
from typing import Optional


def configure_logging(default_level: str = "WARNING", level: Optional[str] = None) -> int:
    """Configure process-wide logging and return the resolved log level.

    An explicit ``level`` (the ``--log-level`` flag) wins over ``LOG_LEVEL``;
    ``default_level`` is used when neither is set.
    """
    level_name = (level or os.environ.get("LOG_LEVEL") or default_level).upper()
    resolved = logging.getLevelName(level_name)
    invalid_level = None
    if not isinstance(resolved, int):
        invalid_level = level_name
        resolved = logging.getLevelName(default_level.upper())
        if not isinstance(resolved, int):
            resolved = logging.WARNING

    logging.basicConfig(
        level=resolved,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
        force=True,
    )

    if invalid_level is not None:
        logging.getLogger(__name__).warning(
            "Invalid log level '%s'; using %s", invalid_level, logging.getLevelName(resolved)
        )

    return resolved
