"""
Logging - Process-wide logging setup for the API and CLI entry points.
"""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str | int = "INFO") -> None:
    """Install the root handler once; later calls only adjust the level."""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger().setLevel(level)

    # httpx logs every request at INFO, which duplicates our retry logging
    logging.getLogger("httpx").setLevel(logging.WARNING)
