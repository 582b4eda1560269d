"""Logging setup for the command line entry point."""

from __future__ import annotations

import logging
from pathlib import Path

from src.config import LoggingConfig

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LOG_FILENAME = "departures.log"


def configure_logging(config: LoggingConfig) -> None:
    """Send records to stderr and to ``departures.log`` in the configured directory."""
    log_dir = Path(config.log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        level=config.level.upper(),
        format=LOG_FORMAT,
        handlers=[
            logging.StreamHandler(),
            logging.FileHandler(log_dir / LOG_FILENAME, encoding="utf-8"),
        ],
        force=True,
    )


__all__ = ["configure_logging"]
