"""Logging setup for the command-line entry points."""

import logging

from .config import Config


def setup_logging(config: Config) -> None:
    """Configure the root logger from the ``logging`` config section."""
    level = str(config.get("logging.level", "INFO")).upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format=config.get("logging.format"),
    )
