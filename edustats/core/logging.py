"""Logging configuration."""

import logging
import sys

from edustats.core.config import settings


def setup_logging() -> None:
    """Configure the root logger once for the whole application."""
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    # SQL echo is controlled by DEBUG through the engine
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
