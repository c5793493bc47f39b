"""Logging configuration for command-line use."""

import logging
import sys
from typing import Optional

from hypodex.config import get_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: Optional[str] = None) -> None:
    """Configure root logging on stderr so stdout stays machine-readable."""
    level = (level or get_settings().log_level).upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stderr)],
        force=True,
    )


__all__ = ["LOG_FORMAT", "setup_logging"]
