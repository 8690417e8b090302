"""Logging setup for the Family Calendar API."""

import logging
import sys
from typing import Optional

from src.config import get_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: Optional[str] = None) -> None:
    """
    Configure the root logger once at application startup.

    Args:
        level: Logging level name. Defaults to the LOG_LEVEL setting.
    """
    logging.basicConfig(
        level=level or get_settings().log_level,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # googleapiclient logs every discovery lookup at INFO
    logging.getLogger("googleapiclient.discovery_cache").setLevel(logging.ERROR)
