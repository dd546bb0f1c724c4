"""Logging setup shared by CLI commands."""

from __future__ import annotations

import logging
import sys
from typing import Any

DEFAULT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(cfg: Any | None = None) -> None:
    """Route log records to stderr at the configured level."""
    level = "INFO"
    log_format = DEFAULT_FORMAT
    if cfg is not None:
        level = str(cfg.logging.level).upper()
        log_format = cfg.logging.format or DEFAULT_FORMAT
    logging.basicConfig(level=level, format=log_format, stream=sys.stderr, force=True)
