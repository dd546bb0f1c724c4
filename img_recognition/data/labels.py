"""Label list loading."""

from __future__ import annotations

import logging
from pathlib import Path

from img_recognition.errors import LabelLoadError

logger = logging.getLogger(__name__)


def load_labels(path: Path) -> list[str]:
    """Read one label per line, keeping file order."""
    try:
        with path.open("r", encoding="utf-8") as file_obj:
            labels = [line.rstrip("\r\n") for line in file_obj]
    except (OSError, UnicodeDecodeError) as error:
        raise LabelLoadError(f"Unable to load labels from {path}: {error}") from error
    logger.info("Loaded %d labels from %s", len(labels), path)
    return labels
