"""Public Fire CLI entrypoint."""

from __future__ import annotations

import logging
import sys
from urllib.parse import urlparse

import fire
from hydra import compose, initialize_config_dir
from omegaconf import OmegaConf

from img_recognition.errors import ImageRecognitionError, UsageError
from img_recognition.production.infer_image import classify_url
from img_recognition.production.normalize import export_preprocess_graph
from img_recognition.production.ranking import print_top_labels
from img_recognition.utils.logging import configure_logging
from img_recognition.utils.paths import config_dir

logger = logging.getLogger(__name__)

USAGE = "Usage: img-recognition classify <img_url> [overrides...]"


def compose_config(overrides: list[str] | None = None):
    """Compose hydra config using config directory."""
    config_directory = str(config_dir().resolve())
    with initialize_config_dir(config_dir=config_directory, version_base=None):
        return compose(config_name="config", overrides=overrides or [])


def validate_url(image_url: str) -> str:
    """Return the stripped URL, rejecting anything that is not http(s)."""
    url = str(image_url).strip()
    if urlparse(url).scheme not in {"http", "https"}:
        raise UsageError(f"Expected an http(s) image URL, got {image_url!r}. {USAGE}")
    return url


class ImageRecognitionCommands:
    """Command collection exposed through python-fire."""

    def print_config(self, *overrides: str) -> str:
        cfg = compose_config(list(overrides))
        rendered = OmegaConf.to_yaml(cfg, resolve=True)
        print(rendered)
        return rendered

    def classify(self, image_url: str, *overrides: str) -> None:
        url = validate_url(image_url)
        cfg = compose_config(list(overrides))
        configure_logging(cfg)
        print_top_labels(classify_url(cfg, url))

    def export_preprocess(self, *overrides: str) -> str:
        cfg = compose_config(list(overrides))
        configure_logging(cfg)
        output_path = export_preprocess_graph(cfg)
        print(str(output_path))
        return str(output_path)


def main() -> None:
    """Main Fire entrypoint."""
    configure_logging()
    try:
        fire.Fire(ImageRecognitionCommands)
    except ImageRecognitionError as error:
        logger.error("%s", error)
        sys.exit(1)


if __name__ == "__main__":
    main()
