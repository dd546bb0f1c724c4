"""Fetch, normalize and classify a single image URL."""

from __future__ import annotations

import logging

from img_recognition.data.fetch import fetch_image
from img_recognition.data.schema import LabeledProbability, ModelConfig, PreprocessConfig
from img_recognition.production.classifier import load_graph_and_labels
from img_recognition.production.normalize import normalize_image
from img_recognition.production.ranking import top_labels

logger = logging.getLogger(__name__)


def classify_url(cfg, url: str) -> list[LabeledProbability]:
    """Return the ``infer.top_k`` most probable labels for the image at ``url``."""
    logger.info("URL: %s", url)
    image_bytes = fetch_image(url, timeout=cfg.fetch.timeout)

    classifier, labels = load_graph_and_labels(ModelConfig.from_cfg(cfg))
    with classifier:
        tensor = normalize_image(image_bytes, PreprocessConfig.from_cfg(cfg))
        probabilities = classifier.predict(tensor)

    return top_labels(labels, probabilities, k=int(cfg.infer.top_k))
