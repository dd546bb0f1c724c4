"""ONNXRuntime image classifier."""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
import onnxruntime as ort

from img_recognition.data.labels import load_labels
from img_recognition.data.schema import ModelConfig
from img_recognition.errors import InferenceError, ModelLoadError, ShapeError

logger = logging.getLogger(__name__)


def to_probability_row(output) -> np.ndarray:
    """Check that ``output`` is a ``[batch, classes]`` float array and return row 0."""
    array = np.asarray(output)
    if array.ndim != 2:
        raise ShapeError(f"Expected rank-2 output, got shape {array.shape}")
    if not np.issubdtype(array.dtype, np.floating):
        raise ShapeError(f"Expected floating point output, got {array.dtype}")
    if array.shape[0] < 1:
        raise ShapeError("Output has an empty batch dimension")
    return array[0].astype(np.float32, copy=False)


def _resolve_name(requested: str | None, declared: list[str], kind: str) -> str:
    """Pick the requested node name, or the first declared one."""
    if not declared:
        raise InferenceError(f"Graph declares no {kind}s")
    if requested is None:
        return declared[0]
    if requested not in declared:
        raise InferenceError(f"Graph has no {kind} named {requested!r}; declared: {declared}")
    return requested


class ImageClassifier:
    """ONNXRuntime session bound to the graph's declared input and output."""

    def __init__(
        self,
        graph_path: Path,
        input_name: str | None = None,
        output_name: str | None = None,
    ) -> None:
        self.graph_path = graph_path
        self.requested_input = input_name
        self.requested_output = output_name
        if not graph_path.exists():
            raise ModelLoadError(f"Classification graph not found: {graph_path}")
        try:
            self.session = ort.InferenceSession(
                str(graph_path), providers=["CPUExecutionProvider"]
            )
        except Exception as error:
            raise ModelLoadError(f"Unable to load graph {graph_path}: {error}") from error
        logger.info("Loaded classification graph from %s", graph_path)

    def __enter__(self) -> ImageClassifier:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self.session = None

    def io_names(self) -> tuple[str, str]:
        """Return the input and output node names used for inference."""
        if self.session is None:
            raise InferenceError("Classifier session is closed")
        input_name = _resolve_name(
            self.requested_input, [node.name for node in self.session.get_inputs()], "input"
        )
        output_name = _resolve_name(
            self.requested_output, [node.name for node in self.session.get_outputs()], "output"
        )
        return input_name, output_name

    def predict(self, tensor: np.ndarray) -> np.ndarray:
        """Run the graph on a normalized batch and return the first row of probabilities."""
        input_name, output_name = self.io_names()
        try:
            (output,) = self.session.run([output_name], {input_name: tensor})
        except Exception as error:
            raise InferenceError(f"Unable to run inference: {error}") from error
        return to_probability_row(output)


def load_graph_and_labels(model_cfg: ModelConfig) -> tuple[ImageClassifier, list[str]]:
    """Load the classification graph and its labels."""
    classifier = ImageClassifier(
        model_cfg.graph_path,
        input_name=model_cfg.input_name,
        output_name=model_cfg.output_name,
    )
    try:
        labels = load_labels(model_cfg.labels_path)
    except Exception:
        classifier.close()
        raise
    return classifier, labels
