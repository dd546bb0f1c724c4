from __future__ import annotations

import io
from pathlib import Path

import numpy as np
import onnx
import pytest
from onnx import TensorProto, helper, numpy_helper
from PIL import Image

from img_recognition.commands import compose_config

LABELS = ["cat", "dog", "bird", "car", "plane", "tree"]


def make_jpeg(size=(64, 48), color=(117, 117, 117), image_format="JPEG") -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format=image_format)
    return buffer.getvalue()


def save_model(graph, path: Path) -> Path:
    model = helper.make_model(graph, opset_imports=[helper.make_opsetid("", 13)], ir_version=8)
    onnx.checker.check_model(model)
    onnx.save(model, str(path))
    return path


@pytest.fixture
def jpeg_bytes() -> bytes:
    return make_jpeg()


@pytest.fixture
def classifier_graph(tmp_path) -> Path:
    """Mean pixel -> linear layer -> softmax over six classes."""
    rng = np.random.default_rng(0)
    weights = rng.normal(size=(3, len(LABELS))).astype(np.float32)
    graph = helper.make_graph(
        [
            helper.make_node("ReduceMean", ["input"], ["pooled"], axes=[1, 2], keepdims=0),
            helper.make_node("MatMul", ["pooled", "weights"], ["logits"]),
            helper.make_node("Softmax", ["logits"], ["probs"], axis=-1),
        ],
        "tiny_classifier",
        [helper.make_tensor_value_info("input", TensorProto.FLOAT, [1, 224, 224, 3])],
        [helper.make_tensor_value_info("probs", TensorProto.FLOAT, [1, len(LABELS)])],
        initializer=[numpy_helper.from_array(weights, name="weights")],
    )
    return save_model(graph, tmp_path / "classifier.onnx")


@pytest.fixture
def passthrough_graph(tmp_path) -> Path:
    graph = helper.make_graph(
        [helper.make_node("Identity", ["input"], ["output"])],
        "passthrough",
        [helper.make_tensor_value_info("input", TensorProto.FLOAT, [1, 224, 224, 3])],
        [helper.make_tensor_value_info("output", TensorProto.FLOAT, [1, 224, 224, 3])],
    )
    return save_model(graph, tmp_path / "passthrough.onnx")


@pytest.fixture
def labels_file(tmp_path) -> Path:
    path = tmp_path / "labels.txt"
    path.write_text("\n".join(LABELS) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def cfg(classifier_graph, labels_file, tmp_path):
    return compose_config(
        [
            f"model.graph_path={classifier_graph}",
            f"model.labels_path={labels_file}",
            f"export.preprocess_path={tmp_path / 'export' / 'preprocess.onnx'}",
        ]
    )
