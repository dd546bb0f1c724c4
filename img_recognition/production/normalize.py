"""JPEG decoding and the ONNX normalization graph fed to the classifier."""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from pathlib import Path

import numpy as np
import onnx
import onnxruntime as ort
import yaml
from omegaconf import OmegaConf
from onnx import TensorProto, helper
from PIL import Image, UnidentifiedImageError

from img_recognition.data.schema import PreprocessConfig
from img_recognition.errors import DecodeError, InferenceError

logger = logging.getLogger(__name__)

IR_VERSION = 8
JPEG_FORMATS = {"JPEG", "MPO"}
NCHW_PERM = [0, 3, 1, 2]
NHWC_PERM = [0, 2, 3, 1]


@dataclass(frozen=True)
class NormalizationGraph:
    """Built preprocessing graph and the names of its endpoints."""

    model: onnx.ModelProto
    input_name: str
    output_name: str


def decode_jpeg(image_bytes: bytes) -> np.ndarray:
    """Decode JPEG bytes into an RGB ``uint8`` array of shape ``[H, W, 3]``.

    Multi-picture JPEGs (MPO) decode to their first frame.
    """
    try:
        with Image.open(io.BytesIO(image_bytes)) as image:
            if image.format not in JPEG_FORMATS:
                raise DecodeError(f"Expected JPEG image data, got {image.format or 'unknown'}")
            pixels = np.asarray(image.convert("RGB"), dtype=np.uint8)
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, SyntaxError) as error:
        raise DecodeError(f"Unable to decode image: {error}") from error
    return pixels


def build_normalization_graph(preprocess_cfg: PreprocessConfig) -> NormalizationGraph:
    """Build cast -> batch -> bilinear resize -> mean subtraction as ONNX.

    Resize runs in NCHW; the result is transposed back when the classifier
    expects NHWC input.
    """
    input_name = "image"
    output_name = "normalized"
    to_nhwc = preprocess_cfg.layout == "nhwc"
    resized_name = "resized"
    centered_name = "centered" if to_nhwc else output_name

    initializers = [
        helper.make_tensor("batch_axes", TensorProto.INT64, [1], [0]),
        helper.make_tensor(
            "size",
            TensorProto.INT64,
            [4],
            [1, 3, preprocess_cfg.height, preprocess_cfg.width],
        ),
        helper.make_tensor("mean", TensorProto.FLOAT, [], [preprocess_cfg.mean]),
    ]
    nodes = [
        helper.make_node("Cast", [input_name], ["as_float"], to=TensorProto.FLOAT),
        helper.make_node("Unsqueeze", ["as_float", "batch_axes"], ["batched"]),
        helper.make_node("Transpose", ["batched"], ["batched_nchw"], perm=NCHW_PERM),
        helper.make_node(
            "Resize",
            ["batched_nchw", "", "", "size"],
            [resized_name],
            mode="linear",
            coordinate_transformation_mode="asymmetric",
        ),
        helper.make_node("Sub", [resized_name, "mean"], [centered_name]),
    ]
    if to_nhwc:
        nodes.append(
            helper.make_node("Transpose", [centered_name], [output_name], perm=NHWC_PERM)
        )
        output_shape = [1, preprocess_cfg.height, preprocess_cfg.width, 3]
    else:
        output_shape = [1, 3, preprocess_cfg.height, preprocess_cfg.width]

    graph = helper.make_graph(
        nodes,
        "normalize_image",
        [helper.make_tensor_value_info(input_name, TensorProto.UINT8, ["height", "width", 3])],
        [helper.make_tensor_value_info(output_name, TensorProto.FLOAT, output_shape)],
        initializer=initializers,
    )
    model = helper.make_model(
        graph,
        opset_imports=[helper.make_opsetid("", preprocess_cfg.opset)],
        ir_version=IR_VERSION,
        producer_name="img-recognition",
    )
    onnx.checker.check_model(model)
    return NormalizationGraph(model=model, input_name=input_name, output_name=output_name)


def run_normalization(graph: NormalizationGraph, pixels: np.ndarray) -> np.ndarray:
    """Execute the normalization graph once in its own session."""
    try:
        session = ort.InferenceSession(
            graph.model.SerializeToString(), providers=["CPUExecutionProvider"]
        )
        (normalized,) = session.run([graph.output_name], {graph.input_name: pixels})
    except Exception as error:
        raise InferenceError(f"Unable to normalize image: {error}") from error
    return normalized


def normalize_image(image_bytes: bytes, preprocess_cfg: PreprocessConfig) -> np.ndarray:
    """Decode JPEG bytes and return the normalized batch-of-one tensor."""
    pixels = decode_jpeg(image_bytes)
    graph = build_normalization_graph(preprocess_cfg)
    normalized = run_normalization(graph, pixels)
    logger.debug("Normalized image %s -> %s", pixels.shape, normalized.shape)
    return normalized


def export_preprocess_graph(cfg) -> Path:
    """Save the normalization graph and its resolved config."""
    graph = build_normalization_graph(PreprocessConfig.from_cfg(cfg))
    output_path = Path(cfg.export.preprocess_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    onnx.save(graph.model, str(output_path))
    resolved_cfg = OmegaConf.to_container(cfg.preprocess, resolve=True)
    with output_path.with_suffix(".yaml").open("w", encoding="utf-8") as file_obj:
        yaml.safe_dump(resolved_cfg, file_obj, sort_keys=False)
    return output_path
