"""Pydantic schemas for pipeline configuration and results."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field


class ModelConfig(BaseModel):
    """Locations of the classification graph and its label list."""

    graph_path: Path
    labels_path: Path
    input_name: str | None = None
    output_name: str | None = None

    @classmethod
    def from_cfg(cls, cfg) -> ModelConfig:
        return cls(
            graph_path=Path(cfg.model.graph_path),
            labels_path=Path(cfg.model.labels_path),
            input_name=cfg.model.input_name,
            output_name=cfg.model.output_name,
        )


class PreprocessConfig(BaseModel):
    """Parameters of the normalization graph."""

    height: int = Field(224, gt=0)
    width: int = Field(224, gt=0)
    mean: float = 117.0
    layout: Literal["nhwc", "nchw"] = "nhwc"
    opset: int = Field(13, ge=13, le=17)

    @classmethod
    def from_cfg(cls, cfg) -> PreprocessConfig:
        return cls(
            height=int(cfg.preprocess.height),
            width=int(cfg.preprocess.width),
            mean=float(cfg.preprocess.mean),
            layout=cfg.preprocess.layout,
            opset=int(cfg.preprocess.opset),
        )


class LabeledProbability(BaseModel):
    """Single label with the probability the model assigned to it."""

    label: str
    probability: float
