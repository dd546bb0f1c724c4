"""Top-k ranking of label probabilities."""

from __future__ import annotations

from collections.abc import Sequence

from img_recognition.data.schema import LabeledProbability
from img_recognition.errors import TooFewResultsError

DEFAULT_TOP_K = 5


def pair_labels(
    labels: Sequence[str], probabilities: Sequence[float]
) -> list[LabeledProbability]:
    """Pair labels and probabilities by index, dropping the unmatched tail."""
    return [
        LabeledProbability(label=label, probability=float(probability))
        for label, probability in zip(labels, probabilities)
    ]


def rank_labels(
    labels: Sequence[str], probabilities: Sequence[float]
) -> list[LabeledProbability]:
    """Return every pair sorted by descending probability."""
    pairs = pair_labels(labels, probabilities)
    return sorted(pairs, key=lambda item: item.probability, reverse=True)


def top_labels(
    labels: Sequence[str], probabilities: Sequence[float], k: int = DEFAULT_TOP_K
) -> list[LabeledProbability]:
    """Return the ``k`` most probable labels."""
    ranked = rank_labels(labels, probabilities)
    if len(ranked) < k:
        raise TooFewResultsError(
            f"Need {k} labeled probabilities, got {len(ranked)} "
            f"({len(labels)} labels, {len(probabilities)} probabilities)"
        )
    return ranked[:k]


def format_label(item: LabeledProbability) -> str:
    """Render one result line with the probability as a percentage."""
    return f"Label: {item.label}, probability: {item.probability * 100:.2f}%"


def print_top_labels(items: Sequence[LabeledProbability]) -> None:
    """Print one line per ranked label."""
    for item in items:
        print(format_label(item))
