"""
Pairing label names with classifier scores.

Labels and probabilities are matched purely by position. When the two
sequences have different lengths, pairing stops at the shorter one.
"""

from typing import List, Sequence, Tuple

import numpy as np

from incepta.models.image import LabelConfidence


def get_label(labels: Sequence[str], scores: Sequence[float]) -> Tuple[str, float]:
    """
    Return the label with the highest score and that score.

    The first index wins on ties.

    Raises:
        ValueError: If scores is empty
    """
    scores = np.asarray(scores, dtype=np.float64).reshape(-1)
    if scores.size == 0:
        raise ValueError("Cannot pick a label from an empty score vector")

    best = int(np.argmax(scores))
    return labels[best], float(scores[best])


def pair_labels(labels: Sequence[str], probabilities: Sequence[float]) -> List[LabelConfidence]:
    """Pair each label with the probability at the same index."""
    return [
        LabelConfidence(label=label, probability=float(probability))
        for label, probability in zip(labels, probabilities)
    ]


def select_confident(pairs: Sequence[LabelConfidence], threshold: float) -> List[LabelConfidence]:
    """
    Keep pairs with probability >= threshold, highest probability first.

    The sort is stable, so equal probabilities keep their original order.
    """
    kept = [pair for pair in pairs if pair.probability >= threshold]
    return sorted(kept, key=lambda pair: pair.probability, reverse=True)
