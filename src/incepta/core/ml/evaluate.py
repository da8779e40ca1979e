"""
Multi-class evaluation of a trained PredictionModel.
"""

import logging
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np
from sklearn.metrics import accuracy_score, balanced_accuracy_score

from incepta.core.ml.labels import get_label
from incepta.core.ml.pipeline import PredictionModel
from incepta.models.image import ImageData, ImageDataProbability
from incepta.models.training import ClassificationMetrics

logger = logging.getLogger(__name__)

LOG_LOSS_EPSILON = 1e-15


def log_losses(probabilities: np.ndarray, targets: np.ndarray) -> np.ndarray:
    """Per-row natural log loss of the true class, with probabilities clipped to [1e-15, 1]."""
    true_probabilities = probabilities[np.arange(len(targets)), targets]
    return -np.log(np.clip(true_probabilities, LOG_LOSS_EPSILON, 1.0))


def prior_log_loss(targets: np.ndarray, num_classes: int) -> float:
    """Log loss of always predicting the label frequencies of ``targets``."""
    counts = np.bincount(targets, minlength=num_classes).astype(np.float64)
    prior = counts / counts.sum()
    present = prior > 0
    return float(-(prior[present] * np.log(prior[present])).sum())


class ClassificationEvaluator:
    """
    Computes multi-class metrics for a model over labeled samples.

    Metrics:
        log_loss: mean -ln(p_true)
        log_loss_reduction: 1 - log_loss / prior log loss (0 when the prior is 0)
        accuracy_micro: fraction of samples predicted correctly
        accuracy_macro: mean per-class recall
        per_class_log_loss: mean log loss of the samples of each class
    """

    def __init__(self, model: Optional[PredictionModel] = None):
        self.model = model

    def score(
        self, model: PredictionModel, samples: Sequence[ImageData]
    ) -> Tuple[List[ImageDataProbability], np.ndarray]:
        """Predict each sample, returning reported predictions and the raw score matrix."""
        labels = model.score_label_names()
        predictions = []
        scores = []
        for sample in samples:
            prediction = model.predict(sample)
            predicted_label, probability = get_label(labels, prediction.scores)
            predictions.append(
                ImageDataProbability(
                    image_path=sample.image_path,
                    label=sample.label,
                    predicted_label=predicted_label,
                    probability=probability,
                )
            )
            scores.append(np.asarray(prediction.scores, dtype=np.float64))
        matrix = np.vstack(scores) if scores else np.zeros((0, len(labels)))
        return predictions, matrix

    def compute(
        self,
        labels: Sequence[str],
        sample_labels: Sequence[Optional[str]],
        scores: np.ndarray,
    ) -> ClassificationMetrics:
        """
        Compute metrics from already scored samples.

        Args:
            labels: Score label names, in score order
            sample_labels: True label of each scored sample
            scores: Score matrix, one row per sample

        Raises:
            ValueError: If no sample has a label known to the model
        """
        index = {label: i for i, label in enumerate(labels)}
        keep = [i for i, label in enumerate(sample_labels) if label in index]
        skipped = len(sample_labels) - len(keep)
        if skipped:
            logger.warning(f"Skipping {skipped} samples whose label is unknown to the model")
        if not keep:
            raise ValueError("No samples with a label known to the model to evaluate")

        targets = np.asarray([index[sample_labels[i]] for i in keep], dtype=np.int64)
        probabilities = np.asarray(scores, dtype=np.float64)[keep]
        predicted = probabilities.argmax(axis=1)

        losses = log_losses(probabilities, targets)
        loss = float(losses.mean())
        prior = prior_log_loss(targets, len(labels))
        reduction = 1.0 - loss / prior if prior > 0 else 0.0

        per_class: Dict[str, float] = {}
        for key in np.unique(targets):
            per_class[labels[key]] = float(losses[targets == key].mean())

        return ClassificationMetrics(
            log_loss=loss,
            log_loss_reduction=reduction,
            accuracy_micro=float(accuracy_score(targets, predicted)),
            accuracy_macro=float(balanced_accuracy_score(targets, predicted)),
            per_class_log_loss=per_class,
            num_samples=len(keep),
            num_skipped=skipped,
        )

    def evaluate(
        self, model: Optional[PredictionModel] = None, samples: Sequence[ImageData] = ()
    ) -> ClassificationMetrics:
        """Predict every sample and compute metrics."""
        model = model or self.model
        if model is None:
            raise ValueError("No model to evaluate")

        predictions, scores = self.score(model, samples)
        return self.compute(
            model.score_label_names(), [p.label for p in predictions], scores
        )
