"""Data models for incepta."""

from incepta.models.base import ToDictMixin
from incepta.models.image import (
    ImageData,
    ImageDataProbability,
    ImagePrediction,
    LabelConfidence,
)
from incepta.models.training import (
    ClassificationMetrics,
    EvaluationResult,
    TrainResult,
)

__all__ = [
    "ToDictMixin",
    "ImageData",
    "ImageDataProbability",
    "ImagePrediction",
    "LabelConfidence",
    "ClassificationMetrics",
    "EvaluationResult",
    "TrainResult",
]
