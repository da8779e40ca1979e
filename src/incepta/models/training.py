"""Training and evaluation result models."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from incepta.models.base import ToDictMixin
from incepta.models.image import ImageDataProbability


@dataclass
class TrainResult(ToDictMixin):
    """Result of training a transfer-learning pipeline."""

    model_path: Optional[str]
    num_samples: int
    classes: List[str]
    feature_size: int

    @property
    def num_classes(self) -> int:
        return len(self.classes)


@dataclass
class ClassificationMetrics(ToDictMixin):
    """Multi-class metrics computed over a labeled sample set."""

    log_loss: float
    log_loss_reduction: float
    accuracy_micro: float
    accuracy_macro: float
    per_class_log_loss: Dict[str, float] = field(default_factory=dict)
    num_samples: int = 0
    num_skipped: int = 0


@dataclass
class EvaluationResult(ToDictMixin):
    """Predictions and metrics produced by evaluating a saved model."""

    model_path: str
    predictions: List[ImageDataProbability]
    metrics: Optional[ClassificationMetrics] = None
