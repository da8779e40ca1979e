"""Image sample and prediction models."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import numpy as np

from incepta.models.base import ToDictMixin


@dataclass
class ImageData(ToDictMixin):
    """One labeled (or unlabeled) image sample."""

    image_path: str
    label: Optional[str] = None


@dataclass
class ImagePrediction(ToDictMixin):
    """Raw classifier output: one score per label, in score-label order."""

    scores: np.ndarray = field(default_factory=lambda: np.zeros(0, dtype=np.float32))


@dataclass
class ImageDataProbability(ToDictMixin):
    """A sample paired with its predicted label and that label's probability."""

    image_path: str
    predicted_label: str
    probability: float
    label: Optional[str] = None

    def describe(self) -> str:
        """One-line, human readable summary."""
        name = Path(self.image_path).name
        if self.label:
            return (
                f"ImagePath: {name} labeled as {self.label} predicted as "
                f"{self.predicted_label} with probability {self.probability:.4f}"
            )
        return f"ImagePath: {name} predicted as {self.predicted_label} with probability {self.probability:.4f}"


@dataclass
class LabelConfidence(ToDictMixin):
    """A label and the probability the network assigned to it."""

    label: str
    probability: float
