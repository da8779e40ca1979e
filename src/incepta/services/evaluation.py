# services/evaluation.py
"""
Service for evaluating a saved image classifier.
"""

import logging
from pathlib import Path
from typing import List, Optional, Sequence

import numpy as np

from incepta.core.config import Config, get_config
from incepta.models.image import ImageData
from incepta.models.training import EvaluationResult
from incepta.repository.protocol import FileRepositoryProtocol

from .base import BaseService, ServiceResult

logger = logging.getLogger(__name__)


class EvaluationService(BaseService):
    """
    Service for scoring samples with a saved model and computing metrics.
    """

    def __init__(self, file_repository: FileRepositoryProtocol) -> None:
        """
        Initialize evaluation service.

        Args:
            file_repository: Repository for file operations (required)
        """
        super().__init__(file_repository=file_repository)

    def evaluate(
        self,
        assets_path: str,
        model_path: Optional[str] = None,
        extra_images: Sequence[str] = (),
        config: Optional[Config] = None,
    ) -> ServiceResult[EvaluationResult]:
        """
        Predict every sample in the sample file plus any extra images.

        Metrics are computed over the labeled samples. Extra images are
        unlabeled and only reported.

        Args:
            assets_path: Assets root in the training layout
            model_path: Model archive (default: the layout's model output)
            extra_images: Image names relative to the images folder
            config: Configuration (default: global configuration)

        Returns:
            Result with predictions and metrics
        """
        try:
            from incepta.core.datasets import read_image_data
            from incepta.core.ml.evaluate import ClassificationEvaluator
            from incepta.core.ml.pipeline import PredictionModel
            from incepta.core.ml.settings import get_preset

            layout = get_preset("train", config or get_config()).layout.resolve(assets_path)
            model_path = model_path or layout.model_output

            error = self._validate_input_file(model_path, "Model file")
            if error:
                return ServiceResult.fail(error)
            error = self._validate_input_file(layout.tags_file, "Sample file")
            if error:
                return ServiceResult.fail(error)

            model = PredictionModel.read(model_path)
            samples: List[ImageData] = read_image_data(
                layout.tags_file, images_folder=layout.images_folder
            )
            samples.extend(
                ImageData(image_path=str(Path(layout.images_folder) / image))
                for image in extra_images
            )

            evaluator = ClassificationEvaluator(model)
            predictions = []
            scores = []
            for done, sample in enumerate(samples, start=1):
                sample_predictions, sample_scores = evaluator.score(model, [sample])
                predictions.extend(sample_predictions)
                scores.append(sample_scores)
                self._report_progress("Predicting", done, len(samples))

            warnings = []
            metrics = None
            labeled = [i for i, p in enumerate(predictions) if p.label is not None]
            if labeled:
                matrix = np.vstack(scores)
                try:
                    metrics = evaluator.compute(
                        model.score_label_names(),
                        [predictions[i].label for i in labeled],
                        matrix[labeled],
                    )
                except ValueError as e:
                    warnings.append(str(e))
                if metrics and metrics.num_skipped:
                    warnings.append(
                        f"{metrics.num_skipped} samples have labels the model was not trained on"
                    )
            else:
                warnings.append("No labeled samples; metrics were not computed")

            return ServiceResult.ok(
                data=EvaluationResult(
                    model_path=str(model_path), predictions=predictions, metrics=metrics
                ),
                message=f"Evaluated {len(predictions)} samples",
                warnings=warnings,
            )
        except Exception as e:
            logger.debug("Evaluation failed", exc_info=True)
            return ServiceResult.fail(str(e))
