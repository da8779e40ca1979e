# services/scoring.py
"""
Service for training a classifier in memory and scoring test images with it.
"""

import logging
from pathlib import Path
from typing import List, Optional

from incepta.core.config import Config, get_config
from incepta.models.image import ImageData, ImageDataProbability
from incepta.repository.protocol import FileRepositoryProtocol

from .base import BaseService, ServiceResult
from .training import TrainingService

logger = logging.getLogger(__name__)


class ScoringService(BaseService):
    """
    Service for one-off model scoring.

    Trains the pipeline for a preset without saving it, then predicts the
    preset's test image (or the images given).
    """

    def __init__(
        self,
        file_repository: FileRepositoryProtocol,
        training_service: TrainingService,
    ) -> None:
        """
        Initialize scoring service.

        Args:
            file_repository: Repository for file operations (required)
            training_service: Service used to train the in-memory model
        """
        super().__init__(file_repository=file_repository)
        self.training_service = training_service

    def set_progress_callback(self, callback) -> None:
        super().set_progress_callback(callback)
        self.training_service.set_progress_callback(callback)

    def score(
        self,
        assets_path: str,
        preset: str = "inception",
        images: Optional[List[str]] = None,
        config: Optional[Config] = None,
    ) -> ServiceResult[List[ImageDataProbability]]:
        """
        Train in memory and predict test images.

        Args:
            assets_path: Assets root containing the preset's layout
            preset: "inception" or "cifar"
            images: Image names relative to the preset's images folder
                (default: the preset's test image)
            config: Configuration (default: global configuration)

        Returns:
            Result with one prediction per image
        """
        try:
            from incepta.core.ml.labels import get_label
            from incepta.core.ml.settings import get_preset

            config = config or get_config()
            layout = get_preset(preset, config).layout.resolve(assets_path)

            if images:
                targets = [str(Path(layout.images_folder) / image) for image in images]
            else:
                targets = layout.test_images

            for target in targets:
                error = self._validate_input_file(target, "Image file")
                if error:
                    return ServiceResult.fail(error)

            trained = self.training_service.train(
                assets_path, preset=preset, output_path=None, config=config
            )
            if not trained.success:
                return ServiceResult.fail(trained.error)

            model = trained.metadata["model"]
            labels = model.score_label_names()

            predictions = []
            for target in targets:
                prediction = model.predict(ImageData(image_path=target))
                predicted_label, probability = get_label(labels, prediction.scores)
                predictions.append(
                    ImageDataProbability(
                        image_path=target,
                        predicted_label=predicted_label,
                        probability=probability,
                    )
                )

            return ServiceResult.ok(
                data=predictions,
                message=f"Scored {len(predictions)} images",
                classes=labels,
            )
        except Exception as e:
            logger.debug("Scoring failed", exc_info=True)
            return ServiceResult.fail(str(e))
