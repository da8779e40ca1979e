# services/training.py
"""
Service for training transfer-learning image classifiers.
"""

import logging
from typing import Optional

from incepta.core.config import Config, get_config
from incepta.models.training import TrainResult
from incepta.repository.protocol import FileRepositoryProtocol

from .base import BaseService, ServiceResult

logger = logging.getLogger(__name__)


class TrainingService(BaseService):
    """
    Service for training the transfer-learning pipeline.

    Builds the pipeline for a preset, trains it on the preset's sample file
    and writes the resulting model archive.
    """

    def __init__(self, file_repository: FileRepositoryProtocol) -> None:
        """
        Initialize training service.

        Args:
            file_repository: Repository for file operations (required)
        """
        super().__init__(file_repository=file_repository)

    def train(
        self,
        assets_path: str,
        preset: str = "train",
        output_path: Optional[str] = None,
        config: Optional[Config] = None,
    ) -> ServiceResult[TrainResult]:
        """
        Train a classifier and save it.

        Any existing model file at the output path is deleted before training
        starts, so a failed run never leaves a stale model behind.

        Args:
            assets_path: Assets root containing the preset's layout
            preset: Preset name ("train", "inception", "cifar")
            output_path: Model archive path (default: the preset's model output)
            config: Configuration (default: global configuration)

        Returns:
            Result with training summary
        """
        try:
            from incepta.core.ml.settings import build_learning_pipeline, get_preset

            selected = get_preset(preset, config or get_config())
            layout = selected.layout.resolve(assets_path)
            model_output = output_path or layout.model_output

            error = self._validate_input_file(layout.tags_file, "Sample file")
            if error:
                return ServiceResult.fail(error)
            error = self._validate_input_file(layout.model_file, "Model file")
            if error:
                return ServiceResult.fail(error)

            if model_output and self.file_repository.remove(model_output):
                logger.info(f"Deleted existing model {model_output}")

            pipeline = build_learning_pipeline(selected.settings, layout)
            model = pipeline.train(progress_callback=self._report_progress)

            if model_output:
                self.file_repository.make_parent(model_output)
                model.write(model_output)

            result = TrainResult(
                model_path=model_output,
                num_samples=model.num_samples,
                classes=model.score_label_names(),
                feature_size=model.trainer.num_features,
            )

            return ServiceResult.ok(
                data=result,
                message=f"Trained on {result.num_samples} samples ({result.num_classes} classes)",
                model=model,
            )
        except Exception as e:
            logger.debug("Training failed", exc_info=True)
            return ServiceResult.fail(str(e))
