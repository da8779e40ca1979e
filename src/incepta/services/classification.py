# services/classification.py
"""
Service for classifying images with the pretrained Inception graph.
"""

import asyncio
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Dict, List, Optional

from incepta.core.config import Config, get_config
from incepta.core.images import get_image_format, is_valid_image
from incepta.models.image import LabelConfidence
from incepta.repository.protocol import FileRepositoryProtocol

from .base import BaseService, ServiceResult

if TYPE_CHECKING:
    from incepta.core.ml.inception import InceptionClassifier, TensorFlowPredictionSettings

logger = logging.getLogger(__name__)

UNSUPPORTED_MEDIA_TYPE = "UnsupportedMediaType"


class ClassificationService(BaseService):
    """
    Service for standalone image classification.

    The model archive is downloaded into the assets models folder the first
    time a supported image is classified. Classifiers are cached per models
    folder.
    """

    def __init__(self, file_repository: FileRepositoryProtocol) -> None:
        """
        Initialize classification service.

        Args:
            file_repository: Repository for file operations (required)
        """
        super().__init__(file_repository=file_repository)
        self._classifiers: Dict[str, "InceptionClassifier"] = {}

    def _get_settings(self, assets_path: str, config: Config) -> "TensorFlowPredictionSettings":
        from incepta.core.ml.inception import TensorFlowPredictionSettings

        models_folder = Path(assets_path) / config.get("paths", "models_folder", "DNNModels")
        return TensorFlowPredictionSettings.from_config(config, models_folder)

    def _get_classifier(
        self, settings: "TensorFlowPredictionSettings", config: Config
    ) -> "InceptionClassifier":
        """Lazy load the classifier for a models folder.

        The classifier downloads through a client built from the [api] section.
        """
        from incepta.core.http import DownloadClient
        from incepta.core.ml.inception import InceptionClassifier

        key = str(settings.models_folder)
        if key not in self._classifiers:
            client = DownloadClient(
                timeout=config.get("api", "timeout", 30),
                max_retries=config.get("api", "max_retries", 3),
                chunk_size=config.get("api", "download_chunk_size", 8192),
            )
            self._classifiers[key] = InceptionClassifier(settings, client=client)
        return self._classifiers[key]

    def resolve_images(
        self,
        assets_path: str,
        images: Optional[List[str]] = None,
        config: Optional[Config] = None,
    ) -> ServiceResult[List[str]]:
        """
        Resolve the images to classify.

        Args:
            assets_path: Assets root
            images: Image names relative to the images folder
                (default: the built-in image list)
            config: Configuration (default: global configuration)

        Returns:
            Result with absolute image paths
        """
        from incepta.core.ml_config import ClassifySettings

        config = config or get_config()
        folder = Path(assets_path) / config.get(
            "paths", "images_folder", ClassifySettings.IMAGES_FOLDER
        )
        names = images or ClassifySettings.DEFAULT_IMAGES
        return ServiceResult.ok(data=[str(folder / name) for name in names])

    def classify_image(
        self,
        image_path: str,
        assets_path: str,
        config: Optional[Config] = None,
    ) -> ServiceResult[List[LabelConfidence]]:
        """
        Classify one image file.

        Only JPEG and PNG images are accepted. Any other content fails with
        error "UnsupportedMediaType" and ``unsupported_media=True`` metadata.

        Args:
            image_path: Image file
            assets_path: Assets root holding the models folder
            config: Configuration (default: global configuration)

        Returns:
            Result with labels at or above the threshold, most probable first
        """
        error = self._validate_input_file(image_path, "Image file")
        if error:
            return ServiceResult.fail(error)

        try:
            data = self.file_repository.read_bytes(image_path)
            if not is_valid_image(data):
                return ServiceResult.fail(
                    UNSUPPORTED_MEDIA_TYPE,
                    unsupported_media=True,
                    image_format=get_image_format(data).value,
                )

            config = config or get_config()
            classifier = self._get_classifier(self._get_settings(assets_path, config), config)
            results = asyncio.run(classifier.classify_image_async(data))

            return ServiceResult.ok(
                data=results,
                message=f"{len(results)} labels above threshold for {Path(image_path).name}",
            )
        except Exception as e:
            logger.debug("Classification failed", exc_info=True)
            return ServiceResult.fail(str(e))
