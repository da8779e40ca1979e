"""
Standalone Inception Classifier
===============================

Classify images directly with the pretrained Inception graph, without any
retraining. The graph and its label file are downloaded on first use.

Each image goes through a small TensorFlow pre-processing graph:

    decode (jpeg/png) -> cast float -> add batch dim -> resize bilinear 224x224
    -> subtract mean 117 -> divide by scale 1

and the result is fed to the ``input`` tensor of the main graph. Labels
whose probability reaches the threshold are returned, most probable first.

Example:
    >>> classifier = InceptionClassifier(TensorFlowPredictionSettings(models_folder="DNNModels"))
    >>> asyncio.run(classifier.classify_image_labels_async(Path("mug.jpg").read_bytes()))
    ['coffee mug', 'cup']
"""

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple, Union

import numpy as np

from incepta.core.config import Config
from incepta.core.http import DownloadClient, download_if_missing
from incepta.core.images import ImageFormat, get_image_format
from incepta.core.logger import get_logger
from incepta.core.ml import graph as graph_runtime
from incepta.core.ml.labels import pair_labels, select_confident
from incepta.core.ml_config import ClassifySettings, ImageNetSettings
from incepta.models.image import LabelConfidence

logger = get_logger(__name__)


@dataclass
class TensorFlowPredictionSettings:
    """Files, tensor names and pre-processing constants for the standalone classifier."""

    input_tensor_name: str = ClassifySettings.INPUT_TENSOR_NAME
    output_tensor_name: str = ClassifySettings.OUTPUT_TENSOR_NAME
    model_filename: str = ClassifySettings.MODEL_FILE
    labels_filename: str = ClassifySettings.LABELS_FILE
    threshold: float = ClassifySettings.THRESHOLD
    models_folder: str = ClassifySettings.MODELS_FOLDER
    download_url: str = ClassifySettings.DOWNLOAD_URL
    image_width: int = ImageNetSettings.IMAGE_WIDTH
    image_height: int = ImageNetSettings.IMAGE_HEIGHT
    mean: float = ImageNetSettings.MEAN
    scale: float = ImageNetSettings.SCALE

    @property
    def model_path(self) -> Path:
        return Path(self.models_folder) / self.model_filename

    @property
    def labels_path(self) -> Path:
        return Path(self.models_folder) / self.labels_filename

    @classmethod
    def from_config(cls, config: Config, models_folder: Union[str, Path]) -> "TensorFlowPredictionSettings":
        """Build settings from the [classify] and [image] config sections."""
        return cls(
            input_tensor_name=config.get("classify", "input_tensor", ClassifySettings.INPUT_TENSOR_NAME),
            output_tensor_name=config.get("classify", "output_tensor", ClassifySettings.OUTPUT_TENSOR_NAME),
            model_filename=config.get("classify", "model_file", ClassifySettings.MODEL_FILE),
            labels_filename=config.get("classify", "labels_file", ClassifySettings.LABELS_FILE),
            threshold=float(config.get("classify", "threshold", ClassifySettings.THRESHOLD)),
            models_folder=str(models_folder),
            download_url=config.get("classify", "download_url", ClassifySettings.DOWNLOAD_URL),
            image_width=int(config.get("image", "width", ImageNetSettings.IMAGE_WIDTH)),
            image_height=int(config.get("image", "height", ImageNetSettings.IMAGE_HEIGHT)),
            mean=float(config.get("image", "mean", ImageNetSettings.MEAN)),
            scale=float(config.get("image", "scale", ImageNetSettings.SCALE)),
        )


def download_if_model_not_exists(
    settings: TensorFlowPredictionSettings,
    client: Optional[DownloadClient] = None,
) -> bool:
    """
    Fetch and unpack the model archive when the graph or labels are missing.

    Returns:
        True if the archive was downloaded
    """
    downloaded = download_if_missing(
        settings.models_folder,
        [settings.model_filename, settings.labels_filename],
        settings.download_url,
        client=client,
    )
    if downloaded:
        logger.info(f"Downloaded model archive into {settings.models_folder}")
    return downloaded


def read_labels(path: Union[str, Path]) -> List[str]:
    """Read one label per line."""
    return Path(path).read_text(encoding="utf-8").splitlines()


def preprocess_image(
    image: bytes,
    width: int = ImageNetSettings.IMAGE_WIDTH,
    height: int = ImageNetSettings.IMAGE_HEIGHT,
    mean: float = ImageNetSettings.MEAN,
    scale: float = ImageNetSettings.SCALE,
) -> np.ndarray:
    """
    Decode and normalize an encoded JPEG or PNG image with TensorFlow.

    Returns:
        Float32 array of shape (1, height, width, 3)
    """
    import tensorflow as tf

    image_format = get_image_format(image)

    graph = tf.Graph()
    with graph.as_default():
        encoded = tf.compat.v1.placeholder(tf.string, name="encoded_image")
        if image_format is ImageFormat.PNG:
            decoded = tf.io.decode_png(encoded, channels=3)
        else:
            decoded = tf.io.decode_jpeg(encoded, channels=3)
        cast = tf.cast(decoded, tf.float32)
        batch = tf.expand_dims(cast, 0, name="make_batch")
        size = tf.constant([height, width], name="size")
        resized = tf.compat.v1.image.resize_bilinear(batch, size)
        normalized = tf.divide(
            tf.subtract(resized, tf.constant(mean, name="mean")),
            tf.constant(scale, name="scale"),
        )

    with tf.compat.v1.Session(graph=graph) as sess:
        return np.asarray(sess.run(normalized, feed_dict={encoded: image}), dtype=np.float32)


class InceptionClassifier:
    """
    Classifies encoded images with the pretrained Inception graph.

    The graph and labels are loaded on first use and reused afterwards.
    """

    def __init__(
        self,
        settings: Optional[TensorFlowPredictionSettings] = None,
        client: Optional[DownloadClient] = None,
    ):
        self.settings = settings or TensorFlowPredictionSettings()
        self.client = client
        self._graph: Optional[graph_runtime.FrozenGraph] = None
        self._labels: Optional[List[str]] = None

    def load_model_and_labels(self) -> Tuple[graph_runtime.FrozenGraph, List[str]]:
        """
        Download the model if needed, then load the graph and its labels.

        Raises:
            ValueError: If the model or labels file is still missing
        """
        if self._graph is not None and self._labels is not None:
            return self._graph, self._labels

        download_if_model_not_exists(self.settings, client=self.client)

        model_path = self.settings.model_path
        labels_path = self.settings.labels_path
        if not model_path.exists():
            raise ValueError(f"Model file not exists: {model_path}")
        if not labels_path.exists():
            raise ValueError(f"Labels file not exists: {labels_path}")

        self._graph = graph_runtime.load_frozen_graph(model_path)
        self._labels = read_labels(labels_path)
        logger.info(f"Loaded {len(self._labels)} labels from {labels_path}")
        return self._graph, self._labels

    def load_image(self, image: bytes) -> np.ndarray:
        """Turn encoded image bytes into the normalized network input."""
        s = self.settings
        return preprocess_image(image, s.image_width, s.image_height, s.mean, s.scale)

    def eval(
        self,
        graph: graph_runtime.FrozenGraph,
        image_tensor: np.ndarray,
        labels: List[str],
    ) -> List[LabelConfidence]:
        """Run the graph on one normalized image and keep the confident labels."""
        (output,) = graph.run(
            {self.settings.input_tensor_name: image_tensor},
            [self.settings.output_tensor_name],
        )
        probabilities = np.asarray(output).reshape(-1)
        pairs = pair_labels(labels, probabilities)
        return select_confident(pairs, self.settings.threshold)

    def process(self, image: bytes) -> List[LabelConfidence]:
        graph, labels = self.load_model_and_labels()
        tensor = self.load_image(image)
        return self.eval(graph, tensor, labels)

    async def classify_image_async(self, image: bytes) -> List[LabelConfidence]:
        """Classify encoded image bytes, most probable label first."""
        return self.process(image)

    async def classify_image_labels_async(self, image: bytes) -> List[str]:
        """Like classify_image_async, returning only the label names."""
        results = await self.classify_image_async(image)
        return [result.label for result in results]
