"""
Learning Pipeline
=================

Transfer learning on top of a frozen image network.

A pipeline is an ordered list of steps. Each sample row is a dict of named
columns; every step reads some columns and writes others:

    TextLoader          -> ImagePath, Label
    ImageLoader         ImagePath -> ImageReal (PIL image)
    ImageResizer        ImageReal -> ImageReal (resized)
    ImagePixelExtractor ImageReal -> input (float array)
    GraphScorer         input -> softmax2_pre_activation (frozen graph output)
    ColumnConcatenator  softmax2_pre_activation -> Features
    TextToKeyConverter  Label -> Label (integer key)
    SdcaClassifier      Features, Label -> Score

Training returns a PredictionModel that can score new samples and be written
to a single zip archive together with the frozen graph it depends on.

Example:
    >>> pipeline = LearningPipeline()
    >>> pipeline.add(TextLoader("inputs/data/tags.tsv"))
    >>> pipeline.add(ImageLoader("ImagePath", "ImageReal", "inputs/data"))
    >>> ...
    >>> model = pipeline.train()
    >>> model.write("outputs/imageClassifier.zip")
"""

import io
import json
import zipfile
from abc import ABC, abstractmethod
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

import joblib
import numpy as np
from sklearn.linear_model import LogisticRegression
from sklearn.pipeline import make_pipeline
from sklearn.preprocessing import MaxAbsScaler

from incepta import __version__
from incepta.core.datasets import read_image_data
from incepta.core.logger import get_logger
from incepta.core.ml import graph as graph_runtime
from incepta.core.ml.transforms import extract_pixels, load_image, resize_image
from incepta.core.paths import delete_assets
from incepta.models.image import ImageData, ImagePrediction

logger = get_logger(__name__)

Row = Dict[str, Any]
ProgressCallback = Callable[[str, int, int], None]

MANIFEST_NAME = "model.json"
FORMAT_VERSION = 1


def sample_to_row(sample: ImageData) -> Row:
    """Create a pipeline row from a sample record."""
    return {"ImagePath": sample.image_path, "Label": sample.label}


class PipelineStep(ABC):
    """
    Base class for pipeline steps.

    Steps are dataclasses; their init fields form the configuration that is
    stored in model.json. Binary state (a frozen graph, a fitted estimator)
    travels as a separate payload entry in the model archive.
    """

    is_trainer = False

    @property
    def name(self) -> str:
        return self.__class__.__name__

    def fit(self, rows: List[Row]) -> None:
        """Learn state from the rows reaching this step. Most steps have none."""

    @abstractmethod
    def transform_row(self, row: Row) -> Row:
        """Add this step's output columns to a row."""

    def get_config(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self) if f.init}

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "PipelineStep":
        return cls(**config)

    def payload_name(self, index: int) -> Optional[str]:
        """Archive entry name for this step's binary state, or None."""
        return None

    def get_payload(self) -> Optional[bytes]:
        return None

    def set_payload(self, data: bytes) -> None:
        pass


@dataclass
class TextLoader:
    """Reads sample records; column 0 is ImagePath, column 1 is Label."""

    path: str
    has_header: bool = False
    separator: str = "\t"

    def load(self) -> List[Row]:
        samples = read_image_data(self.path, separator=self.separator, has_header=self.has_header)
        return [sample_to_row(sample) for sample in samples]


@dataclass
class ImageLoader(PipelineStep):
    """Opens the image named in input_column, relative to image_folder."""

    input_column: str
    output_column: str
    image_folder: Optional[str] = None

    def __post_init__(self):
        if self.image_folder is not None:
            self.image_folder = str(self.image_folder)

    def transform_row(self, row: Row) -> Row:
        path = Path(row[self.input_column])
        if self.image_folder is not None:
            path = Path(self.image_folder) / path
        row[self.output_column] = load_image(path)
        return row


@dataclass
class ImageResizer(PipelineStep):
    input_column: str
    output_column: str
    image_width: int
    image_height: int
    resizing: str = "iso_crop"

    def transform_row(self, row: Row) -> Row:
        row[self.output_column] = resize_image(
            row[self.input_column], self.image_width, self.image_height, self.resizing
        )
        return row


@dataclass
class ImagePixelExtractor(PipelineStep):
    """Converts an image to pixel values (p - offset) * scale."""

    input_column: str
    output_column: str
    use_alpha: bool = False
    interleave: bool = False
    convert: bool = True
    offset: float = 0.0
    scale: float = 1.0

    def transform_row(self, row: Row) -> Row:
        row[self.output_column] = extract_pixels(
            row[self.input_column],
            use_alpha=self.use_alpha,
            interleave=self.interleave,
            convert=self.convert,
            offset=self.offset,
            scale=self.scale,
        )
        return row


@dataclass
class GraphScorer(PipelineStep):
    """
    Runs a frozen graph on each row.

    Input column names double as the graph's input tensor names, and output
    column names as its output tensor names. Each input gets a leading batch
    dimension; each output is stored flattened to 1-D. Tensor names are not
    checked until the graph runs.
    """

    model_file: str
    input_columns: List[str]
    output_columns: List[str]
    backend: Optional[str] = None
    _graph: Optional[graph_runtime.FrozenGraph] = field(
        default=None, init=False, repr=False, compare=False
    )

    def __post_init__(self):
        self.model_file = str(self.model_file)
        self.input_columns = list(self.input_columns)
        self.output_columns = list(self.output_columns)

    @property
    def graph(self) -> graph_runtime.FrozenGraph:
        if self._graph is None:
            self._graph = graph_runtime.load_frozen_graph(self.model_file, self.backend)
            self.backend = self._graph.backend.value
        return self._graph

    def transform_row(self, row: Row) -> Row:
        feeds = {name: np.expand_dims(np.asarray(row[name]), 0) for name in self.input_columns}
        outputs = self.graph.run(feeds, self.output_columns)
        for name, value in zip(self.output_columns, outputs):
            row[name] = np.asarray(value, dtype=np.float32).reshape(-1)
        return row

    def payload_name(self, index: int) -> Optional[str]:
        return f"graphs/{index:02d}_{Path(self.model_file).name}"

    def get_payload(self) -> Optional[bytes]:
        return self.graph.to_bytes()

    def set_payload(self, data: bytes) -> None:
        self._graph = graph_runtime.graph_from_bytes(data, self.backend, source=self.model_file)


@dataclass
class ColumnConcatenator(PipelineStep):
    output_column: str
    input_columns: List[str]

    def transform_row(self, row: Row) -> Row:
        parts = [np.ravel(np.asarray(row[name], dtype=np.float32)) for name in self.input_columns]
        row[self.output_column] = np.concatenate(parts)
        return row


@dataclass
class TextToKeyConverter(PipelineStep):
    """
    Maps label strings to integer keys, numbered in order of first occurrence.

    A label that was not seen during fit (or a missing label) maps to None.
    """

    input_column: str = "Label"
    output_column: Optional[str] = None
    keys: List[str] = field(default_factory=list)
    _lookup: Dict[str, int] = field(default_factory=dict, init=False, repr=False, compare=False)

    def __post_init__(self):
        self.keys = list(self.keys)
        self._index_keys()

    @property
    def target_column(self) -> str:
        return self.output_column or self.input_column

    def fit(self, rows: List[Row]) -> None:
        keys: List[str] = []
        seen = set()
        for row in rows:
            value = row.get(self.input_column)
            if value is not None and value not in seen:
                seen.add(value)
                keys.append(value)
        self.keys = keys
        self._index_keys()
        logger.debug(f"Label keys: {keys}")

    def _index_keys(self) -> None:
        self._lookup = {key: i for i, key in enumerate(self.keys)}

    def transform_row(self, row: Row) -> Row:
        row[self.target_column] = self._lookup.get(row.get(self.input_column))
        return row


@dataclass
class SdcaClassifier(PipelineStep):
    """
    Multinomial linear classifier trained on the Features column.

    Features are scaled by their maximum absolute value, then fit with an
    L2-regularized logistic regression using the SAGA solver. The objective
    matches mean log loss + l2_regularization / 2 * ||w||^2.

    Emits Score, one probability per label key.
    """

    label_column: str = "Label"
    feature_column: str = "Features"
    score_column: str = "Score"
    l2_regularization: float = 1e-4
    max_iterations: int = 1000
    tolerance: float = 1e-4
    seed: Optional[int] = 0
    normalize: bool = True
    num_classes: int = 0
    num_features: int = 0
    _estimator: Any = field(default=None, init=False, repr=False, compare=False)

    is_trainer = True

    def fit(self, rows: List[Row]) -> None:
        labeled = [row for row in rows if row.get(self.label_column) is not None]
        if not labeled:
            raise ValueError("No labeled samples to train on")

        features = np.vstack([np.asarray(row[self.feature_column], dtype=np.float32) for row in labeled])
        labels = np.asarray([row[self.label_column] for row in labeled], dtype=np.int64)

        classifier = LogisticRegression(
            solver="saga",
            C=1.0 / (self.l2_regularization * len(labels)),
            max_iter=self.max_iterations,
            tol=self.tolerance,
            random_state=self.seed,
        )
        steps = [MaxAbsScaler(), classifier] if self.normalize else [classifier]
        estimator = make_pipeline(*steps)

        logger.info(
            f"Training on {features.shape[0]} samples with {features.shape[1]} features"
        )
        estimator.fit(features, labels)

        self._estimator = estimator
        self.num_classes = int(labels.max()) + 1
        self.num_features = int(features.shape[1])

    def transform_row(self, row: Row) -> Row:
        if self._estimator is None:
            raise RuntimeError("Classifier has not been trained")

        features = np.asarray(row[self.feature_column], dtype=np.float32).reshape(1, -1)
        probabilities = self._estimator.predict_proba(features)[0]

        scores = np.zeros(self.num_classes, dtype=np.float32)
        scores[np.asarray(self._estimator.classes_, dtype=np.int64)] = probabilities
        row[self.score_column] = scores
        return row

    def payload_name(self, index: int) -> Optional[str]:
        return "classifier.joblib"

    def get_payload(self) -> Optional[bytes]:
        buffer = io.BytesIO()
        joblib.dump(self._estimator, buffer)
        return buffer.getvalue()

    def set_payload(self, data: bytes) -> None:
        self._estimator = joblib.load(io.BytesIO(data))


STEP_TYPES = {
    cls.__name__: cls
    for cls in (
        ImageLoader,
        ImageResizer,
        ImagePixelExtractor,
        GraphScorer,
        ColumnConcatenator,
        TextToKeyConverter,
        SdcaClassifier,
    )
}


class PredictionModel:
    """A trained pipeline: every step fitted, ending in a classifier."""

    def __init__(self, steps: List[PipelineStep], num_samples: int = 0):
        self.steps = list(steps)
        self.num_samples = num_samples

    @property
    def trainer(self) -> "SdcaClassifier":
        for step in reversed(self.steps):
            if step.is_trainer:
                return step
        raise ValueError("Model has no trainer step")

    def transform(self, row: Row) -> Row:
        for step in self.steps:
            row = step.transform_row(row)
        return row

    def predict(self, sample: ImageData) -> ImagePrediction:
        """Score one sample; scores are ordered like score_label_names()."""
        row = self.transform(sample_to_row(sample))
        return ImagePrediction(scores=row[self.trainer.score_column])

    def score_label_names(self) -> List[str]:
        """Label names in the order of the Score vector."""
        label_column = self.trainer.label_column
        for step in self.steps:
            if isinstance(step, TextToKeyConverter) and step.target_column == label_column:
                return list(step.keys)
        raise ValueError(f"No label key mapping found for column '{label_column}'")

    def write(self, path: Union[str, Path]) -> str:
        """
        Save the model to a zip archive, replacing any existing file.

        The archive holds model.json (step configuration), classifier.joblib
        and the frozen graph bytes, so it can be read back without the
        original model file.
        """
        path = Path(path)
        delete_assets(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        entries = []
        with zipfile.ZipFile(path, "w", compression=zipfile.ZIP_DEFLATED) as archive:
            for index, step in enumerate(self.steps):
                payload_name = step.payload_name(index)
                if payload_name is not None:
                    archive.writestr(payload_name, step.get_payload())
                entries.append(
                    {"type": step.name, "config": step.get_config(), "payload": payload_name}
                )

            manifest = {
                "format_version": FORMAT_VERSION,
                "incepta_version": __version__,
                "steps": entries,
            }
            archive.writestr(MANIFEST_NAME, json.dumps(manifest, indent=2))

        logger.info(f"Saved model to {path}")
        return str(path)

    @classmethod
    def read(cls, path: Union[str, Path]) -> "PredictionModel":
        """
        Load a model written by write().

        Raises:
            FileNotFoundError: If the archive does not exist
            ValueError: If the archive references an unknown step type
        """
        path = Path(path)
        if not path.is_file():
            raise FileNotFoundError(f"Model file not found: {path}")

        steps = []
        with zipfile.ZipFile(path, "r") as archive:
            manifest = json.loads(archive.read(MANIFEST_NAME))
            for entry in manifest["steps"]:
                step_type = STEP_TYPES.get(entry["type"])
                if step_type is None:
                    raise ValueError(f"Unknown pipeline step in {path}: {entry['type']}")
                step = step_type.from_config(entry["config"])
                if entry.get("payload"):
                    step.set_payload(archive.read(entry["payload"]))
                steps.append(step)

        logger.info(f"Loaded model from {path}")
        return cls(steps)


class LearningPipeline:
    """
    Ordered pipeline steps plus the data source they are trained on.

    Example:
        >>> pipeline = LearningPipeline()
        >>> pipeline.add(TextLoader("tags.tsv")).add(ImageLoader("ImagePath", "ImageReal", "images"))
    """

    def __init__(self):
        self.loader: Optional[TextLoader] = None
        self.steps: List[PipelineStep] = []

    def add(self, step: Union[TextLoader, PipelineStep]) -> "LearningPipeline":
        if isinstance(step, TextLoader):
            self.loader = step
        else:
            self.steps.append(step)
        return self

    def __len__(self) -> int:
        return len(self.steps)

    def train(
        self,
        samples: Optional[List[ImageData]] = None,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> PredictionModel:
        """
        Fit every step in order and return the trained model.

        Args:
            samples: Training samples; read from the TextLoader when omitted
            progress_callback: Callback(step_name, rows_done, rows_total)

        Raises:
            ValueError: If there is no data, or the pipeline does not end in a trainer
        """
        if not self.steps or not self.steps[-1].is_trainer:
            raise ValueError("Pipeline must end with a trainer step")

        if samples is not None:
            rows = [sample_to_row(sample) for sample in samples]
        elif self.loader is not None:
            rows = self.loader.load()
        else:
            raise ValueError("Pipeline has no data source; add a TextLoader or pass samples")

        if not rows:
            raise ValueError("No samples to train on")

        total = len(rows)
        for step in self.steps:
            step.fit(rows)
            if step.is_trainer:
                continue
            transformed = []
            for done, row in enumerate(rows, start=1):
                transformed.append(step.transform_row(row))
                if progress_callback:
                    progress_callback(step.name, done, total)
            rows = transformed

        return PredictionModel(self.steps, num_samples=total)
