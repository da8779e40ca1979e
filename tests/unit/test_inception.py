"""
Unit tests for the standalone Inception classifier.
"""

import asyncio

import numpy as np
import pytest

from incepta.core.config import get_default_config
from incepta.core.ml import inception
from incepta.core.ml.inception import (
    InceptionClassifier,
    TensorFlowPredictionSettings,
    download_if_model_not_exists,
    read_labels,
)

from tests.mocks.fake_graph import ProbabilityGraph


@pytest.fixture
def models_folder(tmp_path):
    folder = tmp_path / "DNNModels"
    folder.mkdir()
    (folder / "tensorflow_inception_graph.pb").write_bytes(b"graph")
    (folder / "imagenet_comp_graph_label_strings.txt").write_text("cat\ndog\nbird\n")
    return folder


class TestTensorFlowPredictionSettings:
    """Tests for TensorFlowPredictionSettings."""

    def test_defaults(self) -> None:
        settings = TensorFlowPredictionSettings()
        assert settings.input_tensor_name == "input"
        assert settings.output_tensor_name == "output"
        assert settings.threshold == 0.3
        assert (settings.image_width, settings.image_height) == (224, 224)

    def test_from_config(self, tmp_path) -> None:
        config = get_default_config()
        config.set("classify", "threshold", 0.5)
        config.set("image", "mean", 100.0)

        settings = TensorFlowPredictionSettings.from_config(config, tmp_path)

        assert settings.threshold == 0.5
        assert settings.mean == 100.0
        assert settings.model_path == tmp_path / "tensorflow_inception_graph.pb"
        assert settings.labels_path == tmp_path / "imagenet_comp_graph_label_strings.txt"


class TestDownload:
    """Tests for download_if_model_not_exists."""

    def test_skips_when_files_exist(self, models_folder, mocker) -> None:
        client = mocker.Mock()
        settings = TensorFlowPredictionSettings(models_folder=str(models_folder))

        assert download_if_model_not_exists(settings, client=client) is False
        client.download.assert_not_called()

    def test_read_labels(self, models_folder) -> None:
        assert read_labels(models_folder / "imagenet_comp_graph_label_strings.txt") == ["cat", "dog", "bird"]


class TestInceptionClassifier:
    """Tests for InceptionClassifier."""

    def test_missing_model_raises(self, tmp_path, mocker) -> None:
        mocker.patch.object(inception, "download_if_missing", return_value=False)
        classifier = InceptionClassifier(TensorFlowPredictionSettings(models_folder=str(tmp_path)))

        with pytest.raises(ValueError, match="Model file not exists"):
            classifier.load_model_and_labels()

    def test_missing_labels_raises(self, models_folder, mocker) -> None:
        mocker.patch.object(inception, "download_if_missing", return_value=False)
        (models_folder / "imagenet_comp_graph_label_strings.txt").unlink()
        classifier = InceptionClassifier(TensorFlowPredictionSettings(models_folder=str(models_folder)))

        with pytest.raises(ValueError, match="Labels file not exists"):
            classifier.load_model_and_labels()

    def test_model_is_loaded_once(self, models_folder, mocker) -> None:
        load = mocker.patch(
            "incepta.core.ml.graph.load_frozen_graph",
            side_effect=lambda path: ProbabilityGraph(b"graph", source=str(path)),
        )
        classifier = InceptionClassifier(TensorFlowPredictionSettings(models_folder=str(models_folder)))

        graph, labels = classifier.load_model_and_labels()
        classifier.load_model_and_labels()

        assert labels == ["cat", "dog", "bird"]
        assert isinstance(graph, ProbabilityGraph)
        load.assert_called_once()

    def test_eval_keeps_confident_labels(self) -> None:
        graph = ProbabilityGraph(b"graph")
        classifier = InceptionClassifier()

        results = classifier.eval(graph, np.zeros((1, 2, 2, 3)), ["cat", "dog", "bird"])

        assert [(r.label, r.probability) for r in results] == [("dog", pytest.approx(0.85))]
        assert list(graph.feeds) == ["input"]
        assert graph.fetches == ["output"]

    def test_classify_image_labels_async(self, models_folder, mocker) -> None:
        mocker.patch(
            "incepta.core.ml.graph.load_frozen_graph",
            side_effect=lambda path: ProbabilityGraph(b"graph"),
        )
        classifier = InceptionClassifier(TensorFlowPredictionSettings(models_folder=str(models_folder)))
        mocker.patch.object(classifier, "load_image", return_value=np.zeros((1, 224, 224, 3)))

        labels = asyncio.run(classifier.classify_image_labels_async(b"\xff\xd8\xff\xe0"))

        assert labels == ["dog"]


@pytest.mark.slow
class TestPreprocessImage:
    """Tests for the TensorFlow pre-processing graph."""

    @pytest.mark.parametrize("image_format", ["PNG", "JPEG"])
    def test_shape_and_normalization(self, tmp_path, make_image, image_format) -> None:
        pytest.importorskip("tensorflow")
        path = make_image(tmp_path / "gray.img", color=(127, 127, 127), size=(10, 20), image_format=image_format)

        tensor = inception.preprocess_image(path.read_bytes(), width=8, height=6, mean=117.0, scale=2.0)

        assert tensor.shape == (1, 6, 8, 3)
        assert tensor.dtype == np.float32
        assert np.allclose(tensor, 5.0, atol=1.0)
