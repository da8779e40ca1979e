"""
Tests for TrainingService.
"""

import zipfile
from pathlib import Path

import pytest

from incepta.core.config import get_default_config
from incepta.repository import LocalFileRepository
from incepta.services.base import StepProgress
from incepta.services.training import TrainingService


@pytest.fixture
def small_config():
    config = get_default_config()
    config.set("image", "width", 16)
    config.set("image", "height", 16)
    return config


@pytest.fixture
def service() -> TrainingService:
    return TrainingService(file_repository=LocalFileRepository())


class TestTrainingService:
    """Tests for TrainingService.train."""

    def test_missing_sample_file(self, mock_repository) -> None:
        service = TrainingService(file_repository=mock_repository)

        result = service.train("/nonexistent")

        assert not result.success
        assert result.error.startswith("Sample file not found:")

    def test_missing_model_file(self, mock_repository) -> None:
        from incepta.core.ml.settings import get_preset

        layout = get_preset("train").layout.resolve("/assets")
        mock_repository.files[layout.tags_file] = b"a.png\tcat\n"
        service = TrainingService(file_repository=mock_repository)

        result = service.train("/assets")

        assert not result.success
        assert result.error.startswith("Model file not found:")

    def test_unknown_preset(self, service) -> None:
        result = service.train("/assets", preset="resnet")
        assert not result.success
        assert "Unknown preset" in result.error

    def test_trains_and_saves(self, service, training_assets, fake_graph_loader, small_config) -> None:
        result = service.train(str(training_assets), config=small_config)

        assert result.success, result.error
        assert result.data.classes == ["red", "blue"]
        assert result.data.num_samples == 6
        assert result.data.feature_size == 3
        assert Path(result.data.model_path) == training_assets.resolve() / "outputs" / "imageClassifier.zip"
        assert zipfile.is_zipfile(result.data.model_path)
        assert result.metadata["model"].score_label_names() == ["red", "blue"]

    def test_existing_model_deleted_before_training(
        self, service, training_assets, fake_graph_loader, small_config
    ) -> None:
        output = training_assets / "outputs" / "imageClassifier.zip"
        output.parent.mkdir()
        output.write_text("stale")
        (training_assets / "inputs" / "data" / "red0.png").unlink()

        result = service.train(str(training_assets), config=small_config)

        assert not result.success
        assert not output.exists()

    def test_progress_reported(self, service, training_assets, fake_graph_loader, small_config) -> None:
        updates = []
        service.set_progress_callback(updates.append)

        service.train(str(training_assets), config=small_config)

        assert all(isinstance(u, StepProgress) for u in updates)
        assert StepProgress(step="GraphScorer", total=6, completed=6) in updates
