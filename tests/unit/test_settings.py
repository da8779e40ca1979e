"""
Unit tests for pipeline presets.
"""

from pathlib import Path

import pytest

from incepta.core.config import get_default_config
from incepta.core.ml.pipeline import (
    GraphScorer,
    ImagePixelExtractor,
    ImageResizer,
    SdcaClassifier,
    TextToKeyConverter,
)
from incepta.core.ml.settings import PRESETS, build_learning_pipeline, get_preset


class TestGetPreset:
    """Tests for get_preset."""

    def test_known_presets(self) -> None:
        assert set(PRESETS) == {"train", "inception", "cifar"}

    def test_unknown_preset(self) -> None:
        with pytest.raises(ValueError, match="Unknown preset"):
            get_preset("resnet")

    def test_cifar_settings(self) -> None:
        settings = get_preset("cifar").settings
        assert (settings.image_width, settings.image_height) == (32, 32)
        assert (settings.input_tensor, settings.output_tensor) == ("Input", "Output")
        assert settings.mean == 0.0

    def test_config_overrides(self) -> None:
        config = get_default_config()
        config.set("image", "width", 64)
        config.set("training", "max_iterations", 50)
        config.set("paths", "model_output", "custom.zip")

        preset = get_preset("train", config)

        assert preset.settings.image_width == 64
        assert preset.settings.max_iterations == 50
        assert preset.layout.model_output == "outputs/custom.zip"
        assert PRESETS["train"].settings.image_width == 224

    def test_boolean_image_options_from_toml(self, tmp_path) -> None:
        from incepta.core.config import load_config_cascade

        path = tmp_path / "flags.toml"
        path.write_text("[image]\nchannels_last = false\nconvert_to_float = false\nuse_alpha = true\n")

        settings = get_preset("train", load_config_cascade(str(path))).settings

        assert settings.channels_last is False
        assert settings.convert_to_float is False
        assert settings.use_alpha is True

    def test_cifar_ignores_image_config(self) -> None:
        config = get_default_config()
        config.set("image", "width", 64)
        config.set("training", "seed", 3)

        settings = get_preset("cifar", config).settings

        assert settings.image_width == 32
        assert settings.seed == 3


class TestAssetLayout:
    """Tests for AssetLayout.resolve."""

    def test_resolve_is_absolute(self, tmp_path) -> None:
        layout = get_preset("inception").layout.resolve(tmp_path)

        assert Path(layout.tags_file) == tmp_path.resolve() / "model" / "tags.tsv"
        assert Path(layout.model_file).is_absolute()
        assert layout.test_images == [str(tmp_path.resolve() / "images" / "violin.jpg")]
        assert layout.model_output is None


class TestBuildLearningPipeline:
    """Tests for build_learning_pipeline."""

    def test_step_order(self, tmp_path) -> None:
        preset = get_preset("train")
        pipeline = build_learning_pipeline(preset.settings, preset.layout.resolve(tmp_path))

        assert pipeline.loader is not None
        assert [step.name for step in pipeline.steps] == [
            "ImageLoader",
            "ImageResizer",
            "ImagePixelExtractor",
            "GraphScorer",
            "ColumnConcatenator",
            "TextToKeyConverter",
            "SdcaClassifier",
        ]

    def test_step_settings(self, tmp_path) -> None:
        preset = get_preset("train")
        steps = build_learning_pipeline(preset.settings, preset.layout.resolve(tmp_path)).steps

        resizer = next(s for s in steps if isinstance(s, ImageResizer))
        extractor = next(s for s in steps if isinstance(s, ImagePixelExtractor))
        scorer = next(s for s in steps if isinstance(s, GraphScorer))
        converter = next(s for s in steps if isinstance(s, TextToKeyConverter))
        trainer = steps[-1]

        assert (resizer.image_width, resizer.image_height, resizer.resizing) == (224, 224, "iso_crop")
        assert (extractor.offset, extractor.scale, extractor.interleave) == (117.0, 1.0, True)
        assert extractor.output_column == "input"
        assert scorer.input_columns == ["input"]
        assert scorer.output_columns == ["softmax2_pre_activation"]
        assert converter.input_column == "Label"
        assert isinstance(trainer, SdcaClassifier)
        assert trainer.feature_column == "Features"

    def test_without_loader(self, tmp_path) -> None:
        preset = get_preset("cifar")
        pipeline = build_learning_pipeline(preset.settings, preset.layout.resolve(tmp_path), include_loader=False)
        assert pipeline.loader is None
        assert len(pipeline) == 7
