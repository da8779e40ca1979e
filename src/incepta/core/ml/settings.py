"""
Pipeline Presets
================

Settings and asset layouts for the transfer-learning pipelines, and the
function that assembles a LearningPipeline from them.

Presets:
    train       inputs/data/tags.tsv + Inception graph, model saved to outputs/
    inception   model/tags.tsv + Inception graph, test image images/violin.jpg
    cifar       data/tags/images.tsv + 32x32 CIFAR graph, test image data/images/banana.jpg
"""

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Dict, List, Optional, Union

from incepta.core.config import Config
from incepta.core.ml.pipeline import (
    ColumnConcatenator,
    GraphScorer,
    ImageLoader,
    ImagePixelExtractor,
    ImageResizer,
    LearningPipeline,
    SdcaClassifier,
    TextLoader,
    TextToKeyConverter,
)
from incepta.core.ml_config import CifarSettings, ImageNetSettings, InceptionSettings


@dataclass
class PipelineSettings:
    """Image pre-processing, graph tensor names and trainer hyperparameters."""

    image_width: int = ImageNetSettings.IMAGE_WIDTH
    image_height: int = ImageNetSettings.IMAGE_HEIGHT
    mean: float = ImageNetSettings.MEAN
    scale: float = ImageNetSettings.SCALE
    channels_last: bool = ImageNetSettings.CHANNELS_LAST
    use_alpha: bool = False
    convert_to_float: bool = True
    resizing: str = "iso_crop"
    input_tensor: str = InceptionSettings.INPUT_TENSOR_NAME
    output_tensor: str = InceptionSettings.OUTPUT_TENSOR_NAME
    l2_regularization: float = 1e-4
    max_iterations: int = 1000
    tolerance: float = 1e-4
    seed: Optional[int] = 0

    def with_training(self, config: Config) -> "PipelineSettings":
        """Copy with [training] values from config."""
        return replace(
            self,
            l2_regularization=float(config.get("training", "l2_regularization", self.l2_regularization)),
            max_iterations=int(config.get("training", "max_iterations", self.max_iterations)),
            tolerance=float(config.get("training", "tolerance", self.tolerance)),
            seed=config.get("training", "seed", self.seed),
        )

    def with_image(self, config: Config) -> "PipelineSettings":
        """Copy with [image] and [inception] values from config."""
        return replace(
            self,
            image_width=int(config.get("image", "width", self.image_width)),
            image_height=int(config.get("image", "height", self.image_height)),
            mean=float(config.get("image", "mean", self.mean)),
            scale=float(config.get("image", "scale", self.scale)),
            channels_last=config.get("image", "channels_last", self.channels_last),
            use_alpha=config.get("image", "use_alpha", self.use_alpha),
            convert_to_float=config.get("image", "convert_to_float", self.convert_to_float),
            resizing=config.get("image", "resizing", self.resizing),
            input_tensor=config.get("inception", "input_tensor", self.input_tensor),
            output_tensor=config.get("inception", "output_tensor", self.output_tensor),
        )


@dataclass
class AssetLayout:
    """File locations relative to an assets root."""

    tags_file: str
    images_folder: str
    model_file: str
    model_output: Optional[str] = None
    test_images: List[str] = field(default_factory=list)

    def resolve(self, root: Union[str, Path]) -> "AssetLayout":
        """Copy with every path joined onto the absolute form of root."""
        root = Path(root).expanduser().resolve()
        return AssetLayout(
            tags_file=str(root / self.tags_file),
            images_folder=str(root / self.images_folder),
            model_file=str(root / self.model_file),
            model_output=str(root / self.model_output) if self.model_output else None,
            test_images=[str(root / image) for image in self.test_images],
        )


@dataclass
class Preset:
    name: str
    settings: PipelineSettings
    layout: AssetLayout
    uses_image_config: bool = True


PRESETS: Dict[str, Preset] = {
    "train": Preset(
        name="train",
        settings=PipelineSettings(),
        layout=AssetLayout(
            tags_file="inputs/data/tags.tsv",
            images_folder="inputs/data",
            model_file=f"inputs/inception/{InceptionSettings.MODEL_FILE}",
            model_output="outputs/imageClassifier.zip",
        ),
    ),
    "inception": Preset(
        name="inception",
        settings=PipelineSettings(),
        layout=AssetLayout(
            tags_file="model/tags.tsv",
            images_folder="images",
            model_file=f"model/{InceptionSettings.MODEL_FILE}",
            test_images=["images/violin.jpg"],
        ),
    ),
    "cifar": Preset(
        name="cifar",
        settings=PipelineSettings(
            image_width=CifarSettings.IMAGE_WIDTH,
            image_height=CifarSettings.IMAGE_HEIGHT,
            mean=0.0,
            scale=1.0,
            channels_last=True,
            input_tensor=CifarSettings.INPUT_TENSOR_NAME,
            output_tensor=CifarSettings.OUTPUT_TENSOR_NAME,
        ),
        layout=AssetLayout(
            tags_file="data/tags/images.tsv",
            images_folder="data/images",
            model_file=CifarSettings.MODEL_FILE,
            test_images=["data/images/banana.jpg"],
        ),
        uses_image_config=False,
    ),
}


def get_preset(name: str, config: Optional[Config] = None) -> Preset:
    """
    Look up a preset, applying config overrides.

    The [training] section applies to every preset; [image] and [inception]
    apply only to presets built on the Inception graph.

    Raises:
        ValueError: If the preset name is unknown
    """
    if name not in PRESETS:
        raise ValueError(f"Unknown preset '{name}'. Choose from: {', '.join(PRESETS)}")

    preset = PRESETS[name]
    settings = preset.settings
    layout = preset.layout
    if config is not None:
        settings = settings.with_training(config)
        if preset.uses_image_config:
            settings = settings.with_image(config)
        output = config.get("paths", "model_output")
        if layout.model_output and output:
            layout = replace(layout, model_output=str(Path(layout.model_output).parent / output))
    return replace(preset, settings=settings, layout=layout)


def build_learning_pipeline(
    settings: PipelineSettings,
    layout: AssetLayout,
    include_loader: bool = True,
) -> LearningPipeline:
    """
    Assemble the transfer-learning pipeline.

    Args:
        settings: Pre-processing and trainer settings
        layout: Resolved (absolute) asset paths
        include_loader: Add a TextLoader reading layout.tags_file

    Returns:
        An untrained LearningPipeline
    """
    pipeline = LearningPipeline()
    if include_loader:
        pipeline.add(TextLoader(layout.tags_file, has_header=False, separator="\t"))

    pipeline.add(ImageLoader("ImagePath", "ImageReal", layout.images_folder))
    pipeline.add(
        ImageResizer(
            "ImageReal",
            "ImageReal",
            image_width=settings.image_width,
            image_height=settings.image_height,
            resizing=settings.resizing,
        )
    )
    pipeline.add(
        ImagePixelExtractor(
            "ImageReal",
            settings.input_tensor,
            use_alpha=settings.use_alpha,
            interleave=settings.channels_last,
            convert=settings.convert_to_float,
            offset=settings.mean,
            scale=settings.scale,
        )
    )
    pipeline.add(
        GraphScorer(
            layout.model_file,
            input_columns=[settings.input_tensor],
            output_columns=[settings.output_tensor],
        )
    )
    pipeline.add(ColumnConcatenator("Features", [settings.output_tensor]))
    pipeline.add(TextToKeyConverter("Label"))
    pipeline.add(
        SdcaClassifier(
            label_column="Label",
            feature_column="Features",
            l2_regularization=settings.l2_regularization,
            max_iterations=settings.max_iterations,
            tolerance=settings.tolerance,
            seed=settings.seed,
        )
    )
    return pipeline
