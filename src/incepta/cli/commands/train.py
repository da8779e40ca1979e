"""Train a transfer-learning image classifier."""

from typing import Optional

import click


@click.command()
@click.argument("assets", required=False, type=click.Path(file_okay=False))
@click.option("--output", "-o", default=None, help="Model archive path (default: ASSETS/outputs/imageClassifier.zip)")
@click.option("--quiet", "-q", is_flag=True, help="Hide the progress display")
def train(assets: Optional[str], output: Optional[str], quiet: bool) -> None:
    """Train a classifier on ASSETS/inputs/data/tags.tsv and save it.

    Each image is resized, normalized and run through the Inception graph in
    ASSETS/inputs/inception; a linear classifier is then trained on the
    resulting features.

    Example:
        incepta train ./assets
    """
    from incepta.cli.commands._assets import resolve_assets
    from incepta.cli.progress import PipelineProgress, console, print_success
    from incepta.cli.service_helpers import report_failure, services
    from incepta.core.config import get_config
    from incepta.core.ml.settings import get_preset

    assets_path = resolve_assets(assets)
    preset = get_preset("train", get_config())
    layout = preset.layout.resolve(assets_path)
    settings = preset.settings

    console.print(f"Images folder: {layout.images_folder}")
    console.print(f"Inception model location: {layout.model_file}")
    console.print(f"Training file: {layout.tags_file}")
    console.print(
        f"Default parameters: image size=({settings.image_width},{settings.image_height}), "
        f"image mean: {settings.mean}, image scale: {settings.scale}"
    )

    training = services.training
    with PipelineProgress(transient=True, disable=quiet) as progress:
        training.set_progress_callback(progress.update)
        result = training.train(str(assets_path), output_path=output)

    if not result.success:
        report_failure(result.error)

    summary = result.data
    console.print(f"Classes: {', '.join(summary.classes)}")
    print_success(f"Model saved: {summary.model_path}")
