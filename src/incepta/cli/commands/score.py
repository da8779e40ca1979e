"""Train in memory and score a test image."""

from typing import Optional, Tuple

import click


@click.command()
@click.argument("assets", required=False, type=click.Path(file_okay=False))
@click.option(
    "--preset",
    type=click.Choice(["inception", "cifar"]),
    default="inception",
    show_default=True,
    help="Asset layout and frozen graph to use",
)
@click.option(
    "--image",
    "images",
    multiple=True,
    help="Image to score, relative to the preset's images folder (repeatable)",
)
@click.option("--quiet", "-q", is_flag=True, help="Hide the progress display")
def score(assets: Optional[str], preset: str, images: Tuple[str, ...], quiet: bool) -> None:
    """Train on the preset's sample file and predict its test image.

    \b
    Presets:
      inception  ASSETS/model/tags.tsv, ASSETS/images/, test image violin.jpg
      cifar      ASSETS/data/tags/images.tsv, ASSETS/data/images/, test image banana.jpg

    Example:
        incepta score ./assets --preset cifar
    """
    from incepta.cli.commands._assets import resolve_assets
    from incepta.cli.progress import PipelineProgress, console
    from incepta.cli.service_helpers import report_failure, services

    assets_path = resolve_assets(assets)

    scoring = services.scoring
    with PipelineProgress(transient=True, disable=quiet) as progress:
        scoring.set_progress_callback(progress.update)
        result = scoring.score(str(assets_path), preset=preset, images=list(images) or None)

    if not result.success:
        report_failure(result.error)

    for prediction in result.data:
        click.echo(prediction.describe())

    console.print("End of process")
