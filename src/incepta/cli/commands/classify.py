"""Classify images with the pretrained Inception graph."""

from pathlib import Path
from typing import Optional, Tuple

import click

SEPARATOR = "====================================================================="


@click.command()
@click.argument("assets", required=False, type=click.Path(file_okay=False))
@click.option(
    "--image",
    "images",
    multiple=True,
    help="Image to classify, relative to ASSETS/ImagesForInference (repeatable)",
)
def classify(assets: Optional[str], images: Tuple[str, ...]) -> None:
    """Tag images using the Inception graph in ASSETS/DNNModels.

    The graph and label file are downloaded on first use. Only JPEG and PNG
    images are accepted; any other file stops the command with exit status 1.

    Example:
        incepta classify ./assets --image mug-white.jpg
    """
    from incepta.cli.commands._assets import resolve_assets
    from incepta.cli.progress import status
    from incepta.cli.service_helpers import exit_with_error, services

    assets_path = str(resolve_assets(assets))
    classification = services.classification

    targets = classification.resolve_images(assets_path, list(images) or None).data

    for target in targets:
        with status(f"Classifying {Path(target).name}..."):
            result = classification.classify_image(target, assets_path)
        if not result.success:
            if result.metadata.get("unsupported_media"):
                exit_with_error(result.error, code=1)
            click.echo(f"Caught Exception: {result.error}")
            continue

        click.echo(SEPARATOR)
        click.echo(" ")
        click.echo(
            f"Image file {Path(target).name} is classified by TensorFlow model as the following tags: "
        )
        for confidence in result.data:
            click.echo(f"Tag: {confidence.label}")
        click.echo(" ")
        click.echo(SEPARATOR)

    click.echo(" ")
    click.echo("======================= END OF PROCESS ========================")
