"""Evaluate a saved image classifier."""

from typing import Optional, Tuple

import click


@click.command()
@click.argument("assets", required=False, type=click.Path(file_okay=False))
@click.option("--model", "model_path", default=None, help="Model archive (default: ASSETS/outputs/imageClassifier.zip)")
@click.option(
    "--extra-image",
    "extra_images",
    multiple=True,
    help="Additional unlabeled image, relative to the images folder (repeatable)",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False),
    default=None,
    help="Write predictions and metrics to a JSON file",
)
def evaluate(
    assets: Optional[str],
    model_path: Optional[str],
    extra_images: Tuple[str, ...],
    output: Optional[str],
) -> None:
    """Predict every sample in ASSETS/inputs/data/tags.tsv with a saved model.

    Prints one line per image followed by the log loss and accuracy over the
    labeled samples.

    Example:
        incepta evaluate ./assets --extra-image teddy5.jpg -o metrics.json
    """
    import json

    from incepta.cli.commands._assets import resolve_assets
    from incepta.cli.progress import console, print_summary, print_warning
    from incepta.cli.service_helpers import report_failure, services
    from incepta.core.config import get_config
    from incepta.core.ml.settings import get_preset

    assets_path = resolve_assets(assets)
    layout = get_preset("train", get_config()).layout.resolve(assets_path)

    console.print(f"Model location: {model_path or layout.model_output}")
    console.print(f"Images folder: {layout.images_folder}")
    console.print(f"Training file: {layout.tags_file}")
    console.print(" ")

    result = services.evaluation.evaluate(
        str(assets_path), model_path=model_path, extra_images=list(extra_images)
    )
    if not result.success:
        report_failure(result.error)

    evaluation = result.data
    for prediction in evaluation.predictions:
        click.echo(prediction.describe())

    for warning in result.warnings:
        print_warning(warning)

    metrics = evaluation.metrics
    if metrics is not None:
        click.echo(f"Log Loss: {metrics.log_loss}")
        stats = {
            "Samples": metrics.num_samples,
            "Log loss reduction": metrics.log_loss_reduction,
            "Accuracy (micro)": metrics.accuracy_micro,
            "Accuracy (macro)": metrics.accuracy_macro,
        }
        for label, loss in metrics.per_class_log_loss.items():
            stats[f"Log loss [{label}]"] = loss
        print_summary("Metrics", stats)

    if output:
        with open(output, "w", encoding="utf-8") as f:
            json.dump(evaluation.to_dict(), f, indent=2)
        click.echo(f"Results saved to: {output}")
