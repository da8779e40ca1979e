"""
incepta CLI - transfer learning and classification with frozen Inception graphs
"""

from typing import Optional

import click

from incepta import __version__

from .commands import classify, config, evaluate, score, train


@click.group()
@click.version_option(version=__version__, prog_name="incepta")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Configuration file (merged over incepta.toml and user/system configs)",
)
@click.option("-v", "--verbose", count=True, help="Increase log verbosity (-v info, -vv debug)")
def cli(config_path: Optional[str], verbose: int) -> None:
    """incepta - image classification on top of pretrained Inception graphs

    Use 'incepta COMMAND --help' for more information on a command.
    """
    from incepta.cli.service_helpers import services
    from incepta.core.logger import set_level

    result = services.config.load(config_path)
    level = "WARNING"
    if result.success:
        level = result.data.get("logging", "level", level)
    if verbose == 1:
        level = "INFO"
    elif verbose > 1:
        level = "DEBUG"
    set_level(level)


# Register commands
cli.add_command(train)
cli.add_command(evaluate)
cli.add_command(score)
cli.add_command(classify)
cli.add_command(config)


if __name__ == "__main__":
    cli()
