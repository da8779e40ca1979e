"""Configuration management commands."""

import click

SECTIONS = ["paths", "image", "inception", "training", "classify", "api", "logging"]


@click.group()
def config() -> None:
    """Configuration commands."""
    pass


@config.command("show")
def config_show() -> None:
    """Show current configuration."""
    from incepta.cli.progress import console
    from incepta.cli.service_helpers import handle_result, services

    config_obj = handle_result(services.config.current())

    console.print("\n[bold]Current Configuration[/bold]")
    if config_obj._source and config_obj._source != "defaults":
        console.print(f"[dim]Source: {config_obj._source}[/dim]\n")
    else:
        console.print("[dim]Source: defaults (no config file found)[/dim]\n")

    for section_name in SECTIONS:
        section = getattr(config_obj, section_name, {})
        if section:
            console.print(f"[bold blue]\\[{section_name}][/bold blue]")
            for key, value in section.items():
                console.print(f"  {key} = {value}")
            console.print()


@config.command("init")
@click.option("--output", "-o", default="incepta.toml", help="Output file path")
@click.option("--force", "-f", is_flag=True, help="Overwrite existing file")
def config_init(output: str, force: bool) -> None:
    """Create a default configuration file."""
    from incepta.cli.progress import print_error, print_success
    from incepta.cli.service_helpers import services

    result = services.config.write_defaults(output, force=force)

    if not result.success:
        print_error(result.error)
        raise SystemExit(1)

    print_success(f"Created configuration file: {output}")


@config.command("path")
def config_path() -> None:
    """Show configuration file search paths."""
    from incepta.cli.progress import console
    from incepta.cli.service_helpers import services

    console.print("\n[bold]Configuration File Search Paths[/bold]\n")
    console.print("Later files override earlier ones; --config overrides all:\n")

    for i, (location, exists) in enumerate(services.config.search_paths().data, 1):
        state = "[green]exists[/green]" if exists else "[dim]not found[/dim]"
        console.print(f"  {i}. {location} {state}")

    console.print()
