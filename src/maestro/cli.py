"""
maestro CLI - Entry point.

    maestro migrate --bnaPath network.bna --outputDirectory ./output/
"""

from __future__ import annotations

import platform
from pathlib import Path

import typer
from rich.console import Console

from . import commands
from ._version import get_version
from .config import load_config
from .core.errors import MaestroError
from .logging_setup import configure_logging

app = typer.Typer(
    help="Migrate business network archives into standalone smart-contract projects",
    no_args_is_help=True,
)

err_console = Console(stderr=True)


def version_callback(value: bool) -> None:
    """Display version and environment information."""
    if value:
        typer.echo(f"maestro {get_version()}")
        typer.echo(f"Python {platform.python_version()} ({platform.python_implementation()})")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Echo progress for each network, model and script",
    ),
    version: bool | None = typer.Option(
        None,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show version and environment information",
    ),
) -> None:
    """maestro CLI main callback for global options."""
    configure_logging(verbose)
    ctx.obj = {"verbose": verbose}


@app.command(name="migrate")
def migrate_command(
    ctx: typer.Context,
    bna_path: str = typer.Option(
        ".",
        "--bnaPath",
        help="Path to a business network archive",
    ),
    output_directory: str = typer.Option(
        "./output/",
        "--outputDirectory",
        help="Output directory path",
    ),
    config_path: Path | None = typer.Option(  # noqa: B008
        None,
        "--config",
        "-c",
        help="maestro.toml with a [migrate] section (default: ./maestro.toml if present)",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Echo progress for each network, model and script",
    ),
) -> None:
    """
    Migrate a business network archive into a contract project.

    Examples:
        maestro migrate --bnaPath vehicle-network.bna
        maestro migrate --bnaPath vehicle-network.bna --outputDirectory ./vehicle-contract -v
    """
    if verbose:
        configure_logging(verbose)
    verbose = verbose or bool(ctx.obj and ctx.obj.get("verbose"))
    if verbose:
        typer.echo(f"migrate a business network archive {bna_path} to directory {output_directory}")

    try:
        config = load_config(config_path)
        result = commands.migrate(bna_path, output_directory, config)
    except MaestroError as e:
        err_console.print(f"{type(e).__name__}: {e}", style="red", markup=False, highlight=False)
        raise typer.Exit(code=1)

    typer.echo(result)


app.command(name="generate", hidden=True)(migrate_command)


def main(argv: list[str] | None = None) -> None:
    app(args=argv, standalone_mode=True)


if __name__ == "__main__":
    main()
