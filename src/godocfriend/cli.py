import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from godocfriend import __version__
from godocfriend.config import load_scan_options
from godocfriend.errors import GodocError
from godocfriend.export import to_json
from godocfriend.models import Module
from godocfriend.module import scan_directory

app = typer.Typer(
    help="godocfriend - documentation models for Go packages",
    no_args_is_help=True,
)

console = Console()


def _scan(directory: Path, version_const: Optional[str], module_version: Optional[str]) -> Module:
    """Load options for a directory, apply command-line overrides and scan it."""
    options = load_scan_options(directory)
    if version_const:
        options.version_const_name = version_const
    if module_version:
        options.version = module_version

    try:
        return scan_directory(options)
    except GodocError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)
    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=2)


@app.command()
def scan(
    directory: Path = typer.Argument(Path("."), help="Directory holding the root package"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write JSON here instead of stdout"),
    version_const: Optional[str] = typer.Option(None, "--version-const", help="Constant holding the module version"),
    module_version: Optional[str] = typer.Option(None, "--module-version", help="Module version to report"),
):
    """Scan a Go source tree and print its documentation model as JSON.

    Args:
        directory: Directory holding the root package
    """
    module = _scan(directory, version_const, module_version)
    document = to_json(module)

    if output is None:
        typer.echo(document)
        return

    try:
        output.write_text(document + "\n", encoding="utf-8")
    except OSError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)


@app.command()
def stats(
    directory: Path = typer.Argument(Path("."), help="Directory holding the root package"),
):
    """Print documentation coverage for every package in a Go source tree."""
    module = _scan(directory, None, None)

    for summary in module.package_list:
        typer.echo(
            f"{summary.import_path}\t"
            f"coverage={summary.statistics.mean:.2f}\t"
            f"words={summary.comment_word_count}"
        )


def _version_callback(value: bool):
    """Show version and exit."""
    if value:
        console.print(f"godocfriend version {__version__}")
        raise typer.Exit()


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    log_level: str = typer.Option(
        "warning",
        "--log-level",
        "-L",
        envvar="LOGLEVEL",
        help="Level of log output verbosity",
    )):
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
    )
