"""QWT CLI Main Entry Point

Renders a Jinja2 template that can run shell commands, ask the operator for
values and decode YAML while it renders.

Usage:
    qwt template.j2                 # Render to stdout
    qwt template.j2 out.txt         # Render to out.txt (created or truncated)
    qwt -c qwt.yaml template.j2     # Use render settings from qwt.yaml
    qwt -v template.j2              # Log progress to stderr
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

import typer
from jinja2 import TemplateSyntaxError
from rich.console import Console
from rich.logging import RichHandler

from qwt.config import load_config
from qwt.environment import render_file
from qwt.interactive import Interaction

from ._version import __version__

logger = logging.getLogger(__name__)

console = Console(stderr=True)


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the qwt CLI.

    Log levels:
    - Normal: Only warnings/errors shown
    - Verbose (-v): INFO level
    - Debug (QWT_DEBUG=1): DEBUG level, including every bash script run
    """
    if os.environ.get("QWT_DEBUG"):
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    handler = RichHandler(
        console=console,
        show_time=verbose,
        show_path=bool(os.environ.get("QWT_DEBUG")),
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))

    qwt_logger = logging.getLogger("qwt")
    qwt_logger.setLevel(level)
    qwt_logger.handlers = [handler]
    qwt_logger.propagate = False


def describe_error(exc: Exception) -> str:
    """Format an error for the terminal, with source location when known."""
    if isinstance(exc, TemplateSyntaxError):
        where = exc.filename or exc.name or "<template>"
        return f"{where}:{exc.lineno}: {exc.message}"
    return str(exc)


def version_callback(value: bool) -> None:
    if value:
        typer.echo(f"qwt {__version__}")
        raise typer.Exit()


typer_app = typer.Typer(add_completion=False)


@typer_app.command()
def cli(
    source: Path = typer.Argument(..., help="Template to render."),
    destination: Optional[Path] = typer.Argument(
        None, help="Output file. Defaults to stdout."
    ),
    config_path: Optional[Path] = typer.Option(
        None, "-c", "--config", help="YAML file with render settings."
    ),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Verbose logging."),
    version: bool = typer.Option(
        False,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """Render a template with bash, prompt, choose and yaml extensions.

    Examples:
        qwt README.md.j2              Render to stdout
        qwt README.md.j2 README.md    Render to README.md
    """
    setup_logging(verbose)

    try:
        config = load_config(config_path)
        output = render_file(source, config=config, interaction=Interaction(console=console))
    except Exception as exc:
        logger.debug("Render failed", exc_info=True)
        typer.secho(f"Error: {describe_error(exc)}", err=True, fg=typer.colors.RED)
        raise typer.Exit(code=1)

    if destination is None:
        typer.echo(output, nl=False)
        return

    try:
        with open(destination, "w", encoding="utf-8") as f:
            f.write(output)
    except OSError as exc:
        typer.secho(f"Error: {exc}", err=True, fg=typer.colors.RED)
        raise typer.Exit(code=1)

    logger.info("Wrote %s", destination)


def app() -> None:
    """Entry point for the CLI."""
    typer_app()


if __name__ == "__main__":
    app()
