"""Typer application and CLI entry point for modkit.

This module wires together the top-level Typer application and registers
the built-in sub-commands (``schema``, ``config``, ``check``).

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. Commands report :class:`~modkit.exceptions.ModkitError`
themselves and exit with its code; anything else reaching :func:`main` is
reported as an unexpected error with a generic failure exit.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from modkit import __version__
from modkit.commands.check import check_command
from modkit.commands.config import config_app
from modkit.commands.schema import schema_app
from modkit.exit_codes import EXIT_GENERIC_FAILURE

app = typer.Typer(
    name="modkit",
    help="Compose modules and services into one API server.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

app.add_typer(schema_app, name="schema", help="Merge GraphQL type definitions.")
app.add_typer(config_app, name="config", help="Inspect the server configuration.")
app.command("check")(check_command)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"modkit {__version__}")
        raise typer.Exit()


def _configure_logging(verbose: bool, no_color: bool) -> None:
    """Send library log records to stderr through Rich."""
    handler = RichHandler(
        console=Console(stderr=True, no_color=no_color),
        show_path=False,
        show_time=False,
    )
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[handler],
        force=True,
    )


@app.callback()
def main_callback(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug output."),
    output_file: Optional[str] = typer.Option(
        None, "-o", "--output", help="Write data output to a file."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Installs the global :class:`~modkit.output.OutputManager` and configures
    logging from the CLI flags.
    """
    from modkit.output import OutputManager, set_output

    set_output(
        OutputManager(no_color=no_color, quiet=quiet, verbose=verbose, output_file=output_file)
    )
    _configure_logging(verbose, no_color)


def main() -> None:
    """CLI entry point invoked by the ``modkit`` console script."""
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from modkit.exceptions import ModkitError
        from modkit.output import error

        if isinstance(exc, ModkitError):
            error(str(exc))
            sys.exit(exc.exit_code)
        error(f"Unexpected error: {exc}")
        sys.exit(EXIT_GENERIC_FAILURE)
