"""The ``spectest`` command line.

Commands:

* ``make NAME API_PATH...`` writes a pytest module for the selected operations.
* ``list [API_PATH...]`` prints the operations a spec declares.
* ``init`` records the project's spec location in ``./spectest.json``.
* ``config show`` / ``config set`` inspect and edit settings.

Global flags (``--json``, ``--plain``, ``--no-color``, ``-q``, ``-v``) are
handled once in :func:`main_callback`, before any command runs.
"""

from __future__ import annotations

import signal
import sys
import traceback
from datetime import datetime
from pathlib import Path
from typing import Any

import typer

from spectest import __version__
from spectest.commands.config import config_app
from spectest.commands.init import init_command
from spectest.commands.make import make_command
from spectest.commands.operations import list_command
from spectest.exit_codes import EXIT_GENERIC_FAILURE, EXIT_INTERRUPTED
from spectest.output import OutputFormat, OutputManager, set_output


app = typer.Typer(
    name="spectest",
    help="Scaffold pytest API tests from an OpenAPI 3.x definition.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

app.command("make", help="Generate a test class for the selected API operations.")(make_command)
app.command("list", help="List the operations declared by the OpenAPI definition.")(list_command)
app.command("init", help="Write a spectest.json for the current project.")(init_command)
app.add_typer(config_app, name="config", help="Show or change spectest settings.")


def _print_version(value: bool) -> None:
    if value:
        typer.echo(f"spectest {__version__}")
        raise typer.Exit()


def _output_format(json_output: bool, plain_output: bool) -> OutputFormat:
    if json_output:
        return OutputFormat.JSON
    if plain_output:
        return OutputFormat.PLAIN
    return OutputFormat.AUTO


@app.callback()
def main_callback(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_print_version,
        is_eager=True,
        help="Show the spectest version and exit.",
    ),
    json_output: bool = typer.Option(False, "--json", help="Write data to stdout as JSON."),
    plain_output: bool = typer.Option(False, "--plain", help="Write data as plain text."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable colour."),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Only report warnings and errors."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Report debug details."),
) -> None:
    """Configure output for the command that follows."""
    set_output(
        OutputManager(
            format=_output_format(json_output, plain_output),
            no_color=no_color,
            quiet=quiet,
            verbose=verbose,
        )
    )


def _cancel(signum: int, frame: Any) -> None:  # noqa: ANN401
    sys.stderr.write("\nCancelled.\n")
    sys.exit(EXIT_INTERRUPTED)


def _write_crash_log(exc: BaseException) -> Path:
    """Save the traceback of *exc* under ``<data dir>/logs`` and return the file."""
    from spectest.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    log_path = logs_dir / f"crash-{datetime.now():%Y%m%d-%H%M%S}.log"
    log_path.write_text(
        "".join(traceback.format_exception(type(exc), exc, exc.__traceback__)),
        encoding="utf-8",
    )
    return log_path


def main() -> None:
    """Console-script entry point.

    Commands report their own :class:`~spectest.exceptions.SpectestError`
    failures; anything that still escapes is mapped to its exit code here.
    Unexpected exceptions leave a crash log and exit with code 1.
    """
    from spectest.exceptions import SpectestError
    from spectest.output import error

    signal.signal(signal.SIGINT, _cancel)
    try:
        app()
    except KeyboardInterrupt:
        _cancel(signal.SIGINT, None)
    except SpectestError as exc:
        error(str(exc))
        sys.exit(exc.exit_code)
    except Exception as exc:
        error(f"Unexpected error. Debug log: {_write_crash_log(exc)}")
        sys.exit(EXIT_GENERIC_FAILURE)
