"""Typer application and console-script entry point.

The root app carries the flags shared by every sub-command (output format,
colour, verbosity, ``--output``) and mounts ``compare``, ``inspect`` and
``config``. :func:`main` is what the ``apicompare`` script runs: library
errors end the process with their own exit code, anything unexpected is
written to a crash log in the data directory.
"""

from __future__ import annotations

import signal
import sys
import traceback
from datetime import datetime
from pathlib import Path
from typing import Optional

import typer

from apicompare import __version__
from apicompare.commands.compare import compare_command
from apicompare.commands.config import config_app
from apicompare.commands.inspect import inspect_app
from apicompare.exceptions import ApiCompareError, ConfigError
from apicompare.exit_codes import EXIT_GENERIC_FAILURE
from apicompare.models import OutputFormatName

EXIT_INTERRUPTED = 130

app = typer.Typer(
    name="apicompare",
    help="Detect changes between two versions of an OpenAPI/Swagger spec.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

app.command("compare")(compare_command)
app.add_typer(inspect_app, name="inspect", help="Inspect the paths and models of one spec.")
app.add_typer(config_app, name="config", help="Configuration management.")


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"apicompare {__version__}")
        raise typer.Exit()


def _requested_format(json_output: bool, plain_output: bool) -> Optional[str]:
    if json_output:
        return OutputFormatName.JSON.value
    if plain_output:
        return OutputFormatName.PLAIN.value
    return None


@app.callback()
def main_callback(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Print the version and exit.",
    ),
    json_output: bool = typer.Option(
        False, "--json", help="Emit JSON on stdout."
    ),
    plain_output: bool = typer.Option(
        False, "--plain", help="Emit tab-separated text on stdout."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Never use colour."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Only print data, warnings and errors."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Print debug messages and log records to stderr."
    ),
    output_file: Optional[str] = typer.Option(
        None, "-o", "--output", help="Write the JSON report to this file."
    ),
) -> None:
    """Set up output before any sub-command runs.

    ``--json``/``--plain`` win over the configured ``output.format``. A
    broken config file is reported as a warning here rather than an error
    so that ``config reset`` can still repair it.
    """
    from apicompare.config import resolve_config
    from apicompare.output import OutputManager, configure_logging, set_output, warning

    cli_format = _requested_format(json_output, plain_output)
    config_problem: Optional[str] = None
    try:
        fmt = resolve_config(cli_format=cli_format).output.format
    except ConfigError as exc:
        fmt = OutputFormatName(cli_format or OutputFormatName.AUTO.value)
        config_problem = str(exc)

    output = OutputManager(
        format=fmt,
        no_color=no_color,
        quiet=quiet,
        verbose=verbose,
        output_file=output_file,
    )
    set_output(output)
    configure_logging(verbose=verbose, no_color=output.no_color)

    if config_problem:
        warning(config_problem)


def _install_sigint_handler() -> None:
    """Turn SIGINT back into ``KeyboardInterrupt`` for :func:`main` to catch."""
    signal.signal(signal.SIGINT, signal.default_int_handler)


def _write_crash_log(exc: BaseException) -> Path:
    """Save the traceback of *exc* under ``<data dir>/logs`` and return its path."""
    from apicompare.config import get_data_dir

    log_dir = get_data_dir() / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    log_path = log_dir / f"crash-{datetime.now():%Y%m%d-%H%M%S}.log"
    log_path.write_text("".join(traceback.format_exception(exc)), encoding="utf-8")
    return log_path


def main() -> None:
    """Run the CLI and translate whatever escapes it into an exit code.

    Raises:
        SystemExit: Always.
    """
    from apicompare.output import error

    _install_sigint_handler()
    try:
        app()
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(EXIT_INTERRUPTED)
    except ApiCompareError as exc:
        error(str(exc))
        sys.exit(exc.exit_code)
    except Exception as exc:
        error(f"Unexpected error. Debug log: {_write_crash_log(exc)}")
        sys.exit(EXIT_GENERIC_FAILURE)
