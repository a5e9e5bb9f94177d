"""Terminal and file output for apicompare.

Two streams, two jobs (see `clig.dev <https://clig.dev/>`_):

* **stdout** carries the comparison itself -- the report, the change
  tables, ``inspect`` listings -- so it can be piped into ``jq`` or saved.
* **stderr** carries everything said *about* the run: progress notes,
  warnings, errors and, with ``--verbose``, log records.

The format is picked once per process. ``auto`` becomes ``rich`` on an
interactive terminal with colour allowed and ``plain`` (tab-separated)
everywhere else; ``--json`` and ``--plain`` force a format. ``NO_COLOR`` and
``TERM=dumb`` switch colour off.

:class:`OutputManager` holds that state. The CLI builds one in
:func:`~apicompare.app.main_callback` and installs it with
:func:`set_output`; the module-level helpers (:func:`info`,
:func:`render_comparison`, ...) forward to it.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from typing import Any, Iterator, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from rich.text import Text

from apicompare.models import (
    ApiChange,
    ChangeCounts,
    ComparisonResult,
    OutputFormatName as OutputFormat,
)

_SEVERITY_STYLES = {"high": "bold red", "medium": "yellow", "low": "green"}


class OutputManager:
    """Routes data to stdout and diagnostics to stderr in one output format.

    Args:
        format: Requested format; ``AUTO`` is resolved immediately.
        no_color: Force colour off (``NO_COLOR``/``TERM=dumb`` also do).
        quiet: Drop ``info`` and ``success`` messages.
        verbose: Show ``debug`` messages.
        output_file: Write data to this path as JSON instead of stdout.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.AUTO,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
        output_file: Optional[str] = None,
    ) -> None:
        self._no_color = no_color or _should_disable_color()
        self._quiet = quiet
        self._verbose = verbose
        self._output_file = output_file
        self._format = _resolve_format(format, self._no_color)

        rich = self._format == OutputFormat.RICH
        self._stdout = Console(file=sys.stdout, no_color=self._no_color, force_terminal=rich)
        self._stderr = Console(file=sys.stderr, no_color=self._no_color, stderr=True)

    @property
    def format(self) -> OutputFormat:
        return self._format

    @property
    def no_color(self) -> bool:
        return self._no_color

    @property
    def is_quiet(self) -> bool:
        return self._quiet

    @property
    def is_verbose(self) -> bool:
        return self._verbose

    # ------------------------------------------------------------------ #
    # stdout
    # ------------------------------------------------------------------ #

    def format_response(self, data: Any) -> None:
        """Print a structured payload (dict, list or string).

        JSON mode dumps it indented. Plain mode flattens nested mappings to
        ``dotted.key<TAB>value`` lines; rich mode shows the same pairs as a
        two-column table. With an output file the payload is always JSON.
        """
        if self._output_file:
            self._write_file(_to_json(data), mode="w")
        elif self._format == OutputFormat.JSON:
            self.print_data(_to_json(data))
        elif isinstance(data, dict):
            pairs = [[key, _scalar(value)] for key, value in _flatten(data)]
            if self._format == OutputFormat.PLAIN:
                for key, value in pairs:
                    self.print_data(f"{key}\t{value}")
            else:
                self.print_table(["Key", "Value"], pairs)
        elif isinstance(data, list):
            for item in data:
                self.print_data(_scalar(item))
        else:
            self.print_data(str(data))

    def print_data(self, text: str) -> None:
        """Print one block of text to stdout, or append it to the output file."""
        if self._output_file:
            self._write_file(text, mode="a")
        else:
            print(text, file=sys.stdout, flush=True)

    def print_table(
        self,
        headers: list[str],
        rows: list[list[str]],
        title: Optional[str] = None,
    ) -> None:
        """Print rows as a rich table, tab-separated lines, or JSON records.

        *title* is only shown in rich mode; severity cells are coloured there.
        """
        if self._format == OutputFormat.JSON:
            self.print_data(_to_json([dict(zip(headers, row)) for row in rows]))
            return
        if self._format == OutputFormat.PLAIN:
            for line in [headers, *rows]:
                self.print_data("\t".join(line))
            return

        table = Table(*headers, title=title, header_style="bold cyan")
        for row in rows:
            table.add_row(*(_style_cell(cell) for cell in row))
        self._stdout.print(table)

    def render_comparison(
        self,
        result: ComparisonResult,
        report: Optional[dict[str, Any]] = None,
        title: Optional[str] = None,
    ) -> None:
        """Print a comparison result to stdout.

        JSON mode (and ``--output``) emits *report* when given, otherwise
        ``result.to_dict()``. Plain and Rich modes print a summary table,
        then one table each for endpoint changes, model changes, and the
        remaining parameter/response changes. Empty tables are skipped.

        Args:
            result: The comparison to render.
            report: Optional envelope from
                :func:`~apicompare.compare.build_comparison_report`.
            title: Optional heading for the summary table.
        """
        if self._format == OutputFormat.JSON or self._output_file:
            self.format_response(report if report is not None else result.to_dict())
            return

        summary = result.summary
        self.print_table(
            ["Scope", "Total", "New", "Changed", "Deprecated"],
            [
                _counts_row("all", summary),
                _counts_row("operations", summary.operations),
                _counts_row("models", summary.models),
            ],
            title=title or "Summary",
        )

        if result.operation_changes:
            self.print_table(
                ["Severity", "Type", "Method", "Path", "Operation"],
                [
                    [c.severity.value, c.type.value, c.method or "-", c.path or "-", c.operation_id]
                    for c in result.operation_changes
                ],
                title=f"Endpoint changes ({len(result.operation_changes)})",
            )

        if result.model_changes:
            self.print_table(
                ["Severity", "Type", "Subject", "Description"],
                [
                    [c.severity.value, c.type.value, c.operation_id, _describe(c)]
                    for c in result.model_changes
                ],
                title=f"Model changes ({len(result.model_changes)})",
            )

        others = _unpartitioned(result)
        if others:
            self.print_table(
                ["Severity", "Type", "Operation", "Description"],
                [
                    [c.severity.value, c.type.value, c.operation_id, c.description]
                    for c in others
                ],
                title=f"Parameter and response changes ({len(others)})",
            )

    # ------------------------------------------------------------------ #
    # stderr
    # ------------------------------------------------------------------ #

    def info(self, message: str) -> None:
        """Status note; hidden by ``--quiet``."""
        if not self._quiet:
            self._say(message)

    def success(self, message: str) -> None:
        """Completion note in green; hidden by ``--quiet``."""
        if not self._quiet:
            self._say(message, style="green")

    def warning(self, message: str) -> None:
        """Always shown, prefixed with ``Warning:``."""
        self._say(message, label="Warning:", label_style="yellow")

    def error(self, message: str) -> None:
        """Always shown, prefixed with ``Error:``."""
        self._say(message, label="Error:", label_style="bold red")

    def debug(self, message: str) -> None:
        """Only shown with ``--verbose``."""
        if self._verbose:
            self._say(message, label="[debug]", style="dim")

    def _say(
        self,
        message: str,
        label: str = "",
        label_style: str = "",
        style: str = "",
    ) -> None:
        if self._no_color:
            print(f"{label} {message}" if label else message, file=sys.stderr, flush=True)
            return
        line = Text(message, style=style)
        if label:
            line = Text.assemble((label, label_style or style), " ", line)
        self._stderr.print(line)

    def _write_file(self, text: str, mode: str) -> None:
        assert self._output_file is not None
        with open(self._output_file, mode, encoding="utf-8") as f:
            f.write(text if text.endswith("\n") else text + "\n")


# ------------------------------------------------------------------ #
# Helpers
# ------------------------------------------------------------------ #


def _is_tty() -> bool:
    isatty = getattr(sys.stdout, "isatty", None)
    return bool(isatty and isatty())


def _should_disable_color() -> bool:
    """True when ``NO_COLOR`` is set to anything or ``TERM`` is ``dumb``."""
    return "NO_COLOR" in os.environ or os.environ.get("TERM") == "dumb"


def _resolve_format(requested: OutputFormat, no_color: bool) -> OutputFormat:
    if requested != OutputFormat.AUTO:
        return requested
    return OutputFormat.RICH if _is_tty() and not no_color else OutputFormat.PLAIN


def _to_json(data: Any) -> str:
    if isinstance(data, str):
        return data
    return json.dumps(data, indent=2, ensure_ascii=False, default=str)


def _flatten(data: dict[str, Any], prefix: str = "") -> Iterator[tuple[str, Any]]:
    """Yield ``(dotted_key, leaf)`` pairs from nested mappings."""
    for key, value in data.items():
        dotted = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(value, dict) and value:
            yield from _flatten(value, dotted)
        else:
            yield dotted, value


def _scalar(value: Any) -> str:
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False, default=str)
    if isinstance(value, bool):
        return str(value).lower()
    return "" if value is None else str(value)


def _style_cell(cell: str) -> str:
    style = _SEVERITY_STYLES.get(cell)
    return f"[{style}]{cell}[/{style}]" if style else cell


def _counts_row(scope: str, counts: ChangeCounts) -> list[str]:
    return [
        scope,
        str(counts.total),
        str(counts.new),
        str(counts.changed),
        str(counts.deprecated),
    ]


def _describe(change: ApiChange) -> str:
    """Return the change description, followed by the model breakdown if any."""
    if change.details is not None and change.details.changes:
        return f"{change.description}: {'; '.join(change.details.changes)}"
    return change.description


def _unpartitioned(result: ComparisonResult) -> list[ApiChange]:
    """Changes that belong to neither the endpoint nor the model partition."""
    partitioned = {id(c) for c in result.operation_changes}
    partitioned.update(id(c) for c in result.model_changes)
    return [c for c in result.changes if id(c) not in partitioned]


# ------------------------------------------------------------------ #
# Logging
# ------------------------------------------------------------------ #


def configure_logging(verbose: bool = False, no_color: bool = False) -> None:
    """Route ``apicompare`` log records to stderr.

    With *verbose*, a :class:`~rich.logging.RichHandler` at ``DEBUG`` level
    is attached to the ``apicompare`` logger. Otherwise the logger gets a
    :class:`logging.NullHandler` so library warnings do not duplicate the
    CLI's own error messages. Calling this again replaces the previous
    handler.
    """
    logger = logging.getLogger("apicompare")
    for existing in list(logger.handlers):
        if isinstance(existing, (RichHandler, logging.NullHandler)):
            logger.removeHandler(existing)

    if verbose:
        handler: logging.Handler = RichHandler(
            console=Console(file=sys.stderr, stderr=True, no_color=no_color),
            show_path=False,
            show_time=False,
        )
        logger.setLevel(logging.DEBUG)
    else:
        handler = logging.NullHandler()
        logger.setLevel(logging.WARNING)
    logger.addHandler(handler)


# ------------------------------------------------------------------ #
# Process-wide instance
# ------------------------------------------------------------------ #

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the installed manager, creating an ``AUTO`` one on first use."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    global _output
    _output = output


def reset_output() -> None:
    """Forget the installed manager (tests call this between runs)."""
    global _output
    _output = None


def format_response(data: Any) -> None:
    get_output().format_response(data)


def print_table(
    headers: list[str],
    rows: list[list[str]],
    title: Optional[str] = None,
) -> None:
    get_output().print_table(headers, rows, title)


def render_comparison(
    result: ComparisonResult,
    report: Optional[dict[str, Any]] = None,
    title: Optional[str] = None,
) -> None:
    get_output().render_comparison(result, report, title)


def info(message: str) -> None:
    get_output().info(message)


def error(message: str) -> None:
    get_output().error(message)


def success(message: str) -> None:
    get_output().success(message)


def warning(message: str) -> None:
    get_output().warning(message)


def debug(message: str) -> None:
    get_output().debug(message)
