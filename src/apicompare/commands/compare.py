"""Compare command -- diff two versions of an OpenAPI/Swagger spec.

``apicompare compare BASE TARGET`` loads both versions (files, checked-out
directories, URLs, or ``-`` for stdin), runs
:func:`~apicompare.compare.compare_files`, and renders the result in the
active output format. The exit code reflects the ``--fail-on`` threshold so
the command can gate a CI pipeline.
"""

from __future__ import annotations

from typing import Optional

import typer

from apicompare.exit_codes import EXIT_CHANGES_DETECTED, EXIT_SPEC_PARSE_ERROR
from apicompare.models import ComparisonResult, FailOn, Severity
from apicompare.output import debug, error, info, render_comparison


def compare_command(
    base: str = typer.Argument(
        help="Older spec: file, directory, URL, or '-' for stdin."
    ),
    target: str = typer.Argument(
        help="Newer spec: file, directory, URL, or '-' for stdin."
    ),
    report_methods: Optional[bool] = typer.Option(
        None,
        "--report-methods/--no-report-methods",
        help="Report methods added or removed under paths present in both versions (default: on).",
    ),
    fail_on: Optional[FailOn] = typer.Option(
        None,
        "--fail-on",
        case_sensitive=False,
        help="Exit with code 3 when changes reach this level: never, any, high.",
    ),
    search_path: Optional[list[str]] = typer.Option(
        None,
        "--search-path",
        "-s",
        help="Relative spec location to try when BASE/TARGET is a directory (repeatable).",
    ),
) -> None:
    """Compare two versions of an API spec.

    Prints a summary table followed by endpoint, model, and parameter
    changes, or the full JSON report with ``--json``.

    Args:
        base: Source of the older version.
        target: Source of the newer version.
        report_methods: Override ``compare.report_method_changes``.
        fail_on: Override ``compare.fail_on``.
        search_path: Override ``discovery.search_paths``.

    Raises:
        typer.Exit: With code 3 when the fail-on threshold is met, 7 when a
            document cannot be parsed, or the error's own code when a
            source cannot be loaded or the config is invalid.

    Example::

        apicompare compare v1/openapi.yaml v2/openapi.yaml
        apicompare --json compare ./release-1.0 ./main --fail-on high
    """
    from apicompare.compare import build_comparison_report, compare_files
    from apicompare.config import resolve_config
    from apicompare.discovery import resolve_spec_source
    from apicompare.exceptions import ApiCompareError, InvalidUsageError

    try:
        if base == "-" and target == "-":
            raise InvalidUsageError("Only one of BASE and TARGET can be read from stdin.")
        config = resolve_config(
            cli_search_paths=search_path,
            cli_fail_on=fail_on.value if fail_on is not None else None,
            cli_report_methods=report_methods,
        )
        base_file = resolve_spec_source(base, config.discovery.search_paths)
        target_file = resolve_spec_source(target, config.discovery.search_paths)
    except ApiCompareError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    debug(f"Base: {base_file.path} ({base_file.version})")
    debug(f"Target: {target_file.path} ({target_file.version})")

    result = compare_files(
        base_file,
        target_file,
        report_method_changes=config.compare.report_method_changes,
    )
    if not result.success:
        error(result.error or "Comparison failed.")
        raise typer.Exit(code=EXIT_SPEC_PARSE_ERROR)

    report = build_comparison_report(base_file, target_file, result)
    render_comparison(
        result,
        report=report,
        title=f"{base_file.version} -> {target_file.version}",
    )
    info(
        f"{result.summary.total} changes "
        f"({result.summary.new} new, {result.summary.changed} changed, "
        f"{result.summary.deprecated} deprecated)"
    )

    if threshold_met(result, config.compare.fail_on):
        raise typer.Exit(code=EXIT_CHANGES_DETECTED)


def threshold_met(result: ComparisonResult, fail_on: FailOn) -> bool:
    """Return True if *result* should fail the run under *fail_on*."""
    if fail_on == FailOn.ANY:
        return result.summary.total > 0
    if fail_on == FailOn.HIGH:
        return any(change.severity == Severity.HIGH for change in result.changes)
    return False
