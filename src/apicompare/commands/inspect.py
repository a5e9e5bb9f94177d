"""Inspect commands -- examine what one version of a spec defines.

Provides the ``apicompare inspect`` sub-command group with read-only
commands for viewing the operations and merged models of a single spec
document, exactly as the diff engine sees them. Useful for checking why a
comparison did or did not report something.
"""

from __future__ import annotations

from typing import Optional

import typer

from apicompare.models import SpecDocument
from apicompare.output import error, get_output, info


inspect_app = typer.Typer(no_args_is_help=True)


def _load_document(source: str, search_paths: Optional[list[str]]) -> SpecDocument:
    """Load, parse, and extract the spec at *source*.

    Returns:
        The extracted :class:`~apicompare.models.SpecDocument`.

    Raises:
        typer.Exit: With the error's exit code when the source cannot be
            loaded or parsed.
    """
    from apicompare.config import resolve_config
    from apicompare.discovery import resolve_spec_source
    from apicompare.exceptions import ApiCompareError
    from apicompare.parser import extract_document, parse_spec_content

    try:
        config = resolve_config(cli_search_paths=search_paths)
        spec_file = resolve_spec_source(source, config.discovery.search_paths)
        return extract_document(parse_spec_content(spec_file.content))
    except ApiCompareError as exc:
        error(f"Failed to load spec: {exc}")
        raise typer.Exit(code=exc.exit_code) from None


@inspect_app.command("paths")
def inspect_paths(
    spec: str = typer.Argument(help="Spec file, directory, URL, or '-' for stdin."),
    search_path: Optional[list[str]] = typer.Option(
        None, "--search-path", "-s", help="Relative spec location to try (repeatable)."
    ),
) -> None:
    """List every operation in a spec.

    Displays a table of each HTTP method under each path with the identity
    the comparison uses for it and its summary.

    Example::

        apicompare inspect paths openapi.yaml
        apicompare --json inspect paths ./checkout
    """
    from apicompare.diff.operations import operation_identity
    from apicompare.parser.extractor import as_mapping, iter_operations

    document = _load_document(spec, search_path)

    headers = ["Method", "Path", "Operation", "Summary"]
    rows: list[list[str]] = []
    for path, path_item in document.paths.items():
        for method, operation in iter_operations(path_item):
            summary = as_mapping(operation).get("summary")
            rows.append([
                method.upper(),
                path,
                operation_identity(operation, path, method),
                str(summary) if summary else "-",
            ])

    if not rows:
        info("No operations defined in this spec.")
        return

    get_output().print_table(headers, rows, title=f"Paths ({len(rows)})")


@inspect_app.command("models")
def inspect_models(
    spec: str = typer.Argument(help="Spec file, directory, URL, or '-' for stdin."),
    search_path: Optional[list[str]] = typer.Option(
        None, "--search-path", "-s", help="Relative spec location to try (repeatable)."
    ),
) -> None:
    """List all models defined in a spec.

    Shows Swagger 2.x ``definitions`` and OpenAPI 3.x
    ``components.schemas`` merged into one table, with each model's type
    and up to five property names.

    Example::

        apicompare inspect models swagger.yaml
    """
    from apicompare.parser.extractor import as_mapping

    document = _load_document(spec, search_path)

    if not document.models:
        info("No models defined in this spec.")
        return

    headers = ["Model", "Type", "Required", "Properties"]
    rows: list[list[str]] = []
    for name, schema in sorted(document.models.items()):
        schema_map = as_mapping(schema)
        prop_names = list(as_mapping(schema_map.get("properties")))
        props = ", ".join(prop_names[:5])
        if len(prop_names) > 5:
            props += "..."
        required = schema_map.get("required")
        rows.append([
            name,
            str(schema_map.get("type", "object")),
            str(len(required)) if isinstance(required, list) else "0",
            props,
        ])

    get_output().print_table(headers, rows, title=f"Models ({len(rows)})")
