"""``apicompare config`` -- read and edit the user config file.

Keys use dot notation matching :class:`~apicompare.models.GlobalConfig`
(``output.format``, ``discovery.search_paths``, ``compare.fail_on``,
``compare.report_method_changes``). ``show --effective`` prints the value
after project config and environment variables are layered on top.
"""

from __future__ import annotations

from typing import Any

import typer
from pydantic import ValidationError

from apicompare.exit_codes import EXIT_INVALID_USAGE
from apicompare.output import error, format_response, info, success


config_app = typer.Typer(no_args_is_help=True)

_TRUE_WORDS = ("true", "1", "yes", "on")


@config_app.command("show")
def config_show(
    effective: bool = typer.Option(
        False,
        "--effective",
        help="Show the merged result of global, project, and environment settings.",
    ),
) -> None:
    """Print the configuration (the config directory goes to stderr).

    Example::

        apicompare config show
        apicompare --json config show --effective
    """
    from apicompare.config import get_config_dir, load_global_config, resolve_config
    from apicompare.exceptions import ConfigError

    try:
        config = resolve_config() if effective else load_global_config()
    except ConfigError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    info(f"Config directory: {get_config_dir()}")
    format_response(config.model_dump(mode="json"))


def _parent_of(data: dict[str, Any], key: str) -> tuple[dict[str, Any], str]:
    """Return the mapping holding the leaf *key* and the leaf name.

    Raises:
        typer.Exit: If *key* does not name an existing scalar or list setting.
    """
    *sections, leaf = key.split(".")
    node: Any = data
    for section in sections:
        node = node.get(section) if isinstance(node, dict) else None
    if not isinstance(node, dict) or leaf not in node or isinstance(node[leaf], dict):
        error(f"Unknown config key: {key}")
        raise typer.Exit(code=EXIT_INVALID_USAGE)
    return node, leaf


def _coerce(current: Any, raw: str) -> Any:
    """Shape *raw* like the setting's current value."""
    if isinstance(current, bool):
        return raw.strip().lower() in _TRUE_WORDS
    if isinstance(current, list):
        return [item.strip() for item in raw.split(",") if item.strip()]
    return raw


@config_app.command("set")
def config_set(
    key: str = typer.Argument(
        help="Config key (dot notation, e.g., 'compare.fail_on')."
    ),
    value: str = typer.Argument(help="Value to set. Lists are comma separated."),
) -> None:
    """Change one setting in the user config file.

    Booleans accept true/1/yes/on; list settings take a comma-separated
    value. The result is validated before it is written, and a bad key or
    value exits with code 2.

    Example::

        apicompare config set output.format json
        apicompare config set compare.fail_on high
        apicompare config set discovery.search_paths openapi.yaml,spec/api.yaml
    """
    from apicompare.config import load_global_config, save_global_config
    from apicompare.models import GlobalConfig

    data = load_global_config().model_dump(mode="json")
    parent, leaf = _parent_of(data, key)
    parent[leaf] = _coerce(parent[leaf], value)

    try:
        updated = GlobalConfig.model_validate(data)
    except ValidationError as exc:
        error(f"Invalid value for {key}: {exc}")
        raise typer.Exit(code=EXIT_INVALID_USAGE) from None

    save_global_config(updated)
    success(f"Set {key} = {parent[leaf]}")


@config_app.command("reset")
def config_reset(
    force: bool = typer.Option(
        False, "--force", "-f", help="Skip confirmation."
    ),
) -> None:
    """Overwrite the user config file with defaults.

    Example::

        apicompare config reset --force
    """
    from apicompare.config import save_global_config
    from apicompare.models import GlobalConfig

    if not force and not typer.confirm("Reset all config to defaults?"):
        info("Cancelled.")
        raise typer.Exit()

    save_global_config(GlobalConfig())
    success("Configuration reset to defaults.")
