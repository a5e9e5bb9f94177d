"""Where apicompare keeps its settings, and how they are layered.

Settings live in one JSON document shaped like
:class:`~apicompare.models.GlobalConfig`. Four layers feed the effective
value, lowest first: built-in defaults, the user file in the config
directory, ``./apicompare.json`` in the working directory, ``APICOMPARE_*``
environment variables, and finally CLI flags (:func:`resolve_config`).

Linux and the BSDs follow the XDG base directory layout
(``$XDG_CONFIG_HOME/apicompare``, ``$XDG_DATA_HOME/apicompare``); other
platforms use a single ``~/.apicompare`` directory. The user file is
replaced atomically so an interrupted ``config set`` never leaves half a
document behind.
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Any, Optional, Sequence

from pydantic import ValidationError

from apicompare.exceptions import ConfigError
from apicompare.models import GlobalConfig

_APP_NAME = "apicompare"
_USER_CONFIG_NAME = "config.json"
_PROJECT_CONFIG_NAME = "apicompare.json"

ENV_FORMAT = "APICOMPARE_FORMAT"
ENV_SEARCH_PATHS = "APICOMPARE_SEARCH_PATHS"
ENV_FAIL_ON = "APICOMPARE_FAIL_ON"


# --- Directories ---


def _is_xdg_platform() -> bool:
    system = platform.system()
    return system == "Linux" or system.endswith("BSD")


def _app_dir(xdg_var: str, *home_default: str) -> Path:
    """Return (and create) this app's directory under an XDG base.

    Off XDG platforms every kind of file shares ``~/.apicompare``.
    """
    if _is_xdg_platform():
        base = os.environ.get(xdg_var) or Path.home().joinpath(*home_default)
        path = Path(base) / _APP_NAME
    else:
        path = Path.home() / f".{_APP_NAME}"
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_config_dir() -> Path:
    """User configuration directory (``~/.config/apicompare`` by default)."""
    return _app_dir("XDG_CONFIG_HOME", ".config")


def get_data_dir() -> Path:
    """User data directory, home of crash logs (``~/.local/share/apicompare``)."""
    return _app_dir("XDG_DATA_HOME", ".local", "share")


# --- Files ---


def _atomic_write(path: Path, data: str) -> None:
    """Replace *path* with *data* via a synced sibling temp file and ``os.replace``."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as tmp:
            tmp.write(data)
            tmp.flush()
            os.fsync(tmp.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


def _read_json(path: Path, label: str) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise ConfigError(f"Invalid {label} at {path}: {exc}") from exc


def _user_config_path() -> Path:
    return get_config_dir() / _USER_CONFIG_NAME


def load_global_config() -> GlobalConfig:
    """Read the user config file, or return defaults when there is none.

    Raises:
        ConfigError: If the file is not valid JSON or does not validate.
    """
    path = _user_config_path()
    if not path.is_file():
        return GlobalConfig()
    data = _read_json(path, "global config")
    try:
        return GlobalConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid global config at {path}: {exc}") from exc


def save_global_config(config: GlobalConfig) -> None:
    """Write *config* to the user config file."""
    text = json.dumps(config.model_dump(mode="json"), indent=2)
    _atomic_write(_user_config_path(), text + "\n")


def load_project_config() -> Optional[dict[str, Any]]:
    """Load project-local configuration from ``./apicompare.json``.

    Project-local config sits between global config and environment
    variables in the precedence chain. A repository typically uses it to
    pin its spec's search paths or a ``compare.fail_on`` threshold for CI.

    Returns:
        The parsed JSON as a dict, or ``None`` if the file does not exist.

    Raises:
        ConfigError: If the file exists but contains invalid JSON or is not
            a JSON object.
    """
    path = Path.cwd() / _PROJECT_CONFIG_NAME
    if not path.is_file():
        return None
    data = _read_json(path, "project config")
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid project config at {path}: expected a JSON object")
    return data


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Return *base* with *override* merged in, recursing into nested dicts."""
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


# --- Precedence resolution ---


def resolve_config(
    cli_format: Optional[str] = None,
    cli_search_paths: Optional[Sequence[str]] = None,
    cli_fail_on: Optional[str] = None,
    cli_report_methods: Optional[bool] = None,
) -> GlobalConfig:
    """Resolve config with full precedence chain.

    Precedence (high to low):
        1. CLI flags
        2. Environment variables (``APICOMPARE_FORMAT``,
           ``APICOMPARE_SEARCH_PATHS`` comma-separated, ``APICOMPARE_FAIL_ON``)
        3. Project config (``./apicompare.json``)
        4. User config (``~/.config/apicompare/config.json``)
        5. Defaults

    Returns:
        The effective :class:`~apicompare.models.GlobalConfig`.

    Raises:
        ConfigError: If any layer holds an invalid value.
    """
    # 5 + 4. Load base global config (fills in defaults automatically)
    data = load_global_config().model_dump(mode="json")

    # 3. Layer in project-local config
    project = load_project_config()
    if project is not None:
        data = _deep_merge(data, project)

    # 2. Environment variables
    env_format = os.environ.get(ENV_FORMAT)
    if env_format:
        data["output"]["format"] = env_format
    env_search_paths = os.environ.get(ENV_SEARCH_PATHS)
    if env_search_paths:
        data["discovery"]["search_paths"] = [
            p.strip() for p in env_search_paths.split(",") if p.strip()
        ]
    env_fail_on = os.environ.get(ENV_FAIL_ON)
    if env_fail_on:
        data["compare"]["fail_on"] = env_fail_on

    # 1. CLI flags (highest precedence)
    if cli_format is not None:
        data["output"]["format"] = cli_format
    if cli_search_paths:
        data["discovery"]["search_paths"] = list(cli_search_paths)
    if cli_fail_on is not None:
        data["compare"]["fail_on"] = cli_fail_on
    if cli_report_methods is not None:
        data["compare"]["report_method_changes"] = cli_report_methods

    try:
        return GlobalConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc
