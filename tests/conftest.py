"""Fixtures shared by the apicompare test suite.

Spec documents live in ``tests/fixtures``: a Swagger 2.0 petstore in two
versions (``petstore_v1.yaml`` -> ``petstore_v2.yaml`` produces nine
changes) and a small OpenAPI 3.0 users API.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterator

import pytest

from apicompare.models import SpecFile
from apicompare.output import reset_output


FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> Iterator[None]:
    """Drop the process-wide OutputManager after each test.

    A manager built inside ``CliRunner.invoke`` holds consoles bound to the
    runner's temporary streams, which are closed once the call returns.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Spec documents
# ---------------------------------------------------------------------------


@pytest.fixture
def petstore_v1_text() -> str:
    return (FIXTURES_DIR / "petstore_v1.yaml").read_text(encoding="utf-8")


@pytest.fixture
def petstore_v2_text() -> str:
    return (FIXTURES_DIR / "petstore_v2.yaml").read_text(encoding="utf-8")


@pytest.fixture
def petstore_v1(petstore_v1_text: str) -> SpecFile:
    return SpecFile(path="petstore_v1.yaml", content=petstore_v1_text, version="v1")


@pytest.fixture
def petstore_v2(petstore_v2_text: str) -> SpecFile:
    return SpecFile(path="petstore_v2.yaml", content=petstore_v2_text, version="v2")


@pytest.fixture
def users_30_raw() -> dict[str, Any]:
    """The OpenAPI 3.0 users document, already parsed."""
    with open(FIXTURES_DIR / "users_3.0.json", encoding="utf-8") as f:
        return json.load(f)


# ---------------------------------------------------------------------------
# Environment
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point every config and data lookup into *tmp_path*.

    Forces the XDG layout with ``XDG_CONFIG_HOME=<tmp>/config`` and
    ``XDG_DATA_HOME=<tmp>/data``, clears ``APICOMPARE_*`` variables and
    makes *tmp_path* the working directory (so no stray
    ``apicompare.json`` is picked up).

    Returns:
        *tmp_path*.
    """
    monkeypatch.setattr("apicompare.config._is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    for var in ("APICOMPARE_FORMAT", "APICOMPARE_SEARCH_PATHS", "APICOMPARE_FAIL_ON"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def cli_runner():
    """A Typer ``CliRunner`` for invoking :data:`apicompare.app.app`."""
    from typer.testing import CliRunner

    return CliRunner()
