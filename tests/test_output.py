"""Tests for the output formatting system.

Covers:
- OutputFormat resolution (auto -> rich/plain based on TTY)
- NO_COLOR / TERM=dumb color disabling
- stdout vs stderr discipline and quiet/verbose rules
- print_table in all three modes
- render_comparison for plain and JSON output
- Output file redirection
- Logging setup
- Global instance management
"""

from __future__ import annotations

import json
import logging

import pytest
from rich.logging import RichHandler

from apicompare.compare import compare_files
from apicompare.output import (
    OutputFormat,
    OutputManager,
    _should_disable_color,
    configure_logging,
    get_output,
    reset_output,
    set_output,
)


# ------------------------------------------------------------------ #
# Fixtures
# ------------------------------------------------------------------ #


@pytest.fixture()
def non_tty(monkeypatch):
    """Patch stdout.isatty() to return False."""
    monkeypatch.setattr("apicompare.output._is_tty", lambda: False)


@pytest.fixture()
def tty(monkeypatch):
    """Patch stdout.isatty() to return True."""
    monkeypatch.setattr("apicompare.output._is_tty", lambda: True)


@pytest.fixture()
def petstore_result(petstore_v1, petstore_v2):
    return compare_files(petstore_v1, petstore_v2)


@pytest.fixture()
def restore_logger():
    """Put the apicompare logger back the way the test found it."""
    logger = logging.getLogger("apicompare")
    handlers, level = list(logger.handlers), logger.level
    yield logger
    logger.handlers[:] = handlers
    logger.setLevel(level)


# ------------------------------------------------------------------ #
# Format resolution and colour
# ------------------------------------------------------------------ #


class TestOutputFormatResolution:
    """AUTO resolves based on the environment."""

    def test_auto_resolves_to_plain_when_not_tty(self, non_tty):
        assert OutputManager(format=OutputFormat.AUTO).format == OutputFormat.PLAIN

    def test_auto_resolves_to_rich_when_tty(self, tty, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.delenv("TERM", raising=False)
        assert OutputManager(format=OutputFormat.AUTO).format == OutputFormat.RICH

    def test_auto_resolves_to_plain_when_tty_but_no_color(self, tty):
        assert OutputManager(format=OutputFormat.AUTO, no_color=True).format == OutputFormat.PLAIN

    def test_explicit_json_stays_json(self, tty):
        assert OutputManager(format=OutputFormat.JSON).format == OutputFormat.JSON


class TestColorDisabling:
    def test_no_color_env(self, monkeypatch):
        monkeypatch.setenv("NO_COLOR", "")
        assert _should_disable_color()

    def test_term_dumb(self, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "dumb")
        assert _should_disable_color()

    def test_normal_term(self, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "xterm-256color")
        assert not _should_disable_color()


# ------------------------------------------------------------------ #
# Stream discipline
# ------------------------------------------------------------------ #


class TestStdoutStderrDiscipline:
    """Data goes to stdout, diagnostics to stderr."""

    def test_print_data_goes_to_stdout(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True)
        mgr.print_data("hello world")
        captured = capfd.readouterr()
        assert "hello world" in captured.out
        assert captured.err == ""

    def test_diagnostics_go_to_stderr(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True, verbose=True)
        mgr.info("some info")
        mgr.warning("be careful")
        mgr.error("something broke")
        mgr.debug("debug info")
        captured = capfd.readouterr()
        assert captured.out == ""
        assert "some info" in captured.err
        assert "Warning: be careful" in captured.err
        assert "Error: something broke" in captured.err
        assert "[debug] debug info" in captured.err

    def test_quiet_suppresses_info_not_errors(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True, quiet=True)
        mgr.info("hidden")
        mgr.success("hidden too")
        mgr.error("shown")
        captured = capfd.readouterr()
        assert "hidden" not in captured.err
        assert "shown" in captured.err

    def test_debug_hidden_by_default(self, capfd, non_tty):
        OutputManager(format=OutputFormat.PLAIN, no_color=True).debug("secret")
        assert capfd.readouterr().err == ""


# ------------------------------------------------------------------ #
# Tables
# ------------------------------------------------------------------ #


class TestPrintTable:
    def test_plain_is_tab_separated(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True)
        mgr.print_table(["Method", "Path"], [["GET", "/pets"], ["POST", "/pets"]])
        lines = capfd.readouterr().out.splitlines()
        assert lines == ["Method\tPath", "GET\t/pets", "POST\t/pets"]

    def test_json_is_list_of_records(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.JSON, no_color=True)
        mgr.print_table(["Method", "Path"], [["GET", "/pets"]])
        assert json.loads(capfd.readouterr().out) == [{"Method": "GET", "Path": "/pets"}]

    def test_rich_renders_title_and_cells(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.RICH, no_color=True)
        mgr.print_table(["Severity", "Path"], [["high", "/stores"]], title="Changes")
        out = capfd.readouterr().out
        assert "Changes" in out
        assert "high" in out
        assert "/stores" in out


class TestFormatResponse:
    def test_plain_flattens_nested_mappings(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True)
        mgr.format_response(
            {"output": {"format": "auto"}, "compare": {"report_method_changes": True}, "paths": ["a.yaml"]}
        )
        assert capfd.readouterr().out.splitlines() == [
            "output.format\tauto",
            "compare.report_method_changes\ttrue",
            'paths\t["a.yaml"]',
        ]

    def test_json_is_indented(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.JSON, no_color=True)
        mgr.format_response({"a": {"b": 1}})
        out = capfd.readouterr().out
        assert json.loads(out) == {"a": {"b": 1}}
        assert '\n  "a"' in out

    def test_plain_list_one_item_per_line(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True)
        mgr.format_response(["x", 2, None])
        assert capfd.readouterr().out.splitlines() == ["x", "2", ""]


# ------------------------------------------------------------------ #
# Comparison rendering
# ------------------------------------------------------------------ #


class TestRenderComparison:
    def test_plain_summary_and_tables(self, capfd, non_tty, petstore_result):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True)
        mgr.render_comparison(petstore_result)
        lines = capfd.readouterr().out.splitlines()
        assert lines[:4] == [
            "Scope\tTotal\tNew\tChanged\tDeprecated",
            "all\t9\t2\t5\t2",
            "operations\t2\t1\t0\t1",
            "models\t3\t1\t1\t1",
        ]
        assert "low\tnew\tGET\t/owners\tlistOwners" in lines
        assert "high\tdeprecated\tGET\t/stores\tlistStores" in lines
        assert (
            "medium\tchanged_model\tmodel:Pet\tModel schema changed: Pet (2 changes): "
            "Added required fields: tag; Added properties: tag"
        ) in lines
        assert "medium\tchanged_param\tlistPets\tNew parameter: query.offset" in lines
        assert "medium\tchanged_param\tshowPetById\tRemoved response code: 404" in lines

    def test_plain_no_changes_prints_only_summary(self, capfd, non_tty, petstore_v1):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True)
        mgr.render_comparison(compare_files(petstore_v1, petstore_v1))
        lines = capfd.readouterr().out.splitlines()
        assert len(lines) == 4

    def test_json_emits_result_dict(self, capfd, non_tty, petstore_result):
        mgr = OutputManager(format=OutputFormat.JSON, no_color=True)
        mgr.render_comparison(petstore_result)
        data = json.loads(capfd.readouterr().out)
        assert data["summary"]["total"] == 9
        assert data["operationChanges"][0]["operationId"] == "listOwners"

    def test_json_prefers_report(self, capfd, non_tty, petstore_result):
        mgr = OutputManager(format=OutputFormat.JSON, no_color=True)
        mgr.render_comparison(petstore_result, report={"comparison": {"baseVersion": "v1"}})
        assert json.loads(capfd.readouterr().out) == {"comparison": {"baseVersion": "v1"}}

    def test_output_file_gets_json(self, capfd, non_tty, tmp_path, petstore_result):
        target = tmp_path / "report.json"
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True, output_file=str(target))
        mgr.render_comparison(petstore_result)
        assert capfd.readouterr().out == ""
        assert json.loads(target.read_text(encoding="utf-8"))["success"] is True


# ------------------------------------------------------------------ #
# Logging
# ------------------------------------------------------------------ #


class TestConfigureLogging:
    def test_verbose_installs_rich_handler(self, restore_logger):
        configure_logging(verbose=True)
        rich_handlers = [h for h in restore_logger.handlers if isinstance(h, RichHandler)]
        assert len(rich_handlers) == 1
        assert restore_logger.level == logging.DEBUG

    def test_repeated_calls_do_not_stack_handlers(self, restore_logger):
        configure_logging(verbose=True)
        configure_logging(verbose=True)
        assert sum(isinstance(h, RichHandler) for h in restore_logger.handlers) == 1

    def test_quiet_logging_uses_null_handler(self, restore_logger):
        configure_logging(verbose=True)
        configure_logging(verbose=False)
        assert not any(isinstance(h, RichHandler) for h in restore_logger.handlers)
        assert any(isinstance(h, logging.NullHandler) for h in restore_logger.handlers)
        assert restore_logger.level == logging.WARNING


# ------------------------------------------------------------------ #
# Global instance
# ------------------------------------------------------------------ #


class TestGlobalInstance:
    def test_get_output_creates_default(self):
        reset_output()
        assert isinstance(get_output(), OutputManager)

    def test_set_output_installs_instance(self):
        mgr = OutputManager(format=OutputFormat.JSON)
        set_output(mgr)
        assert get_output() is mgr
