"""Tests for the diagnostics output manager.

Covers:
- OutputFormat resolution (auto -> rich/plain based on TTY)
- NO_COLOR / TERM=dumb color disabling
- stdout vs stderr discipline
- Quiet and verbose modes, including CHAINHTTP_DEBUG
- format_response rendering
- Global instance management
"""

from __future__ import annotations

import json

import pytest

from chainhttp import output as output_module
from chainhttp.output import (
    OutputFormat,
    OutputManager,
    _should_disable_color,
    _to_text,
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
    monkeypatch.setattr("chainhttp.output._is_tty", lambda: False)


@pytest.fixture()
def tty(monkeypatch):
    """Patch stdout.isatty() to return True."""
    monkeypatch.setattr("chainhttp.output._is_tty", lambda: True)


@pytest.fixture()
def no_color_env(monkeypatch):
    monkeypatch.delenv("NO_COLOR", raising=False)
    monkeypatch.delenv("TERM", raising=False)


# ------------------------------------------------------------------ #
# Format resolution
# ------------------------------------------------------------------ #


class TestOutputFormatResolution:
    def test_auto_resolves_to_plain_when_not_tty(self, non_tty):
        assert OutputManager().format == OutputFormat.PLAIN

    def test_auto_resolves_to_rich_when_tty(self, tty, no_color_env):
        assert OutputManager().format == OutputFormat.RICH

    def test_auto_resolves_to_plain_when_tty_but_no_color(self, tty, monkeypatch):
        monkeypatch.setenv("NO_COLOR", "1")
        assert OutputManager().format == OutputFormat.PLAIN

    def test_explicit_format_is_kept(self, non_tty):
        assert OutputManager(format=OutputFormat.RICH).format == OutputFormat.RICH


class TestColorDisabling:
    def test_no_color_env_any_value(self, monkeypatch):
        monkeypatch.setenv("NO_COLOR", "")
        assert _should_disable_color() is True

    def test_term_dumb_disables_color(self, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "dumb")
        assert _should_disable_color() is True

    def test_normal_term_keeps_color(self, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "xterm-256color")
        assert _should_disable_color() is False


# ------------------------------------------------------------------ #
# stdout / stderr discipline
# ------------------------------------------------------------------ #


class TestStreams:
    def test_print_data_goes_to_stdout(self, capsys, non_tty):
        OutputManager(no_color=True).print_data("hello")
        captured = capsys.readouterr()
        assert captured.out == "hello\n"
        assert captured.err == ""

    def test_info_goes_to_stderr(self, capsys, non_tty):
        OutputManager(no_color=True).info("HTTP 200 GET /todos")
        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err == "HTTP 200 GET /todos\n"

    def test_quiet_suppresses_info_only(self, capsys, non_tty):
        out = OutputManager(no_color=True, quiet=True, verbose=True)
        out.info("hidden")
        out.debug("shown")
        out.print_data("data")
        captured = capsys.readouterr()
        assert "hidden" not in captured.err
        assert captured.err == "[debug] shown\n"
        assert captured.out == "data\n"


class TestVerboseMode:
    def test_debug_hidden_by_default(self, capsys, non_tty):
        OutputManager(no_color=True).debug("-> GET /todos")
        assert capsys.readouterr().err == ""

    def test_debug_shown_with_verbose(self, capsys, non_tty):
        out = OutputManager(no_color=True, verbose=True)
        assert out.is_verbose
        out.debug("-> GET /todos")
        assert capsys.readouterr().err == "[debug] -> GET /todos\n"

    @pytest.mark.parametrize("value", ["1", "true", "YES", "on"])
    def test_debug_env_enables_verbose(self, monkeypatch, non_tty, value):
        monkeypatch.setenv("CHAINHTTP_DEBUG", value)
        assert OutputManager().is_verbose

    @pytest.mark.parametrize("value", ["", "0", "off"])
    def test_debug_env_falsy(self, monkeypatch, non_tty, value):
        monkeypatch.setenv("CHAINHTTP_DEBUG", value)
        assert not OutputManager().is_verbose

    def test_explicit_verbose_wins_over_env(self, monkeypatch, non_tty):
        monkeypatch.setenv("CHAINHTTP_DEBUG", "1")
        assert not OutputManager(verbose=False).is_verbose


# ------------------------------------------------------------------ #
# format_response
# ------------------------------------------------------------------ #


class TestFormatResponse:
    def test_plain_json_string_is_reindented(self, capsys, non_tty):
        OutputManager(no_color=True).format_response('{"id":1,"title":"x"}')
        assert json.loads(capsys.readouterr().out) == {"id": 1, "title": "x"}

    def test_plain_dict(self, capsys, non_tty):
        OutputManager(no_color=True).format_response({"id": 1})
        assert capsys.readouterr().out == '{\n  "id": 1\n}\n'

    def test_non_json_content_type_is_verbatim(self, capsys, non_tty):
        OutputManager(no_color=True).format_response("id: 1", "application/yaml")
        assert capsys.readouterr().out == "id: 1\n"

    def test_invalid_json_is_printed_as_is(self, capsys, non_tty):
        OutputManager(no_color=True).format_response("not json")
        assert capsys.readouterr().out == "not json\n"

    def test_rich_produces_output(self, capsys, non_tty):
        OutputManager(format=OutputFormat.RICH, no_color=True).format_response('{"id": 1}')
        captured = capsys.readouterr()
        assert '"id"' in captured.out
        assert captured.err == ""

    def test_to_text_list(self):
        assert json.loads(_to_text([1, 2], "application/json")) == [1, 2]


# ------------------------------------------------------------------ #
# Global instance
# ------------------------------------------------------------------ #


class TestGlobalInstance:
    def test_get_output_creates_lazily(self, non_tty):
        reset_output()
        assert output_module._output is None
        first = get_output()
        assert get_output() is first

    def test_set_and_reset(self, non_tty):
        custom = OutputManager(quiet=True)
        set_output(custom)
        assert get_output() is custom
        reset_output()
        assert get_output() is not custom
