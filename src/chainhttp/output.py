"""Diagnostics and response rendering with stdout/stderr discipline.

* **stdout** -- response bodies rendered by :meth:`OutputManager.format_response`.
* **stderr** -- diagnostics: status lines and dispatch traces.
* **Colour control** -- respects ``NO_COLOR`` and ``TERM=dumb``.

The module exposes a stateful :class:`OutputManager` and a lazily created
global instance managed with :func:`get_output`, :func:`set_output` and
:func:`reset_output`.  The client emits ``debug`` traces for every dispatch;
they are only printed when the manager is verbose, which is the case when
``CHAINHTTP_DEBUG`` is set to a truthy value.
"""

from __future__ import annotations

import json
import os
import sys
from enum import Enum
from typing import Any, Optional

from rich.console import Console
from rich.syntax import Syntax

_TRUTHY = {"1", "true", "yes", "on"}


class OutputFormat(str, Enum):
    """Rendering used for response bodies.

    ``AUTO`` resolves to ``RICH`` when stdout is an interactive TTY and colour
    is not disabled, or to ``PLAIN`` otherwise.
    """

    AUTO = "auto"
    PLAIN = "plain"
    RICH = "rich"


class OutputManager:
    """Routes diagnostics to stderr and rendered data to stdout.

    Args:
        format: Desired body rendering. ``AUTO`` resolves based on TTY
            detection.
        no_color: Disable all colour and Rich markup.
        quiet: Suppress informational messages on stderr.
        verbose: Print ``debug`` traces.  Defaults to the value of
            ``CHAINHTTP_DEBUG``.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.AUTO,
        no_color: bool = False,
        quiet: bool = False,
        verbose: Optional[bool] = None,
    ) -> None:
        self._no_color = no_color or _should_disable_color()
        self._quiet = quiet
        self._verbose = _debug_from_env() if verbose is None else verbose

        if format == OutputFormat.AUTO:
            self._format = (
                OutputFormat.RICH if _is_tty() and not self._no_color else OutputFormat.PLAIN
            )
        else:
            self._format = format

        self._stdout = Console(
            file=sys.stdout,
            no_color=self._no_color,
            force_terminal=(self._format == OutputFormat.RICH),
        )
        self._stderr = Console(
            file=sys.stderr,
            no_color=self._no_color,
            stderr=True,
        )

    @property
    def format(self) -> OutputFormat:
        """The resolved output format."""
        return self._format

    @property
    def is_verbose(self) -> bool:
        return self._verbose

    # ------------------------------------------------------------------ #
    # Data output (stdout)
    # ------------------------------------------------------------------ #

    def format_response(self, data: Any, content_type: str = "application/json") -> None:
        """Render a response body to stdout.

        JSON bodies (or JSON-looking strings) are pretty-printed; anything
        else is printed as-is.

        Args:
            data: Body text or an already decoded value.
            content_type: MIME type hint; non-JSON types are printed verbatim.
        """
        if self._format == OutputFormat.PLAIN:
            self.print_data(_to_text(data, content_type))
            return

        text = _to_text(data, content_type)
        if "json" in content_type:
            self._stdout.print(Syntax(text, "json", theme="monokai", word_wrap=True))
        else:
            self._stdout.print(text)

    def print_data(self, text: str) -> None:
        """Print raw text to stdout."""
        print(text, file=sys.stdout, flush=True)

    # ------------------------------------------------------------------ #
    # Diagnostics (stderr)
    # ------------------------------------------------------------------ #

    def info(self, message: str) -> None:
        """Print an informational message to stderr. Suppressed when quiet."""
        if not self._quiet:
            if self._no_color:
                print(message, file=sys.stderr, flush=True)
            else:
                self._stderr.print(message, markup=False)

    def debug(self, message: str) -> None:
        """Print a debug trace to stderr. Only shown when verbose.

        Args:
            message: The debug text (prefixed with ``[debug]`` on output).
        """
        if self._verbose:
            if self._no_color:
                print(f"[debug] {message}", file=sys.stderr, flush=True)
            else:
                self._stderr.print(f"[debug] {message}", style="dim", markup=False)


# ------------------------------------------------------------------ #
# Module-level helpers
# ------------------------------------------------------------------ #


def _to_text(data: Any, content_type: str) -> str:
    """Return *data* as display text, re-indenting JSON when possible."""
    if isinstance(data, (dict, list)):
        return json.dumps(data, indent=2, ensure_ascii=False, default=str)
    text = data if isinstance(data, str) else str(data)
    if "json" not in content_type:
        return text
    try:
        return json.dumps(json.loads(text), indent=2, ensure_ascii=False, default=str)
    except (json.JSONDecodeError, TypeError):
        return text


def _is_tty() -> bool:
    """Check if stdout is a TTY."""
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _should_disable_color() -> bool:
    """Return True when ``NO_COLOR`` is set (any value) or ``TERM=dumb``."""
    if os.environ.get("NO_COLOR") is not None:
        return True
    if os.environ.get("TERM") == "dumb":
        return True
    return False


def _debug_from_env() -> bool:
    return os.environ.get("CHAINHTTP_DEBUG", "").strip().lower() in _TRUTHY


# ------------------------------------------------------------------ #
# Global output instance
# ------------------------------------------------------------------ #

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the global :class:`OutputManager`, creating a default one lazily."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    """Install *output* as the global :class:`OutputManager` instance."""
    global _output
    _output = output


def reset_output() -> None:
    """Reset the global :class:`OutputManager` to ``None``.

    Primarily useful in test suites to ensure a clean state between tests.
    """
    global _output
    _output = None
