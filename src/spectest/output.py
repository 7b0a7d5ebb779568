"""Console output for spectest commands.

Data and diagnostics never share a stream:

* **stdout** carries what a user may redirect: generated source from
  ``make --dry-run``, the ``list`` catalog and ``config show`` dumps.
* **stderr** carries progress, warnings, errors and next-step hints.

Rich formatting is used when stdout is a terminal; piped output falls back to
plain text. ``NO_COLOR``, ``TERM=dumb`` and ``--no-color`` all disable colour.

:func:`~spectest.app.main_callback` builds one :class:`OutputManager` per
invocation and installs it with :func:`set_output`. Pipeline code reports
through the module-level helpers (:func:`info`, :func:`warning`, ...), which
delegate to that instance.
"""

from __future__ import annotations

import json
import os
import sys
from enum import Enum
from typing import Any, NamedTuple, Optional

from rich.console import Console
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table


class OutputFormat(str, Enum):
    """How data written to stdout is rendered.

    ``AUTO`` becomes ``RICH`` on a colour-capable terminal and ``PLAIN``
    everywhere else.
    """

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


class _Level(NamedTuple):
    prefix: str
    style: Optional[str]
    quiet_hides: bool


_LEVELS: dict[str, _Level] = {
    "info": _Level("", None, True),
    "success": _Level("", "green", True),
    "suggest": _Level("→ ", "dim", True),
    "warning": _Level("Warning: ", "yellow", False),
    "error": _Level("Error: ", "bold red", False),
    "debug": _Level("[debug] ", "dim", False),
}


class OutputManager:
    """Routes data to stdout and diagnostics to stderr.

    Args:
        format: Rendering for stdout data. ``AUTO`` is resolved here.
        no_color: Strip colour from both streams.
        quiet: Hide info, success and suggestion lines. Warnings and errors
            are always shown.
        verbose: Show debug lines.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.AUTO,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
    ) -> None:
        self._no_color = no_color or _should_disable_color()
        self._quiet = quiet
        self._verbose = verbose

        if format != OutputFormat.AUTO:
            self._format = format
        elif _is_tty() and not self._no_color:
            self._format = OutputFormat.RICH
        else:
            self._format = OutputFormat.PLAIN

        self._stdout = Console(
            file=sys.stdout,
            no_color=self._no_color,
            force_terminal=self._format == OutputFormat.RICH,
        )
        self._stderr = Console(file=sys.stderr, no_color=self._no_color, stderr=True)

    @property
    def format(self) -> OutputFormat:
        """The resolved output format."""
        return self._format

    # ------------------------------------------------------------------ #
    # stdout
    # ------------------------------------------------------------------ #

    def print_data(self, text: str) -> None:
        """Write one line of raw text to stdout."""
        print(text, file=sys.stdout, flush=True)

    def format_response(self, data: Any) -> None:
        """Write a dict or list to stdout.

        JSON mode dumps it, plain mode writes ``key<TAB>value`` lines for a
        dict (one line per item for a list), and Rich mode highlights the JSON.
        """
        if self._format == OutputFormat.PLAIN:
            if isinstance(data, dict):
                lines = [f"{key}\t{'' if value is None else value}" for key, value in data.items()]
            else:
                lines = [str(item) for item in (data if isinstance(data, list) else [data])]
            for line in lines:
                self.print_data(line)
            return

        dumped = json.dumps(data, indent=2, ensure_ascii=False, default=str)
        if self._format == OutputFormat.JSON:
            self.print_data(dumped)
        else:
            self._stdout.print(Syntax(dumped, "json", theme="monokai", word_wrap=True))

    def print_source(self, source: str) -> None:
        """Write generated Python source to stdout.

        Only Rich mode highlights it. Every other mode writes the text
        unchanged, so ``spectest make ... --dry-run > test_x.py`` yields a valid
        module.
        """
        if self._format == OutputFormat.RICH:
            self._stdout.print(Syntax(source, "python", theme="monokai"))
            return
        sys.stdout.write(source)
        sys.stdout.flush()

    def print_table(
        self,
        headers: list[str],
        rows: list[list[str]],
        title: Optional[str] = None,
    ) -> None:
        """Write a table to stdout.

        JSON mode emits a list of objects keyed by header, plain mode emits
        tab-separated lines with a header row, and Rich mode draws a
        :class:`~rich.table.Table` (the only mode that shows *title*).
        """
        if self._format == OutputFormat.JSON:
            self.print_data(
                json.dumps([dict(zip(headers, row)) for row in rows], indent=2, ensure_ascii=False)
            )
            return
        if self._format == OutputFormat.PLAIN:
            for row in [headers, *rows]:
                self.print_data("\t".join(row))
            return

        table = Table(title=title, header_style="bold cyan")
        for header in headers:
            table.add_column(header)
        for row in rows:
            table.add_row(*map(escape, row))
        self._stdout.print(table)

    # ------------------------------------------------------------------ #
    # stderr
    # ------------------------------------------------------------------ #

    def _diagnostic(self, level: str, message: str) -> None:
        lvl = _LEVELS[level]
        if lvl.quiet_hides and self._quiet:
            return
        if self._no_color:
            print(f"{lvl.prefix}{message}", file=sys.stderr, flush=True)
            return
        self._stderr.print(
            f"{lvl.prefix}{message}", style=lvl.style, markup=False, highlight=False
        )

    def info(self, message: str) -> None:
        self._diagnostic("info", message)

    def success(self, message: str) -> None:
        self._diagnostic("success", message)

    def suggest(self, message: str) -> None:
        """Show a follow-up command the user may want to run next."""
        self._diagnostic("suggest", message)

    def warning(self, message: str) -> None:
        self._diagnostic("warning", message)

    def error(self, message: str) -> None:
        self._diagnostic("error", message)

    def debug(self, message: str) -> None:
        if self._verbose:
            self._diagnostic("debug", message)


def _is_tty() -> bool:
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _should_disable_color() -> bool:
    """``True`` when ``NO_COLOR`` is set to any value or ``TERM`` is ``dumb``."""
    return "NO_COLOR" in os.environ or os.environ.get("TERM") == "dumb"


# ------------------------------------------------------------------ #
# Process-wide instance
# ------------------------------------------------------------------ #

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the installed :class:`OutputManager`, building a default one if needed."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    global _output
    _output = output


def reset_output() -> None:
    """Forget the installed manager (used between tests)."""
    global _output
    _output = None


def print_data(text: str) -> None:
    get_output().print_data(text)


def format_response(data: Any) -> None:
    get_output().format_response(data)


def print_source(source: str) -> None:
    get_output().print_source(source)


def print_table(headers: list[str], rows: list[list[str]], title: Optional[str] = None) -> None:
    get_output().print_table(headers, rows, title)


def info(message: str) -> None:
    get_output().info(message)


def success(message: str) -> None:
    get_output().success(message)


def suggest(message: str) -> None:
    get_output().suggest(message)


def warning(message: str) -> None:
    get_output().warning(message)


def error(message: str) -> None:
    get_output().error(message)


def debug(message: str) -> None:
    get_output().debug(message)
