"""Terminal output for the ``manforge`` command.

Generated pages and listings are *data* and go to stdout, so that
``manforge show app:cli | man -l -`` works. Everything else (the "Wrote
..." summary, warnings about lossy Click options, errors, ``--verbose``
traces) is a *diagnostic* and goes to stderr.

Rich is used on an interactive terminal. Piped output, ``NO_COLOR``,
``TERM=dumb`` and ``--no-color`` all fall back to plain text.

Library code (the generator, :mod:`manforge.introspect`, the doc tool)
reports through the module-level functions, which forward to the manager
installed by :func:`set_output`. When nothing is installed a default
manager is created on first use.
"""

from __future__ import annotations

import json
import os
import sys
from enum import Enum
from typing import Optional

from rich.console import Console
from rich.table import Table


class OutputFormat(str, Enum):
    """How stdout data is formatted. ``AUTO`` picks ``RICH`` or ``PLAIN``."""

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


class OutputManager:
    """Routes data to stdout and diagnostics to stderr.

    Args:
        format: Format for tables on stdout. ``AUTO`` becomes ``RICH`` on a
            colour-capable TTY and ``PLAIN`` otherwise.
        no_color: Force plain, unstyled diagnostics.
        quiet: Drop success messages. Warnings and errors are always shown.
        verbose: Show debug messages (files written, commands skipped).
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

        if format == OutputFormat.AUTO:
            rich_ok = _is_tty() and not self._no_color
            format = OutputFormat.RICH if rich_ok else OutputFormat.PLAIN
        self._format = format

        self._stdout = Console(
            file=sys.stdout,
            no_color=self._no_color,
            force_terminal=(format == OutputFormat.RICH),
        )
        self._stderr = Console(file=sys.stderr, no_color=self._no_color, stderr=True)

    @property
    def format(self) -> OutputFormat:
        return self._format

    @property
    def is_quiet(self) -> bool:
        return self._quiet

    @property
    def is_verbose(self) -> bool:
        return self._verbose

    # -- stdout ---------------------------------------------------------- #

    def print_data(self, text: str) -> None:
        """Write *text* to stdout unchanged (a rendered page, a script)."""
        print(text, file=sys.stdout, flush=True)

    def print_table(
        self,
        headers: list[str],
        rows: list[list[str]],
        title: Optional[str] = None,
    ) -> None:
        """Write a table to stdout.

        JSON mode emits a list of objects keyed by *headers*; plain mode emits
        tab-separated lines with the headers first; rich mode draws a
        :class:`~rich.table.Table` with *title*.
        """
        if self._format == OutputFormat.JSON:
            records = [dict(zip(headers, row)) for row in rows]
            self.print_data(json.dumps(records, indent=2, ensure_ascii=False))
            return

        if self._format == OutputFormat.PLAIN:
            for line in [headers, *rows]:
                self.print_data("\t".join(line))
            return

        table = Table(title=title, show_header=True, header_style="bold cyan")
        for header in headers:
            table.add_column(header)
        for row in rows:
            table.add_row(*row)
        self._stdout.print(table)

    # -- stderr ---------------------------------------------------------- #

    def success(self, message: str) -> None:
        """Report a finished run, e.g. ``Generated 4 page(s) in man``."""
        if not self._quiet:
            self._diagnostic(message, "[green]{}[/green]")

    def warning(self, message: str) -> None:
        """Report something documented differently from how it was declared."""
        self._diagnostic(f"Warning: {message}", "[yellow]Warning:[/yellow] {}", message)

    def error(self, message: str) -> None:
        """Report a failure. Never suppressed."""
        self._diagnostic(f"Error: {message}", "[bold red]Error:[/bold red] {}", message)

    def debug(self, message: str) -> None:
        """Trace a step of the run. Only shown with ``--verbose``."""
        if self._verbose:
            self._diagnostic(f"[debug] {message}", "[dim]\\[debug] {}[/dim]", message)

    def _diagnostic(self, plain: str, markup: str, body: Optional[str] = None) -> None:
        if self._no_color:
            print(plain, file=sys.stderr, flush=True)
        else:
            self._stderr.print(markup.format(plain if body is None else body))


def _is_tty() -> bool:
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _should_disable_color() -> bool:
    """True when ``NO_COLOR`` is set (to anything) or ``TERM`` is ``dumb``."""
    return "NO_COLOR" in os.environ or os.environ.get("TERM") == "dumb"


# -- global manager ------------------------------------------------------ #

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the installed :class:`OutputManager`, creating a default one."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    global _output
    _output = output


def reset_output() -> None:
    """Forget the installed manager. Tests call this between cases."""
    global _output
    _output = None


def print_data(text: str) -> None:
    get_output().print_data(text)


def print_table(
    headers: list[str],
    rows: list[list[str]],
    title: Optional[str] = None,
) -> None:
    get_output().print_table(headers, rows, title)


def success(message: str) -> None:
    get_output().success(message)


def warning(message: str) -> None:
    get_output().warning(message)


def error(message: str) -> None:
    get_output().error(message)


def debug(message: str) -> None:
    get_output().debug(message)
