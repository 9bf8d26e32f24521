"""Typer application and CLI entry point for manforge.

The ``manforge`` command documents *other* applications. A target is named
as ``module:attribute`` and must resolve to a Click command or a Typer app::

    manforge generate mypkg.cli:app --prog-name mytool --directory man
    manforge generate mypkg.cli:app --template markdown --directory docs
    manforge show mypkg.cli:app serve --template markdown
    manforge completion mypkg.cli:app --shell zsh --output _mytool
    manforge templates

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. It installs signal handlers and invokes the Typer app.
Unhandled exceptions are written to a crash log under the data directory.

See Also:
    :mod:`manforge.config`: Option resolution (CLI, env, ``manforge.json``).
    :mod:`manforge.output`: Output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import importlib
import io
import os
import signal
import sys
import traceback
from datetime import datetime
from typing import Any, Optional

import click
import typer

from manforge import __version__
from manforge.exceptions import InvalidUsageError, ManforgeError, TargetError
from manforge.exit_codes import EXIT_GENERIC_FAILURE
from manforge.output import debug, error, print_data, print_table, success


app = typer.Typer(
    name="manforge",
    help="Generate man pages and Markdown docs for Click and Typer applications.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"manforge {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    json_output: bool = typer.Option(
        False, "--json", help="JSON output format."
    ),
    plain_output: bool = typer.Option(
        False, "--plain", help="Plain text output."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Initialises the global :class:`~manforge.output.OutputManager` from
    CLI flags.
    """
    from manforge.output import OutputFormat, OutputManager, set_output

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    set_output(OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose))
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose


# ------------------------------------------------------------------ #
# Target loading
# ------------------------------------------------------------------ #


def load_target(target: str) -> Any:
    """Import ``module:attribute`` and return the attribute.

    The current directory is put on ``sys.path`` first so that a project's
    own modules can be documented without installing them.

    Raises:
        TargetError: If the target is malformed, cannot be imported, or is
            neither a Click command nor a Typer app.
    """
    module_name, sep, attr_path = target.partition(":")
    if not sep or not module_name or not attr_path:
        raise TargetError(f"Target must look like 'module:attribute', got '{target}'")

    cwd = os.getcwd()
    if cwd not in sys.path:
        sys.path.insert(0, cwd)

    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise TargetError(f"Cannot import module '{module_name}': {exc}") from exc

    obj: Any = module
    for attr in attr_path.split("."):
        try:
            obj = getattr(obj, attr)
        except AttributeError:
            raise TargetError(f"Module '{module_name}' has no attribute '{attr_path}'") from None

    if not isinstance(obj, (click.Command, typer.Typer)):
        raise TargetError(
            f"'{target}' is a {type(obj).__name__}, not a Click command or Typer app"
        )
    debug(f"Loaded target {target}")
    return obj


# ------------------------------------------------------------------ #
# Commands
# ------------------------------------------------------------------ #


@app.command("generate")
def generate_command(
    target: str = typer.Argument(..., help="Application to document, as module:attribute."),
    template: Optional[str] = typer.Option(
        None, "--template", "-t", help="Template name (troff, mdoc, markdown)."
    ),
    directory: Optional[str] = typer.Option(
        None, "--directory", "-d", help="Directory to write the generated files to."
    ),
    section: Optional[str] = typer.Option(None, "--section", "-s", help="Manual section."),
    author: Optional[str] = typer.Option(None, "--author", help="Author line for every page."),
    prog_name: Optional[str] = typer.Option(
        None, "--prog-name", help="Program name of the documented application."
    ),
) -> None:
    """Write a page for every command of TARGET.

    Unset options fall back to ``MANFORGE_*`` environment variables, then to
    ``./manforge.json``.

    Example::

        manforge generate mypkg.cli:app --prog-name mytool -d man -s 8
    """
    from manforge.config import resolve_options
    from manforge.generator import generate_docs
    from manforge.introspect import from_click

    try:
        options = resolve_options(
            {"template": template, "directory": directory, "section": section, "author": author}
        )
        root = from_click(load_target(target), prog_name=prog_name)
        paths = generate_docs(root, options)
    except ManforgeError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    success(f"Generated {len(paths)} page(s) in {options.directory}")


@app.command("show")
def show_command(
    target: str = typer.Argument(..., help="Application to document, as module:attribute."),
    command_path: Optional[list[str]] = typer.Argument(
        None, help="Sub-command to render, e.g. 'remote add'. Defaults to the root."
    ),
    template: Optional[str] = typer.Option(
        None, "--template", "-t", help="Template name (troff, mdoc, markdown)."
    ),
    section: Optional[str] = typer.Option(None, "--section", "-s", help="Manual section."),
    prog_name: Optional[str] = typer.Option(
        None, "--prog-name", help="Program name of the documented application."
    ),
) -> None:
    """Print the page of a single command to stdout.

    Example::

        manforge show mypkg.cli:app remote add | man -l -
    """
    from manforge.config import resolve_options
    from manforge.generator import generate_page
    from manforge.introspect import from_click

    try:
        options = resolve_options({"template": template, "section": section})
        node = from_click(load_target(target), prog_name=prog_name)
        for name in command_path or []:
            node = _find_child(node, name)
        buffer = io.StringIO()
        generate_page(node, options, buffer)
    except ManforgeError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    print_data(buffer.getvalue().rstrip("\n"))


def _find_child(node: Any, name: str) -> Any:
    for child in node.children:
        if child.name == name:
            return child
    raise InvalidUsageError(f"'{node.command_path}' has no sub-command '{name}'")


@app.command("completion")
def completion_command(
    target: str = typer.Argument(..., help="Application to complete, as module:attribute."),
    shell: str = typer.Option("bash", "--shell", help="Shell (bash, zsh, fish)."),
    output_path: Optional[str] = typer.Option(
        None, "--output", "-o", help="Write the script to this file instead of stdout."
    ),
    prog_name: Optional[str] = typer.Option(
        None, "--prog-name", help="Program name of the completed application."
    ),
) -> None:
    """Print or write the shell completion script for TARGET.

    Example::

        manforge completion mypkg.cli:app --prog-name mytool --shell fish
    """
    from manforge.completion import completion_script, write_completion_file
    from manforge.introspect import as_click_command

    try:
        target_app = load_target(target)
        name = prog_name or as_click_command(target_app).name
        if not name:
            raise InvalidUsageError("Cannot tell the program name; pass --prog-name")
        if output_path is None:
            print_data(completion_script(target_app, name, shell).rstrip("\n"))
            return
        path = write_completion_file(target_app, name, output_path, shell)
    except ManforgeError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    success(f"Wrote {shell} completion to {path}")


@app.command("templates")
def templates_command() -> None:
    """List the built-in templates."""
    from manforge.templates import TemplateRegistry

    rows = [
        [entry.name, entry.separator, entry.extension or "<section>"]
        for entry in TemplateRegistry.with_builtins()
    ]
    print_table(["Name", "Separator", "Extension"], rows, title="Templates")


# ------------------------------------------------------------------ #
# Entry point
# ------------------------------------------------------------------ #


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write a crash traceback to disk and return the log file path."""
    from manforge.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(traceback.format_exc())
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``manforge`` console script.

    :class:`~manforge.exceptions.ManforgeError` instances that escape a
    command cause a clean exit with the error's ``exit_code``. All other
    exceptions produce a crash log and a generic failure exit.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        if isinstance(exc, ManforgeError):
            error(str(exc))
            sys.exit(exc.exit_code)
        log_path = _write_crash_log(exc)
        error(f"Unexpected error. Debug log: {log_path}")
        sys.exit(EXIT_GENERIC_FAILURE)
