"""Shell completion scripts for a documented application.

The scripts come from Click's own :mod:`click.shell_completion` support, so
they complete exactly what the application accepts at runtime. The script
calls back into the program through the ``_<PROG>_COMPLETE`` environment
variable, which is why the program name must match the installed
executable.

Supported shells: bash, zsh, fish.
"""

from __future__ import annotations

from pathlib import Path
from typing import Union

import click
import typer
from click.shell_completion import get_completion_class

from manforge.exceptions import GenerationError, InvalidUsageError
from manforge.introspect import as_click_command

SUPPORTED_SHELLS = ("bash", "zsh", "fish")


def complete_var(prog_name: str) -> str:
    """Environment variable Click checks to enter completion mode.

    >>> complete_var("my-tool")
    '_MY_TOOL_COMPLETE'
    """
    return f"_{prog_name.replace('-', '_').replace('.', '_').upper()}_COMPLETE"


def completion_script(
    app: Union[click.Command, typer.Typer],
    prog_name: str,
    shell: str = "bash",
) -> str:
    """Return the completion script for *app* in *shell*.

    Raises:
        InvalidUsageError: If *shell* is not supported.
    """
    if shell not in SUPPORTED_SHELLS:
        raise InvalidUsageError(
            f"Unsupported shell: {shell}. Supported: {', '.join(SUPPORTED_SHELLS)}"
        )
    command = as_click_command(app)
    comp_cls = get_completion_class(shell)
    if comp_cls is None:
        raise InvalidUsageError(f"Click has no completion support for {shell}")
    comp = comp_cls(command, {}, prog_name, complete_var(prog_name))
    return comp.source()


def write_completion_file(
    app: Union[click.Command, typer.Typer],
    prog_name: str,
    path: Union[str, Path],
    shell: str = "bash",
) -> Path:
    """Write the completion script for *app* to *path* and return the path.

    Raises:
        InvalidUsageError: If *shell* is not supported.
        GenerationError: If the file cannot be written.
    """
    script = completion_script(app, prog_name, shell)
    path = Path(path)
    try:
        path.write_text(script, encoding="utf-8")
    except OSError as exc:
        raise GenerationError(f"Cannot write {path}: {exc}") from exc
    return path
