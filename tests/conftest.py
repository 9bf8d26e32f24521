"""Shared test fixtures for manforge.

Provides reusable command trees, a fixed generation date, isolated config
environments, output state management and a CLI runner. These fixtures are
automatically discovered by pytest and available to all test modules
without explicit imports.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

import click
import pytest

from manforge.models import ArgPolicy, CommandNode, FlagSpec, GenerationOptions
from manforge.output import OutputFormat, OutputManager, reset_output, set_output


FIXED_DATE = datetime(1968, 6, 1)


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time.  When Typer's CliRunner redirects those streams during
    a test and the test finishes, the cached references become stale
    ("I/O operation on closed file").  Resetting forces a fresh manager
    to be created on next use.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Command tree fixtures
# ---------------------------------------------------------------------------


def make_tree() -> CommandNode:
    """Build the ``foo`` tree used across the suite.

    ::

        foo                 persistent --verbose/-v, own --config
        +-- bar             --output/-o FILE, hidden --secret, deprecated --old
        +-- cat
        +-- zap (hidden)
        +-- old (deprecated)
        +-- topics          help topic (not runnable, no children)
    """
    return CommandNode(
        name="foo",
        short="Foo does things",
        long="Foo does many things.\n\nIt does them well.",
        flags=[
            FlagSpec(name="verbose", shorthand="v", usage="Be chatty", no_opt_default="true",
                     default="false", persistent=True),
            FlagSpec(name="config", default="foo.toml", usage="Config file"),
        ],
        children=[
            CommandNode(
                name="bar",
                short="Bar the foo",
                usage="[flags] NAME",
                arg_policy=ArgPolicy.CUSTOM,
                flags=[
                    FlagSpec(name="output", shorthand="o", default="-", usage="Write to FILE",
                             annotations={"man-arg-hints": "FILE"}),
                    FlagSpec(name="secret", usage="Hidden flag", hidden=True),
                    FlagSpec(name="old", usage="Old flag", deprecated="use --output"),
                ],
            ),
            CommandNode(name="cat", short="Cat the foo", arg_policy=ArgPolicy.NONE),
            CommandNode(name="zap", short="Hidden", hidden=True),
            CommandNode(name="old", short="Deprecated", deprecated="use cat"),
            CommandNode(name="topics", short="Help topic", runnable=False),
        ],
    )


@pytest.fixture
def foo_tree() -> CommandNode:
    """A fresh ``foo`` command tree (see :func:`make_tree`)."""
    return make_tree()


@pytest.fixture
def fixed_options(tmp_path: Path) -> GenerationOptions:
    """Generation options with a fixed date writing into ``tmp_path / "out"``."""
    return GenerationOptions(date=FIXED_DATE, directory=str(tmp_path / "out"))


@pytest.fixture
def click_app() -> click.Group:
    """A small Click application with a nested group."""

    @click.group(help="Manage widgets.\n\nLonger description here.")
    @click.option("--verbose", "-v", is_flag=True, help="Be chatty.")
    def cli(verbose: bool) -> None:
        pass

    @cli.command(short_help="Create a widget.", epilog="widgets create spoon")
    @click.option("--color", "-c", default="red", help="Widget color.")
    @click.option("--path", metavar="FILE", help="Where to save it.")
    @click.option("--legacy", hidden=True, help="Old behaviour.")
    @click.argument("name")
    def create(color: str, path: str, legacy: str, name: str) -> None:
        """Create a widget called NAME."""

    @cli.group()
    def admin() -> None:
        """Administrative commands."""

    @admin.command()
    def purge() -> None:
        """Remove every widget."""

    cli.add_command(click.Command("topics", help="About widgets."))
    return cli


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Sets XDG_DATA_HOME to a subdirectory of tmp_path so that crash logs
    never touch real user data, clears all MANFORGE_* environment
    variables, and changes the working directory to tmp_path.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    for var in [
        "MANFORGE_SECTION",
        "MANFORGE_DIRECTORY",
        "MANFORGE_TEMPLATE",
        "MANFORGE_AUTHOR",
    ]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a PLAIN-format, quiet OutputManager for the test."""
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True)
    set_output(output)
    yield output
    reset_output()


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
