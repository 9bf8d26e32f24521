"""Tests for manforge.introspect -- Click/Typer to command tree.

Covers:
- Names, descriptions, usage and examples read from Click commands
- Option to flag mapping (shorthand, defaults, switches, metavar, hidden)
- Options with only a short name are reported as a warning
- Group options become persistent flags
- Argument policy detection
- Help topics (commands without a callback)
- Annotations keyed by command path
- Typer apps are accepted
- Anything else is rejected
"""

from __future__ import annotations

import click
import pytest
import typer

from manforge.exceptions import TargetError
from manforge.introspect import as_click_command, from_click
from manforge.models import ARG_HINT_KEY, ArgPolicy
from manforge.output import OutputFormat, OutputManager, set_output


def _child(node, name):
    return next(c for c in node.children if c.name == name)


class TestCommands:
    def test_root_name_defaults_to_command_name(self, click_app):
        assert from_click(click_app).name == "cli"

    def test_prog_name_overrides(self, click_app):
        root = from_click(click_app, prog_name="widgets")
        assert root.name == "widgets"
        assert _child(root, "create").command_path == "widgets create"

    def test_descriptions(self, click_app):
        root = from_click(click_app, prog_name="widgets")
        assert root.short == "Manage widgets."
        assert root.long == "Manage widgets.\n\nLonger description here."
        create = _child(root, "create")
        assert create.short == "Create a widget."
        assert create.long == "Create a widget called NAME."

    def test_epilog_is_example(self, click_app):
        create = _child(from_click(click_app), "create")
        assert create.example == "widgets create spoon"

    def test_usage_pieces(self, click_app):
        create = _child(from_click(click_app), "create")
        assert create.usage == "[OPTIONS] NAME"
        assert create.use_line == "cli create [OPTIONS] NAME"

    def test_declaration_order(self, click_app):
        assert [c.name for c in from_click(click_app).children] == ["create", "admin", "topics"]

    def test_nested_group(self, click_app):
        purge = _child(_child(from_click(click_app), "admin"), "purge")
        assert purge.command_path == "cli admin purge"
        assert purge.short == "Remove every widget."

    def test_help_topic(self, click_app):
        topics = _child(from_click(click_app), "topics")
        assert not topics.runnable
        assert topics.is_help_topic

    def test_group_without_invoke_is_not_runnable_but_available(self, click_app):
        root = from_click(click_app)
        assert not root.runnable
        assert root.is_available

    def test_hidden_and_deprecated_commands(self):
        @click.group()
        def cli() -> None:
            pass

        @cli.command(hidden=True)
        def secret() -> None:
            pass

        @cli.command(deprecated=True)
        def legacy() -> None:
            pass

        root = from_click(cli)
        assert _child(root, "secret").hidden
        assert _child(root, "legacy").deprecated == "deprecated"
        assert not _child(root, "legacy").is_available


class TestFlags:
    def test_group_options_are_persistent(self, click_app):
        root = from_click(click_app)
        (verbose,) = root.flags
        assert verbose.persistent
        assert verbose.name == "verbose"
        assert verbose.shorthand == "v"
        assert verbose.no_opt_default == "true"
        assert verbose.default == "false"

    def test_command_options(self, click_app):
        create = _child(from_click(click_app), "create")
        by_name = {f.name: f for f in create.flags}
        assert set(by_name) == {"color", "path", "legacy"}
        assert by_name["color"].shorthand == "c"
        assert by_name["color"].default == "red"
        assert by_name["color"].usage == "Widget color."
        assert not by_name["color"].persistent
        assert by_name["path"].default == ""
        assert by_name["path"].annotations == {ARG_HINT_KEY: "FILE"}
        assert by_name["legacy"].hidden

    def test_inherited_from_group(self, click_app):
        create = _child(from_click(click_app), "create")
        assert [f.name for f in create.inherited_flags()] == ["verbose"]

    def test_short_only_option(self):
        @click.command()
        @click.option("-n", default=3, help="Count.")
        def cmd(n: int) -> None:
            pass

        (flag,) = from_click(cmd).flags
        assert flag.name == "n"
        assert flag.shorthand == ""
        assert flag.default == "3"

    def test_short_only_option_warns(self, capfd):
        set_output(OutputManager(format=OutputFormat.PLAIN, no_color=True))

        @click.group(name="tool")
        def tool() -> None:
            pass

        @tool.command()
        @click.option("-n", default=3)
        @click.option("--limit", "-l", default=1)
        def run(n: int, limit: int) -> None:
            pass

        from_click(tool)
        err = capfd.readouterr().err
        assert "Warning: Option -n of 'tool run' has no long name; documented as --n" in err
        assert "--limit" not in err

    def test_callable_default_is_not_shown(self):
        @click.command()
        @click.option("--when", default=lambda: "now")
        def cmd(when: str) -> None:
            pass

        assert from_click(cmd).flags[0].default == ""

    def test_multiple_default(self):
        @click.command()
        @click.option("--tag", multiple=True, default=["a", "b"])
        def cmd(tag: tuple) -> None:
            pass

        assert from_click(cmd).flags[0].default == "a, b"


class TestArgPolicy:
    def test_arguments_make_custom(self, click_app):
        assert _child(from_click(click_app), "create").arg_policy is ArgPolicy.CUSTOM

    def test_no_arguments_make_none(self, click_app):
        purge = _child(_child(from_click(click_app), "admin"), "purge")
        assert purge.arg_policy is ArgPolicy.NONE

    def test_extra_args_make_arbitrary(self):
        @click.command(context_settings={"allow_extra_args": True, "ignore_unknown_options": True})
        def passthrough() -> None:
            pass

        assert from_click(passthrough).arg_policy is ArgPolicy.ARBITRARY


class TestAnnotations:
    def test_annotations_by_command_path(self, click_app):
        root = from_click(
            click_app,
            prog_name="widgets",
            annotations={"widgets create": {"man-bugs-section": "Spoons bend."}},
        )
        assert _child(root, "create").annotations == {"man-bugs-section": "Spoons bend."}
        assert root.annotations == {}


class TestTyper:
    @pytest.fixture
    def typer_app(self) -> typer.Typer:
        app = typer.Typer(add_completion=False)

        @app.callback()
        def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Be chatty.")) -> None:
            """Tool for greetings."""

        @app.command()
        def hello(name: str, count: int = typer.Option(1, help="How many times.")) -> None:
            """Say hello to NAME."""

        @app.command()
        def bye() -> None:
            """Say goodbye."""

        return app

    def test_typer_tree(self, typer_app):
        root = from_click(typer_app, prog_name="greet")
        assert root.name == "greet"
        assert root.short == "Tool for greetings."
        assert [c.name for c in root.children] == ["hello", "bye"]

    def test_typer_flags(self, typer_app):
        hello = _child(from_click(typer_app, prog_name="greet"), "hello")
        (count,) = [f for f in hello.flags if f.name == "count"]
        assert count.default == "1"
        assert count.usage == "How many times."
        assert hello.arg_policy is ArgPolicy.CUSTOM

    def test_as_click_command(self, typer_app):
        assert isinstance(as_click_command(typer_app), click.Group)


class TestRejects:
    def test_not_a_command(self):
        with pytest.raises(TargetError):
            from_click("not an app")  # type: ignore[arg-type]
