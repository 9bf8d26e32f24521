"""Drop-in ``doc`` command for applications that want to ship their own docs.

:class:`DocGenTool` builds a small Typer application that generates
documentation for *another* application. Each attached generator becomes a
sub-command, and a shared ``--directory`` option chooses where files go::

    from manforge import DocGenTool, GenerationOptions

    tool = (
        DocGenTool(cli, prog_name="zap")
        .add_doc_generator(GenerationOptions(section="1"), "troff")
        .add_doc_generator(GenerationOptions(), "markdown")
        .add_completion_generator("zap.bash")
    )
    raise SystemExit(tool.execute())

which gives::

    doc --directory man generate-troff
    doc generate-markdown
    doc generate-auto-complete

``tool.command`` is the underlying Typer app, so it can also be mounted in
the documented application itself with ``cli.add_typer(tool.command,
name="doc")``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence, Union

import click
import typer

from manforge.completion import write_completion_file
from manforge.exceptions import (
    EmptyCommandNameError,
    InvalidTemplateError,
    ManforgeError,
)
from manforge.exit_codes import EXIT_GENERIC_FAILURE, EXIT_SUCCESS
from manforge.generator import generate_docs
from manforge.introspect import Annotations, as_click_command, from_click
from manforge.models import GenerationOptions
from manforge.output import error, success
from manforge.templates import TemplateRegistry


class DocGenTool:
    """A ``doc`` command that generates documentation for *app*.

    Args:
        app: The documented Click command or Typer app.
        prog_name: Name of the documented program. Defaults to the root
            command's name.
        annotations: Per-command annotations keyed by command path, passed
            to :func:`~manforge.introspect.from_click`.
        registry: Templates to use. Defaults to the built-in templates.
    """

    def __init__(
        self,
        app: Union[click.Command, typer.Typer],
        prog_name: Optional[str] = None,
        annotations: Optional[Annotations] = None,
        registry: Optional[TemplateRegistry] = None,
    ) -> None:
        self._target = app
        self._prog_name = prog_name
        self._annotations = annotations
        self._registry = registry if registry is not None else TemplateRegistry.with_builtins()
        self._app = typer.Typer(
            name="doc",
            help="Generate documentation, etc.",
            no_args_is_help=True,
            add_completion=False,
        )
        self._app.callback()(_doc_callback)

    @property
    def command(self) -> typer.Typer:
        """The ``doc`` Typer app."""
        return self._app

    @property
    def registry(self) -> TemplateRegistry:
        return self._registry

    def add_doc_generator(self, options: GenerationOptions, template_name: str) -> DocGenTool:
        """Add a ``generate-<template_name>`` sub-command.

        The ``--directory`` option of the ``doc`` command replaces
        ``options.directory``.

        Raises:
            InvalidTemplateError: If *template_name* is not registered.
        """
        if template_name not in self._registry:
            raise InvalidTemplateError(
                f"No template named '{template_name}' is registered "
                f"(available: {', '.join(self._registry.names()) or 'none'})"
            )

        def generate(ctx: typer.Context) -> None:
            directory = ctx.obj["directory"]
            run_options = options.model_copy(
                update={"directory": directory, "template": template_name}
            )
            try:
                root = from_click(self._target, self._prog_name, self._annotations)
                paths = generate_docs(root, run_options, self._registry)
            except ManforgeError as exc:
                error(str(exc))
                raise typer.Exit(code=exc.exit_code)
            success(f"Generated {len(paths)} {template_name} page(s) in {directory}")

        self._app.command(
            f"generate-{template_name}",
            help=f"Generate docs with the {template_name} template",
        )(generate)
        return self

    def add_completion_generator(self, file_name: str, shell: str = "bash") -> DocGenTool:
        """Add a ``generate-auto-complete`` sub-command writing ``<directory>/<file_name>``."""

        def generate_auto_complete(ctx: typer.Context) -> None:
            path = Path(ctx.obj["directory"]) / file_name
            try:
                prog_name = self._resolve_prog_name()
                write_completion_file(self._target, prog_name, path, shell)
            except ManforgeError as exc:
                error(str(exc))
                raise typer.Exit(code=exc.exit_code)
            success(f"Wrote {shell} completion to {path}")

        self._app.command(
            "generate-auto-complete",
            help=f"Generate {shell} auto complete script",
        )(generate_auto_complete)
        return self

    def execute(self, args: Optional[Sequence[str]] = None) -> int:
        """Run the ``doc`` command and return its exit code.

        Args:
            args: Command-line arguments. Defaults to ``sys.argv[1:]``.
        """
        command = typer.main.get_command(self._app)
        try:
            rv = command.main(
                args=list(args) if args is not None else None,
                prog_name="doc",
                standalone_mode=False,
            )
        except click.ClickException as exc:
            exc.show()
            return exc.exit_code
        except click.Abort:
            error("Aborted.")
            return EXIT_GENERIC_FAILURE
        return rv if isinstance(rv, int) else EXIT_SUCCESS

    def _resolve_prog_name(self) -> str:
        name = self._prog_name or as_click_command(self._target).name
        if not name:
            raise EmptyCommandNameError("you need a command name to have a completion script")
        return name


def _doc_callback(
    ctx: typer.Context,
    directory: str = typer.Option(
        ".", "--directory", help="Directory to install generated files"
    ),
) -> None:
    ctx.ensure_object(dict)
    ctx.obj["directory"] = directory
