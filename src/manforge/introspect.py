"""Read a Click or Typer application into a :class:`~manforge.models.CommandNode` tree.

The generator only understands :class:`~manforge.models.CommandNode`; this
module is the bridge from the command-line framework. It never invokes the
application: each command gets a bare :class:`click.Context` so that Click
can report its usage pieces, and everything else is read from attributes.

Mapping summary:

* ``help`` -> long description (text after ``\\f`` is dropped),
  ``short_help`` or the first sentence of ``help`` -> short description,
  ``epilog`` -> examples.
* :class:`click.Option` -> :class:`~manforge.models.FlagSpec`. Options
  declared on a group are persistent, so sub-command pages list them as
  inherited. An explicit ``metavar`` becomes the ``man-arg-hints``
  annotation.
* :class:`click.Argument` params make the argument policy ``custom``;
  ``allow_extra_args`` makes it ``arbitrary``; otherwise ``none``.
* A command without a callback (and a group that cannot run on its own) is
  not runnable, so an empty one is treated as a help topic.

Click has no notion of per-command annotations, so they are passed in as a
mapping keyed by command path::

    root = from_click(cli, prog_name="zap", annotations={
        "zap serve": {"man-environment-section": "ZAP_PORT sets the port."},
    })
"""

from __future__ import annotations

from typing import Any, Mapping, Optional, Union

import click
import typer

from manforge.exceptions import TargetError
from manforge.models import ARG_HINT_KEY, ArgPolicy, CommandNode, FlagSpec
from manforge.output import warning

Annotations = Mapping[str, Mapping[str, str]]


def as_click_command(app: Union[click.Command, typer.Typer]) -> click.Command:
    """Return the Click command behind *app* (Typer apps are compiled)."""
    if isinstance(app, typer.Typer):
        return typer.main.get_command(app)
    if isinstance(app, click.Command):
        return app
    raise TargetError(f"Expected a Click command or Typer app, got {type(app).__name__}")


def from_click(
    app: Union[click.Command, typer.Typer],
    prog_name: Optional[str] = None,
    annotations: Optional[Annotations] = None,
) -> CommandNode:
    """Convert a Click command (or Typer app) and its sub-commands.

    Args:
        app: The application's root command or Typer app.
        prog_name: Name of the root command. Defaults to the command's own
            name, which Typer apps often leave unset.
        annotations: Per-command annotations keyed by command path
            (e.g. ``"zap serve"``).

    Returns:
        The root :class:`~manforge.models.CommandNode`.

    Raises:
        TargetError: If *app* is neither a Click command nor a Typer app.
    """
    command = as_click_command(app)
    name = prog_name if prog_name is not None else (command.name or "")
    return _convert(command, name, None, name, annotations or {})


def _convert(
    command: click.Command,
    name: str,
    parent_ctx: Optional[click.Context],
    path: str,
    annotations: Annotations,
) -> CommandNode:
    ctx = click.Context(command, info_name=name, parent=parent_ctx)
    is_group = isinstance(command, click.Group)

    help_text = (command.help or "").split("\f", 1)[0].strip()
    node = CommandNode(
        name=name,
        short=command.get_short_help_str(limit=300) if (command.short_help or help_text) else "",
        long=help_text,
        usage=" ".join(command.collect_usage_pieces(ctx)),
        example=(command.epilog or "").strip(),
        annotations=dict(annotations.get(path, {})),
        flags=[
            _flag_spec(param, ctx, persistent=is_group)
            for param in command.params
            if isinstance(param, click.Option)
        ],
        arg_policy=_arg_policy(command),
        hidden=command.hidden,
        deprecated=_deprecation(command.deprecated),
        runnable=_is_runnable(command),
    )

    if is_group:
        for sub_name, sub in command.commands.items():
            sub_path = f"{path} {sub_name}" if path else sub_name
            node.add_command(_convert(sub, sub_name, ctx, sub_path, annotations))
    return node


def _flag_spec(option: click.Option, ctx: click.Context, persistent: bool) -> FlagSpec:
    long_opts = [o for o in option.opts if o.startswith("--")]
    short_opts = [o for o in option.opts if len(o) == 2 and o[0] == "-" and o[1] != "-"]
    name = long_opts[0][2:] if long_opts else option.opts[0].lstrip("-")
    if not long_opts:
        warning(
            f"Option {option.opts[0]} of '{ctx.command_path}' has no long name; "
            f"documented as --{name}"
        )
    switch = option.is_flag or option.count

    annotations: dict[str, str] = {}
    if option.metavar:
        annotations[ARG_HINT_KEY] = option.metavar

    return FlagSpec(
        name=name,
        shorthand=short_opts[0][1] if (long_opts and short_opts) else "",
        default=_display_default(option.get_default(ctx, call=False)),
        usage=option.help or "",
        no_opt_default="true" if switch else "",
        deprecated=_deprecation(getattr(option, "deprecated", False)),
        hidden=option.hidden,
        persistent=persistent,
        annotations=annotations,
    )


def _display_default(value: Any) -> str:
    if value is None or callable(value):
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return ", ".join(str(v) for v in value)
    return str(getattr(value, "value", value))


def _arg_policy(command: click.Command) -> ArgPolicy:
    if command.allow_extra_args:
        return ArgPolicy.ARBITRARY
    if any(isinstance(p, click.Argument) for p in command.params):
        return ArgPolicy.CUSTOM
    return ArgPolicy.NONE


def _is_runnable(command: click.Command) -> bool:
    if command.callback is None:
        return False
    if isinstance(command, click.Group):
        return command.invoke_without_command
    return True


def _deprecation(value: Union[bool, str, None]) -> str:
    if isinstance(value, str):
        return value or ""
    return "deprecated" if value else ""
