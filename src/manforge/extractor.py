"""Turn a :class:`~manforge.models.CommandNode` into a :class:`~manforge.models.ManPage`.

The extractor is the only place that knows how a command maps onto the
sections of a page:

* **NAME / SYNOPSIS** -- command path, usage line, short description, and
  the sub-command list (declaration order, help topics skipped).
* **DESCRIPTION** -- the long description, falling back to the short one.
* **OPTIONS** -- three views of the flags (all, inherited, own), each sorted
  by name with hidden and deprecated flags removed.
* **ENVIRONMENT / FILES / BUGS / EXAMPLES** -- a per-command annotation wins
  over the run-wide value; when both are empty the section is left out.
* **SEE ALSO** -- parent, then siblings, then children, both sorted by name.

Free text is *not* escaped here; templates call the helpers from
:mod:`manforge.escape` for the dialect they produce.
"""

from __future__ import annotations

from typing import Iterable

from manforge.models import (
    ARG_HINT_KEY,
    BUGS_SECTION_KEY,
    ENVIRONMENT_SECTION_KEY,
    EXAMPLES_SECTION_KEY,
    FILES_SECTION_KEY,
    ArgPolicy,
    CommandNode,
    FlagRecord,
    FlagSpec,
    GenerationOptions,
    ManPage,
    Relation,
    SeeAlso,
)


def build_page(node: CommandNode, options: GenerationOptions) -> ManPage:
    """Build the template context for *node*.

    Args:
        node: The command to document.
        options: Run options, already passed through
            :meth:`~manforge.models.GenerationOptions.resolved` so that
            ``date`` and ``section`` are set.

    Returns:
        A fresh :class:`~manforge.models.ManPage`.
    """
    assert options.date is not None, "options must be resolved before building pages"

    return ManPage(
        date=options.date,
        section=options.section,
        center_footer=options.center_footer or options.date.strftime("%b %Y"),
        left_footer=options.left_footer,
        center_header=options.center_header,
        use_line=node.use_line,
        command_path=node.command_path,
        short_description=node.short,
        description=node.long or node.short,
        no_args=node.arg_policy is ArgPolicy.NONE,
        all_flags=flag_records(node.all_flags()),
        inherited_flags=flag_records(node.inherited_flags()),
        non_inherited_flags=flag_records(node.own_flags()),
        see_alsos=see_alsos(node, options.section),
        sub_commands=[c.command_path for c in node.children if not c.is_help_topic],
        author=options.author,
        environment=_section(node, ENVIRONMENT_SECTION_KEY, options.environment),
        files=_section(node, FILES_SECTION_KEY, options.files),
        bugs=_section(node, BUGS_SECTION_KEY, options.bugs),
        examples=_section(node, EXAMPLES_SECTION_KEY, node.example),
    )


def flag_records(flags: Iterable[FlagSpec]) -> list[FlagRecord]:
    """Convert flags to records, dropping hidden and deprecated ones.

    A deprecated shorthand is dropped while the flag itself is kept.
    """
    records = []
    for flag in sorted(flags, key=lambda f: f.name):
        if flag.deprecated or flag.hidden:
            continue
        records.append(
            FlagRecord(
                shorthand="" if flag.shorthand_deprecated else flag.shorthand,
                name=flag.name,
                default=flag.default,
                usage=flag.usage,
                no_opt_default=flag.no_opt_default,
                arg_hint=flag.annotations.get(ARG_HINT_KEY, ""),
            )
        )
    return records


def see_alsos(node: CommandNode, section: str) -> list[SeeAlso]:
    """List the pages related to *node*: parent, siblings, then children."""
    related: list[SeeAlso] = []
    parent = node.parent
    if parent is not None:
        related.append(SeeAlso(cmd_path=parent.command_path, section=section, relation=Relation.PARENT))
        for sibling in _listed(parent.children):
            if sibling is node:
                continue
            related.append(
                SeeAlso(cmd_path=sibling.command_path, section=section, relation=Relation.SIBLING)
            )
    for child in _listed(node.children):
        related.append(SeeAlso(cmd_path=child.command_path, section=section, relation=Relation.CHILD))
    return related


def _listed(nodes: Iterable[CommandNode]) -> list[CommandNode]:
    """Available, non-help-topic commands sorted by name."""
    return sorted(
        (n for n in nodes if n.is_available and not n.is_help_topic),
        key=lambda n: n.name,
    )


def _section(node: CommandNode, key: str, default: str) -> str:
    return node.annotations.get(key) or default
