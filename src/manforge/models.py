"""Canonical Pydantic models shared across all manforge modules.

This is the single source of truth for data shapes in the project. The models
fall into three groups:

**Command tree models** -- the read-only input to the pipeline:
    :class:`ArgPolicy`, :class:`FlagSpec`, and :class:`CommandNode`. They are
    normally produced by :func:`manforge.introspect.from_click` from a Click
    or Typer application, but can be built by hand for any other framework.

**Run configuration** -- :class:`GenerationOptions`, built once per
generation run and resolved against the chosen template.

**Page models** -- the flat, template-facing projection of one command:
    :class:`FlagRecord`, :class:`Relation`, :class:`SeeAlso`, and
    :class:`ManPage`. Produced by :func:`manforge.extractor.build_page` and
    handed to the template as its render context.
"""

from __future__ import annotations

import enum
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr


# --- Annotation keys ---

FILES_SECTION_KEY = "man-files-section"
"""Command annotation overriding the FILES section for one command."""

BUGS_SECTION_KEY = "man-bugs-section"
"""Command annotation overriding the BUGS section for one command."""

ENVIRONMENT_SECTION_KEY = "man-environment-section"
"""Command annotation overriding the ENVIRONMENT section for one command."""

EXAMPLES_SECTION_KEY = "man-examples-section"
"""Command annotation overriding the EXAMPLES section for one command."""

ARG_HINT_KEY = "man-arg-hints"
"""Flag annotation naming the argument shown after the flag (e.g. ``FILE``)."""


# --- Command tree ---


class ArgPolicy(str, enum.Enum):
    """How a command treats positional arguments.

    Only ``NONE`` changes the generated page: the synopsis of a command that
    rejects every positional argument does not advertise any.
    """

    NONE = "none"
    ARBITRARY = "arbitrary"
    CUSTOM = "custom"


class FlagSpec(BaseModel):
    """A single flag declared on a command.

    Flags marked ``persistent`` are inherited by every descendant command and
    show up in their "inherited options" section.

    Example::

        FlagSpec(name="output", shorthand="o", default="-", usage="Write to FILE",
                 annotations={ARG_HINT_KEY: "FILE"})
    """

    name: str
    shorthand: str = ""
    default: str = Field(default="", description="Default value as displayed")
    usage: str = ""
    no_opt_default: str = Field(
        default="", description="Value used when the flag is given without an argument"
    )
    deprecated: str = Field(default="", description="Deprecation message; empty if current")
    shorthand_deprecated: str = ""
    hidden: bool = False
    persistent: bool = False
    annotations: dict[str, str] = Field(default_factory=dict)


class CommandNode(BaseModel):
    """One command in an application's command tree.

    Children passed to the constructor, or attached later with
    :meth:`add_command`, get their parent link set so that
    :attr:`command_path` and the inherited flag views work.

    Example::

        root = CommandNode(name="foo", children=[
            CommandNode(name="bar", short="Do the bar thing"),
            CommandNode(name="cat"),
        ])
        root.children[0].command_path  # "foo bar"
    """

    name: str = ""
    short: str = ""
    long: str = ""
    usage: str = Field(default="", description="Argument part of the usage line")
    example: str = ""
    annotations: dict[str, str] = Field(default_factory=dict)
    flags: list[FlagSpec] = Field(default_factory=list)
    arg_policy: ArgPolicy = ArgPolicy.ARBITRARY
    hidden: bool = False
    deprecated: str = ""
    runnable: bool = True
    children: list[CommandNode] = Field(default_factory=list)

    _parent: Optional[CommandNode] = PrivateAttr(default=None)

    def model_post_init(self, __context: object) -> None:
        for child in self.children:
            child._parent = self

    def add_command(self, *nodes: CommandNode) -> None:
        """Attach *nodes* as children of this command."""
        for node in nodes:
            node._parent = self
            self.children.append(node)

    @property
    def parent(self) -> Optional[CommandNode]:
        return self._parent

    @property
    def command_path(self) -> str:
        """Names from the root down to this command, separated by spaces."""
        if self._parent is None:
            return self.name
        return f"{self._parent.command_path} {self.name}"

    @property
    def use_line(self) -> str:
        """The full one-line usage, e.g. ``foo bar [flags] NAME``."""
        usage = self.usage
        if not usage and any(not (f.hidden or f.deprecated) for f in self.all_flags()):
            usage = "[flags]"
        return f"{self.command_path} {usage}" if usage else self.command_path

    @property
    def is_available(self) -> bool:
        """Whether the command should be documented and listed."""
        if self.deprecated or self.hidden:
            return False
        return self.runnable or any(c.is_available for c in self.children)

    @property
    def is_help_topic(self) -> bool:
        """Whether the command only exists to carry help text."""
        if self.runnable or self.deprecated or self.hidden:
            return False
        return all(c.is_help_topic for c in self.children)

    def own_flags(self) -> list[FlagSpec]:
        """Flags declared on this command, persistent or not."""
        return list(self.flags)

    def inherited_flags(self) -> list[FlagSpec]:
        """Persistent flags of all ancestors that this command does not shadow.

        The nearest ancestor wins when two ancestors declare the same name.
        """
        seen = {f.name for f in self.flags}
        inherited: list[FlagSpec] = []
        node = self._parent
        while node is not None:
            for flag in node.flags:
                if flag.persistent and flag.name not in seen:
                    seen.add(flag.name)
                    inherited.append(flag)
            node = node._parent
        return inherited

    def all_flags(self) -> list[FlagSpec]:
        return self.own_flags() + self.inherited_flags()


CommandNode.model_rebuild()


# --- Run configuration ---


class GenerationOptions(BaseModel):
    """Options for one documentation run.

    Every field is optional. Unset values are filled in by :meth:`resolved`
    once the template is known; the instance itself is frozen.

    The free-text sections (``files``, ``bugs``, ``environment``) apply to
    every page unless a command overrides them with the matching annotation
    (e.g. ``man-bugs-section``). Text starting with ``.`` is passed to troff
    and mdoc templates verbatim.
    """

    model_config = ConfigDict(frozen=True)

    section: str = Field(default="1", description="Manual section, e.g. 1 or 8")
    center_footer: str = Field(
        default="", description="Centre footer; defaults to the month and year of date"
    )
    left_footer: str = ""
    center_header: str = ""
    date: Optional[datetime] = Field(default=None, description="Defaults to now")
    files: str = ""
    bugs: str = ""
    environment: str = ""
    author: str = ""
    directory: str = Field(default=".", description="Where generated files are written")
    template: str = Field(default="troff", description="Name of a registered template")
    file_separator: Optional[str] = Field(
        default=None, description="Replaces spaces in file names; template default if unset"
    )
    file_suffix: Optional[str] = Field(
        default=None, description="File extension; template default if unset"
    )

    def resolved(self, separator: str, extension: Optional[str]) -> GenerationOptions:
        """Return a copy with every default filled in.

        Args:
            separator: The template's file name separator.
            extension: The template's file extension, or ``None`` to use the
                manual section as the extension.
        """
        section = self.section or "1"
        return self.model_copy(
            update={
                "section": section,
                "date": self.date or datetime.now(),
                "template": self.template or "troff",
                "directory": self.directory or ".",
                "file_separator": (
                    self.file_separator if self.file_separator is not None else separator
                ),
                "file_suffix": self.file_suffix or extension or section,
            }
        )


# --- Page models ---


class FlagRecord(BaseModel):
    """A documented flag as seen by templates."""

    shorthand: str = ""
    name: str
    default: str = ""
    usage: str = ""
    no_opt_default: str = ""
    arg_hint: str = ""


class Relation(str, enum.Enum):
    """How a "see also" entry relates to the documented command."""

    PARENT = "parent"
    SIBLING = "sibling"
    CHILD = "child"


class SeeAlso(BaseModel):
    """A reference to a related command page."""

    cmd_path: str
    section: str
    relation: Relation


class ManPage(BaseModel):
    """Everything a template needs to render one command's page.

    Created fresh for every page by :func:`manforge.extractor.build_page`.
    Empty optional sections (``environment``, ``files``, ``bugs``,
    ``examples``, ``author``) are meant to be skipped by the template.
    """

    date: datetime
    section: str
    center_footer: str = ""
    left_footer: str = ""
    center_header: str = ""
    use_line: str = ""
    command_path: str = ""
    short_description: str = ""
    description: str = ""
    no_args: bool = False

    all_flags: list[FlagRecord] = Field(default_factory=list)
    inherited_flags: list[FlagRecord] = Field(default_factory=list)
    non_inherited_flags: list[FlagRecord] = Field(default_factory=list)
    see_alsos: list[SeeAlso] = Field(default_factory=list)
    sub_commands: list[str] = Field(default_factory=list)

    author: str = ""
    environment: str = ""
    files: str = ""
    bugs: str = ""
    examples: str = ""
