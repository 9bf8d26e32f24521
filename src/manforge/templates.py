"""Registry of named page templates.

A :class:`TemplateRegistry` maps a template name to a compiled Jinja2
template together with the separator and extension used to name the files
it produces. Three templates ship with manforge and are registered by
:meth:`TemplateRegistry.with_builtins`:

========== ========= =================
Name       Separator Extension
========== ========= =================
troff      ``-``     the man section
mdoc       ``-``     the man section
markdown   ``_``     ``md``
========== ========= =================

Templates can call a shared set of helper functions, each available both as
a filter and as a global::

    {{ command_path | dashify | upper }}
    {{ makeline(command_path, "=") }}

Register helpers with :meth:`~TemplateRegistry.add_function` *before* the
templates that use them; every template is compiled against a snapshot of the
helpers that existed at registration time.

The registry is not thread-safe. Register every template before the first
generation call if the registry is shared between threads.

See Also:
    :mod:`manforge.escape` for the built-in helper functions.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Mapping, Optional

import jinja2
from jinja2 import Environment, StrictUndefined

from manforge import escape
from manforge.exceptions import InvalidTemplateError, RenderError, TemplateNotFoundError
from manforge.models import ManPage


BUILTIN_TEMPLATE_DIR = Path(__file__).parent / "builtin_templates"
"""Directory holding the Jinja2 sources of the built-in templates."""

TROFF_TEMPLATE = "troff"
MDOC_TEMPLATE = "mdoc"
MARKDOWN_TEMPLATE = "markdown"

_BUILTINS: tuple[tuple[str, str, Optional[str]], ...] = (
    (TROFF_TEMPLATE, "-", None),
    (MDOC_TEMPLATE, "-", None),
    (MARKDOWN_TEMPLATE, "_", "md"),
)

_BUILTIN_FUNCTIONS: dict[str, Callable[..., Any]] = {
    "upper": str.upper,
    "backslashify": escape.backslashify,
    "dashify": escape.dashify,
    "underscoreify": escape.underscoreify,
    "simple_to_troff": escape.simple_to_troff,
    "simple_to_mdoc": escape.simple_to_mdoc,
    "trim_right_space": escape.trim_right_space,
    "rpad": escape.rpad,
    "makeline": escape.makeline,
}


class TemplateEntry:
    """A compiled template plus the file naming rules that go with it.

    Args:
        name: The name the template was registered under.
        separator: Replaces spaces in the command path to form file names.
        extension: File extension, or ``None`` to use the man section.
        template: The compiled Jinja2 template.
    """

    def __init__(
        self,
        name: str,
        separator: str,
        extension: Optional[str],
        template: jinja2.Template,
    ) -> None:
        self.name = name
        self.separator = separator
        self.extension = extension
        self.template = template

    def render(self, page: ManPage) -> str:
        """Render *page* with this template.

        The page's fields are the template's top-level variables
        (``command_path``, ``all_flags``, ...).

        Raises:
            RenderError: If the template fails while rendering, e.g. because
                it refers to an undefined variable or a helper function raised.
        """
        try:
            return self.template.render(**dict(page))
        except jinja2.TemplateError as exc:
            raise RenderError(f"Template '{self.name}' failed: {exc}") from exc
        except Exception as exc:
            raise RenderError(
                f"Template '{self.name}' failed: {type(exc).__name__}: {exc}"
            ) from exc

    def __repr__(self) -> str:
        return (
            f"TemplateEntry(name={self.name!r}, separator={self.separator!r}, "
            f"extension={self.extension!r})"
        )


class TemplateRegistry:
    """Named templates and the helper functions they can use.

    Example::

        registry = TemplateRegistry.with_builtins()
        registry.add_function("lower", str.lower)
        registry.register("txt", "-", "txt", "{{ command_path | lower }}")
    """

    def __init__(self) -> None:
        self._functions: dict[str, Callable[..., Any]] = dict(_BUILTIN_FUNCTIONS)
        self._templates: dict[str, TemplateEntry] = {}

    @classmethod
    def with_builtins(cls) -> TemplateRegistry:
        """Create a registry with the ``troff``, ``mdoc`` and ``markdown`` templates."""
        registry = cls()
        for name, separator, extension in _BUILTINS:
            source = (BUILTIN_TEMPLATE_DIR / f"{name}.j2").read_text(encoding="utf-8")
            registry.register(name, separator, extension, source)
        return registry

    # ------------------------------------------------------------------ #
    # Helper functions
    # ------------------------------------------------------------------ #

    def add_function(self, name: str, fn: Callable[..., Any]) -> None:
        """Make *fn* available as ``name`` to templates registered afterwards."""
        self._functions[name] = fn

    def add_functions(self, functions: Mapping[str, Callable[..., Any]]) -> None:
        """Add several helper functions at once. See :meth:`add_function`."""
        self._functions.update(functions)

    @property
    def functions(self) -> dict[str, Callable[..., Any]]:
        """A copy of the current helper function table."""
        return dict(self._functions)

    # ------------------------------------------------------------------ #
    # Templates
    # ------------------------------------------------------------------ #

    def register(
        self,
        name: str,
        separator: str,
        extension: Optional[str],
        source: str,
    ) -> TemplateEntry:
        """Compile *source* and store it under *name*, replacing any previous entry.

        Args:
            name: Template name, used by generators and ``--template``.
            separator: Replaces spaces in command paths for file names.
            extension: File extension, or ``None``/empty to use the man section.
            source: Jinja2 template source.

        Returns:
            The new :class:`TemplateEntry`.

        Raises:
            InvalidTemplateError: If *source* is not a valid template. This
                is a programming error and is not meant to be caught.
        """
        env = self._create_jinja_env()
        try:
            compiled = env.from_string(source)
        except jinja2.TemplateSyntaxError as exc:
            raise InvalidTemplateError(
                f"Template '{name}' is invalid (line {exc.lineno}): {exc.message}"
            ) from exc
        entry = TemplateEntry(name, separator, extension or None, compiled)
        self._templates[name] = entry
        return entry

    def lookup(self, name: str) -> Optional[TemplateEntry]:
        """Return the template registered as *name*, or ``None``."""
        return self._templates.get(name)

    def get(self, name: str) -> TemplateEntry:
        """Return the template registered as *name*.

        Raises:
            TemplateNotFoundError: If no such template is registered.
        """
        entry = self._templates.get(name)
        if entry is None:
            known = ", ".join(sorted(self._templates)) or "none"
            raise TemplateNotFoundError(
                f"Template '{name}' is not registered (available: {known})"
            )
        return entry

    def names(self) -> list[str]:
        """Registered template names, sorted."""
        return sorted(self._templates)

    def __contains__(self, name: object) -> bool:
        return name in self._templates

    def __iter__(self):
        return iter(self._templates[name] for name in self.names())

    def _create_jinja_env(self) -> Environment:
        """Create a Jinja2 environment bound to a snapshot of the helper table.

        Output is plain text (no autoescape); block trimming and lstrip are
        enabled for cleaner template authoring.
        """
        env = Environment(
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
        )
        functions = dict(self._functions)
        env.filters.update(functions)
        env.globals.update(functions)
        return env
