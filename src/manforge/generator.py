"""Generate documentation pages for a command tree.

This is the core of manforge. Two entry points:

* :func:`generate_docs` walks the whole tree and writes one file per
  documented command into ``options.directory``.
* :func:`generate_page` renders a single command into any text stream,
  without touching the filesystem.

**Algorithm summary**

1. Look up the template and resolve the run options against it (separator,
   extension, date).
2. Recurse into the children first (declaration order), skipping commands
   that are unavailable (hidden, deprecated, not runnable) or that are only
   help topics.
3. Derive the file name: the command path with spaces replaced by the
   separator, plus ``.<extension>``.
4. Build the :class:`~manforge.models.ManPage` and render it into the file.

There is no retry or rollback: the first failure stops the walk, and files
written before it stay on disk.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, TextIO

from manforge.exceptions import EmptyCommandNameError, GenerationError
from manforge.extractor import build_page
from manforge.models import CommandNode, GenerationOptions
from manforge.output import debug
from manforge.templates import TemplateEntry, TemplateRegistry


def generate_docs(
    node: CommandNode,
    options: GenerationOptions,
    registry: Optional[TemplateRegistry] = None,
) -> list[Path]:
    """Write a page for *node* and every documented command below it.

    Args:
        node: Root of the (sub)tree to document.
        options: Run options. ``options.template`` selects the template and
            ``options.directory`` the output directory (created if missing).
        registry: Templates to use. Defaults to the built-in templates.

    Returns:
        Paths of the written files, children before their parents.

    Raises:
        TemplateNotFoundError: If ``options.template`` is not registered.
        EmptyCommandNameError: If a command has no name to derive a file
            name from (typically a nameless root command).
        GenerationError: If a file cannot be written.
        RenderError: If the template fails while rendering.

    Example::

        from manforge import CommandNode, GenerationOptions, generate_docs

        root = CommandNode(name="foo", children=[CommandNode(name="bar")])
        generate_docs(root, GenerationOptions(directory="man"))
        # -> man/foo-bar.1, man/foo.1
    """
    if registry is None:
        registry = TemplateRegistry.with_builtins()
    entry = registry.get(options.template)
    resolved = options.resolved(entry.separator, entry.extension)
    # Checked before any write: every descendant path starts with this one.
    page_filename(node, resolved)
    directory = Path(resolved.directory)
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise GenerationError(f"Cannot create {directory}: {exc}") from exc
    written: list[Path] = []
    _generate_tree(node, resolved, entry, written)
    return written


def _generate_tree(
    node: CommandNode,
    options: GenerationOptions,
    entry: TemplateEntry,
    written: list[Path],
) -> None:
    for child in node.children:
        if not child.is_available or child.is_help_topic:
            debug(f"Skipped {child.command_path}")
            continue
        _generate_tree(child, options, entry, written)

    path = Path(options.directory) / page_filename(node, options)
    try:
        with open(path, "w", encoding="utf-8") as f:
            _render_into(node, options, entry, f)
    except OSError as exc:
        raise GenerationError(f"Cannot write {path}: {exc}") from exc

    debug(f"Wrote {path}")
    written.append(path)


def page_filename(node: CommandNode, options: GenerationOptions) -> str:
    """Return the file name for *node*'s page, e.g. ``foo-bar.1``.

    Args:
        node: The documented command.
        options: Resolved run options (separator and suffix set).

    Raises:
        EmptyCommandNameError: If the command path is empty.
    """
    basename = node.command_path.replace(" ", options.file_separator or "")
    if not basename:
        raise EmptyCommandNameError("you need a command name to have a man page")
    return f"{basename}.{options.file_suffix}"


def generate_page(
    node: CommandNode,
    options: GenerationOptions,
    stream: TextIO,
    template_name: Optional[str] = None,
    registry: Optional[TemplateRegistry] = None,
) -> None:
    """Render a single page for *node* into *stream*.

    Args:
        node: The command to document. Its children are not rendered.
        options: Run options; resolved against the template here.
        stream: Any writable text stream (file, ``io.StringIO``, stdout).
        template_name: Template to use; defaults to ``options.template``.
        registry: Templates to use. Defaults to the built-in templates.

    Raises:
        TemplateNotFoundError: If the template is not registered.
        RenderError: If the template fails while rendering.
    """
    if registry is None:
        registry = TemplateRegistry.with_builtins()
    entry = registry.get(template_name or options.template)
    resolved = options.resolved(entry.separator, entry.extension)
    _render_into(node, resolved, entry, stream)


def _render_into(
    node: CommandNode,
    options: GenerationOptions,
    entry: TemplateEntry,
    stream: TextIO,
) -> None:
    page = build_page(node, options)
    stream.write(entry.render(page))
