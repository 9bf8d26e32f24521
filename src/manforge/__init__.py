"""manforge -- Generate man pages and Markdown docs from a command tree.

manforge walks a tree of commands (built by hand, or read from a Click or
Typer application) and renders one page per command through a named
template. Three templates ship with it: ``troff`` (classic man pages),
``mdoc`` (BSD man pages) and ``markdown``.

Typical library use::

    from manforge import GenerationOptions, from_click, generate_docs

    root = from_click(cli, prog_name="zap")
    generate_docs(root, GenerationOptions(section="1", directory="man"))

or ship a ``doc`` command with the application::

    tool = DocGenTool(cli).add_doc_generator(GenerationOptions(), "troff")
    raise SystemExit(tool.execute())

Modules:
    app: Typer application and CLI entry point.
    models: Pydantic models for commands, flags, options and pages.
    templates: Template registry and built-in templates.
    extractor: Command -> page context conversion.
    generator: Tree walker writing one file per command.
    introspect: Click/Typer -> command tree adapter.
    tool: The embeddable ``doc`` command.
    completion: Shell completion scripts.
    config: Option resolution and XDG paths.
    exceptions: Exception hierarchy with exit-code mapping.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.1.0"

from manforge.generator import generate_docs, generate_page
from manforge.introspect import from_click
from manforge.models import ArgPolicy, CommandNode, FlagSpec, GenerationOptions
from manforge.templates import TemplateRegistry
from manforge.tool import DocGenTool

__all__ = [
    "ArgPolicy",
    "CommandNode",
    "DocGenTool",
    "FlagSpec",
    "GenerationOptions",
    "TemplateRegistry",
    "__version__",
    "from_click",
    "generate_docs",
    "generate_page",
]
