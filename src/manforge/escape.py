"""Text helpers for turning free-form help text into man page markup.

These functions are exposed to every template through the
:class:`~manforge.templates.TemplateRegistry` function table, so a template
can write ``{{ page.description | simple_to_troff }}`` or
``{{ page.command_path | dashify | upper }}``.

Help text in a Click or Typer application is plain prose: paragraphs are
separated by a blank line and nothing is escaped. troff and mdoc treat
``-``, ``\\``, ``&`` and friends specially, so the text has to be escaped and
blank lines turned into paragraph macros. Text that already starts with a
``.`` is assumed to be hand-written markup and passed through untouched.
"""

from __future__ import annotations

import re

TROFF_PARAGRAPH = ".PP"
"""Paragraph break macro for classic troff man pages."""

MDOC_PARAGRAPH = ".Pp"
"""Paragraph break macro for BSD mdoc pages."""

_ESCAPES: dict[str, str] = {
    "-": "\\-",
    "_": "\\_",
    "&": "\\&",
    "\\": "\\\\",
    "~": "\\~",
}

_ESCAPE_RE = re.compile("|".join(re.escape(ch) for ch in _ESCAPES))

# "\n" followed by at least one more "\n" -- i.e. one or more blank lines.
_MULTI_NEWLINE_RE = re.compile(r"\n+\n")


def backslashify(text: str) -> str:
    """Escape the characters that troff would otherwise interpret.

    All substitutions happen in a single pass, so the backslashes added for
    ``-`` or ``_`` are not escaped a second time. Raw markup (see
    :func:`is_raw_markup`) is returned unchanged.

    Example::

        >>> backslashify("foo-bar_baz")
        'foo\\\\-bar\\\\_baz'
    """
    if is_raw_markup(text):
        return text
    return _ESCAPE_RE.sub(lambda m: _ESCAPES[m.group(0)], text)


def is_raw_markup(text: str) -> bool:
    """Return ``True`` if *text* looks like hand-written troff/mdoc markup."""
    return len(text) > 1 and text[0] == "."


def normalize_paragraphs(text: str, marker: str) -> str:
    """Convert blank-line separated prose into escaped markup.

    Any run of two or more newlines collapses into a single *marker* line;
    a lone newline is kept as a line continuation. The result is then passed
    through :func:`backslashify`.

    Args:
        text: Plain help text, or raw markup starting with ``.``.
        marker: The paragraph macro to insert (:data:`TROFF_PARAGRAPH` or
            :data:`MDOC_PARAGRAPH`).

    Returns:
        The converted text, or *text* unchanged if it is already markup.
    """
    if is_raw_markup(text):
        return text
    return backslashify(_MULTI_NEWLINE_RE.sub(f"\n{marker}\n", text))


def simple_to_troff(text: str) -> str:
    """Convert plain prose to troff, using ``.PP`` between paragraphs."""
    return normalize_paragraphs(text, TROFF_PARAGRAPH)


def simple_to_mdoc(text: str) -> str:
    """Convert plain prose to mdoc, using ``.Pp`` between paragraphs."""
    return normalize_paragraphs(text, MDOC_PARAGRAPH)


def dashify(text: str) -> str:
    return text.replace(" ", "-")


def underscoreify(text: str) -> str:
    return text.replace(" ", "_")


def trim_right_space(text: str) -> str:
    return text.rstrip()


def rpad(text: str, width: int) -> str:
    """Left-justify *text* in a field of *width* characters."""
    return f"{text:<{width}}"


def makeline(text: str, char: str = "-") -> str:
    """Return a line of *char* as long as *text* (for underlined headings)."""
    return char * len(text)
