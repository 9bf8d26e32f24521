"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~manforge.exceptions.ManforgeError` subclass.
Build scripts and Makefiles that drive ``manforge`` can inspect the exit code
to tell a broken template apart from an unwritable output directory without
parsing stderr.

Example::

    $ manforge generate myapp.cli:app --template nope
    $ echo $?
    4   # EXIT_TEMPLATE_NOT_FOUND -- no template registered under that name
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or missing required parameters."""

EXIT_GENERATION_FAILURE = 3
"""A page could not be produced (empty command name, unwritable file)."""

EXIT_TEMPLATE_NOT_FOUND = 4
"""The requested template has not been registered."""

EXIT_RENDER_FAILURE = 5
"""A registered template failed while rendering a page."""

EXIT_TARGET_ERROR = 6
"""The target application could not be imported or is not a command."""

EXIT_INVALID_TEMPLATE = 70
"""A template is malformed or a generator was attached for an unknown template.

Matches ``EX_SOFTWARE`` from ``sysexits.h``: these are programmer errors.
"""
