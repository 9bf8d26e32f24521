"""Exception hierarchy for manforge.

All exceptions inherit from :class:`ManforgeError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`manforge.exit_codes`.
The top-level error handler in :func:`manforge.app.main` catches
``ManforgeError`` and exits with the appropriate code, while unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

There are two tiers. :class:`InvalidTemplateError` is a programmer error
raised while templates are registered or generators are attached; library
code never catches it. Everything under :class:`GenerationError` is raised
while pages are produced and is meant to be reported to the user.

Subclass hierarchy::

    ManforgeError (exit 1)
    +-- InvalidUsageError          (exit 2)
    +-- ConfigError                (exit 1)
    +-- TargetError                (exit 6)
    +-- InvalidTemplateError       (exit 70)
    +-- GenerationError            (exit 3)
        +-- EmptyCommandNameError  (exit 3)
        +-- TemplateNotFoundError  (exit 4)
        +-- RenderError            (exit 5)
"""

from manforge.exit_codes import (
    EXIT_GENERATION_FAILURE,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_TEMPLATE,
    EXIT_INVALID_USAGE,
    EXIT_RENDER_FAILURE,
    EXIT_TARGET_ERROR,
    EXIT_TEMPLATE_NOT_FOUND,
)


class ManforgeError(Exception):
    """Base exception for all manforge errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`manforge.exit_codes`. The entry point catches
    this exception type and calls ``sys.exit(exc.exit_code)``.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(ManforgeError):
    """Raised for invalid CLI arguments (e.g. an unsupported shell name)."""

    exit_code = EXIT_INVALID_USAGE


class ConfigError(ManforgeError):
    """Raised for configuration problems (invalid ``manforge.json``, bad env values)."""

    exit_code = EXIT_GENERIC_FAILURE


class TargetError(ManforgeError):
    """Raised when a ``module:attribute`` target cannot be imported or is not a command."""

    exit_code = EXIT_TARGET_ERROR


class InvalidTemplateError(ManforgeError):
    """Raised when a template source does not compile, or a generator names an unknown template.

    This is a programmer error: templates are registered at start-up, so a
    broken one must stop the program instead of surfacing at render time.
    """

    exit_code = EXIT_INVALID_TEMPLATE


class GenerationError(ManforgeError):
    """Raised when a page cannot be generated or written to disk."""

    exit_code = EXIT_GENERATION_FAILURE


class EmptyCommandNameError(GenerationError):
    """Raised when the command to document has no name to build a file name from."""


class TemplateNotFoundError(GenerationError):
    """Raised when generation is requested with a template that was never registered."""

    exit_code = EXIT_TEMPLATE_NOT_FOUND


class RenderError(GenerationError):
    """Raised when a compiled template fails while rendering a page."""

    exit_code = EXIT_RENDER_FAILURE
