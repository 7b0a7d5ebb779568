"""Exception hierarchy for spectest.

All exceptions inherit from :class:`SpectestError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`spectest.exit_codes`.
Commands catch ``SpectestError``, report it on stderr and exit with the
matching code, while unexpected exceptions produce a crash log and exit with
:data:`EXIT_GENERIC_FAILURE`.

Subclass hierarchy::

    SpectestError (exit 1)
    +-- InvalidUsageError          (exit 2)
    +-- NoMatchingOperationsError  (exit 4)
    +-- SpecParseError             (exit 7)
    +-- GenerationError            (exit 8)
    +-- OutputExistsError          (exit 1)
    +-- ConfigError                (exit 1)
"""

from spectest.exit_codes import (
    EXIT_GENERATION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_NO_MATCH,
    EXIT_SPEC_PARSE_ERROR,
)


class SpectestError(Exception):
    """Base exception for all spectest errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`spectest.exit_codes`.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(SpectestError):
    """Raised for invalid CLI arguments, class names or conflicting options."""

    exit_code = EXIT_INVALID_USAGE


class NoMatchingOperationsError(SpectestError):
    """Raised when no operation in the spec matches the requested paths or tags."""

    exit_code = EXIT_NO_MATCH


class SpecParseError(SpectestError):
    """Raised when the OpenAPI spec cannot be loaded, parsed or validated."""

    exit_code = EXIT_SPEC_PARSE_ERROR


class GenerationError(SpectestError):
    """Raised when an operation cannot be rendered into test scaffolding.

    Typical causes are a path placeholder without an example value, an
    example of an unexpected shape, or a missing ``operationId``.
    """

    exit_code = EXIT_GENERATION_ERROR


class OutputExistsError(SpectestError):
    """Raised when the destination test module exists and neither --force nor --append is set."""

    exit_code = EXIT_GENERIC_FAILURE


class ConfigError(SpectestError):
    """Raised for configuration problems (invalid JSON, no spec path configured)."""

    exit_code = EXIT_GENERIC_FAILURE
