"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~spectest.exceptions.SpectestError` subclass.
CI scripts can inspect the exit code to determine the failure class without
parsing stderr.

Example::

    $ spectest make UserApi /nope
    $ echo $?
    4   # EXIT_NO_MATCH -- no operation matched the arguments
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or conflicting options."""

EXIT_NO_MATCH = 4
"""No API operation matched the requested paths or tags."""

EXIT_SPEC_PARSE_ERROR = 7
"""The OpenAPI specification could not be loaded, parsed or validated."""

EXIT_GENERATION_ERROR = 8
"""Test scaffolding could not be rendered from the selected operations."""

EXIT_INTERRUPTED = 130
"""The run was cancelled with Ctrl-C (128 + SIGINT)."""
