"""List command -- show the operations a spec declares.

``spectest list`` prints the operation catalog so users can pick path
specifiers or tags for ``spectest make``. Given arguments, it shows the
selection ``make`` would generate tests for, with the same warnings.
"""

from __future__ import annotations

from typing import Optional

import typer

from spectest.exceptions import SpectestError
from spectest.output import error, get_output, info


def list_command(
    arguments: Optional[list[str]] = typer.Argument(
        None, help="Optional path specifiers (or tags with --tags) to filter by."
    ),
    tags: bool = typer.Option(
        False, "--tags", help="Treat ARGUMENTS as tags instead of path specifiers."
    ),
    openapi_path: Optional[str] = typer.Option(
        None, "--openapi-path", help="OpenAPI spec file path or URL (overrides config)."
    ),
) -> None:
    """List API operations with their tags and response status codes.

    Example::

        spectest list
        spectest list GET:/users /users/{id}
        spectest list users --tags --json
    """
    from spectest.config import require_openapi_path, resolve_config
    from spectest.generator import select_operations
    from spectest.parser import load_parsed_spec

    try:
        config = resolve_config(cli_openapi_path=openapi_path)
        spec = load_parsed_spec(require_openapi_path(config))
        if arguments:
            operations = list(select_operations(spec, arguments, by_tags=tags).values())
        else:
            operations = spec.operations
    except SpectestError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    if not operations:
        info("The spec declares no operations.")

    headers = ["Method", "Path", "Operation ID", "Tags", "Status codes"]
    rows = [
        [
            op.method.value.upper(),
            op.path,
            op.operation_id or "-",
            ", ".join(op.tags),
            ", ".join(response.status_code for response in op.responses),
        ]
        for op in operations
    ]
    get_output().print_table(
        headers, rows, title=f"{spec.info.title} -- Operations ({len(rows)})"
    )
