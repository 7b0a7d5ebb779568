"""Make command -- generate a pytest test module from an OpenAPI spec.

Implements ``spectest make``, the main entry point of the tool. The command
resolves the effective configuration, loads the OpenAPI document, selects
operations by path specifier or tag, renders one test method per declared
response status code and writes the resulting test class under the tests
directory.

Nothing is written unless every selected operation rendered successfully.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

import typer

from spectest.exceptions import SpectestError
from spectest.output import debug, error, info, print_source, success, suggest


def make_command(
    name: str = typer.Argument(
        help="Test class name, optionally qualified with packages (e.g. users.UserApi)."
    ),
    api_paths: list[str] = typer.Argument(
        help="Path specifiers ([METHODS:]PATH, e.g. GET,POST:/users), or tags with --tags."
    ),
    openapi_path: Optional[str] = typer.Option(
        None, "--openapi-path", help="OpenAPI spec file path or URL (overrides config)."
    ),
    force: bool = typer.Option(
        False, "--force", "-f", help="Overwrite the test module if it exists."
    ),
    append: bool = typer.Option(
        False, "--append", "-a", help="Add new tests to an existing test module."
    ),
    tags: bool = typer.Option(
        False, "--tags", help="Treat API_PATHS as tags instead of path specifiers."
    ),
    test_name_with_path: bool = typer.Option(
        False,
        "--test-name-with-path",
        help="Name tests after path and method instead of operationId.",
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", "-n", help="Print the generated module instead of writing it."
    ),
) -> None:
    """Generate a test class for the selected API operations.

    Args:
        name: Class name. ``UserApi`` becomes ``TestUserApi`` in
            ``<tests_dir>/<namespace>/test_user_api.py``.
        api_paths: Path specifiers, or tags when ``--tags`` is given.
        openapi_path: Spec location overriding the configured one.
        force: Replace an existing module.
        append: Append to an existing module, skipping tests that exist.
        tags: Select by tag.
        test_name_with_path: Derive method names from path and method.
        dry_run: Print the module to stdout and write nothing.

    Raises:
        typer.Exit: With the exit code of the :class:`SpectestError` raised
            while generating.

    Example::

        spectest make UserApi /users/{id} POST:/users
        spectest make users.UserApi users --tags --append
        spectest make UserApi GET:/users --openapi-path ./openapi.yaml --dry-run
    """
    try:
        _make(
            name,
            api_paths,
            openapi_path=openapi_path,
            force=force,
            append=append,
            by_tags=tags,
            name_with_path=test_name_with_path,
            dry_run=dry_run,
        )
    except SpectestError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None


def _make(
    name: str,
    api_paths: list[str],
    openapi_path: Optional[str],
    force: bool,
    append: bool,
    by_tags: bool,
    name_with_path: bool,
    dry_run: bool,
) -> None:
    from spectest.config import require_openapi_path, resolve_config
    from spectest.exceptions import GenerationError, InvalidUsageError
    from spectest.generator import (
        append_functions,
        append_to_test_file,
        assemble_module,
        render_functions,
        resolve_target,
        select_operations,
        write_test_file,
    )
    from spectest.parser import load_parsed_spec, spec_basename

    if force and append:
        raise InvalidUsageError("--force and --append cannot be used together.")

    config = resolve_config(cli_openapi_path=openapi_path)
    source = require_openapi_path(config)
    target = resolve_target(name, config)
    debug(f"Target: {target.class_name} in {target.path}")

    spec = load_parsed_spec(source)
    info(f"OpenAPI definition loaded from {spec.source}")
    spec_name = spec_basename(spec.source or source)

    selected = select_operations(spec, api_paths, by_tags=by_tags)
    functions = render_functions(list(selected.values()), name_with_path=name_with_path)
    if not functions:
        raise GenerationError("The selected operations declare no responses. Nothing to generate.")

    appending = append and target.path.exists()
    if dry_run:
        if appending:
            content, _ = append_functions(
                target.path.read_text(encoding="utf-8"), target.class_name, functions
            )
        else:
            content = assemble_module(target.class_name, functions, spec_name)
        print_source(content)
        return

    if appending:
        count = append_to_test_file(target, functions)
        if count:
            success(f"Appended {count} test(s) to {target.class_name} in {target.path}")
        else:
            info(f"{target.class_name} already contains every generated test.")
    else:
        content = assemble_module(target.class_name, functions, spec_name)
        write_test_file(target, content, force=force)
        success(f"Created {target.class_name} with {len(functions)} test(s) in {target.path}")

    suggest(f"Run the tests: pytest {_display_path(target.path)}")


def _display_path(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return os.fspath(path)
