"""Init command -- write the project config for a test suite.

Implements ``spectest init``: validates the OpenAPI document, then writes
``./spectest.json`` with the spec location, the namespace new test classes
are placed in and the tests directory. Later ``spectest make`` runs in the
same directory pick these settings up without any flags.
"""

from __future__ import annotations

from typing import Optional

import typer

from spectest.exceptions import SpectestError
from spectest.output import error, info, success, suggest


def init_command(
    openapi_path: str = typer.Option(
        ...,
        "--openapi-path",
        "-s",
        help="OpenAPI spec file path or URL.",
    ),
    namespace: Optional[str] = typer.Option(
        None, "--namespace", help="Package under the tests directory for new tests."
    ),
    tests_dir: Optional[str] = typer.Option(
        None, "--tests-dir", help="Root directory of the test suite."
    ),
    force: bool = typer.Option(
        False, "--force", "-f", help="Overwrite an existing spectest.json."
    ),
) -> None:
    """Validate an OpenAPI spec and write ``./spectest.json``.

    Args:
        openapi_path: Spec location stored as given, so relative paths stay
            portable across checkouts.
        namespace: Dotted package for new tests. Defaults to ``feature``.
        tests_dir: Test suite root. Defaults to ``tests``.
        force: Replace an existing project config.

    Raises:
        typer.Exit: With the error's exit code when the spec is invalid, the
            namespace is not a dotted Python package path, or the config
            exists and ``--force`` was not given.

    Example::

        spectest init --openapi-path ./openapi.yaml
        spectest init --openapi-path https://api.example.com/openapi.json --namespace contract
    """
    try:
        _init(openapi_path, namespace, tests_dir, force)
    except SpectestError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None


def _init(
    openapi_path: str,
    namespace: Optional[str],
    tests_dir: Optional[str],
    force: bool,
) -> None:
    from spectest.config import project_config_path, save_project_config
    from spectest.exceptions import InvalidUsageError, OutputExistsError
    from spectest.models import GeneratorConfig
    from spectest.parser import load_parsed_spec

    path = project_config_path()
    if path.exists() and not force:
        raise OutputExistsError(f"{path.name} already exists. Use --force to overwrite it.")

    if namespace is not None:
        for part in namespace.split("."):
            if not part.isidentifier():
                raise InvalidUsageError(f"'{namespace}' is not a dotted Python package path")

    info(f"Loading spec from: {openapi_path}")
    parsed = load_parsed_spec(openapi_path)
    info(
        f"Validated: {parsed.info.title} v{parsed.info.version} "
        f"(OpenAPI {parsed.openapi_version}, {len(parsed.operations)} operations)"
    )

    settings: dict[str, str] = {"openapi_path": openapi_path}
    if namespace is not None:
        settings["namespace"] = namespace
    if tests_dir is not None:
        settings["tests_dir"] = tests_dir
    config = GeneratorConfig.model_validate(settings)

    written = save_project_config(config)
    success(f"Wrote {written}")
    suggest("List operations: spectest list")
    suggest("Generate tests: spectest make UserApi GET:/users")
