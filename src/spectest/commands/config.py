"""Config commands -- view and modify configuration.

Provides the ``spectest config`` sub-command group. ``show`` prints the
effective settings after applying the full precedence chain; ``set`` updates
the user-wide config file.
"""

from __future__ import annotations

import typer

from spectest.exceptions import SpectestError
from spectest.output import error, format_response, info, success


config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show() -> None:
    """Show the effective configuration.

    Example::

        spectest config show
        spectest config show --json
    """
    from spectest.config import project_config_path, resolve_config, user_config_path

    try:
        config = resolve_config()
    except SpectestError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    info(f"User config: {user_config_path()}")
    project = project_config_path()
    if project.exists():
        info(f"Project config: {project}")
    format_response(config.model_dump(mode="json"))


@config_app.command("set")
def config_set(
    key: str = typer.Argument(help="Config key: openapi_path, namespace or tests_dir."),
    value: str = typer.Argument(help="Value to set."),
) -> None:
    """Set a value in the user-wide configuration.

    Project config (``./spectest.json``) and ``SPECTEST_*`` environment
    variables still take precedence over the value stored here.

    Raises:
        typer.Exit: With code 2 for an unknown key.

    Example::

        spectest config set namespace contract
        spectest config set openapi_path ~/specs/openapi.yaml
    """
    from pydantic import ValidationError

    from spectest.config import load_user_config, save_user_config
    from spectest.exceptions import InvalidUsageError
    from spectest.models import GeneratorConfig

    try:
        if key not in GeneratorConfig.model_fields:
            known = ", ".join(GeneratorConfig.model_fields)
            raise InvalidUsageError(f"Unknown config key: {key}. Known keys: {known}")

        data = load_user_config().model_dump(mode="json")
        data[key] = value
        try:
            config = GeneratorConfig.model_validate(data)
        except ValidationError as exc:
            raise InvalidUsageError(f"Invalid value for {key}: {exc}") from exc
        save_user_config(config)
    except SpectestError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    success(f"Set {key} = {value}")
