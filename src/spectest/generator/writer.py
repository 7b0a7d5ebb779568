"""Place generated test modules in the test suite.

:func:`resolve_target` maps the class name given on the command line to a
file under the configured tests directory::

    UserApi                 -> tests/feature/test_user_api.py  (class TestUserApi)
    users.UserApi           -> tests/feature/users/test_user_api.py
    users/UserApi           -> tests/feature/users/test_user_api.py
    tests.contract.UserApi  -> tests/contract/test_user_api.py

Names rooted at the tests directory bypass the configured namespace.

:func:`write_test_file` and :func:`append_to_test_file` write the module
atomically; nothing is written unless rendering finished successfully.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Optional

from spectest.config import atomic_write
from spectest.exceptions import InvalidUsageError, OutputExistsError, SpectestError
from spectest.generator.assembler import append_functions
from spectest.generator.naming import class_name_for, module_name_for
from spectest.models import GeneratorConfig, TestTarget

_SEPARATOR_RE = re.compile(r"[./\\]+")


def resolve_target(
    name: str,
    config: GeneratorConfig,
    base_dir: Optional[Path] = None,
) -> TestTarget:
    """Derive the class name, dotted module and file path for *name*.

    Args:
        name: Class name, optionally qualified with packages separated by
            ``.``, ``/`` or ``\\``.
        config: Supplies ``tests_dir`` and the default ``namespace``.
        base_dir: Directory ``tests_dir`` is relative to; defaults to the
            current working directory.

    Raises:
        InvalidUsageError: If the class name or a package name is not a valid
            Python identifier.
    """
    parts = [part for part in _SEPARATOR_RE.split(name.strip()) if part]
    if not parts:
        raise InvalidUsageError("A test class name is required.")

    tests_root = Path(config.tests_dir)
    *packages, base = parts
    if packages and packages[0] == tests_root.name:
        packages = packages[1:]
    else:
        namespace = [part for part in _SEPARATOR_RE.split(config.namespace) if part]
        packages = namespace + packages

    for package in packages:
        if not package.isidentifier():
            raise InvalidUsageError(f"'{package}' is not a valid Python package name")

    class_name = class_name_for(base)
    module_stem = module_name_for(class_name)
    root = base_dir if base_dir is not None else Path.cwd()
    path = (root / tests_root).joinpath(*packages, f"{module_stem}.py").resolve()

    return TestTarget(
        class_name=class_name,
        module=".".join([tests_root.name, *packages, module_stem]),
        path=path,
    )


def write_test_file(target: TestTarget, content: str, force: bool = False) -> Path:
    """Write a newly assembled module to ``target.path``.

    Raises:
        OutputExistsError: If the file exists and *force* is not set.
    """
    if target.path.exists() and not force:
        raise OutputExistsError(
            f"{target.module} already exists at {target.path}. "
            "Use --force to overwrite it or --append to add tests to it."
        )
    atomic_write(target.path, content)
    return target.path


def append_to_test_file(target: TestTarget, functions: list[str]) -> int:
    """Append *functions* to the existing module at ``target.path``.

    Returns:
        The number of methods appended.

    Raises:
        GenerationError: If the module does not define ``target.class_name``.
        SpectestError: If the existing module cannot be read.
    """
    try:
        existing = target.path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SpectestError(f"Cannot read {target.path}: {exc}") from exc

    source, count = append_functions(existing, target.class_name, functions)
    if count:
        atomic_write(target.path, source)
    return count
