"""Derive Python identifiers for generated test methods, classes and modules.

Two strategies name test methods:

* **operationId** (default) -- ``test_`` + snake-cased operationId + status::

      getUserById, 200          -> test_get_user_by_id_200
      users.list, default       -> test_users_list_default

* **path** (``--test-name-with-path``) -- path segments without
  ``{placeholder}`` segments, then method and status::

      GET /users/{id}, 404      -> test_users_get_404
      POST /, 201               -> test_post_201

Status code keys such as ``4XX`` are lower-cased (``test_..._4xx``).
"""

from __future__ import annotations

import keyword
import re

from spectest.exceptions import GenerationError, InvalidUsageError
from spectest.models import APIOperation

_PLACEHOLDER_SEGMENT_RE = re.compile(r"/\{[^}]*\}")
_INVALID_IDENT_RE = re.compile(r"[^a-zA-Z0-9_]")


def to_snake_case(name: str) -> str:
    """Convert camelCase, PascalCase, kebab-case or dotted text to snake_case.

    Example::

        >>> to_snake_case("getUserByID")
        'get_user_by_id'
        >>> to_snake_case("list-pets.v2")
        'list_pets_v2'
    """
    result = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", name)
    result = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", result)
    result = _INVALID_IDENT_RE.sub("_", result.lower())
    return re.sub(r"_+", "_", result).strip("_")


def _status_suffix(status_code: str) -> str:
    suffix = re.sub(r"[^a-z0-9]+", "_", status_code.lower()).strip("_")
    if not suffix:
        raise GenerationError(f"Cannot derive a test name from status code '{status_code}'")
    return suffix


def name_from_operation_id(operation: APIOperation, status_code: str) -> str:
    """Name a test method after the operation's ``operationId``.

    Raises:
        GenerationError: If the operation declares no usable operationId.
    """
    base = to_snake_case(operation.operation_id or "")
    if not base:
        raise GenerationError(
            f"{operation.key} has no operationId to name its tests after. "
            "Declare one or use --test-name-with-path."
        )
    return f"test_{base}_{_status_suffix(status_code)}"


def name_from_path(operation: APIOperation, status_code: str) -> str:
    """Name a test method after the operation's path, method and status code."""
    path = _PLACEHOLDER_SEGMENT_RE.sub("", operation.path)
    parts = [to_snake_case(segment) for segment in path.split("/")]
    parts = [part for part in parts if part]
    parts.extend([operation.method.value, _status_suffix(status_code)])
    return "_".join(["test", *parts])


def build_method_name(operation: APIOperation, status_code: str, with_path: bool = False) -> str:
    """Return the test method name for *operation* and *status_code*."""
    if with_path:
        return name_from_path(operation, status_code)
    return name_from_operation_id(operation, status_code)


def deduplicate_names(names: list[str]) -> list[tuple[str, str]]:
    """Make names unique by appending ``_2``, ``_3``, ... to repeats.

    Returns:
        ``(original, unique)`` pairs in input order. Pairs where the two
        differ were renamed.
    """
    seen: dict[str, int] = {}
    taken = set(names)
    result: list[tuple[str, str]] = []
    for name in names:
        if name not in seen:
            seen[name] = 1
            result.append((name, name))
            continue
        count = seen[name]
        unique = name
        while unique in taken:
            count += 1
            unique = f"{name}_{count}"
        seen[name] = count
        taken.add(unique)
        result.append((name, unique))
    return result


def class_name_for(name: str) -> str:
    """Return a pytest-collectable class name (``Test`` prefix added if missing).

    Raises:
        InvalidUsageError: If *name* is not a valid Python identifier.
    """
    if not name.isidentifier() or keyword.iskeyword(name):
        raise InvalidUsageError(f"'{name}' is not a valid Python class name")
    return name if name.startswith("Test") else f"Test{name[0].upper()}{name[1:]}"


def module_name_for(class_name: str) -> str:
    """Return the test module file stem for a class, e.g. ``TestUserApi`` -> ``test_user_api``."""
    stem = class_name[len("Test"):] if class_name.startswith("Test") else class_name
    snake = to_snake_case(stem)
    return f"test_{snake}" if snake else "test_api"
