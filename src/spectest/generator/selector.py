"""Select operations from the catalog by path specifier or tag.

Path specifiers take the form ``PATH`` or ``METHODS:PATH``::

    /users/{id}                 every method declared on /users/{id}
    GET:/users                  only GET /users
    post,DELETE:/projects       POST and DELETE /projects

Methods are case-insensitive. Unknown paths, unknown methods and malformed
specifiers are reported as warnings and skipped; the remaining arguments are
still processed.

In tag mode each argument is a tag, matched case-insensitively against every
operation's tags.

Both modes return an ordered mapping keyed by
:attr:`~spectest.models.APIOperation.key`, so an operation reached through
several arguments appears once, at the position where it was first selected.
An empty result is the only fatal condition.
"""

from __future__ import annotations

import re

from spectest.exceptions import NoMatchingOperationsError
from spectest.models import APIOperation, ParsedSpec
from spectest.output import debug, warning

_PATH_SPEC_RE = re.compile(
    r"^(?:(?P<methods>[a-z]+(?:,[a-z]+)*):)?(?P<path>/\S*)$",
    re.IGNORECASE,
)

_FORMAT_HINT = (
    "Acceptable format is API_PATH or COMMA_SEPARATED_METHODS:API_PATH "
    "(ex: GET,POST:/api/v1/user)"
)


def select_operations(
    spec: ParsedSpec,
    arguments: list[str],
    by_tags: bool = False,
) -> dict[str, APIOperation]:
    """Select operations matching *arguments*.

    Args:
        spec: The operation catalog.
        arguments: Path specifiers, or tags when *by_tags* is set.
        by_tags: Treat *arguments* as tags.

    Returns:
        Ordered mapping of operation key to operation.

    Raises:
        NoMatchingOperationsError: If nothing matched.
    """
    if by_tags:
        selected = select_by_tags(spec, arguments)
    else:
        selected = select_by_paths(spec, arguments)

    if not selected:
        raise NoMatchingOperationsError("No API definition matches the specified arguments.")

    debug(f"Selected {len(selected)} operation(s): {', '.join(selected)}")
    return selected


def select_by_tags(spec: ParsedSpec, tags: list[str]) -> dict[str, APIOperation]:
    """Select every operation carrying one of *tags* (case-insensitive)."""
    results: dict[str, APIOperation] = {}
    for tag in (t.lower() for t in tags):
        matched = [
            op for op in spec.operations
            if tag in (op_tag.lower() for op_tag in op.tags)
        ]
        if not matched:
            warning(f"Tag {tag} matches no operation. Skip.")
        for operation in matched:
            results[operation.key] = operation
    return results


def select_by_paths(spec: ParsedSpec, specifiers: list[str]) -> dict[str, APIOperation]:
    """Select operations addressed by path specifiers."""
    results: dict[str, APIOperation] = {}
    for specifier in specifiers:
        parsed = parse_path_specifier(specifier)
        if parsed is None:
            warning(f"Specified path {specifier} is invalid format. {_FORMAT_HINT}. Skip.")
            continue

        methods, path = parsed
        if not spec.has_path(path):
            warning(f"Specified path {specifier} not found. Skip.")
            continue

        for operation in _operations_on_path(spec, path, methods):
            results[operation.key] = operation
    return results


def parse_path_specifier(specifier: str) -> tuple[list[str], str] | None:
    """Split ``METHODS:PATH`` into lower-cased methods and the path.

    Returns:
        ``(methods, path)`` with an empty method list when none were given,
        or ``None`` for a malformed specifier.

    Example::

        >>> parse_path_specifier("GET,post:/users")
        (['get', 'post'], '/users')
        >>> parse_path_specifier("/users/{id}")
        ([], '/users/{id}')
    """
    match = _PATH_SPEC_RE.match(specifier.strip())
    if match is None:
        return None
    methods: list[str] = []
    if match.group("methods"):
        for method in match.group("methods").lower().split(","):
            if method not in methods:
                methods.append(method)
    return methods, match.group("path")


def _operations_on_path(
    spec: ParsedSpec,
    path: str,
    methods: list[str],
) -> list[APIOperation]:
    declared = {op.method.value: op for op in spec.operations_for_path(path)}
    if not methods:
        if not declared:
            warning(f"Path {path} declares no operations. Skip.")
        return list(declared.values())

    selected: list[APIOperation] = []
    for method in methods:
        operation = declared.get(method)
        if operation is None:
            warning(f"Method {method} not found on {path}. Skip.")
            continue
        selected.append(operation)
    return selected
