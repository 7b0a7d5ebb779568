"""Inline internal ``$ref`` pointers of an OpenAPI document.

Parameters, request bodies, responses and examples are frequently declared
once under ``components`` and referenced from operations. The generator needs
the referenced objects in place (a path parameter's ``example`` may live in
``#/components/parameters/UserId``), so :func:`resolve_refs` returns a deep
copy of the document with every resolvable ``$ref`` replaced by its target.

Only internal references (``#/...``) are supported; anything else raises
:class:`~spectest.exceptions.SpecParseError`. A reference that is already
being expanded further up the same branch is left as its ``$ref`` dict, which
keeps recursive schemas finite.
"""

from __future__ import annotations

import copy
from typing import Any

from spectest.exceptions import SpecParseError


def resolve_refs(spec: dict[str, Any]) -> dict[str, Any]:
    """Return a deep copy of *spec* with internal ``$ref`` pointers inlined.

    Args:
        spec: The raw spec dictionary as returned by
            :func:`~spectest.parser.loader.load_spec`. It is not modified.

    Returns:
        A new dictionary with resolvable references replaced.

    Raises:
        SpecParseError: If a reference is external or points nowhere.
    """
    root = copy.deepcopy(spec)
    return _deep_resolve(root, root, frozenset())


def _lookup(ref: str, root: dict[str, Any]) -> Any:
    """Follow a JSON Pointer such as ``#/components/schemas/Pet`` from *root*.

    RFC 6901 escapes (``~1`` for ``/``, ``~0`` for ``~``) are decoded per
    segment.
    """
    if not ref.startswith("#/"):
        raise SpecParseError(
            f"External $ref not supported: {ref}. "
            "Only internal references (#/...) are handled."
        )

    node: Any = root
    for raw_segment in ref[2:].split("/"):
        segment = raw_segment.replace("~1", "/").replace("~0", "~")
        if isinstance(node, dict):
            if segment not in node:
                raise SpecParseError(
                    f"Cannot resolve $ref '{ref}': key '{segment}' not found"
                )
            node = node[segment]
        elif isinstance(node, list):
            try:
                node = node[int(segment)]
            except (ValueError, IndexError) as exc:
                raise SpecParseError(
                    f"Cannot resolve $ref '{ref}': invalid array index '{segment}'"
                ) from exc
        else:
            raise SpecParseError(
                f"Cannot resolve $ref '{ref}': cannot navigate into {type(node).__name__}"
            )
    return node


def _deep_resolve(obj: Any, root: dict[str, Any], active: frozenset[str]) -> Any:
    """Recursively inline references below *obj*.

    *active* holds the references currently being expanded on this branch;
    sibling branches each get their own set.
    """
    if isinstance(obj, dict):
        ref = obj.get("$ref")
        if isinstance(ref, str):
            if ref in active:
                return obj
            return _deep_resolve(_lookup(ref, root), root, active | {ref})
        return {key: _deep_resolve(value, root, active) for key, value in obj.items()}

    if isinstance(obj, list):
        return [_deep_resolve(item, root, active) for item in obj]

    return obj
