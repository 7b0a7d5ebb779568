"""Serialize example values as Python literal source code.

Example request bodies come out of the OpenAPI document as nested dicts,
lists and scalars. :func:`export_literal` prints them as a Python expression
laid out the way Black prints an exploded literal, so generated modules pass
the formatter untouched::

    request_body = {
            "name": "Alice",
            "roles": [
                "admin",
            ],
            "manager": None,
        }

Every element sits on its own line with a trailing comma, nested containers
are indented four spaces per level, and the closing bracket lines up with the
line that opened it. The first line is not indented (it follows
``request_body = ``); continuation lines start ``depth`` levels deep, two by
default, which is the body of a method inside a class.

The output is a valid argument to :func:`ast.literal_eval` and evaluates to a
value equal to the input (YAML dates become ISO-8601 strings).
"""

from __future__ import annotations

import datetime
import json
import math
from typing import Any

from spectest.exceptions import GenerationError

INDENT = "    "


def export_literal(value: Any, depth: int = 2) -> str:
    """Return *value* as Python literal source.

    Args:
        value: A JSON/YAML-compatible value.
        depth: Indentation level (in units of four spaces) of the statement
            the literal belongs to.

    Raises:
        GenerationError: If *value* contains something that has no literal
            form (non-finite floats, arbitrary objects, unhashable keys).
    """
    return _export(value, INDENT * depth)


def _export(value: Any, indent: str) -> str:
    if isinstance(value, dict):
        if not value:
            return "{}"
        inner = indent + INDENT
        lines = [
            f"{inner}{_export_key(key)}: {_export(item, inner)},"
            for key, item in value.items()
        ]
        return "{\n" + "\n".join(lines) + f"\n{indent}}}"

    if isinstance(value, (list, tuple)):
        if not value:
            return "[]"
        inner = indent + INDENT
        lines = [f"{inner}{_export(item, inner)}," for item in value]
        return "[\n" + "\n".join(lines) + f"\n{indent}]"

    return _export_scalar(value)


def _export_key(key: Any) -> str:
    if isinstance(key, (dict, list, tuple)):
        raise GenerationError(f"Unsupported mapping key in example value: {key!r}")
    return _export_scalar(key)


def _export_scalar(value: Any) -> str:
    # bool first: it is a subclass of int
    if value is None or isinstance(value, bool):
        return repr(value)
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if not math.isfinite(value):
            raise GenerationError(f"Example value {value!r} has no Python literal form")
        return repr(value)
    if isinstance(value, str):
        return quote(value)
    if isinstance(value, (datetime.date, datetime.datetime)):
        return json.dumps(value.isoformat())
    raise GenerationError(
        f"Unsupported example value of type {type(value).__name__}: {value!r}"
    )


def quote(text: str) -> str:
    """Return *text* as a double-quoted Python string literal.

    Raises:
        GenerationError: If *text* cannot be written as UTF-8 (lone surrogates).
    """
    try:
        text.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise GenerationError(
            f"{text!r} cannot be written to a UTF-8 source file"
        ) from exc
    return json.dumps(text, ensure_ascii=False)
