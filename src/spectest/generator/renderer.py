"""Render selected operations into pytest test methods.

For each operation, one method is rendered per declared response status code,
in the order the codes are declared. A method contains:

* a one-line docstring: ``GET /users/{id} Get a user status code 200``;
* an optional ``request_body = ...`` literal built from the operation's
  ``application/json`` request body example;
* a ``client.request(...)`` call against the endpoint, with every ``{name}``
  path placeholder replaced by the example of the matching parameter;
* a single status code assertion for the user to extend.

Rendering fails loudly (:class:`~spectest.exceptions.GenerationError`) rather
than emitting scaffolding that would not run: a placeholder without an
example, an example of the wrong shape, or an unrecognised status code key
all abort generation.
"""

from __future__ import annotations

import re
from typing import Any, Optional

from spectest.exceptions import GenerationError
from spectest.generator.literal import export_literal, quote
from spectest.generator.naming import build_method_name, deduplicate_names
from spectest.generator.templating import get_template
from spectest.models import APIOperation, ParameterLocation
from spectest.output import debug, warning

FUNCTION_TEMPLATE = "test_function.py.j2"

_PLACEHOLDER_RE = re.compile(r"\{(.+?)\}")
_STATUS_RE = re.compile(r"^[1-5]\d\d$")
_STATUS_RANGE_RE = re.compile(r"^([1-5])XX$", re.IGNORECASE)

# Marks an operation without an application/json request body.
_NO_BODY = object()


def render_functions(
    operations: list[APIOperation],
    name_with_path: bool = False,
) -> list[str]:
    """Render every test method for *operations*, in selection order.

    Method names that collide are made unique with a numeric suffix and a
    warning.

    Args:
        operations: Selected operations, in the order tests should appear.
        name_with_path: Name methods after path + method instead of
            operationId.

    Returns:
        Rendered methods (class-level indentation, no trailing newline).

    Raises:
        GenerationError: If any operation cannot be rendered.
    """
    pairs = [
        (operation, response.status_code)
        for operation in operations
        for response in operation.responses
    ]
    for operation in operations:
        if not operation.responses:
            warning(f"{operation.key} declares no responses. No test generated.")

    names = [build_method_name(op, code, with_path=name_with_path) for op, code in pairs]
    functions: list[str] = []
    for (operation, status_code), (original, unique) in zip(pairs, deduplicate_names(names)):
        if unique != original:
            warning(f"Test name {original} is already used; renamed to {unique}.")
        functions.append(render_function(operation, status_code, unique))
    return functions


def render_function(operation: APIOperation, status_code: str, name: str) -> str:
    """Render a single test method.

    Args:
        operation: The operation under test.
        status_code: One of the operation's declared status code keys.
        name: The method name.
    """
    request_body = ""
    request_parameter = ""
    body_example = _request_body_example(operation)
    if body_example is not _NO_BODY:
        request_body = export_literal(body_example)
        request_parameter = ", json=request_body"

    debug(f"Rendering {name} for {operation.key} ({status_code})")
    text = get_template(FUNCTION_TEMPLATE).render(
        name=name,
        document=_docstring(_summary_line(operation, status_code)),
        method=quote(operation.method.value.upper()),
        endpoint=quote(build_endpoint(operation)),
        request_body=request_body,
        request_parameter=request_parameter,
        assertion=build_assertion(operation, status_code),
    )
    return text.rstrip("\n")


def _summary_line(operation: APIOperation, status_code: str) -> str:
    parts = [operation.method.value.upper(), operation.path]
    if operation.summary:
        parts.append(" ".join(operation.summary.split()))
    parts.append(f"status code {status_code}")
    return " ".join(parts)


def _docstring(text: str) -> str:
    """Escape *text* for use inside a triple-quoted docstring."""
    return text.replace("\\", "\\\\").replace('"', '\\"')


# --------------------------------------------------------------------------- #
# Endpoint
# --------------------------------------------------------------------------- #


def build_endpoint(operation: APIOperation) -> str:
    """Return the operation's path with placeholders replaced by example values.

    Path parameters take precedence over same-named parameters declared in
    other locations.

    Raises:
        GenerationError: If a placeholder has no example, or the example is
            not a scalar.
    """
    examples: dict[str, Any] = {}
    for param in operation.parameters:
        if param.location != ParameterLocation.PATH:
            examples.setdefault(param.name, param.example)
    for param in operation.parameters:
        if param.location == ParameterLocation.PATH:
            examples[param.name] = param.example

    def _substitute(match: re.Match[str]) -> str:
        name = match.group(1)
        value = examples.get(name)
        if value is None:
            raise GenerationError(
                f"No example value for path parameter '{name}' of {operation.key}. "
                "Declare an example for every parameter used in the path."
            )
        return _path_value(name, value, operation)

    return _PLACEHOLDER_RE.sub(_substitute, operation.path)


def _path_value(name: str, value: Any, operation: APIOperation) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (str, int, float)):
        return str(value)
    raise GenerationError(
        f"Example for path parameter '{name}' of {operation.key} must be a scalar, "
        f"got {type(value).__name__}"
    )


# --------------------------------------------------------------------------- #
# Request body
# --------------------------------------------------------------------------- #


def _request_body_example(operation: APIOperation) -> Any:
    """Return the JSON request body example, ``None`` if undeclared, or ``_NO_BODY``."""
    body = operation.request_body
    if body is None:
        return _NO_BODY
    content_type: Optional[str] = body.json_content_type()
    if content_type is None:
        return _NO_BODY
    if content_type not in body.examples:
        warning(f"No example for the JSON request body of {operation.key}; using None.")
        return None
    return body.examples[content_type]


# --------------------------------------------------------------------------- #
# Assertion
# --------------------------------------------------------------------------- #


def build_assertion(operation: APIOperation, status_code: str) -> str:
    """Return the status assertion statement for *status_code*.

    * ``200`` -> ``assert response.status_code == 200``
    * ``4XX`` -> ``assert 400 <= response.status_code < 500``
    * ``default`` -> the status is none of the operation's other explicit
      codes.

    Raises:
        GenerationError: For any other status code key.
    """
    code = status_code.strip()
    if _STATUS_RE.match(code):
        return f"assert response.status_code == {int(code)}"

    range_match = _STATUS_RANGE_RE.match(code)
    if range_match:
        low = int(range_match.group(1)) * 100
        return f"assert {low} <= response.status_code < {low + 100}"

    if code.lower() == "default":
        others = [
            str(int(response.status_code))
            for response in operation.responses
            if _STATUS_RE.match(response.status_code.strip())
        ]
        if not others:
            return "assert 100 <= response.status_code < 600"
        if len(others) == 1:
            return f"assert response.status_code != {others[0]}"
        return f"assert response.status_code not in ({', '.join(others)})"

    raise GenerationError(
        f"Unrecognised response status code '{status_code}' on {operation.key}"
    )
