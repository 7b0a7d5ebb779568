"""Assemble rendered test methods into a test module.

:func:`assemble_module` produces a complete module from
``templates/testcase.py.j2``. :func:`append_functions` adds methods to a
module generated earlier (``--append``), inside its test class.
"""

from __future__ import annotations

import ast
import textwrap
from typing import Optional

from spectest.exceptions import GenerationError
from spectest.generator.literal import quote
from spectest.generator.templating import get_template
from spectest.output import warning

MODULE_TEMPLATE = "testcase.py.j2"


def join_functions(functions: list[str]) -> str:
    """Join rendered methods with one blank line between them."""
    return "\n\n".join(functions)


def assemble_module(class_name: str, functions: list[str], spec_name: str) -> str:
    """Return the source of a test module holding *functions*.

    Args:
        class_name: Name of the test class.
        functions: Rendered methods, in output order.
        spec_name: Base name of the OpenAPI document, e.g. ``openapi.yaml``.
    """
    return get_template(MODULE_TEMPLATE).render(
        class_name=class_name,
        spec_name=spec_name.replace("\\", "\\\\").replace('"', '\\"'),
        spec_name_literal=quote(spec_name),
        tests=join_functions(functions),
    )


def _parse_method(function: str) -> ast.FunctionDef:
    node = ast.parse(textwrap.dedent(function)).body[0]
    if not isinstance(node, ast.FunctionDef):
        raise GenerationError(f"Rendered test is not a function:\n{function}")
    return node


def _request_target(function: ast.AST) -> Optional[tuple[str, str]]:
    """Return the ``(METHOD, endpoint)`` passed to ``client.request`` in *function*."""
    for node in ast.walk(function):
        if (
            isinstance(node, ast.Call)
            and isinstance(node.func, ast.Attribute)
            and node.func.attr == "request"
            and len(node.args) >= 2
            and all(isinstance(arg, ast.Constant) for arg in node.args[:2])
        ):
            return node.args[0].value, node.args[1].value
    return None


def _find_class(existing: str, class_name: str) -> ast.ClassDef:
    try:
        tree = ast.parse(existing)
    except SyntaxError as exc:
        raise GenerationError(
            f"Cannot append: the existing file is not valid Python ({exc})"
        ) from exc
    for node in tree.body:
        if isinstance(node, ast.ClassDef) and node.name == class_name:
            return node
    raise GenerationError(
        f"Cannot append: class {class_name} is not defined in the existing file."
    )


def append_functions(existing: str, class_name: str, functions: list[str]) -> tuple[str, int]:
    """Add *functions* to the body of *class_name* in the existing module source.

    The methods are inserted right after the last line of the class, so code
    following the class is left untouched. A method whose name is already
    taken is skipped with a warning when the existing method requests the same
    endpoint. When it requests a different one, the new method gets the next
    free ``_2``, ``_3``, ... suffix, as colliding names do in a fresh module.

    Returns:
        ``(source, appended_count)``.

    Raises:
        GenerationError: If *existing* cannot be parsed or does not define
            *class_name* at module level.
    """
    cls = _find_class(existing, class_name)
    targets = {
        node.name: _request_target(node)
        for node in cls.body
        if isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef))
    }

    new_functions: list[str] = []
    for function in functions:
        parsed = _parse_method(function)
        name, target = parsed.name, _request_target(parsed)
        candidate, count = name, 1
        while candidate in targets:
            if target is None or targets[candidate] in (None, target):
                warning(f"Test {candidate} already exists. Skip.")
                break
            count += 1
            candidate = f"{name}_{count}"
        else:
            targets[candidate] = target
            new_functions.append(function.replace(f"def {name}(", f"def {candidate}(", 1))

    if not new_functions:
        return existing, 0

    lines = existing.splitlines(keepends=True)
    head = "".join(lines[: cls.end_lineno]).rstrip("\n")
    tail = "".join(lines[cls.end_lineno:])
    if tail.strip() and not tail.startswith("\n"):
        tail = "\n\n" + tail
    source = head + "\n\n" + join_functions(new_functions) + "\n" + tail
    return source, len(new_functions)
