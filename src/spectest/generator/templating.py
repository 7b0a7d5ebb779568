"""Jinja2 environment for the test module templates.

Templates live in ``generator/templates/``:

* ``test_function.py.j2`` -- one test method (see
  :mod:`~spectest.generator.renderer`).
* ``testcase.py.j2`` -- the module and class wrapping the methods (see
  :mod:`~spectest.generator.assembler`).

Rendered text is Python source, so autoescaping is disabled for ``.py.j2``
templates; values are quoted by the callers before rendering.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, StrictUndefined, Template, select_autoescape

TEMPLATE_DIR = Path(__file__).parent / "templates"
"""Path to the Jinja2 template directory (``generator/templates/``)."""


@lru_cache(maxsize=1)
def create_jinja_env() -> Environment:
    """Create the shared Jinja2 environment.

    Block trimming and lstrip are enabled so ``{% if %}`` lines leave no
    blank lines behind, and undefined variables raise instead of rendering
    as empty strings.
    """
    return Environment(
        loader=FileSystemLoader(str(TEMPLATE_DIR)),
        autoescape=select_autoescape(disabled_extensions=("py.j2",), default=False),
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
        undefined=StrictUndefined,
    )


def get_template(name: str) -> Template:
    """Load a template by file name from :data:`TEMPLATE_DIR`."""
    return create_jinja_env().get_template(name)
