"""Test generation -- select operations and render them into pytest modules.

Sub-modules:

* :mod:`~spectest.generator.selector` -- path specifier and tag selection.
* :mod:`~spectest.generator.naming` -- test method, class and module names.
* :mod:`~spectest.generator.literal` -- Python literal export of examples.
* :mod:`~spectest.generator.renderer` -- one test method per status code.
* :mod:`~spectest.generator.assembler` -- methods into a test class module.
* :mod:`~spectest.generator.writer` -- target resolution and file output.
"""

from spectest.generator.assembler import append_functions, assemble_module
from spectest.generator.renderer import render_function, render_functions
from spectest.generator.selector import select_operations
from spectest.generator.writer import append_to_test_file, resolve_target, write_test_file

__all__ = [
    "append_functions",
    "append_to_test_file",
    "assemble_module",
    "render_function",
    "render_functions",
    "resolve_target",
    "select_operations",
    "write_test_file",
]
