"""OpenAPI spec parser -- load, resolve ``$ref`` pointers, and extract operations.

This sub-package is the first stage of the spectest pipeline: turning a raw
OpenAPI 3.x document (JSON or YAML, local file or remote URL) into a
:class:`~spectest.models.ParsedSpec` that the selector can filter.

Typical usage::

    from spectest.parser import load_parsed_spec

    parsed = load_parsed_spec("./openapi.yaml")

Sub-modules:

* :mod:`~spectest.parser.loader` -- I/O layer (URL, file) plus format
  detection and OpenAPI version validation.
* :mod:`~spectest.parser.resolver` -- Recursive ``$ref`` resolution with
  circular-reference detection.
* :mod:`~spectest.parser.extractor` -- Walks the resolved spec tree and
  produces :class:`~spectest.models.ParsedSpec`.
"""

from spectest.models import ParsedSpec
from spectest.parser.extractor import extract_spec
from spectest.parser.loader import (
    load_spec,
    resolve_spec_source,
    spec_basename,
    validate_openapi_version,
)


def load_parsed_spec(source: str) -> ParsedSpec:
    """Resolve *source*, load it, validate its version and extract the catalog.

    Raises:
        SpecParseError: If any of those steps fails.
    """
    resolved = resolve_spec_source(source)
    raw = load_spec(resolved)
    version = validate_openapi_version(raw)
    return extract_spec(raw, version, source=resolved)


__all__ = [
    "extract_spec",
    "load_parsed_spec",
    "load_spec",
    "resolve_spec_source",
    "spec_basename",
    "validate_openapi_version",
]
