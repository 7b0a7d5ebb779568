"""Load OpenAPI specifications from a local file or a URL.

This module handles all I/O for fetching raw OpenAPI documents and converting
them into Python dictionaries. Local files must carry a ``.json``, ``.yaml``
or ``.yml`` extension, which selects the parser; remote documents are parsed
according to their content type, falling back to JSON-then-YAML detection.

The public functions are:

* :func:`resolve_spec_source` -- Turn a configured path into an absolute path
  (or pass a URL through unchanged).
* :func:`load_spec` -- Load and parse a spec from a path or URL.
* :func:`validate_openapi_version` -- Check and return the ``openapi`` version
  string, rejecting Swagger 2.x and unsupported versions.
* :func:`spec_basename` -- The file name shown in generated test modules.

After loading, the raw dict should be passed to
:func:`~spectest.parser.extractor.extract_spec` which resolves ``$ref``
pointers and extracts a :class:`~spectest.models.ParsedSpec`.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any
from urllib.parse import urlparse

import httpx
import yaml

from spectest.exceptions import SpecParseError

_EXTENSION_HINTS = {
    ".json": "json",
    ".yaml": "yaml",
    ".yml": "yaml",
}


def is_url(source: str) -> bool:
    """Return ``True`` if *source* is an http(s) URL."""
    return source.startswith(("http://", "https://"))


def resolve_spec_source(source: str) -> str:
    """Resolve a configured spec location to an absolute path or URL.

    Args:
        source: A file path (relative to the working directory, ``~``
            allowed) or an http(s) URL.

    Returns:
        The URL unchanged, or the absolute path of an existing file.

    Raises:
        SpecParseError: If the path does not point to an existing file.
    """
    if is_url(source):
        return source
    path = Path(source).expanduser()
    if not path.is_file():
        raise SpecParseError(
            f"OpenAPI file not found: {source}. "
            "Specify a local json/yaml file path or an http(s) URL."
        )
    return str(path.resolve())


def spec_basename(source: str) -> str:
    """Return the document's file name, e.g. ``openapi.yaml``.

    For URLs this is the last segment of the URL path, or the host name when
    the path is empty.
    """
    if is_url(source):
        parsed = urlparse(source)
        name = parsed.path.rstrip("/").rsplit("/", 1)[-1]
        return name or parsed.netloc
    return Path(source).name


def load_spec(source: str) -> dict[str, Any]:
    """Load an OpenAPI spec from a URL or file path.

    Args:
        source: A URL (http/https) or file path.

    Returns:
        The parsed spec as a dictionary.

    Raises:
        SpecParseError: If the source cannot be loaded or parsed.
    """
    if is_url(source):
        return _load_from_url(source)
    return _load_from_file(source)


def _load_from_url(url: str) -> dict[str, Any]:
    """Download and parse a remote document.

    The response's content type picks the parser; when it names neither JSON
    nor YAML the extension of the URL path decides instead.
    """
    try:
        response = httpx.get(url, timeout=30.0, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise SpecParseError(
            f"HTTP {exc.response.status_code} while downloading {url}"
        ) from exc
    except httpx.RequestError as exc:
        raise SpecParseError(f"Failed to fetch spec from {url}: {exc}") from exc

    hint = _url_hint(url, response.headers.get("content-type", ""))
    return _parse_content(response.text, hint=hint)


def _url_hint(url: str, content_type: str) -> str:
    for marker, hint in (("json", "json"), ("yaml", "yaml"), ("yml", "yaml")):
        if marker in content_type:
            return hint
    return _EXTENSION_HINTS.get(Path(urlparse(url).path).suffix.lower(), "")


def _load_from_file(path: str) -> dict[str, Any]:
    """Read and parse a local ``.json``, ``.yaml`` or ``.yml`` document.

    Raises:
        SpecParseError: If the file is missing, empty or unreadable, or its
            extension is not one of the three above.
    """
    file_path = Path(path)
    if not file_path.is_file():
        raise SpecParseError(f"Spec file not found: {path}")

    suffix = file_path.suffix.lower()
    if suffix not in _EXTENSION_HINTS:
        raise SpecParseError(
            f"Unsupported spec file extension '{suffix or '(none)'}': {path}. "
            "Use a .json, .yaml or .yml file."
        )

    try:
        content = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise SpecParseError(f"Failed to read spec file {path}: {exc}") from exc
    if not content.strip():
        raise SpecParseError(f"Spec file is empty: {path}")

    return _parse_content(content, hint=_EXTENSION_HINTS[suffix])


def _parse_content(content: str, hint: str = "") -> dict[str, Any]:
    """Parse *content* as JSON or YAML according to *hint*.

    ``"json"`` parses JSON only and ``"yaml"`` YAML only. With no hint JSON
    is tried first, then YAML (a superset of it).
    """
    if hint == "json":
        try:
            return _ensure_mapping(json.loads(content))
        except json.JSONDecodeError as exc:
            raise SpecParseError(f"Invalid JSON: {exc}") from exc

    failures: list[str] = []
    if not hint:
        try:
            return _ensure_mapping(json.loads(content))
        except json.JSONDecodeError as exc:
            failures.append(f"JSON error: {exc}")
    try:
        return _ensure_mapping(yaml.safe_load(content))
    except yaml.YAMLError as exc:
        failures.append(f"YAML error: {exc}")

    raise SpecParseError("\n  ".join(["Failed to parse spec as JSON or YAML", *failures]))


def _ensure_mapping(document: Any) -> dict[str, Any]:
    if isinstance(document, dict):
        return document
    kind = "empty document" if document is None else type(document).__name__
    raise SpecParseError(f"Spec must be a JSON/YAML object (got {kind})")


def validate_openapi_version(spec: dict[str, Any]) -> str:
    """Return the document's ``openapi`` version if it is a 3.x release.

    Raises:
        SpecParseError: For Swagger 2.0 documents, a missing ``openapi`` field
            or any non-3.x version.
    """
    if "swagger" in spec:
        raise SpecParseError(
            f"Swagger {spec['swagger']} is not supported; convert it to OpenAPI 3 "
            "first (for example with https://converter.swagger.io)."
        )

    if "openapi" not in spec:
        raise SpecParseError("Missing 'openapi' field. Is this an OpenAPI 3.x document?")

    version = str(spec["openapi"])
    if not version.startswith("3."):
        raise SpecParseError(
            f"Unsupported OpenAPI version: {version}. Only 3.x documents can be read."
        )
    return version
