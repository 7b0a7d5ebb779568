"""Canonical Pydantic models shared across all spectest modules.

This is the single source of truth for data shapes in the project. The models
fall into three groups:

**Configuration models** -- serialised as JSON in the user or project config:
    :class:`GeneratorConfig`.

**Parser output models** -- produced by the OpenAPI spec parser and consumed by
the selector and renderer:
    :class:`HTTPMethod`, :class:`ParameterLocation`, :class:`APIParameter`,
    :class:`RequestBodyInfo`, :class:`ResponseInfo`, :class:`APIOperation`,
    :class:`APIInfo`, and :class:`ParsedSpec`.

**Generator models** -- where the generated test module goes:
    :class:`TestTarget`.

All models use Pydantic v2. Parser output is treated as read-only once
extracted; :class:`APIOperation` is frozen so that a selected operation cannot
be modified by later pipeline stages.
"""

from __future__ import annotations

import enum
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


# --- Configuration ---


class GeneratorConfig(BaseModel):
    """Effective generator settings.

    Persisted as ``~/.config/spectest/config.json`` (user-wide) and
    ``./spectest.json`` (project). See :func:`~spectest.config.resolve_config`
    for the precedence chain.
    """

    openapi_path: Optional[str] = Field(
        default=None, description="Local path or http(s) URL of the OpenAPI document"
    )
    namespace: str = Field(
        default="feature",
        description="Dotted package under tests_dir where new test modules are placed",
    )
    tests_dir: str = Field(
        default="tests", description="Root directory of the test suite"
    )


# --- Parser Output Models ---


class HTTPMethod(str, enum.Enum):
    """HTTP methods recognised by OpenAPI 3.x path-item objects."""

    GET = "get"
    POST = "post"
    PUT = "put"
    PATCH = "patch"
    DELETE = "delete"
    HEAD = "head"
    OPTIONS = "options"
    TRACE = "trace"


class ParameterLocation(str, enum.Enum):
    """Locations where an API parameter can appear, per OpenAPI ``in`` field."""

    QUERY = "query"
    HEADER = "header"
    PATH = "path"
    COOKIE = "cookie"


class APIParameter(BaseModel):
    """A single parameter extracted from an OpenAPI operation.

    ``example`` holds the parameter's ``example``, the first entry of its
    ``examples`` map, or its schema's ``example``, in that order. ``None``
    means the document declares no example.
    """

    name: str
    location: ParameterLocation
    required: bool = False
    description: Optional[str] = None
    schema_type: str = Field(default="string", description="JSON Schema type")
    schema_format: Optional[str] = None
    default: Any = None
    enum_values: Optional[list[Any]] = None
    example: Any = None


class RequestBodyInfo(BaseModel):
    """Parsed request body metadata for an :class:`APIOperation`.

    ``examples`` maps each declared content type that carries an example value
    to that value. Content types without an example are absent from the map
    but still listed in ``content_types``.
    """

    required: bool = False
    description: Optional[str] = None
    content_types: list[str] = Field(default_factory=list)
    schema_: Optional[dict[str, Any]] = Field(default=None, alias="schema")
    examples: dict[str, Any] = Field(default_factory=dict)

    model_config = {"populate_by_name": True}

    def json_content_type(self) -> Optional[str]:
        """Return the declared ``application/json`` content type, if any.

        Media type parameters (``application/json; charset=utf-8``) are
        tolerated; structured-syntax types such as ``application/problem+json``
        are not.
        """
        for content_type in self.content_types:
            if content_type.split(";", 1)[0].strip().lower() == "application/json":
                return content_type
        return None


class ResponseInfo(BaseModel):
    """Parsed response metadata for a single HTTP status code."""

    status_code: str
    description: Optional[str] = None
    content_types: list[str] = Field(default_factory=list)
    schema_: Optional[dict[str, Any]] = Field(default=None, alias="schema")

    model_config = {"populate_by_name": True}


class APIOperation(BaseModel):
    """A single parsed API operation (one URL path + HTTP method pair).

    Operations are keyed by :attr:`key`; selecting the same operation twice
    (for example through a path and an overlapping tag) yields one entry.
    """

    model_config = ConfigDict(frozen=True)

    path: str
    method: HTTPMethod
    operation_id: Optional[str] = None
    summary: Optional[str] = None
    description: Optional[str] = None
    tags: list[str] = Field(default_factory=list)
    parameters: list[APIParameter] = Field(default_factory=list)
    request_body: Optional[RequestBodyInfo] = None
    responses: list[ResponseInfo] = Field(default_factory=list)
    deprecated: bool = False

    @property
    def key(self) -> str:
        """Unique selection key, e.g. ``"GET /users/{id}"``."""
        return f"{self.method.value.upper()} {self.path}"


class APIInfo(BaseModel):
    """API metadata extracted from the OpenAPI spec's *Info Object*."""

    title: str
    version: str
    description: Optional[str] = None


class ParsedSpec(BaseModel):
    """Complete parsed representation of an OpenAPI specification.

    ``paths`` lists every declared path in document order, including paths
    that declare no operations. ``operations`` is ordered by path, then by the
    order in which methods are declared within each path item.
    """

    info: APIInfo
    paths: list[str] = Field(default_factory=list)
    operations: list[APIOperation] = Field(default_factory=list)
    openapi_version: str = Field(
        description="Original OpenAPI version string (e.g., '3.0.3', '3.1.0')"
    )
    source: Optional[str] = Field(
        default=None, description="Absolute path or URL the spec was loaded from"
    )

    def has_path(self, path: str) -> bool:
        """Return ``True`` if *path* is declared in the spec's ``paths`` object."""
        return path in self.paths

    def operations_for_path(self, path: str) -> list[APIOperation]:
        """Return the operations declared on *path*, in declared method order."""
        return [op for op in self.operations if op.path == path]


# --- Generator Models ---


class TestTarget(BaseModel):
    """Where a generated test module is written.

    Produced by :func:`~spectest.generator.writer.resolve_target` from the
    class name given on the command line.
    """

    __test__ = False  # not a pytest test class

    class_name: str
    module: str = Field(description="Dotted module path, e.g. 'tests.feature.test_user_api'")
    path: Path
