"""Extract the operation catalog from a resolved OpenAPI spec.

This module walks a ``$ref``-resolved OpenAPI dictionary and builds a
:class:`~spectest.models.ParsedSpec` holding every declared path and every
operation with its parameters, request body and responses.

Ordering matters to the generator: paths keep document order, methods keep
the order in which they are declared inside each path item, and responses keep
the order of their status codes. Generated test methods follow that order.

Parameter merging follows the OpenAPI specification: path-level parameters
provide defaults, and operation-level parameters override them when they share
the same ``name`` and ``in`` values.
"""

from __future__ import annotations

from typing import Any, Optional

from spectest.models import (
    APIInfo,
    APIOperation,
    APIParameter,
    HTTPMethod,
    ParameterLocation,
    ParsedSpec,
    RequestBodyInfo,
    ResponseInfo,
)
from spectest.parser.resolver import resolve_refs

_HTTP_METHODS = frozenset(m.value for m in HTTPMethod)


def extract_spec(
    raw_spec: dict[str, Any],
    openapi_version: str,
    source: Optional[str] = None,
) -> ParsedSpec:
    """Extract a :class:`~spectest.models.ParsedSpec` from a raw OpenAPI dict.

    Args:
        raw_spec: The raw OpenAPI spec dictionary as returned by
            :func:`~spectest.parser.loader.load_spec` (before ref resolution).
        openapi_version: The validated OpenAPI version string, as returned by
            :func:`~spectest.parser.loader.validate_openapi_version`.
        source: Where the document was loaded from, kept for reporting.

    Returns:
        The populated catalog.

    Example::

        raw = load_spec("openapi.yaml")
        parsed = extract_spec(raw, validate_openapi_version(raw))
        for op in parsed.operations:
            print(op.key)
    """
    spec = resolve_refs(raw_spec)
    paths = spec.get("paths") or {}
    return ParsedSpec(
        info=_extract_info(spec),
        paths=[str(path) for path in paths],
        operations=_extract_operations(paths),
        openapi_version=openapi_version,
        source=source,
    )


def _extract_info(spec: dict[str, Any]) -> APIInfo:
    info = spec.get("info") or {}
    return APIInfo(
        title=str(info.get("title", "Untitled API")),
        version=str(info.get("version", "0.0.0")),
        description=info.get("description"),
    )


def _extract_operations(paths: dict[str, Any]) -> list[APIOperation]:
    """Build one :class:`~spectest.models.APIOperation` per path + method.

    Keys of a path item that are not HTTP methods (``parameters``,
    ``summary``, ``servers``, extensions) are skipped.
    """
    operations: list[APIOperation] = []

    for path, path_item in paths.items():
        if not isinstance(path_item, dict):
            continue

        path_params = path_item.get("parameters") or []

        for method_str, operation in path_item.items():
            method_str = str(method_str).lower()
            if method_str not in _HTTP_METHODS or not isinstance(operation, dict):
                continue

            merged_params = _merge_parameters(path_params, operation.get("parameters") or [])

            operations.append(
                APIOperation(
                    path=str(path),
                    method=HTTPMethod(method_str),
                    operation_id=operation.get("operationId"),
                    summary=operation.get("summary"),
                    description=operation.get("description"),
                    tags=[str(tag) for tag in operation.get("tags") or []],
                    parameters=_extract_parameters(merged_params),
                    request_body=_extract_request_body(operation.get("requestBody")),
                    responses=_extract_responses(operation.get("responses") or {}),
                    deprecated=bool(operation.get("deprecated", False)),
                )
            )

    return operations


def _merge_parameters(
    path_params: list[dict[str, Any]],
    op_params: list[dict[str, Any]],
) -> list[dict[str, Any]]:
    """Merge path-level and operation-level parameters.

    Operation-level parameters override path-level parameters with the same
    name and location (``in`` field).
    """
    op_keys = {(param.get("name", ""), param.get("in", "")) for param in op_params}
    merged = [
        param
        for param in path_params
        if (param.get("name", ""), param.get("in", "")) not in op_keys
    ]
    merged.extend(op_params)
    return merged


def _extract_parameters(params_list: list[dict[str, Any]]) -> list[APIParameter]:
    """Convert raw OpenAPI parameter dicts into :class:`~spectest.models.APIParameter` models.

    Path parameters are always required. Parameters with unrecognised ``in``
    locations are skipped.
    """
    parameters: list[APIParameter] = []

    for param in params_list:
        if not isinstance(param, dict):
            continue
        try:
            location = ParameterLocation(param.get("in", "query"))
        except ValueError:
            continue

        schema = param.get("schema")
        if not isinstance(schema, dict):
            schema = {}

        required = bool(param.get("required", False))
        if location == ParameterLocation.PATH:
            required = True

        parameters.append(
            APIParameter(
                name=str(param.get("name", "")),
                location=location,
                required=required,
                description=param.get("description"),
                schema_type=_extract_schema_type(schema),
                schema_format=schema.get("format"),
                default=schema.get("default"),
                enum_values=schema.get("enum"),
                example=_extract_example(param, schema),
            )
        )

    return parameters


def _extract_schema_type(schema: dict[str, Any]) -> str:
    """Extract the type string from a schema object.

    OpenAPI 3.1 type arrays (``["string", "null"]``) yield their first
    non-null type. Falls back to ``"string"``.
    """
    type_value = schema.get("type", "string")
    if isinstance(type_value, list):
        non_null = [t for t in type_value if t != "null"]
        return non_null[0] if non_null else "string"
    return str(type_value)


def _extract_example(holder: dict[str, Any], schema: Any) -> Any:
    """Return the example value declared on a parameter or media type object.

    Precedence: ``example``, then the ``value`` of the first ``examples``
    entry that has one, then the schema's ``example``. Returns ``None`` when
    none is declared.
    """
    if "example" in holder:
        return holder["example"]

    examples = holder.get("examples")
    if isinstance(examples, dict):
        for entry in examples.values():
            if isinstance(entry, dict) and "value" in entry:
                return entry["value"]

    if isinstance(schema, dict):
        return schema.get("example")
    return None


def _extract_request_body(body: Any) -> Optional[RequestBodyInfo]:
    """Extract request body metadata, including per-content-type examples."""
    if not isinstance(body, dict):
        return None

    content = body.get("content") or {}
    content_types: list[str] = []
    schema: Optional[dict[str, Any]] = None
    examples: dict[str, Any] = {}

    for content_type, media in content.items():
        content_types.append(str(content_type))
        if not isinstance(media, dict):
            continue
        media_schema = media.get("schema")
        if schema is None and isinstance(media_schema, dict):
            schema = media_schema
        if _declares_example(media, media_schema):
            examples[str(content_type)] = _extract_example(media, media_schema)

    return RequestBodyInfo(
        required=bool(body.get("required", False)),
        description=body.get("description"),
        content_types=content_types,
        schema=schema,
        examples=examples,
    )


def _declares_example(media: dict[str, Any], schema: Any) -> bool:
    if "example" in media:
        return True
    examples = media.get("examples")
    if isinstance(examples, dict) and any(
        isinstance(entry, dict) and "value" in entry for entry in examples.values()
    ):
        return True
    return isinstance(schema, dict) and "example" in schema


def _extract_responses(responses: dict[str, Any]) -> list[ResponseInfo]:
    """Extract response metadata for all declared status codes, in declared order.

    YAML documents may yield integer keys (``200:``); they are converted to
    strings.
    """
    result: list[ResponseInfo] = []

    for status_code, response in responses.items():
        if not isinstance(response, dict):
            continue

        content = response.get("content") or {}
        schema: Optional[dict[str, Any]] = None
        for media in content.values():
            if isinstance(media, dict) and isinstance(media.get("schema"), dict):
                schema = media["schema"]
                break

        result.append(
            ResponseInfo(
                status_code=str(status_code),
                description=response.get("description"),
                content_types=[str(ct) for ct in content],
                schema=schema,
            )
        )

    return result
