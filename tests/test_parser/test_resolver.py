"""Tests for spectest.parser.resolver."""

from __future__ import annotations

import pytest

from spectest.exceptions import SpecParseError
from spectest.parser.resolver import _lookup, resolve_refs


class TestResolveRefs:
    """Test the top-level resolve_refs function."""

    def test_inlines_parameter_ref(self) -> None:
        spec = {
            "paths": {
                "/users/{id}": {
                    "parameters": [{"$ref": "#/components/parameters/UserId"}],
                },
            },
            "components": {
                "parameters": {
                    "UserId": {"name": "id", "in": "path", "example": 42},
                },
            },
        }

        resolved = resolve_refs(spec)

        param = resolved["paths"]["/users/{id}"]["parameters"][0]
        assert param == {"name": "id", "in": "path", "example": 42}

    def test_does_not_mutate_input(self) -> None:
        spec = {
            "a": {"$ref": "#/components/b"},
            "components": {"b": {"value": 1}},
        }
        resolve_refs(spec)
        assert spec["a"] == {"$ref": "#/components/b"}

    def test_chained_refs(self) -> None:
        spec = {
            "a": {"$ref": "#/components/b"},
            "components": {
                "b": {"$ref": "#/components/c"},
                "c": {"type": "string"},
            },
        }
        assert resolve_refs(spec)["a"] == {"type": "string"}

    def test_refs_inside_lists(self) -> None:
        spec = {
            "items": [{"$ref": "#/defs/x"}, {"$ref": "#/defs/x"}],
            "defs": {"x": {"v": True}},
        }
        assert resolve_refs(spec)["items"] == [{"v": True}, {"v": True}]

    def test_recursive_schema_stays_finite(self) -> None:
        spec = {
            "components": {
                "schemas": {
                    "Node": {
                        "type": "object",
                        "properties": {"child": {"$ref": "#/components/schemas/Node"}},
                    },
                },
            },
            "root": {"$ref": "#/components/schemas/Node"},
        }

        resolved = resolve_refs(spec)

        assert resolved["root"]["type"] == "object"
        assert resolved["root"]["properties"]["child"] == {"$ref": "#/components/schemas/Node"}

        child = resolved["components"]["schemas"]["Node"]["properties"]["child"]
        assert child["type"] == "object"
        assert child["properties"]["child"] == {"$ref": "#/components/schemas/Node"}

    def test_sibling_branches_resolve_independently(self) -> None:
        spec = {
            "left": {"$ref": "#/defs/x"},
            "right": {"$ref": "#/defs/x"},
            "defs": {"x": {"type": "integer"}},
        }
        resolved = resolve_refs(spec)
        assert resolved["left"] == resolved["right"] == {"type": "integer"}

    def test_external_ref_rejected(self) -> None:
        spec = {"a": {"$ref": "other.yaml#/components/schemas/Pet"}}
        with pytest.raises(SpecParseError, match="External \\$ref not supported"):
            resolve_refs(spec)

    def test_dangling_ref_rejected(self) -> None:
        spec = {"a": {"$ref": "#/components/schemas/Missing"}, "components": {"schemas": {}}}
        with pytest.raises(SpecParseError, match="key 'Missing' not found"):
            resolve_refs(spec)


class TestLookup:
    def test_json_pointer_escapes(self) -> None:
        root = {"paths": {"/users/{id}": {"get": {"operationId": "getUser"}}}}
        node = _lookup("#/paths/~1users~1{id}/get", root)
        assert node == {"operationId": "getUser"}

    def test_tilde_escape(self) -> None:
        assert _lookup("#/defs/a~0b", {"defs": {"a~b": 1}}) == 1

    def test_array_index(self) -> None:
        assert _lookup("#/list/1", {"list": ["a", "b"]}) == "b"

    def test_invalid_array_index(self) -> None:
        with pytest.raises(SpecParseError, match="invalid array index"):
            _lookup("#/list/9", {"list": ["a"]})

    def test_navigate_into_scalar(self) -> None:
        with pytest.raises(SpecParseError, match="cannot navigate into str"):
            _lookup("#/a/b", {"a": "text"})
