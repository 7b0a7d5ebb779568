"""Tests for spectest.generator.renderer."""

from __future__ import annotations

import ast
from typing import Any

import pytest

from spectest.exceptions import GenerationError
from spectest.generator.renderer import (
    build_assertion,
    build_endpoint,
    render_function,
    render_functions,
)
from spectest.models import (
    APIOperation,
    APIParameter,
    HTTPMethod,
    ParameterLocation,
    ParsedSpec,
    RequestBodyInfo,
    ResponseInfo,
)


def _op(
    path: str = "/items/{id}",
    method: str = "get",
    codes: tuple[str, ...] = ("200",),
    params: list[APIParameter] | None = None,
    operation_id: str | None = "getItem",
    **kwargs: Any,
) -> APIOperation:
    return APIOperation(
        path=path,
        method=HTTPMethod(method),
        operation_id=operation_id,
        parameters=params or [],
        responses=[ResponseInfo(status_code=code) for code in codes],
        **kwargs,
    )


def _param(name: str, example: Any, location: ParameterLocation = ParameterLocation.PATH) -> APIParameter:
    return APIParameter(name=name, location=location, required=True, example=example)


def _parses_as_method(function: str) -> None:
    ast.parse("class T:\n" + function)


class TestRenderFunction:
    def test_get_with_path_example(self, users_spec: ParsedSpec) -> None:
        op = users_spec.operations_for_path("/users/{id}")[0]
        assert render_function(op, "200", "test_get_user_by_id_200").splitlines() == [
            "    def test_get_user_by_id_200(self, client):",
            '        """GET /users/{id} Get a user status code 200"""',
            '        response = client.request("GET", "/users/42")',
            "        assert response.status_code == 200",
        ]

    def test_post_with_json_body(self, users_spec: ParsedSpec) -> None:
        op = users_spec.operations_for_path("/users")[1]
        function = render_function(op, "201", "test_create_user_201")
        assert function.splitlines() == [
            "    def test_create_user_201(self, client):",
            '        """POST /users Create a user status code 201"""',
            "        request_body = {",
            '            "name": "Alice",',
            '            "email": "alice@example.com",',
            '            "roles": [',
            '                "admin",',
            "            ],",
            '            "manager": None,',
            "        }",
            '        response = client.request("POST", "/users", json=request_body)',
            "        assert response.status_code == 201",
        ]
        _parses_as_method(function)

    def test_missing_body_example_renders_none(
        self, plain_output, capsys: pytest.CaptureFixture[str]
    ) -> None:
        op = _op(
            path="/items",
            method="post",
            request_body=RequestBodyInfo(content_types=["application/json"]),
        )
        function = render_function(op, "200", "test_create_200")
        assert "        request_body = None" in function
        assert "json=request_body" in function
        assert "No example for the JSON request body of POST /items" in capsys.readouterr().err

    def test_non_json_body_has_no_request_body(self) -> None:
        op = _op(
            path="/upload",
            method="put",
            request_body=RequestBodyInfo(
                content_types=["multipart/form-data"], examples={"multipart/form-data": "x"}
            ),
        )
        function = render_function(op, "200", "test_upload_200")
        assert "request_body" not in function
        assert 'client.request("PUT", "/upload")' in function

    def test_json_with_charset_parameter(self) -> None:
        op = _op(
            path="/items",
            method="post",
            request_body=RequestBodyInfo(
                content_types=["application/json; charset=utf-8"],
                examples={"application/json; charset=utf-8": {"a": 1}},
            ),
        )
        assert "json=request_body" in render_function(op, "200", "test_create_200")

    def test_summary_and_quotes_escaped_in_docstring(self) -> None:
        op = _op(path="/items", summary='Find "items"\n  fast')
        function = render_function(op, "200", "test_find_200")
        assert '"""GET /items Find \\"items\\" fast status code 200"""' in function
        _parses_as_method(function)

    def test_no_trailing_newline(self) -> None:
        assert not render_function(_op(path="/items"), "200", "test_x_200").endswith("\n")


class TestRenderFunctions:
    def test_one_function_per_status_code_in_order(self, users_spec: ParsedSpec) -> None:
        ops = users_spec.operations_for_path("/users/{id}")
        functions = render_functions(ops)
        names = [f.split("(")[0].split()[-1] for f in functions]
        assert names == [
            "test_get_user_by_id_200",
            "test_get_user_by_id_404",
            "test_delete_user_204",
            "test_delete_user_default",
        ]
        assert 'client.request("GET", "/users/42")' in functions[1]
        assert "assert response.status_code == 404" in functions[1]
        assert "assert response.status_code != 204" in functions[3]

    def test_names_with_path(self, users_spec: ParsedSpec) -> None:
        functions = render_functions(users_spec.operations_for_path("/users/{id}"), name_with_path=True)
        assert functions[0].startswith("    def test_users_get_200(self, client):")
        assert functions[2].startswith("    def test_users_delete_204(self, client):")

    def test_duplicate_names_renamed_with_warning(
        self, plain_output, capsys: pytest.CaptureFixture[str]
    ) -> None:
        first = _op(path="/a", operation_id="doThing")
        second = _op(path="/b", operation_id="doThing")
        functions = render_functions([first, second])
        assert functions[0].startswith("    def test_do_thing_200(")
        assert functions[1].startswith("    def test_do_thing_200_2(")
        assert "renamed to test_do_thing_200_2" in capsys.readouterr().err

    def test_operation_without_responses_warns(
        self, plain_output, capsys: pytest.CaptureFixture[str]
    ) -> None:
        assert render_functions([_op(path="/items", codes=())]) == []
        assert "GET /items declares no responses" in capsys.readouterr().err

    def test_missing_example_aborts_everything(self, users_spec: ParsedSpec) -> None:
        ops = users_spec.operations[:1] + users_spec.operations_for_path("/projects/{projectId}/members")
        with pytest.raises(GenerationError, match="No example value for path parameter 'projectId'"):
            render_functions(ops)

    def test_missing_operation_id_aborts(self) -> None:
        with pytest.raises(GenerationError, match="has no operationId"):
            render_functions([_op(path="/items", operation_id=None)])

    def test_every_function_parses(self, petstore_spec: ParsedSpec) -> None:
        for function in render_functions(petstore_spec.operations):
            _parses_as_method(function)


class TestBuildEndpoint:
    def test_integer_example(self) -> None:
        assert build_endpoint(_op(params=[_param("id", 42)])) == "/items/42"

    def test_string_example(self, petstore_spec: ParsedSpec) -> None:
        op = petstore_spec.operations_for_path("/pets/{petId}")[0]
        assert build_endpoint(op) == "/pets/rex-1"

    def test_multiple_placeholders(self) -> None:
        op = _op(
            path="/orgs/{org}/repos/{repo}",
            params=[_param("org", "acme"), _param("repo", "api")],
        )
        assert build_endpoint(op) == "/orgs/acme/repos/api"

    def test_bool_example(self) -> None:
        assert build_endpoint(_op(params=[_param("id", True)])) == "/items/true"

    def test_path_parameter_wins_over_same_named_query(self) -> None:
        op = _op(params=[
            _param("id", "query-value", ParameterLocation.QUERY),
            _param("id", 7),
        ])
        assert build_endpoint(op) == "/items/7"

    def test_falls_back_to_same_named_parameter(self) -> None:
        op = _op(params=[_param("id", 9, ParameterLocation.QUERY)])
        assert build_endpoint(op) == "/items/9"

    def test_missing_example(self) -> None:
        with pytest.raises(GenerationError, match="No example value for path parameter 'id' of GET /items/\\{id\\}"):
            build_endpoint(_op(params=[_param("id", None)]))

    def test_undeclared_placeholder(self) -> None:
        with pytest.raises(GenerationError, match="'id'"):
            build_endpoint(_op())

    def test_non_scalar_example(self) -> None:
        with pytest.raises(GenerationError, match="must be a scalar, got list"):
            build_endpoint(_op(params=[_param("id", [1, 2])]))

    def test_path_without_placeholders(self) -> None:
        assert build_endpoint(_op(path="/health")) == "/health"


class TestBuildAssertion:
    def test_exact_code(self) -> None:
        assert build_assertion(_op(), "404") == "assert response.status_code == 404"

    @pytest.mark.parametrize("code", ["4XX", "4xx"])
    def test_range(self, code: str) -> None:
        assert build_assertion(_op(), code) == "assert 400 <= response.status_code < 500"

    def test_default_excludes_single_code(self) -> None:
        op = _op(codes=("200", "4XX", "default"))
        assert build_assertion(op, "default") == "assert response.status_code != 200"

    def test_default_excludes_several_codes(self) -> None:
        op = _op(codes=("200", "404", "default"))
        assert build_assertion(op, "default") == "assert response.status_code not in (200, 404)"

    def test_default_only(self) -> None:
        op = _op(codes=("default",))
        assert build_assertion(op, "default") == "assert 100 <= response.status_code < 600"

    @pytest.mark.parametrize("code", ["2001", "600", "6XX", "ok"])
    def test_unrecognised_code(self, code: str) -> None:
        with pytest.raises(GenerationError, match="Unrecognised response status code"):
            build_assertion(_op(), code)
