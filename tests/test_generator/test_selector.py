"""Tests for spectest.generator.selector."""

from __future__ import annotations

import pytest

from spectest.exceptions import NoMatchingOperationsError
from spectest.generator.selector import (
    parse_path_specifier,
    select_by_paths,
    select_by_tags,
    select_operations,
)
from spectest.models import ParsedSpec


class TestParsePathSpecifier:
    @pytest.mark.parametrize(
        ("specifier", "expected"),
        [
            ("/users", ([], "/users")),
            ("/users/{id}", ([], "/users/{id}")),
            ("GET:/users", (["get"], "/users")),
            ("get,POST:/users", (["get", "post"], "/users")),
            ("get,get:/users", (["get"], "/users")),
            ("  DELETE:/users/{id}  ", (["delete"], "/users/{id}")),
            ("/", ([], "/")),
        ],
    )
    def test_valid(self, specifier: str, expected: tuple[list[str], str]) -> None:
        assert parse_path_specifier(specifier) == expected

    @pytest.mark.parametrize(
        "specifier",
        [
            "bogus-format-no-slash",
            "users",
            "GET:users",
            "GET/users",
            "GET,:/users",
            ":/users",
            "GET:/users extra",
            "",
        ],
    )
    def test_invalid(self, specifier: str) -> None:
        assert parse_path_specifier(specifier) is None


class TestSelectByPaths:
    def test_all_methods_when_none_given(self, users_spec: ParsedSpec) -> None:
        selected = select_by_paths(users_spec, ["/users"])
        assert list(selected) == ["GET /users", "POST /users"]

    def test_only_listed_methods(self, users_spec: ParsedSpec) -> None:
        selected = select_by_paths(users_spec, ["post:/users"])
        assert list(selected) == ["POST /users"]

    def test_methods_in_argument_order(self, users_spec: ParsedSpec) -> None:
        selected = select_by_paths(users_spec, ["DELETE,GET:/users/{id}"])
        assert list(selected) == ["DELETE /users/{id}", "GET /users/{id}"]

    def test_same_operation_selected_once(self, users_spec: ParsedSpec) -> None:
        selected = select_by_paths(users_spec, ["GET:/users", "/users", "GET:/users"])
        assert list(selected) == ["GET /users", "POST /users"]

    def test_unknown_path_warns_and_continues(
        self, users_spec: ParsedSpec, plain_output, capsys: pytest.CaptureFixture[str]
    ) -> None:
        selected = select_by_paths(users_spec, ["/nope", "GET:/users"])
        assert list(selected) == ["GET /users"]
        assert "Specified path /nope not found. Skip." in capsys.readouterr().err

    def test_invalid_format_warns_and_continues(
        self, users_spec: ParsedSpec, plain_output, capsys: pytest.CaptureFixture[str]
    ) -> None:
        selected = select_by_paths(users_spec, ["bogus-format-no-slash", "/users/{id}"])
        assert list(selected) == ["GET /users/{id}", "DELETE /users/{id}"]
        err = capsys.readouterr().err
        assert "Specified path bogus-format-no-slash is invalid format." in err
        assert "GET,POST:/api/v1/user" in err

    def test_unknown_method_warns(
        self, users_spec: ParsedSpec, plain_output, capsys: pytest.CaptureFixture[str]
    ) -> None:
        selected = select_by_paths(users_spec, ["get,patch:/users/{id}"])
        assert list(selected) == ["GET /users/{id}"]
        assert "Method patch not found on /users/{id}. Skip." in capsys.readouterr().err

    def test_path_without_operations_warns(
        self, users_spec: ParsedSpec, plain_output, capsys: pytest.CaptureFixture[str]
    ) -> None:
        assert select_by_paths(users_spec, ["/health"]) == {}
        assert "Path /health declares no operations. Skip." in capsys.readouterr().err

    def test_path_match_is_exact(self, users_spec: ParsedSpec, quiet_output) -> None:
        assert select_by_paths(users_spec, ["/users/"]) == {}
        assert select_by_paths(users_spec, ["/Users"]) == {}


class TestSelectByTags:
    def test_case_insensitive(self, users_spec: ParsedSpec) -> None:
        selected = select_by_tags(users_spec, ["users"])
        assert list(selected) == ["GET /users", "POST /users"]

    def test_union_of_tags(self, users_spec: ParsedSpec) -> None:
        selected = select_by_tags(users_spec, ["ADMIN", "Users"])
        assert list(selected) == ["DELETE /users/{id}", "GET /users", "POST /users"]

    def test_overlapping_tags_selected_once(self, petstore_spec: ParsedSpec) -> None:
        selected = select_by_tags(petstore_spec, ["pets", "write"])
        assert list(selected) == ["GET /pets", "POST /pets", "GET /pets/{petId}"]

    def test_unknown_tag_warns(
        self, users_spec: ParsedSpec, plain_output, capsys: pytest.CaptureFixture[str]
    ) -> None:
        assert select_by_tags(users_spec, ["billing"]) == {}
        assert "Tag billing matches no operation. Skip." in capsys.readouterr().err


class TestSelectOperations:
    def test_paths_mode(self, users_spec: ParsedSpec) -> None:
        selected = select_operations(users_spec, ["/users/{id}"])
        assert list(selected) == ["GET /users/{id}", "DELETE /users/{id}"]

    def test_tags_mode(self, users_spec: ParsedSpec) -> None:
        selected = select_operations(users_spec, ["users"], by_tags=True)
        assert "POST /users" in selected

    def test_tags_mode_does_not_parse_paths(self, users_spec: ParsedSpec, quiet_output) -> None:
        with pytest.raises(NoMatchingOperationsError):
            select_operations(users_spec, ["/users"], by_tags=True)

    def test_empty_selection_is_fatal(self, users_spec: ParsedSpec, quiet_output) -> None:
        with pytest.raises(NoMatchingOperationsError, match="No API definition matches") as exc_info:
            select_operations(users_spec, ["/missing", "bogus"])
        assert exc_info.value.exit_code == 4
