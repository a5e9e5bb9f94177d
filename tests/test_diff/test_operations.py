"""Tests for apicompare.diff.operations."""

from __future__ import annotations

from typing import Any

from apicompare.diff.operations import (
    diff_operation,
    diff_parameters,
    diff_paths,
    diff_request_body,
    diff_responses,
    operation_identity,
)
from apicompare.models import NOT_APPLICABLE, ChangeType, Severity


def _param(name: str, location: str = "query", **extra: Any) -> dict[str, Any]:
    return {"name": name, "in": location, **extra}


class TestOperationIdentity:
    """operationId when present, METHOD path otherwise."""

    def test_uses_operation_id(self) -> None:
        assert operation_identity({"operationId": "listPets"}, "/pets", "get") == "listPets"

    def test_falls_back_to_method_and_path(self) -> None:
        assert operation_identity({}, "/pets", "get") == "GET /pets"

    def test_empty_operation_id_falls_back(self) -> None:
        assert operation_identity({"operationId": ""}, "/pets", "post") == "POST /pets"


class TestDiffPathsAddedRemoved:
    """Whole paths present on only one side."""

    def test_added_path_reports_each_method(self) -> None:
        target = {"/users": {"get": {"operationId": "listUsers"}, "post": {}}}
        changes = diff_paths({}, target)
        assert len(changes) == 2
        first, second = changes
        assert first.type == ChangeType.NEW
        assert first.severity == Severity.LOW
        assert first.operation_id == "listUsers"
        assert first.method == "GET"
        assert first.path == "/users"
        assert first.new_path == "/users"
        assert first.old_path is None
        assert first.description == "New endpoint: GET /users"
        assert second.operation_id == "POST /users"

    def test_removed_path_is_deprecated_high(self) -> None:
        changes = diff_paths({"/ping": {"get": {}}}, {})
        assert len(changes) == 1
        change = changes[0]
        assert change.type == ChangeType.DEPRECATED
        assert change.severity == Severity.HIGH
        assert change.old_path == "/ping"
        assert change.new_path is None
        assert change.description == "Deprecated endpoint: GET /ping"

    def test_added_before_removed(self) -> None:
        changes = diff_paths({"/old": {"get": {}}}, {"/new": {"get": {}}})
        assert [c.type for c in changes] == [ChangeType.NEW, ChangeType.DEPRECATED]

    def test_path_level_keys_are_not_operations(self) -> None:
        target = {"/pets": {"parameters": [_param("id", "path")], "summary": "Pets", "get": {}}}
        changes = diff_paths({}, target)
        assert [c.method for c in changes] == ["GET"]

    def test_uppercase_method_keys(self) -> None:
        changes = diff_paths({}, {"/a": {"GET": {}}})
        assert changes[0].method == "GET"
        assert changes[0].operation_id == "GET /a"

    def test_path_without_operations_yields_nothing(self) -> None:
        assert diff_paths({}, {"/empty": None, "/meta": {"summary": "x"}}) == []


class TestDiffPathsSharedMethods:
    """Methods added or removed under a path both versions define."""

    def test_added_method_is_reported(self) -> None:
        base = {"/users": {"get": {"operationId": "listUsers"}}}
        target = {"/users": {"get": {"operationId": "listUsers"}, "post": {"operationId": "createUser"}}}
        changes = diff_paths(base, target)
        assert len(changes) == 1
        assert changes[0].type == ChangeType.NEW
        assert changes[0].operation_id == "createUser"
        assert changes[0].method == "POST"
        assert changes[0].path == "/users"

    def test_removed_method_is_reported(self) -> None:
        base = {"/users": {"get": {}, "delete": {}}}
        target = {"/users": {"get": {}}}
        changes = diff_paths(base, target)
        assert len(changes) == 1
        assert changes[0].type == ChangeType.DEPRECATED
        assert changes[0].severity == Severity.HIGH
        assert changes[0].old_path == "/users"

    def test_method_changes_can_be_switched_off(self) -> None:
        base = {"/users": {"get": {}}}
        target = {"/users": {"get": {}, "post": {}}}
        assert diff_paths(base, target, report_method_changes=False) == []

    def test_identical_paths_yield_nothing(self) -> None:
        paths = {"/a": {"get": {"parameters": [_param("q")], "responses": {"200": {}}}}}
        assert diff_paths(paths, paths) == []


class TestDiffParameters:
    """Parameters keyed by (name, in)."""

    def test_new_removed_modified_order(self) -> None:
        base = [_param("limit", type="integer"), _param("sort")]
        target = [_param("limit", type="integer", maximum=100), _param("offset")]
        changes = diff_parameters(base, target, "listPets")
        assert [c.description for c in changes] == [
            "New parameter: query.offset",
            "Removed parameter: query.sort",
            "Modified parameter: query.limit",
        ]
        assert [c.severity for c in changes] == [Severity.MEDIUM, Severity.HIGH, Severity.MEDIUM]
        assert all(c.type == ChangeType.CHANGED_PARAM for c in changes)
        assert all(c.operation_id == "listPets" for c in changes)

    def test_change_payloads(self) -> None:
        base = [_param("limit", type="integer")]
        target = [_param("limit", type="string")]
        (change,) = diff_parameters(base, target, "op")
        assert change.old_params == {"limit": _param("limit", type="integer")}
        assert change.new_params == {"limit": _param("limit", type="string")}

    def test_same_name_different_location_are_distinct(self) -> None:
        changes = diff_parameters([_param("id", "query")], [_param("id", "header")], "op")
        assert [c.description for c in changes] == [
            "New parameter: header.id",
            "Removed parameter: query.id",
        ]

    def test_key_order_is_not_a_modification(self) -> None:
        base = [{"name": "id", "in": "path", "required": True}]
        target = [{"required": True, "in": "path", "name": "id"}]
        assert diff_parameters(base, target, "op") == []

    def test_sub_changes_are_not_path_scoped(self) -> None:
        (change,) = diff_parameters([], [_param("q")], "op")
        assert change.path == NOT_APPLICABLE
        assert change.method == NOT_APPLICABLE
        assert not change.is_path_scoped


class TestDiffResponses:
    """Only status code existence is compared."""

    def test_new_and_removed_codes(self) -> None:
        base = {"200": {"description": "OK"}, "404": {"description": "Missing"}}
        target = {"200": {"description": "OK"}, "400": {"description": "Bad"}}
        changes = diff_responses(base, target, "op")
        assert [c.description for c in changes] == [
            "New response code: 400",
            "Removed response code: 404",
        ]
        assert [c.severity for c in changes] == [Severity.LOW, Severity.MEDIUM]
        assert changes[0].new_params == {"400": {"description": "Bad"}}
        assert changes[1].old_params == {"404": {"description": "Missing"}}

    def test_shared_code_content_is_not_compared(self) -> None:
        base = {"200": {"description": "OK"}}
        target = {"200": {"description": "Completely different"}}
        assert diff_responses(base, target, "op") == []


class TestDiffRequestBody:
    """Request bodies compare whole, without a field breakdown."""

    def test_changed_body(self) -> None:
        base = {"content": {"application/json": {"schema": {"type": "object"}}}}
        target = {"content": {"application/json": {"schema": {"type": "array"}}}}
        (change,) = diff_request_body(base, target, "createPet")
        assert change.type == ChangeType.CHANGED_MODEL
        assert change.severity == Severity.MEDIUM
        assert change.description == "Request body schema changed"
        assert change.old_params == {"requestBody": base}
        assert change.new_params == {"requestBody": target}
        assert change.path == NOT_APPLICABLE

    def test_equal_bodies(self) -> None:
        body = {"required": True, "content": {}}
        assert diff_request_body(body, dict(reversed(list(body.items()))), "op") == []


class TestDiffOperation:
    """Each aspect is compared only when both operations declare it."""

    def test_parameters_then_responses_then_body(self) -> None:
        base = {
            "operationId": "updatePet",
            "parameters": [_param("id", "path")],
            "responses": {"200": {}},
            "requestBody": {"content": {"a": 1}},
        }
        target = {
            "operationId": "updatePetV2",
            "parameters": [_param("id", "path"), _param("dryRun")],
            "responses": {"200": {}, "409": {}},
            "requestBody": {"content": {"a": 2}},
        }
        changes = diff_operation(base, target, "/pets/{id}", "put")
        assert [c.description for c in changes] == [
            "New parameter: query.dryRun",
            "New response code: 409",
            "Request body schema changed",
        ]
        # Identity comes from the base operation.
        assert {c.operation_id for c in changes} == {"updatePet"}

    def test_aspect_missing_on_one_side_is_skipped(self) -> None:
        base = {"parameters": [_param("q")], "responses": {"200": {}}}
        target = {"requestBody": {"content": {}}}
        assert diff_operation(base, target, "/a", "get") == []

    def test_empty_parameter_list_is_still_compared(self) -> None:
        changes = diff_operation({"parameters": []}, {"parameters": [_param("q")]}, "/a", "get")
        assert [c.description for c in changes] == ["New parameter: query.q"]
        assert changes[0].operation_id == "GET /a"
