"""Tests for the operations module."""

import pytest

from routegen.errors import (
    MissingJSONContentError,
    MissingOperationIdError,
    NameCollisionError,
    UnresolvedReferenceError,
)
from routegen.model import ReferenceModel
from routegen.operations import (
    Operation,
    Parameter,
    Response,
    Route,
    extract_operations,
    find_json_content,
)

_OK = {"200": {"description": "OK"}}


def _json(schema):
    return {"content": {"application/json": {"schema": schema}}}


class TestExtractOperations:
    """Path table -> operations and routes."""

    def test_get_only_path(self, make_document):
        spec = make_document(paths={"/board": {"get": {"operationId": "getBoard", "responses": _OK}}})
        operations, routes, models = extract_operations(spec)

        assert operations == [
            Operation(
                name="GetBoard",
                method="GET",
                path="/board",
                responses=(Response(status="200", description="OK"),),
            ),
        ]
        assert routes == [Route(method="GET", path="/board", operation_name="GetBoard")]
        assert models == []

    def test_method_order_fixed(self, make_document):
        path_item = {
            method: {"operationId": f"{method}-item", "responses": _OK}
            for method in ("trace", "patch", "head", "options", "delete", "post", "put", "get")
        }
        operations, _, _ = extract_operations(make_document(paths={"/item": path_item}))
        assert [op.method for op in operations] == [
            "GET", "PUT", "POST", "DELETE", "OPTIONS", "HEAD", "PATCH", "TRACE",
        ]

    def test_paths_in_document_order(self, make_document):
        spec = make_document(paths={
            "/z": {"get": {"operationId": "getZ", "responses": _OK}},
            "/a": {"get": {"operationId": "getA", "responses": _OK}},
        })
        _, routes, _ = extract_operations(spec)
        assert [r.path for r in routes] == ["/z", "/a"]

    def test_route_uses_router_path(self, make_document):
        spec = make_document(paths={
            "/board/{row}/{column}": {
                "get": {
                    "operationId": "getSquare",
                    "parameters": [
                        {"name": "row", "in": "path", "required": True, "schema": {"type": "integer"}},
                        {"name": "column", "in": "path", "required": True, "schema": {"type": "integer"}},
                    ],
                    "responses": _OK,
                },
            },
        })
        operations, routes, _ = extract_operations(spec)
        assert operations[0].path == "/board/{row}/{column}"
        assert routes[0] == Route("GET", "/board/:row/:column", "GetSquare")

    def test_non_method_keys_ignored(self, make_document):
        spec = make_document(paths={
            "/board": {
                "summary": "Board",
                "servers": [],
                "get": {"operationId": "getBoard", "responses": _OK},
            },
        })
        operations, _, _ = extract_operations(spec)
        assert len(operations) == 1

    def test_missing_operation_id(self, make_document):
        spec = make_document(paths={"/board": {"get": {"responses": _OK}}})
        with pytest.raises(MissingOperationIdError, match="operationId is empty for GET /board"):
            extract_operations(spec)

    def test_duplicate_operation_names(self, make_document):
        spec = make_document(paths={
            "/a": {"get": {"operationId": "get-item", "responses": _OK}},
            "/b": {"get": {"operationId": "getItem", "responses": _OK}},
        })
        with pytest.raises(NameCollisionError, match="GetItem"):
            extract_operations(spec)

    def test_summary_and_deprecated(self, make_document):
        spec = make_document(paths={
            "/board": {"get": {
                "operationId": "getBoard", "summary": "Get the board", "deprecated": True, "responses": _OK,
            }},
        })
        (operation,), _, _ = extract_operations(spec)
        assert operation.summary == "Get the board"
        assert operation.deprecated is True


class TestParameters:
    """Parameter naming, merging and $ref resolution."""

    def test_inline_schema_named_after_operation(self, make_document):
        spec = make_document(paths={
            "/games": {"get": {
                "operationId": "listGames",
                "parameters": [{"name": "page-size", "in": "query", "schema": {"type": "integer", "maximum": 50}}],
                "responses": _OK,
            }},
        })
        (operation,), _, models = extract_operations(spec)
        assert operation.parameters == (
            Parameter(name="page-size", field_name="pageSize", type_name="ListGamesPageSize", location="query"),
        )
        assert [m.name for m in models] == ["ListGamesPageSize"]

    def test_reference_schema_keeps_name(self, make_document):
        spec = make_document(paths={
            "/board/{row}": {"get": {
                "operationId": "getRow",
                "parameters": [{"name": "row", "in": "path", "schema": {"$ref": "#/components/schemas/coordinate"}}],
                "responses": _OK,
            }},
        })
        (operation,), _, models = extract_operations(spec)
        assert operation.parameters[0].type_name == "Coordinate"
        assert operation.parameters[0].required is True
        assert models == [ReferenceModel("Coordinate")]

    def test_path_level_first_operation_overrides(self, make_document):
        spec = make_document(paths={
            "/board/{row}": {
                "parameters": [
                    {"name": "row", "in": "path", "required": True, "schema": {"type": "integer"}},
                    {"name": "verbose", "in": "query", "schema": {"type": "boolean"}},
                ],
                "get": {
                    "operationId": "getRow",
                    "parameters": [
                        {"name": "limit", "in": "query", "schema": {"type": "integer"}},
                        {"name": "verbose", "in": "query", "required": True, "schema": {"type": "string"}},
                    ],
                    "responses": _OK,
                },
            },
        })
        (operation,), _, _ = extract_operations(spec)
        assert [(p.name, p.required) for p in operation.parameters] == [
            ("row", True), ("verbose", True), ("limit", False),
        ]

    def test_same_name_different_location_kept(self, make_document):
        spec = make_document(paths={
            "/items": {"get": {
                "operationId": "listItems",
                "parameters": [
                    {"name": "id", "in": "query", "schema": {"type": "string"}},
                    {"name": "id", "in": "header", "schema": {"type": "string"}},
                ],
                "responses": _OK,
            }},
        })
        (operation,), _, _ = extract_operations(spec)
        assert [p.location for p in operation.parameters] == ["query", "header"]

    def test_component_parameter_reference(self, tictactoe_spec):
        operations, _, _ = extract_operations(tictactoe_spec)
        get_square = operations[1]
        assert get_square.parameters == (
            Parameter(name="row", field_name="row", type_name="Coordinate", location="path", required=True),
            Parameter(name="column", field_name="column", type_name="Coordinate", location="path", required=True),
        )

    def test_dangling_parameter_reference(self, make_document):
        spec = make_document(paths={
            "/board": {"get": {
                "operationId": "getBoard",
                "parameters": [{"$ref": "#/components/parameters/missing"}],
                "responses": _OK,
            }},
        })
        with pytest.raises(UnresolvedReferenceError, match="reference target not found"):
            extract_operations(spec)


class TestRequestBody:

    def test_reference_body(self, tictactoe_spec):
        operations, _, _ = extract_operations(tictactoe_spec)
        assert operations[2].name == "PutSquare"
        assert operations[2].request_body == "Mark"

    def test_inline_body_named(self, make_document):
        spec = make_document(paths={
            "/games": {"post": {
                "operationId": "createGame",
                "requestBody": _json({"type": "object", "properties": {"name": {"type": "string"}}}),
                "responses": _OK,
            }},
        })
        (operation,), _, models = extract_operations(spec)
        assert operation.request_body == "CreateGameRequestBody"
        assert models[0].fields[0].model.name == "CreateGameRequestBodyName"

    def test_vendor_json_media_type(self, make_document):
        spec = make_document(paths={
            "/games": {"post": {
                "operationId": "createGame",
                "requestBody": {"content": {"application/merge-patch+json": {"schema": {"type": "string"}}}},
                "responses": _OK,
            }},
        })
        (operation,), _, _ = extract_operations(spec)
        assert operation.request_body == "CreateGameRequestBody"

    def test_body_without_json(self, make_document):
        spec = make_document(paths={
            "/upload": {"post": {
                "operationId": "upload",
                "requestBody": {"content": {"text/plain": {"schema": {"type": "string"}}}},
                "responses": _OK,
            }},
        })
        with pytest.raises(MissingJSONContentError, match="no JSON content for Upload request body"):
            extract_operations(spec)

    def test_request_body_reference(self, make_document):
        spec = make_document(
            paths={"/games": {"post": {
                "operationId": "createGame",
                "requestBody": {"$ref": "#/components/requestBodies/game"},
                "responses": _OK,
            }}},
            requestBodies={"game": _json({"$ref": "#/components/schemas/game"})},
        )
        (operation,), _, _ = extract_operations(spec)
        assert operation.request_body == "Game"


class TestResponses:

    def test_typed_and_untyped(self, tictactoe_spec):
        operations, _, _ = extract_operations(tictactoe_spec)
        get_square = operations[1]
        assert get_square.responses == (
            Response(status="200", type_name="Mark", description="OK"),
            Response(status="400", description="The provided parameters are incorrect"),
        )
        assert get_square.success_response.type_name == "Mark"

    def test_inline_response_named(self, make_document):
        spec = make_document(paths={
            "/games": {"get": {
                "operationId": "listGames",
                "responses": {"200": {"description": "OK", **_json({"type": "array", "items": {"type": "string"}})}},
            }},
        })
        (operation,), _, models = extract_operations(spec)
        assert operation.responses[0].type_name == "ListGames200Response"
        assert models[0].item.name == "ListGames200ResponseItem"

    def test_default_response_fallback(self, make_document):
        spec = make_document(paths={
            "/games": {"delete": {
                "operationId": "clearGames",
                "responses": {"default": {"description": "Done"}, "404": {"description": "Missing"}},
            }},
        })
        (operation,), _, _ = extract_operations(spec)
        assert operation.success_response == Response(status="default", description="Done")

    def test_response_reference(self, make_document):
        spec = make_document(
            paths={"/games": {"get": {
                "operationId": "listGames",
                "responses": {"200": {"$ref": "#/components/responses/games"}},
            }}},
            responses={"games": {"description": "Games", **_json({"$ref": "#/components/schemas/games"})}},
        )
        (operation,), _, _ = extract_operations(spec)
        assert operation.responses == (Response(status="200", type_name="Games", description="Games"),)


class TestFindJsonContent:

    def test_exact(self):
        assert find_json_content({"application/json": {"schema": {}}}) == {"schema": {}}

    def test_with_parameters(self):
        assert find_json_content({"application/json; charset=utf-8": {}}) == {}

    def test_none(self):
        assert find_json_content({"text/html": {}}) is None
