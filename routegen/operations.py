"""Extract operations and routes from the OpenAPI path table.

For every path (document order) and every populated method slot (in the
fixed order below) one Operation and one Route are produced. Inline
parameter, request body and response schemas are resolved to models named
after the operation:

    parameter      <OperationName><ParamName>
    request body   <OperationName>RequestBody
    response       <OperationName><Status>Response

Schemas given as component references keep the referenced name; the
reference itself is collected so it can be checked against the schema table.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from .errors import (
    MissingJSONContentError,
    MissingOperationIdError,
    NameCollisionError,
    UnsupportedSchemaTypeError,
)
from .loader import get_paths, resolve_ref
from .model import Model, ReferenceModel
from .naming import normalize_field_name, normalize_type_name, to_router_path
from .schema_parser import Resolver, is_reference, reference_name

logger = logging.getLogger(__name__)

HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch", "trace")

JSON_MEDIA_TYPE = "application/json"


@dataclass(frozen=True)
class Parameter:
    name: str
    field_name: str
    type_name: str
    location: str = "query"
    required: bool = False


@dataclass(frozen=True)
class Response:
    status: str
    type_name: str | None = None
    description: str = ""


@dataclass(frozen=True)
class Operation:
    """One handler slot. ``path`` keeps the OpenAPI {param} syntax."""

    name: str
    method: str
    path: str
    request_body: str | None = None
    parameters: tuple[Parameter, ...] = ()
    responses: tuple[Response, ...] = ()
    summary: str = ""
    deprecated: bool = False

    @property
    def success_response(self) -> Response | None:
        """First 2xx response, falling back to ``default``."""
        for response in self.responses:
            if response.status.startswith("2"):
                return response
        for response in self.responses:
            if response.status == "default":
                return response
        return None


@dataclass(frozen=True)
class Route:
    """Dispatch entry. ``path`` is in router :param syntax."""

    method: str
    path: str
    operation_name: str


def find_json_content(content: dict[str, Any]) -> dict[str, Any] | None:
    """Return the JSON media type entry of a content map, if any."""
    if JSON_MEDIA_TYPE in content:
        return content[JSON_MEDIA_TYPE] or {}
    for media_type, entry in content.items():
        base = media_type.split(";", 1)[0].strip().lower()
        if base == JSON_MEDIA_TYPE or (base.startswith("application/") and base.endswith("+json")):
            return entry or {}
    return None


def _merge_parameters(
    spec: dict[str, Any],
    path_parameters: list[dict[str, Any]],
    operation_parameters: list[dict[str, Any]],
) -> list[dict[str, Any]]:
    """Path-item parameters first; operation parameters override by (name, in)."""
    merged: list[dict[str, Any]] = []
    index: dict[tuple[str, str], int] = {}
    for param in [*path_parameters, *operation_parameters]:
        if is_reference(param):
            param = resolve_ref(spec, param["$ref"], "parameters")
        key = (param["name"], param.get("in", "query"))
        if key in index:
            merged[index[key]] = param
        else:
            index[key] = len(merged)
            merged.append(param)
    return merged


class OperationExtractor:
    """Walks the path table, collecting the models it meets along the way."""

    def __init__(self, spec: dict[str, Any], resolver: Resolver | None = None) -> None:
        self.spec = spec
        self.resolver = resolver or Resolver()
        self.operations: list[Operation] = []
        self.routes: list[Route] = []
        self.models: list[Model] = []

    def extract(self) -> None:
        for path, path_item in get_paths(self.spec).items():
            path_parameters = path_item.get("parameters") or []
            for method in HTTP_METHODS:
                operation = path_item.get(method)
                if operation is None:
                    continue
                extracted = self._operation(path, method, path_parameters, operation)
                for existing in self.operations:
                    if existing.name == extracted.name:
                        raise NameCollisionError(
                            f"{existing.method} {existing.path} and {method.upper()} {path} "
                            f"share the operation name",
                            context=extracted.name,
                        )
                self.operations.append(extracted)
                self.routes.append(Route(
                    method=extracted.method,
                    path=to_router_path(path),
                    operation_name=extracted.name,
                ))
                logger.debug("extracted %s %s -> %s", extracted.method, path, extracted.name)

    def _operation(
        self,
        path: str,
        method: str,
        path_parameters: list[dict[str, Any]],
        operation: dict[str, Any],
    ) -> Operation:
        http_method = method.upper()
        operation_id = operation.get("operationId") or ""
        name = normalize_type_name(operation_id)
        if not name:
            raise MissingOperationIdError(
                f"operationId is empty for {http_method} {path}", context=f"{http_method} {path}",
            )

        parameters = tuple(
            self._parameter(name, param)
            for param in _merge_parameters(
                self.spec, path_parameters, operation.get("parameters") or [],
            )
        )

        request_body = None
        if operation.get("requestBody") is not None:
            request_body = self._request_body(name, operation["requestBody"])

        responses = tuple(
            self._response(name, str(status), response)
            for status, response in (operation.get("responses") or {}).items()
        )

        return Operation(
            name=name,
            method=http_method,
            path=path,
            request_body=request_body,
            parameters=parameters,
            responses=responses,
            summary=operation.get("summary", ""),
            deprecated=bool(operation.get("deprecated", False)),
        )

    def _schema_type_name(self, name: str, schema: Any) -> str:
        if is_reference(schema):
            model = ReferenceModel(reference_name(schema["$ref"]))
        else:
            model = self.resolver.resolve(name, schema)
        self.models.append(model)
        return model.name

    def _parameter(self, operation_name: str, param: dict[str, Any]) -> Parameter:
        param_name = param["name"]
        schema = param.get("schema")
        if schema is None:
            # Parameters may describe their value through a content map instead
            entry = find_json_content(param.get("content") or {})
            schema = (entry or {}).get("schema")
        if schema is None:
            raise UnsupportedSchemaTypeError(
                f"parameter {param_name!r} has no schema", context=operation_name,
            )
        location = param.get("in", "query")
        return Parameter(
            name=param_name,
            field_name=normalize_field_name(param_name),
            type_name=self._schema_type_name(operation_name + normalize_type_name(param_name), schema),
            location=location,
            required=bool(param.get("required", location == "path")),
        )

    def _request_body(self, operation_name: str, request_body: dict[str, Any]) -> str | None:
        if is_reference(request_body):
            request_body = resolve_ref(self.spec, request_body["$ref"], "requestBodies")
        entry = find_json_content(request_body.get("content") or {})
        if entry is None:
            raise MissingJSONContentError(
                f"no JSON content for {operation_name} request body", context=operation_name,
            )
        schema = entry.get("schema")
        if schema is None:
            logger.warning("%s: JSON request body has no schema, ignoring it", operation_name)
            return None
        return self._schema_type_name(operation_name + "RequestBody", schema)

    def _response(self, operation_name: str, status: str, response: dict[str, Any]) -> Response:
        if is_reference(response):
            response = resolve_ref(self.spec, response["$ref"], "responses")
        description = response.get("description", "")
        content = response.get("content") or {}
        if not content:
            return Response(status=status, description=description)
        entry = find_json_content(content)
        if entry is None or entry.get("schema") is None:
            logger.info(
                "%s: response %s has no JSON schema (%s), leaving it untyped",
                operation_name, status, ", ".join(content),
            )
            return Response(status=status, description=description)
        type_name = self._schema_type_name(
            f"{operation_name}{normalize_type_name(status)}Response", entry["schema"],
        )
        return Response(status=status, type_name=type_name, description=description)


def extract_operations(
    spec: dict[str, Any],
    resolver: Resolver | None = None,
) -> tuple[list[Operation], list[Route], list[Model]]:
    """Extract every operation and route, plus the models they use.

    The models are the inline schemas and the bare component references,
    in the order they were met.
    """
    extractor = OperationExtractor(spec, resolver)
    extractor.extract()
    return extractor.operations, extractor.routes, extractor.models
