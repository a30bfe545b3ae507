"""Compile an OpenAPI document and build the Jinja2 template context.

Compilation runs in three steps:
  1. resolve every component schema into the schema table (name -> Model)
  2. extract operations and routes from the path table
  3. flatten component models, then operation models, into one type list

The schema table is complete before any flatten pass starts, since
references are checked against it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from .config import GeneratorConfig
from .errors import NameCollisionError, UnresolvedReferenceError
from .flattener import Flattener
from .loader import get_schemas
from .model import Model, ReferenceModel, Type
from .naming import camel_to_snake, normalize_type_name
from .operations import Operation, Route, extract_operations
from .schema_parser import Resolver

logger = logging.getLogger(__name__)

# Top-level document keys that have no counterpart in the generated code
_UNUSED_DOCUMENT_KEYS = ("servers", "security", "tags", "webhooks", "externalDocs")


@dataclass(frozen=True)
class Compilation:
    """Everything the emission layer needs from one document.

    ``aliases`` maps component schemas that are themselves a bare $ref to
    the name they finally point at.
    """

    types: tuple[Type, ...]
    operations: tuple[Operation, ...]
    routes: tuple[Route, ...]
    aliases: tuple[tuple[str, str], ...] = ()
    schema_table: dict[str, Model] = field(default_factory=dict, compare=False)
    title: str = ""
    version: str = ""


def build_schema_table(spec: dict[str, Any], resolver: Resolver) -> dict[str, Model]:
    """Resolve every component schema, keyed by normalized type name."""
    table: dict[str, Model] = {}
    originals: dict[str, str] = {}
    for name, schema in get_schemas(spec).items():
        type_name = normalize_type_name(name)
        if type_name in table:
            raise NameCollisionError(
                f"component schemas {originals[type_name]!r} and {name!r} share the name",
                context=type_name,
            )
        originals[type_name] = name
        table[type_name] = resolver.resolve(name, schema)
    return table


def _resolve_aliases(table: dict[str, Model]) -> list[tuple[str, str]]:
    """Follow chains of component references down to a named target."""
    aliases = []
    for name, model in table.items():
        if not isinstance(model, ReferenceModel):
            continue
        target = model
        seen = {name}
        while isinstance(target, ReferenceModel) and isinstance(table.get(target.name), ReferenceModel):
            if target.name in seen:
                raise UnresolvedReferenceError(f"reference cycle through {target.name!r}", context=name)
            seen.add(target.name)
            target = table[target.name]
        aliases.append((name, target.name))
    return aliases


def compile_document(spec: dict[str, Any], config: GeneratorConfig | None = None) -> Compilation:
    """Compile a parsed OpenAPI document into types, operations and routes."""
    config = config or GeneratorConfig()
    resolver = Resolver(qualify_nested_names=config.qualify_nested_names)

    for key in _UNUSED_DOCUMENT_KEYS:
        if key in spec:
            logger.debug("ignoring document-level %r", key)

    table = build_schema_table(spec, resolver)
    operations, routes, operation_models = extract_operations(spec, resolver)

    flattener = Flattener(known_names=table.keys())
    flattener.add_all(table.values())
    flattener.add_all(operation_models)

    info = spec.get("info") or {}
    compilation = Compilation(
        types=tuple(flattener.types),
        operations=tuple(operations),
        routes=tuple(routes),
        aliases=tuple(_resolve_aliases(table)),
        schema_table=table,
        title=info.get("title", ""),
        version=str(info.get("version", "")),
    )
    logger.info(
        "compiled %d types, %d operations, %d routes",
        len(compilation.types), len(compilation.operations), len(compilation.routes),
    )
    return compilation


def _handler(operation: Operation) -> dict[str, Any]:
    """Describe one interface method for the handlers template."""
    params = []
    used: set[str] = set()
    for param in operation.parameters:
        name = camel_to_snake(param.field_name) or "param"
        # Handler methods take self first
        if name == "self":
            name = "self_"
        # Same name in another location, e.g. an "id" query and header
        if name in used:
            name = f"{name}_{param.location}"
        used.add(name)
        params.append({
            "name": name,
            "json_name": param.name,
            "type": param.type_name,
            "location": param.location,
            "required": param.required,
        })
    body_name = "body"
    if any(p["name"] == body_name for p in params):
        body_name = "request_body"

    success = operation.success_response
    if success is None:
        returns = None
    else:
        returns = success.type_name or "None"

    return {
        "name": operation.name,
        "method_name": camel_to_snake(operation.name),
        "http_method": operation.method,
        "path": operation.path,
        "params": params,
        "body": {"name": body_name, "type": operation.request_body} if operation.request_body else None,
        "returns": returns,
        "summary": operation.summary,
        "deprecated": operation.deprecated,
    }


def _imported_types(handlers: list[dict[str, Any]]) -> list[str]:
    """Type names the handlers module needs, in first-use order."""
    names: list[str] = []
    for handler in handlers:
        used = [p["type"] for p in handler["params"]]
        if handler["body"]:
            used.append(handler["body"]["type"])
        if handler["returns"] and handler["returns"] != "None":
            used.append(handler["returns"])
        for name in used:
            if name not in names:
                names.append(name)
    return names


def _check_snake_names(names: list[str], kind: str) -> None:
    """Raise if two names share a snake_case form, e.g. ``ABTest`` and ``AbTest``."""
    seen: dict[str, str] = {}
    for name in names:
        snake = camel_to_snake(name)
        if snake in seen and seen[snake] != name:
            raise NameCollisionError(
                f"{kind} {seen[snake]!r} and {name!r} both emit as {snake!r}", context=snake,
            )
        seen[snake] = name


def build_context(compilation: Compilation, config: GeneratorConfig | None = None) -> dict[str, Any]:
    """Build the full template context for models.py.j2 and handlers.py.j2."""
    config = config or GeneratorConfig()
    # validate_<type> functions and handler methods are named in snake_case
    _check_snake_names(
        [t.name for t in compilation.types] + [alias for alias, _ in compilation.aliases], "types",
    )
    _check_snake_names([op.name for op in compilation.operations], "operations")
    method_names = {op.name: camel_to_snake(op.name) for op in compilation.operations}
    handlers = [_handler(op) for op in compilation.operations]

    return {
        "types": list(compilation.types),
        "aliases": list(compilation.aliases),
        "handlers": handlers,
        "routes": [
            {
                "method": route.method,
                "path": route.path,
                "handler": method_names[route.operation_name],
            }
            for route in compilation.routes
        ],
        "imported_types": _imported_types(handlers),
        "interface_name": config.interface_name,
        "register_function": f"add_{camel_to_snake(config.interface_name)}",
        "models_module": config.models_module,
        "title": compilation.title,
        "version": compilation.version,
        "type_count": len(compilation.types),
        "operation_count": len(compilation.operations),
    }
