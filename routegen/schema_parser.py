"""Resolve OpenAPI schema nodes into named models.

Handles:
- $ref to component schemas (kept as references, never expanded)
- object, array, string, number, integer, boolean and null schemas
- Numeric formats (int32, int64, float, double)
- anyOf/oneOf and OpenAPI 3.1 type lists as unions
- Single-element allOf wrappers
- Hierarchical naming of nested models (<Parent><Property>, <Name>Item)

Keywords that do not affect the model (readOnly, examples, ...) are logged
and ignored.
"""

from __future__ import annotations

import logging
from typing import Any

from .constraints import compile_constraints, compile_required
from .errors import (
    InvalidArraySchemaError,
    NameCollisionError,
    UnsupportedItemsTypeError,
    UnsupportedReferenceError,
    UnsupportedSchemaTypeError,
)
from .model import (
    ArrayModel,
    Field,
    Model,
    ObjectModel,
    ReferenceModel,
    ScalarModel,
    UnionModel,
)
from .naming import normalize_field_name, normalize_type_name

logger = logging.getLogger(__name__)

SCHEMA_REF_PREFIX = "#/components/schemas/"

_SCALAR_KINDS = ("null", "boolean", "integer", "number", "string")

# Numeric format -> target representation
_NUMERIC_FORMATS: dict[str, str] = {
    "int32": "int32",
    "int64": "int64",
    "float": "float32",
    "double": "float64",
}

# Representation when no (recognized) format is given
_DEFAULT_REPRESENTATIONS: dict[str, str] = {
    "null": "null",
    "boolean": "bool",
    "integer": "int",
    "number": "float",
    "string": "string",
}

# Keywords accepted but without effect on the model
_IGNORED_KEYWORDS = (
    "additionalProperties",
    "patternProperties",
    "readOnly",
    "writeOnly",
    "example",
    "examples",
    "default",
    "xml",
    "externalDocs",
)

# Composition keywords the model cannot express
_UNMODELED_KEYWORDS = ("not", "discriminator")


def reference_name(ref: str) -> str:
    """Return the type name a component schema $ref points at."""
    if not ref.startswith(SCHEMA_REF_PREFIX):
        raise UnsupportedReferenceError(f"reference not supported: {ref}")
    name = normalize_type_name(ref[len(SCHEMA_REF_PREFIX):])
    if not name:
        raise UnsupportedReferenceError(f"reference has no usable name: {ref}")
    return name


def is_reference(schema: Any) -> bool:
    return isinstance(schema, dict) and "$ref" in schema


class Resolver:
    """Builds a Model tree for one schema node.

    With ``qualify_nested_names`` (the default) a property model is named
    after its parent, ``Status.winner`` -> ``StatusWinner``, which keeps
    names unique as long as sibling properties are distinct. Without it the
    property name alone is used and collisions surface when flattening.
    """

    def __init__(self, qualify_nested_names: bool = True) -> None:
        self.qualify_nested_names = qualify_nested_names

    def resolve(self, name: str, schema: Any) -> Model:
        """Resolve ``schema`` into a Model, using ``name`` as the naming hint."""
        if is_reference(schema):
            return ReferenceModel(reference_name(schema["$ref"]))

        model_name = normalize_type_name(name)
        if not model_name:
            raise UnsupportedSchemaTypeError("schema has no usable name", context=repr(name))
        if not isinstance(schema, dict):
            raise UnsupportedSchemaTypeError(
                f"expected a schema object, got {type(schema).__name__}", context=model_name,
            )
        self._log_ignored(model_name, schema)

        if "allOf" in schema:
            parts = schema["allOf"]
            if len(parts) != 1:
                raise UnsupportedSchemaTypeError(
                    f"allOf with {len(parts)} schemas is not supported", context=model_name,
                )
            return self.resolve(model_name, parts[0])

        for key in ("anyOf", "oneOf"):
            if key in schema:
                if not schema[key]:
                    raise UnsupportedSchemaTypeError(f"{key} has no schemas", context=model_name)
                variants = tuple(
                    self.resolve(f"{model_name}Variant{i}", sub)
                    for i, sub in enumerate(schema[key], start=1)
                )
                return self._union(model_name, schema, variants)

        schema_type = schema.get("type")
        if isinstance(schema_type, list):
            if not schema_type:
                raise UnsupportedSchemaTypeError("type list is empty", context=model_name)
            if len(schema_type) == 1:
                return self._build(model_name, schema_type[0], schema)
            variants = tuple(
                self._build(f"{model_name}Variant{i}", kind, schema)
                for i, kind in enumerate(schema_type, start=1)
            )
            return self._union(model_name, schema, variants)

        return self._build(model_name, schema_type, schema)

    def _build(self, name: str, kind: Any, schema: dict[str, Any]) -> Model:
        if kind == "object":
            return self._object(name, schema)
        if kind == "array":
            return self._array(name, schema)
        if kind in _SCALAR_KINDS:
            return self._scalar(name, kind, schema)
        if kind is None:
            raise UnsupportedSchemaTypeError("schema has no type", context=name)
        raise UnsupportedSchemaTypeError(f"unsupported type: {kind}", context=name)

    def _object(self, name: str, schema: dict[str, Any]) -> ObjectModel:
        required = set(schema.get("required", []))
        fields: list[Field] = []
        seen: dict[str, str] = {}

        for prop_name, prop_schema in (schema.get("properties") or {}).items():
            field_name = normalize_field_name(prop_name)
            if not field_name:
                raise UnsupportedSchemaTypeError(
                    f"property {prop_name!r} has no usable name", context=name,
                )
            if field_name in seen:
                raise NameCollisionError(
                    f"properties {seen[field_name]!r} and {prop_name!r} both normalize to {field_name!r}",
                    context=name,
                )
            seen[field_name] = prop_name

            if self.qualify_nested_names:
                child_name = name + normalize_type_name(prop_name)
            else:
                child_name = prop_name
            nullable = isinstance(prop_schema, dict) and bool(prop_schema.get("nullable", False))
            fields.append(Field(
                name=field_name,
                json_name=prop_name,
                model=self.resolve(child_name, prop_schema),
                required=prop_name in required,
                nullable=nullable,
            ))

        return ObjectModel(
            name=name,
            fields=tuple(fields),
            constraints=compile_required(schema),
            description=schema.get("description", ""),
            deprecated=bool(schema.get("deprecated", False)),
        )

    def _array(self, name: str, schema: dict[str, Any]) -> ArrayModel:
        if "items" not in schema:
            raise InvalidArraySchemaError("array type must have an items property", context=name)
        items = schema["items"]
        if isinstance(items, bool):
            raise UnsupportedItemsTypeError(
                "array type with boolean items is not supported", context=name,
            )
        if not isinstance(items, dict):
            raise InvalidArraySchemaError(
                f"array items must be a schema object, got {type(items).__name__}", context=name,
            )
        return ArrayModel(
            name=name,
            item=self.resolve(name + "Item", items),
            constraints=compile_constraints(schema),
            description=schema.get("description", ""),
            deprecated=bool(schema.get("deprecated", False)),
        )

    def _scalar(self, name: str, kind: str, schema: dict[str, Any]) -> ScalarModel:
        fmt = schema.get("format")
        representation = _DEFAULT_REPRESENTATIONS[kind]
        if kind in ("integer", "number") and fmt in _NUMERIC_FORMATS:
            representation = _NUMERIC_FORMATS[fmt]
        elif kind in ("integer", "number") and fmt:
            logger.debug("%s: unrecognized numeric format %r, using %s", name, fmt, representation)
        return ScalarModel(
            name=name,
            kind=kind,
            representation=representation,
            format=fmt,
            constraints=compile_constraints(schema),
            description=schema.get("description", ""),
            deprecated=bool(schema.get("deprecated", False)),
        )

    def _union(self, name: str, schema: dict[str, Any], variants: tuple[Model, ...]) -> UnionModel:
        return UnionModel(
            name=name,
            variants=variants,
            description=schema.get("description", ""),
            deprecated=bool(schema.get("deprecated", False)),
        )

    def _log_ignored(self, name: str, schema: dict[str, Any]) -> None:
        for key in _UNMODELED_KEYWORDS:
            if key in schema:
                logger.warning("%s: ignoring unsupported keyword %r", name, key)
        for key in _IGNORED_KEYWORDS:
            if key in schema:
                logger.debug("%s: ignoring keyword %r", name, key)
