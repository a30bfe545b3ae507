"""Resolved models and the flattened types emitted from them.

A Model is the resolved, named form of one schema node. The set of model
variants is closed:

    ScalarModel     null, boolean, integer, number, string
    ObjectModel     ordered fields, each owning its child model
    ArrayModel      owns its item model
    UnionModel      owns its independently resolved variants
    ReferenceModel  a name only; the target lives in the schema table

Cycles in the schema graph only ever go through ReferenceModel, so every
model tree is finite.

A Type is the flat, emission-ready view of one named model.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .constraints import Constraint

SCALAR = "scalar"
OBJECT = "object"
ARRAY = "array"
UNION = "union"


@dataclass(frozen=True)
class ScalarModel:
    name: str
    kind: str
    representation: str
    format: str | None = None
    constraints: tuple[Constraint, ...] = ()
    description: str = ""
    deprecated: bool = False


@dataclass(frozen=True)
class Field:
    """One object property. ``name`` is the camelCase field name."""

    name: str
    json_name: str
    model: Model
    required: bool = False
    nullable: bool = False


@dataclass(frozen=True)
class ObjectModel:
    name: str
    fields: tuple[Field, ...] = ()
    constraints: tuple[Constraint, ...] = ()
    description: str = ""
    deprecated: bool = False


@dataclass(frozen=True)
class ArrayModel:
    name: str
    item: Model
    constraints: tuple[Constraint, ...] = ()
    description: str = ""
    deprecated: bool = False


@dataclass(frozen=True)
class UnionModel:
    name: str
    variants: tuple[Model, ...] = ()
    description: str = ""
    deprecated: bool = False


@dataclass(frozen=True)
class ReferenceModel:
    name: str


Model = ScalarModel | ObjectModel | ArrayModel | UnionModel | ReferenceModel


def make_docstring(description: str, deprecated: bool) -> str:
    """Build the declaration docstring from a description and deprecation flag."""
    description = " ".join(description.split())
    if deprecated:
        return f"Deprecated: {description}" if description else "Deprecated"
    return description


@dataclass(frozen=True)
class TypeField:
    name: str
    json_name: str
    type_name: str
    required: bool = False
    nullable: bool = False


@dataclass(frozen=True)
class Type:
    """A named declaration ready for emission.

    Only the payload matching ``kind`` is set: ``representation`` for
    scalars, ``fields`` for objects, ``item`` for arrays and ``variants``
    for unions. Children are referred to by type name only, so no type
    is ever nested inside another.
    """

    name: str
    kind: str
    docstring: str = ""
    representation: str | None = None
    fields: tuple[TypeField, ...] = ()
    item: str | None = None
    variants: tuple[str, ...] = ()
    rules: tuple[Constraint, ...] = ()

    @property
    def definition(self) -> str:
        """Language-neutral rendering of the shape, e.g. ``list[BoardItem]``."""
        if self.kind == SCALAR:
            return self.representation or ""
        if self.kind == ARRAY:
            return f"list[{self.item}]"
        if self.kind == UNION:
            return " | ".join(self.variants)
        return "{" + "; ".join(f"{f.name} {f.type_name}" for f in self.fields) + "}"

    def same_shape(self, other: Type) -> bool:
        return (self.kind, self.definition, self.fields, self.rules) == (
            other.kind, other.definition, other.fields, other.rules,
        )

    def validate(self, value: Any) -> list[str]:
        """Run every rule against a value and return the violation messages."""
        errors = []
        for rule in self.rules:
            message = rule.check(value)
            if message is not None:
                errors.append(message)
        return errors
