"""Flatten model trees into an ordered, de-duplicated list of types.

Traversal is depth-first with the parent before its children, and children
in declared field/item/variant order. A reference contributes no type of
its own; its target is flattened from the schema table.
"""

from __future__ import annotations

from collections.abc import Collection, Iterable

from .errors import NameCollisionError, UnresolvedReferenceError
from .model import (
    ARRAY,
    OBJECT,
    SCALAR,
    UNION,
    ArrayModel,
    Model,
    ObjectModel,
    ReferenceModel,
    ScalarModel,
    Type,
    TypeField,
    UnionModel,
    make_docstring,
)


def to_type(model: Model) -> Type | None:
    """Return the flat Type for a single model, or None for a reference."""
    if isinstance(model, ReferenceModel):
        return None
    docstring = make_docstring(model.description, model.deprecated)
    if isinstance(model, ScalarModel):
        return Type(
            name=model.name,
            kind=SCALAR,
            docstring=docstring,
            representation=model.representation,
            rules=model.constraints,
        )
    if isinstance(model, ObjectModel):
        fields = tuple(
            TypeField(
                name=field.name,
                json_name=field.json_name,
                type_name=field.model.name,
                required=field.required,
                nullable=field.nullable,
            )
            for field in model.fields
        )
        return Type(
            name=model.name,
            kind=OBJECT,
            docstring=docstring,
            fields=fields,
            rules=model.constraints,
        )
    if isinstance(model, ArrayModel):
        return Type(
            name=model.name,
            kind=ARRAY,
            docstring=docstring,
            item=model.item.name,
            rules=model.constraints,
        )
    if isinstance(model, UnionModel):
        return Type(
            name=model.name,
            kind=UNION,
            docstring=docstring,
            variants=tuple(variant.name for variant in model.variants),
        )
    raise TypeError(f"not a model: {model!r}")


def children(model: Model) -> tuple[Model, ...]:
    """Return the models directly owned by ``model``."""
    if isinstance(model, ObjectModel):
        return tuple(field.model for field in model.fields)
    if isinstance(model, ArrayModel):
        return (model.item,)
    if isinstance(model, UnionModel):
        return model.variants
    return ()


class Flattener:
    """Accumulates types from several root models with one name table.

    ``known_names`` is the set of schema table names references may point
    at; when omitted, references are not checked.
    """

    def __init__(self, known_names: Collection[str] | None = None) -> None:
        self.known_names = known_names
        self.types: list[Type] = []
        self._by_name: dict[str, Type] = {}

    def add(self, model: Model) -> None:
        # Pre-order: parent first, then children left to right.
        stack: list[Model] = [model]
        while stack:
            current = stack.pop()
            if isinstance(current, ReferenceModel):
                self._check_reference(current)
                continue
            flat = to_type(current)
            if flat is not None:
                self._record(flat)
            stack.extend(reversed(children(current)))

    def add_all(self, models: Iterable[Model]) -> None:
        for model in models:
            self.add(model)

    def _check_reference(self, reference: ReferenceModel) -> None:
        if self.known_names is not None and reference.name not in self.known_names:
            raise UnresolvedReferenceError(
                f"reference to unknown schema {reference.name!r}",
            )

    def _record(self, flat: Type) -> None:
        existing = self._by_name.get(flat.name)
        if existing is None:
            self._by_name[flat.name] = flat
            self.types.append(flat)
            return
        if not existing.same_shape(flat):
            raise NameCollisionError(
                f"{existing.definition!r} and {flat.definition!r} share the name",
                context=flat.name,
            )


def flatten(model: Model, known_names: Collection[str] | None = None) -> list[Type]:
    """Return every Type reachable from ``model``, parent first, by name once."""
    flattener = Flattener(known_names)
    flattener.add(model)
    return flattener.types
