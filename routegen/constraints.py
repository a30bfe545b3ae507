"""Compile schema-level constraints into validation checks.

Handles:
- String length (minLength, maxLength) and pattern
- Numeric bounds (minimum, maximum, exclusive bounds, multipleOf)
  in both the OpenAPI 3.0 boolean and 3.1 numeric spelling
- Array size (minItems, maxItems) and uniqueItems
- enum
- Required object fields

A check only applies to values of the matching Python type; anything else
passes, type checking is done by the emitted declarations.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

# Emission order of the checks for one schema
CONSTRAINT_KINDS: tuple[str, ...] = (
    "minLength",
    "maxLength",
    "pattern",
    "minimum",
    "exclusiveMinimum",
    "maximum",
    "exclusiveMaximum",
    "multipleOf",
    "minItems",
    "maxItems",
    "uniqueItems",
    "enum",
    "required",
)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))


@dataclass(frozen=True)
class Constraint:
    """One validation check parameterized with its bound.

    ``field`` is only set for ``required`` checks and holds the JSON key.
    """

    kind: str
    bound: Any = None
    field: str | None = None

    def check(self, value: Any) -> str | None:
        """Return a violation message, or None if the value passes."""
        kind, bound = self.kind, self.bound
        if kind in ("minLength", "maxLength"):
            if not isinstance(value, str):
                return None
            got = len(value)
            if (kind == "minLength" and got < bound) or (kind == "maxLength" and got > bound):
                return f"{kind}: got {got}, want {bound}"
            return None
        if kind == "pattern":
            if isinstance(value, str) and re.search(bound, value) is None:
                return f"pattern: {value!r} does not match {bound!r}"
            return None
        if kind in ("minimum", "exclusiveMinimum", "maximum", "exclusiveMaximum"):
            if not _is_number(value):
                return None
            failed = {
                "minimum": value < bound,
                "exclusiveMinimum": value <= bound,
                "maximum": value > bound,
                "exclusiveMaximum": value >= bound,
            }[kind]
            return f"{kind}: got {value}, want {bound}" if failed else None
        if kind == "multipleOf":
            if _is_number(value):
                quotient = value / bound
                if abs(quotient - round(quotient)) > 1e-9:
                    return f"multipleOf: got {value}, want a multiple of {bound}"
            return None
        if kind in ("minItems", "maxItems"):
            if not _is_sequence(value):
                return None
            got = len(value)
            if (kind == "minItems" and got < bound) or (kind == "maxItems" and got > bound):
                return f"{kind}: got {got}, want {bound}"
            return None
        if kind == "uniqueItems":
            if _is_sequence(value) and bound:
                seen: list[Any] = []
                for item in value:
                    if item in seen:
                        return f"uniqueItems: duplicate item {item!r}"
                    seen.append(item)
            return None
        if kind == "enum":
            if value not in bound:
                allowed = ", ".join(repr(v) for v in bound)
                return f"enum: got {value!r}, want one of {allowed}"
            return None
        if kind == "required":
            if isinstance(value, dict) and self.field not in value:
                return f"required: missing field {self.field!r}"
            return None
        raise ValueError(f"unknown constraint kind: {kind}")


def _exclusive_bound(schema: dict[str, Any], key: str, inclusive_key: str) -> Any:
    """Read an exclusive bound in either the 3.0 or the 3.1 spelling."""
    value = schema.get(key)
    if isinstance(value, bool):
        # 3.0: exclusiveMinimum: true modifies minimum
        return schema.get(inclusive_key) if value else None
    return value


def compile_constraints(schema: dict[str, Any]) -> tuple[Constraint, ...]:
    """Compile the value constraints declared on a schema node."""
    bounds: dict[str, Any] = {
        "minLength": schema.get("minLength"),
        "maxLength": schema.get("maxLength"),
        "pattern": schema.get("pattern"),
        "minItems": schema.get("minItems"),
        "maxItems": schema.get("maxItems"),
        "multipleOf": schema.get("multipleOf"),
        "uniqueItems": schema.get("uniqueItems") or None,
        "enum": tuple(schema["enum"]) if schema.get("enum") else None,
    }

    exclusive_min = _exclusive_bound(schema, "exclusiveMinimum", "minimum")
    exclusive_max = _exclusive_bound(schema, "exclusiveMaximum", "maximum")
    bounds["exclusiveMinimum"] = exclusive_min
    bounds["exclusiveMaximum"] = exclusive_max
    # A 3.0 exclusive flag replaces the inclusive bound it modifies
    if exclusive_min is None or schema.get("exclusiveMinimum") is not True:
        bounds["minimum"] = schema.get("minimum")
    if exclusive_max is None or schema.get("exclusiveMaximum") is not True:
        bounds["maximum"] = schema.get("maximum")

    return tuple(
        Constraint(kind, bounds[kind])
        for kind in CONSTRAINT_KINDS
        if bounds.get(kind) is not None
    )


def compile_required(schema: dict[str, Any]) -> tuple[Constraint, ...]:
    """Compile one required check per required property, in property order."""
    required = set(schema.get("required", []))
    properties = schema.get("properties") or {}
    ordered = [name for name in properties if name in required]
    # Required names without a declared property still have to be present
    ordered += [name for name in schema.get("required", []) if name not in properties]
    return tuple(Constraint("required", field=name) for name in ordered)
