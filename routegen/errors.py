"""Errors raised while loading and compiling an OpenAPI document.

Every error is fatal for the current run. Each one carries the context
(schema name, operation or path) needed to find the offending node.
"""

from __future__ import annotations


class RoutegenError(Exception):
    """Base class for all routegen errors."""

    def __init__(self, message: str, context: str | None = None) -> None:
        self.context = context
        if context:
            message = f"{context}: {message}"
        super().__init__(message)


class DocumentLoadError(RoutegenError):
    """The document could not be read or parsed."""


class CompileError(RoutegenError):
    """The document cannot be compiled into models and operations."""


class UnsupportedReferenceError(CompileError):
    """A $ref points outside the supported component namespace."""


class UnsupportedSchemaTypeError(CompileError):
    """A schema's primitive kind is absent or unrecognized."""


class InvalidArraySchemaError(CompileError):
    """An array schema has no items schema."""


class UnsupportedItemsTypeError(CompileError):
    """An array schema uses a boolean items schema."""


class MissingOperationIdError(CompileError):
    """An operation has no operationId to name its handler."""


class MissingJSONContentError(CompileError):
    """A request body has no JSON media type entry."""


class NameCollisionError(CompileError):
    """Two distinct shapes normalize to the same type name."""


class UnresolvedReferenceError(CompileError):
    """A reference names a schema missing from the component table."""
