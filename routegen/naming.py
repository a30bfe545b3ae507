"""Normalize OpenAPI identifiers into type, field and route names.

Two canonical forms are used throughout the model:
  - type names:  upper-camel (PascalCase), e.g. ``ErrorMessage``
  - field names: lower-camel (camelCase),  e.g. ``errorMessage``

Examples:
  hello-world         -> HelloWorld   / helloWorld
  hello_world_example -> HelloWorldExample / helloWorldExample
  HTTPServer          -> HTTPServer   / httpServer
  /board/{row}        -> BoardRow     / boardRow

Route paths use the router placeholder syntax:
  /board/{row}/{column} -> /board/:row/:column
"""

from __future__ import annotations

import re

# Any run of characters that cannot appear in an identifier, braces included
_SEPARATORS = re.compile(r"[^A-Za-z0-9]+")

# HTTPServer -> HTTP Server
_ACRONYM_BOUNDARY = re.compile(r"([A-Z]+)([A-Z][a-z])")

# helloWorld -> hello World, v2Board -> v2 Board
_CAMEL_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])")

_OPENAPI_PARAM = re.compile(r"\{([^}/]+)\}")
_ROUTER_PARAM = re.compile(r"(?<![A-Za-z0-9_]):([A-Za-z0-9_]+)")


def split_words(name: str) -> list[str]:
    """Split an identifier of any spelling into its words."""
    name = _SEPARATORS.sub(" ", name)
    name = _ACRONYM_BOUNDARY.sub(r"\1 \2", name)
    name = _CAMEL_BOUNDARY.sub(r"\1 \2", name)
    return name.split()


def _capitalize(word: str) -> str:
    # The rest of the word keeps its case.
    return word[:1].upper() + word[1:]


def normalize_type_name(name: str) -> str:
    """Convert kebab-case, snake_case or camelCase to PascalCase.

    Empty input yields an empty string; callers decide whether that is an error.
    """
    return "".join(_capitalize(word) for word in split_words(name))


def normalize_field_name(name: str) -> str:
    """Convert kebab-case, snake_case or PascalCase to camelCase."""
    words = split_words(name)
    if not words:
        return ""
    return words[0].lower() + "".join(_capitalize(word) for word in words[1:])


def camel_to_snake(name: str) -> str:
    """Convert camelCase or PascalCase to snake_case."""
    s1 = _ACRONYM_BOUNDARY.sub(r"\1_\2", name)
    s2 = re.sub(r"([a-z\d])([A-Z])", r"\1_\2", s1).lower()
    s2 = re.sub(r"[^a-z0-9_]", "_", s2)
    return re.sub(r"_+", "_", s2).strip("_")


def to_router_path(path: str) -> str:
    """Convert an OpenAPI path with {param} placeholders to :param style."""
    return _OPENAPI_PARAM.sub(r":\1", path)


def from_router_path(path: str) -> str:
    """Convert a :param style route path back to OpenAPI {param} style."""
    return _ROUTER_PARAM.sub(r"{\1}", path)


def path_parameters(path: str) -> list[str]:
    """Return placeholder names in order, for either path syntax."""
    names = _OPENAPI_PARAM.findall(path)
    if names:
        return names
    return _ROUTER_PARAM.findall(path)
