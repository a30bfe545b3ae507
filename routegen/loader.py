"""Load an OpenAPI document from disk.

Reads JSON or YAML and exposes the path and component tables. The document
is assumed to be structurally valid; nothing here re-validates it.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml

from .errors import DocumentLoadError, UnresolvedReferenceError, UnsupportedReferenceError

_YAML_SUFFIXES = {".yaml", ".yml"}


def load_spec(path: str | Path) -> dict[str, Any]:
    """Load the OpenAPI document at ``path`` (.json, .yaml or .yml)."""
    spec_file = Path(path)
    try:
        with open(spec_file, encoding="utf-8") as f:
            if spec_file.suffix.lower() in _YAML_SUFFIXES:
                document = yaml.safe_load(f)
            else:
                document = json.load(f)
    except OSError as exc:
        raise DocumentLoadError(f"cannot read specification file: {exc}", context=str(spec_file)) from exc
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise DocumentLoadError(f"cannot parse specification file: {exc}", context=str(spec_file)) from exc

    if not isinstance(document, dict):
        raise DocumentLoadError("document root must be a mapping", context=str(spec_file))
    return document


def get_paths(spec: dict[str, Any]) -> dict[str, Any]:
    """Extract paths from the spec."""
    return spec.get("paths") or {}


def get_schemas(spec: dict[str, Any]) -> dict[str, Any]:
    """Extract component schemas from the spec."""
    return (spec.get("components") or {}).get("schemas") or {}


def resolve_ref(spec: dict[str, Any], ref: str, section: str) -> dict[str, Any]:
    """Resolve an in-document $ref under ``#/components/<section>/``."""
    prefix = f"#/components/{section}/"
    if not ref.startswith(prefix):
        raise UnsupportedReferenceError(f"reference not supported: {ref}")
    name = ref[len(prefix):]
    node = (spec.get("components") or {}).get(section) or {}
    if name not in node:
        raise UnresolvedReferenceError(f"reference target not found: {ref}")
    return node[name]
