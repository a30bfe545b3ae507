"""Shared fixtures for the routegen tests."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def load_fixture(name: str) -> dict[str, Any]:
    """Load a JSON document from tests/fixtures."""
    with open(FIXTURES_DIR / name, encoding="utf-8") as f:
        return json.load(f)


@pytest.fixture
def tictactoe_path() -> Path:
    return FIXTURES_DIR / "tictactoe.json"


@pytest.fixture
def tictactoe_spec() -> dict[str, Any]:
    return load_fixture("tictactoe.json")


def document(schemas: dict[str, Any] | None = None, paths: dict[str, Any] | None = None, **components: Any) -> dict[str, Any]:
    """Build a minimal OpenAPI document around schemas and paths."""
    return {
        "openapi": "3.0.3",
        "info": {"title": "Test", "version": "1"},
        "paths": paths or {},
        "components": {"schemas": schemas or {}, **components},
    }


@pytest.fixture
def make_document():
    return document
