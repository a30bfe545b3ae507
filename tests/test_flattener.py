"""Tests for the flattener module."""

import pytest

from routegen.constraints import Constraint
from routegen.errors import NameCollisionError, UnresolvedReferenceError
from routegen.flattener import Flattener, flatten, to_type
from routegen.model import ARRAY, OBJECT, SCALAR, UNION, ReferenceModel, TypeField
from routegen.schema_parser import Resolver

_STATUS = {
    "type": "object",
    "properties": {
        "winner": {"type": "string"},
        "board": {"type": "string"},
    },
}

_TREE_NODE = {
    "type": "object",
    "properties": {
        "value": {"type": "integer"},
        "children": {"type": "array", "items": {"$ref": "#/components/schemas/TreeNode"}},
        "parent": {"$ref": "#/components/schemas/TreeNode"},
    },
}


class TestFlatten:
    """Hoisting nested models into a flat, ordered type list."""

    def test_status_yields_three_types(self):
        model = Resolver(qualify_nested_names=False).resolve("Status", _STATUS)
        types = flatten(model)

        assert [t.name for t in types] == ["Status", "Winner", "Board"]
        status, winner, board = types
        assert status.kind == OBJECT
        assert status.fields == (
            TypeField(name="winner", json_name="winner", type_name="Winner"),
            TypeField(name="board", json_name="board", type_name="Board"),
        )
        assert status.definition == "{winner Winner; board Board}"
        assert (winner.kind, winner.definition) == (SCALAR, "string")
        assert (board.kind, board.definition) == (SCALAR, "string")

    def test_parent_before_children(self):
        schema = {
            "type": "object",
            "properties": {
                "winner": {"type": "string"},
                "board": {"type": "array", "items": {"type": "array", "items": {"type": "string"}}},
                "turn": {"type": "integer"},
            },
        }
        types = flatten(Resolver().resolve("status", schema))
        assert [t.name for t in types] == [
            "Status",
            "StatusWinner",
            "StatusBoard",
            "StatusBoardItem",
            "StatusBoardItemItem",
            "StatusTurn",
        ]

    def test_array_definition(self):
        types = flatten(Resolver().resolve("board", {"type": "array", "maxItems": 3, "items": {"type": "string"}}))
        board = types[0]
        assert board.kind == ARRAY
        assert board.definition == "list[BoardItem]"
        assert board.rules == (Constraint("maxItems", 3),)

    def test_union_definition(self):
        model = Resolver().resolve("id", {"oneOf": [{"type": "integer"}, {"$ref": "#/components/schemas/uuid"}]})
        types = flatten(model)
        assert [t.name for t in types] == ["Id", "IdVariant1"]
        assert types[0].kind == UNION
        assert types[0].definition == "IdVariant1 | Uuid"

    def test_reference_contributes_no_type(self):
        assert flatten(ReferenceModel("Mark")) == []
        assert to_type(ReferenceModel("Mark")) is None

    def test_docstring(self):
        model = Resolver().resolve("mark", {"type": "string", "description": "A square", "deprecated": True})
        assert flatten(model)[0].docstring == "Deprecated: A square"


class TestReferences:
    """Cycles and reference checks against the schema table."""

    def test_self_reference_terminates(self):
        model = Resolver().resolve("TreeNode", _TREE_NODE)
        types = flatten(model, known_names={"TreeNode"})

        assert [t.name for t in types] == ["TreeNode", "TreeNodeValue", "TreeNodeChildren"]
        tree = types[0]
        assert [f.type_name for f in tree.fields] == ["TreeNodeValue", "TreeNodeChildren", "TreeNode"]
        assert types[2].item == "TreeNode"

    def test_dangling_reference(self):
        model = Resolver().resolve("TreeNode", _TREE_NODE)
        with pytest.raises(UnresolvedReferenceError, match="unknown schema 'TreeNode'"):
            flatten(model, known_names={"Other"})

    def test_references_unchecked_without_table(self):
        assert len(flatten(Resolver().resolve("TreeNode", _TREE_NODE))) == 3


class TestFlattener:
    """One name table shared across several roots."""

    def test_identical_shapes_deduplicated(self):
        resolver = Resolver(qualify_nested_names=False)
        flattener = Flattener()
        flattener.add_all([
            resolver.resolve("user", {"type": "object", "properties": {"id": {"type": "string"}}}),
            resolver.resolve("group", {"type": "object", "properties": {"id": {"type": "string"}}}),
        ])
        assert [t.name for t in flattener.types] == ["User", "Id", "Group"]

    def test_conflicting_shapes(self):
        resolver = Resolver(qualify_nested_names=False)
        flattener = Flattener()
        flattener.add(resolver.resolve("user", {"type": "object", "properties": {"id": {"type": "string"}}}))
        with pytest.raises(NameCollisionError, match="Id: 'string' and 'int' share the name"):
            flattener.add(resolver.resolve("group", {"type": "object", "properties": {"id": {"type": "integer"}}}))

    def test_same_name_different_rules(self):
        resolver = Resolver(qualify_nested_names=False)
        flattener = Flattener()
        flattener.add(resolver.resolve("name", {"type": "string", "maxLength": 10}))
        with pytest.raises(NameCollisionError):
            flattener.add(resolver.resolve("name", {"type": "string", "maxLength": 20}))

    def test_deterministic(self):
        first = flatten(Resolver().resolve("TreeNode", _TREE_NODE))
        second = flatten(Resolver().resolve("TreeNode", _TREE_NODE))
        assert first == second
