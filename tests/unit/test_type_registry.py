"""Tests for type registration, reference resolution and cycle detection."""

from schemadef.core import decl, ir
from schemadef.core.diagnostics import Diagnostics
from schemadef.core.type_registry import TypeRegistry


def make_registry(types: list) -> tuple[TypeRegistry, Diagnostics]:
    diagnostics = Diagnostics()
    registry = TypeRegistry(diagnostics)
    registry.register_all(types)
    registry.resolve_references()
    registry.detect_cycles()
    return registry, diagnostics


def struct(name: str, *members: tuple[str, str]) -> decl.StructTypeDecl:
    return decl.StructTypeDecl(
        name=name,
        items=[decl.FieldDecl(name=m, type_name=t) for m, t in members],
    )


class TestRegister:
    def test_base_type_keeps_binding(self, base_types) -> None:
        registry, diagnostics = make_registry(base_types)
        assert not diagnostics
        int64 = registry.lookup("int64")
        assert isinstance(int64, ir.BaseType)
        assert int64.db_type == "bigint"
        assert int64.binding == {"python": "int"}

    def test_duplicate_type(self, base_types) -> None:
        duplicate = decl.BaseTypeDecl(name="int64", db_type="integer")
        registry, diagnostics = make_registry([*base_types, duplicate])

        assert list(diagnostics) == ["Type 'int64' is defined multiple times"]
        # First registration wins
        assert registry.lookup("int64").db_type == "bigint"

    def test_lookup_unknown(self, base_types) -> None:
        registry, _ = make_registry(base_types)
        assert registry.lookup("nope") is None
        assert registry.struct_declaration("int64") is None


class TestResolveReferences:
    def test_forward_reference(self, base_types) -> None:
        # Outer is declared before the Inner it uses
        outer = struct("Outer", ("inner", "Inner"))
        inner = struct("Inner", ("value", "int64"))
        registry, diagnostics = make_registry([outer, inner, *base_types])

        assert not diagnostics
        member = registry.lookup("Outer").get_member("inner")
        assert member.is_resolved
        assert member.type is registry.lookup("Inner")

    def test_unknown_member_type(self, base_types) -> None:
        broken = struct("Money", ("amount", "decimal"), ("currency", "Currency"))
        registry, diagnostics = make_registry([*base_types, broken])

        assert list(diagnostics) == [
            "Type 'Money' field 'currency' references unknown type 'Currency'"
        ]
        assert registry.lookup("Money").get_member("amount").is_resolved
        assert not registry.lookup("Money").get_member("currency").is_resolved


class TestDetectCycles:
    def test_self_reference(self, base_types) -> None:
        node = struct("Node", ("value", "int64"), ("next", "Node"))
        _, diagnostics = make_registry([*base_types, node])
        assert list(diagnostics) == ["Type 'Node' has a circular reference: Node -> Node"]

    def test_two_struct_cycle_reported_once(self, base_types) -> None:
        a = struct("A", ("b", "B"))
        b = struct("B", ("a", "A"))
        _, diagnostics = make_registry([*base_types, b, a])
        assert list(diagnostics) == ["Type 'A' has a circular reference: A -> B -> A"]

    def test_cycles_sharing_a_struct_are_all_reported(self, base_types) -> None:
        a = struct("A", ("b", "B"), ("c", "C"))
        b = struct("B", ("a", "A"))
        c = struct("C", ("a", "A"))
        _, diagnostics = make_registry([*base_types, a, b, c])
        assert list(diagnostics) == [
            "Type 'A' has a circular reference: A -> B -> A",
            "Type 'A' has a circular reference: A -> C -> A",
        ]

    def test_cycle_reached_from_outside(self, base_types) -> None:
        outer = struct("Outer", ("inner", "X"))
        x = struct("X", ("y", "Y"))
        y = struct("Y", ("x", "X"), ("z", "Z"))
        z = struct("Z", ("y", "Y"))
        _, diagnostics = make_registry([*base_types, outer, x, y, z])
        assert list(diagnostics) == [
            "Type 'X' has a circular reference: X -> Y -> X",
            "Type 'Y' has a circular reference: Y -> Z -> Y",
        ]

    def test_repeated_member_type_reported_once(self, base_types) -> None:
        node = struct("Node", ("left", "Node"), ("right", "Node"))
        _, diagnostics = make_registry([*base_types, node])
        assert list(diagnostics) == ["Type 'Node' has a circular reference: Node -> Node"]

    def test_shared_struct_is_not_a_cycle(self, base_types, address_type) -> None:
        person = struct("Person", ("home", "Address"), ("work", "Address"))
        _, diagnostics = make_registry([*base_types, address_type, person])
        assert not diagnostics
