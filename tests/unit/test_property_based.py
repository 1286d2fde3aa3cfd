"""
Property-based tests using Hypothesis.

These tests check schema-building invariants over generated declaration
sets instead of a handful of hand-picked ones.
"""

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from schemadef import SchemaValidationError, build_schema
from schemadef.core import decl

BASE_TYPES = [
    decl.BaseTypeDecl(name="int64", db_type="bigint"),
    decl.BaseTypeDecl(name="string", db_type="text"),
    decl.BaseTypeDecl(name="bool", db_type="boolean"),
]

ADDRESS = decl.StructTypeDecl(
    name="Address",
    items=[
        decl.FieldDecl(name="city", type_name="string"),
        decl.FieldDecl(name="street", type_name="string"),
    ],
)

CONTACT = decl.StructTypeDecl(
    name="Contact",
    items=[
        decl.FieldDecl(name="address", type_name="Address", flags=[decl.NullFlag()]),
        decl.FieldDecl(name="phone", type_name="string"),
    ],
)

PERSON = decl.ModelDecl(
    name="Person",
    items=[
        decl.FieldDecl(name="id", type_name="int64"),
        decl.FieldDecl(name="contact", type_name="Contact", flags=[decl.NullFlag()]),
        decl.PrimaryKeyDecl(columns=["id"]),
    ],
)

COLUMN_NAMES = ["a", "b", "c", "d", "e"]


def wide_struct(width: int) -> decl.StructTypeDecl:
    return decl.StructTypeDecl(
        name="Wide",
        items=[decl.FieldDecl(name=f"m{i}", type_name="int64") for i in range(width)],
    )


def holder(nullable: bool) -> decl.ModelDecl:
    return decl.ModelDecl(
        name="Holder",
        items=[
            decl.FieldDecl(name="id", type_name="int64"),
            decl.FieldDecl(
                name="w", type_name="Wide", flags=[decl.NullFlag()] if nullable else []
            ),
            decl.PrimaryKeyDecl(columns=["id"]),
        ],
    )


@st.composite
def declaration_sets(draw) -> decl.DeclarationSet:
    """A valid set: one struct of random width held by one model."""
    width = draw(st.integers(min_value=1, max_value=6))
    nullable = draw(st.booleans())
    return decl.DeclarationSet(types=[*BASE_TYPES, wide_struct(width)], models=[holder(nullable)])


# =============================================================================
# Whole-pipeline properties
# =============================================================================


class TestBuildProperties:
    """Invariants of build_schema as a whole."""

    @given(st.permutations([*BASE_TYPES, CONTACT, ADDRESS]))
    @settings(max_examples=50)
    def test_type_order_does_not_matter(self, types: list) -> None:
        """Invariant: forward type references resolve, so type order is irrelevant."""
        expected = build_schema(
            decl.DeclarationSet(types=[*BASE_TYPES, ADDRESS, CONTACT], models=[PERSON])
        )
        schema = build_schema(decl.DeclarationSet(types=types, models=[PERSON]))
        assert schema == expected
        assert list(schema.models["Person"].columns) == list(expected.models["Person"].columns)

    @given(declaration_sets())
    @settings(max_examples=50)
    def test_idempotent(self, declarations: decl.DeclarationSet) -> None:
        """Invariant: building the same declarations twice gives equal schemas."""
        assert build_schema(declarations) == build_schema(declarations)

    @given(st.permutations(["Alpha", "Beta", "Gamma"]))
    @settings(max_examples=20)
    def test_cycle_named_after_smallest_member(self, names: list[str]) -> None:
        """Invariant: a ring of structs is reported once, rooted at its smallest name."""
        ring = [
            decl.StructTypeDecl(
                name=name,
                items=[decl.FieldDecl(name="next", type_name=names[(i + 1) % len(names)])],
            )
            for i, name in enumerate(names)
        ]
        with pytest.raises(SchemaValidationError) as exc_info:
            build_schema(decl.DeclarationSet(types=[*BASE_TYPES, *ring]))
        (diagnostic,) = exc_info.value.diagnostics
        assert diagnostic.startswith("Type 'Alpha' has a circular reference: Alpha -> ")
        assert diagnostic.endswith(" -> Alpha")


# =============================================================================
# Flattening properties
# =============================================================================


class TestFlatteningProperties:
    """Invariants of struct flattening."""

    @given(st.integers(min_value=1, max_value=8), st.booleans())
    @settings(max_examples=50)
    def test_struct_column_count(self, width: int, nullable: bool) -> None:
        """Invariant: a struct of N base members gives N columns, N+1 when nullable."""
        schema = build_schema(
            decl.DeclarationSet(types=[*BASE_TYPES, wide_struct(width)], models=[holder(nullable)])
        )
        columns = [c for c in schema.models["Holder"].columns if c.name != "id"]
        assert len(columns) == (width + 1 if nullable else width)

        members = [c for c in columns if c.name.startswith("w__")]
        assert len(members) == width
        assert all(c.nullable == nullable for c in members)
        if nullable:
            (presence,) = [c for c in columns if c.name == "w"]
            assert presence.db_type == "boolean"

    @given(st.lists(st.sampled_from(COLUMN_NAMES), min_size=1, max_size=3, unique=True))
    @settings(max_examples=50)
    def test_index_name_lists_columns(self, columns: list[str]) -> None:
        """Invariant: index names are model, columns and suffix joined by '___'."""
        model = decl.ModelDecl(
            name="Row",
            items=[
                *[decl.FieldDecl(name=name, type_name="int64") for name in COLUMN_NAMES],
                decl.PrimaryKeyDecl(columns=["a"]),
                decl.IndexDecl(columns=columns),
            ],
        )
        schema = build_schema(decl.DeclarationSet(types=BASE_TYPES, models=[model]))
        (index,) = schema.models["Row"].indexes
        assert index.name == "___".join(["Row", *columns, "idx"])
