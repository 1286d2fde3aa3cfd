"""
Resolved schema representation.

This is what the schema builder produces: types with their references
resolved, and models whose fields have been flattened into physical columns
with named constraints. Downstream generators consume these objects.

The builder fills models in place during its single pass; once
``build_schema`` returns, nothing mutates the schema any more.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

# =============================================================================
# Types
# =============================================================================


class BaseType(BaseModel):
    """
    Leaf type mapped to one column.

    Attributes:
        name: Type name
        db_type: Database column type string
        binding: Opaque per-target metadata carried for generators
    """

    kind: Literal["base"] = "base"
    name: str
    db_type: str
    binding: dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)


class StructMember(BaseModel):
    """A named member of a struct; ``type`` is set once resolved."""

    name: str
    type_name: str
    type: BaseType | Struct | None = Field(default=None, exclude=True, repr=False)

    @property
    def is_resolved(self) -> bool:
        return self.type is not None


class Struct(BaseModel):
    """Composite type, flattened into prefixed columns wherever it is used."""

    kind: Literal["struct"] = "struct"
    name: str
    members: list[StructMember] = Field(default_factory=list)

    def get_member(self, name: str) -> StructMember | None:
        for member in self.members:
            if member.name == name:
                return member
        return None


Type = BaseType | Struct

# Type of the synthetic column recording whether a nullable struct is set.
PRESENCE_TYPE = BaseType(name="bool", db_type="boolean")


# =============================================================================
# Model Members
# =============================================================================


class FieldSpec(BaseModel):
    """
    A top-level declared member of a model, before flattening.

    Attributes:
        name: Field identifier
        type_name: Name of the field's type
        type: The resolved type
        nullable: Whether the field may be null
        tags: Opaque key/value tags
    """

    name: str
    type_name: str
    type: BaseType | Struct = Field(exclude=True, repr=False)
    nullable: bool = False
    tags: dict[str, str] = Field(default_factory=dict)


class Column(BaseModel):
    """A flat physical column."""

    name: str
    type: BaseType
    db_type: str
    nullable: bool = False


class PrimaryKey(BaseModel):
    columns: list[str]


class Index(BaseModel):
    name: str = ""
    columns: list[str]


class Unique(BaseModel):
    name: str = ""
    columns: list[str]


class ForeignKey(BaseModel):
    """
    Foreign key from ``model.column`` to ``foreign_model.foreign_column``.

    ``name`` and ``foreign_column`` are filled in by the constraint checks.
    """

    name: str = ""
    model: str
    column: str
    foreign_model: str
    foreign_column: str | None = None


class RelationshipKind(str, Enum):
    TO_ONE = "to_one"
    TO_MANY = "to_many"


class Relationship(BaseModel):
    """
    Association derived from a foreign key, seen from one side.

    Attributes:
        name: Accessor name on the owning model
        kind: to_one or to_many
        foreign_key: Name of the foreign key constraint it comes from
        local_columns: Columns on the owning model
        foreign_model: Model at the other end
        foreign_columns: Columns on the other model
    """

    name: str
    kind: RelationshipKind
    foreign_key: str
    local_columns: list[str]
    foreign_model: str
    foreign_columns: list[str]


# =============================================================================
# Model and Schema
# =============================================================================


class Model(BaseModel):
    """A relational entity with flattened columns and named constraints."""

    name: str
    fields: list[FieldSpec] = Field(default_factory=list)
    columns: list[Column] = Field(default_factory=list)
    primary_key: PrimaryKey | None = None
    indexes: list[Index] = Field(default_factory=list)
    uniques: list[Unique] = Field(default_factory=list)
    foreign_keys: list[ForeignKey] = Field(default_factory=list)
    relationships: list[Relationship] = Field(default_factory=list)

    def find_column(self, name: str) -> Column | None:
        """Get column by flattened name."""
        for column in self.columns:
            if column.name == name:
                return column
        return None

    def get_field(self, name: str) -> FieldSpec | None:
        """Get top-level field by name."""
        for field in self.fields:
            if field.name == name:
                return field
        return None

    def get_relationship(self, name: str) -> Relationship | None:
        for relationship in self.relationships:
            if relationship.name == name:
                return relationship
        return None


class Schema(BaseModel):
    """
    The complete resolved schema.

    Attributes:
        types: Type name to type
        models: Model name to model, in declaration order
    """

    types: dict[str, BaseType | Struct] = Field(default_factory=dict)
    models: dict[str, Model] = Field(default_factory=dict)

    def to_json(self, indent: int | None = 2) -> str:
        return self.model_dump_json(indent=indent)


StructMember.model_rebuild()
FieldSpec.model_rebuild()
