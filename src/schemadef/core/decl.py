"""
Declaration types consumed by the schema builder.

These are the already-parsed type and model declarations handed over by the
host description language. They are immutable and reference each other only
by name; resolution happens in the type registry and model builder.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field

# =============================================================================
# Field Flags
# =============================================================================


class NullFlag(BaseModel):
    """Marks a field as nullable."""

    kind: Literal["null"] = "null"

    model_config = ConfigDict(frozen=True)


class TagFlag(BaseModel):
    """
    Opaque key/value tag attached to a field.

    Tags are passed through to downstream generators untouched
    (e.g. ``json:"name"`` struct tags).
    """

    kind: Literal["tag"] = "tag"
    key: str
    value: str

    model_config = ConfigDict(frozen=True)


FieldFlag = Annotated[NullFlag | TagFlag, Field(discriminator="kind")]


# =============================================================================
# Model Items
# =============================================================================


class FieldDecl(BaseModel):
    """
    A declared field of a model or struct type.

    Attributes:
        name: Field identifier
        type_name: Name of the referenced type (base or struct)
        flags: Nullability and tag flags, in declaration order
    """

    kind: Literal["field"] = "field"
    name: str
    type_name: str
    flags: list[FieldFlag] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    @property
    def is_nullable(self) -> bool:
        return any(isinstance(flag, NullFlag) for flag in self.flags)

    @property
    def tag_flags(self) -> list[TagFlag]:
        return [flag for flag in self.flags if isinstance(flag, TagFlag)]


class PrimaryKeyDecl(BaseModel):
    """Primary key over one or more (possibly dotted) column paths."""

    kind: Literal["primary_key"] = "primary_key"
    columns: list[str]

    model_config = ConfigDict(frozen=True)


class IndexDecl(BaseModel):
    """Non-unique index over one or more column paths."""

    kind: Literal["index"] = "index"
    columns: list[str]

    model_config = ConfigDict(frozen=True)


class UniqueDecl(BaseModel):
    """Unique constraint over one or more column paths."""

    kind: Literal["unique"] = "unique"
    columns: list[str]

    model_config = ConfigDict(frozen=True)


class ForeignKeyDecl(BaseModel):
    """
    Foreign key from a column of this model to another model.

    The target column is not declared; it is always the single column of the
    target model's primary key.
    """

    kind: Literal["foreign_key"] = "foreign_key"
    column: str
    foreign_model: str

    model_config = ConfigDict(frozen=True)


ModelItem = Annotated[
    FieldDecl | PrimaryKeyDecl | IndexDecl | UniqueDecl | ForeignKeyDecl,
    Field(discriminator="kind"),
]


# =============================================================================
# Types and Models
# =============================================================================


class BaseTypeDecl(BaseModel):
    """
    A leaf type that maps to a single physical column.

    Attributes:
        name: Type name
        db_type: Database column type (e.g. "bigint", "text")
        binding: Opaque per-target metadata; never interpreted here
    """

    kind: Literal["base"] = "base"
    name: str
    db_type: str
    binding: dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)


class StructTypeDecl(BaseModel):
    """
    A composite type made of named members.

    Struct items use the same item kinds as models, so a struct may carry
    its own index, unique or foreign key declarations. They are prefixed with
    the field path wherever the struct is embedded.
    """

    kind: Literal["struct"] = "struct"
    name: str
    items: list[ModelItem] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    @property
    def fields(self) -> list[FieldDecl]:
        return [item for item in self.items if isinstance(item, FieldDecl)]


TypeDecl = Annotated[BaseTypeDecl | StructTypeDecl, Field(discriminator="kind")]


class ModelDecl(BaseModel):
    """A declared model: a name and its ordered items."""

    name: str
    items: list[ModelItem] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


class DeclarationSet(BaseModel):
    """Everything one schema build consumes."""

    types: list[TypeDecl] = Field(default_factory=list)
    models: list[ModelDecl] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    def merge(self, other: DeclarationSet) -> DeclarationSet:
        """Concatenate two declaration sets, keeping order."""
        return DeclarationSet(
            types=[*self.types, *other.types],
            models=[*self.models, *other.models],
        )
