"""
Model flattening.

Expands a model's declared items into physical columns and raw constraint
declarations. Struct-typed fields are flattened recursively: member columns
are prefixed with the field path (``address.city`` becomes
``address__city``) and a nullable struct makes every column below it
nullable.
"""

from __future__ import annotations

import logging

from . import ir
from .decl import (
    FieldDecl,
    ForeignKeyDecl,
    IndexDecl,
    ModelItem,
    PrimaryKeyDecl,
    UniqueDecl,
)
from .diagnostics import Diagnostics
from .type_registry import TypeRegistry

logger = logging.getLogger(__name__)


def undot(name: str) -> str:
    """Turn a dotted struct path into a column name."""
    return name.replace(".", "__")


def undot_all(names: list[str], prefix: str = "") -> list[str]:
    return [undot(prefix + name) for name in names]


class ModelBuilder:
    """Builds models against a resolved type registry."""

    def __init__(self, registry: TypeRegistry, diagnostics: Diagnostics):
        self.registry = registry
        self.diagnostics = diagnostics

    def build(
        self,
        model: ir.Model,
        items: list[ModelItem],
        prefix: str = "",
        force_nullable: bool = False,
        expanding: tuple[str, ...] = (),
    ) -> None:
        """
        Append the columns and constraints declared by ``items`` to ``model``.

        Args:
            model: Model being built
            items: Declared items of the model, or of a struct being expanded
            prefix: Dotted path of the enclosing struct fields ("" at top level)
            force_nullable: True when an enclosing struct field is nullable
            expanding: Struct types currently being expanded on this path
        """
        for item in items:
            if isinstance(item, FieldDecl):
                self._build_field(model, item, prefix, force_nullable, expanding)
            elif isinstance(item, PrimaryKeyDecl):
                if model.primary_key is not None:
                    self.diagnostics.add(
                        f"Model '{model.name}' has multiple primary key definitions"
                    )
                    continue
                model.primary_key = ir.PrimaryKey(columns=undot_all(item.columns, prefix))
            elif isinstance(item, IndexDecl):
                model.indexes.append(ir.Index(columns=undot_all(item.columns, prefix)))
            elif isinstance(item, UniqueDecl):
                model.uniques.append(ir.Unique(columns=undot_all(item.columns, prefix)))
            elif isinstance(item, ForeignKeyDecl):
                model.foreign_keys.append(
                    ir.ForeignKey(
                        model=model.name,
                        column=undot(prefix + item.column),
                        foreign_model=item.foreign_model,
                    )
                )
            else:
                raise TypeError(f"Unknown model item: {type(item).__name__}")

    def _build_field(
        self,
        model: ir.Model,
        item: FieldDecl,
        prefix: str,
        force_nullable: bool,
        expanding: tuple[str, ...],
    ) -> None:
        path = prefix + item.name
        type_ = self.registry.lookup(item.type_name)
        if type_ is None:
            self.diagnostics.add(
                f"Model '{model.name}' field '{path}' references unknown type '{item.type_name}'"
            )
            return

        nullable = item.is_nullable

        if not prefix:
            model.fields.append(
                ir.FieldSpec(
                    name=item.name,
                    type_name=item.type_name,
                    type=type_,
                    nullable=nullable or force_nullable,
                    tags=self._make_tags(item, f"Model '{model.name}' field '{path}'"),
                )
            )

        if isinstance(type_, ir.Struct):
            if type_.name in expanding:
                # Reported by TypeRegistry.detect_cycles
                logger.debug("Not re-expanding struct '%s' at '%s'", type_.name, path)
                return
            struct_decl = self.registry.struct_declaration(type_.name)
            self.build(
                model,
                struct_decl.items,
                prefix=path + ".",
                force_nullable=nullable or force_nullable,
                expanding=(*expanding, type_.name),
            )
            if nullable:
                model.columns.append(
                    ir.Column(
                        name=undot(path),
                        type=ir.PRESENCE_TYPE,
                        db_type=ir.PRESENCE_TYPE.db_type,
                        nullable=force_nullable,
                    )
                )
        else:
            model.columns.append(
                ir.Column(
                    name=undot(path),
                    type=type_,
                    db_type=type_.db_type,
                    nullable=nullable or force_nullable,
                )
            )

    def _make_tags(self, item: FieldDecl, context: str) -> dict[str, str]:
        tags: dict[str, str] = {}
        for flag in item.tag_flags:
            if flag.key in tags:
                self.diagnostics.add(f"{context} has duplicate tag '{flag.key}'")
            tags[flag.key] = flag.value
        return tags
