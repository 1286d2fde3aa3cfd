"""
Relationship derivation for validated schemas.

Walks the resolved foreign keys and records, on both models involved, the
association they imply. Only ever called on a schema that passed every check,
so each foreign key has a target model and a resolved target column.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from . import ir

logger = logging.getLogger(__name__)

RelationshipCalculator = Callable[[ir.Schema], None]


def _is_single_column_unique(model: ir.Model, column: str) -> bool:
    if model.primary_key is not None and model.primary_key.columns == [column]:
        return True
    return any(unique.columns == [column] for unique in model.uniques)


def _local_name(column: str) -> str:
    if column.endswith("_id") and len(column) > 3:
        return column[: -len("_id")]
    return column


def _unused_name(model: ir.Model, *candidates: str) -> str:
    """First candidate not yet taken on ``model``, else the last one numbered."""
    for name in candidates:
        if model.get_relationship(name) is None:
            return name
    base = candidates[-1]
    suffix = 2
    while model.get_relationship(f"{base}_{suffix}") is not None:
        suffix += 1
    return f"{base}_{suffix}"


def calculate_relationships(schema: ir.Schema) -> None:
    """
    Attach relationships derived from foreign keys to every model.

    The referencing side gets a ``to_one`` relationship named after the
    column with any ``_id`` suffix removed. The referenced side gets a
    ``to_many`` relationship named after the referencing model, or ``to_one``
    when the foreign key column is unique on its own.
    """
    count = 0
    for model in schema.models.values():
        for fk in model.foreign_keys:
            target = schema.models[fk.foreign_model]
            local = _local_name(fk.column)

            model.relationships.append(
                ir.Relationship(
                    name=_unused_name(model, local, fk.column),
                    kind=ir.RelationshipKind.TO_ONE,
                    foreign_key=fk.name,
                    local_columns=[fk.column],
                    foreign_model=target.name,
                    foreign_columns=[fk.foreign_column],
                )
            )

            kind = (
                ir.RelationshipKind.TO_ONE
                if _is_single_column_unique(model, fk.column)
                else ir.RelationshipKind.TO_MANY
            )
            target.relationships.append(
                ir.Relationship(
                    name=_unused_name(target, model.name, f"{model.name}_{local}"),
                    kind=kind,
                    foreign_key=fk.name,
                    local_columns=[fk.foreign_column],
                    foreign_model=model.name,
                    foreign_columns=[fk.column],
                )
            )
            count += 1

    logger.debug("Derived relationships from %d foreign keys", count)
