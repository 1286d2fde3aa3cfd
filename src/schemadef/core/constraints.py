"""
Referential-integrity checks for built models.

Runs once per model after every model has been built, since foreign keys
may point at models declared later. Each check records diagnostics and
carries on; none of them stops the others.
"""

from __future__ import annotations

import logging

from . import ir
from .diagnostics import Diagnostics

logger = logging.getLogger(__name__)


def make_name(model: str, columns: list[str], suffix: str) -> str:
    """
    Deterministic constraint name.

    Triple underscores, because flattened column names may already contain
    double underscores.
    """
    return f"{model}___{'___'.join(columns)}___{suffix}"


def describe_columns(columns: list[str]) -> str:
    return ", ".join(columns)


class ConstraintChecker:
    """Checks models against the complete set of built models."""

    def __init__(self, models: dict[str, ir.Model], diagnostics: Diagnostics):
        self.models = models
        self.diagnostics = diagnostics

    def check(self, model: ir.Model) -> None:
        """Run every check on one model."""
        logger.debug("Checking constraints of model '%s'", model.name)
        self.check_duplicate_fields(model)
        self.check_primary_key(model)
        self.check_indexes(model)
        self.check_uniques(model)
        self.check_foreign_keys(model)

    def check_duplicate_fields(self, model: ir.Model) -> None:
        seen: set[str] = set()
        for field in model.fields:
            if field.name in seen:
                self.diagnostics.add(
                    f"Model '{model.name}' field '{field.name}' is defined multiple times."
                )
            seen.add(field.name)

    def check_primary_key(self, model: ir.Model) -> None:
        pk = model.primary_key
        if pk is None:
            self.diagnostics.add(f"Model '{model.name}' is missing a primary key")
            return
        if not pk.columns:
            self.diagnostics.add(f"Model '{model.name}' primary key has no columns")

        for name in pk.columns:
            column = model.find_column(name)
            if column is None:
                self.diagnostics.add(
                    f"Model '{model.name}' primary key references unknown column '{name}'"
                )
            elif column.nullable:
                self.diagnostics.add(
                    f"Model '{model.name}' primary key references nullable column '{name}'"
                )

    def check_indexes(self, model: ir.Model) -> None:
        self._check_named_constraints(model, model.indexes, "index", "idx")

    def check_uniques(self, model: ir.Model) -> None:
        self._check_named_constraints(model, model.uniques, "unique", "key")

    def _check_named_constraints(
        self,
        model: ir.Model,
        constraints: list[ir.Index] | list[ir.Unique],
        label: str,
        suffix: str,
    ) -> None:
        seen: set[str] = set()
        for constraint in constraints:
            constraint.name = make_name(model.name, constraint.columns, suffix)
            described = describe_columns(constraint.columns)

            if constraint.name in seen:
                self.diagnostics.add(
                    f"Model '{model.name}' {label} '{described}' is defined multiple times."
                )
            seen.add(constraint.name)

            for name in constraint.columns:
                if model.find_column(name) is None:
                    self.diagnostics.add(
                        f"Model '{model.name}' {label} '{described}' "
                        f"references unknown column '{name}'"
                    )

    def check_foreign_keys(self, model: ir.Model) -> None:
        for fk in model.foreign_keys:
            fk.name = make_name(model.name, [fk.column], "fkey")

            if model.find_column(fk.column) is None:
                self.diagnostics.add(
                    f"Model '{model.name}' has a foreign key on non-existing field '{fk.column}'"
                )

            target = self.models.get(fk.foreign_model)
            if target is None:
                self.diagnostics.add(
                    f"Model '{model.name}' field '{fk.column}' has foreign key "
                    f"to non-existing model '{fk.foreign_model}'"
                )
                continue

            target_pk = target.primary_key
            if target_pk is None or not target_pk.columns:
                self.diagnostics.add(
                    f"Model '{model.name}' field '{fk.column}' has foreign key "
                    f"to model without a primary key '{fk.foreign_model}'"
                )
                continue
            if len(target_pk.columns) != 1:
                self.diagnostics.add(
                    f"Model '{model.name}' field '{fk.column}' has foreign key "
                    f"to model with multi-column primary key '{fk.foreign_model}'"
                )
                continue

            fk.foreign_column = target_pk.columns[0]
