"""
Schema building: the full register / resolve / build / check pipeline.
"""

from __future__ import annotations

import logging

from . import ir
from .constraints import ConstraintChecker
from .decl import DeclarationSet
from .diagnostics import Diagnostics
from .model_builder import ModelBuilder
from .relationships import RelationshipCalculator, calculate_relationships
from .type_registry import TypeRegistry

logger = logging.getLogger(__name__)


def build_schema(
    declarations: DeclarationSet,
    relationship_calculator: RelationshipCalculator | None = calculate_relationships,
) -> ir.Schema:
    """
    Build a complete, validated Schema from parsed declarations.

    Performs:
    1. Type registration (detects duplicate type names)
    2. Type reference resolution and struct cycle detection
    3. Model building and flattening
    4. Constraint checks on every model
    5. Relationship derivation, only if nothing was reported

    Args:
        declarations: Type and model declarations
        relationship_calculator: Called with the finished schema; None skips it

    Returns:
        Fully resolved Schema

    Raises:
        SchemaValidationError: If any diagnostic was recorded. No partial
            schema is returned in that case.
    """
    diagnostics = Diagnostics()

    # 1-2. Types
    registry = TypeRegistry(diagnostics)
    registry.register_all(declarations.types)
    registry.resolve_references()
    registry.detect_cycles()

    schema = ir.Schema(types=dict(registry.types))

    # 3. Models
    builder = ModelBuilder(registry, diagnostics)
    for decl in declarations.models:
        model = ir.Model(name=decl.name)
        if decl.name in schema.models:
            diagnostics.add(f"Model '{decl.name}' is defined multiple times")
        else:
            schema.models[decl.name] = model
        builder.build(model, decl.items)
    logger.debug("Built %d models", len(schema.models))

    # 4. Constraints, after every model exists
    checker = ConstraintChecker(schema.models, diagnostics)
    for model in schema.models.values():
        checker.check(model)

    if diagnostics:
        logger.info("Schema validation failed with %d errors", len(diagnostics))
    diagnostics.raise_if_any()

    # 5. Relationships
    if relationship_calculator is not None:
        relationship_calculator(schema)

    logger.info(
        "Schema built: %d types, %d models", len(schema.types), len(schema.models)
    )
    return schema
