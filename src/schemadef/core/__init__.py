"""Core schemadef functionality: declarations, IR, type registry, model builder, constraint checks."""

from . import ir
from .decl import DeclarationSet
from .errors import (
    ErrorContext,
    LoadError,
    SchemadefError,
    SchemaValidationError,
)
from .loader import load_all, load_declarations
from .manifest import load_manifest
from .relationships import calculate_relationships
from .validate import build_schema

__all__ = [
    "ir",
    "DeclarationSet",
    "SchemadefError",
    "LoadError",
    "SchemaValidationError",
    "ErrorContext",
    "build_schema",
    "calculate_relationships",
    "load_declarations",
    "load_all",
    "load_manifest",
]
