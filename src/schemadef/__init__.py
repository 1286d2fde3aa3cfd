"""
schemadef - declarative relational schema definitions.

Resolves type and model declarations into a validated relational schema
for code and DDL generators.
"""

from __future__ import annotations

from ._version import __version__
from .core import ir
from .core.decl import DeclarationSet
from .core.errors import LoadError, SchemadefError, SchemaValidationError
from .core.validate import build_schema

__all__ = [
    "__version__",
    "ir",
    "DeclarationSet",
    "SchemadefError",
    "LoadError",
    "SchemaValidationError",
    "build_schema",
]
