"""
Type registration and reference resolution.

Types are registered by name first, then references between them are
resolved in a separate pass, so declaration order never matters.
"""

from __future__ import annotations

import logging

from . import ir
from .decl import BaseTypeDecl, StructTypeDecl
from .diagnostics import Diagnostics

logger = logging.getLogger(__name__)


class TypeRegistry:
    """
    Name to type mapping for one schema build.

    Keeps both the resolved ``ir`` type and the declaration it came from,
    since the model builder expands struct declarations (not the resolved
    struct) when flattening.
    """

    def __init__(self, diagnostics: Diagnostics):
        self.diagnostics = diagnostics
        self.types: dict[str, ir.Type] = {}
        self.declarations: dict[str, BaseTypeDecl | StructTypeDecl] = {}

    def register(self, decl: BaseTypeDecl | StructTypeDecl) -> None:
        """Add a type. A duplicate name is recorded and the first one kept."""
        if decl.name in self.types:
            self.diagnostics.add(f"Type '{decl.name}' is defined multiple times")
            return

        self.declarations[decl.name] = decl
        self.types[decl.name] = _make_type(decl)

    def register_all(self, decls: list[BaseTypeDecl | StructTypeDecl]) -> None:
        for decl in decls:
            self.register(decl)
        logger.debug("Registered %d types", len(self.types))

    def lookup(self, name: str) -> ir.Type | None:
        return self.types.get(name)

    def struct_declaration(self, name: str) -> StructTypeDecl | None:
        decl = self.declarations.get(name)
        if isinstance(decl, StructTypeDecl):
            return decl
        return None

    def resolve_references(self) -> None:
        """
        Point every struct member at the type it names.

        Must run after all types are registered: forward references are legal.
        """
        for name, type_ in self.types.items():
            if not isinstance(type_, ir.Struct):
                continue
            for member in type_.members:
                resolved = self.types.get(member.type_name)
                if resolved is None:
                    self._unknown_type(name, f"field '{member.name}'", member.type_name)
                    continue
                member.type = resolved

    def detect_cycles(self) -> None:
        """
        Record one diagnostic per distinct struct reference cycle.

        A struct that contains itself, directly or through other structs,
        would flatten into an unbounded number of columns.
        """
        graph: dict[str, list[str]] = {}
        for name, type_ in self.types.items():
            if isinstance(type_, ir.Struct):
                graph[name] = [
                    member.type_name
                    for member in type_.members
                    if isinstance(member.type, ir.Struct)
                ]

        for cycle in _find_cycles(graph):
            path = " -> ".join([*cycle, cycle[0]])
            self.diagnostics.add(f"Type '{cycle[0]}' has a circular reference: {path}")


    def _unknown_type(self, type_name: str, context: str, missing: str) -> None:
        if context:
            context = " " + context
        self.diagnostics.add(
            f"Type '{type_name}'{context} references unknown type '{missing}'"
        )


def _make_type(decl: BaseTypeDecl | StructTypeDecl) -> ir.Type:
    if isinstance(decl, BaseTypeDecl):
        return ir.BaseType(name=decl.name, db_type=decl.db_type, binding=dict(decl.binding))
    if isinstance(decl, StructTypeDecl):
        return ir.Struct(
            name=decl.name,
            members=[
                ir.StructMember(name=item.name, type_name=item.type_name)
                for item in decl.fields
            ],
        )
    raise TypeError(f"Unknown type declaration: {type(decl).__name__}")


def _find_cycles(graph: dict[str, list[str]]) -> list[tuple[str, ...]]:
    """
    Enumerate every elementary cycle in the struct graph.

    Each cycle is rooted at its smallest type name, so a cycle is found once
    no matter which of its structs the search reaches first. Cycles are
    returned ordered by root, then by depth-first discovery.
    """
    found: list[tuple[str, ...]] = []
    seen: set[tuple[str, ...]] = set()

    def dfs(path: list[str]) -> None:
        start = path[0]
        for neighbor in graph.get(path[-1], []):
            if neighbor == start:
                cycle = tuple(path)
                if cycle not in seen:
                    seen.add(cycle)
                    found.append(cycle)
            elif neighbor > start and neighbor not in path:
                path.append(neighbor)
                dfs(path)
                path.pop()

    for start in sorted(graph):
        dfs([start])

    return found


