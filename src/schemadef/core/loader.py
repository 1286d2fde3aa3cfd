"""
Declaration document loading.

Declaration documents are TOML files holding already-structured type and
model declarations::

    [[types]]
    name = "int64"
    kind = "base"
    db_type = "bigint"

    [[models]]
    name = "User"
    [[models.items]]
    field = "id"
    type = "int64"
    [[models.items]]
    primary_key = ["id"]

Model and struct items are told apart by their key: ``field``,
``primary_key``, ``index``, ``unique`` or ``foreign_key``.
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from .decl import (
    BaseTypeDecl,
    DeclarationSet,
    FieldDecl,
    ForeignKeyDecl,
    IndexDecl,
    ModelDecl,
    NullFlag,
    PrimaryKeyDecl,
    StructTypeDecl,
    TagFlag,
    UniqueDecl,
)
from .errors import LoadError, make_load_error

logger = logging.getLogger(__name__)

ITEM_KEYS = ("field", "primary_key", "index", "unique", "foreign_key")


def _column_list(value: Any) -> Any:
    # A single column may be written as a bare string
    if isinstance(value, str):
        return [value]
    return value


def _is_tag_pair(tag: Any) -> bool:
    return (
        isinstance(tag, list) and len(tag) == 2 and all(isinstance(part, str) for part in tag)
    )


def parse_item(data: dict[str, Any]) -> Any:
    """Turn one item table into a model item declaration."""
    keys = [key for key in ITEM_KEYS if key in data]
    if len(keys) != 1:
        raise LoadError(
            f"Item must have exactly one of {', '.join(ITEM_KEYS)}; got {sorted(data)}"
        )
    key = keys[0]

    if key == "field":
        flags: list[NullFlag | TagFlag] = []
        if data.get("nullable", False):
            flags.append(NullFlag())
        for tag in data.get("tags", []):
            if not _is_tag_pair(tag):
                raise LoadError(f"Field '{data['field']}' tag must be a [key, value] pair")
            flags.append(TagFlag(key=tag[0], value=tag[1]))
        return FieldDecl(name=data["field"], type_name=data["type"], flags=flags)
    if key == "primary_key":
        return PrimaryKeyDecl(columns=_column_list(data["primary_key"]))
    if key == "index":
        return IndexDecl(columns=_column_list(data["index"]))
    if key == "unique":
        return UniqueDecl(columns=_column_list(data["unique"]))
    return ForeignKeyDecl(column=data["foreign_key"], foreign_model=data["model"])


def parse_type(data: dict[str, Any]) -> BaseTypeDecl | StructTypeDecl:
    kind = data.get("kind", "base")
    if kind == "base":
        return BaseTypeDecl(
            name=data["name"],
            db_type=data["db_type"],
            binding=data.get("binding", {}),
        )
    if kind == "struct":
        return StructTypeDecl(
            name=data["name"],
            items=[parse_item(item) for item in data.get("items", [])],
        )
    raise LoadError(f"Type '{data.get('name')}' has unknown kind '{kind}'")


def parse_model(data: dict[str, Any]) -> ModelDecl:
    return ModelDecl(
        name=data["name"],
        items=[parse_item(item) for item in data.get("items", [])],
    )


def _parse_one(parse: Any, data: Any, kind: str, position: int) -> Any:
    """Run one declaration parser, naming the declaration in any failure."""
    name = data.get("name") if isinstance(data, dict) else None
    module = f"{kind} '{name}'" if name else f"{kind} #{position + 1}"
    try:
        return parse(data)
    except KeyError as e:
        raise make_load_error(f"Missing required key {e}", module=module) from e
    except PydanticValidationError as e:
        raise make_load_error(f"Invalid declaration: {e}", module=module) from e
    except LoadError as e:
        raise make_load_error(e.message, module=module) from e


def parse_declarations(data: dict[str, Any]) -> DeclarationSet:
    """
    Build a DeclarationSet from a decoded document.

    Raises:
        LoadError: If the document does not have the expected shape. The
            error context names the offending type or model.
    """
    return DeclarationSet(
        types=[
            _parse_one(parse_type, t, "type", i) for i, t in enumerate(data.get("types", []))
        ],
        models=[
            _parse_one(parse_model, m, "model", i)
            for i, m in enumerate(data.get("models", []))
        ],
    )


def load_declarations(path: Path) -> DeclarationSet:
    """
    Load one declaration document.

    Raises:
        LoadError: If the file cannot be read, decoded or interpreted
    """
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise make_load_error(f"Cannot read declarations: {e}", file=path) from e
    except tomllib.TOMLDecodeError as e:
        raise make_load_error(f"Invalid TOML: {e}", file=path) from e

    try:
        declarations = parse_declarations(data)
    except LoadError as e:
        module = e.context.module if e.context else None
        raise make_load_error(e.message, file=path, module=module) from e

    logger.debug(
        "Loaded %d types and %d models from %s",
        len(declarations.types),
        len(declarations.models),
        path,
    )
    return declarations


def load_all(paths: list[Path]) -> DeclarationSet:
    """Load several documents and concatenate them in order."""
    result = DeclarationSet()
    for path in paths:
        result = result.merge(load_declarations(path))
    return result
