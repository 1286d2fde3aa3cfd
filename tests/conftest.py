"""Shared pytest fixtures for schemadef tests."""

from pathlib import Path

import pytest

from schemadef.core import decl


@pytest.fixture
def base_types() -> list[decl.BaseTypeDecl]:
    """Return the base types most tests declare against."""
    return [
        decl.BaseTypeDecl(name="int64", db_type="bigint", binding={"python": "int"}),
        decl.BaseTypeDecl(name="string", db_type="text", binding={"python": "str"}),
        decl.BaseTypeDecl(name="decimal", db_type="numeric", binding={"python": "Decimal"}),
        decl.BaseTypeDecl(name="bool", db_type="boolean"),
    ]


@pytest.fixture
def address_type() -> decl.StructTypeDecl:
    """Return a struct with two string members."""
    return decl.StructTypeDecl(
        name="Address",
        items=[
            decl.FieldDecl(name="city", type_name="string"),
            decl.FieldDecl(name="street", type_name="string"),
        ],
    )


@pytest.fixture
def blog_declarations(base_types: list[decl.BaseTypeDecl]) -> decl.DeclarationSet:
    """User and Post, Post.author_id referencing User."""
    return decl.DeclarationSet(
        types=base_types,
        models=[
            decl.ModelDecl(
                name="User",
                items=[
                    decl.FieldDecl(name="id", type_name="int64"),
                    decl.FieldDecl(name="email", type_name="string"),
                    decl.PrimaryKeyDecl(columns=["id"]),
                    decl.UniqueDecl(columns=["email"]),
                ],
            ),
            decl.ModelDecl(
                name="Post",
                items=[
                    decl.FieldDecl(name="id", type_name="int64"),
                    decl.FieldDecl(name="author_id", type_name="int64"),
                    decl.PrimaryKeyDecl(columns=["id"]),
                    decl.IndexDecl(columns=["author_id"]),
                    decl.ForeignKeyDecl(column="author_id", foreign_model="User"),
                ],
            ),
        ],
    )


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """Create a project with a manifest and one valid declaration document."""
    schema_dir = tmp_path / "schema"
    schema_dir.mkdir()
    (schema_dir / "blog.toml").write_text(
        """
[[types]]
name = "int64"
kind = "base"
db_type = "bigint"

[[types]]
name = "string"
kind = "base"
db_type = "text"

[[models]]
name = "User"
[[models.items]]
field = "id"
type = "int64"
[[models.items]]
field = "name"
type = "string"
nullable = true
[[models.items]]
primary_key = ["id"]

[[models]]
name = "Post"
[[models.items]]
field = "id"
type = "int64"
[[models.items]]
field = "author_id"
type = "int64"
[[models.items]]
primary_key = "id"
[[models.items]]
foreign_key = "author_id"
model = "User"
""",
        encoding="utf-8",
    )
    (tmp_path / "schemadef.toml").write_text(
        """
[project]
name = "blog"
declarations = ["schema/*.toml"]
""",
        encoding="utf-8",
    )
    return tmp_path
