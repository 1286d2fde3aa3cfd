"""
schemadef command line interface.

Commands:
- validate: Load declarations and check them
- inspect: Print the resolved schema
"""

from __future__ import annotations

import logging
import platform
from pathlib import Path

import typer

from schemadef._version import __version__
from schemadef.core import ir
from schemadef.core.errors import SchemadefError, SchemaValidationError
from schemadef.core.loader import load_all
from schemadef.core.manifest import DEFAULT_MANIFEST, OUTPUT_FORMATS, ProjectManifest, load_manifest
from schemadef.core.validate import build_schema

logger = logging.getLogger(__name__)

app = typer.Typer(
    help="""schemadef – declarative relational schema definitions

Commands operate on the project described by schemadef.toml
(current directory unless --manifest is given).
""",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    if value:
        typer.echo(f"schemadef {__version__}")
        typer.echo(f"Python {platform.python_version()} ({platform.python_implementation()})")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version information",
    ),
) -> None:
    """schemadef CLI."""


# =============================================================================
# Helper Functions
# =============================================================================


def _configure_logging(mf: ProjectManifest | None, verbose: bool) -> None:
    if verbose:
        level = logging.DEBUG
    elif mf is not None:
        level = logging.getLevelName(mf.logging.level)
        if not isinstance(level, int):
            level = logging.WARNING
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s", force=True)


def _load_schema(manifest: str, verbose: bool) -> tuple[ProjectManifest, ir.Schema]:
    manifest_path = Path(manifest).resolve()
    mf = load_manifest(manifest_path)
    _configure_logging(mf, verbose)

    files = mf.declaration_files()
    if not files:
        logger.warning("No declaration files match %s", mf.declarations)
    declarations = load_all(files)
    return mf, build_schema(declarations)


def _print_diagnostics(error: SchemaValidationError) -> None:
    typer.echo(f"{len(error.diagnostics)} errors found:", err=True)
    for diagnostic in error.diagnostics:
        typer.echo(f"ERROR: {diagnostic}", err=True)


def format_summary(schema: ir.Schema) -> str:
    """Human-readable per-model listing of columns and constraints."""
    lines: list[str] = []
    for model in schema.models.values():
        lines.append(f"{model.name}")
        for column in model.columns:
            null = " null" if column.nullable else ""
            lines.append(f"  {column.name}: {column.db_type}{null}")
        if model.primary_key is not None:
            lines.append(f"  primary key ({', '.join(model.primary_key.columns)})")
        for index in model.indexes:
            lines.append(f"  index {index.name}")
        for unique in model.uniques:
            lines.append(f"  unique {unique.name}")
        for fk in model.foreign_keys:
            lines.append(
                f"  foreign key {fk.name} -> {fk.foreign_model}({fk.foreign_column})"
            )
        for relationship in model.relationships:
            lines.append(
                f"  {relationship.kind.value} {relationship.name} -> {relationship.foreign_model}"
            )
    return "\n".join(lines)


# =============================================================================
# Commands
# =============================================================================


@app.command(name="validate")
def validate_command(
    manifest: str = typer.Option(
        DEFAULT_MANIFEST, "--manifest", "-m", help="Path to schemadef.toml"
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging"),
) -> None:
    """
    Load all declaration documents and validate the resulting schema.
    """
    try:
        _, schema = _load_schema(manifest, verbose)
    except SchemaValidationError as e:
        _print_diagnostics(e)
        raise typer.Exit(code=1)
    except SchemadefError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    typer.echo(f"OK: {len(schema.types)} types, {len(schema.models)} models.")


@app.command(name="inspect")
def inspect_command(
    manifest: str = typer.Option(
        DEFAULT_MANIFEST, "--manifest", "-m", help="Path to schemadef.toml"
    ),
    format: str | None = typer.Option(
        None, "--format", "-f", help="Output format: 'json' or 'summary'"
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging"),
) -> None:
    """
    Print the resolved schema.
    """
    if format is not None and format not in OUTPUT_FORMATS:
        typer.echo(f"Error: unknown format '{format}'", err=True)
        raise typer.Exit(code=2)

    try:
        mf, schema = _load_schema(manifest, verbose)
    except SchemaValidationError as e:
        _print_diagnostics(e)
        raise typer.Exit(code=1)
    except SchemadefError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    if (format or mf.output.format) == "summary":
        typer.echo(format_summary(schema))
    else:
        typer.echo(schema.to_json())


def main(argv: list[str] | None = None) -> None:
    app(args=argv)


if __name__ == "__main__":
    main()
