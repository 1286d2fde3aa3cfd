import tomllib
from dataclasses import dataclass, field
from pathlib import Path

from .errors import make_load_error

DEFAULT_MANIFEST = "schemadef.toml"
DEFAULT_DECLARATIONS = ["schema/*.toml"]
OUTPUT_FORMATS = ("json", "summary")


@dataclass
class OutputConfig:
    """How `schemadef inspect` renders the schema."""

    format: str = "json"  # "json" | "summary"


@dataclass
class LoggingConfig:
    level: str = "WARNING"


@dataclass
class ProjectManifest:
    """Contents of schemadef.toml.

    Example:

        [project]
        name = "shop"
        declarations = ["schema/*.toml"]

        [output]
        format = "summary"

        [logging]
        level = "INFO"
    """

    name: str
    root: Path
    declarations: list[str] = field(default_factory=lambda: list(DEFAULT_DECLARATIONS))
    output: OutputConfig = field(default_factory=OutputConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def declaration_files(self) -> list[Path]:
        """Resolve declaration globs relative to the project root.

        Files are returned in pattern order, sorted within each pattern, and
        each file only once.
        """
        files: list[Path] = []
        seen: set[Path] = set()
        for pattern in self.declarations:
            for path in sorted(self.root.glob(pattern)):
                if path.is_file() and path not in seen:
                    seen.add(path)
                    files.append(path)
        return files


def load_manifest(path: Path) -> ProjectManifest:
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise make_load_error(f"Cannot read manifest: {e}", file=path) from e
    except tomllib.TOMLDecodeError as e:
        raise make_load_error(f"Invalid TOML: {e}", file=path) from e

    project = data.get("project", {})
    output_data = data.get("output", {})
    logging_data = data.get("logging", {})

    output_format = output_data.get("format", "json")
    if output_format not in OUTPUT_FORMATS:
        raise make_load_error(
            f"Unknown output format '{output_format}' (expected one of {', '.join(OUTPUT_FORMATS)})",
            file=path,
        )

    declarations = project.get("declarations", DEFAULT_DECLARATIONS)
    if isinstance(declarations, str):
        declarations = [declarations]

    return ProjectManifest(
        name=project.get("name", path.parent.name),
        root=path.parent,
        declarations=list(declarations),
        output=OutputConfig(format=output_format),
        logging=LoggingConfig(level=str(logging_data.get("level", "WARNING")).upper()),
    )
