"""
Error types for schemadef loading and schema validation.
"""

from dataclasses import dataclass
from pathlib import Path


class SchemadefError(Exception):
    """Base exception for all schemadef errors."""

    def __init__(self, message: str, context: "ErrorContext | None" = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.context.format()}\n{self.message}"
        return self.message


class LoadError(SchemadefError):
    """
    Raised when a manifest or declaration document cannot be loaded.

    Examples:
    - File does not exist
    - Invalid TOML
    - Item table with no recognised key
    - Declaration fields of the wrong shape
    """

    pass


class SchemaValidationError(SchemadefError):
    """
    Raised when a declaration set does not produce a valid schema.

    Carries every diagnostic recorded during the run, in order. The message
    is a count header followed by one line per diagnostic.
    """

    def __init__(self, diagnostics: list[str]):
        self.diagnostics = list(diagnostics)
        super().__init__(format_diagnostics(self.diagnostics))


@dataclass
class ErrorContext:
    """
    Location information for an error.

    Attributes:
        file: Optional path to the document where the error occurred
        module: Optional declaration the error refers to, e.g. "model 'User'"
    """

    file: Path | None = None
    module: str | None = None

    def format(self) -> str:
        """
        Format error context as a human-readable string.

        Returns:
            Formatted string like: "schema.toml in model 'User'"
        """
        parts = []
        if self.file is not None:
            parts.append(str(self.file))
        if self.module:
            parts.append(f"in {self.module}")
        return " ".join(parts)


def format_diagnostics(diagnostics: list[str]) -> str:
    """Render diagnostics as ``"<N> errors found:"`` plus one line each."""
    lines = [f"{len(diagnostics)} errors found:\n"]
    for diagnostic in diagnostics:
        lines.append(diagnostic)
        lines.append("\n")
    return "".join(lines)


def make_load_error(
    message: str,
    file: Path | None = None,
    module: str | None = None,
) -> LoadError:
    """
    Helper to create a LoadError with optional context.

    Args:
        message: Error description
        file: Optional source file path
        module: Optional declaration description, e.g. "type 'Money'"

    Returns:
        LoadError with context if a file or module is given
    """
    if file or module:
        return LoadError(message, ErrorContext(file=file, module=module))
    return LoadError(message)
