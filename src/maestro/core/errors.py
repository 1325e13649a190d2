"""
Error types for archive reading, model validation, and project generation.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional


class MaestroError(Exception):
    """Base exception for all migration errors."""

    def __init__(self, message: str, context: Optional["ErrorContext"] = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.context.format()}\n{self.message}"
        return self.message


class ArchiveReadError(MaestroError):
    """
    Raised when a business network archive cannot be loaded.

    Examples:
    - Archive file does not exist
    - Bytes are not a zip archive
    - Missing or malformed package.json
    """

    pass


class ModelValidationError(MaestroError):
    """
    Raised when the model files of a network fail validation.

    Examples:
    - Syntax error in a .cto file
    - Two model files declaring the same namespace
    - Field or relationship referencing an unknown type
    - Identified declaration missing its identifying field
    """

    pass


class UnrecognizedNodeKind(MaestroError):
    """
    Raised when the definition visitor is handed a value it has no case for.

    Indicates a new node kind was introduced without a visitor method.
    """

    pass


class FileSystemError(MaestroError):
    """
    Raised when output files cannot be written.

    Examples:
    - Permission denied on the output directory
    - Opening a file while another one is still open
    """

    pass


class TemplateRenderError(MaestroError):
    """Raised when a project template is missing or fails to render."""

    pass


@dataclass
class ErrorContext:
    """
    Location of an error inside a model file.

    Attributes:
        file: Model file name as it appears in the archive
        line: Line number (1-indexed)
        column: Column number (1-indexed)
        namespace: Optional namespace of the model file
    """

    file: Path
    line: int | None = None
    column: int | None = None
    namespace: str | None = None

    def format(self) -> str:
        """
        Format error context as a human-readable string.

        Returns:
            Formatted string like: "models/org.acme.cto:10:5 in namespace org.acme"
        """
        location = str(self.file)
        if self.line is not None:
            location += f":{self.line}"
            if self.column is not None:
                location += f":{self.column}"
        if self.namespace:
            location += f" in namespace {self.namespace}"
        return location


def make_model_error(
    message: str,
    file: Path | str,
    line: int | None = None,
    column: int | None = None,
    namespace: str | None = None,
) -> ModelValidationError:
    """
    Helper to create a ModelValidationError with context.

    Args:
        message: Error description
        file: Model file name
        line: Optional line number
        column: Optional column number
        namespace: Optional namespace

    Returns:
        ModelValidationError with context attached
    """
    context = ErrorContext(file=Path(file), line=line, column=column, namespace=namespace)
    return ModelValidationError(message, context)
