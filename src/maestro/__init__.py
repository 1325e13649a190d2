"""
maestro - migrate business network archives into smart-contract projects.

Reads a packaged business network (.bna), validates its models, and writes
a standalone contract project: scaffold files, the original models,
generated TypeScript interfaces and a contract class built from the
network's transaction scripts.
"""

from ._version import get_version
from .commands import generate, migrate
from .core.errors import (
    ArchiveReadError,
    FileSystemError,
    MaestroError,
    ModelValidationError,
    TemplateRenderError,
    UnrecognizedNodeKind,
)
from .transform import transform_script

__version__ = get_version()

__all__ = [
    "__version__",
    "migrate",
    "generate",
    "transform_script",
    "MaestroError",
    "ArchiveReadError",
    "ModelValidationError",
    "UnrecognizedNodeKind",
    "FileSystemError",
    "TemplateRenderError",
]
