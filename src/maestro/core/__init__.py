"""
Core types: errors, model layer, scripts and the business network definition.
"""

from .archive import load_archive, read_archive
from .errors import (
    ArchiveReadError,
    ErrorContext,
    FileSystemError,
    MaestroError,
    ModelValidationError,
    TemplateRenderError,
    UnrecognizedNodeKind,
)
from .models import SYSTEM_NAMESPACE, ModelFile, ModelManager
from .network import BusinessNetworkDefinition, NetworkNode, NetworkVisitor
from .scripts import Script, ScriptManager

__all__ = [
    "load_archive",
    "read_archive",
    "ArchiveReadError",
    "ErrorContext",
    "FileSystemError",
    "MaestroError",
    "ModelValidationError",
    "TemplateRenderError",
    "UnrecognizedNodeKind",
    "SYSTEM_NAMESPACE",
    "ModelFile",
    "ModelManager",
    "BusinessNetworkDefinition",
    "NetworkNode",
    "NetworkVisitor",
    "Script",
    "ScriptManager",
]
