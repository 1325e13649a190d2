"""
Business network definition: the decoded contents of one archive.
"""

from __future__ import annotations

from typing import Any, Protocol, TypeAlias

from .models import ModelFile, ModelManager
from .scripts import Script, ScriptManager


class BusinessNetworkDefinition:
    """
    A business network: metadata plus its model and script managers.

    Read-only during migration.
    """

    def __init__(
        self,
        name: str,
        version: str,
        description: str = "",
        metadata: dict[str, Any] | None = None,
        readme: str | None = None,
    ):
        self.name = name
        self.version = version
        self.description = description
        self.metadata = metadata or {}
        self.readme = readme
        self.model_manager = ModelManager()
        self.script_manager = ScriptManager()

    def __repr__(self) -> str:
        return f"BusinessNetworkDefinition({self.identifier!r})"

    @property
    def identifier(self) -> str:
        return f"{self.name}@{self.version}"

    def get_model_manager(self) -> ModelManager:
        return self.model_manager

    def get_script_manager(self) -> ScriptManager:
        return self.script_manager

    def accept(self, visitor: NetworkVisitor, parameters: Any) -> Any:
        return visitor.visit(self, parameters)

    @classmethod
    def from_archive(cls, data: bytes) -> BusinessNetworkDefinition:
        """Decode archive bytes. See maestro.core.archive.load_archive."""
        from .archive import load_archive

        return load_archive(data)


# Every kind of node the definition visitor walks
NetworkNode: TypeAlias = BusinessNetworkDefinition | ModelManager | ScriptManager | Script


class NetworkVisitor(Protocol):
    def visit(self, node: NetworkNode | ModelFile, parameters: Any) -> Any: ...
