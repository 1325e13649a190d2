"""
Transaction scripts of a business network.
"""

from __future__ import annotations

from pathlib import PurePosixPath
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .network import NetworkVisitor


class Script:
    """One source file of transaction logic, kept exactly as read from the archive."""

    def __init__(self, name: str, contents: str, language: str = "JS"):
        self.name = name
        self.contents = contents
        self.language = language

    def __repr__(self) -> str:
        return f"Script({self.name!r})"

    @property
    def identifier(self) -> str:
        return PurePosixPath(self.name).stem

    def accept(self, visitor: NetworkVisitor, parameters: Any) -> Any:
        return visitor.visit(self, parameters)


class ScriptManager:
    """Ordered collection of scripts. Insertion order is preserved."""

    def __init__(self) -> None:
        self._scripts: list[Script] = []

    def __len__(self) -> int:
        return len(self._scripts)

    def add_script(self, script: Script) -> None:
        self._scripts.append(script)

    def create_script(self, name: str, contents: str, language: str = "JS") -> Script:
        script = Script(name, contents, language)
        self.add_script(script)
        return script

    def get_scripts(self) -> list[Script]:
        return list(self._scripts)

    def get_script(self, name: str) -> Script | None:
        for script in self._scripts:
            if script.name == name:
                return script
        return None

    def accept(self, visitor: NetworkVisitor, parameters: Any) -> Any:
        return visitor.visit(self, parameters)
