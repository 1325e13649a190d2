"""
TypeScript code generation from a validated model manager.

Emits one ``<namespace>.ts`` file per model file containing an interface
per class declaration (prefixed with ``I``) and an ``enum`` per enumeration.
Types referenced from other namespaces are imported from the sibling file.
"""

from __future__ import annotations

import logging
from typing import Any

from ..core.cto import DeclarationSpec, PropertySpec
from ..core.errors import UnrecognizedNodeKind
from ..core.models import ModelFile, ModelManager
from .writer import FileWriter

logger = logging.getLogger(__name__)

TYPESCRIPT_PRIMITIVES = {
    "String": "string",
    "Boolean": "boolean",
    "DateTime": "Date",
    "Double": "number",
    "Integer": "number",
    "Long": "number",
}


class TypescriptVisitor:
    """
    Visitor over ModelManager -> ModelFile -> declarations -> properties.

    Args:
        output_prefix: Directory, relative to the writer's root, that
            receives the generated files
    """

    def __init__(self, output_prefix: str = ""):
        self.output_prefix = output_prefix.strip("/")
        self._model_manager: ModelManager | None = None
        self._model_file: ModelFile | None = None
        self._imports: dict[str, set[str]] = {}

    def visit(self, thing: Any, parameters: Any) -> Any:
        if isinstance(thing, ModelManager):
            return self.visit_model_manager(thing, parameters)
        if isinstance(thing, ModelFile):
            return self.visit_model_file(thing, parameters)
        if isinstance(thing, DeclarationSpec):
            if thing.is_enum:
                return self.visit_enum_declaration(thing, parameters)
            return self.visit_class_declaration(thing, parameters)
        if isinstance(thing, PropertySpec):
            return self.visit_property(thing, parameters)
        raise UnrecognizedNodeKind(f"Unrecognised type: {type(thing).__name__}, value: {thing!r}")

    def visit_model_manager(self, model_manager: ModelManager, parameters: Any) -> list[str]:
        self._model_manager = model_manager
        namespaces = []
        for model_file in model_manager.get_model_files():
            model_file.accept(self, parameters)
            namespaces.append(model_file.spec.namespace)
        return namespaces

    def visit_model_file(self, model_file: ModelFile, parameters: Any) -> None:
        writer: FileWriter = parameters.file_writer
        namespace = model_file.spec.namespace
        self._model_file = model_file
        self._imports = {}

        file_name = f"{namespace}.ts"
        if self.output_prefix:
            file_name = f"{self.output_prefix}/{file_name}"
        logger.debug("Generating %s", file_name)

        writer.open_file(file_name)
        writer.write_line(0, f"// namespace {namespace}")
        writer.write_line(0, "")
        for decl in model_file.declarations:
            self.visit(decl, parameters)

        header = [f"// Generated from {model_file.file_name}. Do not edit."]
        for imported_ns in sorted(self._imports):
            names = ",".join(sorted(self._imports[imported_ns]))
            header.append(f"import {{{names}}} from './{imported_ns}';")
        header.append("")
        for line in header:
            writer.write_before_line(0, line)
        writer.close_file()

    def visit_enum_declaration(self, decl: DeclarationSpec, parameters: Any) -> None:
        writer: FileWriter = parameters.file_writer
        writer.write_line(0, f"export enum {decl.name} {{")
        for value in decl.enum_values:
            writer.write_line(1, f"{value},")
        writer.write_line(0, "}")
        writer.write_line(0, "")

    def visit_class_declaration(self, decl: DeclarationSpec, parameters: Any) -> None:
        writer: FileWriter = parameters.file_writer
        assert self._model_manager is not None and self._model_file is not None

        extends = ""
        super_name = self._model_manager.get_super_type_name(self._model_file, decl)
        if super_name is not None:
            extends = f" extends {self._reference(super_name)}"

        writer.write_line(0, f"export interface I{decl.name}{extends} {{")
        for prop in decl.properties:
            self.visit(prop, parameters)
        writer.write_line(0, "}")
        writer.write_line(0, "")

    def visit_property(self, prop: PropertySpec, parameters: Any) -> None:
        writer: FileWriter = parameters.file_writer
        if prop.is_primitive and not prop.is_relationship:
            ts_type = TYPESCRIPT_PRIMITIVES[prop.type_name]
        else:
            ts_type = self._reference(prop.type_name)
        if prop.is_array:
            ts_type += "[]"
        optional = "?" if prop.optional else ""
        writer.write_line(1, f"{prop.name}{optional}: {ts_type};")

    def _reference(self, type_name: str) -> str:
        """TypeScript name for a declared type, recording an import when it lives elsewhere."""
        assert self._model_manager is not None and self._model_file is not None
        target_file, target = self._model_manager.resolve_type(self._model_file, type_name)
        ts_name = target.name if target.is_enum else f"I{target.name}"
        target_ns = target_file.spec.namespace
        if target_ns != self._model_file.spec.namespace:
            self._imports.setdefault(target_ns, set()).add(ts_name)
        return ts_name
