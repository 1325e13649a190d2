"""
Model files and the model manager.

A ModelManager holds the ordered set of model files of a business network and
validates them as a unit: every file must parse, namespaces must be unique,
and every type reference must resolve against the files in the manager.
"""

from __future__ import annotations

import logging
from functools import cached_property
from pathlib import PurePosixPath
from typing import TYPE_CHECKING, Any

from .cto import DeclarationKind, DeclarationSpec, ModelFileSpec, parse_model, read_namespace
from .errors import make_model_error

if TYPE_CHECKING:
    from .network import NetworkVisitor

logger = logging.getLogger(__name__)

SYSTEM_NAMESPACE = "org.hyperledger.composer.system"

# Archive directory holding model files
MODELS_DIR = "models"

# Declarations without an explicit `extends` inherit from these system types
IMPLICIT_SUPER_TYPES = {
    DeclarationKind.ASSET: "Asset",
    DeclarationKind.PARTICIPANT: "Participant",
    DeclarationKind.TRANSACTION: "Transaction",
    DeclarationKind.EVENT: "Event",
}

IDENTIFIABLE_KINDS = frozenset({DeclarationKind.ASSET, DeclarationKind.PARTICIPANT})


class ModelFile:
    """
    One model file: its raw definition text plus a lazily parsed form.

    The text is kept verbatim so it can be copied into a migrated project
    unchanged; parsing only happens when the namespace or declarations are
    needed.
    """

    def __init__(self, definitions: str, file_name: str | None = None, system: bool = False):
        self.definitions = definitions
        self._system = system
        self.file_name = file_name or f"{self.namespace or 'model'}.cto"

    def __repr__(self) -> str:
        return f"ModelFile({self.file_name!r}, namespace={self.namespace!r})"

    @property
    def name(self) -> str:
        """Logical name of the file: its path below the archive's ``models/`` directory."""
        path = PurePosixPath(self.file_name)
        if path.parts[:1] == (MODELS_DIR,) and len(path.parts) > 1:
            path = path.relative_to(MODELS_DIR)
        return path.as_posix()

    @cached_property
    def namespace(self) -> str | None:
        if "spec" in self.__dict__:
            return self.spec.namespace
        return read_namespace(self.definitions, getattr(self, "file_name", "<model>"))

    @cached_property
    def spec(self) -> ModelFileSpec:
        """Parsed contents. Raises ModelValidationError on syntax errors."""
        return parse_model(self.definitions, self.file_name)

    @property
    def is_system_model_file(self) -> bool:
        return self._system or self.namespace == SYSTEM_NAMESPACE

    @property
    def declarations(self) -> list[DeclarationSpec]:
        return self.spec.declarations

    def get_declaration(self, name: str) -> DeclarationSpec | None:
        return self.spec.get_declaration(name)

    def accept(self, visitor: Any, parameters: Any) -> Any:
        return visitor.visit(self, parameters)


class ModelManager:
    """
    Ordered collection of model files for one business network.

    Files are kept in insertion order; nothing here sorts or deduplicates them.
    """

    def __init__(self) -> None:
        self._model_files: list[ModelFile] = []

    def __len__(self) -> int:
        return len(self._model_files)

    def add_model_file(
        self,
        definitions: str,
        file_name: str | None = None,
        disable_validation: bool = False,
        system: bool = False,
    ) -> ModelFile:
        """
        Add a model file.

        Args:
            definitions: Model text
            file_name: Name of the file (defaults to ``<namespace>.cto``)
            disable_validation: Skip parsing and duplicate checks until
                validate_model_files() is called
            system: Flag the file as the framework system model

        Returns:
            The new ModelFile

        Raises:
            ModelValidationError: If validation is enabled and the file does
                not parse or its namespace is already present
        """
        model_file = ModelFile(definitions, file_name, system=system)
        if not disable_validation:
            model_file.spec  # noqa: B018 - parse eagerly to surface syntax errors
            existing = self.get_model_file(model_file.namespace)
            if existing is not None:
                raise make_model_error(
                    f"Namespace {model_file.namespace} is already declared in {existing.file_name}",
                    model_file.file_name,
                    namespace=model_file.namespace,
                )
        self._model_files.append(model_file)
        return model_file

    def get_model_files(self) -> list[ModelFile]:
        return list(self._model_files)

    def get_namespaces(self) -> list[str]:
        return [mf.namespace for mf in self._model_files if mf.namespace]

    def get_model_file(self, namespace: str | None) -> ModelFile | None:
        for model_file in self._model_files:
            if model_file.namespace == namespace:
                return model_file
        return None

    def get_system_model_files(self) -> list[ModelFile]:
        return [mf for mf in self._model_files if mf.is_system_model_file]

    def accept(self, visitor: NetworkVisitor, parameters: Any) -> Any:
        return visitor.visit(self, parameters)

    # =========================================================================
    # Validation
    # =========================================================================

    def validate_model_files(self) -> None:
        """
        Validate every model file against the others.

        Raises:
            ModelValidationError: On the first problem found, with the file
                and namespace of the offending model attached
        """
        seen: dict[str, ModelFile] = {}
        for model_file in self._model_files:
            namespace = model_file.spec.namespace
            if namespace in seen:
                raise make_model_error(
                    f"Duplicate namespace {namespace}: already declared in {seen[namespace].file_name}",
                    model_file.file_name,
                    namespace=namespace,
                )
            seen[namespace] = model_file

        for model_file in self._model_files:
            self._validate_model_file(model_file)

        logger.debug("Validated %d model files", len(self._model_files))

    def _validate_model_file(self, model_file: ModelFile) -> None:
        spec = model_file.spec

        for imp in spec.imports:
            target = self.get_model_file(imp.namespace)
            if target is None:
                raise make_model_error(
                    f"Import {imp.qualified} refers to unknown namespace {imp.namespace}",
                    model_file.file_name,
                    imp.line,
                    imp.column,
                    spec.namespace,
                )
            if imp.name is not None and target.get_declaration(imp.name) is None:
                raise make_model_error(
                    f"Import {imp.qualified} refers to unknown type {imp.name}",
                    model_file.file_name,
                    imp.line,
                    imp.column,
                    spec.namespace,
                )

        names: set[str] = set()
        for decl in spec.declarations:
            if decl.name in names:
                raise make_model_error(
                    f"Duplicate declaration {decl.name}",
                    model_file.file_name,
                    decl.line,
                    decl.column,
                    spec.namespace,
                )
            names.add(decl.name)
            self._validate_declaration(model_file, decl)

    def _validate_declaration(self, model_file: ModelFile, decl: DeclarationSpec) -> None:
        namespace = model_file.spec.namespace

        def fail(message: str, line: int | None = None, column: int | None = None):
            return make_model_error(
                message,
                model_file.file_name,
                line if line is not None else decl.line,
                column if column is not None else decl.column,
                namespace,
            )

        if decl.is_enum:
            if len(set(decl.enum_values)) != len(decl.enum_values):
                raise fail(f"Enum {decl.name} declares a value more than once")
            return

        if decl.super_type is not None:
            _, super_decl = self.resolve_type(model_file, decl.super_type, decl.line, decl.column)
            if super_decl.kind != decl.kind:
                raise fail(
                    f"{decl.kind.value.capitalize()} {decl.name} cannot extend "
                    f"{super_decl.kind.value} {super_decl.name}"
                )

        chain = self.get_type_hierarchy(model_file, decl)
        inherited = {prop.name for _, ancestor in chain[1:] for prop in ancestor.properties}

        prop_names: set[str] = set()
        for prop in decl.properties:
            if prop.name in prop_names or prop.name in inherited:
                raise fail(f"Property {prop.name} is declared more than once in {decl.name}", prop.line, prop.column)
            prop_names.add(prop.name)
            if prop.is_primitive and not prop.is_relationship:
                continue
            target_file, target = self.resolve_type(model_file, prop.type_name, prop.line, prop.column)
            if prop.is_relationship:
                # abstract targets are allowed; their concrete subtypes carry the identifier
                if target.kind in (DeclarationKind.CONCEPT, DeclarationKind.ENUM) or not (
                    target.abstract or self._identifier_of(target_file, target)
                ):
                    raise fail(
                        f"Relationship {prop.name} must point to an identified type, "
                        f"{target.name} is not identified",
                        prop.line,
                        prop.column,
                    )

        identifier = decl.identified_by
        if identifier is not None:
            field = self._find_property(chain, identifier)
            if field is None:
                raise fail(f"Identifying field {identifier} is not declared in {decl.name}")
            if field.type_name != "String" or field.is_array or field.is_relationship:
                raise fail(f"Identifying field {identifier} of {decl.name} must be a String")
        elif decl.kind in IDENTIFIABLE_KINDS and not decl.abstract and not self._identifier_of(model_file, decl):
            raise fail(f"{decl.kind.value.capitalize()} {decl.name} must be identified by a field")

    def _find_property(self, chain: list[tuple[ModelFile, DeclarationSpec]], name: str):
        for _, decl in chain:
            prop = decl.get_property(name)
            if prop is not None:
                return prop
        return None

    def _identifier_of(self, model_file: ModelFile, decl: DeclarationSpec) -> str | None:
        for _, ancestor in self.get_type_hierarchy(model_file, decl):
            if ancestor.identified_by:
                return ancestor.identified_by
        return None

    # =========================================================================
    # Type resolution
    # =========================================================================

    def get_super_type_name(self, model_file: ModelFile, decl: DeclarationSpec) -> str | None:
        """Explicit super type, or the implicit system super type for the declaration kind."""
        if decl.super_type is not None:
            return decl.super_type
        implicit = IMPLICIT_SUPER_TYPES.get(decl.kind)
        if implicit is None or model_file.spec.namespace == SYSTEM_NAMESPACE:
            return None
        if self.get_model_file(SYSTEM_NAMESPACE) is None:
            return None
        return f"{SYSTEM_NAMESPACE}.{implicit}"

    def get_type_hierarchy(
        self, model_file: ModelFile, decl: DeclarationSpec
    ) -> list[tuple[ModelFile, DeclarationSpec]]:
        """Return the declaration followed by its ancestors, nearest first."""
        chain = [(model_file, decl)]
        seen = {(model_file.spec.namespace, decl.name)}
        current_file, current = model_file, decl
        while True:
            super_name = self.get_super_type_name(current_file, current)
            if super_name is None:
                return chain
            current_file, current = self.resolve_type(current_file, super_name, current.line, current.column)
            key = (current_file.spec.namespace, current.name)
            if key in seen:
                raise make_model_error(
                    f"Circular inheritance involving {decl.name}",
                    model_file.file_name,
                    decl.line,
                    decl.column,
                    model_file.spec.namespace,
                )
            seen.add(key)
            chain.append((current_file, current))

    def resolve_type(
        self,
        model_file: ModelFile,
        type_name: str,
        line: int | None = None,
        column: int | None = None,
    ) -> tuple[ModelFile, DeclarationSpec]:
        """
        Resolve a type name used inside a model file.

        Lookup order: fully qualified name, local declaration, explicit
        import, wildcard import, then the system namespace.

        Raises:
            ModelValidationError: If the type cannot be found
        """
        spec = model_file.spec

        candidates: list[tuple[str, str]] = []
        if "." in type_name:
            namespace, _, name = type_name.rpartition(".")
            candidates.append((namespace, name))
        else:
            candidates.append((spec.namespace, type_name))
            for imp in spec.imports:
                if imp.name == type_name:
                    candidates.append((imp.namespace, type_name))
            for imp in spec.imports:
                if imp.is_wildcard:
                    candidates.append((imp.namespace, type_name))
            candidates.append((SYSTEM_NAMESPACE, type_name))

        for namespace, name in candidates:
            target_file = self.get_model_file(namespace)
            if target_file is None:
                continue
            target = target_file.get_declaration(name)
            if target is not None:
                return target_file, target

        raise make_model_error(
            f"Undeclared type {type_name}",
            model_file.file_name,
            line,
            column,
            spec.namespace,
        )
