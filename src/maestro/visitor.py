"""
Business network definition visitor.

Walks a business network and writes a standalone contract project:

    BusinessNetworkDefinition
        scaffold files, index.js, package.json
        -> ModelManager     models/*.cto, generated TypeScript
        -> ScriptManager    lib/<contract>.js
            -> Script       transformed function bodies
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import Any

import jsbeautifier

from .codegen import FileWriter, TypescriptVisitor
from .config import MaestroConfig
from .core.errors import UnrecognizedNodeKind, make_model_error
from .core.models import SYSTEM_NAMESPACE, ModelManager
from .core.network import BusinessNetworkDefinition, NetworkNode
from .core.scripts import Script, ScriptManager
from .templating import TemplateRenderer
from .transform import transform_script

logger = logging.getLogger(__name__)

SYSTEM_MODEL_FILE = f"{SYSTEM_NAMESPACE}.cto"
INDEX_TEMPLATE = "index.js.j2"
PACKAGE_TEMPLATE = "package.json.j2"
CONTRACT_TEMPLATE = "lib/contract.js.j2"


@dataclass
class MigrationParameters:
    """
    Per-run context passed through every visit call.

    Attributes:
        file_writer: Writer rooted at the output directory
        renderer: Template renderer for the project scaffold
        config: Migration settings
        network_identifier: ``name@version`` of the network being migrated
        results: Values produced by the visit methods, keyed by node kind
    """

    file_writer: FileWriter
    renderer: TemplateRenderer
    config: MaestroConfig = field(default_factory=MaestroConfig)
    network_identifier: str = ""
    results: dict[str, Any] = field(default_factory=dict)

    @property
    def output_dir(self) -> Path:
        return self.file_writer.output_dir


class NetworkDefinitionVisitor:
    """Converts the contents of a BusinessNetworkDefinition into a contract project."""

    def visit(self, thing: NetworkNode, parameters: MigrationParameters) -> Any:
        """
        Dispatch on the kind of node.

        Raises:
            UnrecognizedNodeKind: If the value is not a network node
        """
        if isinstance(thing, BusinessNetworkDefinition):
            return self.visit_network_definition(thing, parameters)
        elif isinstance(thing, ModelManager):
            return self.visit_model_manager(thing, parameters)
        elif isinstance(thing, ScriptManager):
            return self.visit_script_manager(thing, parameters)
        elif isinstance(thing, Script):
            return self.visit_script(thing, parameters)
        raise UnrecognizedNodeKind(f"Unrecognised type: {type(thing).__name__}, value: {thing!r}")

    def visit_network_definition(
        self, network: BusinessNetworkDefinition, parameters: MigrationParameters
    ) -> None:
        logger.info("Processing network %s", network.identifier)
        if not parameters.network_identifier:
            parameters.network_identifier = network.identifier

        renderer = parameters.renderer
        writer = parameters.file_writer
        config = parameters.config

        for relative_path in renderer.static_files():
            writer.copy_file(renderer.template_dir / relative_path, relative_path)

        context = {
            "name": network.name,
            "version": network.version,
            "description": network.description,
            "contract_class_name": config.contract_class_name,
            "contract_module": str(PurePosixPath(config.contract_file).with_suffix("")),
        }
        for template, target in ((INDEX_TEMPLATE, "index.js"), (PACKAGE_TEMPLATE, "package.json")):
            with writer.writing(target):
                writer.write_lines(renderer.render(template, **context))

        network.get_model_manager().accept(self, parameters)
        network.get_script_manager().accept(self, parameters)

    def visit_model_manager(
        self, source: ModelManager, parameters: MigrationParameters
    ) -> ModelManager:
        """
        Validate the network's models and write them out.

        The models are re-added to a fresh manager together with the bundled
        system model, so validation always sees the canonical system types
        whatever the archive contained.

        Returns:
            The validated model manager

        Raises:
            ModelValidationError: If any model file fails validation
        """
        writer = parameters.file_writer
        config = parameters.config

        model_manager = ModelManager()
        model_manager.add_model_file(
            parameters.renderer.read_asset(f"models/{SYSTEM_MODEL_FILE}"),
            SYSTEM_MODEL_FILE,
            disable_validation=True,
            system=True,
        )

        user_files = []
        output_names = {SYSTEM_MODEL_FILE: "the bundled system model"}
        for model_file in source.get_model_files():
            if model_file.is_system_model_file:
                logger.debug("Skipping system model %s", model_file.file_name)
                continue
            logger.info("Processing model %s", model_file.namespace)
            if model_file.name in output_names:
                raise make_model_error(
                    f"Model file name {model_file.name} is already used by {output_names[model_file.name]}",
                    model_file.file_name,
                    namespace=model_file.namespace,
                )
            output_names[model_file.name] = model_file.file_name
            model_manager.add_model_file(model_file.definitions, model_file.file_name, disable_validation=True)
            user_files.append(model_file)

        model_manager.validate_model_files()

        for model_file in user_files:
            with writer.writing(f"{config.models_dir}/{model_file.name}"):
                writer.write(model_file.definitions)

        namespaces = TypescriptVisitor(config.generated_models_dir).visit(model_manager, parameters)
        parameters.results["namespaces"] = namespaces
        return model_manager

    def visit_script_manager(self, script_manager: ScriptManager, parameters: MigrationParameters) -> str:
        """
        Write the contract class holding every transformed script, in script order.

        Returns:
            The contract source as written
        """
        functions = [script.accept(self, parameters) for script in script_manager.get_scripts()]
        config = parameters.config

        source = parameters.renderer.render(
            CONTRACT_TEMPLATE,
            functions=functions,
            contract_class_name=config.contract_class_name,
            network_identifier=parameters.network_identifier,
        )
        if config.beautify:
            source = beautify(source, config.beautify_indent_size)

        writer = parameters.file_writer
        with writer.writing(config.contract_file):
            writer.write_lines(source)

        parameters.results["functions"] = functions
        return source

    def visit_script(self, script: Script, parameters: MigrationParameters) -> str:
        logger.info("Processing script %s", script.name)
        return transform_script(script.contents)


def beautify(source: str, indent_size: int = 4) -> str:
    """Normalise JavaScript layout. Formatting only; the code is unchanged."""
    options = jsbeautifier.default_options()
    options.indent_size = indent_size
    options.end_with_newline = True
    options.preserve_newlines = True
    options.max_preserve_newlines = 2
    return jsbeautifier.beautify(source, options)
