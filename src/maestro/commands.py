"""
Commands exposed by the CLI.

Kept free of typer so they can be called directly from Python.
"""

from __future__ import annotations

import logging
from pathlib import Path

from .codegen import FileWriter
from .config import MaestroConfig
from .core.archive import read_archive
from .core.errors import FileSystemError
from .templating import TemplateConfig, TemplateRenderer
from .visitor import MigrationParameters, NetworkDefinitionVisitor

logger = logging.getLogger(__name__)

DONE = "Done."


def migrate(
    bna_path: Path | str,
    output_directory: Path | str,
    config: MaestroConfig | None = None,
) -> str:
    """
    Migrate a business network archive into a contract project.

    Args:
        bna_path: Path to the .bna file
        output_directory: Directory receiving the project; created if needed
        config: Migration settings (defaults if None)

    Returns:
        "Done." on success

    Raises:
        ArchiveReadError: If the archive cannot be read
        ModelValidationError: If the models fail validation
        TemplateRenderError: If a project template fails
        FileSystemError: If output cannot be written
    """
    config = config or MaestroConfig()
    network = read_archive(bna_path)

    renderer = TemplateRenderer(TemplateConfig.from_config(config))
    parameters = MigrationParameters(
        file_writer=FileWriter(output_directory, indent_width=config.indent_width),
        renderer=renderer,
        config=config,
        network_identifier=network.identifier,
    )

    try:
        NetworkDefinitionVisitor().visit(network, parameters)
    except OSError as e:
        raise FileSystemError(f"Migration of {network.identifier} failed: {e}") from e

    logger.info(
        "Wrote %d files for %s to %s",
        len(parameters.file_writer.files_written),
        network.identifier,
        output_directory,
    )
    return DONE


# The command was called `generate` before it was called `migrate`
generate = migrate
