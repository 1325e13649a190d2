"""
Business network archive reader.

A .bna file is a zip bundle laid out as:

    package.json          name, version, description
    README.md             optional
    models/**/*.cto       model files
    lib/**/*.js           transaction scripts
    permissions.acl       ignored
    queries.qry           ignored

Model text is stored unparsed; validation happens later, against a fresh
model manager, so a broken model does not prevent reading the archive.
"""

from __future__ import annotations

import io
import json
import logging
import zipfile
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError

from .errors import ArchiveReadError
from .network import BusinessNetworkDefinition

logger = logging.getLogger(__name__)

PACKAGE_JSON = "package.json"
README = "README.md"
MODELS_DIR = "models/"
LIB_DIR = "lib/"


class PackageMetadata(BaseModel):
    """The fields of package.json a migration needs; everything else is kept as-is."""

    name: str
    version: str
    description: str = ""

    model_config = ConfigDict(extra="allow")


def read_archive(path: Path | str) -> BusinessNetworkDefinition:
    """
    Load a business network archive from disk.

    Args:
        path: Path to the .bna file

    Returns:
        Decoded BusinessNetworkDefinition

    Raises:
        ArchiveReadError: If the file is missing or cannot be decoded
    """
    archive_path = Path(path)
    if not archive_path.is_file():
        raise ArchiveReadError(f"Business network archive not found: {archive_path}")
    try:
        data = archive_path.read_bytes()
    except OSError as e:
        raise ArchiveReadError(f"Cannot read business network archive {archive_path}: {e}") from e

    logger.debug("Read %d bytes from %s", len(data), archive_path)
    return load_archive(data)


def load_archive(data: bytes) -> BusinessNetworkDefinition:
    """
    Decode archive bytes into a BusinessNetworkDefinition.

    Entries are processed in the order they appear in the archive.

    Raises:
        ArchiveReadError: If the bytes are not a zip or package.json is
            missing or invalid
    """
    try:
        bundle = zipfile.ZipFile(io.BytesIO(data))
    except zipfile.BadZipFile as e:
        raise ArchiveReadError(f"Not a business network archive: {e}") from e

    with bundle:
        names = [info.filename for info in bundle.infolist() if not info.is_dir()]
        if PACKAGE_JSON not in names:
            raise ArchiveReadError("Business network archive has no package.json")

        metadata = _read_metadata(_read_text(bundle, PACKAGE_JSON))
        readme = _read_text(bundle, README) if README in names else None

        network = BusinessNetworkDefinition(
            name=metadata.name,
            version=metadata.version,
            description=metadata.description,
            metadata=metadata.model_dump(),
            readme=readme,
        )

        for name in names:
            if name.startswith(MODELS_DIR) and name.endswith(".cto"):
                network.model_manager.add_model_file(
                    _read_text(bundle, name), name, disable_validation=True
                )
            elif name.startswith(LIB_DIR) and name.endswith(".js"):
                network.script_manager.create_script(name, _read_text(bundle, name))

    logger.debug(
        "Loaded %s with %d model files and %d scripts",
        network.identifier,
        len(network.model_manager),
        len(network.script_manager),
    )
    return network


def _read_text(bundle: zipfile.ZipFile, name: str) -> str:
    try:
        return bundle.read(name).decode("utf-8")
    except (zipfile.BadZipFile, UnicodeDecodeError, KeyError) as e:
        raise ArchiveReadError(f"Cannot read {name} from archive: {e}") from e


def _read_metadata(text: str) -> PackageMetadata:
    try:
        raw: Any = json.loads(text)
    except json.JSONDecodeError as e:
        raise ArchiveReadError(f"package.json is not valid JSON: {e}") from e
    if not isinstance(raw, dict):
        raise ArchiveReadError("package.json must contain a JSON object")
    try:
        return PackageMetadata.model_validate(raw)
    except ValidationError as e:
        raise ArchiveReadError(f"package.json is missing required fields: {e}") from e
