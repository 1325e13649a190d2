"""
Migration configuration.

Parses the optional [migrate] section of a maestro.toml and provides typed
settings for the visitor, the file writer and the template renderer.
"""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .core.errors import MaestroError

CONFIG_FILE_NAME = "maestro.toml"


class MaestroConfig(BaseModel):
    """Complete migration configuration."""

    contract_class_name: str = "MyContract"
    contract_file: str = "lib/my-contract.js"
    models_dir: str = "models"
    generated_models_dir: str = "generated"
    indent_width: int = Field(default=3, ge=0)
    beautify: bool = True
    beautify_indent_size: int = Field(default=4, ge=1)
    template_dir: Path | None = None

    model_config = ConfigDict(frozen=True, extra="forbid")

    @field_validator("contract_class_name")
    @classmethod
    def validate_class_name(cls, v: str) -> str:
        """The class name is emitted into JavaScript source."""
        if not v.isidentifier():
            raise ValueError(f"Contract class name '{v}' is not a valid identifier")
        return v


def load_config(toml_path: Path | None = None) -> MaestroConfig:
    """
    Load migration configuration.

    Args:
        toml_path: Explicit config file. When None, ``./maestro.toml`` is
            used if it exists, otherwise defaults apply.

    Returns:
        MaestroConfig with parsed values or defaults

    Raises:
        MaestroError: If an explicit file is missing or any file is invalid
    """
    if toml_path is None:
        toml_path = Path.cwd() / CONFIG_FILE_NAME
        if not toml_path.exists():
            return MaestroConfig()
    elif not toml_path.exists():
        raise MaestroError(f"Config file not found: {toml_path}")

    try:
        with open(toml_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise MaestroError(f"Invalid config file {toml_path}: {e}") from e

    migrate_data: dict[str, Any] = data.get("migrate", {})
    if not migrate_data:
        return MaestroConfig()

    template_dir = migrate_data.get("template_dir")
    if template_dir is not None:
        template_path = Path(template_dir)
        if not template_path.is_absolute():
            template_path = toml_path.parent / template_path
        migrate_data = {**migrate_data, "template_dir": template_path}

    try:
        return MaestroConfig(**migrate_data)
    except ValidationError as e:
        raise MaestroError(f"Invalid [migrate] settings in {toml_path}: {e}") from e
