"""
Jinja2 template renderer for the generated project.

The asset directory holds two kinds of files: Jinja2 templates (``*.j2``),
rendered with data from the business network, and static scaffold files,
copied verbatim. Each renderer owns its own Environment built from an
explicit TemplateConfig.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined, TemplateError, TemplateNotFound

from .core.errors import TemplateRenderError

if TYPE_CHECKING:
    from .config import MaestroConfig

# Bundled project scaffold
ASSETS_DIR = Path(__file__).parent / "assets" / "project"

TEMPLATE_SUFFIX = ".j2"


def _jsstring_filter(value: Any) -> str:
    """Quote a value as a JSON/JavaScript string literal."""
    return json.dumps("" if value is None else str(value))


def _jscomment_filter(value: Any) -> str:
    """Make a value safe inside a /* */ block comment."""
    return ("" if value is None else str(value)).replace("*/", "*\\/")


@dataclass(frozen=True)
class TemplateConfig:
    """Where templates live and how the environment treats them."""

    template_dir: Path = ASSETS_DIR
    strict: bool = True
    trim_blocks: bool = True
    lstrip_blocks: bool = True

    @classmethod
    def from_config(cls, config: MaestroConfig) -> TemplateConfig:
        if config.template_dir is not None:
            return cls(template_dir=config.template_dir)
        return cls()


class TemplateRenderer:
    """Renders project templates and lists the static scaffold files."""

    def __init__(self, config: TemplateConfig | None = None):
        self.config = config or TemplateConfig()
        if not self.config.template_dir.is_dir():
            raise TemplateRenderError(f"Template directory not found: {self.config.template_dir}")

        env_kwargs: dict[str, Any] = {
            "loader": FileSystemLoader(str(self.config.template_dir)),
            "trim_blocks": self.config.trim_blocks,
            "lstrip_blocks": self.config.lstrip_blocks,
            "keep_trailing_newline": True,
            "autoescape": False,
        }
        if self.config.strict:
            env_kwargs["undefined"] = StrictUndefined
        self.env = Environment(**env_kwargs)
        self.env.filters["jsstring"] = _jsstring_filter
        self.env.filters["jscomment"] = _jscomment_filter

    @property
    def template_dir(self) -> Path:
        return self.config.template_dir

    def render(self, template_name: str, **context: Any) -> str:
        """
        Render a template by its path relative to the template directory.

        Raises:
            TemplateRenderError: If the template is missing or fails to render
        """
        try:
            template = self.env.get_template(template_name)
        except TemplateNotFound as e:
            raise TemplateRenderError(f"Template not found: {e.name}") from e
        except TemplateError as e:
            raise TemplateRenderError(f"Template {template_name} is invalid: {e}") from e

        try:
            return template.render(**context)
        except TemplateError as e:
            raise TemplateRenderError(f"Rendering {template_name} failed: {e}") from e

    def static_files(self) -> list[str]:
        """Relative POSIX paths of every non-template file, in sorted order."""
        root = self.config.template_dir
        return sorted(
            path.relative_to(root).as_posix()
            for path in root.rglob("*")
            if path.is_file() and path.suffix != TEMPLATE_SUFFIX
        )

    def read_asset(self, relative_path: str) -> str:
        """Read a static asset as text."""
        path = self.config.template_dir / relative_path
        try:
            return path.read_text(encoding="utf-8")
        except OSError as e:
            raise TemplateRenderError(f"Cannot read asset {relative_path}: {e}") from e
