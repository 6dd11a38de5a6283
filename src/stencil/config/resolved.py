"""Adapter output consumed by the generation pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from .loader import load_config
from .schema import TemplateConfig

CONTENT_DIR_NAME = "template"


@dataclass(frozen=True)
class ResolvedTemplate:
    config: TemplateConfig
    content_dir: Path
    # Render every text file regardless of suffix (foreign template formats).
    render_all: bool = False
    # Also expose variables nested under this key, e.g. `cookiecutter`.
    context_namespace: Optional[str] = None
    warnings: List[str] = field(default_factory=list)

    @property
    def suffix(self) -> str:
        return self.config.template.templates_suffix


def resolve_template(template_dir: Path) -> ResolvedTemplate:
    """Resolve a native stencil template: stencil.yml plus a template/ content dir."""
    config = load_config(template_dir)
    return ResolvedTemplate(config=config, content_dir=template_dir / CONTENT_DIR_NAME)
