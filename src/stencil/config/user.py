"""User-level source configuration.

Abbreviation discovery:
- Start from the bundled default table shipped with the package
  (`abbreviations.yml`).
- Overlay `abbreviations` from the user config file, by default
  `$XDG_CONFIG_HOME/stencil/config.yml` (or `~/.config/stencil/config.yml`).
- The result is an explicit `SourceConfig` value that callers pass to the
  source resolver; nothing here is cached at import time.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from importlib.resources import files
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from ..errors import ConfigError, StencilIOError


@dataclass(frozen=True)
class SourceConfig:
    """Prefix -> URL template table used to expand `prefix:path` sources."""

    abbreviations: Dict[str, str] = field(default_factory=dict)


def _parse_abbreviations(data: Any, origin: str) -> Dict[str, str]:
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{origin} must be a mapping at the top level")
    section = data.get("abbreviations") or {}
    if not isinstance(section, dict):
        raise ConfigError(f"`abbreviations` in {origin} must be a mapping")
    out: Dict[str, str] = {}
    for prefix, template in section.items():
        if not isinstance(template, str) or "{}" not in template:
            raise ConfigError(
                f"Abbreviation '{prefix}' in {origin} must be a string containing '{{}}'"
            )
        out[str(prefix)] = template
    return out


def load_bundled_abbreviations() -> Dict[str, str]:
    """Load the default abbreviation table from the package resources."""
    content = files("stencil.config").joinpath("abbreviations.yml").read_text(
        encoding="utf-8"
    )
    return _parse_abbreviations(yaml.safe_load(content), "abbreviations.yml")


def default_user_config_path() -> Path:
    base = os.environ.get("XDG_CONFIG_HOME")
    root = Path(base) if base else Path.home() / ".config"
    return root / "stencil" / "config.yml"


def load_user_config(path: Optional[Path] = None) -> SourceConfig:
    """Return the bundled abbreviations overlaid with the user's config file.

    A missing user file is not an error; an unreadable or malformed one is.
    """
    abbreviations = load_bundled_abbreviations()
    config_path = path if path is not None else default_user_config_path()
    if config_path.exists():
        try:
            text = config_path.read_text(encoding="utf-8")
        except OSError as e:
            raise StencilIOError(f"reading user config {config_path}", e) from e
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ConfigError(f"Failed to parse {config_path}: {e}") from e
        abbreviations.update(_parse_abbreviations(data, str(config_path)))
    return SourceConfig(abbreviations=abbreviations)
