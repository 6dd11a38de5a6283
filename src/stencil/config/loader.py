"""Load stencil.yml from a template directory."""

from __future__ import annotations

from pathlib import Path

import yaml

from ..errors import ConfigError, ConfigNotFoundError, StencilIOError
from .schema import TemplateConfig, parse_config

CONFIG_FILE_NAME = "stencil.yml"


def config_path_for(path: Path) -> Path:
    if path.name == CONFIG_FILE_NAME:
        return path
    return path / CONFIG_FILE_NAME


def load_config(path: Path) -> TemplateConfig:
    """Load and validate a TemplateConfig from a template dir or stencil.yml path."""
    config_path = config_path_for(path)
    if not config_path.exists():
        raise ConfigNotFoundError(config_path)

    try:
        with config_path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise StencilIOError(f"reading {config_path}", e) from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse {config_path}: {e}") from e

    return parse_config(data or {})
