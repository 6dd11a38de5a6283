"""Configuration management for stencil."""

from .loader import CONFIG_FILE_NAME, load_config
from .schema import (
    ConditionalFile,
    FilesConfig,
    TemplateConfig,
    TemplateMetadata,
    VariableKind,
    VariableSpec,
    parse_config,
)
from .user import SourceConfig, load_user_config

__all__ = [
    "CONFIG_FILE_NAME",
    "load_config",
    "ConditionalFile",
    "FilesConfig",
    "TemplateConfig",
    "TemplateMetadata",
    "VariableKind",
    "VariableSpec",
    "parse_config",
    "SourceConfig",
    "load_user_config",
]
