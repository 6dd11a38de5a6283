"""Typed template configuration parsed from stencil.yml."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from ..errors import ConfigError, InvalidVariableError

DEFAULT_TEMPLATES_SUFFIX = ".jinja"
DEFAULT_ANSWERS_FILE = ".stencil-answers.yml"


class VariableKind(str, Enum):
    STRING = "string"
    BOOL = "bool"
    INT = "int"
    FLOAT = "float"
    SELECT = "select"
    MULTISELECT = "multiselect"

    @property
    def has_choices(self) -> bool:
        return self in (VariableKind.SELECT, VariableKind.MULTISELECT)


@dataclass(frozen=True)
class VariableSpec:
    """Declaration of a single template variable."""

    name: str
    kind: VariableKind = VariableKind.STRING
    prompt: Optional[str] = None
    default: Any = None
    choices: Optional[List[str]] = None
    validation: Optional[str] = None
    validation_message: Optional[str] = None
    when: Optional[str] = None
    computed: Optional[str] = None
    secret: bool = False

    @property
    def is_computed(self) -> bool:
        return self.computed is not None

    @property
    def prompt_text(self) -> str:
        return self.prompt or self.name

    def validate(self) -> None:
        if self.kind.has_choices and not self.choices:
            raise InvalidVariableError(
                self.name,
                "select/multiselect variables must have non-empty 'choices'",
            )
        if self.computed is not None and self.prompt is not None:
            raise InvalidVariableError(
                self.name, "computed variables should not have a 'prompt' field"
            )


@dataclass(frozen=True)
class ConditionalFile:
    """Files matching ``pattern`` are excluded when ``when`` is false."""

    pattern: str
    when: str


@dataclass(frozen=True)
class FilesConfig:
    exclude: List[str] = field(default_factory=list)
    copy_without_render: List[str] = field(default_factory=list)
    conditional: List[ConditionalFile] = field(default_factory=list)


@dataclass(frozen=True)
class TemplateMetadata:
    name: str
    version: Optional[str] = None
    description: Optional[str] = None
    templates_suffix: str = DEFAULT_TEMPLATES_SUFFIX


@dataclass(frozen=True)
class TemplateConfig:
    template: TemplateMetadata
    variables: List[VariableSpec] = field(default_factory=list)
    files: FilesConfig = field(default_factory=FilesConfig)
    answers_file: str = DEFAULT_ANSWERS_FILE

    def variable(self, name: str) -> Optional[VariableSpec]:
        for spec in self.variables:
            if spec.name == name:
                return spec
        return None

    def validate(self) -> None:
        for spec in self.variables:
            spec.validate()


def _str_list(value: Any, where: str) -> List[str]:
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigError(f"`{where}` must be a list of strings")
    return list(value)


def _optional_str(data: Dict[str, Any], key: str, where: str) -> Optional[str]:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigError(f"`{where}.{key}` must be a string")
    return value


def _parse_variable(name: str, raw: Any) -> VariableSpec:
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise InvalidVariableError(name, "definition must be a mapping")
    kind_raw = raw.get("type", VariableKind.STRING.value)
    try:
        kind = VariableKind(str(kind_raw).lower())
    except ValueError:
        raise InvalidVariableError(name, f"unknown type '{kind_raw}'") from None
    where = f"variables.{name}"
    choices_raw = raw.get("choices")
    choices: Optional[List[str]] = None
    if choices_raw is not None:
        if not isinstance(choices_raw, list):
            raise InvalidVariableError(name, "'choices' must be a list")
        choices = [str(c) for c in choices_raw]
    return VariableSpec(
        name=name,
        kind=kind,
        prompt=_optional_str(raw, "prompt", where),
        default=raw.get("default"),
        choices=choices,
        validation=_optional_str(raw, "validation", where),
        validation_message=_optional_str(raw, "validation_message", where),
        when=_optional_str(raw, "when", where),
        computed=_optional_str(raw, "computed", where),
        secret=bool(raw.get("secret", False)),
    )


def _parse_files(raw: Any) -> FilesConfig:
    if raw is None:
        return FilesConfig()
    if not isinstance(raw, dict):
        raise ConfigError("`files` must be a mapping when provided")
    conditional: List[ConditionalFile] = []
    for item in raw.get("conditional") or []:
        if not isinstance(item, dict) or "pattern" not in item or "when" not in item:
            raise ConfigError(
                "`files.conditional` entries need both 'pattern' and 'when'"
            )
        conditional.append(ConditionalFile(pattern=str(item["pattern"]), when=str(item["when"])))
    return FilesConfig(
        exclude=_str_list(raw.get("exclude"), "files.exclude"),
        copy_without_render=_str_list(
            raw.get("copy_without_render"), "files.copy_without_render"
        ),
        conditional=conditional,
    )


def parse_config(data: Any) -> TemplateConfig:
    """Build and validate a TemplateConfig from a decoded YAML document."""
    if not isinstance(data, dict):
        raise ConfigError("stencil.yml must be a mapping at the top level")

    meta_raw = data.get("template")
    if not isinstance(meta_raw, dict) or not meta_raw.get("name"):
        raise ConfigError("stencil.yml must define `template.name`")
    suffix = meta_raw.get("templates_suffix", DEFAULT_TEMPLATES_SUFFIX)
    if suffix is None:
        suffix = ""
    version = meta_raw.get("version")
    metadata = TemplateMetadata(
        name=str(meta_raw["name"]),
        version=str(version) if version is not None else None,
        description=_optional_str(meta_raw, "description", "template"),
        templates_suffix=str(suffix),
    )

    vars_raw = data.get("variables") or {}
    if not isinstance(vars_raw, dict):
        raise ConfigError("`variables` must be a mapping when provided")
    # PyYAML preserves mapping order, which is the declaration order.
    variables = [_parse_variable(str(name), raw) for name, raw in vars_raw.items()]

    answers_raw = data.get("answers") or {}
    if not isinstance(answers_raw, dict):
        raise ConfigError("`answers` must be a mapping when provided")

    config = TemplateConfig(
        template=metadata,
        variables=variables,
        files=_parse_files(data.get("files")),
        answers_file=str(answers_raw.get("file") or DEFAULT_ANSWERS_FILE),
    )
    config.validate()
    return config
