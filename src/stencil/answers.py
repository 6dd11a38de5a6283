"""Read and write the answers file recorded in every generated project."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from . import __version__
from .config.schema import DEFAULT_ANSWERS_FILE, TemplateConfig
from .errors import ConfigError, NoAnswerFileError, StencilIOError
from .utils import write_text
from .variables.values import VariableValue, from_answer_value, to_answer_value

META_KEY = "_stencil"


@dataclass(frozen=True)
class SourceInfo:
    """Where the template of a generated project came from."""

    url: Optional[str] = None
    ref: Optional[str] = None
    commit_sha: Optional[str] = None


@dataclass(frozen=True)
class SavedAnswers:
    template_source: str
    template_ref: Optional[str] = None
    commit_sha: Optional[str] = None
    stencil_version: str = "0.0.0"
    answers: Dict[str, VariableValue] = field(default_factory=dict)


def write_answers(
    output_dir: Path,
    config: TemplateConfig,
    variables: Mapping[str, VariableValue],
    source_info: SourceInfo,
) -> Path:
    """Write the answers file into output_dir. Secret variables are omitted."""
    answers_path = output_dir / config.answers_file

    meta: Dict[str, Any] = {"template": config.template.name}
    if config.template.version:
        meta["version"] = config.template.version
    if source_info.url:
        meta["template_source"] = source_info.url
    if source_info.ref:
        meta["template_ref"] = source_info.ref
    if source_info.commit_sha:
        meta["commit_sha"] = source_info.commit_sha
    meta["stencil_version"] = __version__

    values: Dict[str, Any] = {}
    for name in sorted(variables):
        spec = config.variable(name)
        if spec is not None and spec.secret:
            continue
        values[name] = to_answer_value(variables[name])

    content = yaml.safe_dump(
        {META_KEY: meta, "variables": values},
        sort_keys=False,
        allow_unicode=True,
    )
    write_text(answers_path, content)
    return answers_path


def load_answers(
    project_dir: Path, answers_file: str = DEFAULT_ANSWERS_FILE
) -> SavedAnswers:
    """Read the answers file from a previously generated project."""
    answers_path = project_dir / answers_file
    if not answers_path.exists():
        raise NoAnswerFileError(project_dir)

    try:
        with answers_path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except OSError as e:
        raise StencilIOError(f"reading answers file {answers_path}", e) from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse answers file {answers_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Answers file {answers_path} must be a mapping")

    meta = data.get(META_KEY) or {}
    if not isinstance(meta, dict):
        raise ConfigError(f"`{META_KEY}` in {answers_path} must be a mapping")

    def get_str(key: str) -> Optional[str]:
        value = meta.get(key)
        return str(value) if value is not None else None

    raw_vars = data.get("variables") or {}
    if not isinstance(raw_vars, dict):
        raise ConfigError(f"`variables` in {answers_path} must be a mapping")

    return SavedAnswers(
        template_source=get_str("template_source") or get_str("template") or "",
        template_ref=get_str("template_ref"),
        commit_sha=get_str("commit_sha"),
        stencil_version=get_str("stencil_version") or "0.0.0",
        answers={str(k): from_answer_value(v) for k, v in raw_vars.items()},
    )
