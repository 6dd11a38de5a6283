"""Walk a template's content dir and materialize the output tree.

Rules:
- Walk template files in sorted relative-path order so output is deterministic.
- Every path component is rendered on its own; the template suffix is then
  stripped from the file name.
- Static excludes match the raw relative path, conditional excludes the
  rendered one.
- Binary files, copy-without-render matches and (unless render_all) files
  without the template suffix are copied byte-for-byte.
- Everything else is rendered through the evaluator.

Planning is separated from writing so callers can preview a generation.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import Any, List, Mapping, Optional

from ..config.resolved import ResolvedTemplate
from ..errors import EvaluationError, StencilIOError, TemplateDirectoryMissingError
from ..utils import read_bytes, write_bytes
from ..variables.values import VariableValue
from .context import build_context
from .evaluator import Evaluator
from .matcher import FileFilter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlannedFile:
    path: str  # output-relative, POSIX separators
    content: bytes
    copied: bool


GenerationPlan = List[PlannedFile]


@dataclass
class GeneratedProject:
    output_dir: Path
    files_created: List[str] = field(default_factory=list)
    files_copied: List[str] = field(default_factory=list)


def _iter_template_files(content_dir: Path) -> List[Path]:
    files = [p for p in content_dir.rglob("*") if p.is_file()]
    files.sort(key=lambda p: p.relative_to(content_dir).as_posix())
    return files


def render_relative_path(
    raw_rel: str, context: Mapping[str, Any], suffix: str, evaluator: Evaluator
) -> str:
    """Render each component of raw_rel and strip the suffix from the file name.

    Directory components that render empty are dropped; an empty file name
    yields an empty string, meaning the file is skipped.
    """
    parts = PurePosixPath(raw_rel).parts
    rendered: List[str] = []
    for index, part in enumerate(parts):
        value = evaluator.evaluate(f"{raw_rel} (path)", part, context)
        if index == len(parts) - 1:
            if suffix and value.endswith(suffix):
                value = value[: -len(suffix)]
            if not value:
                return ""
        if value:
            rendered.append(value)
    return "/".join(rendered)


def plan_render(
    resolved: ResolvedTemplate,
    variables: Mapping[str, VariableValue],
    context: Optional[Mapping[str, Any]] = None,
    evaluator: Optional[Evaluator] = None,
) -> GenerationPlan:
    """Compute every output file in memory without touching the destination."""
    content_dir = resolved.content_dir
    if not content_dir.is_dir():
        raise TemplateDirectoryMissingError(content_dir)

    evaluator = evaluator or Evaluator()
    if context is None:
        context = build_context(variables, resolved.context_namespace)
    file_filter = FileFilter.build(
        resolved.config.files,
        context,
        evaluator,
        suffix=resolved.suffix,
        render_all=resolved.render_all,
    )

    plan: GenerationPlan = []
    for src_path in _iter_template_files(content_dir):
        raw_rel = src_path.relative_to(content_dir).as_posix()
        if file_filter.exclude.is_match(raw_rel):
            logger.debug("Excluded %s", raw_rel)
            continue

        rendered_rel = render_relative_path(raw_rel, context, resolved.suffix, evaluator)
        if not rendered_rel:
            logger.debug("Skipped %s, its name rendered empty", raw_rel)
            continue
        if file_filter.is_excluded(raw_rel, rendered_rel):
            logger.debug("Excluded %s by condition", rendered_rel)
            continue

        if file_filter.should_copy(src_path, rendered_rel):
            plan.append(PlannedFile(rendered_rel, read_bytes(src_path), copied=True))
            continue

        raw = read_bytes(src_path)
        try:
            text = raw.decode("utf-8")
        except UnicodeDecodeError:
            logger.debug("%s is not UTF-8, copying verbatim", raw_rel)
            plan.append(PlannedFile(rendered_rel, raw, copied=True))
            continue

        try:
            output = evaluator.evaluate(raw_rel, text, context)
        except EvaluationError as e:
            if not resolved.render_all:
                raise
            # Foreign templates may use syntax we cannot evaluate.
            logger.warning("Failed to render %s, copying verbatim: %s", raw_rel, e.message)
            plan.append(PlannedFile(rendered_rel, raw, copied=True))
            continue
        plan.append(PlannedFile(rendered_rel, output.encode("utf-8"), copied=False))

    return plan


def execute_plan(plan: GenerationPlan, output_dir: Path) -> GeneratedProject:
    """Write every planned file under output_dir. Safe to run repeatedly."""
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise StencilIOError(f"creating output directory {output_dir}", e) from e

    result = GeneratedProject(output_dir=output_dir)
    for planned in plan:
        write_bytes(output_dir / planned.path, planned.content)
        if planned.copied:
            result.files_copied.append(planned.path)
        else:
            result.files_created.append(planned.path)
    return result


def walk_and_render(
    resolved: ResolvedTemplate,
    output_dir: Path,
    variables: Mapping[str, VariableValue],
    context: Optional[Mapping[str, Any]] = None,
) -> GeneratedProject:
    return execute_plan(plan_render(resolved, variables, context), output_dir)
