"""Template validation utilities."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from ..config.resolved import resolve_template
from ..errors import EvaluationError
from ..render.evaluator import Evaluator
from ..utils import is_binary_file


@dataclass
class CheckResult:
    template_name: str
    variable_count: int
    warnings: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def _check_template_files(
    content_dir: Path, suffix: str, evaluator: Evaluator, result: CheckResult
) -> None:
    for path in sorted(p for p in content_dir.rglob("*") if p.is_file()):
        rel = path.relative_to(content_dir).as_posix()
        if suffix and not path.name.endswith(suffix):
            continue
        if is_binary_file(path):
            continue
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            result.warnings.append(f"Could not read {rel}: {e}")
            continue
        try:
            evaluator.check_syntax(rel, text)
        except EvaluationError as e:
            result.errors.append(f"Template syntax error in {rel}: {e.message}")


def check_template(template_dir: Path) -> CheckResult:
    """Validate a template directory without rendering it.

    Config problems that make the template unloadable are raised; everything
    else is collected into the returned result.
    """
    resolved = resolve_template(template_dir)
    config = resolved.config
    result = CheckResult(
        template_name=config.template.name,
        variable_count=len(config.variables),
        warnings=list(resolved.warnings),
    )
    evaluator = Evaluator()

    if resolved.content_dir.is_dir():
        _check_template_files(resolved.content_dir, resolved.suffix, evaluator, result)
    else:
        result.errors.append(
            f"Template content directory not found: {resolved.content_dir}"
        )

    for rule in config.files.conditional:
        try:
            evaluator.check_expression(rule.pattern, rule.when)
        except EvaluationError as e:
            result.errors.append(
                f"Invalid conditional expression for pattern '{rule.pattern}': {e.message}"
            )

    for spec in config.variables:
        if spec.when is not None:
            try:
                evaluator.check_expression(spec.name, spec.when)
            except EvaluationError as e:
                result.errors.append(f"Invalid 'when' expression for variable '{spec.name}': {e.message}")
        if spec.computed is not None:
            try:
                evaluator.check_syntax(spec.name, spec.computed)
            except EvaluationError as e:
                result.errors.append(f"Invalid 'computed' expression for variable '{spec.name}': {e.message}")
        if spec.validation is not None:
            try:
                re.compile(spec.validation)
            except re.error as e:
                result.errors.append(f"Invalid validation pattern for variable '{spec.name}': {e}")

    return result
