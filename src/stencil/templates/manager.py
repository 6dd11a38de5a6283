"""High-level template management operations."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from ..answers import SourceInfo, write_answers
from ..config.resolved import ResolvedTemplate, resolve_template
from ..config.user import SourceConfig
from ..errors import OutputExistsError
from ..render import Evaluator, GeneratedProject, GenerationPlan, execute_plan, plan_render
from ..render.context import build_context
from ..variables import Environment, Prompter, collect_variables
from .fetch import fetch_template
from .source import resolve_source

logger = logging.getLogger(__name__)


@dataclass
class GenerationResult:
    template: ResolvedTemplate
    variables: Environment
    plan: GenerationPlan
    # None for a dry run.
    project: Optional[GeneratedProject] = None
    answers_path: Optional[Path] = None


def _has_contents(path: Path) -> bool:
    return path.is_dir() and any(path.iterdir())


def generate_project(
    template: str,
    output_dir: Path,
    *,
    data: Optional[Mapping[str, str]] = None,
    use_defaults: bool = False,
    overwrite: bool = False,
    dry_run: bool = False,
    ref: Optional[str] = None,
    source_config: Optional[SourceConfig] = None,
    prompter: Optional[Prompter] = None,
) -> GenerationResult:
    """Generate a project from a template into output_dir.

    1) Resolve and fetch the template source
    2) Collect variables (overrides, defaults, prompts, computed values)
    3) Plan the output tree, then write it unless ``dry_run``
    4) Record the answers file for later updates
    """
    source = resolve_source(template, source_config)
    if not dry_run and _has_contents(output_dir) and not overwrite:
        raise OutputExistsError(output_dir)

    with fetch_template(source, ref) as fetched:
        resolved = resolve_template(fetched.path)
        for warning in resolved.warnings:
            logger.warning(warning)

        evaluator = Evaluator()
        variables = collect_variables(
            resolved.config.variables,
            overrides=data,
            use_defaults=use_defaults,
            prompter=prompter,
            evaluator=evaluator,
        )
        context = build_context(variables, resolved.context_namespace)
        plan = plan_render(resolved, variables, context, evaluator)

        result = GenerationResult(template=resolved, variables=variables, plan=plan)
        if dry_run:
            return result

        result.project = execute_plan(plan, output_dir)
        result.answers_path = write_answers(
            output_dir,
            resolved.config,
            variables,
            SourceInfo(url=source.location, ref=ref, commit_sha=fetched.commit_sha),
        )
        return result
