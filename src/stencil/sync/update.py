"""Re-apply an updated template to a previously generated project."""

from __future__ import annotations

import logging
import tempfile
from contextlib import ExitStack
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Mapping, Optional, Sequence, Tuple

from ..answers import SavedAnswers, SourceInfo, load_answers, write_answers
from ..config.resolved import ResolvedTemplate, resolve_template
from ..config.schema import DEFAULT_ANSWERS_FILE
from ..config.user import SourceConfig
from ..errors import SourceError
from ..render import Evaluator, plan_render, execute_plan
from ..render.context import build_context
from ..variables import Environment, VariableValue, replay_variables
from ..templates.fetch import fetch_template
from ..templates.source import resolve_source
from .merge import FileMergeResult, MergeAction, apply_merge, three_way_merge

logger = logging.getLogger(__name__)


@dataclass
class UpdateReport:
    files_updated: List[str] = field(default_factory=list)
    files_added: List[str] = field(default_factory=list)
    files_removed: List[str] = field(default_factory=list)
    conflicts: List[str] = field(default_factory=list)
    files_kept: List[str] = field(default_factory=list)
    results: List[FileMergeResult] = field(default_factory=list)
    dry_run: bool = False

    @classmethod
    def from_results(
        cls, results: Sequence[FileMergeResult], dry_run: bool = False
    ) -> "UpdateReport":
        report = cls(results=list(results), dry_run=dry_run)
        buckets = {
            MergeAction.UPDATE_FROM_TEMPLATE: report.files_updated,
            MergeAction.ADD_FROM_TEMPLATE: report.files_added,
            MergeAction.MARK_FOR_REMOVAL: report.files_removed,
            MergeAction.CONFLICT: report.conflicts,
            MergeAction.KEEP_USER: report.files_kept,
        }
        for result in results:
            bucket = buckets.get(result.action)
            if bucket is not None:
                bucket.append(result.rel_path)
        return report

    @property
    def has_changes(self) -> bool:
        return bool(
            self.files_updated or self.files_added or self.files_removed or self.conflicts
        )

    def summary(self) -> str:
        return (
            f"{len(self.files_updated)} updated, {len(self.files_added)} added, "
            f"{len(self.files_removed)} marked for removal, {len(self.conflicts)} conflicts"
        )

    def __str__(self) -> str:
        return self.summary()


def render_snapshot(
    template_dir: Path, answers: Mapping[str, VariableValue], snapshot_dir: Path
) -> Tuple[ResolvedTemplate, Environment]:
    """Render template_dir into snapshot_dir using saved answers, no prompting."""
    resolved = resolve_template(template_dir)
    evaluator = Evaluator()
    variables = replay_variables(resolved.config.variables, answers, evaluator)
    context = build_context(variables, resolved.context_namespace)
    execute_plan(plan_render(resolved, variables, context, evaluator), snapshot_dir)
    return resolved, variables


def _old_ref(saved: SavedAnswers) -> Optional[str]:
    # The recorded commit pins the exact revision even if the ref has moved.
    return saved.commit_sha or saved.template_ref


def update_project(
    project_dir: Path,
    *,
    source: Optional[str] = None,
    ref: Optional[str] = None,
    dry_run: bool = False,
    source_config: Optional[SourceConfig] = None,
) -> UpdateReport:
    """Three-way update of project_dir against a newer template.

    1) Load the saved answers from the project
    2) Render an old snapshot (template at the saved revision + saved answers)
    3) Render a new snapshot (template at the new ref + saved answers)
    4) Merge old vs new vs project, then apply and persist new answers

    With ``dry_run`` the classification is returned without touching the
    project. Snapshots live in temporary directories removed on exit.
    """
    saved = load_answers(project_dir)
    template_arg = source or saved.template_source
    if not template_arg:
        raise SourceError(
            f"The answers file in {project_dir} does not record a template source; pass one explicitly"
        )
    new_ref = ref or saved.template_ref
    template_source = resolve_source(template_arg, source_config)

    with ExitStack() as stack:
        new_fetched = stack.enter_context(fetch_template(template_source, new_ref))
        if template_source.is_local:
            old_fetched = new_fetched
        else:
            old_fetched = stack.enter_context(
                fetch_template(template_source, _old_ref(saved))
            )

        old_snapshot = Path(stack.enter_context(tempfile.TemporaryDirectory(prefix="stencil-old-")))
        new_snapshot = Path(stack.enter_context(tempfile.TemporaryDirectory(prefix="stencil-new-")))

        old_resolved, _ = render_snapshot(old_fetched.path, saved.answers, old_snapshot)
        new_resolved, new_variables = render_snapshot(
            new_fetched.path, saved.answers, new_snapshot
        )

        ignored = {
            DEFAULT_ANSWERS_FILE,
            old_resolved.config.answers_file,
            new_resolved.config.answers_file,
        }
        results = three_way_merge(project_dir, old_snapshot, new_snapshot, ignored)
        report = UpdateReport.from_results(results, dry_run=dry_run)
        if dry_run:
            return report

        apply_merge(project_dir, old_snapshot, new_snapshot, results)
        write_answers(
            project_dir,
            new_resolved.config,
            new_variables,
            SourceInfo(
                url=template_source.location,
                ref=new_ref,
                commit_sha=new_fetched.commit_sha,
            ),
        )
        logger.debug("Update of %s: %s", project_dir, report.summary())
        return report
