"""Three-way merge of a generated project against old and new template snapshots."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterable, List, Sequence

from ..utils import read_bytes, write_bytes, write_text
from .comparator import TreeComparison, compare_trees
from .differ import REMOVAL_NOTICE, conflict_report

logger = logging.getLogger(__name__)

CONFLICT_SUFFIX = ".rej"
REMOVAL_SUFFIX = ".removing"


class MergeAction(str, Enum):
    UPDATE_FROM_TEMPLATE = "update"
    ADD_FROM_TEMPLATE = "add"
    MARK_FOR_REMOVAL = "remove"
    KEEP_USER = "keep"
    CONFLICT = "conflict"
    UNCHANGED = "unchanged"


@dataclass(frozen=True)
class FileMergeResult:
    rel_path: str
    action: MergeAction


def classify(trees: TreeComparison, rel_path: str) -> MergeAction:
    """Decide what to do with one path given where it exists and what changed."""
    in_project = rel_path in trees.project
    in_old = rel_path in trees.old
    in_new = rel_path in trees.new

    if in_old and in_new and in_project:
        user_changed = not trees.project_equals_old(rel_path)
        template_changed = not trees.old_equals_new(rel_path)
        if not user_changed and not template_changed:
            return MergeAction.UNCHANGED
        if not user_changed:
            return MergeAction.UPDATE_FROM_TEMPLATE
        if not template_changed:
            return MergeAction.KEEP_USER
        # Both sides changed; they may have converged on the same content.
        if trees.project_equals_new(rel_path):
            return MergeAction.UNCHANGED
        return MergeAction.CONFLICT

    if in_new and not in_old and not in_project:
        return MergeAction.ADD_FROM_TEMPLATE

    if in_old and in_project and not in_new:
        if trees.project_equals_old(rel_path):
            return MergeAction.MARK_FOR_REMOVAL
        return MergeAction.CONFLICT

    if in_project and not in_old and not in_new:
        return MergeAction.KEEP_USER

    if in_new and in_project and not in_old:
        if trees.project_equals_new(rel_path):
            return MergeAction.UNCHANGED
        return MergeAction.CONFLICT

    if in_old and in_new and not in_project:
        # The user deleted the file.
        if trees.old_equals_new(rel_path):
            return MergeAction.KEEP_USER
        return MergeAction.CONFLICT

    return MergeAction.UNCHANGED


def three_way_merge(
    project_dir: Path,
    old_dir: Path,
    new_dir: Path,
    ignored: Iterable[str] = (),
) -> List[FileMergeResult]:
    """Classify every file in the union of the three trees.

    Unchanged paths are left out of the result, which is sorted by path.
    """
    trees = compare_trees(project_dir, old_dir, new_dir, ignored)
    results: List[FileMergeResult] = []
    for rel_path in trees.all_paths():
        action = classify(trees, rel_path)
        logger.debug("%s: %s", rel_path, action.value)
        if action is not MergeAction.UNCHANGED:
            results.append(FileMergeResult(rel_path, action))
    return results


def sibling(path: Path, suffix: str) -> Path:
    return path.with_name(path.name + suffix)


def _read_if_exists(path: Path) -> bytes:
    return read_bytes(path) if path.is_file() else b""


def apply_merge(
    project_dir: Path,
    old_dir: Path,
    new_dir: Path,
    results: Sequence[FileMergeResult],
) -> None:
    """Carry out merge results on the project.

    Template updates and additions overwrite the project file. Removals and
    conflicts never touch the project file: they write a ``.removing`` or
    ``.rej`` file beside it instead. Writes are not transactional.
    """
    for result in results:
        project_path = project_dir / result.rel_path

        if result.action in (MergeAction.UPDATE_FROM_TEMPLATE, MergeAction.ADD_FROM_TEMPLATE):
            write_bytes(project_path, read_bytes(new_dir / result.rel_path))

        elif result.action is MergeAction.MARK_FOR_REMOVAL:
            write_text(sibling(project_path, REMOVAL_SUFFIX), REMOVAL_NOTICE)

        elif result.action is MergeAction.CONFLICT:
            old_path = old_dir / result.rel_path
            base = read_bytes(old_path) if old_path.is_file() else None
            report = conflict_report(
                result.rel_path,
                user=_read_if_exists(project_path),
                new=_read_if_exists(new_dir / result.rel_path),
                base=base,
            )
            write_text(sibling(project_path, CONFLICT_SUFFIX), report)
