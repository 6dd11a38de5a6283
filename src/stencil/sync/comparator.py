"""Directory and file comparison across project, old and new snapshots."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Set

from ..utils.filesystem import collect_files, files_equal


@dataclass(frozen=True)
class TreeComparison:
    """File listings of the three trees taking part in an update."""

    project_dir: Path
    old_dir: Path
    new_dir: Path
    project: Set[str]
    old: Set[str]
    new: Set[str]

    def all_paths(self) -> List[str]:
        return sorted(self.project | self.old | self.new)

    def project_equals_old(self, rel_path: str) -> bool:
        return files_equal(self.project_dir / rel_path, self.old_dir / rel_path)

    def project_equals_new(self, rel_path: str) -> bool:
        return files_equal(self.project_dir / rel_path, self.new_dir / rel_path)

    def old_equals_new(self, rel_path: str) -> bool:
        return files_equal(self.old_dir / rel_path, self.new_dir / rel_path)


def compare_trees(
    project_dir: Path,
    old_dir: Path,
    new_dir: Path,
    ignored: Iterable[str] = (),
) -> TreeComparison:
    """List the files of all three trees, skipping ``ignored`` relative paths."""
    ignored = tuple(ignored)
    return TreeComparison(
        project_dir=project_dir,
        old_dir=old_dir,
        new_dir=new_dir,
        project=collect_files(project_dir, ignored),
        old=collect_files(old_dir, ignored),
        new=collect_files(new_dir, ignored),
    )
