"""Synchronization logic for stencil."""

from .comparator import TreeComparison, compare_trees
from .differ import conflict_report, unified_diff
from .merge import FileMergeResult, MergeAction, apply_merge, classify, three_way_merge
from .update import UpdateReport, render_snapshot, update_project

__all__ = [
    "TreeComparison",
    "compare_trees",
    "conflict_report",
    "unified_diff",
    "FileMergeResult",
    "MergeAction",
    "apply_merge",
    "classify",
    "three_way_merge",
    "UpdateReport",
    "render_snapshot",
    "update_project",
]
