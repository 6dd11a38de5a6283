"""Exclude and copy-without-render matching for template files."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from fnmatch import fnmatchcase
from pathlib import Path, PurePosixPath
from typing import Any, Iterable, List, Mapping, Tuple

from ..config.schema import FilesConfig
from ..utils import is_binary_file
from .evaluator import Evaluator

logger = logging.getLogger(__name__)


def _zero_dir_variants(pattern: str) -> List[str]:
    """Every form of pattern with each `**/` either kept or dropped."""
    head, sep, tail = pattern.partition("**/")
    if not sep:
        return [pattern]
    rest = _zero_dir_variants(tail)
    return [head + sep + r for r in rest] + [head + r for r in rest]


def _glob_match(pattern: str, rel_path: str) -> bool:
    # `*` crosses `/`; any `**/` may also match zero directories.
    return any(fnmatchcase(rel_path, p) for p in _zero_dir_variants(pattern))


@dataclass(frozen=True)
class GlobSet:
    patterns: Tuple[str, ...] = ()

    @classmethod
    def of(cls, patterns: Iterable[str]) -> "GlobSet":
        return cls(tuple(patterns))

    def is_match(self, rel_path: str) -> bool:
        """True if rel_path, or any directory containing it, matches a pattern."""
        if not self.patterns:
            return False
        candidates = [rel_path]
        candidates.extend(str(p) for p in PurePosixPath(rel_path).parents if str(p) != ".")
        return any(
            _glob_match(pattern, candidate)
            for candidate in candidates
            for pattern in self.patterns
        )

    def __bool__(self) -> bool:
        return bool(self.patterns)


@dataclass(frozen=True)
class FileFilter:
    """Decides, per template entry, whether to skip it and whether to render it."""

    exclude: GlobSet
    copy_without_render: GlobSet
    conditional_exclude: GlobSet
    suffix: str = ""
    render_all: bool = False

    @classmethod
    def build(
        cls,
        files: FilesConfig,
        context: Mapping[str, Any],
        evaluator: Evaluator,
        *,
        suffix: str = "",
        render_all: bool = False,
    ) -> "FileFilter":
        """Evaluate each conditional rule once and fold in the false ones."""
        excluded_by_condition = []
        for rule in files.conditional:
            keep = evaluator.predicate(f"files.conditional[{rule.pattern}]", rule.when, context)
            if not keep:
                logger.debug("Condition '%s' is false, excluding '%s'", rule.when, rule.pattern)
                excluded_by_condition.append(rule.pattern)
        return cls(
            exclude=GlobSet.of(files.exclude),
            copy_without_render=GlobSet.of(files.copy_without_render),
            conditional_exclude=GlobSet.of(excluded_by_condition),
            suffix=suffix,
            render_all=render_all,
        )

    def is_excluded(self, raw_rel: str, rendered_rel: str) -> bool:
        """Static patterns see the raw path, conditional ones the rendered path."""
        return self.exclude.is_match(raw_rel) or self.conditional_exclude.is_match(
            rendered_rel
        )

    def lacks_suffix(self, source_name: str) -> bool:
        return (
            bool(self.suffix)
            and not self.render_all
            and not source_name.endswith(self.suffix)
        )

    def should_copy(self, src_path: Path, rendered_rel: str) -> bool:
        return (
            self.copy_without_render.is_match(rendered_rel)
            or is_binary_file(src_path)
            or self.lacks_suffix(src_path.name)
        )
