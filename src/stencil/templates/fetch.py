"""Fetch a template source into a directory for the duration of a run."""

from __future__ import annotations

import logging
import tempfile
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional

from ..utils import run_git_command
from .source import TemplateSource

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FetchedTemplate:
    path: Path
    commit_sha: Optional[str] = None


@contextmanager
def fetch_template(
    source: TemplateSource, ref: Optional[str] = None
) -> Iterator[FetchedTemplate]:
    """Yield a checkout of source at ref.

    Local templates are used in place and have no versions, so ``ref`` is
    ignored for them. Git templates are cloned into a temporary directory
    that is removed when the context exits.
    """
    if source.is_local:
        if ref:
            logger.debug("Ignoring ref %s for local template %s", ref, source.location)
        yield FetchedTemplate(path=source.path)
        return

    with tempfile.TemporaryDirectory(prefix="stencil-clone-") as tmp:
        dest = Path(tmp) / "template"
        run_git_command(["git", "clone", "--quiet", source.location, str(dest)])
        if ref:
            run_git_command(["git", "checkout", "--quiet", ref], cwd=dest)
        sha = run_git_command(["git", "rev-parse", "HEAD"], cwd=dest).stdout.strip()
        logger.debug("Fetched %s at %s (%s)", source.location, ref or "HEAD", sha)
        yield FetchedTemplate(path=dest, commit_sha=sha or None)
