"""Subprocess utilities for running git."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import List, Optional

from ..errors import SourceError

logger = logging.getLogger(__name__)


def run_git_command(
    cmd: List[str], cwd: Optional[Path] = None
) -> subprocess.CompletedProcess[str]:
    """Run a git command and return the result, raising SourceError on failure."""
    logger.debug("Running: %s", " ".join(cmd))
    try:
        return subprocess.run(
            cmd,
            cwd=str(cwd) if cwd else None,
            capture_output=True,
            text=True,
            check=True,
        )
    except FileNotFoundError as e:
        raise SourceError("git executable not found on PATH") from e
    except subprocess.CalledProcessError as e:
        detail = (e.stderr or e.stdout or "").strip()
        raise SourceError(
            f"Command failed with exit code {e.returncode}: {' '.join(cmd)}\n{detail}"
        ) from e
