"""File system utilities."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, Set

from ..errors import StencilIOError

BINARY_SNIFF_BYTES = 8192

# VCS metadata and local environments, never part of a rendered tree.
SKIPPED_DIRS = frozenset({".git", ".hg", ".svn", ".venv", "node_modules", "__pycache__"})


def collect_files(directory: Path, ignored: Iterable[str] = ()) -> Set[str]:
    """Get the set of POSIX relative file paths under directory.

    A missing directory yields an empty set. Relative paths in ``ignored``
    are skipped, and so is anything under a directory in ``SKIPPED_DIRS``.
    """
    files: Set[str] = set()
    if not directory.exists():
        return files
    ignored_names = set(ignored)
    for root, dirs, filenames in os.walk(directory):
        dirs[:] = [d for d in dirs if d not in SKIPPED_DIRS]
        root_path = Path(root)
        for name in filenames:
            rel = (root_path / name).relative_to(directory).as_posix()
            if rel in ignored_names:
                continue
            files.add(rel)
    return files


def read_bytes(path: Path) -> bytes:
    try:
        return path.read_bytes()
    except OSError as e:
        raise StencilIOError(f"reading {path}", e) from e


def files_equal(path_a: Path, path_b: Path) -> bool:
    """Byte-compare two files."""
    return read_bytes(path_a) == read_bytes(path_b)


def is_binary_file(path: Path) -> bool:
    """Treat a file as binary if its first 8 KiB contain a NUL byte."""
    try:
        with path.open("rb") as f:
            head = f.read(BINARY_SNIFF_BYTES)
    except OSError:
        return False
    return b"\0" in head


def write_bytes(path: Path, content: bytes) -> None:
    """Write content to path, creating parent directories."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)
    except OSError as e:
        raise StencilIOError(f"writing {path}", e) from e


def write_text(path: Path, content: str) -> None:
    write_bytes(path, content.encode("utf-8"))
