"""Utility modules for stencil."""

from .console import console, err_console
from .filesystem import (
    collect_files,
    files_equal,
    is_binary_file,
    read_bytes,
    write_bytes,
    write_text,
)
from .subprocess_utils import run_git_command

__all__ = [
    "console",
    "err_console",
    "collect_files",
    "files_equal",
    "is_binary_file",
    "read_bytes",
    "write_bytes",
    "write_text",
    "run_git_command",
]
