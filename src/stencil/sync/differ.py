"""Diff rendering for conflict and removal artifacts."""

from __future__ import annotations

import difflib
from typing import Optional

REMOVAL_NOTICE = (
    "This file was removed in the updated template.\n"
    "Review and delete it manually if no longer needed.\n"
)


def decode_for_display(content: bytes) -> str:
    if b"\0" in content[:8192]:
        return f"(binary content, {len(content)} bytes)\n"
    return content.decode("utf-8", errors="replace")


def unified_diff(old: str, new: str, rel_path: str) -> str:
    """Line diff of old -> new with three lines of context."""
    lines = difflib.unified_diff(
        old.splitlines(keepends=True),
        new.splitlines(keepends=True),
        fromfile=f"a/{rel_path}",
        tofile=f"b/{rel_path}",
        n=3,
    )
    out = []
    for line in lines:
        out.append(line if line.endswith("\n") else line + "\n\\ No newline at end of file\n")
    return "".join(out)


def conflict_report(
    rel_path: str, user: bytes, new: bytes, base: Optional[bytes] = None
) -> str:
    """Text of the ``.rej`` file written next to a conflicting project file.

    When the old snapshot had the file, the report shows all three versions
    and both diffs; otherwise only the user's and the template's versions.
    """
    user_text = decode_for_display(user)
    new_text = decode_for_display(new)
    if base is None:
        return (
            f"# Conflict in {rel_path}\n"
            "# Both you and the template created/modified this file differently.\n\n"
            f"## Your version:\n{user_text}\n\n"
            f"## New template version:\n{new_text}\n\n"
            f"## Diff (yours -> template):\n{unified_diff(user_text, new_text, rel_path)}\n"
        )
    base_text = decode_for_display(base)
    return (
        f"# Conflict in {rel_path}\n"
        "# Three-way diff: base (old template) vs yours vs new template\n\n"
        f"## Base version (old template):\n{base_text}\n\n"
        f"## Your version:\n{user_text}\n\n"
        f"## New template version:\n{new_text}\n\n"
        f"## Diff: base -> new template:\n{unified_diff(base_text, new_text, rel_path)}\n\n"
        f"## Diff: your version -> new template:\n{unified_diff(user_text, new_text, rel_path)}\n"
    )
