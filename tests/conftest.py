from __future__ import annotations

from pathlib import Path
from typing import Callable, Dict, Union

import pytest

FileContent = Union[str, bytes]


def write_tree(root: Path, files: Dict[str, FileContent]) -> Path:
    for rel, content in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content, encoding="utf-8")
    return root


def write_template(root: Path, config: str, files: Dict[str, FileContent]) -> Path:
    root.mkdir(parents=True, exist_ok=True)
    (root / "stencil.yml").write_text(config.lstrip(), encoding="utf-8")
    (root / "template").mkdir(exist_ok=True)
    write_tree(root / "template", files)
    return root


@pytest.fixture
def make_template(tmp_path: Path) -> Callable[..., Path]:
    def _make(config: str, files: Dict[str, FileContent], name: str = "tpl") -> Path:
        return write_template(tmp_path / name, config, files)

    return _make


@pytest.fixture(autouse=True)
def isolated_user_config(monkeypatch, tmp_path: Path) -> None:
    # Never pick up abbreviations from the real user's config dir
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
