from __future__ import annotations

from pathlib import Path

import pytest

from stencil.config import SourceConfig, load_user_config
from stencil.errors import ConfigNotFoundError, SourceError
from stencil.templates import expand_abbreviation, resolve_source


@pytest.fixture
def config(tmp_path: Path) -> SourceConfig:
    return load_user_config(tmp_path / "absent.yml")


def test_local_directory(tmp_path: Path, config: SourceConfig) -> None:
    source = resolve_source(str(tmp_path), config)
    assert source.is_local
    assert source.path == tmp_path.resolve()


def test_github_abbreviation(monkeypatch, tmp_path: Path, config: SourceConfig) -> None:
    monkeypatch.chdir(tmp_path)
    source = resolve_source("gh:acme/python-template", config)
    assert not source.is_local
    assert source.location == "https://github.com/acme/python-template.git"


def test_unknown_abbreviation(monkeypatch, tmp_path: Path, config: SourceConfig) -> None:
    monkeypatch.chdir(tmp_path)
    with pytest.raises(SourceError, match="zz:"):
        resolve_source("zz:acme/repo", config)


def test_custom_abbreviation_table() -> None:
    table = SourceConfig(abbreviations={"corp": "https://git.corp.example/{}.git"})
    assert expand_abbreviation("corp:team/tpl", table) == "https://git.corp.example/team/tpl.git"
    assert expand_abbreviation("https://example.com/x.git", table) is None


def test_git_urls_pass_through(monkeypatch, tmp_path: Path, config: SourceConfig) -> None:
    monkeypatch.chdir(tmp_path)
    for url in (
        "https://example.com/t.git",
        "ssh://git@example.com/t.git",
        "git@github.com:acme/t.git",
    ):
        assert resolve_source(url, config).location == url


def test_http_is_allowed_with_warning(monkeypatch, tmp_path: Path, caplog) -> None:
    monkeypatch.chdir(tmp_path)
    with caplog.at_level("WARNING"):
        source = resolve_source("http://example.com/t.git")
    assert source.location == "http://example.com/t.git"
    assert "insecure" in caplog.text


def test_file_urls_are_rejected(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.chdir(tmp_path)
    with pytest.raises(SourceError, match="file://"):
        resolve_source("file:///etc")


def test_missing_local_path(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.chdir(tmp_path)
    with pytest.raises(ConfigNotFoundError):
        resolve_source("no-such-template")
