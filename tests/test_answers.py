from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from stencil import __version__
from stencil.answers import SourceInfo, load_answers, write_answers
from stencil.config import parse_config
from stencil.errors import ConfigError, NoAnswerFileError

CONFIG = parse_config(
    {
        "template": {"name": "demo", "version": "1.2.0"},
        "variables": {
            "name": {},
            "api_token": {"secret": True},
            "port": {"type": "int"},
            "ratio": {"type": "float"},
            "debug": {"type": "bool"},
            "extras": {"type": "multiselect", "choices": ["a", "b"]},
        },
    }
)


def test_round_trip_omits_secrets(tmp_path: Path) -> None:
    variables = {
        "name": "My App",
        "api_token": "s3cr3t",
        "port": 8080,
        "ratio": 0.25,
        "debug": True,
        "extras": ["a", "b"],
    }
    path = write_answers(
        tmp_path,
        CONFIG,
        variables,
        SourceInfo(url="https://example.com/t.git", ref="v1", commit_sha="abc123"),
    )
    assert path == tmp_path / ".stencil-answers.yml"
    assert "s3cr3t" not in path.read_text()

    raw = yaml.safe_load(path.read_text())
    assert raw["_stencil"]["template"] == "demo"
    assert raw["_stencil"]["version"] == "1.2.0"
    assert raw["_stencil"]["stencil_version"] == __version__

    saved = load_answers(tmp_path)
    assert saved.template_source == "https://example.com/t.git"
    assert saved.template_ref == "v1"
    assert saved.commit_sha == "abc123"
    assert saved.answers == {
        "name": "My App",
        "port": 8080,
        "ratio": 0.25,
        "debug": True,
        "extras": ["a", "b"],
    }


def test_missing_answers_file(tmp_path: Path) -> None:
    with pytest.raises(NoAnswerFileError):
        load_answers(tmp_path)


def test_malformed_answers_file(tmp_path: Path) -> None:
    (tmp_path / ".stencil-answers.yml").write_text("- just\n- a list\n")
    with pytest.raises(ConfigError):
        load_answers(tmp_path)


def test_variables_must_be_a_mapping(tmp_path: Path) -> None:
    (tmp_path / ".stencil-answers.yml").write_text("_stencil: {}\nvariables: [1, 2]\n")
    with pytest.raises(ConfigError, match="variables"):
        load_answers(tmp_path)
