from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path

import pytest

import stencil.sync.update as update_mod
from stencil.answers import SourceInfo, load_answers, write_answers
from stencil.config import load_config
from stencil.errors import NoAnswerFileError
from stencil.sync import update_project
from stencil.sync.update import render_snapshot
from stencil.templates import FetchedTemplate, TemplateSource, generate_project

CONFIG = """
template:
  name: svc
variables:
  name:
    default: demo
  slug:
    computed: "{{ name | slugify }}"
"""

V1 = {
    "README.md.jinja": "# {{ name }}\n",
    "setup.cfg.jinja": "[metadata]\nname = {{ slug }}\n",
    "ci.yml": "steps: [test]\n",
    "old_script.sh": "echo old\n",
}

V2 = {
    "README.md.jinja": "# {{ name }}\n\nNow with docs.\n",
    "setup.cfg.jinja": "[metadata]\nname = {{ slug }}\nversion = 2\n",
    "ci.yml": "steps: [lint, test]\n",
    "docs/index.md.jinja": "Docs for {{ name }}\n",
}

REMOTE = "https://example.com/acme/svc.git"


@pytest.fixture
def remote(make_template, monkeypatch):
    """Two versions of a template served through a fake git fetch."""
    versions = {
        "sha-v1": (make_template(CONFIG, V1, name="v1"), "sha-v1"),
        "v2": (make_template(CONFIG, V2, name="v2"), "sha-v2"),
    }

    @contextmanager
    def fake_fetch(source, ref=None):
        path, sha = versions[ref]
        yield FetchedTemplate(path=path, commit_sha=sha)

    monkeypatch.setattr(update_mod, "fetch_template", fake_fetch)
    monkeypatch.setattr(
        update_mod,
        "resolve_source",
        lambda arg, config=None: TemplateSource(location=arg, is_local=False),
    )
    return versions


def generate_v1(project: Path, v1: Path) -> None:
    answers = {"name": "My Service"}
    _, variables = render_snapshot(v1, answers, project)
    write_answers(
        project,
        load_config(v1),
        variables,
        SourceInfo(url=REMOTE, ref="v1", commit_sha="sha-v1"),
    )


def test_update_end_to_end(remote, tmp_path: Path) -> None:
    project = tmp_path / "project"
    generate_v1(project, remote["sha-v1"][0])
    (project / "ci.yml").write_text("steps: [custom]\n")
    (project / "notes.txt").write_text("mine\n")

    report = update_project(project, ref="v2")

    assert report.files_updated == ["README.md", "setup.cfg"]
    assert report.files_added == ["docs/index.md"]
    assert report.files_removed == ["old_script.sh"]
    assert report.conflicts == ["ci.yml"]
    assert report.files_kept == ["notes.txt"]
    assert report.has_changes
    assert str(report) == "2 updated, 1 added, 1 marked for removal, 1 conflicts"

    assert (project / "setup.cfg").read_text() == "[metadata]\nname = my-service\nversion = 2\n"
    assert (project / "docs" / "index.md").read_text() == "Docs for My Service\n"
    assert (project / "old_script.sh").exists()
    assert (project / "old_script.sh.removing").exists()
    assert (project / "ci.yml").read_text() == "steps: [custom]\n"
    assert "steps: [lint, test]" in (project / "ci.yml.rej").read_text()
    assert (project / "notes.txt").read_text() == "mine\n"

    saved = load_answers(project)
    assert saved.template_ref == "v2"
    assert saved.commit_sha == "sha-v2"
    assert saved.template_source == REMOTE
    assert saved.answers["name"] == "My Service"


def test_dry_run_changes_nothing(remote, tmp_path: Path) -> None:
    project = tmp_path / "project"
    generate_v1(project, remote["sha-v1"][0])
    before = {p: p.read_bytes() for p in project.rglob("*") if p.is_file()}

    report = update_project(project, ref="v2", dry_run=True)

    assert report.dry_run
    assert report.files_updated == ["README.md", "ci.yml", "setup.cfg"]
    assert report.files_added == ["docs/index.md"]
    after = {p: p.read_bytes() for p in project.rglob("*") if p.is_file()}
    assert after == before


def test_local_template_keeps_user_edits(make_template, tmp_path: Path) -> None:
    template = make_template(CONFIG, V1)
    project = tmp_path / "project"
    generate_project(str(template), project, use_defaults=True)
    (project / "README.md").write_text("# Rewritten\n")
    (project / "setup.cfg").unlink()

    report = update_project(project)

    assert not report.has_changes
    assert report.conflicts == []
    assert report.files_updated == []
    assert sorted(report.files_kept) == ["README.md", "setup.cfg"]
    assert (project / "README.md").read_text() == "# Rewritten\n"
    assert not (project / "setup.cfg").exists()


def test_update_without_answers_file(tmp_path: Path) -> None:
    with pytest.raises(NoAnswerFileError):
        update_project(tmp_path)


def test_relative_source_override_is_saved_as_absolute_path(
    make_template, tmp_path: Path, monkeypatch
) -> None:
    template = make_template(CONFIG, V1)
    project = tmp_path / "project"
    generate_project(str(template), project, use_defaults=True)

    monkeypatch.chdir(tmp_path)
    update_project(project, source=template.name)
    assert load_answers(project).template_source == str(template.resolve())

    monkeypatch.chdir(project)
    report = update_project(project)
    assert not report.has_changes
