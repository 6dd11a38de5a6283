from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from stencil.errors import OutputExistsError
from stencil.templates import generate_project

CONFIG = """
template:
  name: python-app
  version: "1.0"
variables:
  project_name:
    prompt: Project name
    default: My Cool Project
  project_slug:
    computed: "{{ project_name | slugify }}"
  use_docker:
    type: bool
    default: false
  api_token:
    secret: true
    default: changeme
files:
  conditional:
    - pattern: Dockerfile
      when: use_docker
"""

FILES = {
    "{{ project_slug }}/__init__.py.jinja": '"""{{ project_name }}."""\n',
    "Dockerfile.jinja": "FROM python:3\n",
    "README.md.jinja": "# {{ project_name }}\n",
}


def test_slug_end_to_end(make_template, tmp_path: Path) -> None:
    template = make_template(CONFIG, FILES)
    out = tmp_path / "out"
    result = generate_project(str(template), out, use_defaults=True)

    assert result.variables["project_slug"] == "my-cool-project"
    assert (out / "my-cool-project" / "__init__.py").read_text() == '"""My Cool Project."""\n'
    assert (out / "README.md").read_text() == "# My Cool Project\n"
    assert not (out / "Dockerfile").exists()
    assert result.answers_path == out / ".stencil-answers.yml"

    saved = yaml.safe_load(result.answers_path.read_text())
    assert saved["_stencil"]["template_source"] == str(template.resolve())
    assert saved["variables"]["project_slug"] == "my-cool-project"
    assert "api_token" not in saved["variables"]


def test_overrides_and_conditional_files(make_template, tmp_path: Path) -> None:
    template = make_template(CONFIG, FILES)
    out = tmp_path / "out"
    generate_project(
        str(template),
        out,
        data={"project_name": "Other", "use_docker": "yes"},
        use_defaults=True,
    )
    assert (out / "other" / "__init__.py").exists()
    assert (out / "Dockerfile").read_text() == "FROM python:3\n"


def test_refuses_non_empty_output(make_template, tmp_path: Path) -> None:
    template = make_template(CONFIG, FILES)
    out = tmp_path / "out"
    out.mkdir()
    (out / "existing.txt").write_text("keep")

    with pytest.raises(OutputExistsError):
        generate_project(str(template), out, use_defaults=True)

    generate_project(str(template), out, use_defaults=True, overwrite=True)
    assert (out / "existing.txt").read_text() == "keep"
    assert (out / "README.md").exists()


def test_dry_run_writes_nothing(make_template, tmp_path: Path) -> None:
    template = make_template(CONFIG, FILES)
    out = tmp_path / "out"
    result = generate_project(str(template), out, use_defaults=True, dry_run=True)

    assert [p.path for p in result.plan] == ["README.md", "my-cool-project/__init__.py"]
    assert result.project is None
    assert not out.exists()
