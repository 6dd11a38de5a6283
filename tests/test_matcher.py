from __future__ import annotations

from pathlib import Path

from stencil.config.schema import ConditionalFile, FilesConfig
from stencil.render import Evaluator, FileFilter, GlobSet


def test_star_crosses_directories() -> None:
    globs = GlobSet.of(["*.pyc"])
    assert globs.is_match("pkg/sub/mod.pyc")
    assert not globs.is_match("pkg/mod.py")


def test_leading_double_star_matches_at_root() -> None:
    globs = GlobSet.of(["**/node_modules"])
    assert globs.is_match("node_modules/left-pad/index.js")
    assert globs.is_match("ui/node_modules/left-pad/index.js")


def test_directory_pattern_matches_contents() -> None:
    assert GlobSet.of(["build"]).is_match("build/out/app.bin")
    assert not GlobSet.of(["build"]).is_match("src/builder.py")


def test_empty_globset_matches_nothing() -> None:
    assert not GlobSet.of([])
    assert not GlobSet.of([]).is_match("anything")


def test_static_exclude_sees_raw_path_conditional_sees_rendered_path() -> None:
    files = FilesConfig(
        exclude=["{{ project }}/secret.txt"],
        conditional=[ConditionalFile(pattern="demo/docker/*", when="use_docker")],
    )
    file_filter = FileFilter.build(files, {"project": "demo", "use_docker": False}, Evaluator())

    assert file_filter.is_excluded("{{ project }}/secret.txt", "demo/secret.txt")
    # The static pattern is not applied to the rendered form.
    assert not file_filter.is_excluded("other/secret.txt", "demo/secret.txt")
    assert file_filter.is_excluded("{{ project }}/docker/Dockerfile", "demo/docker/Dockerfile")
    # The conditional pattern is not applied to the raw form.
    assert not file_filter.is_excluded("demo/docker/Dockerfile", "x/docker/Dockerfile")


def test_true_condition_keeps_files() -> None:
    files = FilesConfig(conditional=[ConditionalFile(pattern="docker/*", when="use_docker")])
    file_filter = FileFilter.build(files, {"use_docker": True}, Evaluator())
    assert not file_filter.conditional_exclude
    assert not file_filter.is_excluded("docker/Dockerfile", "docker/Dockerfile")


def test_should_copy(tmp_path: Path) -> None:
    text = tmp_path / "main.py.jinja"
    text.write_text("print('{{ name }}')\n")
    plain = tmp_path / "LICENSE"
    plain.write_text("MIT\n")
    binary = tmp_path / "logo.png.jinja"
    binary.write_bytes(b"\x89PNG\r\n\x1a\n\x00\x00")

    files = FilesConfig(copy_without_render=["vendor/*"])
    file_filter = FileFilter.build(files, {}, Evaluator(), suffix=".jinja")

    assert not file_filter.should_copy(text, "main.py")
    assert file_filter.should_copy(text, "vendor/main.py")
    assert file_filter.should_copy(plain, "LICENSE")
    assert file_filter.should_copy(binary, "logo.png")

    render_all = FileFilter.build(files, {}, Evaluator(), suffix=".jinja", render_all=True)
    assert not render_all.should_copy(plain, "LICENSE")


def test_inner_double_star_matches_zero_directories() -> None:
    globs = GlobSet.of(["src/**/test_*.py"])
    assert globs.is_match("src/test_app.py")
    assert globs.is_match("src/pkg/sub/test_app.py")
    assert not globs.is_match("lib/test_app.py")
