"""CLI interface for stencil - project generator with template updates."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Dict, Optional, Tuple

import click

from . import __version__
from .config import load_user_config
from .errors import StencilError
from .sync import UpdateReport, update_project
from .templates import check_template, generate_project
from .utils import console, err_console
from .variables import click_prompter


def parse_data(values: Tuple[str, ...]) -> Dict[str, str]:
    data: Dict[str, str] = {}
    for item in values:
        key, sep, value = item.partition("=")
        if not sep or not key.strip():
            raise click.BadParameter(
                f"expected key=value, got '{item}'", param_hint="'-d' / '--data'"
            )
        data[key.strip()] = value
    return data


def _fail(error: StencilError) -> None:
    err_console.print(f"Error: {error}", style="red")
    sys.exit(1)


@click.group()
@click.version_option(__version__, prog_name="stencil")
@click.option("-v", "--verbose", is_flag=True, default=False, help="Enable debug logging")
def cli(verbose: bool) -> None:
    """Generate projects from templates and keep them up to date."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@cli.command("generate")
@click.argument("template")
@click.option(
    "-o",
    "--output",
    "output_dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=Path("."),
    show_default=True,
    help="Directory to generate the project into",
)
@click.option("-d", "--data", "data", multiple=True, help="Set a variable: key=value")
@click.option("--defaults", is_flag=True, default=False, help="Use defaults instead of prompting")
@click.option("--overwrite", is_flag=True, default=False, help="Allow a non-empty output directory")
@click.option("--dry-run", is_flag=True, default=False, help="Show what would be generated")
@click.option("--ref", default=None, help="Git ref to check out for remote templates")
def generate_cmd(
    template: str,
    output_dir: Path,
    data: Tuple[str, ...],
    defaults: bool,
    overwrite: bool,
    dry_run: bool,
    ref: Optional[str],
) -> None:
    """
    Generate a project from TEMPLATE (local path, git URL or abbreviation like gh:owner/repo).
    """
    overrides = parse_data(data)
    try:
        result = generate_project(
            template,
            output_dir,
            data=overrides,
            use_defaults=defaults,
            overwrite=overwrite,
            dry_run=dry_run,
            ref=ref,
            source_config=load_user_config(),
            prompter=click_prompter,
        )
    except StencilError as e:
        _fail(e)
        return

    if dry_run:
        console.print(f"Would generate {len(result.plan)} files in {output_dir}:", style="bold")
        for planned in result.plan:
            marker = "copy" if planned.copied else "render"
            console.print(f"  {marker:6} {planned.path}")
        return

    project = result.project
    assert project is not None
    total = len(project.files_created) + len(project.files_copied)
    console.print(f"Generated {total} files in {project.output_dir}", style="green")
    if result.answers_path is not None:
        console.print(f"Answers saved to {result.answers_path}")


def _print_paths(title: str, paths, style: str) -> None:
    if not paths:
        return
    console.print(title, style=style)
    for path in paths:
        console.print(f"  - {path}")


def _print_report(report: UpdateReport) -> None:
    _print_paths("Updated:", report.files_updated, "green")
    _print_paths("Added:", report.files_added, "green")
    _print_paths("Marked for removal (see .removing files):", report.files_removed, "yellow")
    _print_paths("Conflicts (see .rej files):", report.conflicts, "red")


@cli.command("update")
@click.argument(
    "project_dir",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=Path("."),
)
@click.option("--ref", default=None, help="Template ref to update to")
@click.option("--source", default=None, help="Override the recorded template source")
@click.option("--dry-run", is_flag=True, default=False, help="Show changes without applying them")
def update_cmd(
    project_dir: Path, ref: Optional[str], source: Optional[str], dry_run: bool
) -> None:
    """
    Update a generated project to a newer version of its template.

    Files you have not touched are updated in place. Files changed on both sides
    get a .rej file with the diffs, and files dropped from the template get a
    .removing marker. Your own edits are never overwritten.
    """
    try:
        report = update_project(
            project_dir,
            source=source,
            ref=ref,
            dry_run=dry_run,
            source_config=load_user_config(),
        )
    except StencilError as e:
        _fail(e)
        return

    if not report.has_changes:
        console.print("Project is up to date.", style="green")
        return

    if dry_run:
        console.print("Dry run, no files were changed.", style="yellow")
    _print_report(report)
    console.print(f"\n{report.summary()}", style="bold")


@cli.command("check")
@click.argument("template_dir", type=click.Path(exists=True, file_okay=False, path_type=Path))
def check_cmd(template_dir: Path) -> None:
    """
    Validate a template directory without generating anything.
    """
    try:
        result = check_template(template_dir)
    except StencilError as e:
        _fail(e)
        return

    for warning in result.warnings:
        console.print(f"warning: {warning}", style="yellow")
    for error in result.errors:
        console.print(f"error: {error}", style="red")

    if not result.ok:
        console.print(f"✗ {result.template_name}: {len(result.errors)} problems found", style="red")
        sys.exit(1)
    console.print(
        f"✓ {result.template_name} is valid ({result.variable_count} variables)",
        style="green",
    )


if __name__ == "__main__":
    cli()
