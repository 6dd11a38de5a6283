"""Rendering and materialization for stencil."""

from .context import build_context
from .evaluator import Evaluator
from .matcher import FileFilter, GlobSet
from .walker import (
    GeneratedProject,
    GenerationPlan,
    PlannedFile,
    execute_plan,
    plan_render,
    render_relative_path,
    walk_and_render,
)

__all__ = [
    "build_context",
    "Evaluator",
    "FileFilter",
    "GlobSet",
    "GeneratedProject",
    "GenerationPlan",
    "PlannedFile",
    "execute_plan",
    "plan_render",
    "render_relative_path",
    "walk_and_render",
]
