"""Template management for stencil."""

from .fetch import FetchedTemplate, fetch_template
from .manager import GenerationResult, generate_project
from .source import TemplateSource, expand_abbreviation, resolve_source
from .validation import CheckResult, check_template

__all__ = [
    "FetchedTemplate",
    "fetch_template",
    "GenerationResult",
    "generate_project",
    "TemplateSource",
    "expand_abbreviation",
    "resolve_source",
    "CheckResult",
    "check_template",
]
