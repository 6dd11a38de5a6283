"""Error types raised by stencil."""

from __future__ import annotations

from pathlib import Path
from typing import List


class StencilError(Exception):
    """Base class for every error stencil reports to the CLI layer."""


class ConfigError(StencilError):
    """Raise when a template config or answers file is malformed"""


class ConfigNotFoundError(ConfigError):
    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"Template config not found at {path}")


class InvalidVariableError(ConfigError):
    def __init__(self, name: str, reason: str) -> None:
        self.name = name
        self.reason = reason
        super().__init__(f"Invalid variable definition for '{name}': {reason}")


class EvaluationError(StencilError):
    """An expression failed to parse or render.

    ``name`` is the variable name or the template-relative path being
    evaluated when the failure happened.
    """

    def __init__(self, name: str, message: str) -> None:
        self.name = name
        self.message = message
        super().__init__(f"Failed to evaluate '{name}': {message}")


class ComputedVariablesStuckError(EvaluationError):
    """Raise when the computed-variable fixed point stops making progress"""

    def __init__(self, name: str, message: str, unresolved: List[str]) -> None:
        self.unresolved = list(unresolved)
        super().__init__(
            name, f"{message} (unresolved: {', '.join(self.unresolved)})"
        )


class StencilIOError(StencilError):
    def __init__(self, context: str, cause: OSError) -> None:
        self.context = context
        self.cause = cause
        super().__init__(f"IO error: {context}: {cause}")


class PromptCancelledError(StencilError):
    def __init__(self) -> None:
        super().__init__("Prompt cancelled by user")


class TemplateDirectoryMissingError(StencilError):
    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"Template directory not found: {path}")


class NoAnswerFileError(StencilError):
    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(
            f"No answers file found in {path}; was this project generated by stencil?"
        )


class OutputExistsError(StencilError):
    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(
            f"Output directory already exists and is not empty: {path} (use --overwrite)"
        )


class SourceError(StencilError):
    """Raise when a template source cannot be resolved or fetched"""
