"""Interactive prompting for template variables."""

from __future__ import annotations

import math
import re
from typing import Any, Callable, List, Optional, Protocol

import click

from ..config.schema import VariableKind, VariableSpec
from ..errors import PromptCancelledError
from .values import VariableValue, coerce_default, split_choices


class Prompter(Protocol):
    def __call__(self, spec: VariableSpec) -> VariableValue: ...


def _regex_validator(spec: VariableSpec) -> Callable[[str], str]:
    pattern = re.compile(spec.validation or "")
    message = spec.validation_message or f"Must match pattern: {spec.validation}"

    def validate(value: str) -> str:
        if not pattern.search(value):
            raise click.BadParameter(message)
        return value

    return validate


def _finite_float(value: str) -> float:
    try:
        number = float(value)
    except ValueError:
        raise click.BadParameter("Must be a valid number") from None
    if not math.isfinite(number):
        raise click.BadParameter("Must be a finite number")
    return number


def _choice_list(choices: List[str]) -> Callable[[str], List[str]]:
    def validate(value: str) -> List[str]:
        if not value.strip():
            return []
        items = split_choices(value)
        unknown = [item for item in items if item not in choices]
        if unknown:
            raise click.BadParameter(
                f"Unknown choice(s): {', '.join(unknown)}. Pick from: {', '.join(choices)}"
            )
        return items

    return validate


def _default(spec: VariableSpec) -> Optional[Any]:
    if spec.default is None:
        return None
    return coerce_default(spec.default, spec)


def click_prompter(spec: VariableSpec) -> VariableValue:
    """Ask for one variable on the terminal, typed to its kind."""
    text = spec.prompt_text
    default = _default(spec)
    try:
        if spec.kind is VariableKind.BOOL:
            return click.confirm(text, default=bool(default) if default is not None else False)

        if spec.kind is VariableKind.INT:
            return click.prompt(
                text,
                type=int,
                default=default if isinstance(default, int) else None,
            )

        if spec.kind is VariableKind.FLOAT:
            return click.prompt(
                text,
                value_proc=_finite_float,
                default=str(default) if isinstance(default, float) else None,
            )

        if spec.kind is VariableKind.SELECT:
            choices = list(spec.choices or [])
            return click.prompt(
                text,
                type=click.Choice(choices),
                default=default if default in choices else None,
                show_choices=True,
            )

        if spec.kind is VariableKind.MULTISELECT:
            choices = list(spec.choices or [])
            selected = default if isinstance(default, list) else []
            return click.prompt(
                f"{text} (comma separated: {', '.join(choices)})",
                value_proc=_choice_list(choices),
                default=",".join(item for item in selected if item in choices),
                show_default=bool(selected),
            )

        return click.prompt(
            text,
            default=default if default is not None else "",
            show_default=default is not None,
            value_proc=_regex_validator(spec) if spec.validation else None,
        )
    except click.Abort:
        raise PromptCancelledError() from None
