"""Variable collection for stencil."""

from .prompts import Prompter, click_prompter
from .resolver import Environment, collect_variables, replay_variables, resolve_computed
from .values import (
    VariableValue,
    coerce_default,
    coerce_override,
    from_answer_value,
    to_answer_value,
)

__all__ = [
    "Prompter",
    "click_prompter",
    "Environment",
    "collect_variables",
    "replay_variables",
    "resolve_computed",
    "VariableValue",
    "coerce_default",
    "coerce_override",
    "from_answer_value",
    "to_answer_value",
]
