"""Resolve a template's variable specs into a variable environment."""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Sequence

from ..config.schema import VariableSpec
from ..errors import ComputedVariablesStuckError, EvaluationError
from ..render.evaluator import Evaluator
from .prompts import Prompter, click_prompter
from .values import VariableValue, coerce_default, coerce_override

logger = logging.getLogger(__name__)

Environment = Mapping[str, VariableValue]


def _is_visible(
    spec: VariableSpec, values: Mapping[str, VariableValue], evaluator: Evaluator
) -> bool:
    if spec.when is None:
        return True
    return evaluator.predicate(f"{spec.name} (when)", spec.when, values)


def resolve_computed(
    specs: Sequence[VariableSpec],
    values: Dict[str, VariableValue],
    evaluator: Evaluator,
    fallbacks: Optional[Mapping[str, VariableValue]] = None,
) -> None:
    """Evaluate computed variables into ``values`` until a fixed point.

    Computed variables may reference each other in any order. Each round
    attempts every pending expression and defers the failures; at most N+1
    rounds run and the loop stops early once a round makes no progress.
    Variables still pending afterwards take their entry from ``fallbacks``
    when present; otherwise the first of them is evaluated once more to
    raise a concrete error.
    """
    remaining: List[VariableSpec] = [s for s in specs if s.is_computed]
    for _ in range(len(remaining) + 1):
        if not remaining:
            break
        still_pending: List[VariableSpec] = []
        for spec in remaining:
            try:
                values[spec.name] = evaluator.evaluate(spec.name, spec.computed or "", values)
            except EvaluationError:
                still_pending.append(spec)
        if len(still_pending) == len(remaining):
            break
        remaining = still_pending

    if fallbacks:
        unresolved: List[VariableSpec] = []
        for spec in remaining:
            if spec.name in fallbacks:
                logger.warning(
                    "Could not re-derive computed variable '%s', keeping saved value",
                    spec.name,
                )
                values[spec.name] = fallbacks[spec.name]
            else:
                unresolved.append(spec)
        remaining = unresolved

    names = [s.name for s in remaining]
    for spec in remaining:
        try:
            values[spec.name] = evaluator.evaluate(spec.name, spec.computed or "", values)
        except EvaluationError as e:
            raise ComputedVariablesStuckError(spec.name, e.message, names) from e


def collect_variables(
    specs: Sequence[VariableSpec],
    overrides: Optional[Mapping[str, str]] = None,
    use_defaults: bool = False,
    prompter: Optional[Prompter] = None,
    evaluator: Optional[Evaluator] = None,
) -> Environment:
    """Collect a value for every visible variable.

    Non-computed variables are handled in declaration order: a false
    ``when`` skips the variable entirely; otherwise an override wins, then
    the default when ``use_defaults`` is set, then an interactive prompt.
    Computed variables are resolved afterwards (see ``resolve_computed``).
    """
    overrides = overrides or {}
    prompter = prompter or click_prompter
    evaluator = evaluator or Evaluator()
    values: Dict[str, VariableValue] = {}

    for spec in specs:
        if spec.is_computed:
            continue
        if not _is_visible(spec, values, evaluator):
            logger.debug("Skipping '%s': condition is false", spec.name)
            continue
        if spec.name in overrides:
            values[spec.name] = coerce_override(overrides[spec.name], spec)
        elif use_defaults and spec.default is not None:
            values[spec.name] = coerce_default(spec.default, spec)
        else:
            values[spec.name] = prompter(spec)

    resolve_computed(specs, values, evaluator)
    return MappingProxyType(values)


def replay_variables(
    specs: Sequence[VariableSpec],
    answers: Mapping[str, VariableValue],
    evaluator: Optional[Evaluator] = None,
) -> Environment:
    """Rebuild an environment from saved answers without prompting.

    Used when re-rendering a project for an update. Saved answers are
    converted to the (possibly changed) declared kinds, missing ones fall
    back to defaults, and computed variables are derived again.
    """
    evaluator = evaluator or Evaluator()
    values: Dict[str, VariableValue] = {}
    declared = {spec.name for spec in specs}

    for spec in specs:
        if spec.is_computed:
            continue
        if not _is_visible(spec, values, evaluator):
            continue
        if spec.name in answers:
            values[spec.name] = coerce_default(answers[spec.name], spec)
        elif spec.default is not None:
            values[spec.name] = coerce_default(spec.default, spec)
        else:
            logger.debug("No saved answer or default for '%s'", spec.name)

    for name, value in answers.items():
        if name not in declared:
            values[name] = value

    fallbacks = {s.name: answers[s.name] for s in specs if s.is_computed and s.name in answers}
    resolve_computed(specs, values, evaluator, fallbacks=fallbacks)
    return MappingProxyType(values)
