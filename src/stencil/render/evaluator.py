"""Jinja rendering behind a register/render/evaluate interface."""

from __future__ import annotations

from typing import Any, Dict, Mapping

import jinja2

from ..errors import EvaluationError
from .filters import FILTERS


def _make_environment(undefined: type) -> jinja2.Environment:
    env = jinja2.Environment(
        loader=jinja2.BaseLoader(),
        autoescape=False,
        undefined=undefined,
        keep_trailing_newline=True,
    )
    env.filters.update(FILTERS)
    return env


class Evaluator:
    """Renders template strings against a variable context.

    Every failure, whether at parse time or render time, surfaces as an
    ``EvaluationError`` tagged with the name it was registered under.
    References to undefined variables are errors everywhere except in
    ``predicate``, where they are falsy.
    """

    def __init__(self) -> None:
        self._env = _make_environment(jinja2.StrictUndefined)
        self._lenient = _make_environment(jinja2.ChainableUndefined)
        self._templates: Dict[str, jinja2.Template] = {}

    def register(self, name: str, text: str) -> None:
        try:
            self._templates[name] = self._env.from_string(text)
        except jinja2.TemplateSyntaxError as e:
            raise EvaluationError(name, f"syntax error on line {e.lineno}: {e.message}") from e

    def render(self, name: str, context: Mapping[str, Any]) -> str:
        template = self._templates.get(name)
        if template is None:
            raise EvaluationError(name, "template was never registered")
        try:
            return template.render(dict(context))
        except Exception as e:  # noqa: BLE001 - surface as EvaluationError
            raise EvaluationError(name, str(e) or e.__class__.__name__) from e

    def evaluate(self, name: str, text: str, context: Mapping[str, Any]) -> str:
        """Register and render in one step."""
        self.register(name, text)
        try:
            return self.render(name, context)
        finally:
            self._templates.pop(name, None)

    def predicate(self, name: str, expr: str, context: Mapping[str, Any]) -> bool:
        """Evaluate a boolean expression such as ``use_docker and ci != 'none'``."""
        try:
            compiled = self._lenient.compile_expression(expr)
        except jinja2.TemplateSyntaxError as e:
            raise EvaluationError(name, f"invalid expression '{expr}': {e.message}") from e
        try:
            return bool(compiled(**dict(context)))
        except Exception as e:  # noqa: BLE001 - surface as EvaluationError
            raise EvaluationError(name, str(e) or e.__class__.__name__) from e

    def check_syntax(self, name: str, text: str) -> None:
        """Parse text without rendering it."""
        try:
            self._env.parse(text)
        except jinja2.TemplateSyntaxError as e:
            raise EvaluationError(name, f"syntax error on line {e.lineno}: {e.message}") from e

    def check_expression(self, name: str, expr: str) -> None:
        try:
            self._lenient.compile_expression(expr)
        except jinja2.TemplateSyntaxError as e:
            raise EvaluationError(name, f"invalid expression '{expr}': {e.message}") from e
