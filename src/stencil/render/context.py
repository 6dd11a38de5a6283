"""Build the rendering context handed to Jinja."""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from ..variables.values import VariableValue


def build_context(
    variables: Mapping[str, VariableValue], namespace: Optional[str] = None
) -> Dict[str, Any]:
    """Flat variables, also nested under ``namespace`` when one is given.

    The namespace form lets foreign templates write ``{{ ns.project_name }}``.
    """
    context: Dict[str, Any] = dict(variables)
    if namespace:
        context[namespace] = dict(variables)
    return context
