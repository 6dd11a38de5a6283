"""Extra Jinja filters available to every template."""

from __future__ import annotations

import re
import unicodedata
from typing import Any, Callable, Dict

_NON_ALNUM = re.compile(r"[^a-zA-Z0-9]+")


def slugify(value: Any) -> str:
    """Lowercase, ASCII-fold and hyphenate: "My Cool Project" -> "my-cool-project"."""
    text = unicodedata.normalize("NFKD", str(value))
    text = text.encode("ascii", "ignore").decode("ascii")
    return _NON_ALNUM.sub("-", text).strip("-").lower()


def snake_case(value: Any) -> str:
    return slugify(value).replace("-", "_")


FILTERS: Dict[str, Callable[..., Any]] = {
    "slugify": slugify,
    "snake_case": snake_case,
}
