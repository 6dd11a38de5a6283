"""Resolve a template argument to a local directory or a git URL."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..config.user import SourceConfig
from ..errors import ConfigNotFoundError, SourceError

logger = logging.getLogger(__name__)

_ABBREVIATION = re.compile(r"^(?P<prefix>[A-Za-z][\w-]*):(?!//)(?P<rest>.+)$")
_GIT_PREFIXES = ("https://", "http://", "ssh://", "git://", "git@")


@dataclass(frozen=True)
class TemplateSource:
    location: str
    is_local: bool

    @property
    def path(self) -> Path:
        return Path(self.location)


def expand_abbreviation(template_arg: str, config: SourceConfig) -> Optional[str]:
    """Expand `gh:user/repo` style arguments; None if the argument is not one."""
    match = _ABBREVIATION.match(template_arg)
    if match is None:
        return None
    prefix = match.group("prefix")
    template = config.abbreviations.get(prefix)
    if template is None:
        known = ", ".join(sorted(config.abbreviations)) or "none configured"
        raise SourceError(
            f"Invalid template abbreviation '{prefix}:' in {template_arg} (known: {known})"
        )
    return template.replace("{}", match.group("rest"))


def resolve_source(
    template_arg: str, config: Optional[SourceConfig] = None
) -> TemplateSource:
    config = config or SourceConfig()
    local = Path(template_arg).expanduser()
    if local.exists():
        return TemplateSource(location=str(local.resolve()), is_local=True)

    if template_arg.startswith("file://"):
        raise SourceError(
            f"Unsafe URL scheme in '{template_arg}': file:// URLs are not allowed for remote templates"
        )

    if template_arg.startswith(_GIT_PREFIXES):
        url = template_arg
    else:
        expanded = expand_abbreviation(template_arg, config)
        if expanded is None:
            raise ConfigNotFoundError(local)
        url = expanded

    if url.startswith("http://"):
        logger.warning("Using insecure http:// URL %s; consider https:// instead", url)
    return TemplateSource(location=url, is_local=False)
