"""Find and replace across the whole document body.

``find`` is literal text unless ``useRegex`` is set or it is written as a
slash-delimited pattern such as ``/colou?r/i``. Literal replacement reports
how many occurrences were replaced; regex replacement does not report a count.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Mapping

from .base import DocumentSurface, coerce_bool, optional_text, require_text
from .errors import PatternInvalidError

LOGGER = logging.getLogger(__name__)

_SLASH_PATTERN = re.compile(r"^/(?P<body>.+)/(?P<flags>[gims]*)$", re.DOTALL)
_FLAG_MAP = {
    "i": re.IGNORECASE,
    "m": re.MULTILINE,
    "s": re.DOTALL,
    "g": 0,  # replacement is always global
}


def split_slash_pattern(find: str) -> tuple[str, int] | None:
    """Return ``(pattern, flags)`` when ``find`` is written as ``/pattern/flags``."""
    match = _SLASH_PATTERN.match(find)
    if match is None:
        return None
    flags = 0
    for char in match.group("flags"):
        flags |= _FLAG_MAP[char]
    return match.group("body"), flags


def compile_pattern(source: str, flags: int = 0) -> re.Pattern[str]:
    try:
        return re.compile(source, flags)
    except re.error as exc:
        raise PatternInvalidError(
            message=f"Invalid regular expression {source!r}: {exc}",
            pattern=source,
        ) from exc


@dataclass(slots=True, frozen=True)
class ReplaceTextArgs:
    find: str
    replace: str = ""
    use_regex: bool = False

    @classmethod
    def from_arguments(cls, arguments: Mapping[str, Any]) -> ReplaceTextArgs:
        return cls(
            find=require_text(arguments, "find"),
            replace=optional_text(arguments, "replace", "") or "",
            use_regex=coerce_bool(arguments.get("useRegex"), default=False),
        )

    def resolve_pattern(self) -> re.Pattern[str] | None:
        """Return the compiled pattern for regex mode, or ``None`` for literal mode."""
        slashed = split_slash_pattern(self.find)
        if slashed is not None:
            source, flags = slashed
            return compile_pattern(source, flags)
        if self.use_regex:
            return compile_pattern(self.find)
        return None


def replace_text(surface: DocumentSurface, args: ReplaceTextArgs) -> dict[str, Any]:
    pattern = args.resolve_pattern()
    count = surface.replace_text(args.find, args.replace, pattern=pattern)
    surface.save()
    if pattern is not None:
        LOGGER.debug("Regex replace applied for pattern %r", pattern.pattern)
        return {"mode": "regex", "pattern": pattern.pattern, "replacements": None}
    return {"mode": "literal", "replacements": count}


__all__ = ["ReplaceTextArgs", "replace_text", "split_slash_pattern", "compile_pattern"]
