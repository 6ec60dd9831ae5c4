"""Base types shared by the document tools.

This module provides the uniform result container returned by every tool
invocation, the protocol the tools use to mutate a document, and the small
argument-coercion helpers each tool's argument type builds on.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Protocol, Sequence, runtime_checkable

from .errors import ErrorCode, MissingParameterError, ToolError

LOGGER = logging.getLogger(__name__)

DISABLED_MESSAGE = "Edits are disabled for this document; no changes were made."


class Location(str, Enum):
    """Where new content is placed in the document."""

    START = "start"
    CURSOR = "cursor"
    END = "end"


@runtime_checkable
class DocumentSurface(Protocol):
    """Editable document capability the tools operate on."""

    def insert_text(self, text: str, *, location: Location) -> None:
        ...

    def insert_heading(self, text: str, *, level: int, location: Location) -> None:
        ...

    def replace_text(self, find: str, replace: str, *, pattern: re.Pattern[str] | None = None) -> int | None:
        """Replace across the whole body.

        Returns the number of replacements for literal replace, ``None`` when
        ``pattern`` is given.
        """
        ...

    def insert_image(
        self,
        url: str,
        *,
        alt_text: str | None = None,
        width: float | None = None,
        height: float | None = None,
        location: Location,
    ) -> None:
        ...

    def insert_table(
        self,
        rows: int,
        cols: int,
        data: Sequence[Sequence[str]],
        *,
        location: Location,
    ) -> None:
        ...

    def save(self) -> None:
        """Persist the document after a mutation."""
        ...


@dataclass(slots=True, frozen=True)
class ToolResult:
    """Standardized result container for tool execution.

    Attributes:
        ok: Whether the tool completed successfully.
        data: The result data if successful.
        error: Human-readable error description if unsuccessful.
        code: Machine-readable error code if unsuccessful.
    """

    ok: bool
    data: Mapping[str, Any] = field(default_factory=dict)
    error: str | None = None
    code: str | None = None

    @classmethod
    def success(cls, data: Mapping[str, Any] | None = None) -> ToolResult:
        return cls(ok=True, data=dict(data or {}))

    @classmethod
    def failure(cls, error: str, *, code: str = ErrorCode.INTERNAL_ERROR) -> ToolResult:
        return cls(ok=False, error=error, code=code)

    @classmethod
    def from_error(cls, exc: ToolError) -> ToolResult:
        return cls(ok=False, error=exc.message, code=exc.error_code)

    @classmethod
    def disabled(cls) -> ToolResult:
        """Result substituted for every tool call while edits are turned off."""
        return cls(ok=False, error=DISABLED_MESSAGE, code=ErrorCode.EDITS_DISABLED)

    def to_dict(self) -> dict[str, Any]:
        """Serialize the result for JSON tool responses."""
        if self.ok:
            return {"ok": True, **dict(self.data)}
        result: dict[str, Any] = {"ok": False, "error": self.error or "Unknown error"}
        if self.code:
            result["code"] = self.code
        return result


# -----------------------------------------------------------------------------
# Argument coercion helpers
# -----------------------------------------------------------------------------


def require_text(arguments: Mapping[str, Any], name: str) -> str:
    """Return a non-blank string parameter or raise :class:`MissingParameterError`."""
    value = arguments.get(name)
    if value is None:
        raise MissingParameterError.for_parameter(name)
    text = value if isinstance(value, str) else str(value)
    if not text.strip():
        raise MissingParameterError.for_parameter(name)
    return text


def optional_text(arguments: Mapping[str, Any], name: str, default: str | None = None) -> str | None:
    value = arguments.get(name)
    if value is None:
        return default
    return value if isinstance(value, str) else str(value)


def coerce_int(value: Any) -> int | None:
    """Best-effort integer coercion; ``None`` when the value is not numeric."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    if isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
        return int(number) if math.isfinite(number) else None
    return None


def clamp(value: int, lower: int, upper: int | None = None) -> int:
    if value < lower:
        return lower
    if upper is not None and value > upper:
        return upper
    return value


def coerce_positive_float(value: Any) -> float | None:
    """Return ``value`` as a positive float, or ``None`` to ignore it."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number) or number <= 0:
        return None
    return number


def coerce_bool(value: Any, default: bool = False) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    if isinstance(value, (int, float)):
        return value != 0
    return default


def coerce_location(value: Any, default: Location) -> Location:
    """Resolve a location argument, falling back to the tool's default."""
    if isinstance(value, Location):
        return value
    if isinstance(value, str):
        try:
            return Location(value.strip().lower())
        except ValueError:
            LOGGER.debug("Unknown location %r; using %s", value, default.value)
    return default


__all__ = [
    "DISABLED_MESSAGE",
    "Location",
    "DocumentSurface",
    "ToolResult",
    "require_text",
    "optional_text",
    "coerce_int",
    "clamp",
    "coerce_positive_float",
    "coerce_bool",
    "coerce_location",
]
