"""Insert a heading paragraph."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from .base import DocumentSurface, Location, clamp, coerce_int, coerce_location, require_text

DEFAULT_LEVEL = 2
MIN_LEVEL = 1
MAX_LEVEL = 6
DEFAULT_LOCATION = Location.CURSOR


@dataclass(slots=True, frozen=True)
class InsertHeadingArgs:
    text: str
    level: int = DEFAULT_LEVEL
    location: Location = DEFAULT_LOCATION

    @classmethod
    def from_arguments(cls, arguments: Mapping[str, Any]) -> InsertHeadingArgs:
        level = coerce_int(arguments.get("level"))
        if level is None:
            level = DEFAULT_LEVEL
        return cls(
            text=require_text(arguments, "text"),
            # Out-of-range levels are clamped, never rejected.
            level=clamp(level, MIN_LEVEL, MAX_LEVEL),
            location=coerce_location(arguments.get("location"), DEFAULT_LOCATION),
        )


def insert_heading(surface: DocumentSurface, args: InsertHeadingArgs) -> dict[str, Any]:
    surface.insert_heading(args.text, level=args.level, location=args.location)
    surface.save()
    return {
        "inserted": "heading",
        "text": args.text,
        "level": args.level,
        "location": args.location.value,
    }


__all__ = ["InsertHeadingArgs", "insert_heading", "DEFAULT_LEVEL", "MIN_LEVEL", "MAX_LEVEL"]
