"""Insert plain text into the document."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from .base import DocumentSurface, Location, coerce_location, require_text

DEFAULT_LOCATION = Location.CURSOR


@dataclass(slots=True, frozen=True)
class InsertTextArgs:
    text: str
    location: Location = DEFAULT_LOCATION

    @classmethod
    def from_arguments(cls, arguments: Mapping[str, Any]) -> InsertTextArgs:
        return cls(
            text=require_text(arguments, "text"),
            location=coerce_location(arguments.get("location"), DEFAULT_LOCATION),
        )


def insert_text(surface: DocumentSurface, args: InsertTextArgs) -> dict[str, Any]:
    surface.insert_text(args.text, location=args.location)
    surface.save()
    return {
        "inserted": "text",
        "characters": len(args.text),
        "location": args.location.value,
    }


__all__ = ["InsertTextArgs", "insert_text"]
