"""Insert an image downloaded from a URL."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping
from urllib.parse import urlparse

from .base import DocumentSurface, Location, coerce_location, coerce_positive_float, optional_text, require_text
from .errors import InvalidParameterError

DEFAULT_LOCATION = Location.END
_ALLOWED_SCHEMES = frozenset({"http", "https"})


@dataclass(slots=True, frozen=True)
class InsertImageArgs:
    url: str
    alt_text: str | None = None
    width: float | None = None
    height: float | None = None
    location: Location = DEFAULT_LOCATION

    @classmethod
    def from_arguments(cls, arguments: Mapping[str, Any]) -> InsertImageArgs:
        url = require_text(arguments, "url").strip()
        parsed = urlparse(url)
        if parsed.scheme.lower() not in _ALLOWED_SCHEMES or not parsed.netloc:
            raise InvalidParameterError(
                message=f"Image URL must be an absolute http(s) URL: {url}",
                parameter="url",
            )
        return cls(
            url=url,
            alt_text=optional_text(arguments, "altText"),
            width=coerce_positive_float(arguments.get("width")),
            height=coerce_positive_float(arguments.get("height")),
            location=coerce_location(arguments.get("location"), DEFAULT_LOCATION),
        )


def insert_image(surface: DocumentSurface, args: InsertImageArgs) -> dict[str, Any]:
    surface.insert_image(
        args.url,
        alt_text=args.alt_text,
        width=args.width,
        height=args.height,
        location=args.location,
    )
    surface.save()
    result: dict[str, Any] = {"inserted": "image", "url": args.url, "location": args.location.value}
    if args.width is not None:
        result["width"] = args.width
    if args.height is not None:
        result["height"] = args.height
    return result


__all__ = ["InsertImageArgs", "insert_image"]
