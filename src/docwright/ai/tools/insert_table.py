"""Insert a table filled from row-major cell data."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Sequence

from .base import DocumentSurface, Location, clamp, coerce_int, coerce_location
from .errors import InvalidParameterError, MissingParameterError

DEFAULT_LOCATION = Location.END


def normalize_table_data(raw: Any) -> tuple[tuple[str, ...], ...]:
    """Coerce ``data`` into rows of cell strings; ``None`` cells become ``""``."""
    if raw is None:
        return ()
    if isinstance(raw, (str, bytes)) or not isinstance(raw, Sequence):
        raise InvalidParameterError(message="data must be a list of rows", parameter="data")
    rows: list[tuple[str, ...]] = []
    for row in raw:
        if row is None:
            rows.append(())
        elif isinstance(row, (str, bytes)) or not isinstance(row, Sequence):
            # A bare scalar counts as a one-cell row.
            rows.append((_cell_text(row),))
        else:
            rows.append(tuple(_cell_text(cell) for cell in row))
    return tuple(rows)


def _cell_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return str(value)


def fill_grid(rows: int, cols: int, data: Sequence[Sequence[str]]) -> tuple[tuple[str, ...], ...]:
    """Pad or truncate ``data`` to exactly ``rows`` x ``cols``."""
    grid: list[tuple[str, ...]] = []
    for r in range(rows):
        source = data[r] if r < len(data) else ()
        grid.append(tuple(source[c] if c < len(source) else "" for c in range(cols)))
    return tuple(grid)


@dataclass(slots=True, frozen=True)
class InsertTableArgs:
    rows: int
    cols: int
    data: tuple[tuple[str, ...], ...] = ()
    location: Location = DEFAULT_LOCATION

    @classmethod
    def from_arguments(cls, arguments: Mapping[str, Any]) -> InsertTableArgs:
        data = normalize_table_data(arguments.get("data"))
        rows = coerce_int(arguments.get("rows"))
        cols = coerce_int(arguments.get("cols"))
        if rows is None:
            if not data:
                raise MissingParameterError.for_parameter("rows")
            rows = len(data)
        if cols is None:
            widest = max((len(row) for row in data), default=0)
            if widest == 0:
                raise MissingParameterError.for_parameter("cols")
            cols = widest
        rows = clamp(rows, 1)
        cols = clamp(cols, 1)
        return cls(
            rows=rows,
            cols=cols,
            data=fill_grid(rows, cols, data),
            location=coerce_location(arguments.get("location"), DEFAULT_LOCATION),
        )


def insert_table(surface: DocumentSurface, args: InsertTableArgs) -> dict[str, Any]:
    surface.insert_table(args.rows, args.cols, args.data, location=args.location)
    surface.save()
    return {
        "inserted": "table",
        "rows": args.rows,
        "cols": args.cols,
        "location": args.location.value,
    }


__all__ = ["InsertTableArgs", "insert_table", "normalize_table_data", "fill_grid"]
