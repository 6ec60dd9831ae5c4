"""Shared test helpers and stub classes.

Import from here instead of duplicating fakes in individual test files.
"""

from __future__ import annotations

import json
import re
from typing import Any, Iterable, Mapping, Sequence

from docwright.ai.orchestration.types import AssistantTurn, Message, ToolCall
from docwright.ai.tools.base import Location


def tool_turn(*calls: tuple[str, Mapping[str, Any] | str], prefix: str = "call") -> AssistantTurn:
    """Build an assistant turn requesting ``calls`` as ``(name, arguments)`` pairs."""
    tool_calls = []
    for index, (name, arguments) in enumerate(calls):
        raw = arguments if isinstance(arguments, str) else json.dumps(arguments)
        tool_calls.append(ToolCall(id=f"{prefix}_{index}", name=name, arguments=raw))
    return AssistantTurn(content="", tool_calls=tuple(tool_calls), finish_reason="tool_calls")


def text_turn(content: str) -> AssistantTurn:
    return AssistantTurn(content=content, finish_reason="stop")


class ScriptedModelClient:
    """Model client stub that replays a fixed sequence of turns.

    Every transcript it receives is recorded so tests can assert on what the
    model was shown. Once the script runs out, the last turn repeats.

    Example:
        client = ScriptedModelClient([tool_turn(("insert_text", {"text": "x"})), text_turn("Done")])
    """

    def __init__(self, turns: Iterable[AssistantTurn | Exception]) -> None:
        self._turns = list(turns)
        self.calls: list[dict[str, Any]] = []

    async def complete(
        self,
        messages: Sequence[Message],
        *,
        tools: Sequence[Mapping[str, Any]] | None = None,
    ) -> AssistantTurn:
        self.calls.append({"messages": list(messages), "tools": list(tools or [])})
        index = min(len(self.calls) - 1, len(self._turns) - 1)
        turn = self._turns[index]
        if isinstance(turn, Exception):
            raise turn
        return turn

    @property
    def call_count(self) -> int:
        return len(self.calls)


class RecordingSurface:
    """In-memory document surface that logs every call.

    Paragraphs are kept as plain strings so replace behavior can be checked
    without a real document.
    """

    def __init__(self, paragraphs: Iterable[str] = ()) -> None:
        self.paragraphs: list[str] = list(paragraphs)
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self.saves = 0

    def insert_text(self, text: str, *, location: Location) -> None:
        self.calls.append(("insert_text", {"text": text, "location": location}))
        self._insert(text.splitlines() or [text], location)

    def insert_heading(self, text: str, *, level: int, location: Location) -> None:
        self.calls.append(("insert_heading", {"text": text, "level": level, "location": location}))
        self._insert([f"{'#' * level} {text}"], location)

    def replace_text(self, find: str, replace: str, *, pattern: re.Pattern[str] | None = None) -> int | None:
        self.calls.append(("replace_text", {"find": find, "replace": replace, "pattern": pattern}))
        total = 0
        for index, paragraph in enumerate(self.paragraphs):
            if pattern is not None:
                updated, count = pattern.subn(replace, paragraph)
            else:
                count = paragraph.count(find)
                updated = paragraph.replace(find, replace)
            self.paragraphs[index] = updated
            total += count
        return None if pattern is not None else total

    def insert_image(
        self,
        url: str,
        *,
        alt_text: str | None = None,
        width: float | None = None,
        height: float | None = None,
        location: Location,
    ) -> None:
        self.calls.append(
            (
                "insert_image",
                {"url": url, "alt_text": alt_text, "width": width, "height": height, "location": location},
            )
        )
        self._insert([f"![{alt_text or ''}]({url})"], location)

    def insert_table(self, rows: int, cols: int, data: Sequence[Sequence[str]], *, location: Location) -> None:
        self.calls.append(("insert_table", {"rows": rows, "cols": cols, "data": data, "location": location}))
        self._insert([" | ".join(row) for row in data], location)

    def save(self) -> None:
        self.saves += 1

    @property
    def call_names(self) -> list[str]:
        return [name for name, _ in self.calls]

    def _insert(self, lines: list[str], location: Location) -> None:
        if location is Location.START:
            self.paragraphs[0:0] = lines
        else:
            self.paragraphs.extend(lines)


class ExplodingSurface(RecordingSurface):
    """Surface whose mutations raise an unexpected error."""

    def insert_text(self, text: str, *, location: Location) -> None:
        raise RuntimeError("disk full")

    def insert_heading(self, text: str, *, level: int, location: Location) -> None:
        raise RuntimeError("disk full")
