"""Core type definitions for the orchestration loop.

This module defines the immutable dataclasses that flow between the model
client, the orchestrator and the conversation store. Messages round-trip
through the OpenAI chat-param dict shape, which is also how they are
persisted.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Literal, Mapping, Sequence

from openai.types.chat import ChatCompletionMessageParam

from ..tools.base import ToolResult

__all__ = [
    "MessageRole",
    "ToolCall",
    "Message",
    "TurnKind",
    "AssistantTurn",
    "ActionRecord",
    "StopReason",
    "RunResult",
]


# -----------------------------------------------------------------------------
# Message Types
# -----------------------------------------------------------------------------

MessageRole = Literal["system", "user", "assistant", "tool"]


@dataclass(slots=True, frozen=True)
class ToolCall:
    """A model-issued request to run one named tool.

    Attributes:
        id: Opaque correlation token echoed back on the tool message.
        name: Name of the tool to call.
        arguments: Arguments as raw JSON text.
    """

    id: str
    name: str
    arguments: str = "{}"

    def to_chat_param(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": "function",
            "function": {"name": self.name, "arguments": self.arguments},
        }

    @classmethod
    def from_chat_param(cls, param: Mapping[str, Any]) -> ToolCall:
        function = param.get("function") or {}
        arguments = function.get("arguments")
        if arguments is None:
            arguments = "{}"
        elif not isinstance(arguments, str):
            arguments = json.dumps(arguments, ensure_ascii=False)
        return cls(
            id=str(param.get("id", "")),
            name=str(function.get("name", "")),
            arguments=arguments,
        )


@dataclass(slots=True, frozen=True)
class Message:
    """Immutable chat message.

    Attributes:
        role: The role of the message sender.
        content: Text content; ``None`` for assistant turns that only carry tool calls.
        tool_calls: Tool calls requested by an assistant message.
        tool_call_id: ID linking a tool result to its call.
        name: Tool name on tool messages.
    """

    role: MessageRole
    content: str | None = None
    tool_calls: tuple[ToolCall, ...] | None = None
    tool_call_id: str | None = None
    name: str | None = None

    def __post_init__(self) -> None:
        if self.tool_calls is not None and not isinstance(self.tool_calls, tuple):
            object.__setattr__(self, "tool_calls", tuple(self.tool_calls))

    @property
    def has_tool_calls(self) -> bool:
        return bool(self.tool_calls)

    def to_chat_param(self) -> ChatCompletionMessageParam:
        """Convert to OpenAI's ChatCompletionMessageParam format."""
        payload: dict[str, Any] = {"role": self.role, "content": self.content}
        if self.tool_calls:
            payload["tool_calls"] = [call.to_chat_param() for call in self.tool_calls]
        if self.tool_call_id is not None:
            payload["tool_call_id"] = self.tool_call_id
        if self.name is not None:
            payload["name"] = self.name
        return payload  # type: ignore[return-value]

    @classmethod
    def from_chat_param(cls, param: Mapping[str, Any]) -> Message:
        """Create a Message from OpenAI's ChatCompletionMessageParam format."""
        raw_calls = param.get("tool_calls")
        tool_calls = None
        if raw_calls:
            tool_calls = tuple(ToolCall.from_chat_param(call) for call in raw_calls)
        content = param.get("content")
        return cls(
            role=param.get("role", "user"),  # type: ignore[arg-type]
            content=None if content is None else str(content),
            tool_calls=tool_calls,
            tool_call_id=param.get("tool_call_id"),
            name=param.get("name"),
        )

    @classmethod
    def system(cls, content: str) -> Message:
        return cls(role="system", content=content)

    @classmethod
    def user(cls, content: str) -> Message:
        return cls(role="user", content=content)

    @classmethod
    def assistant(cls, content: str | None, tool_calls: Sequence[ToolCall] | None = None) -> Message:
        return cls(
            role="assistant",
            content=content,
            tool_calls=tuple(tool_calls) if tool_calls else None,
        )

    @classmethod
    def tool(cls, content: str, tool_call_id: str, name: str | None = None) -> Message:
        return cls(role="tool", content=content, tool_call_id=tool_call_id, name=name)


# -----------------------------------------------------------------------------
# Model Response Types
# -----------------------------------------------------------------------------


class TurnKind(str, Enum):
    """What an assistant turn asks the orchestrator to do next."""

    TOOL_CALLS = "tool_calls"
    FINAL_TEXT = "final_text"
    EMPTY = "empty"


@dataclass(slots=True, frozen=True)
class AssistantTurn:
    """Normalized assistant choice returned by the model client.

    Attributes:
        content: The text content of the response ("" when absent).
        tool_calls: Tool calls in the order the model listed them.
        finish_reason: Why the model stopped generating.
        model: Model that generated the response.
    """

    content: str = ""
    tool_calls: tuple[ToolCall, ...] = ()
    finish_reason: str | None = None
    model: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.tool_calls, tuple):
            object.__setattr__(self, "tool_calls", tuple(self.tool_calls))

    @property
    def kind(self) -> TurnKind:
        if self.tool_calls:
            return TurnKind.TOOL_CALLS
        if self.content.strip():
            return TurnKind.FINAL_TEXT
        return TurnKind.EMPTY

    def to_message(self) -> Message:
        """Convert the turn to an assistant Message for the transcript."""
        return Message.assistant(self.content, tool_calls=self.tool_calls or None)


# -----------------------------------------------------------------------------
# Run Output Types
# -----------------------------------------------------------------------------


@dataclass(slots=True, frozen=True)
class ActionRecord:
    """Audit entry for one attempted tool call.

    Attributes:
        tool_name: Name of the requested tool.
        arguments: Parsed arguments (empty when they could not be parsed).
        result: Outcome, including the disabled result for dry-runs.
        call_id: Correlation id of the originating tool call.
    """

    tool_name: str
    arguments: Mapping[str, Any]
    result: ToolResult
    call_id: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for logging and presentation."""
        return {
            "tool_name": self.tool_name,
            "arguments": dict(self.arguments),
            "result": self.result.to_dict(),
            "call_id": self.call_id,
        }


class StopReason(str, Enum):
    FINAL_TEXT = "final_text"
    EMPTY = "empty"
    STEP_LIMIT = "step_limit"


@dataclass(slots=True, frozen=True)
class RunResult:
    """Output of one orchestration run.

    Attributes:
        history: Transcript to persist, including intermediate tool traffic.
        final_text: Assistant text, "" for an empty turn, or the step-limit sentinel.
        actions_applied: One record per attempted tool call, in call order.
        rounds: Number of model calls made.
        stop_reason: Which terminal condition ended the run.
    """

    history: tuple[Message, ...]
    final_text: str
    actions_applied: tuple[ActionRecord, ...] = ()
    rounds: int = 0
    stop_reason: StopReason = StopReason.FINAL_TEXT

    def __post_init__(self) -> None:
        if not isinstance(self.history, tuple):
            object.__setattr__(self, "history", tuple(self.history))
        if not isinstance(self.actions_applied, tuple):
            object.__setattr__(self, "actions_applied", tuple(self.actions_applied))

    @property
    def hit_step_limit(self) -> bool:
        return self.stop_reason is StopReason.STEP_LIMIT
