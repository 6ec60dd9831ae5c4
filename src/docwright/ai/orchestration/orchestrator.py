"""Chat Orchestrator: the bounded request/execute/respond loop.

One run turns a user message into final assistant text plus the list of tool
actions attempted along the way. Each round queries the model once; when the
model asks for tools they run strictly in the order listed and their results
are appended as tool messages, positionally aligned with the request, before
the next round. The loop never exceeds ``max_rounds`` model calls.
"""

from __future__ import annotations

import json
import logging
import uuid
from enum import Enum, auto
from typing import Any, Mapping, Protocol, Sequence, runtime_checkable

from ..tools.base import ToolResult
from .tool_dispatcher import ToolDispatcher, parse_tool_arguments
from .types import ActionRecord, AssistantTurn, Message, RunResult, StopReason, ToolCall, TurnKind

__all__ = [
    "MAX_ROUNDS",
    "STEP_LIMIT_MESSAGE",
    "ModelClient",
    "OrchestratorState",
    "ChatOrchestrator",
]

LOGGER = logging.getLogger(__name__)

MAX_ROUNDS = 6
STEP_LIMIT_MESSAGE = "Stopped after reaching the maximum number of tool steps."


@runtime_checkable
class ModelClient(Protocol):
    """Anything that turns a transcript into one assistant turn.

    :class:`docwright.ai.client.AIClient` conforms to this protocol.
    """

    async def complete(
        self,
        messages: Sequence[Message],
        *,
        tools: Sequence[Mapping[str, Any]] | None = None,
    ) -> AssistantTurn:
        ...


class OrchestratorState(Enum):
    AWAITING_MODEL = auto()
    EXECUTING_TOOLS = auto()
    TERMINAL = auto()


class ChatOrchestrator:
    """Drives the bounded tool-calling loop for one document conversation.

    Example:
        >>> orchestrator = ChatOrchestrator(client, dispatcher, system_prompt=prompt)
        >>> result = await orchestrator.run(history, "Add a heading", catalog, edits_allowed=True)
        >>> print(result.final_text)
    """

    def __init__(
        self,
        client: ModelClient,
        dispatcher: ToolDispatcher,
        *,
        system_prompt: str | None = None,
        max_rounds: int = MAX_ROUNDS,
    ) -> None:
        if max_rounds < 1:
            raise ValueError("max_rounds must be at least 1")
        self._client = client
        self._dispatcher = dispatcher
        self._system_prompt = system_prompt
        self._max_rounds = max_rounds

    @property
    def max_rounds(self) -> int:
        return self._max_rounds

    async def run(
        self,
        prior_messages: Sequence[Message],
        user_text: str,
        tool_catalog: Sequence[Mapping[str, Any]],
        *,
        edits_allowed: bool,
    ) -> RunResult:
        """Run the loop until the model answers, goes quiet, or the budget runs out.

        Args:
            prior_messages: Persisted conversation, used verbatim.
            user_text: The new user message; must not be blank.
            tool_catalog: Tool definitions advertised to the model.
            edits_allowed: When false, tool calls are acknowledged with the
                disabled result and the dispatcher is never invoked.

        Returns:
            RunResult with the transcript to persist, final text and actions.

        Raises:
            ValueError: If ``user_text`` is blank.
            Exception: Whatever the model client raises; model failures are fatal.
        """
        if not user_text or not user_text.strip():
            raise ValueError("user_text must not be empty")

        run_id = uuid.uuid4().hex[:8]
        history: list[Message] = list(prior_messages)
        history.append(Message.user(user_text))
        actions: list[ActionRecord] = []
        catalog = list(tool_catalog)

        state = OrchestratorState.AWAITING_MODEL
        final_text = STEP_LIMIT_MESSAGE
        stop_reason = StopReason.STEP_LIMIT
        rounds = 0
        pending: tuple[ToolCall, ...] = ()

        while rounds < self._max_rounds and state is not OrchestratorState.TERMINAL:
            if state is OrchestratorState.AWAITING_MODEL:
                rounds += 1
                LOGGER.debug("Run %s round %d: %d message(s)", run_id, rounds, len(history))
                turn = await self._client.complete(self._transcript(history), tools=catalog or None)
                kind = turn.kind

                if kind is TurnKind.TOOL_CALLS:
                    history.append(turn.to_message())
                    pending = turn.tool_calls
                    state = OrchestratorState.EXECUTING_TOOLS
                elif kind is TurnKind.FINAL_TEXT:
                    history.append(turn.to_message())
                    final_text = turn.content
                    stop_reason = StopReason.FINAL_TEXT
                    state = OrchestratorState.TERMINAL
                else:
                    final_text = ""
                    stop_reason = StopReason.EMPTY
                    state = OrchestratorState.TERMINAL

            if state is OrchestratorState.EXECUTING_TOOLS:
                for call in pending:
                    record = await self._run_tool_call(call, edits_allowed=edits_allowed)
                    actions.append(record)
                    history.append(
                        Message.tool(
                            content=_serialize_result(record.result),
                            tool_call_id=call.id,
                            name=call.name,
                        )
                    )
                state = OrchestratorState.AWAITING_MODEL

        if stop_reason is StopReason.STEP_LIMIT:
            LOGGER.warning("Run %s reached the round limit (%d)", run_id, self._max_rounds)
        else:
            LOGGER.info(
                "Run %s finished after %d round(s): %s, %d action(s)",
                run_id,
                rounds,
                stop_reason.value,
                len(actions),
            )

        return RunResult(
            history=tuple(history),
            final_text=final_text,
            actions_applied=tuple(actions),
            rounds=rounds,
            stop_reason=stop_reason,
        )

    def _transcript(self, history: Sequence[Message]) -> list[Message]:
        if self._system_prompt:
            return [Message.system(self._system_prompt), *history]
        return list(history)

    async def _run_tool_call(self, call: ToolCall, *, edits_allowed: bool) -> ActionRecord:
        arguments = parse_tool_arguments(call.arguments)
        if edits_allowed:
            result = await self._dispatcher.dispatch(call.name, arguments)
        else:
            LOGGER.debug("Edits disabled; skipping tool %s", call.name)
            result = ToolResult.disabled()
        return ActionRecord(tool_name=call.name, arguments=arguments, result=result, call_id=call.id)


def _serialize_result(result: ToolResult) -> str:
    return json.dumps(result.to_dict(), ensure_ascii=False)
