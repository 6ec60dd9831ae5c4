"""Bounded chat orchestration over the document tools."""

from .orchestrator import MAX_ROUNDS, STEP_LIMIT_MESSAGE, ChatOrchestrator, ModelClient, OrchestratorState
from .tool_dispatcher import DispatchListener, ToolDispatcher, parse_tool_arguments
from .types import (
    ActionRecord,
    AssistantTurn,
    Message,
    MessageRole,
    RunResult,
    StopReason,
    ToolCall,
    TurnKind,
)

__all__ = [
    "MAX_ROUNDS",
    "STEP_LIMIT_MESSAGE",
    "ChatOrchestrator",
    "ModelClient",
    "OrchestratorState",
    "DispatchListener",
    "ToolDispatcher",
    "parse_tool_arguments",
    "ActionRecord",
    "AssistantTurn",
    "Message",
    "MessageRole",
    "RunResult",
    "StopReason",
    "ToolCall",
    "TurnKind",
]
