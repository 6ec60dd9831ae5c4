"""Tool Dispatcher.

Routes a tool name and its raw arguments to the registered handler,
validating arguments through the tool's argument type and normalizing every
outcome into a :class:`ToolResult`. No exception escapes ``dispatch``.
"""

from __future__ import annotations

import json
import logging
import time
from typing import Any, Mapping, Protocol

from ..tools.base import DocumentSurface, ToolResult
from ..tools.errors import ErrorCode, ToolError, UnknownToolError
from ..tools.tool_registry import ToolRegistration, ToolRegistry

LOGGER = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Argument Parsing
# -----------------------------------------------------------------------------


def parse_tool_arguments(arguments: str | Mapping[str, Any] | None) -> dict[str, Any]:
    """Parse tool arguments leniently.

    Unparseable text, or JSON that is not an object, yields an empty mapping so
    each tool falls back to its defaults.

    Args:
        arguments: JSON text, an already-parsed mapping, or ``None``.

    Returns:
        Parsed arguments dictionary.
    """
    if arguments is None:
        return {}
    if isinstance(arguments, Mapping):
        return dict(arguments)
    if not isinstance(arguments, str) or not arguments.strip():
        return {}

    try:
        parsed = json.loads(arguments)
    except json.JSONDecodeError as exc:
        LOGGER.warning("Ignoring unparseable tool arguments: %s", exc)
        return {}
    if not isinstance(parsed, dict):
        LOGGER.warning("Ignoring tool arguments of type %s; expected an object", type(parsed).__name__)
        return {}
    return parsed


# -----------------------------------------------------------------------------
# Dispatch Listener
# -----------------------------------------------------------------------------


class DispatchListener(Protocol):
    """Callback protocol for dispatch events."""

    def on_tool_start(self, tool_name: str, arguments: Mapping[str, Any]) -> None:
        """Called when a tool starts execution."""
        ...

    def on_tool_complete(self, tool_name: str, result: ToolResult) -> None:
        """Called when a tool finishes, successfully or not."""
        ...


# -----------------------------------------------------------------------------
# Tool Dispatcher
# -----------------------------------------------------------------------------


class ToolDispatcher:
    """Dispatches tool calls to registered handlers.

    Example:
        dispatcher = ToolDispatcher(registry=create_default_registry(), surface=surface)
        result = await dispatcher.dispatch("insert_heading", '{"text": "Intro"}')
    """

    def __init__(
        self,
        *,
        registry: ToolRegistry,
        surface: DocumentSurface,
        listener: DispatchListener | None = None,
    ) -> None:
        self._registry = registry
        self._surface = surface
        self._listener = listener

    @property
    def registry(self) -> ToolRegistry:
        return self._registry

    @property
    def surface(self) -> DocumentSurface:
        return self._surface

    def set_listener(self, listener: DispatchListener | None) -> None:
        """Set or replace the dispatch event listener."""
        self._listener = listener

    async def dispatch(
        self,
        tool_name: str,
        arguments: str | Mapping[str, Any] | None = None,
    ) -> ToolResult:
        """Dispatch a tool call.

        Args:
            tool_name: Name of the tool to execute.
            arguments: Raw JSON text or a parsed mapping.

        Returns:
            ToolResult with the execution outcome.
        """
        parsed = parse_tool_arguments(arguments)
        self._notify_start(tool_name, parsed)
        start_time = time.perf_counter()

        registration = self._registry.get_registration(tool_name)
        if registration is None:
            error = UnknownToolError.for_name(tool_name)
            LOGGER.warning("Model requested unknown tool %r", tool_name)
            result = ToolResult.from_error(error)
        else:
            result = await self._execute(registration, parsed)

        elapsed_ms = (time.perf_counter() - start_time) * 1000.0
        LOGGER.debug("Tool %s finished ok=%s in %.1fms", tool_name, result.ok, elapsed_ms)
        self._notify_complete(tool_name, result)
        return result

    async def _execute(self, registration: ToolRegistration, arguments: Mapping[str, Any]) -> ToolResult:
        tool_name = registration.name
        try:
            args = registration.arguments.from_arguments(arguments)
            data = registration.handler(self._surface, args)
            if hasattr(data, "__await__"):
                data = await data
        except ToolError as exc:
            LOGGER.info("Tool %s failed: %s %s", tool_name, exc, exc.details or "")
            return ToolResult.from_error(exc)
        except Exception as exc:
            LOGGER.exception("Tool %s failed unexpectedly", tool_name)
            message = str(exc) or type(exc).__name__
            return ToolResult.failure(message, code=ErrorCode.INTERNAL_ERROR)
        return ToolResult.success(data)

    def _notify_start(self, tool_name: str, arguments: Mapping[str, Any]) -> None:
        if self._listener is None:
            return
        try:
            self._listener.on_tool_start(tool_name, arguments)
        except Exception:
            LOGGER.debug("Listener on_tool_start failed", exc_info=True)

    def _notify_complete(self, tool_name: str, result: ToolResult) -> None:
        if self._listener is None:
            return
        try:
            self._listener.on_tool_complete(tool_name, result)
        except Exception:
            LOGGER.debug("Listener on_tool_complete failed", exc_info=True)


__all__ = ["DispatchListener", "ToolDispatcher", "parse_tool_arguments"]
