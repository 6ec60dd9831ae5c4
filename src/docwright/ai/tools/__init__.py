"""Document tools exposed to the model."""

from .base import DocumentSurface, Location, ToolResult
from .errors import ErrorCode, ToolError
from .tool_registry import TOOL_CATALOG, ParameterSchema, ToolRegistration, ToolRegistry, ToolSchema
from .tool_wiring import create_default_registry, register_document_tools

__all__ = [
    "DocumentSurface",
    "Location",
    "ToolResult",
    "ErrorCode",
    "ToolError",
    "TOOL_CATALOG",
    "ParameterSchema",
    "ToolRegistration",
    "ToolRegistry",
    "ToolSchema",
    "create_default_registry",
    "register_document_tools",
]
