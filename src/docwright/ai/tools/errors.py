"""Standardized error types for document tools.

This module provides a small hierarchy of error classes with consistent
error codes for tool responses. Tools raise these; the dispatcher
converts them into failed :class:`~docwright.ai.tools.base.ToolResult` values.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


# -----------------------------------------------------------------------------
# Error Code Constants
# -----------------------------------------------------------------------------

class ErrorCode:
    """Constants for error codes used in tool responses."""

    # Dispatch errors
    UNKNOWN_TOOL = "unknown_tool"
    EDITS_DISABLED = "edits_disabled"

    # Parameter errors
    INVALID_PARAMETER = "invalid_parameter"
    MISSING_PARAMETER = "missing_parameter"

    # Search errors
    PATTERN_INVALID = "pattern_invalid"

    # Surface errors
    IMAGE_FETCH_FAILED = "image_fetch_failed"

    # General errors
    INTERNAL_ERROR = "internal_error"


# -----------------------------------------------------------------------------
# Base Error Class
# -----------------------------------------------------------------------------

@dataclass
class ToolError(Exception):
    """Base exception class for all tool errors.

    Attributes:
        error_code: Machine-readable error identifier.
        message: Human-readable error description.
        details: Additional structured error information.
    """

    error_code: str
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        Exception.__init__(self, self.message)

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"


# -----------------------------------------------------------------------------
# Dispatch Errors
# -----------------------------------------------------------------------------

@dataclass
class UnknownToolError(ToolError):
    """Raised when the model requests a tool that is not in the catalog."""

    error_code: str = field(default=ErrorCode.UNKNOWN_TOOL)
    message: str = field(default="Unknown tool")
    details: dict[str, Any] = field(default_factory=dict)

    tool_name: str | None = field(default=None)

    @classmethod
    def for_name(cls, name: str) -> "UnknownToolError":
        return cls(message=f"Unknown tool: {name}", tool_name=name)


# -----------------------------------------------------------------------------
# Parameter Errors
# -----------------------------------------------------------------------------

@dataclass
class MissingParameterError(ToolError):
    """Raised when a required parameter is absent or blank."""

    error_code: str = field(default=ErrorCode.MISSING_PARAMETER)
    message: str = field(default="A required parameter is missing")
    details: dict[str, Any] = field(default_factory=dict)

    parameter: str | None = field(default=None)

    @classmethod
    def for_parameter(cls, name: str) -> "MissingParameterError":
        return cls(
            message=f"Missing required parameter: {name}",
            details={"parameter": name},
            parameter=name,
        )


@dataclass
class InvalidParameterError(ToolError):
    """Raised when a parameter value cannot be used."""

    error_code: str = field(default=ErrorCode.INVALID_PARAMETER)
    message: str = field(default="Invalid parameter value")
    details: dict[str, Any] = field(default_factory=dict)

    parameter: str | None = field(default=None)


@dataclass
class PatternInvalidError(ToolError):
    """Raised when a regular expression fails to compile."""

    error_code: str = field(default=ErrorCode.PATTERN_INVALID)
    message: str = field(default="Invalid regular expression")
    details: dict[str, Any] = field(default_factory=dict)

    pattern: str | None = field(default=None)


# -----------------------------------------------------------------------------
# Surface Errors
# -----------------------------------------------------------------------------

@dataclass
class ImageFetchError(ToolError):
    """Raised when image bytes cannot be downloaded."""

    error_code: str = field(default=ErrorCode.IMAGE_FETCH_FAILED)
    message: str = field(default="Failed to fetch image")
    details: dict[str, Any] = field(default_factory=dict)

    url: str | None = field(default=None)
    status_code: int | None = field(default=None)


__all__ = [
    "ErrorCode",
    "ToolError",
    "UnknownToolError",
    "MissingParameterError",
    "InvalidParameterError",
    "PatternInvalidError",
    "ImageFetchError",
]
