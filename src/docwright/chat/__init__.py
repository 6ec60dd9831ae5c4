"""Conversation entry points."""

from .assistant import DocumentAssistant

__all__ = ["DocumentAssistant"]
