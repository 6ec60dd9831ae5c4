"""Wire the document tool catalog to its argument types and handlers."""

from __future__ import annotations

import logging

from .insert_heading import InsertHeadingArgs, insert_heading
from .insert_image import InsertImageArgs, insert_image
from .insert_table import InsertTableArgs, insert_table
from .insert_text import InsertTextArgs, insert_text
from .replace_text import ReplaceTextArgs, replace_text
from .tool_registry import (
    INSERT_HEADING_SCHEMA,
    INSERT_IMAGE_SCHEMA,
    INSERT_TABLE_SCHEMA,
    INSERT_TEXT_SCHEMA,
    REPLACE_TEXT_SCHEMA,
    ToolRegistry,
)

LOGGER = logging.getLogger(__name__)


def register_document_tools(registry: ToolRegistry) -> ToolRegistry:
    """Register the five document tools on ``registry`` and return it."""
    registry.register(INSERT_TEXT_SCHEMA, InsertTextArgs, insert_text)
    registry.register(REPLACE_TEXT_SCHEMA, ReplaceTextArgs, replace_text)
    registry.register(INSERT_HEADING_SCHEMA, InsertHeadingArgs, insert_heading)
    registry.register(INSERT_IMAGE_SCHEMA, InsertImageArgs, insert_image)
    registry.register(INSERT_TABLE_SCHEMA, InsertTableArgs, insert_table)
    LOGGER.debug("Document tools registered: %s", registry.list_tools())
    return registry


def create_default_registry() -> ToolRegistry:
    return register_document_tools(ToolRegistry())


__all__ = ["register_document_tools", "create_default_registry"]
