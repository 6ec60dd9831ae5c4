"""Declarative tool catalog and registry.

The catalog describes the five document tools advertised to the model. The
registry binds each catalog entry to the argument type that validates its
parameters and the handler that applies it to a document surface. The set of
registered names is closed once wiring is done; only the lookup by name is
dynamic.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Protocol, Sequence, runtime_checkable

from jsonschema import Draft7Validator
from jsonschema.exceptions import SchemaError

from .base import DocumentSurface, Location

LOGGER = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Tool Schema Types
# -----------------------------------------------------------------------------


@dataclass(slots=True, frozen=True)
class ParameterSchema:
    """Schema for a single tool parameter.

    Attributes:
        name: Parameter name.
        type: JSON Schema type (string, integer, number, boolean, array).
        description: Human-readable description.
        required: Whether the parameter is required.
        default: Default value if not provided.
        enum: List of allowed values.
        minimum: Minimum value for numbers.
        maximum: Maximum value for numbers.
        items: Schema for array items.
    """

    name: str
    type: str
    description: str
    required: bool = False
    default: Any = None
    enum: Sequence[Any] | None = None
    minimum: int | float | None = None
    maximum: int | float | None = None
    items: "ParameterSchema" | None = None

    def to_json_schema(self) -> dict[str, Any]:
        """Convert to JSON Schema format."""
        schema: dict[str, Any] = {"type": self.type}
        if self.description:
            schema["description"] = self.description
        if self.default is not None:
            schema["default"] = self.default
        if self.enum:
            schema["enum"] = list(self.enum)
        if self.minimum is not None:
            schema["minimum"] = self.minimum
        if self.maximum is not None:
            schema["maximum"] = self.maximum
        if self.items:
            schema["items"] = self.items.to_json_schema()
        return schema


@dataclass(slots=True, frozen=True)
class ToolSchema:
    """Complete schema for a tool.

    Attributes:
        name: Tool name (identifier).
        description: Human-readable description shown to the model.
        parameters: Parameters in advertised order.
    """

    name: str
    description: str
    parameters: tuple[ParameterSchema, ...] = ()

    def to_json_schema(self) -> dict[str, Any]:
        """Convert to JSON Schema format for OpenAI function calling."""
        properties: dict[str, Any] = {}
        required: list[str] = []

        for param in self.parameters:
            properties[param.name] = param.to_json_schema()
            if param.required:
                required.append(param.name)

        schema: dict[str, Any] = {
            "type": "object",
            "properties": properties,
            "additionalProperties": False,
        }
        if required:
            schema["required"] = required
        return schema

    def to_openai_tool(self) -> dict[str, Any]:
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.to_json_schema(),
            },
        }


# -----------------------------------------------------------------------------
# Tool Registration
# -----------------------------------------------------------------------------


@runtime_checkable
class ToolArguments(Protocol):
    """Validated, defaulted arguments for one tool."""

    @classmethod
    def from_arguments(cls, arguments: Mapping[str, Any]) -> "ToolArguments":
        ...


ToolHandler = Callable[[DocumentSurface, Any], Mapping[str, Any]]


@dataclass(slots=True, frozen=True)
class ToolRegistration:
    """A catalog entry bound to its argument type and handler."""

    schema: ToolSchema
    arguments: type[Any]
    handler: ToolHandler

    @property
    def name(self) -> str:
        return self.schema.name


class ToolRegistry:
    """Registry mapping tool names to their registrations.

    Example:
        registry = ToolRegistry()
        registry.register(INSERT_TEXT_SCHEMA, InsertTextArgs, insert_text)
        registry.to_openai_tools()
    """

    def __init__(self) -> None:
        self._tools: dict[str, ToolRegistration] = {}

    def register(self, schema: ToolSchema, arguments: type[Any], handler: ToolHandler) -> None:
        if schema.name in self._tools:
            raise ValueError(f"Tool '{schema.name}' is already registered")
        if not hasattr(arguments, "from_arguments"):
            raise TypeError(f"{arguments.__name__} does not define from_arguments()")
        try:
            Draft7Validator.check_schema(schema.to_json_schema())
        except SchemaError as exc:
            raise ValueError(f"Tool '{schema.name}' has an invalid parameter schema: {exc.message}") from exc
        self._tools[schema.name] = ToolRegistration(schema=schema, arguments=arguments, handler=handler)
        LOGGER.debug("Registered tool: %s", schema.name)

    def get_registration(self, name: str) -> ToolRegistration | None:
        return self._tools.get(name)

    def list_tools(self) -> list[str]:
        return list(self._tools)

    def to_openai_tools(self) -> list[dict[str, Any]]:
        """Convert all tools to OpenAI function calling format."""
        return [reg.schema.to_openai_tool() for reg in self._tools.values()]

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, name: object) -> bool:
        return name in self._tools


# -----------------------------------------------------------------------------
# Catalog
# -----------------------------------------------------------------------------

_LOCATIONS = [loc.value for loc in Location]


def _location_param(default: Location) -> ParameterSchema:
    return ParameterSchema(
        name="location",
        type="string",
        description=f"Where to insert: start of the document, the cursor, or the end. Defaults to {default.value}.",
        enum=_LOCATIONS,
        default=default.value,
    )


INSERT_TEXT_SCHEMA = ToolSchema(
    name="insert_text",
    description="Insert plain text into the document. Each line becomes its own paragraph.",
    parameters=(
        ParameterSchema(name="text", type="string", description="Text to insert.", required=True),
        _location_param(Location.CURSOR),
    ),
)

REPLACE_TEXT_SCHEMA = ToolSchema(
    name="replace_text",
    description=(
        "Find and replace text across the whole document body. Wrap `find` in slashes "
        "(for example /colou?r/i) or set useRegex to treat it as a regular expression."
    ),
    parameters=(
        ParameterSchema(name="find", type="string", description="Text or pattern to find.", required=True),
        ParameterSchema(name="replace", type="string", description="Replacement text.", required=True),
        ParameterSchema(
            name="useRegex",
            type="boolean",
            description="Interpret `find` as a regular expression.",
            default=False,
        ),
    ),
)

INSERT_HEADING_SCHEMA = ToolSchema(
    name="insert_heading",
    description="Insert a heading paragraph.",
    parameters=(
        ParameterSchema(name="text", type="string", description="Heading text.", required=True),
        ParameterSchema(
            name="level",
            type="integer",
            description="Heading level from 1 (largest) to 6.",
            default=2,
            minimum=1,
            maximum=6,
        ),
        _location_param(Location.CURSOR),
    ),
)

INSERT_IMAGE_SCHEMA = ToolSchema(
    name="insert_image_from_url",
    description="Download an image from a public http(s) URL and insert it.",
    parameters=(
        ParameterSchema(name="url", type="string", description="Image URL.", required=True),
        ParameterSchema(name="altText", type="string", description="Alternative text for the image."),
        ParameterSchema(name="width", type="number", description="Width in pixels.", minimum=1),
        ParameterSchema(name="height", type="number", description="Height in pixels.", minimum=1),
        _location_param(Location.END),
    ),
)

INSERT_TABLE_SCHEMA = ToolSchema(
    name="insert_table",
    description="Insert a table and optionally fill it with row-major cell text.",
    parameters=(
        ParameterSchema(name="rows", type="integer", description="Number of rows.", required=True, minimum=1),
        ParameterSchema(name="cols", type="integer", description="Number of columns.", required=True, minimum=1),
        ParameterSchema(
            name="data",
            type="array",
            description="Rows of cell text. Missing cells are left empty.",
            items=ParameterSchema(
                name="row",
                type="array",
                description="",
                items=ParameterSchema(name="cell", type="string", description=""),
            ),
        ),
        _location_param(Location.END),
    ),
)

TOOL_CATALOG: dict[str, ToolSchema] = {
    schema.name: schema
    for schema in (
        INSERT_TEXT_SCHEMA,
        REPLACE_TEXT_SCHEMA,
        INSERT_HEADING_SCHEMA,
        INSERT_IMAGE_SCHEMA,
        INSERT_TABLE_SCHEMA,
    )
}


__all__ = [
    "ParameterSchema",
    "ToolSchema",
    "ToolArguments",
    "ToolHandler",
    "ToolRegistration",
    "ToolRegistry",
    "INSERT_TEXT_SCHEMA",
    "REPLACE_TEXT_SCHEMA",
    "INSERT_HEADING_SCHEMA",
    "INSERT_IMAGE_SCHEMA",
    "INSERT_TABLE_SCHEMA",
    "TOOL_CATALOG",
]
