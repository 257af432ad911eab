# =============================================================================
# core/dispatcher.py - Tool Dispatcher
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Receives a tool invocation (name + arguments) and produces a ToolResult.
#   Every invocation runs the same linear steps; nothing persists between
#   calls:
#
#     1. Look up the ToolDefinition      → "Unknown tool: <name>" if absent
#     2. Validate arguments, apply defaults
#     3. Run the tool's handler          → Ok(text) | Err(message)
#     4. Convert the Result to a ToolResult, exactly once here
#
#   This is the single failure path of the server: no exception raised
#   while serving a call is allowed to cross the tool boundary.
# =============================================================================

import logging
from typing import Any, Mapping, Optional

from core import registry
from core.client import FinancialDatasetsClient
from core.handlers import HANDLERS, Handler
from core.models import Err, Ok, Result, ToolDefinition, ToolInvocation, ToolResult

logger = logging.getLogger(__name__)

_JSON_TYPES: dict[str, tuple[type, ...]] = {
    "string": (str,),
    "number": (int, float),
    "integer": (int,),
    "boolean": (bool,),
    "array": (list, tuple),
    "object": (dict,),
}


def _matches_type(value: Any, json_type: str) -> bool:
    expected = _JSON_TYPES.get(json_type)
    if expected is None:
        return True
    if json_type in ("number", "integer") and isinstance(value, bool):
        return False
    return isinstance(value, expected)


def validate_arguments(
    definition: ToolDefinition, arguments: Optional[Mapping[str, Any]]
) -> Result[dict[str, Any]]:
    """Check ``arguments`` against the tool's schema.

    Returns the arguments with defaults filled in (and integral floats
    turned into ints), or Err describing the first problem found.
    Array items are not inspected.
    """
    arguments = dict(arguments or {})
    properties = definition.properties

    unexpected = sorted(set(arguments) - set(properties))
    if unexpected:
        return Err(f"Unexpected argument(s) for {definition.name}: {', '.join(unexpected)}")

    resolved: dict[str, Any] = {}
    for name, schema in properties.items():
        value = arguments.get(name)
        if value is None:
            if name in definition.required:
                return Err(f"Missing required argument: {name}")
            if "default" in schema:
                resolved[name] = schema["default"]
            continue

        json_type = schema.get("type", "")
        if not _matches_type(value, json_type):
            return Err(f"Argument '{name}' must be of type {json_type}")
        if "enum" in schema and value not in schema["enum"]:
            allowed = ", ".join(str(v) for v in schema["enum"])
            return Err(f"Argument '{name}' must be one of: {allowed}")
        if isinstance(value, float) and value.is_integer():
            value = int(value)
        resolved[name] = value

    return Ok(resolved)


class ToolDispatcher:
    """Routes tool calls to handlers and owns Result → ToolResult conversion."""

    def __init__(
        self,
        client: FinancialDatasetsClient,
        handlers: Optional[Mapping[str, Handler]] = None,
    ):
        self.client = client
        self.handlers = dict(handlers if handlers is not None else HANDLERS)

    def list_tools(self) -> list[dict[str, Any]]:
        return registry.tool_catalog()

    def call(self, name: str, arguments: Optional[Mapping[str, Any]] = None) -> ToolResult:
        definition = registry.get_tool(name)
        handler = self.handlers.get(name)
        if definition is None or handler is None:
            logger.warning("Unknown tool requested: %s", name)
            return ToolResult.error(f"Unknown tool: {name}")

        try:
            validated = validate_arguments(definition, arguments)
            if isinstance(validated, Err):
                result: Result[str] = validated
            else:
                result = handler(self.client, validated.value)
        except Exception as exc:  # last line of defence for the tool boundary
            logger.exception("Tool %s raised", name)
            result = Err(str(exc) or exc.__class__.__name__)

        if isinstance(result, Ok):
            return ToolResult.text(result.value)
        return ToolResult.error(f"Error: {result.message}")

    def invoke(self, invocation: ToolInvocation) -> ToolResult:
        return self.call(invocation.name, invocation.arguments)
