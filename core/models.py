# =============================================================================
# core/models.py - Data Models (the "nouns" of the system)
# =============================================================================
#
# These dataclasses define the shape of everything that crosses a boundary
# in the server: the tool catalog advertised to the assistant, the result
# envelope returned for each call, and the small Ok/Err result type that
# handlers use instead of letting exceptions escape.
#
# Upstream API payloads are NOT modelled here.  Their shape depends on which
# optional fields the API populated, so the formatters check for presence
# explicitly (see core/formatting.py).
# =============================================================================

import copy
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, TypeVar, Union


# -----------------------------------------------------------------------------
# ToolDefinition: one entry in the tool catalog
# -----------------------------------------------------------------------------
# Built once at import time (core/registry.py) and never mutated.  The
# input_schema is plain JSON Schema so it can be advertised losslessly.
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class ToolDefinition:
    """A named, schema-described operation callable by the assistant."""

    name: str                          # Stable identifier, e.g. "get_stock_price"
    description: str                   # Read by the LLM to decide WHEN to call
    input_schema: dict[str, Any]       # JSON Schema: properties, enums, defaults, required

    @property
    def properties(self) -> dict[str, Any]:
        return self.input_schema.get("properties", {})

    @property
    def required(self) -> list[str]:
        return list(self.input_schema.get("required", []))

    def to_dict(self) -> dict[str, Any]:
        """Wire form of the definition (deep copy, safe to hand out)."""
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": copy.deepcopy(self.input_schema),
        }


@dataclass
class ToolInvocation:
    """A single tool call: name plus raw arguments from the caller."""

    name: str
    arguments: dict[str, Any] = field(default_factory=dict)


# -----------------------------------------------------------------------------
# ExternalEndpoint: where a tool's data lives upstream
# -----------------------------------------------------------------------------
class AuthMode(str, Enum):
    """How the API key is attached to an outbound request."""

    QUERY = "query"                    # ?api_key=...
    HEADER = "header"                  # X-API-KEY: ...


@dataclass(frozen=True)
class ExternalEndpoint:
    path: str
    auth_mode: AuthMode = AuthMode.QUERY


# -----------------------------------------------------------------------------
# ToolResult: the only value returned across the tool boundary
# -----------------------------------------------------------------------------
@dataclass
class TextContent:
    text: str
    type: str = "text"


@dataclass
class ToolResult:
    """Result envelope for one invocation.

    Callers must treat ``is_error=True`` as a failure regardless of the
    upstream HTTP status.
    """

    content: list[TextContent] = field(default_factory=list)
    is_error: bool = False

    @classmethod
    def text(cls, message: str) -> "ToolResult":
        return cls(content=[TextContent(text=message)])

    @classmethod
    def error(cls, message: str) -> "ToolResult":
        return cls(content=[TextContent(text=message)], is_error=True)

    @property
    def first_text(self) -> str:
        return self.content[0].text if self.content else ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "content": [{"type": c.type, "text": c.text} for c in self.content],
            "isError": self.is_error,
        }


# -----------------------------------------------------------------------------
# Ok / Err: explicit result type for handlers and startup checks
# -----------------------------------------------------------------------------
T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Err:
    message: str


Result = Union[Ok[T], Err]
