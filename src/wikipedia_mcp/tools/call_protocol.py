"""Data models for tool execution.

A dispatched call ends in exactly one of three outcomes. ``ToolSuccess`` and
``ToolFailure`` both travel as a normal tool result (the latter flagged as an
error); ``ProtocolFault`` rejects the call as a JSON-RPC error.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union

from mcp.types import INTERNAL_ERROR, INVALID_PARAMS, METHOD_NOT_FOUND


@dataclass(frozen=True)
class ToolCallRequest:
    """Represents a normalized tool call request from a client."""

    name: str
    arguments: Optional[Mapping[str, Any]]
    call_id: Optional[str] = None


@dataclass(frozen=True)
class ToolSuccess:
    """The tool ran and produced a JSON-serializable payload."""

    name: str
    payload: Any


@dataclass(frozen=True)
class ToolFailure:
    """The tool reached the provider, which failed. Reported inside a normal result."""

    name: str
    message: str


@dataclass(frozen=True)
class ProtocolFault:
    """The call was rejected before or outside provider interaction."""

    code: int
    message: str

    @classmethod
    def method_not_found(cls, name: str) -> ProtocolFault:
        return cls(METHOD_NOT_FOUND, f"Unknown tool: {name}")

    @classmethod
    def invalid_params(cls, message: str) -> ProtocolFault:
        return cls(INVALID_PARAMS, message)

    @classmethod
    def internal_error(cls, message: str) -> ProtocolFault:
        return cls(INTERNAL_ERROR, f"Internal error: {message}")


ToolOutcome = Union[ToolSuccess, ToolFailure, ProtocolFault]
