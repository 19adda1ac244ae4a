"""Tool-related data models."""

from typing import Any, Callable, Dict, Optional, Type

from pydantic import BaseModel, ConfigDict
from mcp.types import Tool as MCPTool


class ToolDescriptor(BaseModel):
    """
    The static, client-facing description of a tool.

    Attributes:
        name: The unique name of the tool.
        description: A brief description of what the tool does.
        input_schema: JSON schema of the tool's arguments.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    input_schema: Dict[str, Any]

    def to_mcp(self) -> MCPTool:
        """Converts the descriptor into the MCP wire type."""
        return MCPTool(name=self.name, description=self.description, inputSchema=self.input_schema)


class ToolDefinition(BaseModel):
    """
    A registered tool: descriptor plus the machinery to run it.

    Attributes:
        descriptor: What clients see when listing tools.
        func: The coroutine function implementing the tool.
        args_model: Pydantic model used to parse raw arguments before ``func`` runs.
        error_label: Prefix of the message returned when the provider fails.
        usage: Short argument shape shown when arguments are rejected.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    descriptor: ToolDescriptor
    func: Callable[..., Any]
    args_model: Type[BaseModel]
    error_label: str
    usage: Optional[str] = None

    @property
    def name(self) -> str:
        return self.descriptor.name
