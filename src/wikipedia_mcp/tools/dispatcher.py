"""Routes tool calls to handlers and classifies every way a call can end."""

import inspect
from typing import Any, Mapping, Tuple

from pydantic import ValidationError

from ..exceptions import ProviderError
from ..logger import get_logger
from .call_protocol import ProtocolFault, ToolCallRequest, ToolFailure, ToolOutcome, ToolSuccess
from .models import ToolDefinition, ToolDescriptor
from .registry import ToolRegistry

logger = get_logger(__name__)


class ToolDispatcher:
    """Stateless dispatcher over a tool registry.

    ``call_tool`` never raises: unknown tools, rejected arguments and
    unexpected exceptions become a ``ProtocolFault``, provider failures a
    ``ToolFailure``, everything else a ``ToolSuccess``.
    """

    def __init__(self, registry: ToolRegistry):
        self._registry = registry
        self._descriptors = registry.descriptors

    def list_tools(self) -> Tuple[ToolDescriptor, ...]:
        """Return the static tool descriptors."""
        return self._descriptors

    async def call_tool(self, request: ToolCallRequest) -> ToolOutcome:
        """Validate and run a single tool call.

        Args:
            request: Tool name and raw arguments as received from the client.

        Returns:
            The tagged outcome of the call.
        """
        logger.debug(f"Handling tool call: {request.name} (ID: {request.call_id})")

        tool = self._registry.get(request.name)
        if tool is None:
            logger.warning(f"Tool '{request.name}' not found in registry.")
            return ProtocolFault.method_not_found(request.name)

        try:
            raw = dict(request.arguments) if isinstance(request.arguments, Mapping) else request.arguments
            args = tool.args_model.model_validate(raw)
        except ValidationError as e:
            msg = self._describe_invalid_arguments(tool, e)
            logger.warning(msg)
            return ProtocolFault.invalid_params(msg)

        kwargs = {field: getattr(args, field) for field in type(args).model_fields}
        try:
            logger.info(f"Executing tool '{tool.name}'...")
            payload = await self._execute(tool, kwargs)
        except ProviderError as e:
            logger.warning(f"Provider error in '{tool.name}': {e}")
            return ToolFailure(name=tool.name, message=f"{tool.error_label}: {e}")
        except Exception as e:
            logger.error("Error handling tool request '%s': %s", tool.name, e, exc_info=True)
            return ProtocolFault.internal_error(str(e))

        logger.info(f"Tool '{tool.name}' executed successfully.")
        return ToolSuccess(name=tool.name, payload=payload)

    @staticmethod
    async def _execute(tool: ToolDefinition, kwargs: dict[str, Any]) -> Any:
        result = tool.func(**kwargs)
        if inspect.isawaitable(result):
            result = await result
        return result

    @staticmethod
    def _describe_invalid_arguments(tool: ToolDefinition, error: ValidationError) -> str:
        details = "; ".join(
            f"{'.'.join(str(part) for part in err['loc']) or 'arguments'}: {err['msg']}" for err in error.errors()
        )
        expected = f" Expected {tool.usage}" if tool.usage else ""
        return f"Invalid {tool.name} arguments.{expected}: {details}"
