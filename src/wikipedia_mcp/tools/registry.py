"""Tool registry: turns annotated handler functions into descriptors and argument models."""

import inspect
from typing import Annotated, Any, Callable, Dict, Optional, Tuple, cast, get_args, get_origin

import jsonref  # type: ignore
from pydantic import Field, create_model
from pydantic.fields import FieldInfo

from ..exceptions import ToolRegistrationError, ToolValidationError
from ..logger import get_logger
from .models import ToolDefinition, ToolDescriptor
from .schema import SchemaValidator

logger = get_logger(__name__)


class ToolRegistry:
    """
    A central registry of the tools exposed to clients.

    This class holds the descriptors published by ``tools/list`` and maps tool
    names to the handlers and argument models used by the dispatcher.
    Registration order is the listing order.
    """

    def __init__(self) -> None:
        """Initialize the ToolRegistry."""
        self.tools: Dict[str, ToolDefinition] = {}

    def register(
        self,
        func: Callable[..., Any],
        *,
        name: Optional[str] = None,
        description: Optional[str] = None,
        error_label: str,
        usage: Optional[str] = None,
    ) -> ToolDefinition:
        """
        Register a handler as a tool.

        Every handler parameter must be annotated as
        ``Annotated[Type, Field(description="...")]``; the annotations become
        both the published JSON schema and the argument parser.

        Args:
            func: The handler implementing the tool.
            name: Tool name on the wire. Defaults to the function name.
            description: Tool description. Defaults to the handler's docstring.
            error_label: Prefix for business-error messages of this tool.
            usage: Argument shape quoted when a call is rejected, e.g. ``{ query: string }``.

        Returns:
            The stored tool definition.

        Raises:
            ToolRegistrationError: If a tool with the same name is already registered.
            ToolValidationError: If the handler lacks a description or parameter annotations.
        """
        tool = self._generate_tool_definition(func, name=name, description=description, error_label=error_label)
        if usage is not None:
            tool = tool.model_copy(update={"usage": usage})

        if tool.name in self.tools:
            msg = f"Tool '{tool.name}' is already registered."
            logger.error(msg)
            raise ToolRegistrationError(msg)

        self.tools[tool.name] = tool
        logger.info(f"Successfully registered tool: '{tool.name}'")
        return tool

    def tool(
        self, name: Optional[str] = None, *, error_label: str, usage: Optional[str] = None
    ) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        """A decorator to turn a function into a tool.

        Args:
            name: Tool name on the wire. Defaults to the function name.
            error_label: Prefix for business-error messages of this tool.
            usage: Argument shape quoted when a call is rejected.

        Returns:
            A decorator returning the original function after registering it.
        """

        def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
            self.register(func, name=name, error_label=error_label, usage=usage)
            return func

        return decorator

    def get(self, name: str) -> Optional[ToolDefinition]:
        return self.tools.get(name)

    @property
    def descriptors(self) -> Tuple[ToolDescriptor, ...]:
        """Descriptors of all registered tools, in registration order."""
        return tuple(tool.descriptor for tool in self.tools.values())

    def _generate_tool_definition(
        self, func: Callable[..., Any], name: Optional[str], description: Optional[str], error_label: str
    ) -> ToolDefinition:
        """Generate a ToolDefinition from a handler.

        Args:
            func: The handler to generate a definition for.
            name: Optional name override for the tool.
            description: Optional description override for the tool.
            error_label: Prefix for business-error messages.

        Returns:
            A ToolDefinition containing the descriptor, handler and argument model.

        Raises:
            ToolValidationError: If the handler is missing a docstring or parameter descriptions.
        """
        tool_name = name or func.__name__
        if description is None:
            description = self._get_docstring_from_func(func, tool_name)

        fields = self._build_fields(inspect.signature(func), tool_name)
        args_model = create_model(f"{tool_name}Args", **cast(Dict[str, Any], fields))
        raw_schema = args_model.model_json_schema()

        SchemaValidator.assert_no_recursive_refs(raw_schema)
        # proxies=False ensures we get a plain dict back, not JsonRef objects
        input_schema = jsonref.replace_refs(raw_schema, proxies=False)
        input_schema = SchemaValidator.sanitize_schema(input_schema)

        return ToolDefinition(
            descriptor=ToolDescriptor(name=tool_name, description=description, input_schema=input_schema),
            func=func,
            args_model=args_model,
            error_label=error_label,
        )

    @staticmethod
    def _get_docstring_from_func(func: Callable[..., Any], tool_name: str) -> str:
        doc = inspect.getdoc(func)
        if not doc:
            msg = f"Tool '{tool_name}' missing docstring. Clients need a description of what the tool does."
            logger.error(msg)
            raise ToolValidationError(msg)
        return doc

    @staticmethod
    def _build_fields(signature: inspect.Signature, tool_name: str) -> Dict[str, Any]:
        fields: Dict[str, Any] = {}
        for param_name, param in signature.parameters.items():
            if param_name == "self":
                continue
            if param.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD):
                msg = f"Parameter '{param_name}' in tool '{tool_name}' must be a named parameter."
                logger.error(msg)
                raise ToolValidationError(msg)

            annotation = param.annotation
            described = get_origin(annotation) is Annotated and any(
                isinstance(meta, FieldInfo) and meta.description for meta in get_args(annotation)[1:]
            )
            if not described:
                msg = (
                    f"Parameter '{param_name}' in tool '{tool_name}' is missing a description.\n"
                    f"Usage: {param_name}: Annotated[Type, Field(description='...')]"
                )
                logger.error(msg)
                raise ToolValidationError(msg)

            default = param.default if param.default is not inspect.Parameter.empty else ...
            fields[param_name] = (annotation, Field(default=default))
        return fields
