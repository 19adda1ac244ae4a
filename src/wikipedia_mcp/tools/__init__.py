from .models import ToolDefinition, ToolDescriptor
from .call_protocol import ToolCallRequest, ToolSuccess, ToolFailure, ProtocolFault, ToolOutcome
from .registry import ToolRegistry
from .dispatcher import ToolDispatcher
from .images import ImageCollector, BATCH_SIZE, DEFAULT_IMAGE_LIMIT, ALLOWED_EXTENSIONS
from .handlers import WikipediaTools
from .schema import SchemaValidator

__all__ = [
    "ToolDefinition",
    "ToolDescriptor",
    "ToolCallRequest",
    "ToolSuccess",
    "ToolFailure",
    "ProtocolFault",
    "ToolOutcome",
    "ToolRegistry",
    "ToolDispatcher",
    "ImageCollector",
    "BATCH_SIZE",
    "DEFAULT_IMAGE_LIMIT",
    "ALLOWED_EXTENSIONS",
    "WikipediaTools",
    "SchemaValidator",
]
