"""Wikipedia MCP server - read-only Wikipedia lookups exposed as MCP tools."""

__version__ = "1.0.0"

from .config import Settings, load_settings
from .logger import get_logger, setup_logging
from .exceptions import WikipediaMCPError, ProviderError, PageNotFoundError
from .provider import WikipediaClient, ImageRecord
from .tools import ToolDispatcher, ToolRegistry, WikipediaTools, ImageCollector
from .server import create_server, serve
from .sequencer import ResponseSequencer, SequencerSession, StdioSequencerDriver, default_steps, render_report

__all__ = [
    "__version__",
    "Settings",
    "load_settings",
    "get_logger",
    "setup_logging",
    "WikipediaMCPError",
    "ProviderError",
    "PageNotFoundError",
    "WikipediaClient",
    "ImageRecord",
    "ToolDispatcher",
    "ToolRegistry",
    "WikipediaTools",
    "ImageCollector",
    "create_server",
    "serve",
    "ResponseSequencer",
    "SequencerSession",
    "StdioSequencerDriver",
    "default_steps",
    "render_report",
]
