"""
Custom exception classes for the Wikipedia MCP server.

Argument problems and unknown tools are reported to clients as protocol
faults, provider problems as business errors inside a normal tool result.
The hierarchy below keeps those two families apart.
"""


class WikipediaMCPError(Exception):
    """Base exception for all errors raised by this package."""

    pass


class ConfigurationError(WikipediaMCPError):
    """Raised when settings read from the environment are invalid."""

    pass


class ToolRegistrationError(WikipediaMCPError):
    """Raised when there is an error registering a tool."""

    pass


class ToolValidationError(WikipediaMCPError):
    """Raised when a tool definition or its parameter schema is invalid."""

    pass


class ProviderError(WikipediaMCPError):
    """Raised when the content provider fails or returns an unusable payload."""

    pass


class PageNotFoundError(ProviderError):
    """Raised when the requested page does not exist on the provider."""

    def __init__(self, title: str):
        super().__init__(f"No page found for title '{title}'")
        self.title = title


class SequencerError(WikipediaMCPError):
    """Raised when the response sequencer is driven incorrectly."""

    pass
