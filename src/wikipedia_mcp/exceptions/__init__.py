"""Export the exception hierarchy shared by the server, provider and sequencer."""

from .exceptions import (
    WikipediaMCPError,
    ConfigurationError,
    ToolRegistrationError,
    ToolValidationError,
    ProviderError,
    PageNotFoundError,
    SequencerError,
)

__all__ = [
    "WikipediaMCPError",
    "ConfigurationError",
    "ToolRegistrationError",
    "ToolValidationError",
    "ProviderError",
    "PageNotFoundError",
    "SequencerError",
]
