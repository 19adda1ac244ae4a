"""Logging utilities for the Wikipedia MCP server."""

import logging
import sys

_LOGGER_NAME = "wikipedia_mcp"


def get_logger(name: str | None = None) -> logging.Logger:
    """Get a logger instance for the package.

    Args:
        name: Optional sub-logger name. Module names that already live under the
            package (e.g. ``wikipedia_mcp.tools.images``) are used unchanged.

    Returns:
        The requested logger.
    """
    if not name:
        return logging.getLogger(_LOGGER_NAME)
    if name == _LOGGER_NAME or name.startswith(f"{_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{_LOGGER_NAME}.{name}")


def setup_logging(
    level: int | str = logging.INFO, format_str: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
) -> None:
    """Setup default logging configuration for the package.

    The handler writes to stderr: stdout carries the MCP protocol stream when
    the server runs over stdio.

    Args:
        level: Logging level, as an int or a level name.
        format_str: Log format string.
    """
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)

    # Avoid adding multiple handlers if called multiple times
    if any(isinstance(h, logging.StreamHandler) for h in logger.handlers):
        return

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(format_str))
    logger.addHandler(handler)


# Set default NullHandler to avoid "No handler found" warnings
logging.getLogger(_LOGGER_NAME).addHandler(logging.NullHandler())
