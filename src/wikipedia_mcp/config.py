"""Process-wide settings for the server and the demo client.

Settings are read once at start-up from the environment (optionally seeded
from a ``.env`` file) and are immutable afterwards.
"""

import os
import re
from typing import Mapping, Optional

from dotenv import load_dotenv, find_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from . import __version__
from .exceptions import ConfigurationError
from .logger import get_logger

logger = get_logger(__name__)

_LANGUAGE_RE = re.compile(r"[a-z][a-z0-9-]{1,15}")
_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")

DEFAULT_USER_AGENT = f"wikipedia-mcp-server/{__version__}"


class Settings(BaseModel):
    """Immutable configuration shared by every component.

    Attributes:
        language: Wikipedia language code, e.g. ``en`` or ``de``.
        user_agent: Identifying client string sent with every provider request.
        timeout: HTTP timeout in seconds applied to provider requests.
        log_level: Name of the logging level.
    """

    model_config = ConfigDict(frozen=True)

    language: str = "en"
    user_agent: str = DEFAULT_USER_AGENT
    timeout: float = Field(default=30.0, gt=0)
    log_level: str = "INFO"

    @field_validator("language")
    @classmethod
    def _check_language(cls, value: str) -> str:
        value = value.strip().lower()
        if not _LANGUAGE_RE.fullmatch(value):
            raise ValueError(f"'{value}' is not a valid Wikipedia language code")
        return value

    @field_validator("user_agent")
    @classmethod
    def _check_user_agent(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("user agent must not be empty")
        return value.strip()

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        value = value.strip().upper()
        if value not in _LOG_LEVELS:
            raise ValueError(f"log level must be one of {', '.join(_LOG_LEVELS)}")
        return value

    @property
    def base_url(self) -> str:
        """Root URL of the Wikipedia edition selected by ``language``."""
        return f"https://{self.language}.wikipedia.org"


_ENV_FIELDS = {
    "WIKIPEDIA_LANGUAGE": "language",
    "WIKIPEDIA_USER_AGENT": "user_agent",
    "WIKIPEDIA_TIMEOUT": "timeout",
    "WIKIPEDIA_MCP_LOG_LEVEL": "log_level",
}


def load_settings(environ: Optional[Mapping[str, str]] = None, use_dotenv: bool = True) -> Settings:
    """Build the settings from environment variables.

    Args:
        environ: Mapping to read from. Defaults to ``os.environ``.
        use_dotenv: Whether to load a ``.env`` file into ``os.environ`` first.
            Ignored when an explicit ``environ`` is passed.

    Returns:
        The validated settings.

    Raises:
        ConfigurationError: If a variable holds an invalid value.
    """
    if environ is None:
        if use_dotenv:
            env_file = find_dotenv(usecwd=True)
            if env_file:
                logger.debug("Loading .env from: %s", env_file)
                load_dotenv(env_file)
        environ = os.environ

    values = {field: environ[var] for var, field in _ENV_FIELDS.items() if environ.get(var)}
    try:
        return Settings(**values)
    except ValidationError as e:
        msg = f"Invalid configuration: {e}"
        logger.error(msg)
        raise ConfigurationError(msg) from e
