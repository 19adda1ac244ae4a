import logging
import os
from pathlib import Path

import pytest

from wikipedia_mcp.config import DEFAULT_USER_AGENT, Settings, load_settings
from wikipedia_mcp.exceptions import ConfigurationError
from wikipedia_mcp.logger import get_logger, setup_logging


def test_defaults() -> None:
    settings = load_settings(environ={})

    assert settings == Settings()
    assert settings.language == "en"
    assert settings.user_agent == DEFAULT_USER_AGENT
    assert settings.timeout == 30.0
    assert settings.log_level == "INFO"
    assert settings.base_url == "https://en.wikipedia.org"


def test_environment_overrides() -> None:
    settings = load_settings(
        environ={
            "WIKIPEDIA_LANGUAGE": " FR ",
            "WIKIPEDIA_USER_AGENT": " my-bot/2.0 (ops@example.org) ",
            "WIKIPEDIA_TIMEOUT": "12.5",
            "WIKIPEDIA_MCP_LOG_LEVEL": "debug",
            "UNRELATED": "ignored",
        }
    )

    assert settings.language == "fr"
    assert settings.base_url == "https://fr.wikipedia.org"
    assert settings.user_agent == "my-bot/2.0 (ops@example.org)"
    assert settings.timeout == 12.5
    assert settings.log_level == "DEBUG"


def test_empty_variables_fall_back_to_defaults() -> None:
    assert load_settings(environ={"WIKIPEDIA_LANGUAGE": "", "WIKIPEDIA_TIMEOUT": ""}) == Settings()


@pytest.mark.parametrize(
    "environ",
    [
        {"WIKIPEDIA_LANGUAGE": "en.evil.com/"},
        {"WIKIPEDIA_LANGUAGE": "x"},
        {"WIKIPEDIA_TIMEOUT": "0"},
        {"WIKIPEDIA_TIMEOUT": "soon"},
        {"WIKIPEDIA_USER_AGENT": "   "},
        {"WIKIPEDIA_MCP_LOG_LEVEL": "LOUD"},
    ],
)
def test_invalid_values_raise_configuration_error(environ: dict) -> None:
    with pytest.raises(ConfigurationError, match="Invalid configuration"):
        load_settings(environ=environ)


def test_settings_are_frozen() -> None:
    settings = Settings()

    with pytest.raises(Exception):
        settings.language = "de"  # type: ignore[misc]


def test_load_settings_reads_dotenv(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    (tmp_path / ".env").write_text("WIKIPEDIA_LANGUAGE=nl\n")
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("WIKIPEDIA_LANGUAGE", raising=False)

    try:
        settings = load_settings()
    finally:
        os.environ.pop("WIKIPEDIA_LANGUAGE", None)

    assert settings.language == "nl"


def test_get_logger_namespacing() -> None:
    assert get_logger().name == "wikipedia_mcp"
    assert get_logger("wikipedia_mcp.tools.images").name == "wikipedia_mcp.tools.images"
    assert get_logger("custom").name == "wikipedia_mcp.custom"


def test_setup_logging_is_idempotent() -> None:
    logger = logging.getLogger("wikipedia_mcp")
    before = list(logger.handlers)
    try:
        setup_logging("DEBUG")
        setup_logging("WARNING")

        stream_handlers = [h for h in logger.handlers if isinstance(h, logging.StreamHandler)]
        assert len(stream_handlers) == 1
        assert logger.level == logging.WARNING
    finally:
        logger.handlers = before
        logger.setLevel(logging.NOTSET)
