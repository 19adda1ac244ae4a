from unittest.mock import AsyncMock, patch

import pytest

from wikipedia_mcp.cli import build_parser, main
from wikipedia_mcp.sequencer import SequencerSession, SequencerState


def test_parser_defaults() -> None:
    args = build_parser().parse_args(["demo"])

    assert args.command == "demo"
    assert args.server_command is None
    assert args.title == "Albert Einstein"
    assert args.timeout == 60.0
    assert args.retries == 2
    assert build_parser().parse_args([]).command is None


def test_invalid_configuration_exits_with_2(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture) -> None:
    monkeypatch.setenv("WIKIPEDIA_TIMEOUT", "-1")

    assert main(["serve"]) == 2
    assert "Invalid configuration" in capsys.readouterr().err


@pytest.mark.parametrize("state, code", [(SequencerState.COMPLETED, 0), (SequencerState.FAILED, 1)])
def test_demo_exit_code_follows_chain_state(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture, state: SequencerState, code: int
) -> None:
    monkeypatch.delenv("WIKIPEDIA_TIMEOUT", raising=False)
    run_demo = AsyncMock(return_value=SequencerSession(state=state))

    with patch("wikipedia_mcp.cli.run_demo", run_demo), patch("wikipedia_mcp.cli.setup_logging"):
        assert main(["demo", "--server-command", "wikipedia-mcp serve --verbose", "--title", "Ada Lovelace"]) == code

    _, command, title, timeout, retries = run_demo.call_args.args
    assert command == ["wikipedia-mcp", "serve", "--verbose"]
    assert (title, timeout, retries) == ("Ada Lovelace", 60.0, 2)
    assert f"Wikipedia MCP example ({state.value})" in capsys.readouterr().out


def test_serve_is_the_default_command(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("WIKIPEDIA_TIMEOUT", raising=False)
    serve = AsyncMock()

    with patch("wikipedia_mcp.cli.serve", serve), patch("wikipedia_mcp.cli.setup_logging"):
        assert main([]) == 0

    serve.assert_awaited_once()
