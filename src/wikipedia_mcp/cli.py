"""Command line entry point: ``wikipedia-mcp serve`` and ``wikipedia-mcp demo``."""

import argparse
import asyncio
import os
import shlex
import sys
from typing import List, Optional

from .config import Settings, load_settings
from .exceptions import ConfigurationError
from .logger import get_logger, setup_logging
from .sequencer import (
    ResponseSequencer,
    SequencerSession,
    SequencerState,
    StdioSequencerDriver,
    default_steps,
    render_report,
)
from .sequencer.sequencer import DEFAULT_TITLE
from .server import serve

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wikipedia-mcp", description="Wikipedia lookups over the Model Context Protocol."
    )
    commands = parser.add_subparsers(dest="command")

    commands.add_parser("serve", help="Run the MCP server on stdin/stdout (default).")

    demo = commands.add_parser("demo", help="Spawn the server and run the example call chain.")
    demo.add_argument(
        "--server-command",
        default=None,
        help="Command that starts the server. Defaults to this interpreter running 'wikipedia_mcp serve'.",
    )
    demo.add_argument("--title", default=DEFAULT_TITLE, help="Page used for the search, page and image calls.")
    demo.add_argument("--timeout", type=float, default=60.0, help="Seconds to wait for each reply.")
    demo.add_argument("--retries", type=int, default=2, help="Extra attempts per step before giving up.")
    return parser


async def run_demo(
    settings: Settings, server_command: List[str], title: str, timeout: float, retries: int
) -> SequencerSession:
    """Run the example chain against a freshly spawned server.

    Args:
        settings: Settings of this process; forwarded to the server through its environment.
        server_command: Program and arguments starting the server.
        title: Page used for the search, page and image calls.
        timeout: Seconds to wait for each reply.
        retries: Extra attempts per step.

    Returns:
        The finished session.
    """
    env = dict(os.environ)
    env.update(
        {
            "WIKIPEDIA_LANGUAGE": settings.language,
            "WIKIPEDIA_USER_AGENT": settings.user_agent,
            "WIKIPEDIA_TIMEOUT": str(settings.timeout),
            "WIKIPEDIA_MCP_LOG_LEVEL": settings.log_level,
        }
    )
    driver = StdioSequencerDriver(server_command[0], server_command[1:], env=env, reply_timeout=timeout)
    sequencer = ResponseSequencer(SequencerSession(), default_steps(title=title), max_retries=retries)
    return await driver.run(sequencer)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = load_settings()
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    setup_logging(settings.log_level)

    try:
        if args.command == "demo":
            command = (
                shlex.split(args.server_command)
                if args.server_command
                else [sys.executable, "-m", "wikipedia_mcp", "serve"]
            )
            session = asyncio.run(run_demo(settings, command, args.title, args.timeout, args.retries))
            print(render_report(session))
            return 0 if session.state is SequencerState.COMPLETED else 1

        asyncio.run(serve(settings))
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down.")
    return 0
