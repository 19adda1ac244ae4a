"""Run a ResponseSequencer against a server spawned over stdio."""

import asyncio
from typing import Iterable, Optional

import anyio
from anyio.abc import ObjectSendStream
from mcp import types
from mcp.client.stdio import StdioServerParameters, stdio_client
from mcp.shared.message import SessionMessage

from ..logger import get_logger
from .sequencer import ResponseSequencer
from .session import SequencerSession

logger = get_logger(__name__)

__all__ = ["StdioSequencerDriver"]


class StdioSequencerDriver:
    """Spawns the server process and shuttles messages for a sequencer."""

    def __init__(
        self,
        command: str,
        args: list[str],
        env: Optional[dict[str, str]] = None,
        reply_timeout: float = 60.0,
    ):
        """Initializes the driver with parameters for the server process.

        Args:
            command: The command to run the server.
            args: List of arguments for the command.
            env: Optional dictionary of environment variables.
            reply_timeout: Seconds to wait for a reply before retrying the step.
        """
        self._server_params = StdioServerParameters(command=command, args=args, env=env)
        self.reply_timeout = reply_timeout

    async def run(self, sequencer: ResponseSequencer) -> SequencerSession:
        """Drive ``sequencer`` until its chain completes or fails.

        Returns:
            The sequencer's session, in a terminal state.
        """
        logger.debug("Spawning server: %s %s", self._server_params.command, " ".join(self._server_params.args))
        async with stdio_client(self._server_params) as (read_stream, write_stream):
            await self._send(write_stream, sequencer.start())

            while not sequencer.finished:
                try:
                    item = await asyncio.wait_for(read_stream.receive(), timeout=self.reply_timeout)
                except asyncio.TimeoutError:
                    await self._send(write_stream, sequencer.handle_timeout())
                    continue
                except (anyio.EndOfStream, anyio.ClosedResourceError):
                    sequencer.abort("Server closed the connection")
                    break

                if isinstance(item, Exception):
                    # Undecodable line: it carries no id, so the timeout takes care of the step.
                    logger.error("Error parsing response: %s", item)
                    continue

                await self._send(write_stream, sequencer.handle_message(item.message))

        logger.info("Call chain finished with state '%s'.", sequencer.session.state.value)
        return sequencer.session

    @staticmethod
    async def _send(
        write_stream: ObjectSendStream[SessionMessage], messages: Iterable[types.JSONRPCMessage]
    ) -> None:
        for message in messages:
            logger.debug("Sent request: %s", message.model_dump_json(by_alias=True, exclude_none=True))
            await write_stream.send(SessionMessage(message))
