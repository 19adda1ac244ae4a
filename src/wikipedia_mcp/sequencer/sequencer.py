"""Fixed call chain against a Wikipedia MCP server, free of any I/O.

The sequencer only turns incoming JSON-RPC messages into outgoing ones; a
driver owns the transport and the clock. Each step is sent after the
previous step's reply has been parsed, and replies are matched to steps by
request id only.
"""

import json
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional, Sequence, Tuple

from mcp import types
from pydantic import ValidationError

from .. import __version__
from ..exceptions import SequencerError
from ..logger import get_logger
from .pending import PendingRequest, PendingRequests
from .session import SequencerSession, SequencerState

logger = get_logger(__name__)

DEFAULT_TITLE = "Albert Einstein"
CLIENT_NAME = "wikipedia-mcp-demo"


@dataclass(frozen=True)
class SequenceStep:
    """One request of the chain.

    Attributes:
        key: Name under which the step's outcome is stored in the session.
        method: JSON-RPC method to call.
        params: JSON-RPC params sent with every attempt.
    """

    key: str
    method: str
    params: Dict[str, Any] = field(default_factory=dict)


class ReplyParseError(Exception):
    """A reply arrived for a step but its result could not be understood."""


def tool_step(name: str, arguments: Dict[str, Any]) -> SequenceStep:
    return SequenceStep(key=name, method="tools/call", params={"name": name, "arguments": arguments})


def default_steps(today: Optional[date] = None, title: str = DEFAULT_TITLE) -> Tuple[SequenceStep, ...]:
    """The demo chain: handshake, tool listing, then one call per tool.

    Args:
        today: Date passed to ``onThisDay``. Defaults to the current date.
        title: Page used for search, page and image lookups.

    Returns:
        The steps in the order they are sent.
    """
    today = today or date.today()
    initialize = types.InitializeRequestParams(
        protocolVersion=types.LATEST_PROTOCOL_VERSION,
        capabilities=types.ClientCapabilities(),
        clientInfo=types.Implementation(name=CLIENT_NAME, version=__version__),
    )
    return (
        SequenceStep(
            key="initialize",
            method="initialize",
            params=initialize.model_dump(by_alias=True, exclude_none=True, mode="json"),
        ),
        SequenceStep(key="tools", method="tools/list"),
        tool_step("onThisDay", {"date": today.isoformat()}),
        tool_step("findPage", {"query": title}),
        tool_step("getPage", {"title": title}),
        tool_step("getImagesForPage", {"title": title}),
    )


class ResponseSequencer:
    """Drives a fixed chain of requests, one in flight at a time.

    A reply that parses advances the chain; a tool result flagged ``isError``
    is recorded and also advances it. A JSON-RPC error, an unreadable result
    or a timeout re-sends the step under a fresh id until ``max_retries`` is
    used up, at which point the session fails. The chain always ends in
    ``COMPLETED`` or ``FAILED``.
    """

    def __init__(self, session: SequencerSession, steps: Sequence[SequenceStep], max_retries: int = 2):
        """Initialize the sequencer.

        Args:
            session: State object the outcomes are written to.
            steps: Requests to send, in order. Must not be empty.
            max_retries: Extra attempts allowed per step.
        """
        if not steps:
            raise SequencerError("A sequence needs at least one step.")
        if max_retries < 0:
            raise SequencerError("max_retries must not be negative.")
        self.session = session
        self.steps = tuple(steps)
        self.max_retries = max_retries
        self.pending: PendingRequests[int] = PendingRequests()
        self._in_flight: Optional[PendingRequest[int]] = None

    @property
    def finished(self) -> bool:
        return self.session.finished

    def start(self) -> List[types.JSONRPCMessage]:
        """Send the first step.

        Returns:
            The messages to write to the server.

        Raises:
            SequencerError: If the sequencer was already started.
        """
        if self.session.state is not SequencerState.IDLE:
            raise SequencerError("Sequencer has already been started.")
        logger.info("Starting call chain with %d steps.", len(self.steps))
        return [self._send(0, attempt=0)]

    def handle_message(self, message: types.JSONRPCMessage) -> List[types.JSONRPCMessage]:
        """Consume one message from the server.

        Args:
            message: A decoded JSON-RPC message.

        Returns:
            The messages to write next (possibly none).
        """
        root = message.root
        if isinstance(root, (types.JSONRPCRequest, types.JSONRPCNotification)):
            logger.debug("Ignoring server-initiated %s", root.method)
            return []

        if self.finished:
            logger.debug("Chain already finished, dropping reply %s.", root.id)
            return []

        entry = self.pending.pop(root.id)
        if entry is None:
            logger.warning("Dropping reply with unknown or stale id %r.", root.id)
            return []
        self._in_flight = None
        step = self.steps[entry.step]

        if isinstance(root, types.JSONRPCError):
            reason = f"JSON-RPC error {root.error.code}: {root.error.message}"
            logger.warning("Step '%s' (id %d) rejected: %s", step.key, entry.request_id, reason)
            return self._retry(entry, reason)

        try:
            outgoing = self._apply_result(step, root.result)
        except ReplyParseError as e:
            logger.error("Error parsing %s result (id %d): %s", step.key, entry.request_id, e)
            return self._retry(entry, f"Unreadable reply: {e}")

        logger.info("Step '%s' answered (id %d).", step.key, entry.request_id)
        return outgoing + self._advance(entry.step + 1)

    def handle_timeout(self) -> List[types.JSONRPCMessage]:
        """Give up on the in-flight request and retry its step.

        Returns:
            The messages to write next (possibly none).
        """
        if self.finished or self._in_flight is None:
            return []
        entry = self._in_flight
        self.pending.discard(entry.request_id)
        self._in_flight = None
        logger.warning("No reply for step '%s' (id %d).", self.steps[entry.step].key, entry.request_id)
        return self._retry(entry, "Timed out waiting for a reply")

    def abort(self, reason: str) -> None:
        """Stop the chain because the transport is gone."""
        if self.finished:
            return
        logger.error("Call chain aborted: %s", reason)
        self.session.state = SequencerState.FAILED
        self.session.failure = reason

    def _send(self, index: int, attempt: int) -> types.JSONRPCMessage:
        step = self.steps[index]
        entry = self.pending.register(index, attempt=attempt)
        self._in_flight = entry
        self.session.state = SequencerState.WAITING
        logger.info("Sending '%s' as request %d (attempt %d).", step.key, entry.request_id, attempt + 1)
        request = types.JSONRPCRequest(jsonrpc="2.0", id=entry.request_id, method=step.method, params=step.params or None)
        return types.JSONRPCMessage(request)

    def _advance(self, index: int) -> List[types.JSONRPCMessage]:
        if index >= len(self.steps):
            self.session.state = SequencerState.COMPLETED
            logger.info("All requests completed.")
            return []
        return [self._send(index, attempt=0)]

    def _retry(self, entry: PendingRequest[int], reason: str) -> List[types.JSONRPCMessage]:
        step = self.steps[entry.step]
        self.session.errors[step.key] = reason
        if entry.attempt >= self.max_retries:
            self.session.state = SequencerState.FAILED
            self.session.failure = f"Step '{step.key}' failed after {entry.attempt + 1} attempt(s): {reason}"
            logger.error(self.session.failure)
            return []
        return [self._send(entry.step, attempt=entry.attempt + 1)]

    def _apply_result(self, step: SequenceStep, result: Dict[str, Any]) -> List[types.JSONRPCMessage]:
        """Store a reply's result in the session.

        Returns:
            Follow-up messages the step requires before the next request.

        Raises:
            ReplyParseError: If the result does not have the expected shape.
        """
        try:
            if step.method == "initialize":
                init = types.InitializeResult.model_validate(result)
                self.session.server_info = {
                    "name": init.serverInfo.name,
                    "version": init.serverInfo.version,
                    "protocolVersion": init.protocolVersion,
                }
                self.session.errors.pop(step.key, None)
                notification = types.JSONRPCNotification(jsonrpc="2.0", method="notifications/initialized")
                return [types.JSONRPCMessage(notification)]

            if step.method == "tools/list":
                listed = types.ListToolsResult.model_validate(result)
                self.session.tools = [{"name": t.name, "description": t.description or ""} for t in listed.tools]
                logger.info("Available tools: %s", ", ".join(t.name for t in listed.tools))
                self.session.errors.pop(step.key, None)
                return []

            if step.method == "tools/call":
                call = types.CallToolResult.model_validate(result)
                text = next((c.text for c in call.content if isinstance(c, types.TextContent)), None)
                if text is None:
                    raise ReplyParseError("tool result has no text content")
                if call.isError:
                    logger.warning("Tool '%s' reported an error: %s", step.key, text)
                    self.session.errors[step.key] = text
                    return []
                self.session.results[step.key] = json.loads(text)
                self.session.errors.pop(step.key, None)
                return []
        except (ValidationError, json.JSONDecodeError) as e:
            raise ReplyParseError(str(e)) from e

        self.session.results[step.key] = result
        return []
