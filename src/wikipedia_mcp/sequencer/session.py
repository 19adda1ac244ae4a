"""State collected while the sequencer walks its call chain."""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class SequencerState(str, Enum):
    IDLE = "idle"
    WAITING = "waiting"
    COMPLETED = "completed"
    FAILED = "failed"


class SequencerSession(BaseModel):
    """Everything the chain produced, handed as a whole to the report renderer.

    Attributes:
        state: Where the chain currently stands.
        server_info: Name and version announced by the server during the handshake.
        tools: Name and description of every tool the server listed.
        results: Parsed payload of each successful tool call, keyed by step.
        errors: Last error text seen for each step (business or protocol level).
        failure: Why the chain stopped early, if it did.
    """

    state: SequencerState = SequencerState.IDLE
    server_info: Optional[Dict[str, Any]] = None
    tools: List[Dict[str, Any]] = Field(default_factory=list)
    results: Dict[str, Any] = Field(default_factory=dict)
    errors: Dict[str, str] = Field(default_factory=dict)
    failure: Optional[str] = None

    @property
    def finished(self) -> bool:
        return self.state in (SequencerState.COMPLETED, SequencerState.FAILED)
