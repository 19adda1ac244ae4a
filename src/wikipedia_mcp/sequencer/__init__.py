"""Example client: a fixed call chain correlated by request id."""

from .pending import PendingRequest, PendingRequests
from .session import SequencerSession, SequencerState
from .sequencer import ResponseSequencer, SequenceStep, default_steps, tool_step
from .driver import StdioSequencerDriver
from .report import render_report

__all__ = [
    "PendingRequest",
    "PendingRequests",
    "SequencerSession",
    "SequencerState",
    "ResponseSequencer",
    "SequenceStep",
    "default_steps",
    "tool_step",
    "StdioSequencerDriver",
    "render_report",
]
