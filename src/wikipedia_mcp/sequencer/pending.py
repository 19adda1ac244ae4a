"""Registry correlating outgoing request ids with the step awaiting them."""

from dataclasses import dataclass
from typing import Dict, Iterator, Optional, TypeVar, Generic

S = TypeVar("S")


@dataclass(frozen=True)
class PendingRequest(Generic[S]):
    """A request that has been sent and not yet answered."""

    request_id: int
    step: S
    attempt: int = 0


class PendingRequests(Generic[S]):
    """Maps request ids to pending requests.

    Ids are positive, assigned in increasing order and never handed out twice
    by the same registry, so a late reply to an abandoned request can never be
    mistaken for the answer to a newer one.
    """

    def __init__(self) -> None:
        self._next_id = 1
        self._pending: Dict[int, PendingRequest[S]] = {}

    def register(self, step: S, attempt: int = 0) -> PendingRequest[S]:
        """Allocate a fresh id for ``step`` and remember it until answered.

        Args:
            step: What to continue with once the reply arrives.
            attempt: Zero-based attempt number of this step.

        Returns:
            The new pending entry.
        """
        request_id = self._next_id
        self._next_id += 1
        entry = PendingRequest(request_id=request_id, step=step, attempt=attempt)
        self._pending[request_id] = entry
        return entry

    def pop(self, request_id: object) -> Optional[PendingRequest[S]]:
        """Remove and return the entry for ``request_id``, or None if unknown."""
        if not isinstance(request_id, int) or isinstance(request_id, bool):
            return None
        return self._pending.pop(request_id, None)

    def discard(self, request_id: int) -> None:
        self._pending.pop(request_id, None)

    @property
    def last_id(self) -> int:
        """The most recently assigned id, 0 before the first registration."""
        return self._next_id - 1

    def __contains__(self, request_id: object) -> bool:
        return request_id in self._pending

    def __len__(self) -> int:
        return len(self._pending)

    def __iter__(self) -> Iterator[PendingRequest[S]]:
        return iter(list(self._pending.values()))
