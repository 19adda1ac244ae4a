from wikipedia_mcp.sequencer.pending import PendingRequest, PendingRequests


def test_ids_are_sequential_and_never_reused() -> None:
    pending: PendingRequests[str] = PendingRequests()

    first = pending.register("a")
    second = pending.register("b", attempt=1)
    assert pending.pop(first.request_id) == PendingRequest(request_id=1, step="a", attempt=0)
    third = pending.register("a")

    assert (first.request_id, second.request_id, third.request_id) == (1, 2, 3)
    assert pending.last_id == 3
    assert [entry.step for entry in pending] == ["b", "a"]


def test_pop_unknown_or_non_int_ids() -> None:
    pending: PendingRequests[str] = PendingRequests()
    pending.register("a")

    assert pending.pop(99) is None
    assert pending.pop("1") is None
    assert pending.pop(True) is None
    assert pending.pop(None) is None
    assert 1 in pending
    assert len(pending) == 1


def test_discard() -> None:
    pending: PendingRequests[str] = PendingRequests()
    entry = pending.register("a")

    pending.discard(entry.request_id)
    pending.discard(entry.request_id)

    assert entry.request_id not in pending
    assert pending.pop(entry.request_id) is None
    assert pending.last_id == 1
