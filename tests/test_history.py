from __future__ import annotations

from thinking_server.history import HistorySummary, ThoughtHistory
from thinking_server.thoughts import ThoughtRecord


def _record(number: int, **kwargs) -> ThoughtRecord:
    return ThoughtRecord(
        thought=f"thought {number}",
        thought_number=number,
        total_thoughts=5,
        next_thought_needed=True,
        **kwargs,
    )


def test_append_grows_history_by_one() -> None:
    history = ThoughtHistory()
    for expected in range(1, 4):
        history.append(_record(expected))
        assert len(history) == expected


def test_history_keeps_call_order_and_duplicates() -> None:
    history = ThoughtHistory()
    first = _record(3)
    second = _record(1)
    third = _record(3, is_revision=True, revises_thought=3)
    for record in (first, second, third):
        history.append(record)
    assert history.records == (first, second, third)


def test_branch_index_tracks_branch_records() -> None:
    history = ThoughtHistory()
    a = _record(2, branch_from_thought=1, branch_id="b1")
    plain = _record(3)
    b = _record(3, branch_from_thought=1, branch_id="b1")
    c = _record(2, branch_from_thought=1, branch_id="b2")
    for record in (a, plain, b, c):
        history.append(record)

    assert history.branch("b1") == (a, b)
    assert history.branch("b2") == (c,)
    assert history.branch("missing") == ()
    for branch_id in ("b1", "b2"):
        for record in history.branch(branch_id):
            assert record in history.records


def test_branch_requires_both_fields() -> None:
    history = ThoughtHistory()
    history.append(_record(2, branch_id="only-id"))
    history.append(_record(2, branch_from_thought=1))
    assert len(history) == 2
    assert history.summary().branch_ids == []


def test_summary_lists_branches_in_first_seen_order() -> None:
    history = ThoughtHistory()
    history.append(_record(2, branch_from_thought=1, branch_id="zeta"))
    history.append(_record(2, branch_from_thought=1, branch_id="alpha"))
    history.append(_record(3, branch_from_thought=1, branch_id="zeta"))
    assert history.summary() == HistorySummary(length=3, branch_ids=["zeta", "alpha"])


def test_summary_is_read_only() -> None:
    history = ThoughtHistory()
    history.append(_record(1, branch_from_thought=1, branch_id="b1"))
    first = history.summary()
    first.branch_ids.append("tampered")
    second = history.summary()
    assert second == HistorySummary(length=1, branch_ids=["b1"])
    assert history.summary() == second
