from __future__ import annotations

from thinking_server.formatting import format_thought
from thinking_server.thoughts import ThoughtRecord


def _record(**kwargs) -> ThoughtRecord:
    base = dict(thought="Consider the edge cases", thought_number=2, total_thoughts=4, next_thought_needed=True)
    base.update(kwargs)
    return ThoughtRecord(**base)


def test_plain_thought_header() -> None:
    lines = format_thought(_record()).splitlines()
    assert "Thought 2/4" in lines[1]
    assert "revising" not in lines[1]
    assert "from thought" not in lines[1]


def test_revision_takes_precedence_over_branch() -> None:
    text = format_thought(_record(is_revision=True, revises_thought=1, branch_from_thought=1, branch_id="b1"))
    assert "Revision 2/4 (revising thought 1)" in text
    assert "Branch" not in text


def test_branch_header() -> None:
    text = format_thought(_record(branch_from_thought=1, branch_id="b1"))
    assert "Branch 2/4 (from thought 1, ID: b1)" in text


def test_frame_width_follows_longest_line() -> None:
    record = _record(thought="x")
    lines = format_thought(record).splitlines()
    header = "Thought 2/4"
    width = len(header) + 4
    assert lines[0] == "┌" + "─" * width + "┐"
    assert lines[-1] == "└" + "─" * width + "┘"
    assert all(len(line) == width + 2 for line in lines)

    long_thought = "a much longer thought than the header"
    lines = format_thought(_record(thought=long_thought)).splitlines()
    width = len(long_thought) + 4
    assert lines[3] == "│ " + long_thought.ljust(width - 2) + " │"
    assert all(len(line) == width + 2 for line in lines)
