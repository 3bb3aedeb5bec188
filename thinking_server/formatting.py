from __future__ import annotations

from .thoughts import ThoughtRecord


def _header(record: ThoughtRecord) -> str:
    if record.is_revision:
        label = "Revision"
        context = f" (revising thought {record.revises_thought})"
    elif record.branch_from_thought:
        label = "Branch"
        context = f" (from thought {record.branch_from_thought}, ID: {record.branch_id})"
    else:
        label = "Thought"
        context = ""
    return f"{label} {record.thought_number}/{record.total_thoughts}{context}"


def format_thought(record: ThoughtRecord) -> str:
    """Render a thought as a framed text block for the diagnostic log."""
    header = _header(record)
    width = max(len(header), len(record.thought)) + 4
    border = "─" * width
    inner = width - 2
    return "\n".join(
        [
            f"┌{border}┐",
            f"│ {header.ljust(inner)} │",
            f"├{border}┤",
            f"│ {record.thought.ljust(inner)} │",
            f"└{border}┘",
        ]
    )
