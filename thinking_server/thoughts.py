"""
Thought records and their validation.

A thought arrives as an untyped mapping (the raw tool arguments) and is turned
into a ThoughtRecord here. Required fields are checked in a fixed order so the
first violated field always produces the same message.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union


class ThinkingServerError(Exception):
    """Base exception for all thinking server errors."""
    pass


class ValidationError(ThinkingServerError):
    """A required thought field is missing or has the wrong type."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field
        self.message = message


@dataclass(frozen=True)
class ThoughtRecord:
    thought: str
    thought_number: Union[int, float]
    total_thoughts: Union[int, float]
    next_thought_needed: bool
    is_revision: Optional[bool] = None
    revises_thought: Optional[int] = None
    branch_from_thought: Optional[int] = None
    branch_id: Optional[str] = None
    needs_more_thoughts: Optional[bool] = None

    @property
    def is_branch(self) -> bool:
        return bool(self.branch_from_thought and self.branch_id)


@dataclass(frozen=True)
class ThoughtParseResult:
    """Tagged result of parsing raw tool arguments."""

    record: Optional[ThoughtRecord] = None
    error: Optional[ValidationError] = None

    @property
    def ok(self) -> bool:
        return self.record is not None


def _is_number(value: Any) -> bool:
    # bool is an int subclass but never a valid thought number
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return not math.isnan(value) and value != 0


def validate_thought_data(data: Any) -> ThoughtRecord:
    """
    Validate raw tool arguments and build a ThoughtRecord.

    Checks, in order: thought, thoughtNumber, totalThoughts, nextThoughtNeeded.
    Optional fields are copied through without range checks.

    Raises:
        ValidationError: for the first required field that fails.
    """
    raw: Mapping[str, Any] = data if isinstance(data, Mapping) else {}

    thought = raw.get("thought")
    if not thought or not isinstance(thought, str):
        raise ValidationError("thought", "Invalid thought: must be a string")
    thought_number = raw.get("thoughtNumber")
    if not _is_number(thought_number):
        raise ValidationError("thoughtNumber", "Invalid thoughtNumber: must be a number")
    total_thoughts = raw.get("totalThoughts")
    if not _is_number(total_thoughts):
        raise ValidationError("totalThoughts", "Invalid totalThoughts: must be a number")
    next_thought_needed = raw.get("nextThoughtNeeded")
    if not isinstance(next_thought_needed, bool):
        raise ValidationError("nextThoughtNeeded", "Invalid nextThoughtNeeded: must be a boolean")

    return ThoughtRecord(
        thought=thought,
        thought_number=thought_number,
        total_thoughts=total_thoughts,
        next_thought_needed=next_thought_needed,
        is_revision=raw.get("isRevision"),
        revises_thought=raw.get("revisesThought"),
        branch_from_thought=raw.get("branchFromThought"),
        branch_id=raw.get("branchId"),
        needs_more_thoughts=raw.get("needsMoreThoughts"),
    )


def parse_thought_data(data: Any) -> ThoughtParseResult:
    try:
        return ThoughtParseResult(record=validate_thought_data(data))
    except ValidationError as exc:
        return ThoughtParseResult(error=exc)
