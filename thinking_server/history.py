from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from .thoughts import ThoughtRecord


@dataclass(frozen=True)
class HistorySummary:
    length: int
    branch_ids: List[str] = field(default_factory=list)


class ThoughtHistory:
    """
    Append-only log of thoughts plus an index of named branches.

    Physical order is call order. Thought numbers are advisory metadata and
    are never used as a storage key, so duplicates and out-of-order numbers
    are kept as submitted.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._history: List[ThoughtRecord] = []
        self._branches: Dict[str, List[ThoughtRecord]] = {}

    @property
    def lock(self) -> threading.RLock:
        return self._lock

    def append(self, record: ThoughtRecord) -> None:
        with self._lock:
            self._history.append(record)
            if record.is_branch:
                # dicts keep insertion order, so branch ids stay in first-seen order
                self._branches.setdefault(str(record.branch_id), []).append(record)

    def summary(self) -> HistorySummary:
        with self._lock:
            return HistorySummary(
                length=len(self._history),
                branch_ids=list(self._branches.keys()),
            )

    @property
    def records(self) -> Tuple[ThoughtRecord, ...]:
        with self._lock:
            return tuple(self._history)

    def branch(self, branch_id: str) -> Tuple[ThoughtRecord, ...]:
        with self._lock:
            return tuple(self._branches.get(branch_id, ()))

    def __len__(self) -> int:
        with self._lock:
            return len(self._history)
