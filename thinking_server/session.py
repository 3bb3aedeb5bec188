"""
Sequential thinking session.

One ThinkingSession is created per MCP server run and receives every
`sequentialthinking` tool call for that run. Each call is validated, stored in
the session's ThoughtHistory, rendered to the thought log and answered with a
small JSON status body.
"""
from __future__ import annotations

import dataclasses
import json
import logging
from typing import Any, Callable, Dict, Optional

from .formatting import format_thought
from .history import HistorySummary, ThoughtHistory
from .thoughts import ThoughtRecord, parse_thought_data

ThoughtSink = Callable[[str], None]

THOUGHT_LOGGER_NAME = "thinking_server.thoughts"
SESSION_CLOSED_MESSAGE = "Thinking session is closed"

logger = logging.getLogger("thinking_server.session")


def default_thought_sink() -> ThoughtSink:
    return logging.getLogger(THOUGHT_LOGGER_NAME).info


def _text_envelope(body: Dict[str, Any], is_error: bool) -> Dict[str, Any]:
    return {
        "content": [{"type": "text", "text": json.dumps(body, indent=2)}],
        "isError": is_error,
    }


def error_envelope(message: str) -> Dict[str, Any]:
    return _text_envelope({"error": message, "status": "failed"}, is_error=True)


def apply_total_correction(record: ThoughtRecord) -> ThoughtRecord:
    """Raise totalThoughts to thoughtNumber when the step runs past the estimate."""
    if record.thought_number > record.total_thoughts:
        return dataclasses.replace(record, total_thoughts=record.thought_number)
    return record


class ThinkingSession:
    def __init__(
        self,
        history: Optional[ThoughtHistory] = None,
        sink: Optional[ThoughtSink] = None,
    ) -> None:
        self.history = history if history is not None else ThoughtHistory()
        self._sink = sink if sink is not None else default_thought_sink()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def handle(self, raw: Any) -> Dict[str, Any]:
        """
        Process one tool call.

        Always returns an envelope dict with `content` (one text item holding
        JSON) and `isError`. Validation failures and unexpected errors become
        error envelopes; nothing is raised to the transport.
        """
        try:
            with self.history.lock:
                return self._handle_locked(raw)
        except Exception as exc:
            logger.error(f"Unexpected error while processing thought: {exc}", exc_info=True)
            return error_envelope(str(exc))

    def _handle_locked(self, raw: Any) -> Dict[str, Any]:
        if self._closed:
            logger.debug("Rejected thought: session is closed")
            return error_envelope(SESSION_CLOSED_MESSAGE)

        parsed = parse_thought_data(raw)
        if not parsed.ok:
            logger.debug(f"Rejected thought: {parsed.error}")
            return error_envelope(str(parsed.error))

        record = apply_total_correction(parsed.record)
        self.history.append(record)
        try:
            self._sink(format_thought(record))
        except Exception as exc:
            # the thought is already stored, so the call still succeeds
            logger.warning(f"Thought sink failed: {exc}", exc_info=True)

        summary = self.history.summary()
        return _text_envelope(
            {
                "thoughtNumber": record.thought_number,
                "totalThoughts": record.total_thoughts,
                "nextThoughtNeeded": record.next_thought_needed,
                "branches": summary.branch_ids,
                "thoughtHistoryLength": summary.length,
            },
            is_error=False,
        )

    def summary(self) -> HistorySummary:
        return self.history.summary()

    def close(self) -> HistorySummary:
        """Mark the session closed and return its final summary. Later calls to handle() are rejected."""
        with self.history.lock:
            summary = self.history.summary()
            if not self._closed:
                self._closed = True
                logger.info(
                    f"Thinking session closed: {summary.length} thoughts, "
                    f"{len(summary.branch_ids)} branches"
                )
        return summary
