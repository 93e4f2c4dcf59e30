"""In-memory submission sink that keeps every finished attempt."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Protocol

from assessment_app.core.scorer import Result


class SubmissionSink(Protocol):
    def submit_result(self, session_ref: str, result: Result) -> object: ...


@dataclass(slots=True)
class LoggedResult:
    """Result as stored by the log, with its arrival time."""

    session_ref: str
    result: Result
    received_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass(slots=True)
class ResultRow:
    """Immutable snapshot returned to consumers."""

    session_ref: str
    score_percent: int
    correct_count: int
    total_questions: int
    time_spent_seconds: int


class ResultLog:
    """Collects submitted results per session reference."""

    def __init__(self) -> None:
        self._entries: list[LoggedResult] = []

    def submit_result(self, session_ref: str, result: Result) -> LoggedResult:
        entry = LoggedResult(session_ref=session_ref, result=result)
        self._entries.append(entry)
        return entry

    def results_for(self, session_ref: str) -> list[Result]:
        return [entry.result for entry in self._entries if entry.session_ref == session_ref]

    def count(self) -> int:
        return len(self._entries)

    def get_best_results(self, limit: int = 3) -> list[ResultRow]:
        """Return the top N results sorted by score, then by time spent."""
        sorted_entries = sorted(
            self._entries,
            key=lambda e: (-e.result.score_percent, e.result.time_spent_seconds),
        )
        return [
            ResultRow(
                session_ref=entry.session_ref,
                score_percent=entry.result.score_percent,
                correct_count=entry.result.correct_count,
                total_questions=entry.result.total_questions,
                time_spent_seconds=entry.result.time_spent_seconds,
            )
            for entry in sorted_entries[:limit]
        ]

    def clear(self) -> None:
        self._entries.clear()
