"""Timed quiz session: the single state machine the UI and the API talk to."""

from __future__ import annotations

from enum import Enum
import logging
from threading import RLock

from assessment_app.constants.quiz_constants import DEFAULT_DURATION_SECONDS
from assessment_app.core.clock import Clock
from assessment_app.core.errors import InvalidStateError
from assessment_app.core.models import Answer, Question
from assessment_app.core.scorer import Result, score
from assessment_app.core.services.attempt_state import AttemptSnapshot, AttemptState
from assessment_app.core.services.countdown import CountdownTimer, TimerState
from assessment_app.core.services.navigator import Navigator
from assessment_app.core.services.question_bank import QuestionSource, load_questions
from assessment_app.core.services.result_log import SubmissionSink
from assessment_app.core.summary import (
    SessionView,
    format_countdown,
    progress_percent,
    question_palette,
)

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    CREATED = "created"
    IN_PROGRESS = "in-progress"
    SUBMITTED = "submitted"


class QuizSession:
    """Facade over question loading, attempt state, countdown, navigation and scoring.

    Every public method runs under one lock shared with the countdown, so
    user actions and clock ticks are applied one at a time in arrival order.
    A session goes ``created -> in-progress -> submitted``; ``retry()``
    throws the attempt away and starts a new one.
    """

    def __init__(
        self,
        source: QuestionSource,
        session_ref: str,
        clock: Clock,
        duration_seconds: int = DEFAULT_DURATION_SECONDS,
        sink: SubmissionSink | None = None,
    ) -> None:
        if duration_seconds <= 0:
            raise ValueError("Duration must be a positive number of seconds.")
        self._lock = RLock()
        self._source = source
        self._session_ref = session_ref
        self._duration_seconds = duration_seconds
        self._sink = sink
        self._timer = CountdownTimer(
            clock,
            on_tick=self._on_timer_tick,
            on_expire=self._on_timer_expire,
            lock=self._lock,
        )

        self._state = SessionState.CREATED
        self._questions: tuple[Question, ...] = ()
        self._attempt: AttemptState | None = None
        self._navigator: Navigator | None = None
        self._result: Result | None = None
        self._final_snapshot: AttemptSnapshot | None = None
        self._submission_error: Exception | None = None
        self._submission_acknowledged: bool = False
        self._scoring_runs: int = 0

    # --- Lifecycle ---

    def start(self) -> None:
        """Load the questions, open a fresh attempt and start the countdown."""
        with self._lock:
            if self._state is not SessionState.CREATED:
                raise InvalidStateError(f"Session cannot start while {self._state.value}.")
            questions = load_questions(self._source, self._session_ref)
            self._questions = questions
            self._attempt = AttemptState(questions, self._duration_seconds)
            self._navigator = Navigator(self._attempt)
            self._result = None
            self._final_snapshot = None
            self._submission_error = None
            self._submission_acknowledged = False
            self._scoring_runs = 0
            self._state = SessionState.IN_PROGRESS
            self._timer.start(self._duration_seconds)
            logger.info(
                "Session %s started: %d question(s), %ds on the clock",
                self._session_ref,
                len(questions),
                self._duration_seconds,
            )

    def submit(self) -> Result:
        """Submit manually; returns the existing result if already submitted."""
        with self._lock:
            if self._state is SessionState.SUBMITTED:
                assert self._result is not None
                return self._result
            self._require_in_progress()
            if self._timer.state is TimerState.RUNNING:
                self._timer.cancel()
            return self._finish(auto_submitted=False)

    def retry(self) -> None:
        """Discard the current attempt and start over with a full countdown."""
        with self._lock:
            if self._state is SessionState.CREATED:
                raise InvalidStateError("There is no attempt to retry.")
            self._timer.reset()
            self._state = SessionState.CREATED
            self._attempt = None
            self._navigator = None
            self._result = None
            self._final_snapshot = None
            logger.info("Session %s restarted", self._session_ref)
            self.start()

    def resend_result(self) -> bool:
        """Hand the result to the submission sink again; returns True on success."""
        with self._lock:
            if self._state is not SessionState.SUBMITTED:
                raise InvalidStateError("Only a submitted session has a result to send.")
            return self._deliver_result()

    # --- Answers and review flags ---

    def record_answer(self, question_id: str, value: object) -> Answer:
        with self._lock:
            return self._require_attempt().record_answer(question_id, value)

    def record_current_answer(self, value: object) -> tuple[str, Answer]:
        """Record ``value`` for the current question; returns its id and the stored answer."""
        with self._lock:
            attempt = self._require_attempt()
            question_id = self._questions[attempt.current_index].id
            return question_id, attempt.record_answer(question_id, value)

    def clear_answer(self, question_id: str) -> None:
        with self._lock:
            self._require_attempt().clear_answer(question_id)

    def toggle_review(self, question_id: str | None = None) -> tuple[str, bool]:
        """Toggle the review flag of ``question_id`` (the current question by default).

        Returns the id that was toggled and its new flag.
        """
        with self._lock:
            attempt = self._require_attempt()
            if question_id is None:
                question_id = self._questions[attempt.current_index].id
            return question_id, attempt.toggle_review(question_id)

    # --- Navigation ---

    def go_to(self, index: int) -> int:
        with self._lock:
            self._require_attempt()
            assert self._navigator is not None
            return self._navigator.go_to(index)

    def next(self) -> int:
        with self._lock:
            self._require_attempt()
            assert self._navigator is not None
            return self._navigator.next()

    def previous(self) -> int:
        with self._lock:
            self._require_attempt()
            assert self._navigator is not None
            return self._navigator.previous()

    # --- Queries ---

    @property
    def session_ref(self) -> str:
        return self._session_ref

    @property
    def duration_seconds(self) -> int:
        return self._duration_seconds

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def timer_state(self) -> TimerState:
        return self._timer.state

    @property
    def result(self) -> Result | None:
        return self._result

    @property
    def scoring_runs(self) -> int:
        """How many times the scorer has run for the current attempt."""
        return self._scoring_runs

    @property
    def submission_error(self) -> Exception | None:
        return self._submission_error

    @property
    def submission_acknowledged(self) -> bool:
        return self._submission_acknowledged

    @property
    def questions(self) -> tuple[Question, ...]:
        return self._questions

    def get_current_question(self) -> Question | None:
        with self._lock:
            if self._attempt is None:
                return None
            return self._questions[self._attempt.current_index]

    def snapshot(self) -> AttemptSnapshot | None:
        with self._lock:
            if self._final_snapshot is not None:
                return self._final_snapshot
            if self._attempt is None:
                return None
            return self._attempt.snapshot()

    def view(self) -> SessionView:
        with self._lock:
            snapshot = self.snapshot()
            if snapshot is None:
                return SessionView(
                    state=self._state.value,
                    session_ref=self._session_ref,
                    current_index=0,
                    question_count=0,
                    current_question_id=None,
                    remaining_seconds=self._duration_seconds,
                    countdown_text=format_countdown(self._duration_seconds),
                    progress_percent=0,
                    answered_ids=(),
                    review_ids=(),
                    palette=(),
                )
            count = len(self._questions)
            return SessionView(
                state=self._state.value,
                session_ref=self._session_ref,
                current_index=snapshot.current_index,
                question_count=count,
                current_question_id=self._questions[snapshot.current_index].id,
                remaining_seconds=snapshot.remaining_seconds,
                countdown_text=format_countdown(snapshot.remaining_seconds),
                progress_percent=progress_percent(snapshot.current_index, count),
                answered_ids=tuple(q.id for q in self._questions if q.id in snapshot.answers),
                review_ids=tuple(q.id for q in self._questions if q.id in snapshot.review_flags),
                palette=question_palette(self._questions, snapshot.answers, snapshot.review_flags),
            )

    # --- Internals ---

    def _on_timer_tick(self, remaining_seconds: int) -> None:
        with self._lock:
            if self._state is SessionState.IN_PROGRESS and self._attempt is not None:
                self._attempt.update_remaining(remaining_seconds)

    def _on_timer_expire(self) -> None:
        with self._lock:
            if self._state is not SessionState.IN_PROGRESS:
                logger.debug("Ignoring expiry for session %s in state %s", self._session_ref, self._state.value)
                return
            logger.info("Time is up for session %s; submitting automatically", self._session_ref)
            self._finish(auto_submitted=True)

    def _finish(self, auto_submitted: bool) -> Result:
        attempt = self._require_attempt()
        snapshot = attempt.freeze()
        result = score(snapshot, self._questions, auto_submitted=auto_submitted)
        self._scoring_runs += 1
        self._final_snapshot = snapshot
        self._result = result
        self._state = SessionState.SUBMITTED
        logger.info(
            "Session %s submitted (%s): %d/%d correct, %d%%, %ds spent",
            self._session_ref,
            "auto" if auto_submitted else "manual",
            result.correct_count,
            result.total_questions,
            result.score_percent,
            result.time_spent_seconds,
        )
        self._deliver_result()
        return result

    def _deliver_result(self) -> bool:
        if self._sink is None or self._result is None:
            return False
        try:
            self._sink.submit_result(self._session_ref, self._result)
        except Exception as exc:
            # The session stays submitted; the caller decides whether to resend.
            logger.exception("Could not hand result of session %s to the sink", self._session_ref)
            self._submission_error = exc
            self._submission_acknowledged = False
            return False
        self._submission_error = None
        self._submission_acknowledged = True
        return True

    def _require_in_progress(self) -> None:
        if self._state is not SessionState.IN_PROGRESS:
            raise InvalidStateError(f"Session is {self._state.value}, not in progress.")

    def _require_attempt(self) -> AttemptState:
        self._require_in_progress()
        assert self._attempt is not None
        return self._attempt
