"""FastAPI server that exposes the quiz session to the student's browser."""

from __future__ import annotations

from dataclasses import asdict
import logging
from threading import Thread
from typing import Any, Literal

from fastapi import Depends, FastAPI, HTTPException
from pydantic import BaseModel
import uvicorn

from assessment_app.constants.network_constants import (
    API_TITLE,
    API_VERSION,
    DEFAULT_HOST,
    DEFAULT_PORT,
)
from assessment_app.core.errors import (
    AnswerShapeError,
    AssessmentError,
    InvalidStateError,
    LoadError,
    UnknownQuestionError,
)
from assessment_app.core.markdown_math_renderer import renderer
from assessment_app.core.models import Question, QuestionKind
from assessment_app.core.quiz_session import QuizSession
from assessment_app.core.scorer import Result
from assessment_app.core.summary import performance_message, submission_payload

logger = logging.getLogger(__name__)


class AnswerPayload(BaseModel):
    """Payload schema for a captured answer; omit ``question_id`` for the current question."""

    question_id: str | None = None
    value: Any


class NavigatePayload(BaseModel):
    """Payload schema for moving between questions."""

    action: Literal["next", "previous", "goto"]
    index: int | None = None


class ReviewPayload(BaseModel):
    """Payload schema for toggling a review flag."""

    question_id: str | None = None


def _get_session_dependency(session: QuizSession):
    def dependency() -> QuizSession:
        return session

    return dependency


def _http_error(exc: AssessmentError) -> HTTPException:
    if isinstance(exc, UnknownQuestionError):
        return HTTPException(status_code=404, detail=str(exc))
    if isinstance(exc, InvalidStateError):
        return HTTPException(status_code=409, detail=str(exc))
    if isinstance(exc, (LoadError, AnswerShapeError)):
        return HTTPException(status_code=422, detail=str(exc))
    return HTTPException(status_code=400, detail=str(exc))


def _question_to_dict(question: Question, session: QuizSession) -> dict[str, object]:
    snapshot = session.snapshot()
    answer = snapshot.answers.get(question.id) if snapshot else None
    payload: dict[str, object] = {
        "question_id": question.id,
        "kind": question.kind.value,
        "prompt_html": renderer.render_fragment(question.prompt),
        "answer": answer.to_payload() if answer is not None else None,
        "marked_for_review": bool(snapshot and question.id in snapshot.review_flags),
    }
    if question.kind in (QuestionKind.SINGLE_CHOICE, QuestionKind.BOOLEAN):
        payload["options"] = list(question.options)
        payload["options_html"] = [renderer.render_label(o) for o in question.options]
    elif question.kind is QuestionKind.ORDERED_ARRANGEMENT:
        payload["items"] = list(question.items)
    else:
        payload["left"] = list(question.left_labels)
        # Right column is shown sorted so the pairing is not given away.
        payload["right"] = sorted(question.right_labels)
    return payload


def _result_to_dict(result: Result) -> dict[str, object]:
    return {
        "total_questions": result.total_questions,
        "correct_count": result.correct_count,
        "incorrect_count": result.incorrect_count,
        "answered_count": result.answered_count,
        "score_percent": result.score_percent,
        "time_spent_seconds": result.time_spent_seconds,
        "auto_submitted": result.auto_submitted,
        "correct": dict(result.correct),
        "message": performance_message(result.score_percent),
    }


def _view_to_dict(session: QuizSession) -> dict[str, object]:
    view = asdict(session.view())
    view["palette"] = [
        {"question_id": question_id, "status": status.value}
        for question_id, status in view["palette"]
    ]
    view["submission_error"] = (
        str(session.submission_error) if session.submission_error is not None else None
    )
    return view


def create_api_app(session: QuizSession) -> FastAPI:
    """Create a FastAPI application wired to the provided quiz session."""

    app = FastAPI(title=API_TITLE, version=API_VERSION)
    session_dep = _get_session_dependency(session)

    @app.get("/session")
    def get_session(current: QuizSession = Depends(session_dep)) -> dict[str, object]:
        return _view_to_dict(current)

    @app.post("/session/start", status_code=201)
    def start_session(current: QuizSession = Depends(session_dep)) -> dict[str, object]:
        try:
            current.start()
        except AssessmentError as exc:
            raise _http_error(exc) from exc
        return _view_to_dict(current)

    @app.get("/question")
    def get_question(current: QuizSession = Depends(session_dep)) -> dict[str, object]:
        question = current.get_current_question()
        if question is None:
            raise HTTPException(status_code=409, detail="No attempt is in progress.")
        return _question_to_dict(question, current)

    @app.post("/answer", status_code=201)
    def submit_answer(
        payload: AnswerPayload,
        current: QuizSession = Depends(session_dep),
    ) -> dict[str, object]:
        try:
            if payload.question_id is None:
                question_id, answer = current.record_current_answer(payload.value)
            else:
                answer = current.record_answer(payload.question_id, payload.value)
                question_id = payload.question_id
        except AssessmentError as exc:
            raise _http_error(exc) from exc
        return {"question_id": question_id, "answer": answer.to_payload()}

    @app.post("/navigate")
    def navigate(
        payload: NavigatePayload,
        current: QuizSession = Depends(session_dep),
    ) -> dict[str, object]:
        try:
            if payload.action == "next":
                index = current.next()
            elif payload.action == "previous":
                index = current.previous()
            else:
                if payload.index is None:
                    raise HTTPException(status_code=422, detail="'goto' needs an index.")
                index = current.go_to(payload.index)
        except AssessmentError as exc:
            raise _http_error(exc) from exc
        return {"current_index": index}

    @app.post("/review")
    def toggle_review(
        payload: ReviewPayload,
        current: QuizSession = Depends(session_dep),
    ) -> dict[str, object]:
        try:
            question_id, marked = current.toggle_review(payload.question_id)
        except AssessmentError as exc:
            raise _http_error(exc) from exc
        return {"question_id": question_id, "marked_for_review": marked}

    @app.post("/submit")
    def submit(current: QuizSession = Depends(session_dep)) -> dict[str, object]:
        try:
            result = current.submit()
        except AssessmentError as exc:
            raise _http_error(exc) from exc
        return _result_to_dict(result)

    @app.get("/result")
    def get_result(current: QuizSession = Depends(session_dep)) -> dict[str, object]:
        result = current.result
        snapshot = current.snapshot()
        if result is None or snapshot is None:
            raise HTTPException(status_code=404, detail="The session has not been submitted.")
        body = _result_to_dict(result)
        body["submission"] = submission_payload(current.session_ref, result, snapshot.answers)
        body["submission_acknowledged"] = current.submission_acknowledged
        return body

    @app.post("/result/resend")
    def resend_result(current: QuizSession = Depends(session_dep)) -> dict[str, object]:
        try:
            acknowledged = current.resend_result()
        except AssessmentError as exc:
            raise _http_error(exc) from exc
        return {"submission_acknowledged": acknowledged}

    @app.post("/retry")
    def retry(current: QuizSession = Depends(session_dep)) -> dict[str, object]:
        try:
            current.retry()
        except AssessmentError as exc:
            raise _http_error(exc) from exc
        return _view_to_dict(current)

    return app


def start_api_server(
    session: QuizSession,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
) -> Thread:
    """Start the FastAPI server in a background daemon thread."""

    app = create_api_app(session)
    config = uvicorn.Config(app=app, host=host, port=port, log_level="info")
    server = uvicorn.Server(config)

    def run_server() -> None:
        server.run()

    thread = Thread(target=run_server, name="QuizApiServer", daemon=True)
    thread.start()
    logger.info("API server listening on http://%s:%d/", host, port)
    return thread
