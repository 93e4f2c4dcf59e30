from __future__ import annotations

from fastapi.testclient import TestClient
import pytest

from assessment_app.core.services.question_bank import StaticQuestionSource
from assessment_app.server.api_server import create_api_app


@pytest.fixture
def session(make_session):
    return make_session(duration_seconds=60)


@pytest.fixture
def client(session):
    return TestClient(create_api_app(session))


def test_full_attempt_over_http(client, clock):
    assert client.get("/session").json()["state"] == "created"
    assert client.post("/session/start").status_code == 201

    question = client.get("/question").json()
    assert question["question_id"] == "q1"
    assert question["kind"] == "single-choice"
    assert "<p>" in question["prompt_html"]

    assert client.post("/answer", json={"value": 1}).status_code == 201
    assert client.post("/navigate", json={"action": "next"}).json() == {"current_index": 1}
    assert client.post("/answer", json={"value": True}).json() == {"question_id": "q2", "answer": 0}
    assert client.post("/answer", json={"question_id": "q3", "value": ["C", "B", "A"]}).status_code == 201
    client.post("/answer", json={"question_id": "q4", "value": {"X": "1", "Y": "2"}})
    review = client.post("/review", json={}).json()
    assert review == {"question_id": "q2", "marked_for_review": True}

    clock.advance(7)
    result = client.post("/submit").json()
    assert result["correct_count"] == 4
    assert result["score_percent"] == 100
    assert result["time_spent_seconds"] == 7
    assert result["message"].startswith("Excellent")

    body = client.get("/result").json()
    assert body["submission"]["quizId"] == "physics-101"
    assert body["submission_acknowledged"] is True

    view = client.get("/session").json()
    assert view["state"] == "submitted"
    assert {"question_id": "q2", "status": "marked"} in view["palette"]


def test_matching_question_hides_pairing(client):
    client.post("/session/start")
    client.post("/navigate", json={"action": "goto", "index": 3})
    question = client.get("/question").json()
    assert question["left"] == ["X", "Y"]
    assert question["right"] == ["1", "2"]


def test_error_mapping(client):
    assert client.get("/question").status_code == 409
    assert client.post("/answer", json={"value": 1}).status_code == 409
    client.post("/session/start")
    assert client.post("/session/start").status_code == 409
    assert client.post("/answer", json={"value": 9}).status_code == 422
    assert client.post("/answer", json={"question_id": "nope", "value": 1}).status_code == 404
    assert client.post("/navigate", json={"action": "goto"}).status_code == 422
    assert client.post("/navigate", json={"action": "sideways"}).status_code == 422
    assert client.get("/result").status_code == 404


def test_empty_quiz_cannot_start(make_session):
    client = TestClient(create_api_app(make_session(source=StaticQuestionSource([]))))
    response = client.post("/session/start")
    assert response.status_code == 422
    assert client.get("/session").json()["state"] == "created"


def test_retry_over_http(client):
    client.post("/session/start")
    client.post("/answer", json={"value": 1})
    client.post("/submit")

    view = client.post("/retry").json()

    assert view["state"] == "in-progress"
    assert view["answered_ids"] == []
    assert view["remaining_seconds"] == 60
