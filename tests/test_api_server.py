"""HTTP-level tests for the EduSpace API."""

from __future__ import annotations

from fastapi.testclient import TestClient
import pytest

from eduspace.core.quiz_manager import QuizManager
from eduspace.server.api_server import create_api_app

_QUIZ = {
    "quiz": [
        {"question": "What is **2+2**?", "options": ["3", "4", "5", "6"], "correctAnswerIndex": 1},
        {"question": "Capital of France?", "options": ["Rome", "Paris", "Oslo", "Bern"], "correctAnswerIndex": 1},
    ]
}


@pytest.fixture
def manager() -> QuizManager:
    return QuizManager()


@pytest.fixture
def client(manager, store) -> TestClient:
    return TestClient(create_api_app(manager, store))


def _start(client: TestClient, quiz: dict = _QUIZ) -> str:
    response = client.post("/quizzes", json=quiz)
    assert response.status_code == 201
    return response.json()["attempt_id"]


def test_take_quiz_over_http(client):
    attempt_id = _start(client)

    current = client.get(f"/quizzes/{attempt_id}").json()
    assert current["question_number"] == 1
    assert current["total"] == 2
    assert "<strong>2+2</strong>" in current["question_html"]

    answered = client.post(f"/quizzes/{attempt_id}/answer", json={"selected_option_index": 1}).json()
    assert answered["selected_option_index"] == 1

    client.post(f"/quizzes/{attempt_id}/advance")
    finished = client.post(f"/quizzes/{attempt_id}/advance").json()
    assert finished["phase"] == "completed"
    assert finished["outcome"] == {"score": 1, "total": 2, "percentage": 50.0, "passed": False}

    results = client.get(f"/quizzes/{attempt_id}/results").json()
    assert [row["is_correct"] for row in results["results"]] == [True, False]
    assert results["results"][1]["selected_option_text"] is None
    assert results["results"][1]["correct_option_text"] == "Paris"


def test_out_of_range_answer_is_rejected(client):
    attempt_id = _start(client)

    response = client.post(f"/quizzes/{attempt_id}/answer", json={"selected_option_index": 4})

    assert response.status_code == 422


def test_results_are_unavailable_while_in_progress(client):
    attempt_id = _start(client)

    assert client.get(f"/quizzes/{attempt_id}/results").status_code == 409
    assert client.post(f"/quizzes/{attempt_id}/retake").status_code == 409


def test_retake_and_completed_conflicts(client):
    attempt_id = _start(client)
    client.post(f"/quizzes/{attempt_id}/advance")
    client.post(f"/quizzes/{attempt_id}/advance")

    assert client.post(f"/quizzes/{attempt_id}/advance").status_code == 409
    assert client.post(f"/quizzes/{attempt_id}/answer", json={"selected_option_index": 0}).status_code == 409

    retaken = client.post(f"/quizzes/{attempt_id}/retake").json()
    assert retaken["phase"] == "in_progress"
    assert retaken["question_number"] == 1


def test_empty_quiz_is_completed_on_start(client):
    response = client.post("/quizzes", json={"quiz": []})

    body = response.json()
    assert body["phase"] == "completed"
    assert body["outcome"]["total"] == 0
    assert body["outcome"]["percentage"] == 0.0


def test_invalid_quiz_payload_is_rejected(client):
    bad = {"quiz": [{"question": "Q", "options": ["a", "b"], "correctAnswerIndex": 0}]}

    assert client.post("/quizzes", json=bad).status_code == 422


def test_unknown_and_discarded_attempts_return_404(client):
    attempt_id = _start(client)

    assert client.delete(f"/quizzes/{attempt_id}").status_code == 204
    assert client.get(f"/quizzes/{attempt_id}").status_code == 404
    assert client.delete(f"/quizzes/{attempt_id}").status_code == 404


def test_notification_workflow(client):
    created = client.post(
        "/notifications",
        json={
            "title": "New course",
            "description": "Machine Learning Foundations is live.",
            "category": "course",
            "link": "https://example.com/courses/ml",
        },
    )
    assert created.status_code == 201
    notification = created.json()
    assert notification["read"] is False
    assert notification["icon"] == "graduation-cap"
    assert notification["category_label"] == "Course Update"
    assert notification["link"] == "https://example.com/courses/ml"

    listing = client.get("/notifications").json()
    assert listing["unread_count"] == 1
    assert listing["notifications"][0]["id"] == notification["id"]

    assert client.post(f"/notifications/{notification['id']}/read").status_code == 204
    assert client.get("/notifications", params={"filter": "unread"}).json()["notifications"] == []
    assert client.post(f"/notifications/{notification['id']}/unread").status_code == 204
    assert client.get("/notifications").json()["unread_count"] == 1

    assert client.delete(f"/notifications/{notification['id']}").status_code == 204
    assert client.get("/notifications").json()["notifications"] == []

    restored = client.post("/notifications/undo")
    assert restored.status_code == 200
    assert restored.json()["title"] == "New course"
    assert client.post("/notifications/undo").status_code == 404


def test_bulk_read_state(client):
    for title in ("First notice", "Second notice"):
        client.post("/notifications", json={"title": title, "description": "Something happened today."})

    client.post("/notifications/read-all")
    assert client.get("/notifications").json()["unread_count"] == 0

    client.post("/notifications/unread-all")
    assert client.get("/notifications").json()["unread_count"] == 2


@pytest.mark.parametrize(
    "payload",
    [
        {"title": "Hi", "description": "Long enough description."},
        {"title": "Valid title", "description": "short"},
        {"title": "Valid title", "description": "Long enough description.", "link": "not a url"},
        {"title": "Valid title", "description": "Long enough description.", "category": "spam"},
    ],
)
def test_notification_form_validation(client, payload):
    assert client.post("/notifications", json=payload).status_code == 422


def test_course_announcement(client):
    response = client.post(
        "/announcements",
        json={
            "title": "Exam dates",
            "content": "The final exam for this course opens next Monday.",
            "scope": "course",
            "course_id": "course1",
        },
    )

    assert response.status_code == 201
    body = response.json()
    assert body["title"] == "New Announcement: Exam dates"
    assert body["category"] == "system"
    assert body["link"] == "/student/courses/course1"
    assert body["icon"] == "zap"


def test_platform_announcement_ignores_course_id(client):
    body = client.post(
        "/announcements",
        json={
            "title": "Maintenance",
            "content": "The platform will be offline on Sunday morning.",
            "scope": "platform",
            "course_id": "course1",
        },
    ).json()

    assert body["link"] is None


def test_course_announcement_requires_course(client):
    response = client.post(
        "/announcements",
        json={"title": "Exam dates", "content": "The final exam opens next Monday.", "scope": "course"},
    )

    assert response.status_code == 422


def test_openapi_document_carries_app_metadata(client):
    info = client.get("/openapi.json").json()["info"]

    assert info["title"] == "EduSpace API"
    assert info["license"]["name"] == "MIT License"
    assert "quiz player" in info["description"]
