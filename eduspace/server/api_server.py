"""FastAPI server exposing the quiz player and the notification log."""

from __future__ import annotations

from datetime import timezone
import logging

from fastapi import Depends, FastAPI, HTTPException, Query, Response
import uvicorn

from eduspace.constants.about import APP_ABOUT_TEXT, APP_LICENSE, APP_NAME, APP_VERSION
from eduspace.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT
from eduspace.core.announcements import publish_announcement
from eduspace.core.markdown_renderer import renderer
from eduspace.core.models import (
    NotificationFilter,
    NotificationView,
    QuestionResult,
    QuizOutcome,
    QuizPhase,
)
from eduspace.core.notification_icons import style_for_category
from eduspace.core.quiz_manager import AttemptSnapshot, QuizManager
from eduspace.core.services.notification_store import NotificationStore
from eduspace.server.schemas import (
    AnnouncementPayload,
    AnnouncementScope,
    AnswerPayload,
    NotificationPayload,
    QuizPayload,
)

logger = logging.getLogger(__name__)


def _outcome_payload(outcome: QuizOutcome | None) -> dict[str, object] | None:
    if outcome is None:
        return None
    return {
        "score": outcome.score,
        "total": outcome.total,
        "percentage": outcome.percentage,
        "passed": outcome.passed,
    }


def _attempt_payload(snapshot: AttemptSnapshot) -> dict[str, object]:
    question = snapshot.current_question
    if question is None:
        return {
            "attempt_id": snapshot.attempt_id,
            "phase": snapshot.phase.name.lower(),
            "question_number": None,
            "total": snapshot.total,
            "question_html": None,
            "options": [],
            "selected_option_index": None,
            "is_last_question": False,
            "outcome": _outcome_payload(snapshot.outcome),
        }
    return {
        "attempt_id": snapshot.attempt_id,
        "phase": snapshot.phase.name.lower(),
        "question_number": snapshot.current_index + 1,
        "total": snapshot.total,
        "question_html": renderer.render_fragment(question.question),
        "options": list(question.options),
        "selected_option_index": snapshot.selected_answer,
        "is_last_question": snapshot.is_last_question,
        "outcome": None,
    }


def _result_payload(result: QuestionResult) -> dict[str, object]:
    return {
        "question_number": result.position + 1,
        "question": result.question,
        "selected_option_index": result.selected_option_index,
        "selected_option_text": result.selected_option_text,
        "is_correct": result.is_correct,
        "correct_option_index": result.correct_option_index,
        "correct_option_text": result.correct_option_text,
    }


def _notification_payload(view: NotificationView) -> dict[str, object]:
    style = style_for_category(view.category)
    return {
        "id": view.id,
        "title": view.title,
        "description": view.description,
        "description_html": renderer.render_fragment(view.description),
        "created_at": view.created_at.astimezone(timezone.utc).isoformat(),
        "category": view.category.value,
        "link": view.link,
        "read": view.read,
        "icon": style.icon,
        "accent_color": style.accent_color,
        "badge_variant": style.badge_variant,
        "category_label": style.label,
    }


def _get_dependency(value):
    def dependency():
        return value

    return dependency


def create_api_app(quiz_manager: QuizManager, notification_store: NotificationStore) -> FastAPI:
    """Create a FastAPI application wired to the provided quiz manager and store."""
    app = FastAPI(
        title=f"{APP_NAME} API",
        version=APP_VERSION,
        description=APP_ABOUT_TEXT,
        license_info={"name": APP_LICENSE},
    )
    quiz_manager_dep = _get_dependency(quiz_manager)
    store_dep = _get_dependency(notification_store)

    def _require_attempt(manager: QuizManager, attempt_id: str) -> AttemptSnapshot:
        try:
            return manager.snapshot(attempt_id)
        except KeyError as exc:
            raise HTTPException(status_code=404, detail="Quiz attempt not found.") from exc

    # --- Quiz attempts ---

    @app.post("/quizzes", status_code=201)
    def start_quiz(
        payload: QuizPayload,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        questions = [item.to_question() for item in payload.quiz]
        attempt_id = manager.start_attempt(questions)
        return _attempt_payload(manager.snapshot(attempt_id))

    @app.get("/quizzes/{attempt_id}")
    def get_attempt(attempt_id: str, manager: QuizManager = Depends(quiz_manager_dep)) -> dict[str, object]:
        return _attempt_payload(_require_attempt(manager, attempt_id))

    @app.post("/quizzes/{attempt_id}/answer")
    def select_answer(
        attempt_id: str,
        payload: AnswerPayload,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        snapshot = _require_attempt(manager, attempt_id)
        if snapshot.current_question is None:
            raise HTTPException(status_code=409, detail="Quiz attempt is already completed.")
        if payload.selected_option_index >= len(snapshot.current_question.options):
            raise HTTPException(status_code=422, detail="Selected option is out of range.")
        return _attempt_payload(manager.select_answer(attempt_id, payload.selected_option_index))

    @app.post("/quizzes/{attempt_id}/advance")
    def advance(attempt_id: str, manager: QuizManager = Depends(quiz_manager_dep)) -> dict[str, object]:
        snapshot = _require_attempt(manager, attempt_id)
        if snapshot.phase is QuizPhase.COMPLETED:
            raise HTTPException(status_code=409, detail="Quiz attempt is already completed.")
        return _attempt_payload(manager.advance(attempt_id))

    @app.post("/quizzes/{attempt_id}/retake")
    def retake(attempt_id: str, manager: QuizManager = Depends(quiz_manager_dep)) -> dict[str, object]:
        snapshot = _require_attempt(manager, attempt_id)
        if snapshot.phase is not QuizPhase.COMPLETED:
            raise HTTPException(status_code=409, detail="Finish the quiz before retaking it.")
        return _attempt_payload(manager.retake(attempt_id))

    @app.get("/quizzes/{attempt_id}/results")
    def get_results(attempt_id: str, manager: QuizManager = Depends(quiz_manager_dep)) -> dict[str, object]:
        snapshot = _require_attempt(manager, attempt_id)
        if snapshot.phase is not QuizPhase.COMPLETED:
            raise HTTPException(status_code=409, detail="Quiz attempt is still in progress.")
        outcome, results = manager.results(attempt_id)
        return {
            "attempt_id": attempt_id,
            "outcome": _outcome_payload(outcome),
            "results": [_result_payload(result) for result in results],
        }

    @app.delete("/quizzes/{attempt_id}", status_code=204)
    def discard_attempt(attempt_id: str, manager: QuizManager = Depends(quiz_manager_dep)) -> Response:
        try:
            manager.discard(attempt_id)
        except KeyError as exc:
            raise HTTPException(status_code=404, detail="Quiz attempt not found.") from exc
        return Response(status_code=204)

    # --- Notifications ---

    @app.get("/notifications")
    def list_notifications(
        status: NotificationFilter = Query(NotificationFilter.ALL, alias="filter"),
        store: NotificationStore = Depends(store_dep),
    ) -> dict[str, object]:
        return {
            "notifications": [_notification_payload(view) for view in store.list(status)],
            "unread_count": store.unread_count(),
        }

    @app.post("/notifications", status_code=201)
    def add_notification(
        payload: NotificationPayload,
        store: NotificationStore = Depends(store_dep),
    ) -> dict[str, object]:
        record = store.add(
            title=payload.title,
            description=payload.description,
            category=payload.category,
            link=str(payload.link) if payload.link else None,
        )
        created = store.get(record.id)
        if created is None:
            # Storage is unavailable; report the record as created but unpersisted.
            return _notification_payload(NotificationView.from_record(record, read=False))
        return _notification_payload(created)

    @app.delete("/notifications/{notification_id}", status_code=204)
    def delete_notification(
        notification_id: str,
        store: NotificationStore = Depends(store_dep),
    ) -> Response:
        store.delete(notification_id)
        return Response(status_code=204)

    @app.post("/notifications/undo")
    def undo_deletion(store: NotificationStore = Depends(store_dep)) -> dict[str, object]:
        restored = store.undo_last_deletion()
        if restored is None:
            raise HTTPException(status_code=404, detail="There is no deleted notification to restore.")
        return _notification_payload(restored)

    @app.post("/notifications/read-all", status_code=204)
    def mark_all_read(store: NotificationStore = Depends(store_dep)) -> Response:
        store.mark_all_read()
        return Response(status_code=204)

    @app.post("/notifications/unread-all", status_code=204)
    def mark_all_unread(store: NotificationStore = Depends(store_dep)) -> Response:
        store.mark_all_unread()
        return Response(status_code=204)

    @app.post("/notifications/{notification_id}/read", status_code=204)
    def mark_read(notification_id: str, store: NotificationStore = Depends(store_dep)) -> Response:
        store.mark_read(notification_id)
        return Response(status_code=204)

    @app.post("/notifications/{notification_id}/unread", status_code=204)
    def mark_unread(notification_id: str, store: NotificationStore = Depends(store_dep)) -> Response:
        store.mark_unread(notification_id)
        return Response(status_code=204)

    # --- Announcements ---

    @app.post("/announcements", status_code=201)
    def announce(
        payload: AnnouncementPayload,
        store: NotificationStore = Depends(store_dep),
    ) -> dict[str, object]:
        course_id = payload.course_id if payload.scope is AnnouncementScope.COURSE else None
        record = publish_announcement(store, payload.title, payload.content, course_id=course_id)
        logger.info("Announcement broadcast as notification %s.", record.id)
        return _notification_payload(NotificationView.from_record(record, read=False))

    return app


def run_api_server(
    quiz_manager: QuizManager,
    notification_store: NotificationStore,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
) -> None:
    """Serve the API in the calling thread until interrupted."""
    app = create_api_app(quiz_manager, notification_store)
    uvicorn.run(app, host=host, port=port, log_level="info")

