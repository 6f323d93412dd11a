"""Registry of live quiz attempts shared between API worker threads."""

from __future__ import annotations

from collections import deque
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, timezone
import logging
from threading import Lock
from uuid import uuid4

from eduspace.constants.quiz_constants import COMPLETION_HISTORY_CAPACITY
from eduspace.core.models import Question, QuestionResult, QuizOutcome, QuizPhase
from eduspace.core.services.quiz_session import QuizSession

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CompletedAttempt:
    """Record of one completion reported by a quiz session."""

    attempt_id: str
    outcome: QuizOutcome
    completed_at: datetime


@dataclass(frozen=True, slots=True)
class AttemptSnapshot:
    """Consistent view of an attempt, captured under the manager lock."""

    attempt_id: str
    phase: QuizPhase
    current_index: int
    total: int
    current_question: Question | None
    selected_answer: int | None
    is_last_question: bool
    outcome: QuizOutcome | None


class QuizManager:
    """Facade owning one QuizSession per attempt id.

    Each session is used by a single student; the lock only protects the
    attempt map and keeps every operation atomic for the calling thread.
    Unknown attempt ids raise ``KeyError``. Only the most recent
    ``history_capacity`` completions are kept.
    """

    def __init__(self, history_capacity: int = COMPLETION_HISTORY_CAPACITY) -> None:
        self._lock = Lock()
        self._sessions: dict[str, QuizSession] = {}
        self._completions: deque[CompletedAttempt] = deque(maxlen=history_capacity)

    def start_attempt(self, questions: Sequence[Question]) -> str:
        attempt_id = uuid4().hex
        with self._lock:
            self._sessions[attempt_id] = QuizSession(
                questions,
                on_complete=lambda score, total: self._record_completion(attempt_id, score, total),
            )
        logger.info("Started quiz attempt %s with %s question(s).", attempt_id, len(questions))
        return attempt_id

    def has_attempt(self, attempt_id: str) -> bool:
        with self._lock:
            return attempt_id in self._sessions

    def snapshot(self, attempt_id: str) -> AttemptSnapshot:
        with self._lock:
            return self._snapshot(attempt_id)

    def select_answer(self, attempt_id: str, option_index: int) -> AttemptSnapshot:
        with self._lock:
            self._session(attempt_id).select_answer(option_index)
            return self._snapshot(attempt_id)

    def advance(self, attempt_id: str) -> AttemptSnapshot:
        with self._lock:
            self._session(attempt_id).advance()
            return self._snapshot(attempt_id)

    def retake(self, attempt_id: str) -> AttemptSnapshot:
        with self._lock:
            self._session(attempt_id).reset()
            return self._snapshot(attempt_id)

    def results(self, attempt_id: str) -> tuple[QuizOutcome | None, list[QuestionResult]]:
        with self._lock:
            session = self._session(attempt_id)
            return session.outcome, session.results_view()

    def discard(self, attempt_id: str) -> None:
        with self._lock:
            if self._sessions.pop(attempt_id, None) is None:
                raise KeyError(attempt_id)

    def completed_outcomes(self) -> list[CompletedAttempt]:
        with self._lock:
            return list(self._completions)

    def _session(self, attempt_id: str) -> QuizSession:
        session = self._sessions.get(attempt_id)
        if session is None:
            raise KeyError(attempt_id)
        return session

    def _snapshot(self, attempt_id: str) -> AttemptSnapshot:
        session = self._session(attempt_id)
        return AttemptSnapshot(
            attempt_id=attempt_id,
            phase=session.phase,
            current_index=session.current_index,
            total=session.total,
            current_question=session.current_question,
            selected_answer=session.selected_answer,
            is_last_question=session.is_last_question,
            outcome=session.outcome,
        )

    def _record_completion(self, attempt_id: str, score: int, total: int) -> None:
        # Invoked by the session while the caller already holds the lock.
        self._completions.append(
            CompletedAttempt(
                attempt_id=attempt_id,
                outcome=QuizOutcome(score=score, total=total),
                completed_at=datetime.now(timezone.utc),
            )
        )
