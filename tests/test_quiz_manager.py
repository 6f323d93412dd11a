"""Tests for the attempt registry used by the API."""

from __future__ import annotations

import pytest

from eduspace.core.models import QuizPhase
from eduspace.core.quiz_manager import QuizManager


def test_attempt_lifecycle(arithmetic_quiz):
    manager = QuizManager()
    attempt_id = manager.start_attempt(arithmetic_quiz)

    manager.select_answer(attempt_id, 1)
    manager.advance(attempt_id)
    manager.select_answer(attempt_id, 1)
    manager.advance(attempt_id)
    snapshot = manager.advance(attempt_id)

    assert snapshot.phase is QuizPhase.COMPLETED
    assert snapshot.outcome.score == 2
    outcome, results = manager.results(attempt_id)
    assert outcome.total == 3
    assert [result.is_correct for result in results] == [True, True, False]

    completions = manager.completed_outcomes()
    assert [c.attempt_id for c in completions] == [attempt_id]
    assert completions[0].outcome.score == 2


def test_retake_records_a_second_completion(arithmetic_quiz):
    manager = QuizManager()
    attempt_id = manager.start_attempt(arithmetic_quiz[:1])
    manager.advance(attempt_id)

    snapshot = manager.retake(attempt_id)
    assert snapshot.phase is QuizPhase.IN_PROGRESS
    assert snapshot.selected_answer is None

    manager.select_answer(attempt_id, 1)
    manager.advance(attempt_id)
    assert [c.outcome.score for c in manager.completed_outcomes()] == [0, 1]


def test_attempts_are_independent(arithmetic_quiz):
    manager = QuizManager()
    first = manager.start_attempt(arithmetic_quiz)
    second = manager.start_attempt(arithmetic_quiz)

    manager.select_answer(first, 3)
    manager.advance(first)

    assert manager.snapshot(first).current_index == 1
    assert manager.snapshot(second).current_index == 0
    assert manager.snapshot(second).selected_answer is None


def test_unknown_attempt_raises_key_error():
    manager = QuizManager()

    with pytest.raises(KeyError):
        manager.snapshot("missing")
    with pytest.raises(KeyError):
        manager.discard("missing")


def test_discard_removes_attempt(arithmetic_quiz):
    manager = QuizManager()
    attempt_id = manager.start_attempt(arithmetic_quiz)

    manager.discard(attempt_id)

    assert not manager.has_attempt(attempt_id)


def test_empty_quiz_attempt_is_completed_immediately():
    manager = QuizManager()
    attempt_id = manager.start_attempt([])

    snapshot = manager.snapshot(attempt_id)

    assert snapshot.phase is QuizPhase.COMPLETED
    assert snapshot.outcome.total == 0
    assert manager.completed_outcomes()[0].attempt_id == attempt_id


def test_completion_history_keeps_most_recent_attempts():
    manager = QuizManager(history_capacity=2)
    attempt_ids = [manager.start_attempt([]) for _ in range(3)]

    kept = [attempt.attempt_id for attempt in manager.completed_outcomes()]

    assert kept == attempt_ids[1:]
