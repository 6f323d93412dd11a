"""State machine for one student's pass through a lesson quiz."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence

from eduspace.core.models import Question, QuestionResult, QuizOutcome, QuizPhase

logger = logging.getLogger(__name__)

CompletionCallback = Callable[[int, int], None]


class QuizSession:
    """Presents one question at a time, records answers and scores the quiz.

    The hosting page supplies ``on_complete``; it receives ``(score, total)``
    once each time the student finishes the quiz. ``reset`` starts a new pass
    (retake), after which completion is reported again.
    """

    def __init__(
        self,
        questions: Sequence[Question],
        on_complete: CompletionCallback | None = None,
    ) -> None:
        self._questions: tuple[Question, ...] = tuple(questions)
        self._on_complete = on_complete
        self._answers: list[int | None] = []
        self._current_index: int = 0
        self._phase: QuizPhase = QuizPhase.IN_PROGRESS
        self._outcome: QuizOutcome | None = None
        self._begin_pass()

    @property
    def questions(self) -> tuple[Question, ...]:
        return self._questions

    @property
    def total(self) -> int:
        return len(self._questions)

    @property
    def phase(self) -> QuizPhase:
        return self._phase

    @property
    def current_index(self) -> int:
        return self._current_index

    @property
    def current_question(self) -> Question | None:
        if self._phase is not QuizPhase.IN_PROGRESS:
            return None
        return self._questions[self._current_index]

    @property
    def answers(self) -> tuple[int | None, ...]:
        return tuple(self._answers)

    @property
    def selected_answer(self) -> int | None:
        """Answer recorded for the current question, if any."""
        if self._phase is not QuizPhase.IN_PROGRESS:
            return None
        return self._answers[self._current_index]

    @property
    def is_last_question(self) -> bool:
        return self._current_index == len(self._questions) - 1

    @property
    def outcome(self) -> QuizOutcome | None:
        return self._outcome

    @property
    def score(self) -> int:
        return self._outcome.score if self._outcome is not None else 0

    def select_answer(self, option_index: int) -> None:
        """Record or overwrite the answer for the current question."""
        question = self.current_question
        if question is None:
            logger.warning("Ignoring answer selection on a completed quiz.")
            return
        if not 0 <= option_index < len(question.options):
            logger.warning(
                "Ignoring out-of-range option %s for question %s.",
                option_index,
                self._current_index,
            )
            return
        self._answers[self._current_index] = option_index

    def advance(self) -> QuizOutcome | None:
        """Move to the next question, or finish the quiz on the last one.

        Unanswered questions may be skipped. Returns the outcome when this call
        completed the quiz, otherwise ``None``.
        """
        if self._phase is QuizPhase.COMPLETED:
            return None
        if not self.is_last_question:
            self._current_index += 1
            return None
        return self._complete()

    def reset(self) -> None:
        """Start a retake. Only meaningful once the quiz is completed."""
        if self._phase is not QuizPhase.COMPLETED:
            logger.debug("Reset requested while quiz is in progress; ignoring.")
            return
        self._begin_pass()

    def results_view(self) -> list[QuestionResult]:
        if self._phase is not QuizPhase.COMPLETED:
            return []
        results: list[QuestionResult] = []
        for position, (question, answer) in enumerate(zip(self._questions, self._answers)):
            results.append(
                QuestionResult(
                    position=position,
                    question=question.question,
                    selected_option_index=answer,
                    selected_option_text=question.options[answer] if answer is not None else None,
                    is_correct=answer == question.correct_answer_index,
                    correct_option_index=question.correct_answer_index,
                    correct_option_text=question.options[question.correct_answer_index],
                )
            )
        return results

    def _begin_pass(self) -> None:
        self._answers = [None] * len(self._questions)
        self._current_index = 0
        self._phase = QuizPhase.IN_PROGRESS
        self._outcome = None
        if not self._questions:
            # Nothing to present: an empty quiz completes immediately with 0/0.
            self._complete()

    def _complete(self) -> QuizOutcome:
        score = sum(
            1
            for question, answer in zip(self._questions, self._answers)
            if answer == question.correct_answer_index
        )
        self._phase = QuizPhase.COMPLETED
        self._outcome = QuizOutcome(score=score, total=len(self._questions))
        logger.info("Quiz completed with score %s/%s.", score, len(self._questions))
        if self._on_complete is not None:
            self._on_complete(score, len(self._questions))
        return self._outcome
