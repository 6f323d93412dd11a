"""Loading lesson quizzes from hand-authored text files or generated JSON.

Text format (repeat blocks separated by blank lines or '---'):

    Q: Question text (markdown). Additional lines until the next marker are
       treated as part of the question.
    A: First option text
    B: Second option text
    C: Third option text
    D: Fourth option text
    CORRECT: A|B|C|D

Example:

    Q: What does `len([1, 2, 3])` return?
    A: 2
    B: 3
    C: 4
    D: An error
    CORRECT: B

JSON format (as returned by the quiz generation flow):

    {"quiz": [{"question": "...", "options": ["...", "...", "...", "..."],
               "correctAnswerIndex": 1}]}

A bare list of question objects is accepted as well.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from eduspace.constants.quiz_constants import OPTION_COUNT, OPTION_LETTERS
from eduspace.core.models import Question


class QuizImportError(Exception):
    """Raised when a quiz definition cannot be parsed."""


class GeneratedQuestion(BaseModel):
    """One question as produced by the generation service."""

    model_config = ConfigDict(populate_by_name=True)

    question: str = Field(min_length=1)
    options: list[str] = Field(min_length=OPTION_COUNT, max_length=OPTION_COUNT)
    correct_answer_index: int = Field(alias="correctAnswerIndex", ge=0, le=OPTION_COUNT - 1)

    @field_validator("question")
    @classmethod
    def _strip_question(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("Question text must not be empty.")
        return stripped

    @field_validator("options")
    @classmethod
    def _strip_options(cls, value: list[str]) -> list[str]:
        cleaned = [option.strip() for option in value]
        if any(not option for option in cleaned):
            raise ValueError("Option text cannot be empty.")
        return cleaned

    def to_question(self) -> Question:
        return Question(
            question=self.question,
            options=tuple(self.options),
            correct_answer_index=self.correct_answer_index,
        )


class GeneratedQuiz(BaseModel):
    quiz: list[GeneratedQuestion]


def load_quiz_from_file(file_path: Path) -> list[Question]:
    """Load a quiz from disk, choosing the parser from the file suffix."""
    text = file_path.read_text(encoding="utf-8")
    if file_path.suffix.lower() == ".json":
        return load_quiz_from_json(text)
    questions = parse_quiz_text(text)
    if not questions:
        raise QuizImportError("Quiz file did not contain any questions.")
    return questions


def load_quiz_from_json(text: str) -> list[Question]:
    stripped = text.lstrip()
    try:
        if stripped.startswith("["):
            quiz = GeneratedQuiz.model_validate_json(f'{{"quiz": {text}}}')
        else:
            quiz = GeneratedQuiz.model_validate_json(text)
    except ValidationError as exc:
        raise QuizImportError(f"Invalid quiz JSON: {exc.errors()[0]['msg']}") from exc
    return [item.to_question() for item in quiz.quiz]


def parse_quiz_text(text: str) -> list[Question]:
    blocks: list[str] = []
    current_block: list[str] = []
    for raw_line in text.splitlines():
        stripped = raw_line.strip()
        if stripped == "---":
            if current_block:
                blocks.append("\n".join(current_block).strip())
                current_block = []
            continue
        if stripped:
            current_block.append(raw_line)
        elif current_block:
            blocks.append("\n".join(current_block).strip())
            current_block = []
    if current_block:
        blocks.append("\n".join(current_block).strip())

    return [_parse_block(block) for block in blocks if block]


def _parse_block(block: str) -> Question:
    question_lines: list[str] = []
    options: dict[str, str] = {}
    correct_letter: str | None = None
    current_section: str | None = None

    for raw_line in block.splitlines():
        line = raw_line.strip()
        if not line:
            continue

        upper = line.upper()
        if upper.startswith("Q:"):
            question_lines = [line[2:].strip()]
            current_section = "Q"
            continue

        if upper.startswith("CORRECT:"):
            correct_letter = line.split(":", 1)[1].strip().upper()
            current_section = None
            continue

        if len(line) > 2 and line[0].upper() in OPTION_LETTERS and line[1] == ":":
            letter = line[0].upper()
            options[letter] = line[2:].strip()
            current_section = letter
            continue

        if current_section == "Q":
            question_lines.append(line)
        elif current_section in OPTION_LETTERS:
            options[current_section] = options[current_section] + f"\n{line}"
        else:
            raise QuizImportError(f"Encountered text outside of a known section: '{line}'.")

    question_text = "\n".join(question_lines).strip()
    if not question_text:
        raise QuizImportError("Question text missing (Q: ...)")
    if len(options) != OPTION_COUNT:
        raise QuizImportError("Each question must define exactly four options (A-D).")

    option_list = tuple(options[letter].strip() for letter in OPTION_LETTERS)
    if any(not option for option in option_list):
        raise QuizImportError("Option text cannot be empty.")

    if correct_letter is None:
        raise QuizImportError(f"Question '{question_text}' is missing a CORRECT line.")
    if correct_letter not in OPTION_LETTERS:
        raise QuizImportError("CORRECT must be one of A, B, C, or D.")

    return Question(
        question=question_text,
        options=option_list,
        correct_answer_index=OPTION_LETTERS.index(correct_letter),
    )
