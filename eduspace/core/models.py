"""Domain models for the quiz player and the notification log."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum, auto

from eduspace.constants.quiz_constants import PASSING_PERCENTAGE


@dataclass(frozen=True, slots=True)
class Question:
    """Multiple-choice lesson question with exactly four options."""

    question: str
    options: tuple[str, ...]
    correct_answer_index: int


class QuizPhase(Enum):
    IN_PROGRESS = auto()
    COMPLETED = auto()


@dataclass(frozen=True, slots=True)
class QuizOutcome:
    """Final score of one pass through a quiz."""

    score: int
    total: int

    @property
    def percentage(self) -> float:
        if self.total == 0:
            return 0.0
        return (self.score / self.total) * 100

    @property
    def passed(self) -> bool:
        return self.total > 0 and self.percentage >= PASSING_PERCENTAGE


@dataclass(frozen=True, slots=True)
class QuestionResult:
    """Per-question row of the results screen."""

    position: int
    question: str
    selected_option_index: int | None
    selected_option_text: str | None
    is_correct: bool
    correct_option_index: int
    correct_option_text: str


class NotificationCategory(str, Enum):
    COURSE = "course"
    SYSTEM = "system"
    COMMUNITY = "community"
    GENERAL = "general"
    SUGGESTION = "suggestion"


class NotificationFilter(str, Enum):
    ALL = "all"
    UNREAD = "unread"
    READ = "read"


@dataclass(frozen=True, slots=True)
class NotificationRecord:
    """Persisted notification. Read state is tracked separately by id."""

    id: str
    title: str
    description: str
    created_at: datetime
    category: NotificationCategory = NotificationCategory.GENERAL
    link: str | None = None

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "createdAt": self.created_at.isoformat(),
            "category": self.category.value,
            "link": self.link,
        }

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> "NotificationRecord":
        """Rebuild a record from its stored form.

        Raises KeyError, TypeError or ValueError when the data is malformed.
        """
        link = data.get("link")
        created_at = datetime.fromisoformat(str(data["createdAt"]))
        if created_at.tzinfo is None:
            # Records written without an offset are taken as UTC.
            created_at = created_at.replace(tzinfo=timezone.utc)
        return cls(
            id=str(data["id"]),
            title=str(data["title"]),
            description=str(data["description"]),
            created_at=created_at,
            category=NotificationCategory(data.get("category", NotificationCategory.GENERAL.value)),
            link=str(link) if link else None,
        )


@dataclass(frozen=True, slots=True)
class NotificationView:
    """A notification joined with its current read flag."""

    id: str
    title: str
    description: str
    created_at: datetime
    category: NotificationCategory
    link: str | None
    read: bool

    @classmethod
    def from_record(cls, record: NotificationRecord, read: bool) -> "NotificationView":
        return cls(
            id=record.id,
            title=record.title,
            description=record.description,
            created_at=record.created_at,
            category=record.category,
            link=record.link,
            read=read,
        )
