"""Request payload schemas for the EduSpace API."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field, HttpUrl, model_validator

from eduspace.constants.notification_constants import (
    ANNOUNCEMENT_CONTENT_MAX_LENGTH,
    ANNOUNCEMENT_CONTENT_MIN_LENGTH,
    DESCRIPTION_MAX_LENGTH,
    DESCRIPTION_MIN_LENGTH,
    TITLE_MAX_LENGTH,
    TITLE_MIN_LENGTH,
)
from eduspace.core.models import NotificationCategory
from eduspace.core.quiz_importer import GeneratedQuestion


class QuizPayload(BaseModel):
    """Quiz handed over by a lesson page or by the generation flow."""

    quiz: list[GeneratedQuestion]


class AnswerPayload(BaseModel):
    """Payload schema for a selected option."""

    selected_option_index: int = Field(ge=0)


class NotificationPayload(BaseModel):
    """Admin form for a new notification."""

    title: str = Field(min_length=TITLE_MIN_LENGTH, max_length=TITLE_MAX_LENGTH)
    description: str = Field(min_length=DESCRIPTION_MIN_LENGTH, max_length=DESCRIPTION_MAX_LENGTH)
    link: HttpUrl | None = None
    category: NotificationCategory = NotificationCategory.GENERAL


class AnnouncementScope(str, Enum):
    PLATFORM = "platform"
    COURSE = "course"


class AnnouncementPayload(BaseModel):
    """Admin form for a platform-wide or course announcement."""

    title: str = Field(min_length=TITLE_MIN_LENGTH, max_length=TITLE_MAX_LENGTH)
    content: str = Field(
        min_length=ANNOUNCEMENT_CONTENT_MIN_LENGTH,
        max_length=ANNOUNCEMENT_CONTENT_MAX_LENGTH,
    )
    scope: AnnouncementScope
    course_id: str | None = None

    @model_validator(mode="after")
    def _require_course_for_course_scope(self) -> "AnnouncementPayload":
        if self.scope is AnnouncementScope.COURSE and not self.course_id:
            raise ValueError("Please select a course for this announcement.")
        return self
