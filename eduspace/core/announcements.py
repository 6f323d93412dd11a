"""Broadcasting admin announcements through the notification log."""

from __future__ import annotations

from eduspace.constants.notification_constants import (
    ANNOUNCEMENT_PREVIEW_LENGTH,
    ANNOUNCEMENT_TITLE_PREFIX,
)
from eduspace.core.models import NotificationCategory, NotificationRecord
from eduspace.core.services.notification_store import NotificationStore


def summarize_content(content: str, limit: int = ANNOUNCEMENT_PREVIEW_LENGTH) -> str:
    if len(content) <= limit:
        return content
    return content[:limit] + "..."


def course_link(course_id: str) -> str:
    return f"/student/courses/{course_id}"


def publish_announcement(
    store: NotificationStore,
    title: str,
    content: str,
    course_id: str | None = None,
) -> NotificationRecord:
    """Record an announcement as a system notification.

    Course announcements link to the course page; platform ones carry no link.
    """
    return store.add(
        title=f"{ANNOUNCEMENT_TITLE_PREFIX}{title}",
        description=summarize_content(content),
        category=NotificationCategory.SYSTEM,
        link=course_link(course_id) if course_id else None,
    )
