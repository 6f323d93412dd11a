"""Presentation lookups for notification categories.

Icons are never persisted with a notification; views derive them from the
stored category at render time.
"""

from __future__ import annotations

from dataclasses import dataclass

from eduspace.core.models import NotificationCategory


@dataclass(frozen=True, slots=True)
class CategoryStyle:
    """Icon identifier, accent colour and badge variant for one category."""

    icon: str
    accent_color: str
    badge_variant: str
    label: str


DEFAULT_STYLE = CategoryStyle(icon="bell", accent_color="muted", badge_variant="secondary", label="General")

_CATEGORY_STYLES: dict[NotificationCategory, CategoryStyle] = {
    NotificationCategory.COURSE: CategoryStyle("graduation-cap", "blue-500", "default", "Course Update"),
    NotificationCategory.SYSTEM: CategoryStyle("zap", "orange-500", "destructive", "System Alert"),
    NotificationCategory.COMMUNITY: CategoryStyle("award", "green-500", "secondary", "Community"),
    NotificationCategory.GENERAL: DEFAULT_STYLE,
    NotificationCategory.SUGGESTION: CategoryStyle("message-square-heart", "purple-500", "secondary", "Suggestion"),
}


def style_for_category(category: NotificationCategory | str | None) -> CategoryStyle:
    if category is None:
        return DEFAULT_STYLE
    try:
        return _CATEGORY_STYLES[NotificationCategory(category)]
    except ValueError:
        return DEFAULT_STYLE


def icon_for_category(category: NotificationCategory | str | None) -> str:
    return style_for_category(category).icon
