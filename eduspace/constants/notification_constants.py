"""Notification log constants: storage keys, undo depth and form limits."""

from pathlib import Path

NOTIFICATIONS_STORAGE_KEY: str = "eduspace_notifications"
READ_NOTIFICATION_IDS_STORAGE_KEY: str = "eduspace_readNotificationIds"
UNDO_HISTORY_CAPACITY: int = 10

DEFAULT_STORAGE_PATH: Path = Path.home() / ".eduspace" / "storage.json"

TITLE_MIN_LENGTH: int = 5
TITLE_MAX_LENGTH: int = 100
DESCRIPTION_MIN_LENGTH: int = 10
DESCRIPTION_MAX_LENGTH: int = 500
ANNOUNCEMENT_CONTENT_MIN_LENGTH: int = 20
ANNOUNCEMENT_CONTENT_MAX_LENGTH: int = 2000
ANNOUNCEMENT_PREVIEW_LENGTH: int = 100
ANNOUNCEMENT_TITLE_PREFIX: str = "New Announcement: "
