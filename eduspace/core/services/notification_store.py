"""Local notification log with separately tracked read state and undoable deletes."""

from __future__ import annotations

from collections import deque
from collections.abc import Callable
from datetime import datetime, timezone
import json
import logging
from uuid import uuid4

from eduspace.constants.notification_constants import (
    NOTIFICATIONS_STORAGE_KEY,
    READ_NOTIFICATION_IDS_STORAGE_KEY,
    UNDO_HISTORY_CAPACITY,
)
from eduspace.core.models import (
    NotificationCategory,
    NotificationFilter,
    NotificationRecord,
    NotificationView,
)
from eduspace.core.services.key_value_storage import KeyValueStorage

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _generate_notification_id(created_at: datetime) -> str:
    # Millisecond timestamp alone collides for rapid successive adds.
    return f"notif{int(created_at.timestamp() * 1000)}-{uuid4().hex[:7]}"


def _newest_first(records: list[NotificationRecord]) -> list[NotificationRecord]:
    return sorted(records, key=lambda record: record.created_at, reverse=True)


class NotificationStore:
    """Append-only notification log persisted to a key-value medium.

    The log and the read-id set live under two separate keys so that a
    record's read state can change without rewriting the record. Deleted
    records are kept in a bounded in-memory history for undo; that history is
    owned by this instance and disappears with it.

    ``storage=None`` models a context without a persistence medium: reads
    return nothing and writes are dropped. No operation raises because of the
    medium; failures are logged instead.
    """

    def __init__(
        self,
        storage: KeyValueStorage | None,
        *,
        notifications_key: str = NOTIFICATIONS_STORAGE_KEY,
        read_ids_key: str = READ_NOTIFICATION_IDS_STORAGE_KEY,
        undo_capacity: int = UNDO_HISTORY_CAPACITY,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._storage = storage
        self._notifications_key = notifications_key
        self._read_ids_key = read_ids_key
        self._clock = clock
        self._deleted_history: deque[NotificationRecord] = deque(maxlen=undo_capacity)

    @property
    def undo_depth(self) -> int:
        return len(self._deleted_history)

    # --- Log mutations ---

    def add(
        self,
        title: str,
        description: str,
        category: NotificationCategory = NotificationCategory.GENERAL,
        link: str | None = None,
    ) -> NotificationRecord:
        """Create a notification and place it at the head of the log.

        Inputs are trusted; form validation happens before this call.
        """
        created_at = self._clock()
        if created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=timezone.utc)
        record = NotificationRecord(
            id=_generate_notification_id(created_at),
            title=title,
            description=description,
            created_at=created_at,
            category=NotificationCategory(category),
            link=link or None,
        )
        self._save_log([record, *self._load_log()])
        logger.info("Added notification %s (%s).", record.id, record.category.value)
        return record

    def delete(self, notification_id: str) -> None:
        log = self._load_log()
        remaining = [record for record in log if record.id != notification_id]
        if len(remaining) == len(log):
            return
        removed = next(record for record in log if record.id == notification_id)
        # A full deque drops its oldest entry on append.
        self._deleted_history.append(removed)
        self._save_log(remaining)
        logger.info("Deleted notification %s.", notification_id)

    def undo_last_deletion(self) -> NotificationView | None:
        """Restore the most recently deleted notification, if any.

        Unlike ``add``, the whole log is re-sorted by creation time here, so the
        restored record returns to its chronological slot.
        """
        if not self._deleted_history:
            return None
        restored = self._deleted_history.pop()
        self._save_log(_newest_first([*self._load_log(), restored]))
        logger.info("Restored notification %s.", restored.id)
        return NotificationView.from_record(restored, restored.id in self._load_read_ids())

    # --- Read state ---

    def mark_read(self, notification_id: str) -> None:
        read_ids = self._load_read_ids()
        if notification_id not in read_ids:
            self._save_read_ids([*read_ids, notification_id])

    def mark_unread(self, notification_id: str) -> None:
        read_ids = self._load_read_ids()
        if notification_id in read_ids:
            self._save_read_ids([read_id for read_id in read_ids if read_id != notification_id])

    def mark_all_read(self) -> None:
        read_ids = self._load_read_ids()
        known = set(read_ids)
        merged = list(read_ids)
        for record in self._load_log():
            if record.id not in known:
                known.add(record.id)
                merged.append(record.id)
        self._save_read_ids(merged)

    def mark_all_unread(self) -> None:
        # Clears every stored id, including those of deleted notifications.
        self._save_read_ids([])

    # --- Queries ---

    def list(self, status: NotificationFilter = NotificationFilter.ALL) -> list[NotificationView]:
        read_ids = set(self._load_read_ids())
        views = [
            NotificationView.from_record(record, record.id in read_ids)
            for record in _newest_first(self._load_log())
        ]
        if status is NotificationFilter.UNREAD:
            return [view for view in views if not view.read]
        if status is NotificationFilter.READ:
            return [view for view in views if view.read]
        return views

    def unread_count(self) -> int:
        return len(self.list(NotificationFilter.UNREAD))

    def get(self, notification_id: str) -> NotificationView | None:
        return next((view for view in self.list() if view.id == notification_id), None)

    # --- Persistence ---

    def _read_key(self, key: str) -> str | None:
        if self._storage is None:
            return None
        try:
            return self._storage.get(key)
        except (OSError, ValueError):
            logger.exception("Could not read '%s' from notification storage.", key)
            return None

    def _write_key(self, key: str, value: str) -> None:
        if self._storage is None:
            logger.debug("No storage available; dropping write to '%s'.", key)
            return
        try:
            self._storage.set(key, value)
        except (OSError, ValueError):
            logger.exception("Could not write '%s' to notification storage.", key)

    def _load_log(self) -> list[NotificationRecord]:
        raw = self._read_key(self._notifications_key)
        if not raw:
            return []
        try:
            items = json.loads(raw)
            if not isinstance(items, list):
                raise ValueError("notification log is not a list")
            return [NotificationRecord.from_dict(item) for item in items]
        except (AttributeError, KeyError, TypeError, ValueError):
            logger.exception("Stored notification log is malformed; treating it as empty.")
            return []

    def _save_log(self, records: list[NotificationRecord]) -> None:
        self._write_key(self._notifications_key, json.dumps([record.to_dict() for record in records]))

    def _load_read_ids(self) -> list[str]:
        raw = self._read_key(self._read_ids_key)
        if not raw:
            return []
        try:
            ids = json.loads(raw)
            if not isinstance(ids, list):
                raise ValueError("read id set is not a list")
            return [str(read_id) for read_id in ids]
        except ValueError:
            logger.exception("Stored read-notification ids are malformed; treating them as empty.")
            return []

    def _save_read_ids(self, ids: list[str]) -> None:
        self._write_key(self._read_ids_key, json.dumps(ids))
