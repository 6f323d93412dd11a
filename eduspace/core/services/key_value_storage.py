"""Key-value persistence media for client-side state such as the notification log."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)


class KeyValueStorage(Protocol):
    """String-to-string store scoped to one profile.

    Implementations raise ``OSError`` when the medium cannot be reached and
    ``ValueError`` when its contents cannot be decoded.
    """

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class InMemoryStorage:
    """Process-local storage, lost when the process exits."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._values: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value


class JsonFileStorage:
    """Storage backed by a single JSON object file.

    The file is read on every ``get`` and rewritten on every ``set``, so two
    instances sharing a path only observe each other's writes on their next
    read. Last write wins; a corrupt file is replaced by the next ``set``.
    """

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path.resolve()

    @property
    def file_path(self) -> Path:
        return self._file_path

    def get(self, key: str) -> str | None:
        value = self._read_all().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        try:
            values = self._read_all()
        except ValueError:
            logger.warning("Storage file %s is unreadable; replacing its contents.", self._file_path)
            values = {}
        values[key] = value
        self._file_path.parent.mkdir(parents=True, exist_ok=True)
        self._file_path.write_text(json.dumps(values, indent=2), encoding="utf-8")

    def _read_all(self) -> dict[str, object]:
        if not self._file_path.exists():
            return {}
        text = self._file_path.read_text(encoding="utf-8")
        if not text.strip():
            return {}
        document = json.loads(text)
        if not isinstance(document, dict):
            raise ValueError(f"Storage file {self._file_path} does not contain a JSON object.")
        return document
