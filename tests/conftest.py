"""Shared fixtures for the EduSpace test suite."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from eduspace.core.models import Question
from eduspace.core.services.key_value_storage import InMemoryStorage
from eduspace.core.services.notification_store import NotificationStore


class SteppingClock:
    """Deterministic clock that moves forward one second per reading."""

    def __init__(self, start: datetime | None = None) -> None:
        self.current = start or datetime(2024, 5, 1, 9, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        value = self.current
        self.current += timedelta(seconds=1)
        return value


@pytest.fixture
def arithmetic_quiz() -> list[Question]:
    return [
        Question("2+2?", ("3", "4", "5", "6"), 1),
        Question("3*3?", ("6", "9", "12", "33"), 1),
        Question("10-7?", ("3", "7", "10", "17"), 0),
    ]


@pytest.fixture
def storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture
def clock() -> SteppingClock:
    return SteppingClock()


@pytest.fixture
def store(storage: InMemoryStorage, clock: SteppingClock) -> NotificationStore:
    return NotificationStore(storage, clock=clock)
