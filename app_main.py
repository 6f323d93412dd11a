"""Application entry point for the EduSpace quiz and notification service."""

from __future__ import annotations

from eduspace.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT
from eduspace.constants.notification_constants import DEFAULT_STORAGE_PATH
from eduspace.core.quiz_manager import QuizManager
from eduspace.core.services.key_value_storage import JsonFileStorage
from eduspace.core.services.notification_store import NotificationStore
from eduspace.server.api_server import run_api_server
from eduspace.utils.logging_config import configure_logging


def main() -> None:
    """Initialize logging, wire the stores and serve the API."""
    logger = configure_logging()
    logger.info("Starting EduSpace service…")

    storage = JsonFileStorage(DEFAULT_STORAGE_PATH)
    logger.info("Notification storage at %s", storage.file_path)

    run_api_server(
        quiz_manager=QuizManager(),
        notification_store=NotificationStore(storage),
        host=DEFAULT_HOST,
        port=DEFAULT_PORT,
    )


if __name__ == "__main__":
    main()
