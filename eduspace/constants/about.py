"""Static metadata describing EduSpace."""

APP_NAME = "EduSpace"
APP_VERSION = "0.1.0"
APP_LICENSE = "MIT License"
APP_ABOUT_TEXT = (
    "EduSpace is a role-based e-learning platform. This service hosts the "
    "lesson quiz player and the notification log used by the admin, teacher "
    "and student dashboards."
)
