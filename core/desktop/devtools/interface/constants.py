"""Interface-level constants for the task dashboard."""

from core.desktop.devtools.interface.constants_i18n import LANG_PACK  # noqa: F401

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M"
LOG_TIME_FORMAT = "%H:%M:%S"

APP_NAME = "task-dashboard"
APP_VERSION = "0.1.0"

SPINNER_FRAMES = "⠋⠙⠹⠸⠼⠴⠦⠧⠇⠏"
