"""Qt UI components for the story quiz client."""

from .chat_main_window import ChatMainWindow
from .qt_media_backend import QtMediaBackend
from .qt_task_runner import QtTaskRunner

__all__ = [
    "ChatMainWindow",
    "QtMediaBackend",
    "QtTaskRunner",
]
