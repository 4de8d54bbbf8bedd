"""Application entry point for the story quiz client."""

from __future__ import annotations

import sys

from dotenv import load_dotenv
from PySide6.QtWidgets import QApplication

from story_quiz.core.backend_client import StoryBackendClient
from story_quiz.core.quiz_controller import QuizController
from story_quiz.core.services.audio_playback import AudioPlaybackController
from story_quiz.core.services.message_log import MessageLog
from story_quiz.server.demo_backend import start_demo_backend
from story_quiz.ui import ChatMainWindow, QtMediaBackend, QtTaskRunner
from story_quiz.utils.app_config import AppConfig
from story_quiz.utils.logging_config import configure_logging


def main() -> None:
    """Load configuration, optionally start the demo backend, and launch the Qt UI."""
    load_dotenv()
    config = AppConfig.from_env()
    logger = configure_logging(config.log_level)
    logger.info("Starting StoryQuiz against %s", config.backend_url)

    if config.start_demo_backend:
        start_demo_backend(host=config.demo_host, port=config.demo_port)

    app = QApplication(sys.argv)
    media_backend = QtMediaBackend()
    audio = AudioPlaybackController(
        media_backend,
        base_url=config.audio_base_url,
        initial_rate=config.initial_playback_rate,
    )
    media_backend.bind(audio)
    client = StoryBackendClient(config.backend_url, timeout_seconds=config.request_timeout_seconds)
    controller = QuizController(
        message_log=MessageLog(),
        audio=audio,
        client=client,
        runner=QtTaskRunner(),
    )

    window = ChatMainWindow(controller)
    window.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
