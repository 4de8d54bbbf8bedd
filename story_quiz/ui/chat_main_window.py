"""Qt main window hosting the chat transcript, audio player and inputs."""

from __future__ import annotations

from PySide6.QtCore import QEvent, QObject
from PySide6.QtWidgets import QApplication, QMainWindow, QVBoxLayout, QWidget

from story_quiz.constants.ui_constants import WINDOW_MIN_HEIGHT, WINDOW_MIN_WIDTH, WINDOW_TITLE
from story_quiz.core.quiz_controller import QuizController
from story_quiz.styling.styles import Styles
from story_quiz.ui.components.audio_player import AudioPlayer
from story_quiz.ui.components.input_panel import InputPanel
from story_quiz.ui.components.message_list import MessageList


class ChatMainWindow(QMainWindow):
    """Main window; all session logic lives in the controller."""

    def __init__(self, controller: QuizController) -> None:
        super().__init__()
        self.setWindowTitle(WINDOW_TITLE)
        self.setMinimumSize(WINDOW_MIN_WIDTH, WINDOW_MIN_HEIGHT)
        self.controller = controller

        self._build_ui()
        self.setStyleSheet(Styles.get_main_window_style())

        controller.message_log.subscribe(self.message_list.set_messages)
        self.message_list.set_messages(controller.message_log.messages())

        app = QApplication.instance()
        if app is not None:
            app.installEventFilter(self)

    def _build_ui(self) -> None:
        central_widget = QWidget(self)
        self.setCentralWidget(central_widget)

        root_layout = QVBoxLayout()
        root_layout.setContentsMargins(0, 0, 0, 0)
        central_widget.setLayout(root_layout)

        self.message_list = MessageList(self)
        root_layout.addWidget(self.message_list, stretch=1)

        self.audio_player = AudioPlayer(self.controller.audio, self)
        root_layout.addWidget(self.audio_player)

        self.input_panel = InputPanel(self.controller, self)
        root_layout.addWidget(self.input_panel)

    def eventFilter(self, watched: QObject, event: QEvent) -> bool:
        # Any press outside the rate controls closes the rate menu.
        if (
            event.type() == QEvent.MouseButtonPress
            and isinstance(watched, QWidget)
            and self.controller.audio.rate_menu.is_open
        ):
            if not self.audio_player.contains_rate_controls(watched):
                self.controller.audio.rate_menu.close()
        return super().eventFilter(watched, event)

    def closeEvent(self, event) -> None:
        app = QApplication.instance()
        if app is not None:
            app.removeEventFilter(self)
        self.controller.audio.unload()
        super().closeEvent(event)
