"""Stage-driven input controls below the chat transcript."""

from __future__ import annotations

from PySide6.QtWidgets import (
    QGridLayout,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QStackedWidget,
    QVBoxLayout,
    QWidget,
)

from story_quiz.constants.message_constants import ANSWER_MODE_LABELS
from story_quiz.constants.ui_constants import (
    ANSWER_PLACEHOLDER,
    CONTINUE_BUTTON,
    EVALUATION_DONE_HINT,
    RESTART_BUTTON,
    SEND_BUTTON,
    WAITING_HINT,
)
from story_quiz.core.models import AnswerMode
from story_quiz.core.quiz_controller import QuizController
from story_quiz.core.quiz_stages import (
    AllAnswered,
    AnswerModeChosen,
    Idle,
    QuestionLoop,
    RestartOffered,
    Stage,
    StoryReady,
    TopicChosen,
)


class InputPanel(QWidget):
    """Shows exactly the controls the current stage accepts.

    One-shot buttons are disabled as soon as they are used; the restart button
    stays available in every stage.
    """

    def __init__(self, controller: QuizController, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.controller = controller
        self._choice_buttons: list[QPushButton] = []
        self._build_ui()
        controller.subscribe(self.refresh)
        self.refresh(controller.stage)

    def _build_ui(self) -> None:
        layout = QVBoxLayout()
        self.setLayout(layout)

        self.stack = QStackedWidget(self)
        layout.addWidget(self.stack)

        self.topic_page = QWidget(self)
        topic_layout = QGridLayout()
        self.topic_page.setLayout(topic_layout)
        self.topic_buttons: list[QPushButton] = []
        for index, topic in enumerate(self.controller.topics):
            button = QPushButton(topic, self.topic_page)
            button.clicked.connect(lambda _checked=False, value=topic: self._handle_topic(value))
            topic_layout.addWidget(button, index // 3, index % 3)
            self.topic_buttons.append(button)
        self.stack.addWidget(self.topic_page)

        self.mode_page = QWidget(self)
        mode_layout = QHBoxLayout()
        self.mode_page.setLayout(mode_layout)
        self.mode_buttons: list[QPushButton] = []
        for mode in AnswerMode:
            button = QPushButton(ANSWER_MODE_LABELS[mode.value], self.mode_page)
            button.clicked.connect(lambda _checked=False, value=mode: self._handle_mode(value))
            mode_layout.addWidget(button)
            self.mode_buttons.append(button)
        self.stack.addWidget(self.mode_page)

        self.continue_page = QWidget(self)
        continue_layout = QHBoxLayout()
        self.continue_page.setLayout(continue_layout)
        self.continue_button = QPushButton(CONTINUE_BUTTON, self.continue_page)
        self.continue_button.clicked.connect(self._handle_continue)
        continue_layout.addWidget(self.continue_button)
        self.stack.addWidget(self.continue_page)

        self.choice_page = QWidget(self)
        self.choice_layout = QVBoxLayout()
        self.choice_page.setLayout(self.choice_layout)
        self.stack.addWidget(self.choice_page)

        self.text_page = QWidget(self)
        text_layout = QHBoxLayout()
        self.text_page.setLayout(text_layout)
        self.answer_edit = QLineEdit(self.text_page)
        self.answer_edit.setPlaceholderText(ANSWER_PLACEHOLDER)
        self.answer_edit.returnPressed.connect(self._handle_send)
        text_layout.addWidget(self.answer_edit, stretch=1)
        self.send_button = QPushButton(SEND_BUTTON, self.text_page)
        self.send_button.clicked.connect(self._handle_send)
        text_layout.addWidget(self.send_button)
        self.stack.addWidget(self.text_page)

        self.hint_label = QLabel("", self)
        self.stack.addWidget(self.hint_label)

        restart_row = QHBoxLayout()
        restart_row.addStretch()
        self.restart_button = QPushButton(RESTART_BUTTON, self)
        self.restart_button.clicked.connect(self.controller.restart)
        restart_row.addWidget(self.restart_button)
        layout.addLayout(restart_row)

    def refresh(self, stage: Stage) -> None:
        guards = self.controller.guards
        for button in self.topic_buttons:
            button.setEnabled(not guards.topic_chosen)
        for button in self.mode_buttons:
            button.setEnabled(not guards.answer_mode_chosen)
        self.continue_button.setEnabled(not guards.questions_started)

        if isinstance(stage, Idle):
            self.stack.setCurrentWidget(self.topic_page)
        elif isinstance(stage, TopicChosen):
            self.stack.setCurrentWidget(self.mode_page)
        elif isinstance(stage, StoryReady):
            self.stack.setCurrentWidget(self.continue_page)
        elif isinstance(stage, QuestionLoop):
            self._show_question(stage)
        elif isinstance(stage, (AnswerModeChosen, AllAnswered)):
            self.hint_label.setText("" if stage.failed else WAITING_HINT)
            self.stack.setCurrentWidget(self.hint_label)
        elif isinstance(stage, RestartOffered):
            self.hint_label.setText(EVALUATION_DONE_HINT)
            self.stack.setCurrentWidget(self.hint_label)

    def _show_question(self, stage: QuestionLoop) -> None:
        question = stage.current_question
        if not question.has_choices:
            self.answer_edit.clear()
            self.send_button.setEnabled(True)
            self.stack.setCurrentWidget(self.text_page)
            self.answer_edit.setFocus()
            return

        for button in self._choice_buttons:
            self.choice_layout.removeWidget(button)
            button.deleteLater()
        self._choice_buttons = []
        for index, choice in enumerate(question.choices):
            button = QPushButton(choice.text, self.choice_page)
            button.clicked.connect(lambda _checked=False, value=index: self._handle_choice(value))
            self.choice_layout.addWidget(button)
            self._choice_buttons.append(button)
        self.stack.setCurrentWidget(self.choice_page)

    def _handle_topic(self, topic: str) -> None:
        self.controller.choose_topic(topic)

    def _handle_mode(self, mode: AnswerMode) -> None:
        self.controller.choose_answer_mode(mode)

    def _handle_continue(self) -> None:
        self.controller.begin_questions()

    def _handle_choice(self, index: int) -> None:
        for button in self._choice_buttons:
            button.setEnabled(False)
        self.controller.answer_current_question(index)

    def _handle_send(self) -> None:
        text = self.answer_edit.text()
        if not text.strip():
            return
        self.controller.answer_current_question(text)
