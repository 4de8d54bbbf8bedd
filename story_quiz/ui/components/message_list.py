"""Scrollable chat transcript mirroring the message log."""

from __future__ import annotations

from PySide6.QtCore import Qt, QTimer
from PySide6.QtWidgets import QHBoxLayout, QLabel, QScrollArea, QVBoxLayout, QWidget

from story_quiz.core.markdown_renderer import renderer
from story_quiz.core.models import Direction, Message, MessageKind
from story_quiz.styling.styles import Styles


class MessageBubble(QWidget):
    """One chat bubble, aligned by direction."""

    def __init__(self, message: Message, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.message_id = message.id
        self._text = ""

        row = QHBoxLayout()
        row.setContentsMargins(8, 2, 8, 2)
        self.setLayout(row)

        self.label = QLabel(self)
        self.label.setWordWrap(True)
        self.label.setTextFormat(Qt.RichText)
        self.label.setTextInteractionFlags(Qt.TextSelectableByMouse)
        self.label.setMaximumWidth(420)

        sent = message.direction == Direction.SENT
        if sent:
            row.addStretch()
        row.addWidget(self.label)
        if not sent:
            row.addStretch()

        self.update_message(message)

    def update_message(self, message: Message) -> None:
        if message.text == self._text:
            return
        self._text = message.text
        if message.kind == MessageKind.LOADING:
            self.label.setStyleSheet(Styles.get_loading_style())
            self.label.setText(renderer.render_plain(message.text))
            return
        sent = message.direction == Direction.SENT
        self.label.setStyleSheet(Styles.get_bubble_style(sent=sent, error=message.kind == MessageKind.ERROR))
        if sent:
            self.label.setText(renderer.render_plain(message.text))
        else:
            self.label.setText(renderer.render_fragment(message.text))


class MessageList(QScrollArea):
    """Renders the message log, reusing bubbles whose id is unchanged."""

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setWidgetResizable(True)
        self.setHorizontalScrollBarPolicy(Qt.ScrollBarAlwaysOff)

        container = QWidget(self)
        self._layout = QVBoxLayout()
        self._layout.setContentsMargins(0, 8, 0, 8)
        self._layout.setSpacing(4)
        self._layout.addStretch()
        container.setLayout(self._layout)
        self.setWidget(container)

        self._bubbles: dict[int | str, MessageBubble] = {}

    def set_messages(self, messages: list[Message]) -> None:
        wanted = {message.id for message in messages}
        for message_id in list(self._bubbles):
            if message_id not in wanted:
                bubble = self._bubbles.pop(message_id)
                self._layout.removeWidget(bubble)
                bubble.deleteLater()

        for index, message in enumerate(messages):
            bubble = self._bubbles.get(message.id)
            if bubble is None:
                bubble = MessageBubble(message, self.widget())
                self._bubbles[message.id] = bubble
            else:
                bubble.update_message(message)
            if self._layout.indexOf(bubble) != index:
                self._layout.removeWidget(bubble)
                self._layout.insertWidget(index, bubble)

        QTimer.singleShot(0, self._scroll_to_bottom)

    def _scroll_to_bottom(self) -> None:
        bar = self.verticalScrollBar()
        bar.setValue(bar.maximum())
