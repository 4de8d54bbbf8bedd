"""Story audio player: play toggle, seek track and playback-rate drop-down."""

from __future__ import annotations

import math

from PySide6.QtCore import QRectF, Qt, Signal
from PySide6.QtGui import QColor, QMouseEvent, QPainter, QPaintEvent
from PySide6.QtWidgets import QFrame, QHBoxLayout, QLabel, QPushButton, QVBoxLayout, QWidget

from story_quiz.constants.ui_constants import (
    DRAG_START_DISTANCE_PX,
    PAUSE_BUTTON,
    PLAY_BUTTON,
    RATE_BUTTON_TEMPLATE,
    SEEK_TRACK_HEIGHT,
    TIME_PLACEHOLDER,
)
from story_quiz.core.services.audio_playback import AudioPlaybackController, PlaybackState
from story_quiz.styling.color_palette import ColorPalette, Theme


def format_time(seconds: float | None) -> str:
    if seconds is None or not math.isfinite(seconds) or seconds < 0:
        return TIME_PLACEHOLDER
    minutes, secs = divmod(int(seconds), 60)
    return f"{minutes:02d}:{secs:02d}"


class SeekTrack(QWidget):
    """Horizontal progress bar that turns pointer input into seeks.

    A press followed by little movement is a click; moving further starts a
    drag that ends on release or when the pointer leaves the track.
    """

    def __init__(self, audio: AudioPlaybackController, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.audio = audio
        self._fraction = 0.0
        self._press_x: float | None = None
        self._last_x = 0.0
        self.setFixedHeight(SEEK_TRACK_HEIGHT)
        self.setCursor(Qt.PointingHandCursor)
        self.setMouseTracking(False)

    def set_fraction(self, fraction: float) -> None:
        self._fraction = fraction
        self.update()

    def paintEvent(self, event: QPaintEvent) -> None:
        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing)
        painter.setPen(Qt.NoPen)
        radius = self.height() / 2
        painter.setBrush(QColor(ColorPalette.TRACK_BG.get(Theme.LIGHT)))
        painter.drawRoundedRect(QRectF(self.rect()), radius, radius)
        filled = QRectF(0, 0, self.width() * self._fraction, self.height())
        painter.setBrush(QColor(ColorPalette.TRACK_FILL.get(Theme.LIGHT)))
        painter.drawRoundedRect(filled, radius, radius)
        painter.end()

    def mousePressEvent(self, event: QMouseEvent) -> None:
        if event.button() != Qt.LeftButton:
            return
        self._press_x = event.position().x()
        self._last_x = self._press_x

    def mouseMoveEvent(self, event: QMouseEvent) -> None:
        if self._press_x is None:
            return
        x = event.position().x()
        self._last_x = x
        if self.audio.is_dragging:
            self.audio.drag_to(x, self.width())
        elif abs(x - self._press_x) > DRAG_START_DISTANCE_PX:
            self.audio.begin_drag(self._press_x, self.width())
            self.audio.drag_to(x, self.width())

    def mouseReleaseEvent(self, event: QMouseEvent) -> None:
        if self._press_x is None or event.button() != Qt.LeftButton:
            return
        x = event.position().x()
        self._press_x = None
        if self.audio.is_dragging:
            self.audio.end_drag(x, self.width())
        else:
            self.audio.click_track(x, self.width())

    def leaveEvent(self, event) -> None:
        if self.audio.is_dragging:
            self._press_x = None
            self.audio.end_drag(self._last_x, self.width())
        super().leaveEvent(event)


class RateDropDown(QFrame):
    """Buttons for each playback rate, visible while the rate menu is open."""

    rate_chosen = Signal(float)

    def __init__(self, rates: tuple[float, ...], parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setFrameShape(QFrame.StyledPanel)
        layout = QHBoxLayout()
        layout.setContentsMargins(4, 4, 4, 4)
        self.setLayout(layout)
        for rate in rates:
            button = QPushButton(RATE_BUTTON_TEMPLATE.format(rate=rate), self)
            button.clicked.connect(lambda _checked=False, value=rate: self.rate_chosen.emit(value))
            layout.addWidget(button)
        self.setVisible(False)


class AudioPlayer(QWidget):
    """Audio controls bound to the playback controller."""

    def __init__(self, audio: AudioPlaybackController, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.audio = audio
        self._build_ui()
        audio.subscribe_state(self._apply_state)
        audio.subscribe_progress(self._apply_progress)
        audio.rate_menu.subscribe(self.rate_drop_down.setVisible)
        self._apply_state(audio.snapshot())

    def _build_ui(self) -> None:
        layout = QVBoxLayout()
        layout.setContentsMargins(8, 4, 8, 4)
        self.setLayout(layout)

        controls = QHBoxLayout()
        self.play_button = QPushButton(PLAY_BUTTON, self)
        self.play_button.setFixedWidth(40)
        self.play_button.clicked.connect(self.audio.toggle_playback)
        controls.addWidget(self.play_button)

        self.seek_track = SeekTrack(self.audio, self)
        controls.addWidget(self.seek_track, stretch=1)

        self.time_label = QLabel(f"{TIME_PLACEHOLDER} / {TIME_PLACEHOLDER}", self)
        controls.addWidget(self.time_label)

        self.rate_button = QPushButton(RATE_BUTTON_TEMPLATE.format(rate=self.audio.rate), self)
        self.rate_button.clicked.connect(self.audio.rate_menu.toggle)
        controls.addWidget(self.rate_button)
        layout.addLayout(controls)

        self.rate_drop_down = RateDropDown(self.audio.rate_menu.rates, self)
        self.rate_drop_down.rate_chosen.connect(self.audio.rate_menu.select)
        layout.addWidget(self.rate_drop_down)

    def contains_rate_controls(self, widget: QWidget | None) -> bool:
        """Whether ``widget`` belongs to the rate button or its drop-down."""
        while widget is not None:
            if widget is self.rate_drop_down or widget is self.rate_button:
                return True
            widget = widget.parentWidget()
        return False

    def _apply_state(self, state: PlaybackState) -> None:
        has_source = state.source_url is not None
        self.setVisible(has_source)
        self.play_button.setText(PAUSE_BUTTON if state.is_playing else PLAY_BUTTON)
        self.rate_button.setText(RATE_BUTTON_TEMPLATE.format(rate=state.rate))
        self.time_label.setText(f"{format_time(state.position)} / {format_time(state.duration)}")
        fraction = self.audio.progress()
        self.seek_track.set_fraction(fraction if fraction is not None else 0.0)

    def _apply_progress(self, fraction: float) -> None:
        self.seek_track.set_fraction(fraction)
        self.time_label.setText(
            f"{format_time(self.audio.position)} / {format_time(self.audio.duration)}"
        )
