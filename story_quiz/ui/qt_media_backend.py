"""QtMultimedia adapter behind the audio playback controller."""

from __future__ import annotations

import logging

from PySide6.QtCore import QObject, QUrl
from PySide6.QtMultimedia import QAudioOutput, QMediaPlayer

from story_quiz.core.services.audio_playback import AudioPlaybackController, PlaybackStartError

logger = logging.getLogger(__name__)


class QtMediaBackend(QObject):
    """Single QMediaPlayer whose events are forwarded to the controller.

    Events carry the source URL they were produced for so the controller can
    drop those belonging to a replaced source.
    """

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._player = QMediaPlayer(self)
        self._audio_output = QAudioOutput(self)
        self._player.setAudioOutput(self._audio_output)
        self._source: str | None = None
        self._controller: AudioPlaybackController | None = None

    def bind(self, controller: AudioPlaybackController) -> None:
        self._controller = controller
        self._player.durationChanged.connect(self._on_duration_changed)
        self._player.positionChanged.connect(self._on_position_changed)
        self._player.mediaStatusChanged.connect(self._on_media_status_changed)
        self._player.errorOccurred.connect(self._on_error)

    # --- MediaBackend ---

    def set_source(self, url: str | None) -> None:
        self._source = url
        self._player.stop()
        self._player.setSource(QUrl(url) if url else QUrl())

    def play(self) -> None:
        if not self._source:
            raise PlaybackStartError("no media source attached")
        if self._player.error() != QMediaPlayer.Error.NoError:
            raise PlaybackStartError(self._player.errorString())
        self._player.play()

    def pause(self) -> None:
        self._player.pause()

    def set_position(self, seconds: float) -> None:
        self._player.setPosition(int(seconds * 1000))

    def set_playback_rate(self, rate: float) -> None:
        self._player.setPlaybackRate(rate)

    # --- Player signals ---

    def _on_duration_changed(self, duration_ms: int) -> None:
        if self._controller is not None:
            self._controller.handle_duration_changed(duration_ms / 1000, source=self._source)

    def _on_position_changed(self, position_ms: int) -> None:
        if self._controller is not None:
            self._controller.handle_position_changed(position_ms / 1000, source=self._source)

    def _on_media_status_changed(self, status: QMediaPlayer.MediaStatus) -> None:
        if status == QMediaPlayer.MediaStatus.EndOfMedia and self._controller is not None:
            self._controller.handle_playback_ended(source=self._source)

    def _on_error(self, error: QMediaPlayer.Error, message: str) -> None:
        logger.warning("QMediaPlayer error %s: %s", error, message)
        if self._controller is not None:
            self._controller.handle_playback_error(message, source=self._source)
