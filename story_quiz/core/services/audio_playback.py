"""Playback, seeking and rate control for the story audio."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
import logging
import math
from typing import Protocol

from story_quiz.constants.quiz_constants import DEFAULT_PLAYBACK_RATE, PLAYBACK_RATES
from story_quiz.core.url_resolver import resolve_url

logger = logging.getLogger(__name__)


class PlaybackStartError(RuntimeError):
    """Raised by a media backend when playback cannot be started."""


class MediaBackend(Protocol):
    """The single media source driven by :class:`AudioPlaybackController`."""

    def set_source(self, url: str | None) -> None:
        ...

    def play(self) -> None:
        ...

    def pause(self) -> None:
        ...

    def set_position(self, seconds: float) -> None:
        ...

    def set_playback_rate(self, rate: float) -> None:
        ...


@dataclass(slots=True, frozen=True)
class PlaybackState:
    """Snapshot published to state listeners."""

    source_url: str | None
    is_playing: bool
    rate: float
    position: float
    duration: float | None


ProgressListener = Callable[[float], None]
StateListener = Callable[[PlaybackState], None]


def clamp_fraction(fraction: float) -> float:
    if math.isnan(fraction):
        return 0.0
    return max(0.0, min(1.0, fraction))


class RateMenu:
    """Open/closed state of the playback-rate drop-down.

    The UI closes it when input lands outside the menu; the controller never
    looks at global input itself.
    """

    def __init__(self, on_select: Callable[[float], None]) -> None:
        self._open = False
        self._on_select = on_select
        self._listeners: list[Callable[[bool], None]] = []

    @property
    def is_open(self) -> bool:
        return self._open

    @property
    def rates(self) -> tuple[float, ...]:
        return PLAYBACK_RATES

    def subscribe(self, listener: Callable[[bool], None]) -> None:
        self._listeners.append(listener)

    def open(self) -> None:
        self._set_open(True)

    def close(self) -> None:
        self._set_open(False)

    def toggle(self) -> None:
        self._set_open(not self._open)

    def select(self, rate: float) -> None:
        self._on_select(rate)
        self.close()

    def _set_open(self, value: bool) -> None:
        if value == self._open:
            return
        self._open = value
        for listener in list(self._listeners):
            listener(value)


class AudioPlaybackController:
    """Owns the story's media source and mirrors its position and duration.

    Media events arrive through the ``handle_*`` methods; each may carry the
    source it belongs to so late events from a replaced source are dropped.
    """

    def __init__(
        self,
        backend: MediaBackend,
        base_url: str,
        initial_rate: float = DEFAULT_PLAYBACK_RATE,
    ) -> None:
        if initial_rate not in PLAYBACK_RATES:
            raise ValueError(f"Unsupported playback rate: {initial_rate}")
        self._backend = backend
        self._base_url = base_url
        self._initial_rate = initial_rate
        self._progress_listeners: list[ProgressListener] = []
        self._state_listeners: list[StateListener] = []
        self.rate_menu = RateMenu(on_select=self.set_rate)

        self._source_url: str | None = None
        self._attached: bool = False
        self._playing: bool = False
        self._rate: float = initial_rate
        self._position: float = 0.0
        self._duration: float | None = None
        self._dragging: bool = False

    # --- Read access ---

    @property
    def source_url(self) -> str | None:
        return self._source_url

    @property
    def is_playing(self) -> bool:
        return self._playing

    @property
    def is_dragging(self) -> bool:
        return self._dragging

    @property
    def rate(self) -> float:
        return self._rate

    @property
    def position(self) -> float:
        return self._position

    @property
    def duration(self) -> float | None:
        return self._duration

    def progress(self) -> float | None:
        """Current position as a fraction, or None while the duration is unknown."""
        if not self._has_duration():
            return None
        return clamp_fraction(self._position / self._duration)

    def snapshot(self) -> PlaybackState:
        return PlaybackState(
            source_url=self._source_url,
            is_playing=self._playing,
            rate=self._rate,
            position=self._position,
            duration=self._duration,
        )

    def subscribe_progress(self, listener: ProgressListener) -> None:
        self._progress_listeners.append(listener)

    def subscribe_state(self, listener: StateListener) -> None:
        self._state_listeners.append(listener)

    # --- Commands ---

    def load(self, url: str | None) -> None:
        """Replace the current source; position, duration and rate start over."""
        if self._playing:
            self._backend.pause()
        self._source_url = resolve_url(url, self._base_url)
        self._attached = False
        self._playing = False
        self._position = 0.0
        self._duration = None
        self._dragging = False
        self._rate = self._initial_rate
        self.rate_menu.close()
        self._backend.set_source(None)
        logger.info("Audio source set to %s", self._source_url)
        self._publish_state()

    def unload(self) -> None:
        self.load(None)

    def toggle_playback(self) -> None:
        if self._source_url is None:
            logger.debug("Ignoring play toggle without a source")
            return
        if self._playing:
            self._backend.pause()
            self._playing = False
            self._publish_state()
            return

        if not self._attached:
            self._backend.set_source(self._source_url)
            self._backend.set_playback_rate(self._rate)
            self._attached = True
        try:
            self._backend.play()
        except PlaybackStartError as exc:
            logger.warning("Playback of %s could not start: %s", self._source_url, exc)
            self._playing = False
        else:
            self._playing = True
        self._publish_state()

    def seek_to(self, fraction: float) -> None:
        fraction = clamp_fraction(fraction)
        if not self._has_duration():
            logger.debug("Ignoring seek to %.3f before duration is known", fraction)
            return
        self._position = fraction * self._duration
        if self._attached:
            self._backend.set_position(self._position)
        self._publish_progress()

    def click_track(self, offset: float, track_width: float) -> None:
        """Seek from a discrete click; ignored while a drag is running."""
        if self._dragging:
            return
        if track_width <= 0:
            return
        self.seek_to(offset / track_width)

    def begin_drag(self, offset: float, track_width: float) -> None:
        if track_width <= 0:
            return
        self._dragging = True
        self.seek_to(offset / track_width)

    def drag_to(self, offset: float, track_width: float) -> None:
        if not self._dragging or track_width <= 0:
            return
        self.seek_to(offset / track_width)

    def end_drag(self, offset: float, track_width: float) -> None:
        """Finalize a drag on pointer release or when the pointer leaves the track."""
        if not self._dragging:
            return
        if track_width > 0:
            self.seek_to(offset / track_width)
        self._dragging = False

    def set_rate(self, rate: float) -> None:
        if rate not in PLAYBACK_RATES:
            raise ValueError(f"Unsupported playback rate: {rate}")
        self._rate = rate
        if self._attached:
            self._backend.set_playback_rate(rate)
        self._publish_state()

    # --- Media events ---

    def handle_duration_changed(self, seconds: float, source: str | None = None) -> None:
        if self._is_stale(source):
            return
        self._duration = seconds if math.isfinite(seconds) and seconds > 0 else None
        self._publish_state()
        self._publish_progress()

    def handle_position_changed(self, seconds: float, source: str | None = None) -> None:
        if self._is_stale(source) or self._dragging:
            return
        if not math.isfinite(seconds) or seconds < 0:
            return
        self._position = seconds
        self._publish_progress()

    def handle_playback_ended(self, source: str | None = None) -> None:
        if self._is_stale(source):
            return
        self._playing = False
        if self._has_duration():
            self._position = self._duration
        self._publish_state()
        self._publish_progress()

    def handle_playback_error(self, message: str, source: str | None = None) -> None:
        if self._is_stale(source):
            return
        logger.warning("Media error for %s: %s", self._source_url, message)
        self._playing = False
        self._publish_state()

    # --- Internals ---

    def _has_duration(self) -> bool:
        return self._duration is not None and math.isfinite(self._duration) and self._duration > 0

    def _is_stale(self, source: str | None) -> bool:
        if source is None:
            return False
        if not self._attached or source != self._source_url:
            logger.debug("Dropping media event for stale source %s", source)
            return True
        return False

    def _publish_progress(self) -> None:
        fraction = self.progress()
        if fraction is None:
            return
        for listener in list(self._progress_listeners):
            listener(fraction)

    def _publish_state(self) -> None:
        state = self.snapshot()
        for listener in list(self._state_listeners):
            listener(state)
