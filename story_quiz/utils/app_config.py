"""Runtime configuration read from the environment."""

from __future__ import annotations

from dataclasses import dataclass
import os

from story_quiz.constants.network_constants import (
    DEFAULT_BACKEND_URL,
    DEFAULT_REQUEST_TIMEOUT_SECONDS,
    DEMO_BACKEND_HOST,
    DEMO_BACKEND_PORT,
)
from story_quiz.constants.quiz_constants import DEFAULT_PLAYBACK_RATE, PLAYBACK_RATES

_TRUE_VALUES = {"1", "true", "yes", "on"}


def _get_env(name: str, default: str = "") -> str:
    return os.environ.get(name, default).strip()


@dataclass(slots=True, frozen=True)
class AppConfig:
    """Settings for the desktop client and the optional demo backend."""

    backend_url: str = DEFAULT_BACKEND_URL
    audio_base_url: str = DEFAULT_BACKEND_URL
    request_timeout_seconds: float = DEFAULT_REQUEST_TIMEOUT_SECONDS
    initial_playback_rate: float = DEFAULT_PLAYBACK_RATE
    log_level: str = "INFO"
    start_demo_backend: bool = False
    demo_host: str = DEMO_BACKEND_HOST
    demo_port: int = DEMO_BACKEND_PORT

    def __post_init__(self) -> None:
        if self.request_timeout_seconds <= 0:
            raise ValueError("Request timeout must be a positive number of seconds.")
        if self.initial_playback_rate not in PLAYBACK_RATES:
            raise ValueError(
                f"Initial playback rate must be one of {', '.join(f'{r:g}' for r in PLAYBACK_RATES)}."
            )

    @staticmethod
    def from_env() -> "AppConfig":
        backend_url = _get_env("STORY_QUIZ_BACKEND_URL", DEFAULT_BACKEND_URL)
        return AppConfig(
            backend_url=backend_url,
            audio_base_url=_get_env("STORY_QUIZ_AUDIO_BASE_URL") or backend_url,
            request_timeout_seconds=float(
                _get_env("STORY_QUIZ_REQUEST_TIMEOUT", str(DEFAULT_REQUEST_TIMEOUT_SECONDS))
            ),
            initial_playback_rate=float(
                _get_env("STORY_QUIZ_INITIAL_RATE", str(DEFAULT_PLAYBACK_RATE))
            ),
            log_level=_get_env("STORY_QUIZ_LOG_LEVEL", "INFO") or "INFO",
            start_demo_backend=_get_env("STORY_QUIZ_DEMO_BACKEND", "0").lower() in _TRUE_VALUES,
            demo_host=_get_env("STORY_QUIZ_DEMO_HOST", DEMO_BACKEND_HOST),
            demo_port=int(_get_env("STORY_QUIZ_DEMO_PORT", str(DEMO_BACKEND_PORT))),
        )
