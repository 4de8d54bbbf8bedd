"""Shared fakes for the controller, audio and backend tests."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest
import requests

from story_quiz.core.api_schemas import EvaluateAnswersResponse
from story_quiz.core.models import AnswerMode, StoryData
from story_quiz.core.quiz_controller import QuizController
from story_quiz.core.services.audio_playback import AudioPlaybackController, PlaybackStartError
from story_quiz.core.services.message_log import MessageLog
from story_quiz.core.services.task_runner import Completion, ImmediateTaskRunner, run_work

BASE_URL = "http://backend.test/api/"


class FakeMediaBackend:
    def __init__(self) -> None:
        self.calls: list[tuple[str, Any]] = []
        self.source: str | None = None
        self.fail_play: bool = False

    def set_source(self, url: str | None) -> None:
        self.source = url
        self.calls.append(("set_source", url))

    def play(self) -> None:
        if self.fail_play:
            raise PlaybackStartError("blocked")
        self.calls.append(("play", None))

    def pause(self) -> None:
        self.calls.append(("pause", None))

    def set_position(self, seconds: float) -> None:
        self.calls.append(("set_position", seconds))

    def set_playback_rate(self, rate: float) -> None:
        self.calls.append(("set_playback_rate", rate))

    def names(self) -> list[str]:
        return [name for name, _ in self.calls]


class DeferredTaskRunner:
    """Holds submitted work until the test completes it."""

    def __init__(self) -> None:
        self.pending: list[tuple[str, Callable[[], Any], Completion]] = []

    def submit(self, work: Callable[[], Any], on_done: Completion, name: str = "task") -> None:
        self.pending.append((name, work, on_done))

    def complete(self, index: int = 0) -> None:
        name, work, on_done = self.pending.pop(index)
        on_done(run_work(work, name))

    def complete_all(self) -> None:
        while self.pending:
            self.complete()


class FakeStoryClient:
    def __init__(self) -> None:
        self.story: StoryData | None = None
        self.story_error: Exception | None = None
        self.evaluation: EvaluateAnswersResponse | None = None
        self.evaluation_error: Exception | None = None
        self.story_requests: list[tuple[str, AnswerMode]] = []
        self.evaluation_requests: list[tuple[str, list[tuple[str, str]]]] = []

    def generate_story(self, topic: str, mode: AnswerMode) -> StoryData:
        self.story_requests.append((topic, mode))
        if self.story_error is not None:
            raise self.story_error
        assert self.story is not None
        return self.story

    def evaluate_answers(self, story: str, pairs: list[tuple[str, str]]) -> EvaluateAnswersResponse:
        self.evaluation_requests.append((story, pairs))
        if self.evaluation_error is not None:
            raise self.evaluation_error
        assert self.evaluation is not None
        return self.evaluation


class FakeResponse:
    def __init__(self, status_code: int = 200, payload: Any = None, invalid_json: bool = False) -> None:
        self.status_code = status_code
        self._payload = payload
        self._invalid_json = invalid_json

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")

    def json(self) -> Any:
        if self._invalid_json:
            raise ValueError("Expecting value")
        return self._payload


class FakeSession:
    def __init__(self, response: FakeResponse | None = None, error: Exception | None = None) -> None:
        self.response = response or FakeResponse()
        self.error = error
        self.posts: list[dict[str, Any]] = []

    def post(self, url: str, json: Any = None, timeout: float | None = None) -> FakeResponse:
        self.posts.append({"url": url, "json": json, "timeout": timeout})
        if self.error is not None:
            raise self.error
        return self.response


SPORT_MC_QUESTIONS = (
    {
        "question": "Wer gewinnt das Rennen?",
        "choices": [
            {"text": "Anna", "isCorrect": True},
            {"text": "Ben", "isCorrect": False},
        ],
    },
    {
        "question": "Welche Farbe hat das Trikot?",
        "choices": [
            {"text": "Rot", "isCorrect": False},
            {"text": "Blau", "isCorrect": True},
        ],
    },
)


def make_story(request_id: str = "r1", questions: tuple[Any, ...] = SPORT_MC_QUESTIONS) -> StoryData:
    return StoryData(
        request_id=request_id,
        story="Anna läuft schneller als alle anderen.",
        questions=questions,
        audio_url="audio/r1.mp3",
    )


@pytest.fixture
def media_backend() -> FakeMediaBackend:
    return FakeMediaBackend()


@pytest.fixture
def audio(media_backend: FakeMediaBackend) -> AudioPlaybackController:
    return AudioPlaybackController(media_backend, base_url=BASE_URL)


@pytest.fixture
def client() -> FakeStoryClient:
    fake = FakeStoryClient()
    fake.story = make_story()
    return fake


@pytest.fixture
def runner() -> DeferredTaskRunner:
    return DeferredTaskRunner()


@pytest.fixture
def message_log() -> MessageLog:
    return MessageLog()


@pytest.fixture
def controller(message_log, audio, client, runner) -> QuizController:
    return QuizController(message_log=message_log, audio=audio, client=client, runner=runner)


@pytest.fixture
def immediate_controller(message_log, audio, client) -> QuizController:
    return QuizController(
        message_log=message_log,
        audio=audio,
        client=client,
        runner=ImmediateTaskRunner(),
    )
