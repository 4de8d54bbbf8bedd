"""Domain models for the story quiz."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Union


class AnswerMode(str, Enum):
    """How the user answers the comprehension questions."""

    FREE_TEXT = "free-text"
    MULTIPLE_CHOICE = "multiple-choice"


class Direction(str, Enum):
    SENT = "sent"
    RECEIVED = "received"


class MessageKind(str, Enum):
    PLAIN = "plain"
    TOPIC_PROMPT = "topic-prompt"
    ANSWER_TYPE_PROMPT = "answer-type-prompt"
    STORY = "story"
    QUESTION = "question"
    EVALUATION = "evaluation"
    RESTART_PROMPT = "restart-prompt"
    ERROR = "error"
    LOADING = "loading"


class ErrorFamily(str, Enum):
    NETWORK = "network"
    MALFORMED = "malformed"


@dataclass(slots=True, frozen=True)
class Choice:
    text: str
    is_correct: bool = False


@dataclass(slots=True, frozen=True)
class Question:
    """Comprehension question; ``choices`` is empty for free-text questions."""

    prompt: str
    choices: tuple[Choice, ...] = ()

    @property
    def correct_index(self) -> int | None:
        for index, choice in enumerate(self.choices):
            if choice.is_correct:
                return index
        return None

    @property
    def has_choices(self) -> bool:
        return bool(self.choices)


@dataclass(slots=True, frozen=True)
class StoryData:
    """Story as returned by the generator; ``questions`` are not yet normalized."""

    request_id: str
    story: str
    questions: tuple[Any, ...]
    audio_url: str


@dataclass(slots=True, frozen=True)
class TextAnswer:
    text: str


@dataclass(slots=True, frozen=True)
class ChoiceAnswer:
    choice_index: int


Answer = Union[TextAnswer, ChoiceAnswer]


# --- Message payloads (one variant per message kind) ---


@dataclass(slots=True, frozen=True)
class TopicPromptPayload:
    topics: tuple[str, ...]


@dataclass(slots=True, frozen=True)
class AnswerTypePromptPayload:
    modes: tuple[AnswerMode, ...] = (AnswerMode.FREE_TEXT, AnswerMode.MULTIPLE_CHOICE)


@dataclass(slots=True, frozen=True)
class StoryPayload:
    story: StoryData


@dataclass(slots=True, frozen=True)
class QuestionPayload:
    index: int
    total: int
    prompt: str
    choices: tuple[Choice, ...] = ()


@dataclass(slots=True, frozen=True)
class EvaluationPayload:
    """Either a per-question result (``question_index`` set) or a summary (``score`` set)."""

    question_index: int | None = None
    is_correct: bool | None = None
    score: int | None = None


@dataclass(slots=True, frozen=True)
class RestartPromptPayload:
    pass


@dataclass(slots=True, frozen=True)
class ErrorPayload:
    family: ErrorFamily


@dataclass(slots=True, frozen=True)
class LoadingPayload:
    pass


MessagePayload = Union[
    TopicPromptPayload,
    AnswerTypePromptPayload,
    StoryPayload,
    QuestionPayload,
    EvaluationPayload,
    RestartPromptPayload,
    ErrorPayload,
    LoadingPayload,
    None,
]


@dataclass(slots=True, frozen=True)
class Message:
    """One chat entry in the message log."""

    id: int | str
    text: str
    direction: Direction
    kind: MessageKind = MessageKind.PLAIN
    payload: MessagePayload = None
    timestamp: datetime = field(default_factory=datetime.now)


@dataclass(slots=True, frozen=True)
class MessageDraft:
    """Message content prepared outside the controller, appended by it later."""

    text: str
    kind: MessageKind = MessageKind.PLAIN
    payload: MessagePayload = None
    direction: Direction = Direction.RECEIVED
