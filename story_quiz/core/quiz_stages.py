"""Stages of a quiz session.

Each stage carries only the data that is valid while the session is in it, so
combinations such as "waiting for an answer past the last question" cannot be
represented.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from story_quiz.core.models import Answer, AnswerMode, Question, StoryData


@dataclass(slots=True, frozen=True)
class Idle:
    pass


@dataclass(slots=True, frozen=True)
class TopicChosen:
    topic: str


@dataclass(slots=True, frozen=True)
class AnswerModeChosen:
    """Story requested; stays here if the request fails."""

    topic: str
    mode: AnswerMode
    request_id: str
    failed: bool = False


@dataclass(slots=True, frozen=True)
class StoryReady:
    topic: str
    mode: AnswerMode
    story: StoryData


@dataclass(slots=True, frozen=True)
class QuestionLoop:
    topic: str
    mode: AnswerMode
    story: StoryData
    questions: tuple[Question, ...]
    index: int
    answers: tuple[Answer | None, ...]

    @property
    def current_question(self) -> Question:
        return self.questions[self.index]


@dataclass(slots=True, frozen=True)
class AllAnswered:
    """Every question answered; evaluation running or failed."""

    topic: str
    mode: AnswerMode
    story: StoryData
    questions: tuple[Question, ...]
    answers: tuple[Answer | None, ...]
    request_id: str
    failed: bool = False


@dataclass(slots=True, frozen=True)
class Evaluated:
    topic: str
    mode: AnswerMode
    questions: tuple[Question, ...]
    answers: tuple[Answer | None, ...]
    score: int | None


@dataclass(slots=True, frozen=True)
class RestartOffered:
    topic: str
    mode: AnswerMode
    questions: tuple[Question, ...]
    answers: tuple[Answer | None, ...]
    score: int | None


Stage = Union[
    Idle,
    TopicChosen,
    AnswerModeChosen,
    StoryReady,
    QuestionLoop,
    AllAnswered,
    Evaluated,
    RestartOffered,
]

# Position of each stage in the linear flow; guards and indices derive from it.
STAGE_ORDER: dict[type, int] = {
    Idle: 0,
    TopicChosen: 1,
    AnswerModeChosen: 2,
    StoryReady: 3,
    QuestionLoop: 4,
    AllAnswered: 5,
    Evaluated: 6,
    RestartOffered: 7,
}


def stage_rank(stage: Stage | type) -> int:
    """Rank of a stage instance or stage class in the linear flow."""
    return STAGE_ORDER[stage if isinstance(stage, type) else type(stage)]
