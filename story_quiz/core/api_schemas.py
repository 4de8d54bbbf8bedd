"""Wire schemas shared by the backend client and the demo backend."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class GenerateStoryRequest(_CamelModel):
    """Payload for the story generator."""

    topic: str
    answer_type: Literal["text", "multiple"] = Field(alias="answerType")


class GenerateStoryResponse(_CamelModel):
    """Generated story; question entries are normalized client side."""

    request_id: str = Field(alias="requestId")
    story: str
    questions: list[Any] = Field(min_length=1)
    audio_url: str = Field(alias="audioUrl")


class QuestionAnswerPair(_CamelModel):
    question: str
    answer: str


class EvaluateAnswersRequest(_CamelModel):
    """Payload for the free-text grader."""

    story: str
    questions: list[QuestionAnswerPair]


class AnswerEvaluation(_CamelModel):
    question: str
    answer: str
    is_correct: bool = Field(alias="isCorrect")
    correction: str = ""
    explanation: str = ""


class EvaluateAnswersResponse(_CamelModel):
    """Grader verdict for a whole free-text session."""

    overall_score: float = Field(alias="overallScore", ge=0, le=100)
    feedback: str = ""
    evaluations: list[AnswerEvaluation]
