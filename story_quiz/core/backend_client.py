"""HTTP client for the story generator and the free-text grader."""

from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel, ValidationError
import requests

from story_quiz.constants.network_constants import (
    DEFAULT_REQUEST_TIMEOUT_SECONDS,
    EVALUATE_ANSWERS_PATH,
    GENERATE_STORY_PATH,
)
from story_quiz.constants.quiz_constants import (
    ANSWER_TYPE_FREE_TEXT,
    ANSWER_TYPE_MULTIPLE_CHOICE,
)
from story_quiz.core.api_schemas import (
    EvaluateAnswersRequest,
    EvaluateAnswersResponse,
    GenerateStoryRequest,
    GenerateStoryResponse,
    QuestionAnswerPair,
)
from story_quiz.core.models import AnswerMode, ErrorFamily, StoryData
from story_quiz.core.url_resolver import resolve_url

logger = logging.getLogger(__name__)

_ANSWER_TYPES = {
    AnswerMode.FREE_TEXT: ANSWER_TYPE_FREE_TEXT,
    AnswerMode.MULTIPLE_CHOICE: ANSWER_TYPE_MULTIPLE_CHOICE,
}


class BackendError(Exception):
    """Raised when a backend call does not produce a usable response."""

    family: ErrorFamily = ErrorFamily.NETWORK


class NetworkFailure(BackendError):
    """The request was rejected or answered with a non-success status."""

    family = ErrorFamily.NETWORK


class MalformedResponse(BackendError):
    """The response body does not match the expected shape."""

    family = ErrorFamily.MALFORMED


class StoryBackendClient:
    """Blocking client for both backend calls.

    Calls are meant to run off the UI thread through a task runner; every
    failure surfaces as a :class:`BackendError` subclass.
    """

    def __init__(
        self,
        base_url: str,
        timeout_seconds: float = DEFAULT_REQUEST_TIMEOUT_SECONDS,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url
        self.timeout_seconds = timeout_seconds
        self._session = session or requests.Session()

    def endpoint(self, path: str) -> str:
        resolved = resolve_url(path, self.base_url)
        return resolved or self.base_url

    def generate_story(self, topic: str, mode: AnswerMode) -> StoryData:
        payload = GenerateStoryRequest(topic=topic, answer_type=_ANSWER_TYPES[mode])
        data = self._post(GENERATE_STORY_PATH, payload)
        response = self._validate(GenerateStoryResponse, data)
        logger.info(
            "Received story %s with %d question(s)",
            response.request_id,
            len(response.questions),
        )
        return StoryData(
            request_id=response.request_id,
            story=response.story,
            questions=tuple(response.questions),
            audio_url=response.audio_url,
        )

    def evaluate_answers(
        self,
        story: str,
        pairs: list[tuple[str, str]],
    ) -> EvaluateAnswersResponse:
        payload = EvaluateAnswersRequest(
            story=story,
            questions=[QuestionAnswerPair(question=q, answer=a) for q, a in pairs],
        )
        data = self._post(EVALUATE_ANSWERS_PATH, payload)
        response = self._validate(EvaluateAnswersResponse, data)
        if len(response.evaluations) != len(pairs):
            raise MalformedResponse(
                f"Expected {len(pairs)} evaluation(s), got {len(response.evaluations)}"
            )
        return response

    def _post(self, path: str, payload: BaseModel) -> Any:
        url = self.endpoint(path)
        logger.info("POST %s", url)
        try:
            response = self._session.post(
                url,
                json=payload.model_dump(by_alias=True),
                timeout=self.timeout_seconds,
            )
            response.raise_for_status()
        except requests.RequestException as exc:
            logger.error("Request to %s failed: %s", url, exc)
            raise NetworkFailure(str(exc)) from exc
        try:
            return response.json()
        except ValueError as exc:
            logger.error("Response from %s is not JSON: %s", url, exc)
            raise MalformedResponse("Response body is not valid JSON") from exc

    @staticmethod
    def _validate(model: type[BaseModel], data: Any) -> Any:
        try:
            return model.model_validate(data)
        except ValidationError as exc:
            logger.error("Unexpected %s payload: %s", model.__name__, exc)
            raise MalformedResponse(str(exc)) from exc
