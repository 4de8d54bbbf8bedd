"""Scoring of finished sessions, locally or through the remote grader."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
import logging
import math

from story_quiz.constants.message_constants import (
    CORRECTION_TEMPLATE,
    FREE_TEXT_FEEDBACK_TEMPLATE,
    INCORRECT_DETAIL_TEMPLATE,
    NO_ANSWER_PLACEHOLDER,
    OVERALL_SCORE_TEMPLATE,
    RESTART_PROMPT,
    SCORE_SUMMARY_TEMPLATE,
    VERDICT_CORRECT,
    VERDICT_INCORRECT,
)
from story_quiz.core.api_schemas import EvaluateAnswersResponse
from story_quiz.core.backend_client import StoryBackendClient
from story_quiz.core.error_messages import error_draft
from story_quiz.core.models import (
    Answer,
    AnswerMode,
    ChoiceAnswer,
    EvaluationPayload,
    MessageDraft,
    MessageKind,
    Question,
    RestartPromptPayload,
    StoryData,
    TextAnswer,
)
from story_quiz.core.services.task_runner import TaskOutcome, TaskRunner

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class EvaluationOutcome:
    """Messages to append once evaluation finishes.

    On success the last draft is always the restart prompt; on failure there is
    exactly one error draft.
    """

    succeeded: bool
    messages: tuple[MessageDraft, ...]
    score: int | None = None


EvaluationCallback = Callable[[EvaluationOutcome], None]


def percentage(correct: int, total: int) -> int:
    """Percentage rounded half up; zero when there is nothing to score."""
    if total <= 0:
        return 0
    return math.floor(100 * correct / total + 0.5)


def answer_text(question: Question, answer: Answer | None) -> str:
    if isinstance(answer, TextAnswer):
        return answer.text
    if isinstance(answer, ChoiceAnswer) and 0 <= answer.choice_index < len(question.choices):
        return question.choices[answer.choice_index].text
    return ""


def restart_prompt_draft() -> MessageDraft:
    return MessageDraft(
        text=RESTART_PROMPT,
        kind=MessageKind.RESTART_PROMPT,
        payload=RestartPromptPayload(),
    )


class EvaluationDispatcher:
    """Chooses between local multiple-choice scoring and the remote grader.

    Both paths hand an :class:`EvaluationOutcome` to the caller; the dispatcher
    never writes to the message log itself.
    """

    def __init__(self, client: StoryBackendClient, runner: TaskRunner) -> None:
        self._client = client
        self._runner = runner

    @staticmethod
    def is_remote(mode: AnswerMode) -> bool:
        return mode is AnswerMode.FREE_TEXT

    def evaluate(
        self,
        mode: AnswerMode,
        story: StoryData,
        questions: Sequence[Question],
        answers: Sequence[Answer | None],
        on_complete: EvaluationCallback,
    ) -> None:
        if not self.is_remote(mode):
            on_complete(self.score_multiple_choice(questions, answers))
            return

        pairs = [
            (question.prompt, answer_text(question, answer))
            for question, answer in zip(questions, answers)
        ]

        def work() -> EvaluateAnswersResponse:
            return self._client.evaluate_answers(story.story, pairs)

        def done(outcome: TaskOutcome[EvaluateAnswersResponse]) -> None:
            if outcome.failed:
                logger.warning("Free-text evaluation failed: %s", outcome.error)
                on_complete(EvaluationOutcome(succeeded=False, messages=(error_draft(outcome.error),)))
                return
            on_complete(self.build_free_text_outcome(questions, answers, outcome.value))

        logger.info("Sending %d free-text answer(s) to the grader", len(pairs))
        self._runner.submit(work, done, name="evaluate-answers")

    @staticmethod
    def score_multiple_choice(
        questions: Sequence[Question],
        answers: Sequence[Answer | None],
    ) -> EvaluationOutcome:
        correct = 0
        details: list[MessageDraft] = []
        for index, question in enumerate(questions):
            answer = answers[index] if index < len(answers) else None
            is_correct = (
                isinstance(answer, ChoiceAnswer)
                and 0 <= answer.choice_index < len(question.choices)
                and question.choices[answer.choice_index].is_correct
            )
            if is_correct:
                correct += 1
                continue
            correct_index = question.correct_index
            expected = (
                question.choices[correct_index].text if correct_index is not None else NO_ANSWER_PLACEHOLDER
            )
            details.append(
                MessageDraft(
                    text=INCORRECT_DETAIL_TEMPLATE.format(
                        number=index + 1,
                        prompt=question.prompt,
                        given=answer_text(question, answer) or NO_ANSWER_PLACEHOLDER,
                        expected=expected,
                    ),
                    kind=MessageKind.EVALUATION,
                    payload=EvaluationPayload(question_index=index, is_correct=False),
                )
            )

        total = len(questions)
        score = percentage(correct, total)
        logger.info("Multiple-choice score: %d%% (%d of %d)", score, correct, total)
        summary = MessageDraft(
            text=SCORE_SUMMARY_TEMPLATE.format(score=score, correct=correct, total=total),
            kind=MessageKind.EVALUATION,
            payload=EvaluationPayload(score=score),
        )
        return EvaluationOutcome(
            succeeded=True,
            messages=(summary, *details, restart_prompt_draft()),
            score=score,
        )

    @staticmethod
    def build_free_text_outcome(
        questions: Sequence[Question],
        answers: Sequence[Answer | None],
        response: EvaluateAnswersResponse,
    ) -> EvaluationOutcome:
        drafts: list[MessageDraft] = []
        for index, evaluation in enumerate(response.evaluations):
            details = [CORRECTION_TEMPLATE.format(correction=evaluation.correction)] if evaluation.correction else []
            if evaluation.explanation:
                details.append(evaluation.explanation)
            question = questions[index] if index < len(questions) else None
            answer = answers[index] if index < len(answers) else None
            drafts.append(
                MessageDraft(
                    text=FREE_TEXT_FEEDBACK_TEMPLATE.format(
                        number=index + 1,
                        question=evaluation.question or (question.prompt if question else ""),
                        answer=evaluation.answer
                        or (answer_text(question, answer) if question else "")
                        or NO_ANSWER_PLACEHOLDER,
                        verdict=VERDICT_CORRECT if evaluation.is_correct else VERDICT_INCORRECT,
                        details="\n".join(details),
                    ).rstrip(),
                    kind=MessageKind.EVALUATION,
                    payload=EvaluationPayload(question_index=index, is_correct=evaluation.is_correct),
                )
            )

        score = math.floor(response.overall_score + 0.5)
        drafts.append(
            MessageDraft(
                text=OVERALL_SCORE_TEMPLATE.format(score=score, feedback=response.feedback).rstrip(),
                kind=MessageKind.EVALUATION,
                payload=EvaluationPayload(score=score),
            )
        )
        drafts.append(restart_prompt_draft())
        return EvaluationOutcome(succeeded=True, messages=tuple(drafts), score=score)
