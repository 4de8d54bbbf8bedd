"""Session state machine sequencing topic, story, questions and scoring."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, replace
from functools import partial
import logging
from uuid import uuid4

from story_quiz.constants.message_constants import (
    ANSWER_MODE_CONFIRMATION,
    ANSWER_MODE_LABELS,
    ANSWER_TYPE_PROMPT,
    EVALUATION_LOADING,
    QUESTION_TEMPLATE,
    STORY_INTRO,
    STORY_LOADING,
    WELCOME_MESSAGE,
)
from story_quiz.constants.quiz_constants import TOPICS
from story_quiz.core.backend_client import StoryBackendClient
from story_quiz.core.error_messages import error_draft
from story_quiz.core.models import (
    Answer,
    AnswerMode,
    AnswerTypePromptPayload,
    ChoiceAnswer,
    Direction,
    MessageDraft,
    MessageKind,
    Question,
    QuestionPayload,
    StoryData,
    StoryPayload,
    TextAnswer,
    TopicPromptPayload,
)
from story_quiz.core.question_normalizer import normalize_questions
from story_quiz.core.quiz_stages import (
    AllAnswered,
    AnswerModeChosen,
    Evaluated,
    Idle,
    QuestionLoop,
    RestartOffered,
    Stage,
    StoryReady,
    TopicChosen,
    stage_rank,
)
from story_quiz.core.services.audio_playback import AudioPlaybackController
from story_quiz.core.services.evaluation_dispatcher import (
    EvaluationDispatcher,
    EvaluationOutcome,
)
from story_quiz.core.services.message_log import MessageLog
from story_quiz.core.services.task_runner import RequestTicket, TaskOutcome, TaskRunner

logger = logging.getLogger(__name__)

StageListener = Callable[[Stage], None]


@dataclass(slots=True, frozen=True)
class QuizGuards:
    """One-shot flags for the irreversible controls of a session."""

    topic_chosen: bool
    answer_mode_chosen: bool
    questions_started: bool


class QuizController:
    """Drives one quiz session over the message log.

    Every public action returns ``True`` when it changed the session and
    ``False`` when it was ignored; ignored actions are never reported to the
    user. Backend work runs through the task runner and is applied only if the
    session and request it was issued for are still current.
    """

    def __init__(
        self,
        message_log: MessageLog,
        audio: AudioPlaybackController,
        client: StoryBackendClient,
        runner: TaskRunner,
        dispatcher: EvaluationDispatcher | None = None,
        topics: tuple[str, ...] = TOPICS,
    ) -> None:
        self._log = message_log
        self._audio = audio
        self._client = client
        self._runner = runner
        self._dispatcher = dispatcher or EvaluationDispatcher(client, runner)
        self._topics = topics
        self._listeners: list[StageListener] = []
        self._session_id: str = ""
        self._stage: Stage = Idle()
        self.start_session()

    # --- Read access ---

    @property
    def message_log(self) -> MessageLog:
        return self._log

    @property
    def audio(self) -> AudioPlaybackController:
        return self._audio

    @property
    def topics(self) -> tuple[str, ...]:
        return self._topics

    @property
    def session_id(self) -> str:
        return self._session_id

    @property
    def stage(self) -> Stage:
        return self._stage

    @property
    def topic(self) -> str | None:
        return getattr(self._stage, "topic", None)

    @property
    def mode(self) -> AnswerMode | None:
        return getattr(self._stage, "mode", None)

    @property
    def questions(self) -> tuple[Question, ...]:
        return getattr(self._stage, "questions", ())

    @property
    def answers(self) -> tuple[Answer | None, ...]:
        return getattr(self._stage, "answers", ())

    @property
    def current_question_index(self) -> int:
        """-1 before the questions start, ``len(questions)`` once all are answered."""
        if isinstance(self._stage, QuestionLoop):
            return self._stage.index
        if stage_rank(self._stage) > stage_rank(QuestionLoop):
            return len(self.questions)
        return -1

    @property
    def current_question(self) -> Question | None:
        if isinstance(self._stage, QuestionLoop):
            return self._stage.current_question
        return None

    @property
    def waiting_for_answer(self) -> bool:
        return isinstance(self._stage, QuestionLoop)

    @property
    def guards(self) -> QuizGuards:
        rank = stage_rank(self._stage)
        return QuizGuards(
            topic_chosen=rank >= stage_rank(TopicChosen),
            answer_mode_chosen=rank >= stage_rank(AnswerModeChosen),
            questions_started=rank >= stage_rank(QuestionLoop),
        )

    @property
    def score(self) -> int | None:
        return getattr(self._stage, "score", None)

    def subscribe(self, listener: StageListener) -> None:
        self._listeners.append(listener)

    # --- Transitions ---

    def start_session(self) -> None:
        """Discard everything and begin a fresh session in ``Idle``."""
        self._session_id = uuid4().hex
        logger.info("Starting session %s", self._session_id)
        self._audio.unload()
        with self._log.batch():
            self._log.clear()
            self._log.append(
                WELCOME_MESSAGE,
                kind=MessageKind.TOPIC_PROMPT,
                payload=TopicPromptPayload(topics=self._topics),
            )
            self._set_stage(Idle())

    def restart(self) -> None:
        logger.info("Restart requested in stage %s", type(self._stage).__name__)
        self.start_session()

    def choose_topic(self, topic: str) -> bool:
        if not isinstance(self._stage, Idle):
            return self._ignore("choose_topic", "topic already chosen")
        if topic not in self._topics:
            return self._ignore("choose_topic", f"unknown topic {topic!r}")
        with self._log.batch():
            self._log.append(topic, direction=Direction.SENT)
            self._log.append(
                ANSWER_TYPE_PROMPT,
                kind=MessageKind.ANSWER_TYPE_PROMPT,
                payload=AnswerTypePromptPayload(),
            )
            self._set_stage(TopicChosen(topic=topic))
        return True

    def choose_answer_mode(self, mode: AnswerMode | str) -> bool:
        if not isinstance(self._stage, TopicChosen):
            return self._ignore("choose_answer_mode", "answer mode not selectable now")
        try:
            mode = AnswerMode(mode)
        except ValueError:
            return self._ignore("choose_answer_mode", f"unknown mode {mode!r}")

        topic = self._stage.topic
        ticket = RequestTicket(session_id=self._session_id, request_id=uuid4().hex)
        with self._log.batch():
            self._log.append(
                ANSWER_MODE_CONFIRMATION.format(label=ANSWER_MODE_LABELS[mode.value]),
                direction=Direction.SENT,
            )
            self._log.show_loading(STORY_LOADING)
            self._set_stage(AnswerModeChosen(topic=topic, mode=mode, request_id=ticket.request_id))

        logger.info("Requesting %s story about %s", mode.value, topic)
        self._runner.submit(
            lambda: self._client.generate_story(topic, mode),
            partial(self._on_story_loaded, ticket),
            name="generate-story",
        )
        return True

    def begin_questions(self, story: StoryData | None = None) -> bool:
        if not isinstance(self._stage, StoryReady):
            return self._ignore("begin_questions", "no story ready")
        stage = self._stage
        if story is not None and story.request_id != stage.story.request_id:
            return self._ignore("begin_questions", f"story {story.request_id} is not current")

        questions = tuple(normalize_questions(stage.story.questions, stage.mode))
        loop = QuestionLoop(
            topic=stage.topic,
            mode=stage.mode,
            story=stage.story,
            questions=questions,
            index=0,
            answers=(None,) * len(questions),
        )
        with self._log.batch():
            self._set_stage(loop)
            self._append_question(loop)
        return True

    def answer_current_question(self, selection: str | int) -> bool:
        if not isinstance(self._stage, QuestionLoop):
            return self._ignore("answer_current_question", "not waiting for an answer")
        stage = self._stage
        if stage.answers[stage.index] is not None:
            return self._ignore("answer_current_question", "question already answered")

        question = stage.current_question
        if question.has_choices:
            if isinstance(selection, bool) or not isinstance(selection, int):
                return self._ignore("answer_current_question", "choice index expected")
            if not 0 <= selection < len(question.choices):
                return self._ignore("answer_current_question", f"choice {selection} out of range")
            answer: Answer = ChoiceAnswer(choice_index=selection)
            display = question.choices[selection].text
        else:
            if not isinstance(selection, str) or not selection.strip():
                return self._ignore("answer_current_question", "empty answer")
            answer = TextAnswer(text=selection.strip())
            display = selection

        answers = stage.answers[: stage.index] + (answer,) + stage.answers[stage.index + 1 :]
        next_index = stage.index + 1
        with self._log.batch():
            self._log.append(display, direction=Direction.SENT)
            if next_index < len(stage.questions):
                loop = replace(stage, index=next_index, answers=answers)
                self._set_stage(loop)
                self._append_question(loop)
            else:
                self._finish_questions(replace(stage, answers=answers))
        return True

    # --- Completions ---

    def _on_story_loaded(self, ticket: RequestTicket, outcome: TaskOutcome[StoryData]) -> None:
        stage = self._stage
        if not self._is_current(ticket, stage, AnswerModeChosen):
            logger.info("Discarding stale story response %s", ticket.request_id)
            return
        if outcome.failed:
            with self._log.batch():
                self._log.replace_loading([error_draft(outcome.error)])
                self._set_stage(replace(stage, failed=True))
            return

        story = outcome.value
        self._audio.load(story.audio_url)
        with self._log.batch():
            self._log.replace_loading(
                [
                    MessageDraft(
                        text=f"{STORY_INTRO}\n\n{story.story}",
                        kind=MessageKind.STORY,
                        payload=StoryPayload(story=story),
                    )
                ]
            )
            self._set_stage(StoryReady(topic=stage.topic, mode=stage.mode, story=story))

    def _finish_questions(self, stage: QuestionLoop) -> None:
        ticket = RequestTicket(session_id=self._session_id, request_id=uuid4().hex)
        self._set_stage(
            AllAnswered(
                topic=stage.topic,
                mode=stage.mode,
                story=stage.story,
                questions=stage.questions,
                answers=stage.answers,
                request_id=ticket.request_id,
            )
        )
        if self._dispatcher.is_remote(stage.mode):
            self._log.show_loading(EVALUATION_LOADING)
        self._dispatcher.evaluate(
            stage.mode,
            stage.story,
            stage.questions,
            stage.answers,
            partial(self._on_evaluated, ticket),
        )

    def _on_evaluated(self, ticket: RequestTicket, outcome: EvaluationOutcome) -> None:
        stage = self._stage
        if not self._is_current(ticket, stage, AllAnswered):
            logger.info("Discarding stale evaluation %s", ticket.request_id)
            return
        if not outcome.succeeded:
            with self._log.batch():
                self._log.replace_loading(list(outcome.messages))
                self._set_stage(replace(stage, failed=True))
            return

        *results, restart_prompt = outcome.messages
        with self._log.batch():
            self._log.replace_loading(results)
            self._set_stage(
                Evaluated(
                    topic=stage.topic,
                    mode=stage.mode,
                    questions=stage.questions,
                    answers=stage.answers,
                    score=outcome.score,
                )
            )
            self._log.append_draft(restart_prompt)
            self._set_stage(
                RestartOffered(
                    topic=stage.topic,
                    mode=stage.mode,
                    questions=stage.questions,
                    answers=stage.answers,
                    score=outcome.score,
                )
            )

    # --- Internals ---

    def _append_question(self, loop: QuestionLoop) -> None:
        question = loop.current_question
        self._log.append(
            QUESTION_TEMPLATE.format(
                number=loop.index + 1,
                total=len(loop.questions),
                prompt=question.prompt,
            ),
            kind=MessageKind.QUESTION,
            payload=QuestionPayload(
                index=loop.index,
                total=len(loop.questions),
                prompt=question.prompt,
                choices=question.choices,
            ),
        )

    def _is_current(self, ticket: RequestTicket, stage: Stage, expected: type) -> bool:
        return (
            ticket.session_id == self._session_id
            and isinstance(stage, expected)
            and getattr(stage, "request_id", None) == ticket.request_id
            and not getattr(stage, "failed", False)
        )

    def _set_stage(self, stage: Stage) -> None:
        previous = self._stage
        self._stage = stage
        if type(previous) is not type(stage):
            logger.info("Stage %s -> %s", type(previous).__name__, type(stage).__name__)
        for listener in list(self._listeners):
            listener(stage)

    @staticmethod
    def _ignore(action: str, reason: str) -> bool:
        logger.debug("Ignoring %s: %s", action, reason)
        return False
