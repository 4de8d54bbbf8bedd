"""FastAPI demo backend serving canned stories, a grader and placeholder audio."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
import io
import logging
import math
import struct
from threading import Lock, Thread
import uuid
import wave

from fastapi import FastAPI, HTTPException, Response
import uvicorn

from story_quiz.constants.about import APP_NAME, APP_VERSION
from story_quiz.constants.network_constants import DEMO_BACKEND_HOST, DEMO_BACKEND_PORT
from story_quiz.constants.quiz_constants import ANSWER_TYPE_MULTIPLE_CHOICE
from story_quiz.core.api_schemas import (
    AnswerEvaluation,
    EvaluateAnswersRequest,
    EvaluateAnswersResponse,
    GenerateStoryRequest,
    GenerateStoryResponse,
)

logger = logging.getLogger(__name__)

_SAMPLE_RATE = 16_000
_TONE_HZ = 440.0
_SECONDS_PER_WORD = 0.4


@dataclass(slots=True, frozen=True)
class DemoQuestion:
    prompt: str
    choices: tuple[str, ...]
    correct_index: int
    keywords: tuple[str, ...]

    @property
    def correct_answer(self) -> str:
        return self.choices[self.correct_index]


@dataclass(slots=True, frozen=True)
class DemoStory:
    text: str
    questions: tuple[DemoQuestion, ...]


DEMO_STORIES: dict[str, DemoStory] = {
    "Sport": DemoStory(
        text=(
            "Lena läuft jeden Samstag im Park. Heute findet dort ein kleiner Wettlauf statt. "
            "Sie trägt ihre neuen blauen Schuhe und startet ganz ruhig. Nach der zweiten Runde "
            "überholt sie ihren Bruder Jonas und kommt als Dritte ins Ziel."
        ),
        questions=(
            DemoQuestion(
                prompt="Wann läuft Lena im Park?",
                choices=("Jeden Samstag", "Jeden Montag", "Nur im Sommer"),
                correct_index=0,
                keywords=("samstag",),
            ),
            DemoQuestion(
                prompt="Als Wievielte kommt Lena ins Ziel?",
                choices=("Als Erste", "Als Dritte", "Als Letzte"),
                correct_index=1,
                keywords=("dritte", "3"),
            ),
        ),
    ),
    "Natur": DemoStory(
        text=(
            "Am Morgen geht Paul mit seiner Großmutter in den Wald. Sie hören einen Specht "
            "und sehen zwei Rehe auf einer Lichtung. Am Bach sammeln sie bunte Blätter für "
            "ein Bild, das Paul später malen möchte."
        ),
        questions=(
            DemoQuestion(
                prompt="Mit wem geht Paul in den Wald?",
                choices=("Mit seinem Vater", "Mit seiner Großmutter", "Mit seiner Lehrerin"),
                correct_index=1,
                keywords=("großmutter", "grossmutter", "oma"),
            ),
            DemoQuestion(
                prompt="Welche Tiere sehen sie auf der Lichtung?",
                choices=("Rehe", "Füchse", "Hasen"),
                correct_index=0,
                keywords=("reh",),
            ),
        ),
    ),
    "Reisen": DemoStory(
        text=(
            "Familie Weber fährt mit dem Zug nach Hamburg. Die Fahrt dauert vier Stunden. "
            "Im Zug spielt Mia Karten mit ihrem Vater. In Hamburg besuchen sie zuerst den "
            "Hafen und essen danach ein Fischbrötchen."
        ),
        questions=(
            DemoQuestion(
                prompt="Womit fährt die Familie nach Hamburg?",
                choices=("Mit dem Auto", "Mit dem Flugzeug", "Mit dem Zug"),
                correct_index=2,
                keywords=("zug", "bahn"),
            ),
            DemoQuestion(
                prompt="Was besuchen sie zuerst?",
                choices=("Den Hafen", "Ein Museum", "Den Zoo"),
                correct_index=0,
                keywords=("hafen",),
            ),
        ),
    ),
    "Technik": DemoStory(
        text=(
            "Tom baut mit seiner Schwester einen kleinen Roboter. Der Roboter hat zwei Räder "
            "und einen Sensor vorne. Wenn er eine Wand erkennt, dreht er sich nach links. "
            "Am Ende fährt er allein durch die ganze Küche."
        ),
        questions=(
            DemoQuestion(
                prompt="Wie viele Räder hat der Roboter?",
                choices=("Zwei", "Drei", "Vier"),
                correct_index=0,
                keywords=("zwei", "2"),
            ),
            DemoQuestion(
                prompt="Was macht der Roboter vor einer Wand?",
                choices=("Er bleibt stehen", "Er dreht sich nach links", "Er piept laut"),
                correct_index=1,
                keywords=("links", "dreht"),
            ),
        ),
    ),
    "Alltag": DemoStory(
        text=(
            "Sara kauft nach der Arbeit im Supermarkt ein. Sie braucht Milch, Brot und Äpfel. "
            "An der Kasse merkt sie, dass sie ihre Tasche vergessen hat. Der Kassierer gibt ihr "
            "freundlich eine Papiertüte."
        ),
        questions=(
            DemoQuestion(
                prompt="Was hat Sara vergessen?",
                choices=("Ihr Geld", "Ihre Tasche", "Ihre Einkaufsliste"),
                correct_index=1,
                keywords=("tasche",),
            ),
            DemoQuestion(
                prompt="Was gibt ihr der Kassierer?",
                choices=("Eine Papiertüte", "Einen Gutschein", "Ein Brot"),
                correct_index=0,
                keywords=("tüte", "tuete", "papier"),
            ),
        ),
    ),
}


class DemoStoryStore:
    """Remembers issued stories so audio and grading can refer back to them."""

    def __init__(self, stories: dict[str, DemoStory] | None = None) -> None:
        self._stories = stories or DEMO_STORIES
        self._issued: dict[str, DemoStory] = {}
        self._lock = Lock()

    @property
    def topics(self) -> tuple[str, ...]:
        return tuple(self._stories)

    def issue(self, topic: str) -> tuple[str, DemoStory]:
        story = self._stories.get(topic)
        if story is None:
            raise KeyError(topic)
        request_id = uuid.uuid4().hex
        with self._lock:
            self._issued[request_id] = story
        return request_id, story

    def get(self, request_id: str) -> DemoStory | None:
        with self._lock:
            return self._issued.get(request_id)

    def find_by_text(self, text: str) -> DemoStory | None:
        for story in self._stories.values():
            if story.text == text:
                return story
        return None


def build_story_response(request_id: str, story: DemoStory, answer_type: str) -> GenerateStoryResponse:
    if answer_type == ANSWER_TYPE_MULTIPLE_CHOICE:
        questions: list[object] = [
            {
                "question": question.prompt,
                "choices": [
                    {"text": text, "isCorrect": index == question.correct_index}
                    for index, text in enumerate(question.choices)
                ],
            }
            for question in story.questions
        ]
    else:
        questions = [question.prompt for question in story.questions]
    return GenerateStoryResponse(
        request_id=request_id,
        story=story.text,
        questions=questions,
        audio_url=f"audio/{request_id}.wav",
    )


def grade_answers(payload: EvaluateAnswersRequest, story: DemoStory | None) -> EvaluateAnswersResponse:
    """Keyword grading: an answer is correct when it mentions an expected keyword."""
    expected = {question.prompt: question for question in story.questions} if story else {}
    evaluations: list[AnswerEvaluation] = []
    for pair in payload.questions:
        question = expected.get(pair.question)
        answer = pair.answer.lower()
        is_correct = question is not None and any(keyword in answer for keyword in question.keywords)
        evaluations.append(
            AnswerEvaluation(
                question=pair.question,
                answer=pair.answer,
                is_correct=is_correct,
                correction="" if is_correct or question is None else question.correct_answer,
            )
        )

    total = len(evaluations)
    correct = sum(1 for evaluation in evaluations if evaluation.is_correct)
    score = 100 * correct / total if total else 0.0
    if score >= 100:
        feedback = "Super, alles richtig verstanden!"
    elif score >= 50:
        feedback = "Gut gemacht, das meiste hast du verstanden."
    else:
        feedback = "Hör dir die Geschichte ruhig noch einmal an."
    return EvaluateAnswersResponse(overall_score=score, feedback=feedback, evaluations=evaluations)


@lru_cache(maxsize=16)
def render_tone_wav(duration_seconds: float) -> bytes:
    """Mono 16-bit WAV with a faded sine tone, standing in for narrated audio."""
    frame_count = int(_SAMPLE_RATE * duration_seconds)
    frames = bytearray()
    for index in range(frame_count):
        envelope = min(1.0, index / _SAMPLE_RATE, (frame_count - index) / _SAMPLE_RATE)
        sample = 0.2 * envelope * math.sin(2 * math.pi * _TONE_HZ * index / _SAMPLE_RATE)
        frames += struct.pack("<h", int(sample * 32767))

    buffer = io.BytesIO()
    with wave.open(buffer, "wb") as wav_file:
        wav_file.setnchannels(1)
        wav_file.setsampwidth(2)
        wav_file.setframerate(_SAMPLE_RATE)
        wav_file.writeframes(bytes(frames))
    return buffer.getvalue()


def story_duration_seconds(story: DemoStory) -> float:
    return max(3.0, round(len(story.text.split()) * _SECONDS_PER_WORD, 1))


def create_demo_app(store: DemoStoryStore | None = None) -> FastAPI:
    """Create a FastAPI application implementing both backend endpoints."""
    app = FastAPI(title=f"{APP_NAME} Demo Backend", version=APP_VERSION)
    story_store = store or DemoStoryStore()

    @app.get("/")
    def health() -> dict[str, object]:
        return {"status": "ok", "topics": list(story_store.topics)}

    @app.post("/generate-story")
    def generate_story(payload: GenerateStoryRequest) -> dict[str, object]:
        try:
            request_id, story = story_store.issue(payload.topic)
        except KeyError as exc:
            raise HTTPException(status_code=404, detail=f"Unknown topic: {payload.topic}") from exc
        logger.info("Issued demo story %s for topic %s", request_id, payload.topic)
        response = build_story_response(request_id, story, payload.answer_type)
        return response.model_dump(by_alias=True)

    @app.post("/evaluate-answers")
    def evaluate_answers(payload: EvaluateAnswersRequest) -> dict[str, object]:
        story = story_store.find_by_text(payload.story)
        if story is None:
            logger.warning("Grading answers for an unknown story")
        return grade_answers(payload, story).model_dump(by_alias=True)

    @app.get("/audio/{request_id}.wav")
    def get_audio(request_id: str) -> Response:
        story = story_store.get(request_id)
        if story is None:
            raise HTTPException(status_code=404, detail="Unknown audio")
        return Response(content=render_tone_wav(story_duration_seconds(story)), media_type="audio/wav")

    return app


def start_demo_backend(
    host: str = DEMO_BACKEND_HOST,
    port: int = DEMO_BACKEND_PORT,
) -> Thread:
    """Start the demo backend in a background daemon thread."""
    app = create_demo_app()
    config = uvicorn.Config(app=app, host=host, port=port, log_level="info")
    server = uvicorn.Server(config)

    def run_server() -> None:
        server.run()

    thread = Thread(target=run_server, name="StoryQuizDemoBackend", daemon=True)
    thread.start()
    logger.info("Demo backend listening on http://%s:%d/", host, port)
    return thread
