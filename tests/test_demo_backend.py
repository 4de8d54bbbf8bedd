import io
import wave

from fastapi.testclient import TestClient
import pytest

from story_quiz.core.question_normalizer import normalize_questions
from story_quiz.core.models import AnswerMode
from story_quiz.server.demo_backend import DEMO_STORIES, create_demo_app


@pytest.fixture
def api() -> TestClient:
    return TestClient(create_demo_app())


def test_health_lists_topics(api):
    response = api.get("/")

    assert response.status_code == 200
    assert response.json()["topics"] == list(DEMO_STORIES)


def test_multiple_choice_story_normalizes_to_choice_questions(api):
    response = api.post("/generate-story", json={"topic": "Sport", "answerType": "multiple"})

    assert response.status_code == 200
    body = response.json()
    assert body["audioUrl"] == f"audio/{body['requestId']}.wav"
    questions = normalize_questions(body["questions"], AnswerMode.MULTIPLE_CHOICE)
    assert all(question.correct_index is not None for question in questions)


def test_free_text_story_sends_plain_questions(api):
    body = api.post("/generate-story", json={"topic": "Natur", "answerType": "text"}).json()

    assert all(isinstance(question, str) for question in body["questions"])


def test_unknown_topic_is_rejected(api):
    response = api.post("/generate-story", json={"topic": "Kochen", "answerType": "text"})

    assert response.status_code == 404


def test_invalid_answer_type_is_rejected(api):
    response = api.post("/generate-story", json={"topic": "Sport", "answerType": "audio"})

    assert response.status_code == 422


def test_audio_is_served_as_wav(api):
    body = api.post("/generate-story", json={"topic": "Reisen", "answerType": "text"}).json()

    response = api.get(f"/{body['audioUrl']}")

    assert response.status_code == 200
    assert response.headers["content-type"] == "audio/wav"
    with wave.open(io.BytesIO(response.content)) as wav_file:
        assert wav_file.getnframes() > 0


def test_audio_for_unknown_request_is_missing(api):
    assert api.get("/audio/nope.wav").status_code == 404


def test_grader_uses_keywords(api):
    story = DEMO_STORIES["Sport"]
    payload = {
        "story": story.text,
        "questions": [
            {"question": story.questions[0].prompt, "answer": "Am Samstag"},
            {"question": story.questions[1].prompt, "answer": "Als Erste"},
        ],
    }

    body = api.post("/evaluate-answers", json=payload).json()

    assert body["overallScore"] == 50
    assert [evaluation["isCorrect"] for evaluation in body["evaluations"]] == [True, False]
    assert body["evaluations"][1]["correction"] == "Als Dritte"
