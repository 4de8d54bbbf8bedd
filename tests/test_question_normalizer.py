import json

from story_quiz.core.models import AnswerMode, Choice, Question
from story_quiz.core.question_normalizer import normalize_question, normalize_questions


def test_mapping_with_choices_becomes_multiple_choice_question():
    question = normalize_question(
        {
            "question": "Wer gewinnt?",
            "choices": [{"text": "Anna", "isCorrect": True}, {"text": "Ben", "isCorrect": False}],
        }
    )

    assert question.prompt == "Wer gewinnt?"
    assert question.choices == (Choice("Anna", True), Choice("Ben", False))
    assert question.correct_index == 0


def test_json_encoded_string_is_decoded():
    raw = json.dumps({"question": "Wohin?", "choices": [{"text": "Berlin", "isCorrect": True}]})

    question = normalize_question(raw)

    assert question.prompt == "Wohin?"
    assert question.has_choices


def test_plain_string_is_a_free_text_question():
    assert normalize_question("Warum lacht Tom?") == Question(prompt="Warum lacht Tom?")


def test_malformed_json_string_falls_back_to_literal_text():
    raw = '{"question": "Wer'

    question = normalize_question(raw)

    assert question.prompt == raw
    assert question.choices == ()


def test_choices_without_exactly_one_correct_answer_are_dropped():
    question = normalize_question(
        {"question": "Wer?", "choices": [{"text": "A", "isCorrect": True}, {"text": "B", "isCorrect": True}]}
    )

    assert question == Question(prompt="Wer?")


def test_mapping_without_prompt_uses_its_json_text():
    question = normalize_question({"choices": []})

    assert question.prompt == '{"choices": []}'


def test_free_text_mode_strips_choices():
    entries = [
        {"question": "Wer?", "choices": [{"text": "A", "isCorrect": True}, {"text": "B"}]},
        "Warum?",
    ]

    questions = normalize_questions(entries, AnswerMode.FREE_TEXT)

    assert [q.choices for q in questions] == [(), ()]
    assert [q.prompt for q in questions] == ["Wer?", "Warum?"]


def test_unexpected_entry_types_never_raise():
    assert normalize_question(42).prompt == "42"
    assert normalize_question(None).prompt == ""


def test_json_string_and_object_normalize_identically():
    entry = {
        "question": "Wer gewinnt?",
        "choices": [{"text": "Anna", "isCorrect": False}, {"text": "Ben", "isCorrect": True}],
    }

    assert normalize_question(json.dumps(entry)) == normalize_question(entry)
