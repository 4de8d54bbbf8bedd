"""Normalization of loosely shaped question entries into :class:`Question`.

The story backend sends questions in three shapes:

    {"question": "Wer gewinnt?", "choices": [{"text": "Anna", "isCorrect": true}, ...]}
    '{"question": "Wer gewinnt?", "choices": [...]}'   (the same object, JSON encoded)
    "Wer gewinnt das Rennen?"                          (plain free-text question)

Anything that cannot be read as a structured question degrades to a plain
question whose prompt is the literal text. Normalization never raises.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
import json
import logging
from typing import Any

from story_quiz.core.models import AnswerMode, Choice, Question

logger = logging.getLogger(__name__)

_PROMPT_KEYS = ("question", "prompt", "text")


def normalize_question(entry: Any) -> Question:
    """Return a :class:`Question` for one backend entry."""
    if isinstance(entry, Question):
        return entry
    if isinstance(entry, Mapping):
        question = _from_mapping(entry)
        if question is not None:
            return question
        return _fallback(json.dumps(entry, ensure_ascii=False, default=str))
    if isinstance(entry, str):
        return _from_string(entry)
    return _fallback("" if entry is None else str(entry))


def normalize_questions(entries: Iterable[Any], mode: AnswerMode) -> list[Question]:
    """Normalize all entries; free-text sessions never carry choices."""
    questions = [normalize_question(entry) for entry in entries]
    if mode is AnswerMode.FREE_TEXT:
        questions = [Question(prompt=q.prompt) if q.choices else q for q in questions]
    return questions


def _from_string(raw: str) -> Question:
    stripped = raw.strip()
    if stripped.startswith("{"):
        try:
            decoded = json.loads(stripped)
        except json.JSONDecodeError:
            logger.warning("Question entry is not valid JSON, using it as plain text")
            return _fallback(raw)
        if isinstance(decoded, Mapping):
            question = _from_mapping(decoded)
            if question is not None:
                return question
    return _fallback(raw)


def _from_mapping(data: Mapping[str, Any]) -> Question | None:
    prompt = next(
        (data[key] for key in _PROMPT_KEYS if isinstance(data.get(key), str) and data[key].strip()),
        None,
    )
    if prompt is None:
        logger.warning("Question object without prompt text: %r", data)
        return None

    raw_choices = data.get("choices") or []
    if not isinstance(raw_choices, list):
        logger.warning("Ignoring non-list choices for question %r", prompt)
        return Question(prompt=prompt.strip())

    choices: list[Choice] = []
    for raw_choice in raw_choices:
        choice = _parse_choice(raw_choice)
        if choice is None:
            logger.warning("Dropping choices of %r: malformed choice %r", prompt, raw_choice)
            return Question(prompt=prompt.strip())
        choices.append(choice)

    if choices and sum(1 for c in choices if c.is_correct) != 1:
        logger.warning("Question %r does not have exactly one correct choice", prompt)
        return Question(prompt=prompt.strip())

    return Question(prompt=prompt.strip(), choices=tuple(choices))


def _parse_choice(raw: Any) -> Choice | None:
    if not isinstance(raw, Mapping):
        return None
    text = raw.get("text")
    if not isinstance(text, str) or not text.strip():
        return None
    is_correct = raw.get("isCorrect", raw.get("is_correct", False))
    return Choice(text=text.strip(), is_correct=is_correct is True)


def _fallback(text: str) -> Question:
    return Question(prompt=text.strip())
