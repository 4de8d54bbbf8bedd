"""Fixed German chat strings appended to the message log."""

WELCOME_MESSAGE: str = (
    "Hallo! Ich erzähle dir eine kurze Geschichte und stelle dir danach Fragen dazu.\n"
    "**Wähle ein Thema:**"
)
ANSWER_TYPE_PROMPT: str = "Wie möchtest du die Fragen beantworten?"
ANSWER_MODE_LABELS: dict[str, str] = {
    "free-text": "Freitext",
    "multiple-choice": "Multiple Choice",
}
ANSWER_MODE_CONFIRMATION: str = "Ich antworte mit: {label}"

STORY_LOADING: str = "Deine Geschichte wird erstellt …"
EVALUATION_LOADING: str = "Deine Antworten werden ausgewertet …"

STORY_INTRO: str = "Hier ist deine Geschichte. Hör gut zu!"
QUESTION_TEMPLATE: str = "**Frage {number} von {total}:**\n{prompt}"

SCORE_SUMMARY_TEMPLATE: str = "Ergebnis: {score}% ({correct} von {total}) richtig."
INCORRECT_DETAIL_TEMPLATE: str = (
    "**Frage {number}:** {prompt}\n"
    "Deine Antwort: {given}\n"
    "Richtige Antwort: {expected}"
)
NO_ANSWER_PLACEHOLDER: str = "(keine Antwort)"

FREE_TEXT_FEEDBACK_TEMPLATE: str = (
    "**Frage {number}:** {question}\n"
    "Deine Antwort: {answer}\n"
    "{verdict}\n"
    "{details}"
)
VERDICT_CORRECT: str = "✅ Richtig"
VERDICT_INCORRECT: str = "❌ Nicht ganz richtig"
CORRECTION_TEMPLATE: str = "Korrektur: {correction}"
OVERALL_SCORE_TEMPLATE: str = "**Gesamtergebnis: {score}%**\n{feedback}"

RESTART_PROMPT: str = "Möchtest du eine neue Geschichte hören? Klicke auf „Neu starten“."

NETWORK_ERROR_MESSAGE: str = (
    "Der Server ist gerade nicht erreichbar. Bitte versuche es später erneut."
)
MALFORMED_RESPONSE_MESSAGE: str = (
    "Die Antwort des Servers war ungültig. Bitte versuche es später erneut."
)
