"""Qt UI constants used across widgets."""

WINDOW_TITLE: str = "StoryQuiz"
WINDOW_MIN_WIDTH: int = 520
WINDOW_MIN_HEIGHT: int = 720

RESTART_BUTTON: str = "Neu starten"
CONTINUE_BUTTON: str = "Weiter zu den Fragen"
SEND_BUTTON: str = "Senden"
ANSWER_PLACEHOLDER: str = "Deine Antwort …"
WAITING_HINT: str = "Bitte warten …"
EVALUATION_DONE_HINT: str = "Fertig! Du kannst jetzt neu starten."

PLAY_BUTTON: str = "▶"
PAUSE_BUTTON: str = "⏸"
RATE_BUTTON_TEMPLATE: str = "{rate:g}×"
TIME_PLACEHOLDER: str = "--:--"

SEEK_TRACK_HEIGHT: int = 14
DRAG_START_DISTANCE_PX: int = 3
