"""Quiz-related constants shared across UI and core layers."""

TOPICS: tuple[str, ...] = ("Sport", "Natur", "Reisen", "Technik", "Alltag")

# Wire values of the answer modes expected by the story backend.
ANSWER_TYPE_FREE_TEXT: str = "text"
ANSWER_TYPE_MULTIPLE_CHOICE: str = "multiple"

PLAYBACK_RATES: tuple[float, ...] = (0.75, 1.0, 1.25, 1.5, 2.0)
DEFAULT_PLAYBACK_RATE: float = 1.0

LOADING_MESSAGE_ID: str = "loading"
