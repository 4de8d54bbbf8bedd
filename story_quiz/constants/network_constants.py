"""Network configuration constants for the story quiz client and demo backend."""

DEFAULT_BACKEND_URL: str = "http://127.0.0.1:8000/"
DEFAULT_REQUEST_TIMEOUT_SECONDS: float = 60.0

GENERATE_STORY_PATH: str = "generate-story"
EVALUATE_ANSWERS_PATH: str = "evaluate-answers"

DEMO_BACKEND_HOST: str = "127.0.0.1"
DEMO_BACKEND_PORT: int = 8000
