"""Static metadata describing StoryQuiz."""

APP_NAME = "StoryQuiz"
APP_VERSION = "0.1"
