"""Task runner that executes work on a thread and completes on the Qt thread."""

from __future__ import annotations

from collections.abc import Callable
import logging
from threading import Thread
from typing import Any

from PySide6.QtCore import QObject, Signal

from story_quiz.core.services.task_runner import Completion, TaskOutcome, run_work

logger = logging.getLogger(__name__)


class QtTaskRunner(QObject):
    """Runs blocking work in daemon threads.

    The completion is delivered through a queued signal, so ``on_done`` always
    runs on the thread that owns this object.
    """

    _finished = Signal(object, object)

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._finished.connect(self._deliver)

    def submit(self, work: Callable[[], Any], on_done: Completion, name: str = "task") -> None:
        def run() -> None:
            outcome = run_work(work, name)
            self._finished.emit(on_done, outcome)

        logger.debug("Starting task %s", name)
        Thread(target=run, name=f"StoryQuiz-{name}", daemon=True).start()

    def _deliver(self, on_done: Completion, outcome: TaskOutcome[Any]) -> None:
        on_done(outcome)
