"""Task model for work that completes asynchronously on the UI thread."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
import logging
from typing import Any, Generic, Protocol, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(slots=True, frozen=True)
class RequestTicket:
    """Identifies the session and request a task was issued for."""

    session_id: str
    request_id: str


@dataclass(slots=True, frozen=True)
class TaskOutcome(Generic[T]):
    """Result of a finished task: either ``value`` or ``error`` is meaningful."""

    value: T | None = None
    error: BaseException | None = None

    @property
    def failed(self) -> bool:
        return self.error is not None


Completion = Callable[[TaskOutcome[Any]], None]


class TaskRunner(Protocol):
    """Runs ``work`` without blocking the caller's event loop.

    ``on_done`` must be invoked exactly once, on the thread that owns the
    controllers, with the outcome of ``work``.
    """

    def submit(self, work: Callable[[], Any], on_done: Completion, name: str = "task") -> None:
        ...


def run_work(work: Callable[[], T], name: str) -> TaskOutcome[T]:
    """Execute ``work`` and capture its result or exception."""
    try:
        return TaskOutcome(value=work())
    except Exception as exc:  # handed to the completion, which decides what to show
        logger.debug("Task %s failed: %r", name, exc)
        return TaskOutcome(error=exc)


class ImmediateTaskRunner:
    """Runs work inline and completes before ``submit`` returns."""

    def submit(self, work: Callable[[], Any], on_done: Completion, name: str = "task") -> None:
        on_done(run_work(work, name))
