"""Append-only chat log that the UI renders from."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from itertools import count

from story_quiz.constants.quiz_constants import LOADING_MESSAGE_ID
from story_quiz.core.models import (
    Direction,
    LoadingPayload,
    Message,
    MessageDraft,
    MessageKind,
    MessagePayload,
)


MessageListener = Callable[[list[Message]], None]


class MessageLog:
    """Ordered chat entries.

    Entries are only ever appended, except for the transient loading placeholder
    which is removed by its reserved id. Listeners receive a snapshot after each
    logical update; updates grouped with :meth:`batch` are published once.
    """

    def __init__(self) -> None:
        self._messages: list[Message] = []
        self._ids = count(1)
        self._listeners: list[MessageListener] = []
        self._batch_depth: int = 0
        self._dirty: bool = False

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[Message]:
        return iter(list(self._messages))

    def messages(self) -> list[Message]:
        return list(self._messages)

    def last(self) -> Message | None:
        return self._messages[-1] if self._messages else None

    def subscribe(self, listener: MessageListener) -> None:
        self._listeners.append(listener)

    def append(
        self,
        text: str,
        direction: Direction = Direction.RECEIVED,
        kind: MessageKind = MessageKind.PLAIN,
        payload: MessagePayload = None,
    ) -> Message:
        message = Message(
            id=next(self._ids),
            text=text,
            direction=direction,
            kind=kind,
            payload=payload,
        )
        self._messages.append(message)
        self._changed()
        return message

    def append_draft(self, draft: MessageDraft) -> Message:
        return self.append(draft.text, draft.direction, draft.kind, draft.payload)

    def has_loading(self) -> bool:
        return any(message.id == LOADING_MESSAGE_ID for message in self._messages)

    def show_loading(self, text: str) -> Message:
        """Append the loading placeholder; at most one exists at a time."""
        self.remove_loading()
        message = Message(
            id=LOADING_MESSAGE_ID,
            text=text,
            direction=Direction.RECEIVED,
            kind=MessageKind.LOADING,
            payload=LoadingPayload(),
        )
        self._messages.append(message)
        self._changed()
        return message

    def remove_loading(self) -> bool:
        remaining = [m for m in self._messages if m.id != LOADING_MESSAGE_ID]
        if len(remaining) == len(self._messages):
            return False
        self._messages = remaining
        self._changed()
        return True

    def replace_loading(self, drafts: list[MessageDraft]) -> list[Message]:
        """Remove the loading placeholder and append ``drafts`` as one update."""
        with self.batch():
            self.remove_loading()
            return [self.append_draft(draft) for draft in drafts]

    def clear(self) -> None:
        self._messages = []
        self._changed()

    @contextmanager
    def batch(self) -> Iterator[None]:
        """Group several mutations so listeners observe only the final state."""
        self._batch_depth += 1
        try:
            yield
        finally:
            self._batch_depth -= 1
            if self._batch_depth == 0 and self._dirty:
                self._publish()

    def _changed(self) -> None:
        self._dirty = True
        if self._batch_depth == 0:
            self._publish()

    def _publish(self) -> None:
        self._dirty = False
        snapshot = list(self._messages)
        for listener in list(self._listeners):
            listener(snapshot)
