"""Mapping from failures to the fixed user-visible error messages."""

from __future__ import annotations

import logging

from story_quiz.constants.message_constants import (
    MALFORMED_RESPONSE_MESSAGE,
    NETWORK_ERROR_MESSAGE,
)
from story_quiz.core.backend_client import BackendError
from story_quiz.core.models import ErrorFamily, ErrorPayload, MessageDraft, MessageKind

logger = logging.getLogger(__name__)

_MESSAGES = {
    ErrorFamily.NETWORK: NETWORK_ERROR_MESSAGE,
    ErrorFamily.MALFORMED: MALFORMED_RESPONSE_MESSAGE,
}


def error_family_for(error: BaseException) -> ErrorFamily:
    if isinstance(error, BackendError):
        return error.family
    logger.error("Unexpected failure treated as network error", exc_info=error)
    return ErrorFamily.NETWORK


def error_draft(error: BaseException) -> MessageDraft:
    family = error_family_for(error)
    return MessageDraft(
        text=_MESSAGES[family],
        kind=MessageKind.ERROR,
        payload=ErrorPayload(family=family),
    )
