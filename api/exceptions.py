"""Map quiz engine errors to HTTP responses."""
from __future__ import annotations

import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from quizzes.exceptions import (
    AlreadySubmitted,
    AuthorizationError,
    EmptyScope,
    Locked,
    NotEligible,
    NotFound,
    QuizEngineError,
    QuizValidationError,
    ResultImmutable,
    SubmissionError,
)

logger = logging.getLogger(__name__)

# First match wins; order from most to least specific.
STATUS_BY_ERROR: list[tuple[type[QuizEngineError], int]] = [
    (QuizValidationError, status.HTTP_400_BAD_REQUEST),
    (SubmissionError, status.HTTP_400_BAD_REQUEST),
    (EmptyScope, status.HTTP_400_BAD_REQUEST),
    (AuthorizationError, status.HTTP_403_FORBIDDEN),
    (NotEligible, status.HTTP_403_FORBIDDEN),
    (NotFound, status.HTTP_404_NOT_FOUND),
    (Locked, status.HTTP_409_CONFLICT),
    (AlreadySubmitted, status.HTTP_409_CONFLICT),
    (ResultImmutable, status.HTTP_409_CONFLICT),
]


def status_for(exc: QuizEngineError) -> int:
    for cls, code in STATUS_BY_ERROR:
        if isinstance(exc, cls):
            return code
    return status.HTTP_400_BAD_REQUEST


def quiz_engine_exception_handler(exc, context):
    """DRF exception handler that understands `QuizEngineError`."""
    if isinstance(exc, QuizEngineError):
        code = status_for(exc)
        view = context.get("view")
        logger.info("%s rejected with %s (%s)", type(view).__name__ if view else "request", exc.code, code)
        return Response(exc.as_dict(), status=code)
    return exception_handler(exc, context)
