"""Record and score a student's answers to an assignment.

Scoring only reads the assignment's snapshot. A submission and its result
are written together in one transaction; the database's unique
(assignment, student) constraint settles two concurrent submissions, and
the loser is reported as `AlreadySubmitted`.
"""
from __future__ import annotations

import logging
from typing import Any, Sequence

from django.db import IntegrityError, transaction
from django.utils import timezone

from .assigning import get_assignment, is_eligible
from .exceptions import AlreadySubmitted, InvalidAnswerIndex, MalformedSubmission, NotEligible, ResultNotFound
from .models import UNANSWERED, Result, Submission

logger = logging.getLogger(__name__)


def percentage_of(score: int, total: int) -> int:
    """Whole-number percentage, rounding halves up (1/2 -> 50, 2/3 -> 67)."""
    if total <= 0:
        return 0
    return (200 * score + total) // (2 * total)


def normalise_answers(questions: Sequence[dict], answers: Sequence[Any]) -> list[int]:
    """Check an answer sheet against the snapshot questions.

    `None` and `UNANSWERED` both mean the question was left blank and are
    stored as `UNANSWERED`.
    """
    if isinstance(answers, (str, bytes)) or not isinstance(answers, Sequence):
        raise MalformedSubmission()
    if len(answers) != len(questions):
        raise MalformedSubmission()
    cleaned: list[int] = []
    for i, (question, answer) in enumerate(zip(questions, answers)):
        if answer is None:
            cleaned.append(UNANSWERED)
            continue
        if isinstance(answer, bool) or not isinstance(answer, int):
            raise MalformedSubmission()
        if answer == UNANSWERED:
            cleaned.append(UNANSWERED)
            continue
        if not 0 <= answer < len(question["options"]):
            raise InvalidAnswerIndex(i)
        cleaned.append(answer)
    return cleaned


def score_answers(answer_key: Sequence[int], answers: Sequence[int]) -> tuple[int, int, int]:
    """Return (score, total, percentage); blanks never count as correct."""
    total = len(answer_key)
    score = sum(1 for key, given in zip(answer_key, answers) if given != UNANSWERED and given == key)
    return score, total, percentage_of(score, total)


def has_submitted(assignment_id: int, student_id: int) -> bool:
    return Submission.objects.filter(assignment_id=assignment_id, student_id=student_id).exists()


def submit(assignment_id: int, student_id: int, answers: Sequence[Any]) -> Result:
    """Score and store a student's answers; returns the recorded Result.

    Checks, in order: the assignment exists, the student is in its scope,
    nothing was submitted before, one answer per question, each answer is
    blank or a real option.
    """
    assignment = get_assignment(assignment_id)
    if not is_eligible(assignment, student_id):
        raise NotEligible()
    if has_submitted(assignment.pk, student_id):
        raise AlreadySubmitted()
    cleaned = normalise_answers(assignment.snapshot_questions, answers)
    score, total, percentage = score_answers(assignment.answer_key, cleaned)
    try:
        with transaction.atomic():
            submission = Submission.objects.create(
                assignment=assignment, student_id=student_id, answers=cleaned, submitted_at=timezone.now()
            )
            result = Result.objects.create(submission=submission, score=score, total=total, percentage=percentage)
    except IntegrityError as exc:
        logger.warning("Duplicate submission by user %s on assignment %s rejected", student_id, assignment.pk)
        raise AlreadySubmitted() from exc
    logger.info(
        "Submission %s recorded for user %s on assignment %s: %d/%d (%d%%)",
        submission.pk,
        student_id,
        assignment.pk,
        score,
        total,
        percentage,
    )
    return result


def get_result(submission_id: int) -> Result:
    result = Result.objects.filter(submission_id=submission_id).select_related("submission").first()
    if result is None:
        raise ResultNotFound()
    return result
