"""Quiz storage: create, read, edit, version and delete authored quizzes.

Only the author may change or delete a quiz. Once any assignment of a quiz
has a recorded result the quiz is locked; further edits go through
`create_version`, which stores a copy with the changes applied.
"""
from __future__ import annotations

import logging
from typing import Any, Mapping

from django.db import transaction
from django.db.models import QuerySet

from courses.models import Course
from .drafts import QuestionDraft, QuizDraft
from .exceptions import CourseNotFound, Forbidden, Locked, QuizNotFound
from .models import Option, Question, Quiz, Result
from .validation import ValidQuiz, validate_quiz

logger = logging.getLogger(__name__)

Patch = Mapping[str, Any]


def _check_course(course_id: int | None, author_id: int) -> None:
    if course_id is None:
        return
    course = Course.objects.filter(pk=course_id).first()
    if course is None:
        raise CourseNotFound()
    if course.owner_id != author_id:
        raise Forbidden("You can only attach quizzes to your own courses.")


def _write_questions(quiz: Quiz, valid: ValidQuiz) -> None:
    quiz.questions.all().delete()
    for order, vq in enumerate(valid.questions):
        q = Question.objects.create(quiz=quiz, order=order, text=vq.text, correct_option=vq.correct_option)
        Option.objects.bulk_create(
            [Option(question=q, order=i, text=text) for i, text in enumerate(vq.options)]
        )


def _load(quiz_id: int, *, for_update: bool = False) -> Quiz:
    qs = Quiz.objects.select_for_update() if for_update else Quiz.objects.all()
    quiz = qs.filter(pk=quiz_id).first()
    if quiz is None:
        raise QuizNotFound()
    return quiz


def draft_from_quiz(quiz: Quiz) -> QuizDraft:
    """Rebuild an editable draft from a stored quiz."""
    questions = tuple(
        QuestionDraft(
            text=q.text,
            options=tuple(o.text for o in q.options.all()),
            correct_option=q.correct_option,
        )
        for q in quiz.questions.prefetch_related("options")
    )
    return QuizDraft(title=quiz.title, course_id=quiz.course_id, questions=questions)


def _apply_patch(quiz: Quiz, patch: Patch | QuizDraft) -> ValidQuiz:
    if isinstance(patch, QuizDraft):
        return validate_quiz(patch)
    current = draft_from_quiz(quiz)
    merged: dict[str, Any] = {
        "title": current.title,
        "course_id": current.course_id,
        "questions": [
            {"text": q.text, "options": list(q.options), "correct_option": q.correct_option}
            for q in current.questions
        ],
    }
    for key in ("title", "questions"):
        if key in patch:
            merged[key] = patch[key]
    if "course_id" in patch or "course" in patch:
        merged["course_id"] = patch.get("course_id", patch.get("course"))
    return validate_quiz(merged)


def is_locked(quiz: Quiz | int) -> bool:
    """Whether any assignment of the quiz has a recorded result."""
    quiz_id = quiz.pk if isinstance(quiz, Quiz) else quiz
    return Result.objects.filter(submission__assignment__quiz_id=quiz_id).exists()


@transaction.atomic
def create_quiz(quiz: ValidQuiz | QuizDraft | Patch, author_id: int) -> Quiz:
    """Store a validated quiz for its author and return it."""
    valid = quiz if isinstance(quiz, ValidQuiz) else validate_quiz(quiz)
    _check_course(valid.course_id, author_id)
    obj = Quiz.objects.create(author_id=author_id, course_id=valid.course_id, title=valid.title)
    _write_questions(obj, valid)
    logger.info("Quiz %s created by user %s with %d questions", obj.pk, author_id, len(valid.questions))
    return obj


def get_quiz(quiz_id: int) -> Quiz:
    quiz = Quiz.objects.filter(pk=quiz_id).prefetch_related("questions__options").first()
    if quiz is None:
        raise QuizNotFound()
    return quiz


def list_quizzes(author_id: int, course_id: int | None = None) -> QuerySet[Quiz]:
    qs = Quiz.objects.filter(author_id=author_id).prefetch_related("questions__options")
    if course_id is not None:
        qs = qs.filter(course_id=course_id)
    return qs


@transaction.atomic
def update_quiz(quiz_id: int, patch: Patch | QuizDraft, author_id: int) -> Quiz:
    """Edit a quiz in place.

    Ownership and the lock are checked on the row locked for this write,
    so a result recorded before the write begins always wins.
    """
    quiz = _load(quiz_id, for_update=True)
    if quiz.author_id != author_id:
        raise Forbidden("Only the author can edit this quiz.")
    if is_locked(quiz):
        raise Locked()
    valid = _apply_patch(quiz, patch)
    _check_course(valid.course_id, author_id)
    quiz.title = valid.title
    quiz.course_id = valid.course_id
    quiz.save(update_fields=["title", "course", "updated_at"])
    _write_questions(quiz, valid)
    logger.info("Quiz %s updated by user %s", quiz.pk, author_id)
    return get_quiz(quiz.pk)


@transaction.atomic
def create_version(quiz_id: int, patch: Patch | QuizDraft | None, author_id: int) -> Quiz:
    """Store a new version of a quiz with `patch` applied.

    The original (and every assignment and result pointing at it) stays
    untouched.
    """
    source = _load(quiz_id)
    if source.author_id != author_id:
        raise Forbidden("Only the author can create a new version of this quiz.")
    valid = _apply_patch(source, patch or {})
    _check_course(valid.course_id, author_id)
    obj = Quiz.objects.create(
        author_id=author_id,
        course_id=valid.course_id,
        title=valid.title,
        version=source.version + 1,
        previous_version=source,
    )
    _write_questions(obj, valid)
    logger.info("Quiz %s created as version %d of quiz %s", obj.pk, obj.version, source.pk)
    return obj


@transaction.atomic
def delete_quiz(quiz_id: int, author_id: int) -> None:
    """Delete a quiz with its assignments, submissions and results."""
    quiz = _load(quiz_id, for_update=True)
    if quiz.author_id != author_id:
        raise Forbidden("Only the author can delete this quiz.")
    _, counts = quiz.delete()
    logger.info(
        "Quiz %s deleted by user %s (%d assignments, %d results)",
        quiz_id,
        author_id,
        counts.get("quizzes.Assignment", 0),
        counts.get("quizzes.Result", 0),
    )


def snapshot_of(quiz: Quiz) -> dict[str, Any]:
    """Frozen copy of a quiz stored on each assignment."""
    return {
        "title": quiz.title,
        "version": quiz.version,
        "questions": [
            {
                "text": q.text,
                "options": [o.text for o in q.options.all()],
                "correct_option": q.correct_option,
            }
            for q in quiz.questions.prefetch_related("options")
        ],
    }
