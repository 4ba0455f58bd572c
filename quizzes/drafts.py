"""Immutable authoring drafts.

A draft is what the authoring form holds while a teacher is still
editing: questions may be blank and the correct option may not have been
chosen yet (`correct_option is None`). Every edit returns a new draft, so
no caller ever holds a live reference into someone else's edit.
Validation turns a draft into a `ValidQuiz`.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Mapping

from django.conf import settings

from .exceptions import MalformedQuiz


@dataclass(frozen=True)
class QuestionDraft:
    text: str = ""
    options: tuple[str, ...] = ()
    correct_option: int | None = None


@dataclass(frozen=True)
class QuizDraft:
    title: str = ""
    course_id: int | None = None
    questions: tuple[QuestionDraft, ...] = ()

    @classmethod
    def from_payload(cls, data: Mapping[str, Any]) -> "QuizDraft":
        """Build a draft from decoded JSON/form input.

        Accepts `correct_option` (or `correctOptionIndex`) per question and
        `course`/`course_id` for the course reference.

        Raises `MalformedQuiz` when the payload, its `questions` or a
        question's `options` do not have the expected container types.
        """
        if not isinstance(data, Mapping):
            raise MalformedQuiz()
        raw_questions = data.get("questions") or ()
        if not isinstance(raw_questions, (list, tuple)):
            raise MalformedQuiz("Questions must be a list.")
        questions = []
        for i, q in enumerate(raw_questions):
            if not isinstance(q, Mapping):
                raise MalformedQuiz(f"Question {i + 1} is malformed.", question_index=i)
            raw_options = q.get("options") or ()
            if not isinstance(raw_options, (list, tuple)):
                raise MalformedQuiz(f"Question {i + 1}: options must be a list.", question_index=i)
            correct = q.get("correct_option", q.get("correctOptionIndex"))
            questions.append(
                QuestionDraft(
                    text=_text(q.get("text")),
                    options=tuple(_text(o) for o in raw_options),
                    correct_option=correct,
                )
            )
        course_id = data.get("course_id", data.get("course"))
        return cls(title=_text(data.get("title")), course_id=course_id, questions=tuple(questions))


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def default_option_count() -> int:
    return max(2, int(getattr(settings, "QUIZ_DEFAULT_OPTION_COUNT", 4)))


def new_question(option_count: int | None = None) -> QuestionDraft:
    """A blank question with no correct option chosen."""
    count = option_count if option_count is not None else default_option_count()
    return QuestionDraft(text="", options=("",) * count, correct_option=None)


def _check_index(seq, index: int, what: str) -> None:
    if not 0 <= index < len(seq):
        raise IndexError(f"{what} index {index} out of range")


def _replace_question(draft: QuizDraft, index: int, question: QuestionDraft) -> QuizDraft:
    questions = draft.questions[:index] + (question,) + draft.questions[index + 1:]
    return replace(draft, questions=questions)


def set_title(draft: QuizDraft, title: str) -> QuizDraft:
    return replace(draft, title=title)


def add_question(draft: QuizDraft, question: QuestionDraft | None = None) -> QuizDraft:
    return replace(draft, questions=draft.questions + (question or new_question(),))


def remove_question(draft: QuizDraft, index: int) -> QuizDraft:
    _check_index(draft.questions, index, "question")
    return replace(draft, questions=draft.questions[:index] + draft.questions[index + 1:])


def update_question_text(draft: QuizDraft, index: int, text: str) -> QuizDraft:
    _check_index(draft.questions, index, "question")
    return _replace_question(draft, index, replace(draft.questions[index], text=text))


def add_option(draft: QuizDraft, index: int, text: str = "") -> QuizDraft:
    _check_index(draft.questions, index, "question")
    q = draft.questions[index]
    return _replace_question(draft, index, replace(q, options=q.options + (text,)))


def update_option(draft: QuizDraft, index: int, option_index: int, text: str) -> QuizDraft:
    _check_index(draft.questions, index, "question")
    q = draft.questions[index]
    _check_index(q.options, option_index, "option")
    options = q.options[:option_index] + (text,) + q.options[option_index + 1:]
    return _replace_question(draft, index, replace(q, options=options))


def remove_option(draft: QuizDraft, index: int, option_index: int) -> QuizDraft:
    """Drop an option, keeping the chosen answer on the same option text.

    Removing the chosen option itself clears the choice so the teacher has
    to pick again.
    """
    _check_index(draft.questions, index, "question")
    q = draft.questions[index]
    _check_index(q.options, option_index, "option")
    correct = q.correct_option
    if correct is not None:
        if correct == option_index:
            correct = None
        elif correct > option_index:
            correct -= 1
    options = q.options[:option_index] + q.options[option_index + 1:]
    return _replace_question(draft, index, replace(q, options=options, correct_option=correct))


def mark_correct(draft: QuizDraft, index: int, option_index: int) -> QuizDraft:
    _check_index(draft.questions, index, "question")
    q = draft.questions[index]
    _check_index(q.options, option_index, "option")
    return _replace_question(draft, index, replace(q, correct_option=option_index))
