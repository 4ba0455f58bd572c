"""Quiz validation.

Pure functions: no database access and no side effects, so validating the
same input twice always gives the same answer. Rules run in a fixed order
and the first failure wins:

1. title is not blank and fits its column
2. there is at least one question
3. for each question in order: text is not blank,
4. it has at least two options,
5. no option is blank or longer than its column,
6. the correct option has been chosen and is in range.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from .drafts import QuestionDraft, QuizDraft
from .exceptions import (
    EmptyOption,
    EmptyQuestionText,
    EmptyTitle,
    InsufficientOptions,
    InvalidCorrectIndex,
    NoQuestions,
    OptionTooLong,
    TitleTooLong,
    UnconfirmedCorrectOption,
)

MIN_OPTIONS = 2
# Column sizes of Quiz.title and Option.text
MAX_TITLE_LENGTH = 200
MAX_OPTION_LENGTH = 500


@dataclass(frozen=True)
class ValidQuestion:
    text: str
    options: tuple[str, ...]
    correct_option: int


@dataclass(frozen=True)
class ValidQuiz:
    title: str
    course_id: int | None
    questions: tuple[ValidQuestion, ...]

    @property
    def answer_key(self) -> list[int]:
        return [q.correct_option for q in self.questions]


def _blank(value: Any) -> bool:
    return not isinstance(value, str) or not value.strip()


def validate_question(question: QuestionDraft, index: int) -> ValidQuestion:
    """Check rules 3-6 for a single question at position `index`."""
    if _blank(question.text):
        raise EmptyQuestionText(index)
    options = tuple(question.options)
    if len(options) < MIN_OPTIONS:
        raise InsufficientOptions(index)
    for option_index, option in enumerate(options):
        if _blank(option):
            raise EmptyOption(index, option_index)
        if len(option.strip()) > MAX_OPTION_LENGTH:
            raise OptionTooLong(index, option_index, MAX_OPTION_LENGTH)
    correct = question.correct_option
    if correct is None:
        raise UnconfirmedCorrectOption(index)
    # bool is an int subclass; True must not select option 1
    if isinstance(correct, bool) or not isinstance(correct, int):
        raise InvalidCorrectIndex(index)
    if not 0 <= correct < len(options):
        raise InvalidCorrectIndex(index)
    return ValidQuestion(
        text=question.text.strip(),
        options=tuple(o.strip() for o in options),
        correct_option=correct,
    )


def validate_quiz(data: QuizDraft | Mapping[str, Any]) -> ValidQuiz:
    """Validate a draft (or a raw payload mapping) and return a `ValidQuiz`.

    Raises the first `QuizValidationError` subclass that applies.
    """
    draft = data if isinstance(data, QuizDraft) else QuizDraft.from_payload(data)
    if _blank(draft.title):
        raise EmptyTitle()
    if len(draft.title.strip()) > MAX_TITLE_LENGTH:
        raise TitleTooLong(MAX_TITLE_LENGTH)
    if not draft.questions:
        raise NoQuestions()
    questions = tuple(validate_question(q, i) for i, q in enumerate(draft.questions))
    return ValidQuiz(title=draft.title.strip(), course_id=draft.course_id, questions=questions)

