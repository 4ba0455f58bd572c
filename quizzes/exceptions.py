"""Errors raised by the quiz engine.

Every error carries a stable `code` and a user-facing message. They are
grouped the way callers react to them: validation errors point at the
offending field, authorisation and state errors are terminal for the
request, submission errors describe a malformed answer sheet. None of
them are worth retrying; the same input fails the same way.
"""
from __future__ import annotations

from typing import Any


class QuizEngineError(Exception):
    """Base class for all quiz engine errors."""

    code = "quiz_error"
    default_message = "The quiz request could not be completed."

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def as_dict(self) -> dict[str, Any]:
        return {"code": self.code, "detail": self.message}


# Validation -----------------------------------------------------------------


class QuizValidationError(QuizEngineError):
    """Authoring input breaks a quiz, question or option rule."""

    code = "invalid_quiz"
    default_message = "The quiz is not valid."

    def __init__(self, message: str | None = None, *, question_index: int | None = None, option_index: int | None = None):
        self.question_index = question_index
        self.option_index = option_index
        super().__init__(message)

    def as_dict(self) -> dict[str, Any]:
        data = super().as_dict()
        if self.question_index is not None:
            data["question_index"] = self.question_index
        if self.option_index is not None:
            data["option_index"] = self.option_index
        return data


class EmptyTitle(QuizValidationError):
    code = "empty_title"
    default_message = "Quiz title must not be empty."


class NoQuestions(QuizValidationError):
    code = "no_questions"
    default_message = "A quiz needs at least one question."


class EmptyQuestionText(QuizValidationError):
    code = "empty_question_text"

    def __init__(self, index: int):
        super().__init__(f"Question {index + 1}: text must not be empty.", question_index=index)


class InsufficientOptions(QuizValidationError):
    code = "insufficient_options"

    def __init__(self, index: int):
        super().__init__(f"Question {index + 1}: must have at least two answer options.", question_index=index)


class EmptyOption(QuizValidationError):
    code = "empty_option"

    def __init__(self, index: int, option_index: int):
        super().__init__(
            f"Question {index + 1}: option {option_index + 1} must not be empty.",
            question_index=index,
            option_index=option_index,
        )


class MalformedQuiz(QuizValidationError):
    """The payload is not shaped like a quiz (e.g. `questions` is not a list)."""

    code = "malformed_quiz"
    default_message = "The quiz payload is malformed."


class TitleTooLong(QuizValidationError):
    code = "title_too_long"

    def __init__(self, limit: int):
        super().__init__(f"Quiz title must be at most {limit} characters.")


class OptionTooLong(QuizValidationError):
    code = "option_too_long"

    def __init__(self, index: int, option_index: int, limit: int):
        super().__init__(
            f"Question {index + 1}: option {option_index + 1} must be at most {limit} characters.",
            question_index=index,
            option_index=option_index,
        )


class InvalidCorrectIndex(QuizValidationError):
    code = "invalid_correct_index"

    def __init__(self, index: int, message: str | None = None):
        super().__init__(message or f"Question {index + 1}: the correct option is out of range.", question_index=index)


class UnconfirmedCorrectOption(InvalidCorrectIndex):
    """The teacher has not picked a correct option yet."""

    code = "unconfirmed_correct_option"

    def __init__(self, index: int):
        super().__init__(index, f"Question {index + 1}: choose the correct option.")


# Authorisation --------------------------------------------------------------


class AuthorizationError(QuizEngineError):
    code = "forbidden"
    default_message = "You do not have permission to perform this action."


class Forbidden(AuthorizationError):
    pass


# State ----------------------------------------------------------------------


class StateError(QuizEngineError):
    code = "invalid_state"


class NotFound(StateError):
    code = "not_found"
    default_message = "Not found."


class QuizNotFound(NotFound):
    code = "quiz_not_found"
    default_message = "Quiz not found."


class AssignmentNotFound(NotFound):
    code = "assignment_not_found"
    default_message = "Assignment not found."


class CourseNotFound(NotFound):
    code = "course_not_found"
    default_message = "Course not found."


class ResultNotFound(NotFound):
    code = "result_not_found"
    default_message = "Result not found."


class StudentNotFound(NotFound):
    code = "student_not_found"
    default_message = "One or more students do not exist."


class Locked(StateError):
    code = "locked"
    default_message = "Quiz has recorded results; create a new version instead of editing it."


class AlreadySubmitted(StateError):
    code = "already_submitted"
    default_message = "You have already submitted this quiz."


class EmptyScope(StateError):
    code = "empty_scope"
    default_message = "Choose at least one student to assign the quiz to."


class NotEligible(StateError):
    code = "not_eligible"
    default_message = "This quiz is not assigned to you."


class ResultImmutable(StateError):
    code = "result_immutable"
    default_message = "Recorded results cannot be changed."


# Submission -----------------------------------------------------------------


class SubmissionError(QuizEngineError):
    code = "invalid_submission"


class MalformedSubmission(SubmissionError):
    code = "malformed_submission"
    default_message = "Provide exactly one answer per question."


class InvalidAnswerIndex(SubmissionError):
    code = "invalid_answer_index"

    def __init__(self, index: int):
        self.question_index = index
        super().__init__(f"Question {index + 1}: the selected option does not exist.")

    def as_dict(self) -> dict[str, Any]:
        data = super().as_dict()
        data["question_index"] = self.question_index
        return data
