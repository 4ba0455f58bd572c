from __future__ import annotations

from django.conf import settings
from django.db import models
from django.utils import timezone

from courses.models import Course
from .exceptions import ResultImmutable

# Stored in Submission.answers for a question the student left blank.
UNANSWERED = -1


class Quiz(models.Model):
    """An authored multiple-choice quiz.

    Quizzes are edited in place until one of their assignments records a
    result; after that a new version is created instead (see
    `quizzes.repository.create_version`).
    """

    author = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="authored_quizzes")
    course = models.ForeignKey(Course, on_delete=models.SET_NULL, null=True, blank=True, related_name="quizzes")
    title = models.CharField(max_length=200)
    version = models.PositiveIntegerField(default=1)
    previous_version = models.ForeignKey(
        "self", on_delete=models.SET_NULL, null=True, blank=True, related_name="next_versions"
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["title", "version", "id"]

    def __str__(self) -> str:
        return f"{self.title} (v{self.version})"


class Question(models.Model):
    quiz = models.ForeignKey(Quiz, on_delete=models.CASCADE, related_name="questions")
    order = models.PositiveSmallIntegerField(default=0)
    text = models.TextField()
    correct_option = models.PositiveSmallIntegerField()

    class Meta:
        ordering = ["order", "id"]
        constraints = [
            models.UniqueConstraint(fields=["quiz", "order"], name="unique_question_order"),
        ]

    def __str__(self) -> str:
        return f"Q{self.order + 1}: {self.text[:40]}"


class Option(models.Model):
    question = models.ForeignKey(Question, on_delete=models.CASCADE, related_name="options")
    order = models.PositiveSmallIntegerField(default=0)
    text = models.CharField(max_length=500)

    class Meta:
        ordering = ["order", "id"]
        constraints = [
            models.UniqueConstraint(fields=["question", "order"], name="unique_option_order"),
        ]

    def __str__(self) -> str:
        return f"Option {self.order + 1}: {self.text[:40]}"


class AssignmentScope(models.TextChoices):
    COURSE = "course", "Course"
    ROSTER = "roster", "Students"


class Assignment(models.Model):
    """A quiz issued to a course or to an explicit set of students.

    `snapshot` freezes the quiz as it was when assigned:
    {"title", "version", "questions": [{"text", "options", "correct_option"}]}.
    Scoring reads the snapshot, never the live quiz.
    """

    quiz = models.ForeignKey(Quiz, on_delete=models.CASCADE, related_name="assignments")
    scope = models.CharField(max_length=16, choices=AssignmentScope.choices)
    course = models.ForeignKey(Course, on_delete=models.CASCADE, null=True, blank=True, related_name="quiz_assignments")
    students = models.ManyToManyField(settings.AUTH_USER_MODEL, blank=True, related_name="quiz_assignments")
    snapshot = models.JSONField(default=dict)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self) -> str:
        return f"Assignment {self.pk} of quiz {self.quiz_id} ({self.scope})"

    @property
    def title(self) -> str:
        return self.snapshot.get("title", "")

    @property
    def snapshot_questions(self) -> list[dict]:
        return list(self.snapshot.get("questions", []))

    @property
    def question_count(self) -> int:
        return len(self.snapshot_questions)

    @property
    def answer_key(self) -> list[int]:
        return [q["correct_option"] for q in self.snapshot_questions]


class Submission(models.Model):
    assignment = models.ForeignKey(Assignment, on_delete=models.CASCADE, related_name="submissions")
    student = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="quiz_submissions")
    # One int per question; UNANSWERED marks a blank.
    answers = models.JSONField(default=list)
    submitted_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["-submitted_at", "-id"]
        constraints = [
            models.UniqueConstraint(fields=["assignment", "student"], name="unique_submission_per_student"),
        ]

    def __str__(self) -> str:
        return f"Submission by {self.student_id} on {self.assignment_id}"

    @property
    def unanswered_count(self) -> int:
        return sum(1 for a in self.answers if a == UNANSWERED)


class Result(models.Model):
    """Score of a submission, computed once when it is recorded."""

    submission = models.OneToOneField(Submission, on_delete=models.CASCADE, related_name="result")
    score = models.PositiveIntegerField()
    total = models.PositiveIntegerField()
    percentage = models.PositiveSmallIntegerField()
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self) -> str:  # pragma: no cover
        return f"Result {self.score}/{self.total} ({self.percentage}%)"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ResultImmutable()
        return super().save(*args, **kwargs)
