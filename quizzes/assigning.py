"""Issue quizzes to a course or an explicit set of students.

A course-scoped assignment reaches whoever is enrolled when it is read, so
it is valid even while the course is empty. A roster-scoped assignment
must name at least one student, and only users with the student role
qualify.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Union

from django.contrib.auth import get_user_model
from django.db import transaction
from django.db.models import Q

from accounts.models import Role
from courses.models import Course
from courses.utils import enrolled_course_ids, enrolled_student_ids
from .exceptions import AssignmentNotFound, CourseNotFound, EmptyScope, Forbidden, QuizNotFound, StudentNotFound
from .models import Assignment, AssignmentScope, Quiz
from .repository import snapshot_of

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CourseScope:
    course_id: int


@dataclass(frozen=True)
class RosterScope:
    student_ids: frozenset[int] = field(default_factory=frozenset)

    @classmethod
    def of(cls, student_ids: Iterable[int]) -> "RosterScope":
        return cls(frozenset(int(s) for s in student_ids))


Scope = Union[CourseScope, RosterScope]


def scope_from_payload(data: Mapping[str, Any]) -> Scope:
    """`{"course": id}` or `{"students": [ids]}` to a scope value."""
    if data.get("course") is not None:
        return CourseScope(int(data["course"]))
    return RosterScope.of(data.get("students") or ())


@transaction.atomic
def assign(quiz_id: int, scope: Scope, *, assigned_by: int | None = None) -> Assignment:
    """Issue a quiz and freeze its questions and answer key on the assignment."""
    quiz = Quiz.objects.filter(pk=quiz_id).first()
    if quiz is None:
        raise QuizNotFound()
    if assigned_by is not None and quiz.author_id != assigned_by:
        raise Forbidden("Only the author can assign this quiz.")
    if isinstance(scope, RosterScope):
        if not scope.student_ids:
            raise EmptyScope()
        # Only student accounts can be on a roster
        users = list(get_user_model().objects.filter(pk__in=scope.student_ids, profile__role=Role.STUDENT))
        if len(users) != len(scope.student_ids):
            raise StudentNotFound()
        assignment = Assignment.objects.create(quiz=quiz, scope=AssignmentScope.ROSTER, snapshot=snapshot_of(quiz))
        assignment.students.set(users)
    else:
        if not Course.objects.filter(pk=scope.course_id).exists():
            raise CourseNotFound()
        assignment = Assignment.objects.create(
            quiz=quiz, scope=AssignmentScope.COURSE, course_id=scope.course_id, snapshot=snapshot_of(quiz)
        )
    logger.info("Quiz %s assigned as assignment %s (%s)", quiz.pk, assignment.pk, assignment.scope)
    return assignment


def get_assignment(assignment_id: int) -> Assignment:
    assignment = Assignment.objects.filter(pk=assignment_id).select_related("quiz").first()
    if assignment is None:
        raise AssignmentNotFound()
    return assignment


def eligible_student_ids(assignment: Assignment) -> set[int]:
    if assignment.scope == AssignmentScope.COURSE:
        return enrolled_student_ids(assignment.course_id)
    return set(assignment.students.values_list("id", flat=True))


def is_eligible(assignment: Assignment, student_id: int) -> bool:
    if assignment.scope == AssignmentScope.COURSE:
        return student_id in enrolled_student_ids(assignment.course_id)
    return assignment.students.filter(pk=student_id).exists()


def list_for_student(student_id: int) -> list[Assignment]:
    """Assignments reaching a student, newest first.

    Course-scoped assignments are matched against the student's current
    enrolments.
    """
    course_ids = enrolled_course_ids(student_id)
    qs = (
        Assignment.objects.filter(
            Q(scope=AssignmentScope.ROSTER, students__id=student_id)
            | Q(scope=AssignmentScope.COURSE, course_id__in=course_ids)
        )
        .select_related("quiz")
        .distinct()
        .order_by("-created_at", "-id")
    )
    return list(qs)


def list_for_author(author_id: int) -> list[Assignment]:
    return list(Assignment.objects.filter(quiz__author_id=author_id).select_related("quiz").order_by("-created_at", "-id"))
